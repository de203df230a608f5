from edid_tools.edid.common import ByteReader, InvalidDataBlockLengthError

from .base import HEADER_SIZE, DataBlock, ExtendedTag, Tag, parse_header
from .audio import AudioDataBlock
from .colorimetry import ColorimetryDataBlock
from .hdmi import HDMI_OUI_BYTES, OUI_SIZE, HdmiVendorDataBlock
from .misc import UnknownDataBlock
from .speaker import SpeakerAllocationDataBlock
from .video import VideoDataBlock
from .ycbcr420 import YCbCr420CapabilityMapDataBlock


def parse_binary(block_bytes: bytes) -> DataBlock:
    """Create a new instance of a data block by parsing its header and payload bytes.

    The tag in the header selects the model class.  Vendor-specific blocks are further selected by
    their OUI, and extended blocks by their extended tag.  Anything not otherwise understood is
    returned as an UnknownDataBlock.
    """
    tag, length = parse_header(block_bytes[0])
    assert len(block_bytes) == HEADER_SIZE + length
    payload = block_bytes[HEADER_SIZE:]
    match tag:
        case Tag.AUDIO:
            return AudioDataBlock.parse_binary(block_bytes)
        case Tag.VIDEO:
            return VideoDataBlock.parse_binary(block_bytes)
        case Tag.SPEAKER_ALLOCATION:
            return SpeakerAllocationDataBlock.parse_binary(block_bytes)
        case Tag.VENDOR_SPECIFIC if payload[0:OUI_SIZE] == HDMI_OUI_BYTES:
            return HdmiVendorDataBlock.parse_binary(block_bytes)
        case Tag.EXTENDED:
            if length < 1:
                raise InvalidDataBlockLengthError("Extended data block has no extended tag.")
            match payload[0]:
                case ExtendedTag.COLORIMETRY:
                    return ColorimetryDataBlock.parse_binary(block_bytes)
                case ExtendedTag.YCBCR420_CAPABILITY_MAP:
                    return YCbCr420CapabilityMapDataBlock.parse_binary(block_bytes)
                case _:
                    return UnknownDataBlock.parse_binary(block_bytes)
        case _:
            return UnknownDataBlock.parse_binary(block_bytes)


def parse_collection(collection_bytes: bytes) -> list[DataBlock]:
    """Parse a data block collection: data blocks one after another until the bytes run out."""
    reader = ByteReader(collection_bytes, InvalidDataBlockLengthError, "Data block collection")
    blocks: list[DataBlock] = []
    while reader.remaining > 0:
        _, length = parse_header(reader.peek_byte())
        blocks.append(parse_binary(reader.read_bytes(HEADER_SIZE + length)))
    return blocks


def collection_to_binary(blocks: list[DataBlock]) -> bytes:
    """Convert a data block collection to binary by concatenating each block."""
    return b"".join(block.to_binary() for block in blocks)
