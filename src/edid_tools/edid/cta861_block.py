"""Model class for the CTA-861 extension block."""

from __future__ import annotations

from dataclasses import dataclass, field

import edid_tools.edid.data_block as data_block
from edid_tools.edid.binary_types import _Cta861HeaderBinaryFields
from edid_tools.edid.common import (
    BLOCK_SIZE,
    DESCRIPTOR_SIZE,
    MalformedHeaderError,
    SizeOverflowError,
    ValueOutOfRangeError,
    checksum,
    validate_checksum,
)
from edid_tools.edid.descriptor import DetailedTimingDescriptor

CTA861_EXTENSION_TAG = 0x02
CTA861_REVISION = 3
HEADER_SIZE = 4

# A DTD offset of zero means that there are neither data blocks nor DTDs.
NO_DTD_OFFSET = 0

# Two zero bytes where the pixel clock of the next DTD would be mark the end of the DTD list.
DTD_END_MARKER = bytes(2)


# CTA-861 extension block
# Standards:
#  - CTA-861-G Section 7.3 - CTA Extension Version 3
#  - CTA-861-G Table 52 - CE Extension Version 3
# Important notes:
#  - Byte 2 is the offset of the first DTD.  The data block collection lies between the header
#    and that offset, and the DTDs follow until the end marker or the checksum byte.
#  - The remaining bytes before the checksum are padded with zeros.
#  - A block without data blocks and DTDs may give either 0 or 4 as the DTD offset.
#    keep_dtd_offset records which one.
@dataclass(kw_only=True)
class Cta861Block:
    underscan: bool = False
    basic_audio: bool = False
    ycbcr_444: bool = False
    ycbcr_422: bool = False
    # Number of DTDs that are native formats, counting from the first DTD of the EDID.
    native_dtds: int = 0
    data_blocks: list[data_block.DataBlock] = field(default_factory=list)
    dtds: list[DetailedTimingDescriptor] = field(default_factory=list)
    # Write DTD offset 4 rather than 0 when there are neither data blocks nor DTDs.
    keep_dtd_offset: bool = False

    def validate(self) -> str | None:
        if self.native_dtds < 0 or self.native_dtds > 0xF:
            return f"Native DTD count {self.native_dtds} does not fit in 4 bits."
        if self.keep_dtd_offset and (self.data_blocks or self.dtds):
            return "keep_dtd_offset only applies to a block without data blocks and DTDs."
        return None

    @classmethod
    def parse_binary(cls, block_bytes: bytes) -> Cta861Block:
        """Create a new instance of the block by parsing a 128 byte CTA-861 extension block."""
        assert len(block_bytes) == BLOCK_SIZE
        header = _Cta861HeaderBinaryFields.from_buffer_copy(block_bytes[0:HEADER_SIZE])
        if header.tag != CTA861_EXTENSION_TAG:
            raise MalformedHeaderError(
                f"Extension block tag 0x{header.tag:02X} is not the CTA-861 extension tag."
            )
        if header.revision != CTA861_REVISION:
            raise MalformedHeaderError(
                f"CTA-861 extension block revision {header.revision} is not supported."
            )
        validate_checksum(block_bytes, "CTA-861 extension block")

        dtd_offset = header.dtd_offset
        if dtd_offset != NO_DTD_OFFSET and (
            dtd_offset < HEADER_SIZE or dtd_offset > BLOCK_SIZE - 1
        ):
            raise MalformedHeaderError(f"CTA-861 DTD offset {dtd_offset} is out of range.")

        data_blocks: list[data_block.DataBlock] = []
        dtds: list[DetailedTimingDescriptor] = []
        if dtd_offset != NO_DTD_OFFSET:
            data_blocks = data_block.parse_collection(block_bytes[HEADER_SIZE:dtd_offset])
            position = dtd_offset
            while (
                position + DESCRIPTOR_SIZE <= BLOCK_SIZE - 1
                and block_bytes[position : position + 2] != DTD_END_MARKER
            ):
                dtd = DetailedTimingDescriptor.parse_binary(
                    block_bytes[position : position + DESCRIPTOR_SIZE]
                )
                assert isinstance(dtd, DetailedTimingDescriptor)
                dtds.append(dtd)
                position += DESCRIPTOR_SIZE

        return cls(
            underscan=bool(header.underscan),
            basic_audio=bool(header.basic_audio),
            ycbcr_444=bool(header.ycbcr_444),
            ycbcr_422=bool(header.ycbcr_422),
            native_dtds=header.native_dtds,
            data_blocks=data_blocks,
            dtds=dtds,
            keep_dtd_offset=dtd_offset != NO_DTD_OFFSET and not data_blocks and not dtds,
        )

    def to_binary(self) -> bytes:
        """Convert this block to the 128 byte binary format."""
        validation_message = self.validate()
        if validation_message is not None:
            raise ValueOutOfRangeError(validation_message)

        collection = data_block.collection_to_binary(self.data_blocks)
        dtd_bytes = b"".join(dtd.to_binary() for dtd in self.dtds)
        size = HEADER_SIZE + len(collection) + len(dtd_bytes) + 1
        if size > BLOCK_SIZE:
            raise SizeOverflowError(
                f"CTA-861 extension block contents need {size} bytes, but a block is only "
                f"{BLOCK_SIZE} bytes."
            )

        header = _Cta861HeaderBinaryFields(
            tag=CTA861_EXTENSION_TAG,
            revision=CTA861_REVISION,
            dtd_offset=(
                NO_DTD_OFFSET
                if not collection and not dtd_bytes and not self.keep_dtd_offset
                else HEADER_SIZE + len(collection)
            ),
            underscan=1 if self.underscan else 0,
            basic_audio=1 if self.basic_audio else 0,
            ycbcr_444=1 if self.ycbcr_444 else 0,
            ycbcr_422=1 if self.ycbcr_422 else 0,
            native_dtds=self.native_dtds,
        )
        block_bytes = bytearray(bytes(header) + collection + dtd_bytes)
        block_bytes += bytes(BLOCK_SIZE - len(block_bytes))
        block_bytes[BLOCK_SIZE - 1] = checksum(block_bytes)
        return bytes(block_bytes)
