"""Model classes for the HDMI vendor-specific data block (HDMI VSDB)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from typing import ClassVar

from edid_tools.edid.binary_types import (
    _Hdmi3DEntryBinaryFields,
    _HdmiFlagsBinaryFields,
    _HdmiVideoBinaryFields,
)
from edid_tools.edid.common import (
    ByteReader,
    InvalidDataBlockLengthError,
    InvalidOuiError,
    ValueOutOfRangeError,
    get_bits,
    set_bits,
    to_enum,
)

from .base import MAX_PAYLOAD_LENGTH, DataBlock, Tag

# IEEE OUI of HDMI Licensing, LLC.  It is transmitted least significant byte first.
HDMI_OUI = 0x000C03
OUI_SIZE = 3
HDMI_OUI_BYTES = HDMI_OUI.to_bytes(OUI_SIZE, byteorder="little")

# The maximum TMDS clock is transmitted in units of 5 MHz.
TMDS_CLOCK_UNIT_MHZ = 5

# Declared lengths at which the optional fixed fields start to be present.  The declared length
# includes the OUI.
MIN_LENGTH = 5
CAPABILITIES_LENGTH = 6
MAX_TMDS_CLOCK_LENGTH = 7
FLAGS_LENGTH = 8
# With the flags byte present, any further field is at least two bytes long.
IMPOSSIBLE_LENGTH = 9


# Capabilities, byte 6
# HDMI 1.4b Table 8-16 - HDMI Vendor-Specific Data Block (HDMI VSDB)
class HdmiCapabilities(IntFlag):
    SUPPORTS_AI = 1 << 7
    DC_48BIT = 1 << 6
    DC_36BIT = 1 << 5
    DC_30BIT = 1 << 4
    DC_Y444 = 1 << 3
    RESERVED_2 = 1 << 2
    RESERVED_1 = 1 << 1
    DVI_DUAL = 1 << 0


# Content types, bits 3-0 of byte 8
# HDMI 1.4b Table 8-17 - CNC Bits
class ContentType(IntFlag):
    GAME = 1 << 3
    CINEMA = 1 << 2
    PHOTO = 1 << 1
    GRAPHICS = 1 << 0


# HDMI 1.4b Table 8-18 - Image Size Meaning
class ImageSizeMeaning(IntEnum):
    NO_INFO = 0b00
    ASPECT_RATIO_ONLY = 0b01
    SIZES_ROUNDED_TO_CM = 0b10
    SIZES_DIVIDED_BY_5_CM = 0b11


# 3D_Structure_ALL_15...0: 3D formats supported by all or masked 2D VICs
# HDMI 1.4b Table 8-19 - 3D_Structure_ALL
class StereoVideoFormat(IntFlag):
    SIDE_BY_SIDE_HALF_QUINCUNX = 1 << 15
    SIDE_BY_SIDE_HALF_HORIZONTAL = 1 << 8
    TOP_AND_BOTTOM = 1 << 6
    L_DEPTH_GRAPHICS = 1 << 5
    L_DEPTH = 1 << 4
    SIDE_BY_SIDE_FULL = 1 << 3
    LINE_ALTERNATIVE = 1 << 2
    FIELD_ALTERNATIVE = 1 << 1
    FRAME_PACKING = 1 << 0


# 3D_Structure_X: 3D format supported by a single 2D VIC
# HDMI 1.4b Table 8-21 - 2D_VIC_order_X and 3D_Structure_X
class StereoVideoTransmissionFormat(IntEnum):
    FRAME_PACKING = 0b0000
    FIELD_ALTERNATIVE = 0b0001
    LINE_ALTERNATIVE = 0b0010
    SIDE_BY_SIDE_FULL = 0b0011
    L_DEPTH = 0b0100
    L_DEPTH_GRAPHICS = 0b0101
    TOP_AND_BOTTOM = 0b0110
    SIDE_BY_SIDE_HALF = 0b1000


# Formats from this value up are followed by a 3D_Detail_X byte.
STEREO_DETAIL_THRESHOLD = 0b1000


# 3D_Detail_X: sub-sampling of the side-by-side (half) format
# HDMI 1.4b Table 8-22 - 3D_Detail_X
class StereoVideoSubsampling(IntEnum):
    HORIZONTAL_AND_QUINCUNX = 0b0000
    HORIZONTAL = 0b0001
    QUINCUNX = 0b0110
    ODD_LEFT_ODD_RIGHT = 0b0111
    ODD_LEFT_EVEN_RIGHT = 0b1000
    EVEN_LEFT_ODD_RIGHT = 0b1001
    EVEN_LEFT_EVEN_RIGHT = 0b1010


# 3D_Multi_present field values
class _StereoMultiPresent(IntEnum):
    NONE = 0b00
    STRUCTURE = 0b01
    STRUCTURE_AND_MASK = 0b10


@dataclass(frozen=True, kw_only=True)
class StereoVideoSupport:
    """3D support of the block: the 3D_present flag, and optionally 3D_Structure_ALL/3D_MASK_ALL."""

    formats: StereoVideoFormat | None = None
    # Bit N set means that VIC N of the first 16 SVDs supports the formats.  Only present
    # together with formats.
    vic_mask: int | None = None

    def validate(self) -> str | None:
        if self.vic_mask is not None and self.formats is None:
            return "A 3D VIC mask requires the 3D formats to be present."
        if self.vic_mask is not None and (self.vic_mask < 0 or self.vic_mask > 0xFFFF):
            return f"3D VIC mask {self.vic_mask} does not fit in 16 bits."
        return None

    def size(self) -> int:
        return (2 if self.formats is not None else 0) + (2 if self.vic_mask is not None else 0)


@dataclass(frozen=True, kw_only=True)
class Vic3dSupport:
    """A 2D_VIC_order_X / 3D_Structure_X entry, with its 3D_Detail_X byte where present."""

    vic_index: int  # index into the SVDs, 0-15
    format: StereoVideoTransmissionFormat
    subsampling: StereoVideoSubsampling | None = None

    def validate(self) -> str | None:
        if self.vic_index < 0 or self.vic_index > 0xF:
            return f"3D support VIC index {self.vic_index} must be between 0 and 15."
        if (self.format >= STEREO_DETAIL_THRESHOLD) != (self.subsampling is not None):
            return (
                f"3D format {self.format.name} requires sub-sampling details if, and only if, "
                "it is a side-by-side (half) format."
            )
        return None

    def size(self) -> int:
        return 2 if self.subsampling is not None else 1


# HDMI video sub-block: bytes 13 and onwards of the VSDB, when HDMI_Video_present is set
# HDMI 1.4b Table 8-16 - HDMI Vendor-Specific Data Block (HDMI VSDB)
@dataclass(kw_only=True)
class HdmiVideoSubblock:
    image_size_meaning: ImageSizeMeaning = ImageSizeMeaning.NO_INFO
    hdmi_vics: list[int] = field(default_factory=list)
    stereo_video_support: StereoVideoSupport | None = None
    vic_3d_support: list[Vic3dSupport] = field(default_factory=list)

    def stereo_video_info_size(self) -> int:
        """Size of the 3D fields, as written to HDMI_3D_LEN."""
        result = sum(vic_3d.size() for vic_3d in self.vic_3d_support)
        if self.stereo_video_support is not None:
            result += self.stereo_video_support.size()
        return result

    def size(self) -> int:
        return 2 + len(self.hdmi_vics) + self.stereo_video_info_size()

    def validate(self) -> str | None:
        if len(self.hdmi_vics) > 0b111:
            return f"At most 7 HDMI VICs can be listed, but there are {len(self.hdmi_vics)}."
        for hdmi_vic in self.hdmi_vics:
            if hdmi_vic < 0 or hdmi_vic > 0xFF:
                return f"HDMI VIC {hdmi_vic} does not fit in a byte."
        if self.stereo_video_info_size() > 0b11111:
            return f"3D support fields of {self.stereo_video_info_size()} bytes are too long."
        if self.stereo_video_support is not None:
            validation_message = self.stereo_video_support.validate()
            if validation_message is not None:
                return validation_message
        for vic_3d in self.vic_3d_support:
            validation_message = vic_3d.validate()
            if validation_message is not None:
                return validation_message
        return None

    @classmethod
    def parse_binary(cls, reader: ByteReader) -> HdmiVideoSubblock:
        bin = _HdmiVideoBinaryFields.from_buffer_copy(reader.read_bytes(2))
        multi_present = to_enum(_StereoMultiPresent, bin.stereo_multi_present, "3D_Multi_present")
        if not bin.stereo_present and multi_present != _StereoMultiPresent.NONE:
            raise ValueOutOfRangeError("3D_Multi_present is set without 3D_present.")
        if bin.reserved != 0:
            raise ValueOutOfRangeError("Reserved bits of the HDMI video sub-block must be zero.")

        hdmi_vics = list(reader.read_bytes(bin.hdmi_vic_length))

        stereo_reader = ByteReader(
            reader.read_bytes(bin.hdmi_3d_length), InvalidDataBlockLengthError, "HDMI 3D fields"
        )
        stereo_video_support: StereoVideoSupport | None = None
        if bin.stereo_present:
            formats: StereoVideoFormat | None = None
            vic_mask: int | None = None
            if multi_present != _StereoMultiPresent.NONE:
                formats = StereoVideoFormat(
                    int.from_bytes(stereo_reader.read_bytes(2), byteorder="big")
                )
            if multi_present == _StereoMultiPresent.STRUCTURE_AND_MASK:
                vic_mask = int.from_bytes(stereo_reader.read_bytes(2), byteorder="big")
            stereo_video_support = StereoVideoSupport(formats=formats, vic_mask=vic_mask)

        vic_3d_support: list[Vic3dSupport] = []
        while stereo_reader.remaining > 0:
            entry = _Hdmi3DEntryBinaryFields.from_buffer_copy(bytes([stereo_reader.read_byte()]))
            structure = to_enum(
                StereoVideoTransmissionFormat, entry.structure, "3D_Structure_X"
            )
            subsampling: StereoVideoSubsampling | None = None
            if structure >= STEREO_DETAIL_THRESHOLD:
                detail = stereo_reader.read_byte()
                if get_bits(detail, 0, 4) != 0:
                    raise ValueOutOfRangeError(
                        f"Reserved bits of 3D_Detail_X 0x{detail:02X} must be zero."
                    )
                subsampling = to_enum(StereoVideoSubsampling, get_bits(detail, 4, 4), "3D_Detail_X")
            vic_3d_support.append(
                Vic3dSupport(vic_index=entry.vic_index, format=structure, subsampling=subsampling)
            )

        return cls(
            image_size_meaning=ImageSizeMeaning(bin.image_size),
            hdmi_vics=hdmi_vics,
            stereo_video_support=stereo_video_support,
            vic_3d_support=vic_3d_support,
        )

    def to_binary(self) -> bytes:
        multi_present = _StereoMultiPresent.NONE
        stereo_bytes = b""
        if self.stereo_video_support is not None:
            if self.stereo_video_support.formats is not None:
                multi_present = _StereoMultiPresent.STRUCTURE
                stereo_bytes += self.stereo_video_support.formats.to_bytes(2, byteorder="big")
            if self.stereo_video_support.vic_mask is not None:
                multi_present = _StereoMultiPresent.STRUCTURE_AND_MASK
                stereo_bytes += self.stereo_video_support.vic_mask.to_bytes(2, byteorder="big")
        for vic_3d in self.vic_3d_support:
            stereo_bytes += bytes(
                _Hdmi3DEntryBinaryFields(vic_index=vic_3d.vic_index, structure=vic_3d.format)
            )
            if vic_3d.subsampling is not None:
                stereo_bytes += bytes([set_bits(vic_3d.subsampling, 4, 4)])

        bin = _HdmiVideoBinaryFields(
            stereo_present=1 if self.stereo_video_support is not None else 0,
            stereo_multi_present=multi_present,
            image_size=self.image_size_meaning,
            hdmi_vic_length=len(self.hdmi_vics),
            hdmi_3d_length=len(stereo_bytes),
        )
        return bytes(bin) + bytes(self.hdmi_vics) + stereo_bytes


# HDMI vendor-specific data block
# Standards:
#  - HDMI 1.4b Section 8.3.2 - HDMI Vendor-Specific Data Block (HDMI VSDB)
#  - HDMI 1.4b Table 8-16 - HDMI Vendor-Specific Data Block (HDMI VSDB)
# Important notes:
#  - The presence of the capabilities byte, the maximum TMDS clock and the flags byte is implied
#    by the declared block length.  The presence of the latency pairs and of the video sub-block
#    is flagged in the flags byte.
#  - A later field requires every earlier fixed field to be given.
#  - The declared length must exactly cover the flagged fields.
@dataclass(kw_only=True)
class HdmiVendorDataBlock(DataBlock):
    source_physical_address: tuple[int, int, int, int]
    capabilities: HdmiCapabilities | None = None
    max_tmds_clock_mhz: int | None = None
    content_types: ContentType | None = None
    latency: tuple[int, int] | None = None  # video, audio
    interlaced_latency: tuple[int, int] | None = None  # video, audio
    hdmi_video: HdmiVideoSubblock | None = None

    tag: ClassVar[Tag] = Tag.VENDOR_SPECIFIC

    def _flags_present(self) -> bool:
        return (
            self.content_types is not None
            or self.latency is not None
            or self.interlaced_latency is not None
            or self.hdmi_video is not None
        )

    def payload_size(self) -> int:
        """Size of the payload, including the OUI, as written to the length field."""
        result = MIN_LENGTH
        if self._flags_present():
            result = FLAGS_LENGTH
            if self.latency is not None:
                result += 2
            if self.interlaced_latency is not None:
                result += 2
            if self.hdmi_video is not None:
                result += self.hdmi_video.size()
        elif self.max_tmds_clock_mhz is not None:
            result = MAX_TMDS_CLOCK_LENGTH
        elif self.capabilities is not None:
            result = CAPABILITIES_LENGTH
        return result

    def validate(self) -> str | None:
        if len(self.source_physical_address) != 4 or any(
            nibble < 0 or nibble > 0xF for nibble in self.source_physical_address
        ):
            return f"Source physical address {self.source_physical_address} must be 4 nibbles."
        if self.max_tmds_clock_mhz is not None and (
            self.max_tmds_clock_mhz % TMDS_CLOCK_UNIT_MHZ != 0
            or self.max_tmds_clock_mhz < 0
            or self.max_tmds_clock_mhz > 0xFF * TMDS_CLOCK_UNIT_MHZ
        ):
            return (
                f"Maximum TMDS clock {self.max_tmds_clock_mhz} MHz must be a multiple of "
                f"{TMDS_CLOCK_UNIT_MHZ} MHz no greater than {0xFF * TMDS_CLOCK_UNIT_MHZ} MHz."
            )
        for name, pair in [
            ("latency", self.latency),
            ("interlaced latency", self.interlaced_latency),
        ]:
            if pair is not None and any(value < 0 or value > 0xFF for value in pair):
                return f"The {name} values {pair} do not fit in a byte."
        if self.hdmi_video is not None:
            validation_message = self.hdmi_video.validate()
            if validation_message is not None:
                return validation_message

        later_field_given = (
            self.latency is not None
            or self.interlaced_latency is not None
            or self.hdmi_video is not None
        )
        for name, value in reversed(
            [
                ("capabilities", self.capabilities),
                ("maximum TMDS clock", self.max_tmds_clock_mhz),
                ("content types", self.content_types),
            ]
        ):
            if value is None and later_field_given:
                return f"The HDMI {name} must be given when a later field of the block is given."
            later_field_given = later_field_given or value is not None
        return None

    @classmethod
    def _do_parse_binary(cls, payload: bytes) -> HdmiVendorDataBlock:
        length = len(payload)
        if length < MIN_LENGTH or length == IMPOSSIBLE_LENGTH:
            raise InvalidDataBlockLengthError(
                f"HDMI vendor-specific data block length {length} is invalid: the minimum is "
                f"{MIN_LENGTH}, and {IMPOSSIBLE_LENGTH} is impossible."
            )
        reader = ByteReader(payload, InvalidDataBlockLengthError, "HDMI vendor-specific data block")
        oui = reader.read_bytes(OUI_SIZE)
        if oui != HDMI_OUI_BYTES:
            raise InvalidOuiError(
                f"Vendor-specific data block OUI {oui.hex(' ').upper()} is not the HDMI OUI."
            )

        address = reader.read_bytes(2)
        block = cls(
            source_physical_address=(
                get_bits(address[0], 4, 4),
                get_bits(address[0], 0, 4),
                get_bits(address[1], 4, 4),
                get_bits(address[1], 0, 4),
            )
        )
        if length >= CAPABILITIES_LENGTH:
            block.capabilities = HdmiCapabilities(reader.read_byte())
        if length >= MAX_TMDS_CLOCK_LENGTH:
            block.max_tmds_clock_mhz = reader.read_byte() * TMDS_CLOCK_UNIT_MHZ
        if length >= FLAGS_LENGTH:
            flags = _HdmiFlagsBinaryFields.from_buffer_copy(bytes([reader.read_byte()]))
            if flags.reserved != 0:
                raise ValueOutOfRangeError("Reserved bit of the HDMI flags byte must be zero.")
            block.content_types = ContentType(flags.content_types)
            if flags.latency_present:
                latency = reader.read_bytes(2)
                block.latency = (latency[0], latency[1])
            if flags.interlaced_latency_present:
                interlaced_latency = reader.read_bytes(2)
                block.interlaced_latency = (interlaced_latency[0], interlaced_latency[1])
            if flags.hdmi_video_present:
                block.hdmi_video = HdmiVideoSubblock.parse_binary(reader)

        if reader.remaining != 0:
            raise InvalidDataBlockLengthError(
                f"HDMI vendor-specific data block length {length} is longer than its "
                f"{length - reader.remaining} bytes of flagged fields."
            )
        return block

    def _do_to_binary(self) -> bytes:
        payload_size = self.payload_size()
        if payload_size > MAX_PAYLOAD_LENGTH:
            raise InvalidDataBlockLengthError(
                f"HDMI vendor-specific data block payload of {payload_size} bytes is longer than "
                f"the maximum of {MAX_PAYLOAD_LENGTH} bytes."
            )

        pa = self.source_physical_address
        b = bytearray(HDMI_OUI_BYTES)
        b += bytes([set_bits(pa[0], 4, 4) | pa[1], set_bits(pa[2], 4, 4) | pa[3]])
        if payload_size >= CAPABILITIES_LENGTH:
            assert self.capabilities is not None
            b.append(self.capabilities)
        if payload_size >= MAX_TMDS_CLOCK_LENGTH:
            assert self.max_tmds_clock_mhz is not None
            b.append(self.max_tmds_clock_mhz // TMDS_CLOCK_UNIT_MHZ)
        if payload_size >= FLAGS_LENGTH:
            assert self.content_types is not None
            flags = _HdmiFlagsBinaryFields(
                latency_present=1 if self.latency is not None else 0,
                interlaced_latency_present=1 if self.interlaced_latency is not None else 0,
                hdmi_video_present=1 if self.hdmi_video is not None else 0,
                content_types=self.content_types,
            )
            b += bytes(flags)
            if self.latency is not None:
                b += bytes(self.latency)
            if self.interlaced_latency is not None:
                b += bytes(self.interlaced_latency)
            if self.hdmi_video is not None:
                b += self.hdmi_video.to_binary()

        assert len(b) == payload_size
        return bytes(b)
