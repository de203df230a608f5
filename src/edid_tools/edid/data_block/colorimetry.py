"""Model class for the colorimetry data block."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag
from typing import ClassVar

from edid_tools.edid.common import InvalidDataBlockLengthError, get_bits, set_bits

from .base import DataBlock, ExtendedTag, Tag

COLORIMETRY_PAYLOAD_SIZE = 3


# Colorimetry standards
# CTA-861-H Table 78 - Colorimetry Data Block
# Bits 0-7 are byte 3 of the block.  Bits 8-11 are bits 4-7 of byte 4.
class Colorimetry(IntFlag):
    XVYCC_601 = 1 << 0
    XVYCC_709 = 1 << 1
    SYCC_601 = 1 << 2
    OPYCC_601 = 1 << 3
    OPRGB = 1 << 4
    BT2020_CYCC = 1 << 5
    BT2020_YCC = 1 << 6
    BT2020_RGB = 1 << 7
    DEFAULT_RGB = 1 << 8
    ST2113_RGB = 1 << 9
    ICTCP = 1 << 10
    DCI_P3 = 1 << 11


# Gamut metadata profiles, bits 0-3 of byte 4
# CTA-861-H Table 78 - Colorimetry Data Block
class GamutMetadataProfile(IntFlag):
    MD0 = 1 << 0
    MD1 = 1 << 1
    MD2 = 1 << 2
    MD3 = 1 << 3


# Colorimetry data block
# Standards:
#  - CTA-861-H Section 7.5.5 - Colorimetry Data Block
@dataclass(frozen=True, kw_only=True)
class ColorimetryDataBlock(DataBlock):
    colorimetry: Colorimetry = Colorimetry(0)
    metadata_profiles: GamutMetadataProfile = GamutMetadataProfile(0)

    tag: ClassVar[Tag] = Tag.EXTENDED
    extended_tag: ClassVar[ExtendedTag] = ExtendedTag.COLORIMETRY

    def validate(self) -> str | None:
        return None

    @classmethod
    def _do_parse_binary(cls, payload: bytes) -> ColorimetryDataBlock:
        assert payload[0] == cls.extended_tag
        if len(payload) != COLORIMETRY_PAYLOAD_SIZE:
            raise InvalidDataBlockLengthError(
                f"Colorimetry data block length {len(payload)} must be {COLORIMETRY_PAYLOAD_SIZE}."
            )
        return cls(
            colorimetry=Colorimetry(payload[1] | get_bits(payload[2], 4, 4) << 8),
            metadata_profiles=GamutMetadataProfile(get_bits(payload[2], 0, 4)),
        )

    def _do_to_binary(self) -> bytes:
        return bytes(
            [
                self.extended_tag,
                get_bits(self.colorimetry, 0, 8),
                set_bits(get_bits(self.colorimetry, 8, 4), 4, 4) | self.metadata_profiles,
            ]
        )
