"""Model class for the YCbCr 4:2:0 capability map data block."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from edid_tools.edid.common import bits_to_indices, indices_to_bits

from .base import DataBlock, ExtendedTag, Tag


# YCbCr 4:2:0 capability map data block
# Standards:
#  - CTA-861-G Section 7.5.11 - YCbCr 4:2:0 Capability Map Data Block
# Important notes:
#  - Bit 0 of the first byte after the extended tag refers to the first SVD of the video data
#    blocks, bit 1 to the second SVD, and so on.  The indices here are 1-based SVD positions.
#  - The bitmap is as long as needed to hold the highest index, so trailing zero bytes are not
#    retained.  An empty map means that all SVDs support 4:2:0 sampling.
@dataclass(frozen=True, kw_only=True)
class YCbCr420CapabilityMapDataBlock(DataBlock):
    svd_indices: frozenset[int] = field(default_factory=frozenset)

    tag: ClassVar[Tag] = Tag.EXTENDED
    extended_tag: ClassVar[ExtendedTag] = ExtendedTag.YCBCR420_CAPABILITY_MAP

    def validate(self) -> str | None:
        for index in self.svd_indices:
            if index < 1:
                return f"YCbCr 4:2:0 capability map SVD index {index} must be at least 1."
        return None

    @classmethod
    def _do_parse_binary(cls, payload: bytes) -> YCbCr420CapabilityMapDataBlock:
        assert payload[0] == cls.extended_tag
        return cls(svd_indices=frozenset(index + 1 for index in bits_to_indices(payload[1:])))

    def _do_to_binary(self) -> bytes:
        bitmap = indices_to_bits({index - 1 for index in self.svd_indices})
        return bytes([self.extended_tag]) + bitmap
