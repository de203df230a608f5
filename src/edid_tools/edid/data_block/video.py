"""Model class for the video data block."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from .base import DataBlock, Tag

# SVD values 129-192 are VICs 1-64 with the native bit (bit 7) set.
NATIVE_SVD_RANGE = range(129, 193)
NATIVE_FLAG = 0x80


def svd_to_vic(svd: int) -> int:
    """Strip the native flag from a short video descriptor, if the value carries one."""
    return svd - NATIVE_FLAG if svd in NATIVE_SVD_RANGE else svd


# Video data block
# Standards:
#  - CTA-861-G Section 7.5.1 - Video Data Block
# Important notes:
#  - Each payload byte is a short video descriptor (SVD).  For SVD values 129-192, bit 7 flags a
#    native video format and the remaining bits are the VIC.  Values 193 and above are plain VICs.
#  - The SVDs are kept as transmitted so that the native flags are retained.
@dataclass(kw_only=True)
class VideoDataBlock(DataBlock):
    svds: list[int] = field(default_factory=list)

    tag: ClassVar[Tag] = Tag.VIDEO

    @property
    def vics(self) -> list[int]:
        """The VICs of the block, with native flags removed."""
        return [svd_to_vic(svd) for svd in self.svds]

    @property
    def native_vics(self) -> list[int]:
        return [svd_to_vic(svd) for svd in self.svds if svd in NATIVE_SVD_RANGE]

    def validate(self) -> str | None:
        for svd in self.svds:
            if svd < 0 or svd > 0xFF:
                return f"Short video descriptor {svd} does not fit in a byte."
        return None

    @classmethod
    def _do_parse_binary(cls, payload: bytes) -> VideoDataBlock:
        return cls(svds=list(payload))

    def _do_to_binary(self) -> bytes:
        return bytes(self.svds)
