"""Model class for a complete EDID: the base block followed by its extension blocks."""

from __future__ import annotations

from dataclasses import dataclass, field

from edid_tools.edid.base_block import BaseBlock
from edid_tools.edid.common import (
    BLOCK_SIZE,
    TotalSizeNotBlockMultipleError,
    ValueOutOfRangeError,
)
from edid_tools.edid.cta861_block import Cta861Block

# The extension count is a single byte in the base block.
MAX_EXTENSION_BLOCKS = 0xFF


@dataclass(kw_only=True)
class EdidData:
    base_block: BaseBlock
    extension_blocks: list[Cta861Block] = field(default_factory=list)

    @classmethod
    def parse_binary(cls, edid_bytes: bytes) -> EdidData:
        """Parse a complete binary EDID.

        The base block announces how many extension blocks follow it.  Only CTA-861 extension
        blocks are supported.
        """
        if len(edid_bytes) == 0 or len(edid_bytes) % BLOCK_SIZE != 0:
            raise TotalSizeNotBlockMultipleError(
                f"EDID length of {len(edid_bytes)} bytes is not a positive multiple of "
                f"{BLOCK_SIZE} bytes."
            )
        base_block, extension_count = BaseBlock.parse_binary(edid_bytes[0:BLOCK_SIZE])
        if len(edid_bytes) < (1 + extension_count) * BLOCK_SIZE:
            raise TotalSizeNotBlockMultipleError(
                f"EDID base block announces {extension_count} extension blocks, but only "
                f"{len(edid_bytes) // BLOCK_SIZE - 1} are present."
            )
        return cls(
            base_block=base_block,
            extension_blocks=[
                Cta861Block.parse_binary(
                    edid_bytes[index * BLOCK_SIZE : (index + 1) * BLOCK_SIZE]
                )
                for index in range(1, extension_count + 1)
            ],
        )

    def to_binary(self) -> bytes:
        """Convert the EDID to binary, with the extension count taken from the extension list."""
        if len(self.extension_blocks) > MAX_EXTENSION_BLOCKS:
            raise ValueOutOfRangeError(
                f"{len(self.extension_blocks)} extension blocks is more than the maximum of "
                f"{MAX_EXTENSION_BLOCKS}."
            )
        return self.base_block.to_binary(len(self.extension_blocks)) + b"".join(
            block.to_binary() for block in self.extension_blocks
        )


def parse_binary(edid_bytes: bytes) -> EdidData:
    return EdidData.parse_binary(edid_bytes)


def to_binary(edid: EdidData) -> bytes:
    return edid.to_binary()
