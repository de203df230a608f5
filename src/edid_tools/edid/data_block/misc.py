"""Model class for data blocks that are not otherwise understood."""

from __future__ import annotations

from dataclasses import dataclass

from .base import DataBlock, Tag


# Unknown data block
# Important notes:
#  - Used for any tag, extended tag or vendor OUI without a dedicated model class.  The block is
#    kept verbatim so that it is written back exactly as it was read.
#  - For blocks with the extended tag, the extended tag is split out of the payload.
@dataclass(frozen=True, kw_only=True)
class UnknownDataBlock(DataBlock):
    data_block_tag: int
    extended_tag: int | None = None
    payload: bytes = b""

    def header_tag(self) -> int:
        return self.data_block_tag

    def validate(self) -> str | None:
        if self.data_block_tag < 0 or self.data_block_tag > 0b111:
            return f"Data block tag {self.data_block_tag} does not fit in 3 bits."
        if (self.data_block_tag == Tag.EXTENDED) != (self.extended_tag is not None):
            return "An extended tag must be given if, and only if, the block has the extended tag."
        if self.extended_tag is not None and (self.extended_tag < 0 or self.extended_tag > 0xFF):
            return f"Extended tag {self.extended_tag} does not fit in a byte."
        return None

    @classmethod
    def parse_binary(cls, block_bytes: bytes) -> UnknownDataBlock:
        tag = block_bytes[0] >> 5
        if tag == Tag.EXTENDED:
            return cls(data_block_tag=tag, extended_tag=block_bytes[1], payload=block_bytes[2:])
        return cls(data_block_tag=tag, payload=block_bytes[1:])

    @classmethod
    def _do_parse_binary(cls, payload: bytes) -> UnknownDataBlock:
        # The tag is part of the model, so parsing starts from the header in parse_binary.
        assert False

    def _do_to_binary(self) -> bytes:
        if self.extended_tag is not None:
            return bytes([self.extended_tag]) + self.payload
        return self.payload
