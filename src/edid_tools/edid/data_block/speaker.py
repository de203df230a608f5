"""Model class for the speaker allocation data block."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag
from typing import ClassVar

from edid_tools.edid.common import InvalidDataBlockLengthError

from .base import DataBlock, Tag

SPEAKER_ALLOCATION_PAYLOAD_SIZE = 3


# Speaker allocation, byte 1 of the payload
# CTA-861-G Table 65 - Speaker Allocation Data Block Payload
class Speaker(IntFlag):
    FLW_FRW = 1 << 7
    RLC_RRC = 1 << 6
    FLC_FRC = 1 << 5
    RC = 1 << 4
    RL_RR = 1 << 3
    FC = 1 << 2
    LFE = 1 << 1
    FL_FR = 1 << 0


# Speaker allocation data block
# Standards:
#  - CTA-861-G Section 7.5.3 - Speaker Allocation Data Block
# Important notes:
#  - The payload is always 3 bytes.  Bytes 2 and 3 are reserved in the versions of the standard
#    modelled here.  They are retained as-is so that the block round trips.
@dataclass(frozen=True, kw_only=True)
class SpeakerAllocationDataBlock(DataBlock):
    speaker_allocation: Speaker
    reserved: bytes = bytes(2)

    tag: ClassVar[Tag] = Tag.SPEAKER_ALLOCATION

    def validate(self) -> str | None:
        if len(self.reserved) != SPEAKER_ALLOCATION_PAYLOAD_SIZE - 1:
            return "Speaker allocation reserved bytes must be exactly 2 bytes."
        return None

    @classmethod
    def _do_parse_binary(cls, payload: bytes) -> SpeakerAllocationDataBlock:
        if len(payload) != SPEAKER_ALLOCATION_PAYLOAD_SIZE:
            raise InvalidDataBlockLengthError(
                f"Speaker allocation data block length {len(payload)} must be "
                f"{SPEAKER_ALLOCATION_PAYLOAD_SIZE}."
            )
        return cls(speaker_allocation=Speaker(payload[0]), reserved=payload[1:])

    def _do_to_binary(self) -> bytes:
        return bytes([self.speaker_allocation]) + self.reserved
