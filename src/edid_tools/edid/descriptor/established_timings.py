"""Model class for the established timings III descriptor."""

from __future__ import annotations

import ctypes
from dataclasses import dataclass
from enum import IntFlag
from typing import ClassVar

from edid_tools.edid.binary_types import _EstablishedTimings3BinaryFields

from .base import DisplayDescriptor, Type

# Revision number of the descriptor layout in byte 5.
ESTABLISHED_TIMINGS_III_REVISION = 0x0A


# Established timings III, one enumeration per descriptor byte
# VESA E-EDID Standard Release A2 (EDID 1.4) Table 3.29 - Established Timings III
# Names are [h_res]x[v_res]_[v_rate], with an _RB suffix for reduced blanking timings.
class EstablishedTimings3Byte6(IntFlag):
    ET_640x350_85 = 1 << 7
    ET_640x400_85 = 1 << 6
    ET_720x400_85 = 1 << 5
    ET_640x480_85 = 1 << 4
    ET_848x480_60 = 1 << 3
    ET_800x600_85 = 1 << 2
    ET_1024x768_85 = 1 << 1
    ET_1152x864_75 = 1 << 0


class EstablishedTimings3Byte7(IntFlag):
    ET_1280x768_60_RB = 1 << 7
    ET_1280x768_60 = 1 << 6
    ET_1280x768_75 = 1 << 5
    ET_1280x768_85 = 1 << 4
    ET_1280x960_60 = 1 << 3
    ET_1280x960_85 = 1 << 2
    ET_1280x1024_60 = 1 << 1
    ET_1280x1024_85 = 1 << 0


class EstablishedTimings3Byte8(IntFlag):
    ET_1360x768_60 = 1 << 7
    ET_1440x900_60_RB = 1 << 6
    ET_1440x900_60 = 1 << 5
    ET_1440x900_75 = 1 << 4
    ET_1440x900_85 = 1 << 3
    ET_1400x1050_60_RB = 1 << 2
    ET_1400x1050_60 = 1 << 1
    ET_1400x1050_75 = 1 << 0


class EstablishedTimings3Byte9(IntFlag):
    ET_1400x1050_85 = 1 << 7
    ET_1680x1050_60_RB = 1 << 6
    ET_1680x1050_60 = 1 << 5
    ET_1680x1050_75 = 1 << 4
    ET_1680x1050_85 = 1 << 3
    ET_1600x1200_60 = 1 << 2
    ET_1600x1200_65 = 1 << 1
    ET_1600x1200_70 = 1 << 0


class EstablishedTimings3Byte10(IntFlag):
    ET_1600x1200_75 = 1 << 7
    ET_1600x1200_85 = 1 << 6
    ET_1792x1344_60 = 1 << 5
    ET_1792x1344_75 = 1 << 4
    ET_1856x1392_60 = 1 << 3
    ET_1856x1392_75 = 1 << 2
    ET_1920x1200_60_RB = 1 << 1
    ET_1920x1200_60 = 1 << 0


class EstablishedTimings3Byte11(IntFlag):
    ET_1920x1200_75 = 1 << 7
    ET_1920x1200_85 = 1 << 6
    ET_1920x1440_60 = 1 << 5
    ET_1920x1440_75 = 1 << 4
    # Bits 3-0 are reserved.
    RESERVED_3 = 1 << 3
    RESERVED_2 = 1 << 2
    RESERVED_1 = 1 << 1
    RESERVED_0 = 1 << 0


# Per-byte enumerations, in descriptor byte order (bytes 6 to 11).
ESTABLISHED_TIMINGS_3_BYTES: tuple[type[IntFlag], ...] = (
    EstablishedTimings3Byte6,
    EstablishedTimings3Byte7,
    EstablishedTimings3Byte8,
    EstablishedTimings3Byte9,
    EstablishedTimings3Byte10,
    EstablishedTimings3Byte11,
)


# Established timings III descriptor
# Standards:
#  - VESA E-EDID Standard Release A2 (EDID 1.4) Section 3.10.3.9
# Important notes:
#  - The six timing bytes are independent bitmasks with their own tables.  An empty bitmask is a
#    genuine value (no timings supported), not an absent one.
@dataclass(frozen=True, kw_only=True)
class EstablishedTimings3(DisplayDescriptor):
    byte_6: EstablishedTimings3Byte6 = EstablishedTimings3Byte6(0)
    byte_7: EstablishedTimings3Byte7 = EstablishedTimings3Byte7(0)
    byte_8: EstablishedTimings3Byte8 = EstablishedTimings3Byte8(0)
    byte_9: EstablishedTimings3Byte9 = EstablishedTimings3Byte9(0)
    byte_10: EstablishedTimings3Byte10 = EstablishedTimings3Byte10(0)
    byte_11: EstablishedTimings3Byte11 = EstablishedTimings3Byte11(0)
    revision: int = ESTABLISHED_TIMINGS_III_REVISION

    def validate(self) -> str | None:
        if self.revision < 0 or self.revision > 0xFF:
            return f"Established timings III revision {self.revision} does not fit in a byte."
        return None

    def timing_bytes(self) -> tuple[IntFlag, ...]:
        return (self.byte_6, self.byte_7, self.byte_8, self.byte_9, self.byte_10, self.byte_11)

    descriptor_type: ClassVar[Type] = Type.ESTABLISHED_TIMINGS_III

    @classmethod
    def _do_parse_binary(cls, descriptor_bytes: bytes) -> EstablishedTimings3:
        bin = _EstablishedTimings3BinaryFields.from_buffer_copy(descriptor_bytes)
        return cls(
            byte_6=EstablishedTimings3Byte6(bin.timings[0]),
            byte_7=EstablishedTimings3Byte7(bin.timings[1]),
            byte_8=EstablishedTimings3Byte8(bin.timings[2]),
            byte_9=EstablishedTimings3Byte9(bin.timings[3]),
            byte_10=EstablishedTimings3Byte10(bin.timings[4]),
            byte_11=EstablishedTimings3Byte11(bin.timings[5]),
            revision=bin.revision,
        )

    def _do_to_binary(self) -> bytes:
        bin = _EstablishedTimings3BinaryFields(
            type=self.descriptor_type,
            revision=self.revision,
            timings=(ctypes.c_uint8 * 6)(*[int(b) for b in self.timing_bytes()]),
        )
        return bytes(bin)
