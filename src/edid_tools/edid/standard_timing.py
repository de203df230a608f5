"""Model class for the standard timings of the EDID base block."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from fractions import Fraction

from edid_tools.edid.binary_types import _StandardTimingBinaryFields
from edid_tools.edid.common import ValueOutOfRangeError

# Byte pair used for a standard timing slot that is not in use.
UNUSED_STANDARD_TIMING = bytes([0x01, 0x01])

# Both fields are transmitted with an offset.
X_RESOLUTION_OFFSET = 31
V_FREQUENCY_OFFSET = 60


# Image aspect ratio
# VESA E-EDID Standard Release A2 (EDID 1.4) Table 3.19 - Standard Timings, byte 2 bits 7-6
# Note that EDID structures prior to version 1.3 defined 0b00 as 1:1 instead of 16:10.
class AspectRatio(IntEnum):
    AR_16_10 = 0b00
    AR_4_3 = 0b01
    AR_5_4 = 0b10
    AR_16_9 = 0b11

    @property
    def ratio(self) -> Fraction:
        match self:
            case AspectRatio.AR_16_10:
                return Fraction(16, 10)
            case AspectRatio.AR_4_3:
                return Fraction(4, 3)
            case AspectRatio.AR_5_4:
                return Fraction(5, 4)
            case AspectRatio.AR_16_9:
                return Fraction(16, 9)
            case _:
                assert False


# Standard timing
# Standards:
#  - VESA E-EDID Standard Release A2 (EDID 1.4) Section 3.9 - Standard Timings
# Important notes:
#  - The horizontal addressable pixel count is (byte 1 + 31) * 8.  The vertical count is implied
#    by the aspect ratio.
#  - The refresh rate is byte 2 bits 5-0 plus 60.
#  - The byte pair 0x01 0x01 marks an unused slot.
@dataclass(frozen=True, kw_only=True)
class StandardTiming:
    x_resolution: int
    aspect_ratio: AspectRatio
    v_frequency: int

    def validate(self) -> str | None:
        if (
            self.x_resolution % 8 != 0
            or self.x_resolution // 8 - X_RESOLUTION_OFFSET < 0
            or self.x_resolution // 8 - X_RESOLUTION_OFFSET > 0xFF
        ):
            return (
                f"Standard timing horizontal resolution {self.x_resolution} must be a multiple of "
                "8 between 248 and 2288."
            )
        if self.v_frequency < V_FREQUENCY_OFFSET or self.v_frequency > V_FREQUENCY_OFFSET + 0x3F:
            return f"Standard timing refresh rate {self.v_frequency} must be between 60 and 123."
        if (
            self.x_resolution == (UNUSED_STANDARD_TIMING[0] + X_RESOLUTION_OFFSET) * 8
            and self.aspect_ratio == AspectRatio.AR_16_10
            and self.v_frequency == UNUSED_STANDARD_TIMING[1] + V_FREQUENCY_OFFSET
        ):
            return "Standard timing 256x160@61 cannot be distinguished from an unused slot."
        return None

    @property
    def y_resolution(self) -> int:
        return int(self.x_resolution / self.aspect_ratio.ratio)

    @classmethod
    def parse_binary(cls, timing_bytes: bytes) -> StandardTiming | None:
        """Parse a standard timing byte pair; an unused slot results in None."""
        assert len(timing_bytes) == 2
        if timing_bytes == UNUSED_STANDARD_TIMING:
            return None
        bin = _StandardTimingBinaryFields.from_buffer_copy(timing_bytes)
        return cls(
            x_resolution=(bin.x_resolution + X_RESOLUTION_OFFSET) * 8,
            aspect_ratio=AspectRatio(bin.aspect_ratio),
            v_frequency=bin.v_frequency + V_FREQUENCY_OFFSET,
        )

    def to_binary(self) -> bytes:
        validation_message = self.validate()
        if validation_message is not None:
            raise ValueOutOfRangeError(validation_message)
        bin = _StandardTimingBinaryFields(
            x_resolution=self.x_resolution // 8 - X_RESOLUTION_OFFSET,
            aspect_ratio=self.aspect_ratio,
            v_frequency=self.v_frequency - V_FREQUENCY_OFFSET,
        )
        return bytes(bin)


def to_binary(timing: StandardTiming | None) -> bytes:
    """Convert an optional standard timing to its byte pair, using 0x01 0x01 for an unused slot."""
    return timing.to_binary() if timing is not None else UNUSED_STANDARD_TIMING
