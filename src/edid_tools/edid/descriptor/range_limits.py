"""Model class for the display range limits descriptor."""

from __future__ import annotations

import ctypes
from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar

from edid_tools.edid.binary_types import _RangeLimitsBinaryFields
from edid_tools.edid.common import ValueOutOfRangeError, to_enum

from .base import DisplayDescriptor, Type

# Line feed followed by spaces: the padding used when no timing formula parameters follow.
STANDARD_TIMING_PARAMETERS = bytes([0x0A, *[0x20] * 6])

# Rates above 255 are transmitted with this offset subtracted.
RATE_OFFSET = 255


# Video timing support flags
# VESA E-EDID Standard Release A2 (EDID 1.4) Table 3.26 - Display Range Limits, byte 10
class VideoTimingSupport(IntEnum):
    DEFAULT_GTF = 0x00
    BARE_LIMITS = 0x01
    SECONDARY_GTF = 0x02
    CVT = 0x04


# Rate offset flags for the horizontal and vertical rate pairs
# VESA E-EDID Standard Release A2 (EDID 1.4) Table 3.26 - Display Range Limits, byte 4
class _RateOffset(IntEnum):
    NONE = 0b00
    MAX = 0b10
    MIN_AND_MAX = 0b11


def _decode_rates(offsets: int, min_rate: int, max_rate: int, name: str) -> tuple[int, int]:
    match to_enum(_RateOffset, offsets, f"display range limits {name} rate offset"):
        case _RateOffset.MAX:
            min_offset, max_offset = 0, RATE_OFFSET
        case _RateOffset.MIN_AND_MAX:
            min_offset, max_offset = RATE_OFFSET, RATE_OFFSET
        case _:
            min_offset, max_offset = 0, 0
    # A rate of exactly 255 is written without an offset.
    if (min_offset and min_rate == 0) or (max_offset and max_rate == 0):
        raise ValueOutOfRangeError(
            f"Display range limits {name} rate offset is set for a zero rate."
        )
    return min_rate + min_offset, max_rate + max_offset


def _encode_rates(min_rate: int, max_rate: int) -> tuple[_RateOffset, int, int]:
    if min_rate > RATE_OFFSET and max_rate > RATE_OFFSET:
        return _RateOffset.MIN_AND_MAX, min_rate - RATE_OFFSET, max_rate - RATE_OFFSET
    elif max_rate > RATE_OFFSET:
        return _RateOffset.MAX, min_rate, max_rate - RATE_OFFSET
    return _RateOffset.NONE, min_rate, max_rate


# Display range limits descriptor
# Standards:
#  - VESA E-EDID Standard Release A2 (EDID 1.4) Section 3.10.3.3
#  - VESA E-EDID Standard Release A2 (EDID 1.4) Table 3.26 - Display Range Limits & Additional
#    Timing Descriptor Block Definition
# Important notes:
#  - Each of the four rates is transmitted as a single byte.  Rates above 255 have 255 subtracted,
#    and the flags in byte 4 record which rates were adjusted.  The reserved offset pattern 0b01,
#    and the reserved upper bits of byte 4, are rejected when parsing.
#  - Bytes 11-17 hold secondary GTF or CVT parameters.  When they are absent, the bytes are a line
#    feed followed by spaces, and timing_parameters is None.
@dataclass(frozen=True, kw_only=True)
class DisplayRangeLimits(DisplayDescriptor):
    min_v_rate_hz: int
    max_v_rate_hz: int
    min_h_rate_khz: int
    max_h_rate_khz: int
    max_pixel_clock_rate_mhz: int
    video_timing_support: VideoTimingSupport
    timing_parameters: bytes | None = None

    def validate(self) -> str | None:
        for name, value in [
            ("minimum vertical rate", self.min_v_rate_hz),
            ("maximum vertical rate", self.max_v_rate_hz),
            ("minimum horizontal rate", self.min_h_rate_khz),
            ("maximum horizontal rate", self.max_h_rate_khz),
        ]:
            if value < 1 or value > 2 * RATE_OFFSET:
                return f"Display range limits {name} of {value} is outside of 1 to 510."
        if self.min_v_rate_hz > RATE_OFFSET and self.max_v_rate_hz <= RATE_OFFSET:
            return "Display range limits minimum vertical rate exceeds the maximum."
        if self.min_h_rate_khz > RATE_OFFSET and self.max_h_rate_khz <= RATE_OFFSET:
            return "Display range limits minimum horizontal rate exceeds the maximum."
        if (
            self.max_pixel_clock_rate_mhz < 10
            or self.max_pixel_clock_rate_mhz > 2550
            or self.max_pixel_clock_rate_mhz % 10 != 0
        ):
            return (
                f"Display range limits maximum pixel clock of {self.max_pixel_clock_rate_mhz} MHz "
                "must be a multiple of 10 between 10 and 2550."
            )
        if self.timing_parameters is not None and len(self.timing_parameters) != 7:
            return "Display range limits timing parameters must be exactly 7 bytes."
        return None

    descriptor_type: ClassVar[Type] = Type.DISPLAY_RANGE_LIMITS

    @classmethod
    def _do_parse_binary(cls, descriptor_bytes: bytes) -> DisplayRangeLimits:
        bin = _RangeLimitsBinaryFields.from_buffer_copy(descriptor_bytes)
        if bin.reserved != 0:
            raise ValueOutOfRangeError(
                f"Display range limits reserved flags 0x{bin.reserved:X} must be zero."
            )
        min_v_rate, max_v_rate = _decode_rates(
            bin.v_rate_offsets, bin.min_v_rate, bin.max_v_rate, "vertical"
        )
        min_h_rate, max_h_rate = _decode_rates(
            bin.h_rate_offsets, bin.min_h_rate, bin.max_h_rate, "horizontal"
        )
        timing_parameters = bytes(bin.timing_parameters)
        return cls(
            min_v_rate_hz=min_v_rate,
            max_v_rate_hz=max_v_rate,
            min_h_rate_khz=min_h_rate,
            max_h_rate_khz=max_h_rate,
            max_pixel_clock_rate_mhz=bin.max_pixel_clock * 10,
            video_timing_support=to_enum(
                VideoTimingSupport, bin.video_timing_support, "video timing support"
            ),
            timing_parameters=(
                timing_parameters if timing_parameters != STANDARD_TIMING_PARAMETERS else None
            ),
        )

    def _do_to_binary(self) -> bytes:
        v_rate_offsets, min_v_rate, max_v_rate = _encode_rates(
            self.min_v_rate_hz, self.max_v_rate_hz
        )
        h_rate_offsets, min_h_rate, max_h_rate = _encode_rates(
            self.min_h_rate_khz, self.max_h_rate_khz
        )
        bin = _RangeLimitsBinaryFields(
            type=self.descriptor_type,
            h_rate_offsets=h_rate_offsets,
            v_rate_offsets=v_rate_offsets,
            min_v_rate=min_v_rate,
            max_v_rate=max_v_rate,
            min_h_rate=min_h_rate,
            max_h_rate=max_h_rate,
            max_pixel_clock=self.max_pixel_clock_rate_mhz // 10,
            video_timing_support=self.video_timing_support,
            timing_parameters=(ctypes.c_uint8 * 7)(
                *(
                    self.timing_parameters
                    if self.timing_parameters is not None
                    else STANDARD_TIMING_PARAMETERS
                )
            ),
        )
        return bytes(bin)
