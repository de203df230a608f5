"""Model classes for detailed timing descriptors."""

from __future__ import annotations

import ctypes
from dataclasses import dataclass
from enum import IntEnum

from edid_tools.edid.binary_types import _DetailedTimingBinaryFields

from .base import Descriptor

# Pixel clock is transmitted in units of 10 kHz.
PIXEL_CLOCK_UNIT_HZ = 10_000


# Stereo viewing support
# VESA E-EDID Standard Release A2 (EDID 1.4) Table 3.22 - Detailed Timing Definition, bits 6, 5, 0
# The value is the concatenation of bits 6 and 5 with bit 0 as the least significant bit.
class StereoMode(IntEnum):
    NO_STEREO = 0b000
    # When bits 6 and 5 are both zero, bit 0 is "don't care".  Keep the alternate encoding so that
    # descriptors round trip exactly.
    NO_STEREO_ALTERNATE = 0b001
    FIELD_SEQUENTIAL_L_R = 0b010
    FIELD_SEQUENTIAL_R_L = 0b100
    INTERLEAVED_RIGHT_EVEN = 0b011
    INTERLEAVED_LEFT_EVEN = 0b101
    FOUR_WAY_INTERLEAVED = 0b110
    SIDE_BY_SIDE_INTERLEAVED = 0b111


# Sync signal definitions
# VESA E-EDID Standard Release A2 (EDID 1.4) Table 3.22, bits 4 to 1
@dataclass(frozen=True, kw_only=True)
class AnalogCompositeSync:
    bipolar: bool = False
    serrations: bool = False
    sync_on_rgb_signals: bool = False


@dataclass(frozen=True, kw_only=True)
class DigitalCompositeSync:
    serrations: bool = False
    h_sync_polarity: bool = False


@dataclass(frozen=True, kw_only=True)
class DigitalSeparateSync:
    v_sync_polarity: bool = False
    h_sync_polarity: bool = False


Sync = AnalogCompositeSync | DigitalCompositeSync | DigitalSeparateSync


@dataclass(frozen=True, kw_only=True)
class FeaturesBitmap:
    interlaced: bool = False
    stereo_mode: StereoMode = StereoMode.NO_STEREO
    sync: Sync = DigitalSeparateSync()


# Detailed timing descriptor
# Standards:
#  - VESA E-EDID Standard Release A2 (EDID 1.4) Section 3.10.2 - Detailed Timing Descriptor
#  - VESA E-EDID Standard Release A2 (EDID 1.4) Table 3.21 - Detailed Timing Definition
#  - CTA-861-G Section 7.5.4 - Detailed Timing Descriptors (same layout inside CTA extensions)
# Important notes:
#  - Most fields are split: the low 8 bits are in one byte and the high bits are packed together
#    with the high bits of a sibling field in a shared byte.
#  - A pixel clock of zero means that the 18 bytes are a display descriptor instead.
@dataclass(frozen=True, kw_only=True)
class DetailedTimingDescriptor(Descriptor):
    pixel_clock_hz: int  # transmitted in 10 kHz units
    h_res: int
    v_res: int  # lines per field for interlaced timings
    h_blanking: int
    v_blanking: int
    h_front_porch: int
    h_sync_width: int
    v_front_porch: int
    v_sync_width: int
    h_image_size: int  # mm
    v_image_size: int  # mm
    h_border: int  # pixels
    v_border: int  # lines
    features: FeaturesBitmap

    def validate(self) -> str | None:
        if self.pixel_clock_hz % PIXEL_CLOCK_UNIT_HZ != 0:
            return f"Pixel clock {self.pixel_clock_hz} Hz is not a multiple of 10 kHz."
        if self.pixel_clock_hz < PIXEL_CLOCK_UNIT_HZ or self.pixel_clock_hz > 0xFFFF * 10_000:
            return f"Pixel clock {self.pixel_clock_hz} Hz is out of range."
        for name, value, bits in [
            ("horizontal resolution", self.h_res, 12),
            ("vertical resolution", self.v_res, 12),
            ("horizontal blanking", self.h_blanking, 12),
            ("vertical blanking", self.v_blanking, 12),
            ("horizontal front porch", self.h_front_porch, 10),
            ("horizontal sync width", self.h_sync_width, 10),
            ("vertical front porch", self.v_front_porch, 6),
            ("vertical sync width", self.v_sync_width, 6),
            ("horizontal image size", self.h_image_size, 12),
            ("vertical image size", self.v_image_size, 12),
            ("horizontal border", self.h_border, 8),
            ("vertical border", self.v_border, 8),
        ]:
            if value < 0 or value >= (1 << bits):
                return f"Detailed timing {name} of {value} does not fit in {bits} bits."
        return None

    @classmethod
    def _do_parse_binary(cls, descriptor_bytes: bytes) -> DetailedTimingDescriptor:
        bin = _DetailedTimingBinaryFields.from_buffer_copy(descriptor_bytes)

        sync: Sync
        if not bin.digital_sync:
            sync = AnalogCompositeSync(
                bipolar=bool(bin.sync_bit_3),
                serrations=bool(bin.sync_bit_2),
                sync_on_rgb_signals=bool(bin.sync_bit_1),
            )
        elif not bin.sync_bit_3:
            sync = DigitalCompositeSync(
                serrations=bool(bin.sync_bit_2),
                h_sync_polarity=bool(bin.sync_bit_1),
            )
        else:
            sync = DigitalSeparateSync(
                v_sync_polarity=bool(bin.sync_bit_2),
                h_sync_polarity=bool(bin.sync_bit_1),
            )

        return cls(
            pixel_clock_hz=int.from_bytes(bytes(bin.pixel_clock), byteorder="little")
            * PIXEL_CLOCK_UNIT_HZ,
            h_res=bin.h_active_msb << 8 | bin.h_active_lsb,
            v_res=bin.v_active_msb << 8 | bin.v_active_lsb,
            h_blanking=bin.h_blanking_msb << 8 | bin.h_blanking_lsb,
            v_blanking=bin.v_blanking_msb << 8 | bin.v_blanking_lsb,
            h_front_porch=bin.h_front_porch_msb << 8 | bin.h_front_porch_lsb,
            h_sync_width=bin.h_sync_width_msb << 8 | bin.h_sync_width_lsb,
            v_front_porch=bin.v_front_porch_msb << 4 | bin.v_front_porch_lsb,
            v_sync_width=bin.v_sync_width_msb << 4 | bin.v_sync_width_lsb,
            h_image_size=bin.h_image_size_msb << 8 | bin.h_image_size_lsb,
            v_image_size=bin.v_image_size_msb << 8 | bin.v_image_size_lsb,
            h_border=bin.h_border,
            v_border=bin.v_border,
            features=FeaturesBitmap(
                interlaced=bool(bin.interlaced),
                stereo_mode=StereoMode(bin.stereo_msb << 1 | bin.stereo_lsb),
                sync=sync,
            ),
        )

    def _do_to_binary(self) -> bytes:
        match self.features.sync:
            case AnalogCompositeSync() as analog:
                digital_sync = 0
                sync_bits = (analog.bipolar, analog.serrations, analog.sync_on_rgb_signals)
            case DigitalCompositeSync() as composite:
                digital_sync = 1
                sync_bits = (False, composite.serrations, composite.h_sync_polarity)
            case DigitalSeparateSync() as separate:
                digital_sync = 1
                sync_bits = (True, separate.v_sync_polarity, separate.h_sync_polarity)
            case _:
                assert False

        bin = _DetailedTimingBinaryFields(
            pixel_clock=(ctypes.c_uint8 * 2)(
                *(self.pixel_clock_hz // PIXEL_CLOCK_UNIT_HZ).to_bytes(2, byteorder="little")
            ),
            h_active_lsb=self.h_res & 0xFF,
            h_blanking_lsb=self.h_blanking & 0xFF,
            h_active_msb=self.h_res >> 8,
            h_blanking_msb=self.h_blanking >> 8,
            v_active_lsb=self.v_res & 0xFF,
            v_blanking_lsb=self.v_blanking & 0xFF,
            v_active_msb=self.v_res >> 8,
            v_blanking_msb=self.v_blanking >> 8,
            h_front_porch_lsb=self.h_front_porch & 0xFF,
            h_sync_width_lsb=self.h_sync_width & 0xFF,
            v_front_porch_lsb=self.v_front_porch & 0xF,
            v_sync_width_lsb=self.v_sync_width & 0xF,
            h_front_porch_msb=self.h_front_porch >> 8,
            h_sync_width_msb=self.h_sync_width >> 8,
            v_front_porch_msb=self.v_front_porch >> 4,
            v_sync_width_msb=self.v_sync_width >> 4,
            h_image_size_lsb=self.h_image_size & 0xFF,
            v_image_size_lsb=self.v_image_size & 0xFF,
            h_image_size_msb=self.h_image_size >> 8,
            v_image_size_msb=self.v_image_size >> 8,
            h_border=self.h_border,
            v_border=self.v_border,
            interlaced=1 if self.features.interlaced else 0,
            stereo_msb=self.features.stereo_mode >> 1,
            digital_sync=digital_sync,
            sync_bit_3=1 if sync_bits[0] else 0,
            sync_bit_2=1 if sync_bits[1] else 0,
            sync_bit_1=1 if sync_bits[2] else 0,
            stereo_lsb=self.features.stereo_mode & 0x1,
        )
        return bytes(bin)
