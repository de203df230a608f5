"""Normalized video timing modes and the static tables that map EDID timing codes to them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag
from fractions import Fraction

import edid_tools.edid.descriptor as descriptor
from edid_tools.edid.base_block import (
    EstablishedTimings1,
    EstablishedTimings2,
    ManufacturerTimings,
)
from edid_tools.edid.descriptor import (
    EstablishedTimings3Byte6,
    EstablishedTimings3Byte7,
    EstablishedTimings3Byte8,
    EstablishedTimings3Byte9,
    EstablishedTimings3Byte10,
    EstablishedTimings3Byte11,
)
from edid_tools.edid.standard_timing import AspectRatio, StandardTiming


@dataclass(frozen=True, kw_only=True)
class VideoTimingMode:
    h_res: int
    v_res: int  # lines per frame, including for interlaced modes
    v_rate: Fraction  # Hz
    interlaced: bool = False

    def __str__(self) -> str:
        rate = (
            str(self.v_rate.numerator)
            if self.v_rate.denominator == 1
            else f"{float(self.v_rate):.3f}"
        )
        return f"{self.h_res}x{self.v_res}{'i' if self.interlaced else 'p'}@{rate}"


def _mode(h_res: int, v_res: int, v_rate: int, interlaced: bool = False) -> VideoTimingMode:
    return VideoTimingMode(h_res=h_res, v_res=v_res, v_rate=Fraction(v_rate), interlaced=interlaced)


# Established timings I & II and the manufacturer's timings
# VESA E-EDID Standard Release A2 (EDID 1.4) Table 3.18 - Established Timings I & II
# Rates are the nominal integer rates from the table.

ESTABLISHED_TIMINGS_1: dict[EstablishedTimings1, VideoTimingMode] = {
    EstablishedTimings1.ET_720x400_70: _mode(720, 400, 70),
    EstablishedTimings1.ET_720x400_88: _mode(720, 400, 88),
    EstablishedTimings1.ET_640x480_60: _mode(640, 480, 60),
    EstablishedTimings1.ET_640x480_67: _mode(640, 480, 67),
    EstablishedTimings1.ET_640x480_72: _mode(640, 480, 72),
    EstablishedTimings1.ET_640x480_75: _mode(640, 480, 75),
    EstablishedTimings1.ET_800x600_56: _mode(800, 600, 56),
    EstablishedTimings1.ET_800x600_60: _mode(800, 600, 60),
}

ESTABLISHED_TIMINGS_2: dict[EstablishedTimings2, VideoTimingMode] = {
    EstablishedTimings2.ET_800x600_72: _mode(800, 600, 72),
    EstablishedTimings2.ET_800x600_75: _mode(800, 600, 75),
    EstablishedTimings2.ET_832x624_75: _mode(832, 624, 75),
    EstablishedTimings2.ET_1024x768_87i: _mode(1024, 768, 87, interlaced=True),
    EstablishedTimings2.ET_1024x768_60: _mode(1024, 768, 60),
    EstablishedTimings2.ET_1024x768_70: _mode(1024, 768, 70),
    EstablishedTimings2.ET_1024x768_75: _mode(1024, 768, 75),
    EstablishedTimings2.ET_1280x1024_75: _mode(1280, 1024, 75),
}

# Bits 6-0 are manufacturer specific and have no known mode.
MANUFACTURER_TIMINGS: dict[ManufacturerTimings, VideoTimingMode] = {
    ManufacturerTimings.ET_1152x870_75: _mode(1152, 870, 75),
}


# Established timings III
# VESA E-EDID Standard Release A2 (EDID 1.4) Table 3.29 - Established Timings III
# One table per descriptor byte, because the six bytes are independent enumerations whose
# bit values overlap.  Reduced blanking timings map to the same mode as their regular sibling.

ESTABLISHED_TIMINGS_3: tuple[dict[IntFlag, VideoTimingMode], ...] = (
    {
        EstablishedTimings3Byte6.ET_640x350_85: _mode(640, 350, 85),
        EstablishedTimings3Byte6.ET_640x400_85: _mode(640, 400, 85),
        EstablishedTimings3Byte6.ET_720x400_85: _mode(720, 400, 85),
        EstablishedTimings3Byte6.ET_640x480_85: _mode(640, 480, 85),
        EstablishedTimings3Byte6.ET_848x480_60: _mode(848, 480, 60),
        EstablishedTimings3Byte6.ET_800x600_85: _mode(800, 600, 85),
        EstablishedTimings3Byte6.ET_1024x768_85: _mode(1024, 768, 85),
        EstablishedTimings3Byte6.ET_1152x864_75: _mode(1152, 864, 75),
    },
    {
        EstablishedTimings3Byte7.ET_1280x768_60_RB: _mode(1280, 768, 60),
        EstablishedTimings3Byte7.ET_1280x768_60: _mode(1280, 768, 60),
        EstablishedTimings3Byte7.ET_1280x768_75: _mode(1280, 768, 75),
        EstablishedTimings3Byte7.ET_1280x768_85: _mode(1280, 768, 85),
        EstablishedTimings3Byte7.ET_1280x960_60: _mode(1280, 960, 60),
        EstablishedTimings3Byte7.ET_1280x960_85: _mode(1280, 960, 85),
        EstablishedTimings3Byte7.ET_1280x1024_60: _mode(1280, 1024, 60),
        EstablishedTimings3Byte7.ET_1280x1024_85: _mode(1280, 1024, 85),
    },
    {
        EstablishedTimings3Byte8.ET_1360x768_60: _mode(1360, 768, 60),
        EstablishedTimings3Byte8.ET_1440x900_60_RB: _mode(1440, 900, 60),
        EstablishedTimings3Byte8.ET_1440x900_60: _mode(1440, 900, 60),
        EstablishedTimings3Byte8.ET_1440x900_75: _mode(1440, 900, 75),
        EstablishedTimings3Byte8.ET_1440x900_85: _mode(1440, 900, 85),
        EstablishedTimings3Byte8.ET_1400x1050_60_RB: _mode(1400, 1050, 60),
        EstablishedTimings3Byte8.ET_1400x1050_60: _mode(1400, 1050, 60),
        EstablishedTimings3Byte8.ET_1400x1050_75: _mode(1400, 1050, 75),
    },
    {
        EstablishedTimings3Byte9.ET_1400x1050_85: _mode(1400, 1050, 85),
        EstablishedTimings3Byte9.ET_1680x1050_60_RB: _mode(1680, 1050, 60),
        EstablishedTimings3Byte9.ET_1680x1050_60: _mode(1680, 1050, 60),
        EstablishedTimings3Byte9.ET_1680x1050_75: _mode(1680, 1050, 75),
        EstablishedTimings3Byte9.ET_1680x1050_85: _mode(1680, 1050, 85),
        EstablishedTimings3Byte9.ET_1600x1200_60: _mode(1600, 1200, 60),
        EstablishedTimings3Byte9.ET_1600x1200_65: _mode(1600, 1200, 65),
        EstablishedTimings3Byte9.ET_1600x1200_70: _mode(1600, 1200, 70),
    },
    {
        EstablishedTimings3Byte10.ET_1600x1200_75: _mode(1600, 1200, 75),
        EstablishedTimings3Byte10.ET_1600x1200_85: _mode(1600, 1200, 85),
        EstablishedTimings3Byte10.ET_1792x1344_60: _mode(1792, 1344, 60),
        EstablishedTimings3Byte10.ET_1792x1344_75: _mode(1792, 1344, 75),
        EstablishedTimings3Byte10.ET_1856x1392_60: _mode(1856, 1392, 60),
        EstablishedTimings3Byte10.ET_1856x1392_75: _mode(1856, 1392, 75),
        EstablishedTimings3Byte10.ET_1920x1200_60_RB: _mode(1920, 1200, 60),
        EstablishedTimings3Byte10.ET_1920x1200_60: _mode(1920, 1200, 60),
    },
    {
        EstablishedTimings3Byte11.ET_1920x1200_75: _mode(1920, 1200, 75),
        EstablishedTimings3Byte11.ET_1920x1200_85: _mode(1920, 1200, 85),
        EstablishedTimings3Byte11.ET_1920x1440_60: _mode(1920, 1440, 60),
        EstablishedTimings3Byte11.ET_1920x1440_75: _mode(1920, 1440, 75),
    },
)


# Standard timings
# VESA DMT Standard Version 1.0 Rev 13 - Table 4-1 (standard timing codes of the DMT modes)
# The table is keyed by the two byte code, so that codes without a known mode can be told apart
# from the modes themselves.

_STANDARD_TIMING_MODES: list[tuple[int, AspectRatio, list[int]]] = [
    (640, AspectRatio.AR_4_3, [60, 72, 75, 85]),
    (800, AspectRatio.AR_4_3, [60, 72, 75, 85]),
    (1024, AspectRatio.AR_4_3, [60, 70, 75, 85]),
    (1152, AspectRatio.AR_4_3, [75]),
    (1280, AspectRatio.AR_4_3, [60, 85]),
    (1280, AspectRatio.AR_5_4, [60, 75, 85]),
    (1280, AspectRatio.AR_16_10, [60, 75, 85]),
    (1280, AspectRatio.AR_16_9, [60]),
    (1400, AspectRatio.AR_4_3, [60, 75, 85]),
    (1440, AspectRatio.AR_16_10, [60, 75, 85]),
    (1600, AspectRatio.AR_4_3, [60, 65, 70, 75, 85]),
    (1600, AspectRatio.AR_16_9, [60]),
    (1680, AspectRatio.AR_16_10, [60, 75, 85]),
    (1792, AspectRatio.AR_4_3, [60, 75]),
    (1856, AspectRatio.AR_4_3, [60, 75]),
    (1920, AspectRatio.AR_16_10, [60, 75, 85]),
    (1920, AspectRatio.AR_4_3, [60, 75]),
    (1920, AspectRatio.AR_16_9, [60]),
    (2048, AspectRatio.AR_16_9, [60]),
]


def _standard_timings() -> dict[bytes, VideoTimingMode]:
    result: dict[bytes, VideoTimingMode] = {}
    for x_resolution, aspect_ratio, v_frequencies in _STANDARD_TIMING_MODES:
        for v_frequency in v_frequencies:
            timing = StandardTiming(
                x_resolution=x_resolution, aspect_ratio=aspect_ratio, v_frequency=v_frequency
            )
            result[timing.to_binary()] = _mode(x_resolution, timing.y_resolution, v_frequency)
    return result


STANDARD_TIMINGS: dict[bytes, VideoTimingMode] = _standard_timings()


def standard_timing_mode(timing: StandardTiming) -> VideoTimingMode | None:
    """Look up the mode of a standard timing, or None if its code is not a known DMT mode."""
    return STANDARD_TIMINGS.get(timing.to_binary())


# HDMI VICs
# HDMI 1.4b Table 8-13 - HDMI_VIC
# Each HDMI VIC duplicates a 4K mode that later received its own CTA-861 VIC.
HDMI_VIC_TO_VIC: dict[int, int] = {
    1: 95,  # 3840x2160p30
    2: 94,  # 3840x2160p25
    3: 93,  # 3840x2160p24
    4: 98,  # 4096x2160p24
}


def to_video_timing_mode(
    dtd: descriptor.DetailedTimingDescriptor, pixel_repetition: int = 1
) -> VideoTimingMode:
    """Normalize a detailed timing descriptor.

    Repeated pixels are removed from the horizontal resolution, interlaced field heights are
    doubled to the frame height, and the refresh rate is the exact ratio of the pixel clock to the
    total pixel count of a field (or frame, for progressive timings).
    """
    interlaced = dtd.features.interlaced
    return VideoTimingMode(
        h_res=dtd.h_res // pixel_repetition,
        v_res=dtd.v_res * 2 if interlaced else dtd.v_res,
        v_rate=Fraction(
            dtd.pixel_clock_hz, (dtd.v_res + dtd.v_blanking) * (dtd.h_res + dtd.h_blanking)
        ),
        interlaced=interlaced,
    )
