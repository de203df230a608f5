"""Catalog of the CTA-861 video formats identified by Video Identification Codes (VICs)."""

from __future__ import annotations

from edid_tools.edid.common import InvalidVicError
from edid_tools.edid.descriptor import (
    DetailedTimingDescriptor,
    DigitalSeparateSync,
    FeaturesBitmap,
)
from edid_tools.edid.timing_modes import VideoTimingMode, to_video_timing_mode

# A catalog row: the timing parameters of the format followed by its allowed pixel repetition
# factors.  Formats with several factors list them in the order given by the standard; the first
# one is the factor that produces the format's nominal resolution.
_Row = tuple[int, int, int, int, int, int, int, int, int, bool, bool, bool, tuple[int, ...]]

# CTA-861-G Table 1 - Video Format Timings - Detailed Timing Information (VIC 1 to 127)
# Columns: pixel clock (Hz), h_res, v_res (per field), h_blanking, v_blanking, h_front_porch,
# h_sync_width, v_front_porch, v_sync_width, interlaced, v_sync_polarity, h_sync_polarity,
# pixel repetition factors
# fmt: off
_CTA_MODES_1: list[_Row] = [
    # VIC 1
    (   25_175_000,   640,   480,   160,    45,    16,    96,    10,     2, False, False, False, (1,)),
    (   27_000_000,   720,   480,   138,    45,    16,    62,     9,     6, False, False, False, (1,)),
    (   27_000_000,   720,   480,   138,    45,    16,    62,     9,     6, False, False, False, (1,)),
    (   74_250_000,  1280,   720,   370,    30,   110,    40,     5,     5, False, True,  True,  (1,)),
    (   74_250_000,  1920,   540,   280,    22,    88,    44,     2,     5, True,  True,  True,  (1,)),
    (   27_000_000,  1440,   240,   276,    22,    38,   124,     4,     3, True,  False, False, (2,)),
    (   27_000_000,  1440,   240,   276,    22,    38,   124,     4,     3, True,  False, False, (2,)),
    (   27_000_000,  1440,   240,   276,    22,    38,   124,     4,     3, False, False, False, (2,)),
    (   27_000_000,  1440,   240,   276,    22,    38,   124,     4,     3, False, False, False, (2,)),
    (   54_000_000,  2880,   240,   552,    22,    76,   248,     4,     3, True,  False, False, (1, 10)),
    # VIC 11
    (   54_000_000,  2880,   240,   552,    22,    76,   248,     4,     3, True,  False, False, (1, 10)),
    (   54_000_000,  2880,   240,   552,    22,    76,   248,     4,     3, False, False, False, (1, 10)),
    (   54_000_000,  2880,   240,   552,    22,    76,   248,     4,     3, False, False, False, (1, 10)),
    (   54_000_000,  1440,   480,   276,    45,    32,   124,     9,     6, False, False, False, (1, 2)),
    (   54_000_000,  1440,   480,   276,    45,    32,   124,     9,     6, False, False, False, (1, 2)),
    (  148_500_000,  1920,  1080,   280,    45,    88,    44,     4,     5, False, True,  True,  (1,)),
    (   27_000_000,   720,   576,   144,    49,    12,    64,     5,     5, False, False, False, (1,)),
    (   27_000_000,   720,   576,   144,    49,    12,    64,     5,     5, False, False, False, (1,)),
    (   74_250_000,  1280,   720,   700,    30,   440,    40,     5,     5, False, True,  True,  (1,)),
    (   74_250_000,  1920,   540,   720,    22,   528,    44,     2,     5, True,  True,  True,  (1,)),
    # VIC 21
    (   27_000_000,  1440,   288,   288,    24,    24,   126,     2,     3, True,  False, False, (2,)),
    (   27_000_000,  1440,   288,   288,    24,    24,   126,     2,     3, True,  False, False, (2,)),
    (   27_000_000,  1440,   288,   288,    24,    24,   126,     2,     3, False, False, False, (2,)),
    (   27_000_000,  1440,   288,   288,    24,    24,   126,     2,     3, False, False, False, (2,)),
    (   54_000_000,  2880,   288,   576,    24,    48,   252,     2,     3, True,  False, False, (1, 10)),
    (   54_000_000,  2880,   288,   576,    24,    48,   252,     2,     3, True,  False, False, (1, 10)),
    (   54_000_000,  2880,   288,   576,    24,    48,   252,     2,     3, False, False, False, (1, 10)),
    (   54_000_000,  2880,   288,   576,    24,    48,   252,     2,     3, False, False, False, (1, 10)),
    (   54_000_000,  1440,   576,   288,    49,    24,   128,     5,     5, False, False, False, (1, 2)),
    (   54_000_000,  1440,   576,   288,    49,    24,   128,     5,     5, False, False, False, (1, 2)),
    # VIC 31
    (  148_500_000,  1920,  1080,   720,    45,   528,    44,     4,     5, False, True,  True,  (1,)),
    (   74_250_000,  1920,  1080,   830,    45,   638,    44,     4,     5, False, True,  True,  (1,)),
    (   74_250_000,  1920,  1080,   720,    45,   528,    44,     4,     5, False, True,  True,  (1,)),
    (   74_250_000,  1920,  1080,   280,    45,    88,    44,     4,     5, False, True,  True,  (1,)),
    (  108_000_000,  2880,   480,   552,    45,    64,   248,     9,     6, False, False, False, (1, 2, 4)),
    (  108_000_000,  2880,   480,   552,    45,    64,   248,     9,     6, False, False, False, (1, 2, 4)),
    (  108_000_000,  2880,   576,   576,    49,    48,   256,     5,     5, False, False, False, (1, 2, 4)),
    (  108_000_000,  2880,   576,   576,    49,    48,   256,     5,     5, False, False, False, (1, 2, 4)),
    (   72_000_000,  1920,   540,   384,    85,    32,   168,    23,     5, True,  True,  False, (1,)),
    (  148_500_000,  1920,   540,   720,    22,   528,    44,     2,     5, True,  True,  True,  (1,)),
    # VIC 41
    (  148_500_000,  1280,   720,   700,    30,   440,    40,     5,     5, False, True,  True,  (1,)),
    (   54_000_000,   720,   576,   144,    49,    12,    64,     5,     5, False, False, False, (1,)),
    (   54_000_000,   720,   576,   144,    49,    12,    64,     5,     5, False, False, False, (1,)),
    (   54_000_000,  1440,   288,   288,    24,    24,   126,     2,     3, True,  False, False, (2,)),
    (   54_000_000,  1440,   288,   288,    24,    24,   126,     2,     3, True,  False, False, (2,)),
    (  148_500_000,  1920,   540,   280,    22,    88,    44,     2,     5, True,  True,  True,  (1,)),
    (  148_500_000,  1280,   720,   370,    30,   110,    40,     5,     5, False, True,  True,  (1,)),
    (   54_000_000,   720,   480,   138,    45,    16,    62,     9,     6, False, False, False, (1,)),
    (   54_000_000,   720,   480,   138,    45,    16,    62,     9,     6, False, False, False, (1,)),
    (   54_000_000,  1440,   240,   276,    22,    38,   124,     4,     3, True,  False, False, (2,)),
    # VIC 51
    (   54_000_000,  1440,   240,   276,    22,    38,   124,     4,     3, True,  False, False, (2,)),
    (  108_000_000,   720,   576,   144,    49,    12,    64,     5,     5, False, False, False, (1,)),
    (  108_000_000,   720,   576,   144,    49,    12,    64,     5,     5, False, False, False, (1,)),
    (  108_000_000,  1440,   288,   288,    24,    24,   126,     2,     3, True,  False, False, (2,)),
    (  108_000_000,  1440,   288,   288,    24,    24,   126,     2,     3, True,  False, False, (2,)),
    (  108_000_000,   720,   480,   138,    45,    16,    62,     9,     6, False, False, False, (1,)),
    (  108_000_000,   720,   480,   138,    45,    16,    62,     9,     6, False, False, False, (1,)),
    (  108_000_000,  1440,   240,   276,    22,    38,   124,     4,     3, True,  False, False, (2,)),
    (  108_000_000,  1440,   240,   276,    22,    38,   124,     4,     3, True,  False, False, (2,)),
    (   59_400_000,  1280,   720,  2020,    30,  1760,    40,     5,     5, False, True,  True,  (1,)),
    # VIC 61
    (   74_250_000,  1280,   720,  2680,    30,  2420,    40,     5,     5, False, True,  True,  (1,)),
    (   74_250_000,  1280,   720,  2020,    30,  1760,    40,     5,     5, False, True,  True,  (1,)),
    (  297_000_000,  1920,  1080,   280,    45,    88,    44,     4,     5, False, True,  True,  (1,)),
    (  297_000_000,  1920,  1080,   720,    45,   528,    44,     4,     5, False, True,  True,  (1,)),
    (   59_400_000,  1280,   720,  2020,    30,  1760,    40,     5,     5, False, True,  True,  (1,)),
    (   74_250_000,  1280,   720,  2680,    30,  2420,    40,     5,     5, False, True,  True,  (1,)),
    (   74_250_000,  1280,   720,  2020,    30,  1760,    40,     5,     5, False, True,  True,  (1,)),
    (   74_250_000,  1280,   720,   700,    30,   440,    40,     5,     5, False, True,  True,  (1,)),
    (   74_250_000,  1280,   720,   370,    30,   110,    40,     5,     5, False, True,  True,  (1,)),
    (  148_500_000,  1280,   720,   700,    30,   440,    40,     5,     5, False, True,  True,  (1,)),
    # VIC 71
    (  148_500_000,  1280,   720,   370,    30,   110,    40,     5,     5, False, True,  True,  (1,)),
    (   74_250_000,  1920,  1080,   830,    45,   638,    44,     4,     5, False, True,  True,  (1,)),
    (   74_250_000,  1920,  1080,   720,    45,   528,    44,     4,     5, False, True,  True,  (1,)),
    (   74_250_000,  1920,  1080,   280,    45,    88,    44,     4,     5, False, True,  True,  (1,)),
    (  148_500_000,  1920,  1080,   720,    45,   528,    44,     4,     5, False, True,  True,  (1,)),
    (  148_500_000,  1920,  1080,   280,    45,    88,    44,     4,     5, False, True,  True,  (1,)),
    (  297_000_000,  1920,  1080,   720,    45,   528,    44,     4,     5, False, True,  True,  (1,)),
    (  297_000_000,  1920,  1080,   280,    45,    88,    44,     4,     5, False, True,  True,  (1,)),
    (   59_400_000,  1680,   720,  1620,    30,  1360,    40,     5,     5, False, True,  True,  (1,)),
    (   59_400_000,  1680,   720,  1488,    30,  1228,    40,     5,     5, False, True,  True,  (1,)),
    # VIC 81
    (   59_400_000,  1680,   720,   960,    30,   700,    40,     5,     5, False, True,  True,  (1,)),
    (   82_500_000,  1680,   720,   520,    30,   260,    40,     5,     5, False, True,  True,  (1,)),
    (   99_000_000,  1680,   720,   520,    30,   260,    40,     5,     5, False, True,  True,  (1,)),
    (  165_000_000,  1680,   720,   320,   105,    60,    40,     5,     5, False, True,  True,  (1,)),
    (  198_000_000,  1680,   720,   320,   105,    60,    40,     5,     5, False, True,  True,  (1,)),
    (   99_000_000,  2560,  1080,  1190,    20,   998,    44,     4,     5, False, True,  True,  (1,)),
    (   90_000_000,  2560,  1080,   640,    45,   448,    44,     4,     5, False, True,  True,  (1,)),
    (  118_800_000,  2560,  1080,   960,    45,   768,    44,     4,     5, False, True,  True,  (1,)),
    (  185_625_000,  2560,  1080,   740,    45,   548,    44,     4,     5, False, True,  True,  (1,)),
    (  198_000_000,  2560,  1080,   440,    20,   248,    44,     4,     5, False, True,  True,  (1,)),
    # VIC 91
    (  371_250_000,  2560,  1080,   410,   170,   218,    44,     4,     5, False, True,  True,  (1,)),
    (  495_000_000,  2560,  1080,   740,   170,   548,    44,     4,     5, False, True,  True,  (1,)),
    (  297_000_000,  3840,  2160,  1660,    90,  1276,    88,     8,    10, False, True,  True,  (1,)),
    (  297_000_000,  3840,  2160,  1440,    90,  1056,    88,     8,    10, False, True,  True,  (1,)),
    (  297_000_000,  3840,  2160,   560,    90,   176,    88,     8,    10, False, True,  True,  (1,)),
    (  594_000_000,  3840,  2160,  1440,    90,  1056,    88,     8,    10, False, True,  True,  (1,)),
    (  594_000_000,  3840,  2160,   560,    90,   176,    88,     8,    10, False, True,  True,  (1,)),
    (  297_000_000,  4096,  2160,  1404,    90,  1020,    88,     8,    10, False, True,  True,  (1,)),
    (  297_000_000,  4096,  2160,  1184,    90,   968,    88,     8,    10, False, True,  True,  (1,)),
    (  297_000_000,  4096,  2160,   304,    90,    88,    88,     8,    10, False, True,  True,  (1,)),
    # VIC 101
    (  594_000_000,  4096,  2160,  1184,    90,   968,    88,     8,    10, False, True,  True,  (1,)),
    (  594_000_000,  4096,  2160,   304,    90,    88,    88,     8,    10, False, True,  True,  (1,)),
    (  297_000_000,  3840,  2160,  1660,    90,  1276,    88,     8,    10, False, True,  True,  (1,)),
    (  297_000_000,  3840,  2160,  1440,    90,  1056,    88,     8,    10, False, True,  True,  (1,)),
    (  297_000_000,  3840,  2160,   560,    90,   176,    88,     8,    10, False, True,  True,  (1,)),
    (  594_000_000,  3840,  2160,  1440,    90,  1056,    88,     8,    10, False, True,  True,  (1,)),
    (  594_000_000,  3840,  2160,   560,    90,   176,    88,     8,    10, False, True,  True,  (1,)),
    (   90_000_000,  1280,   720,  1220,    30,   960,    40,     5,     5, False, True,  True,  (1,)),
    (   90_000_000,  1280,   720,  1220,    30,   960,    40,     5,     5, False, True,  True,  (1,)),
    (   99_000_000,  1680,   720,  1070,    30,   810,    40,     5,     5, False, True,  True,  (1,)),
    # VIC 111
    (  148_500_000,  1920,  1080,   830,    45,   638,    44,     4,     5, False, True,  True,  (1,)),
    (  148_500_000,  1920,  1080,   830,    45,   638,    44,     4,     5, False, True,  True,  (1,)),
    (  198_000_000,  2560,  1080,  1190,    20,   998,    44,     4,     5, False, True,  True,  (1,)),
    (  594_000_000,  3840,  2160,  1660,    90,  1276,    88,     8,    10, False, True,  True,  (1,)),
    (  594_000_000,  4096,  2160,  1404,    90,  1020,    88,     8,    10, False, True,  True,  (1,)),
    (  594_000_000,  3840,  2160,  1660,    90,  1276,    88,     8,    10, False, True,  True,  (1,)),
    (1_188_000_000,  3840,  2160,  1440,    90,  1056,    88,     8,    10, False, True,  True,  (1,)),
    (1_188_000_000,  3840,  2160,   560,    90,   176,    88,     8,    10, False, True,  True,  (1,)),
    (1_188_000_000,  3840,  2160,  1440,    90,  1056,    88,     8,    10, False, True,  True,  (1,)),
    (1_188_000_000,  3840,  2160,   560,    90,   176,    88,     8,    10, False, True,  True,  (1,)),
    # VIC 121
    (  396_000_000,  5120,  2160,  2380,    40,  1996,    88,     8,    10, False, True,  True,  (1,)),
    (  396_000_000,  5120,  2160,  2080,    40,  1696,    88,     8,    10, False, True,  True,  (1,)),
    (  396_000_000,  5120,  2160,   880,    40,   664,    88,     8,    10, False, True,  True,  (1,)),
    (  742_500_000,  5120,  2160,  1130,   315,   746,    88,     8,    10, False, True,  True,  (1,)),
    (  742_500_000,  5120,  2160,  1480,    90,  1096,    88,     8,    10, False, True,  True,  (1,)),
    (  742_500_000,  5120,  2160,   380,    90,   164,    88,     8,    10, False, True,  True,  (1,)),
    (1_485_000_000,  5120,  2160,  1480,    90,  1096,    88,     8,    10, False, True,  True,  (1,)),
]
# fmt: on

# CTA-861-H Table 3 - Video Format Timings (VIC 193 to 219)
# fmt: off
_CTA_MODES_2: list[_Row] = [
    # VIC 193
    (1_485_000_000,  5120,  2160,   380,    90,   164,    88,     8,    10, False, True,  True,  (1,)),
    (1_188_000_000,  7680,  4320,  3320,   180,  2552,   176,    16,    20, False, True,  True,  (1,)),
    (1_188_000_000,  7680,  4320,  3120,    80,  2352,   176,    16,    20, False, True,  True,  (1,)),
    (1_188_000_000,  7680,  4320,  1320,    80,   552,   176,    16,    20, False, True,  True,  (1,)),
    (2_376_000_000,  7680,  4320,  3320,   180,  2552,   176,    16,    20, False, True,  True,  (1,)),
    (2_376_000_000,  7680,  4320,  3120,    80,  2352,   176,    16,    20, False, True,  True,  (1,)),
    (2_376_000_000,  7680,  4320,  1320,    80,   552,   176,    16,    20, False, True,  True,  (1,)),
    (4_752_000_000,  7680,  4320,  2880,   180,  2112,   176,    16,    20, False, True,  True,  (1,)),
    # VIC 201
    (4_752_000_000,  7680,  4320,  1120,   180,   352,   176,    16,    20, False, True,  True,  (1,)),
    (1_188_000_000,  7680,  4320,  3320,   180,  2552,   176,    16,    20, False, True,  True,  (1,)),
    (1_188_000_000,  7680,  4320,  3120,    80,  2352,   176,    16,    20, False, True,  True,  (1,)),
    (1_188_000_000,  7680,  4320,  1320,    80,   552,   176,    16,    20, False, True,  True,  (1,)),
    (2_376_000_000,  7680,  4320,  3320,   180,  2552,   176,    16,    20, False, True,  True,  (1,)),
    (2_376_000_000,  7680,  4320,  3120,    80,  2352,   176,    16,    20, False, True,  True,  (1,)),
    (2_376_000_000,  7680,  4320,  1320,    80,   552,   176,    16,    20, False, True,  True,  (1,)),
    (4_752_000_000,  7680,  4320,  2880,   180,  2112,   176,    16,    20, False, True,  True,  (1,)),
    (4_752_000_000,  7680,  4320,  1120,   180,   352,   176,    16,    20, False, True,  True,  (1,)),
    (1_485_000_000, 10240,  4320,  2260,   630,  1492,   176,    16,    20, False, True,  True,  (1,)),
    # VIC 211
    (1_485_000_000, 10240,  4320,  3260,    80,  2492,   176,    16,    20, False, True,  True,  (1,)),
    (1_485_000_000, 10240,  4320,   760,   180,   288,   176,    16,    20, False, True,  True,  (1,)),
    (2_970_000_000, 10240,  4320,  2260,   630,  1492,   176,    16,    20, False, True,  True,  (1,)),
    (2_970_000_000, 10240,  4320,  3260,    80,  2492,   176,    16,    20, False, True,  True,  (1,)),
    (2_970_000_000, 10240,  4320,   760,   180,   288,   176,    16,    20, False, True,  True,  (1,)),
    (5_940_000_000, 10240,  4320,  2960,   180,  2192,   176,    16,    20, False, True,  True,  (1,)),
    (5_940_000_000, 10240,  4320,   760,   180,   288,   176,    16,    20, False, True,  True,  (1,)),
    (1_188_000_000,  4096,  2160,  1184,    90,   800,    88,     8,    10, False, True,  True,  (1,)),
    (1_188_000_000,  4096,  2160,   304,    90,    88,    88,     8,    10, False, True,  True,  (1,)),
]
# fmt: on

# Ranges of valid VICs.  VICs 129 to 192 are the native flag encoding of VICs 1 to 64.
VIC_RANGE_1 = range(1, 128)
VIC_RANGE_NATIVE = range(129, 193)
VIC_RANGE_2 = range(193, 220)
NATIVE_VIC_OFFSET = 128


def _to_dtd(row: _Row) -> DetailedTimingDescriptor:
    (
        pixel_clock_hz,
        h_res,
        v_res,
        h_blanking,
        v_blanking,
        h_front_porch,
        h_sync_width,
        v_front_porch,
        v_sync_width,
        interlaced,
        v_sync_polarity,
        h_sync_polarity,
        _,
    ) = row
    return DetailedTimingDescriptor(
        pixel_clock_hz=pixel_clock_hz,
        h_res=h_res,
        v_res=v_res,
        h_blanking=h_blanking,
        v_blanking=v_blanking,
        h_front_porch=h_front_porch,
        h_sync_width=h_sync_width,
        v_front_porch=v_front_porch,
        v_sync_width=v_sync_width,
        h_image_size=0,
        v_image_size=0,
        h_border=0,
        v_border=0,
        features=FeaturesBitmap(
            interlaced=interlaced,
            sync=DigitalSeparateSync(
                v_sync_polarity=v_sync_polarity, h_sync_polarity=h_sync_polarity
            ),
        ),
    )


def is_valid_vic(vic: int) -> bool:
    return vic in VIC_RANGE_1 or vic in VIC_RANGE_NATIVE or vic in VIC_RANGE_2


def get_cta861_timing(vic: int) -> tuple[DetailedTimingDescriptor, tuple[int, ...]]:
    """Look up the timing of a VIC and its allowed pixel repetition factors.

    Raises InvalidVicError for VICs outside of the ranges 1-127, 129-192 and 193-219.
    """
    if vic in VIC_RANGE_1:
        row = _CTA_MODES_1[vic - VIC_RANGE_1.start]
    elif vic in VIC_RANGE_NATIVE:
        row = _CTA_MODES_1[vic - NATIVE_VIC_OFFSET - VIC_RANGE_1.start]
    elif vic in VIC_RANGE_2:
        row = _CTA_MODES_2[vic - VIC_RANGE_2.start]
    else:
        raise InvalidVicError(f"{vic} is not a valid VIC.")
    return _to_dtd(row), row[-1]


def get_cta861_video_timing_mode(vic: int) -> VideoTimingMode:
    """Look up the normalized video timing mode of a VIC.

    The first pixel repetition factor of the format is used.
    """
    dtd, pixel_repetition = get_cta861_timing(vic)
    return to_video_timing_mode(dtd, pixel_repetition[0])
