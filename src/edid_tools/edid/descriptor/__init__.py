"""Contains model classes for the 18 byte descriptors contained in the EDID base block."""

from .base import (
    Descriptor,
    DisplayDescriptor,
    Dummy,
    Type,
)
from .dtd import (
    PIXEL_CLOCK_UNIT_HZ,
    AnalogCompositeSync,
    DetailedTimingDescriptor,
    DigitalCompositeSync,
    DigitalSeparateSync,
    FeaturesBitmap,
    StereoMode,
    Sync,
)
from .established_timings import (
    ESTABLISHED_TIMINGS_3_BYTES,
    ESTABLISHED_TIMINGS_III_REVISION,
    EstablishedTimings3,
    EstablishedTimings3Byte6,
    EstablishedTimings3Byte7,
    EstablishedTimings3Byte8,
    EstablishedTimings3Byte9,
    EstablishedTimings3Byte10,
    EstablishedTimings3Byte11,
)
from .parser import parse_binary
from .range_limits import (
    DisplayRangeLimits,
    VideoTimingSupport,
)
from .text import (
    MAX_TEXT_LENGTH,
    AlphanumericData,
    AsciiString,
    DisplayProductName,
    DisplaySerialNumber,
)

__all__ = [
    "AlphanumericData",
    "AnalogCompositeSync",
    "AsciiString",
    "Descriptor",
    "DetailedTimingDescriptor",
    "DigitalCompositeSync",
    "DigitalSeparateSync",
    "DisplayDescriptor",
    "DisplayProductName",
    "DisplayRangeLimits",
    "DisplaySerialNumber",
    "Dummy",
    "ESTABLISHED_TIMINGS_3_BYTES",
    "ESTABLISHED_TIMINGS_III_REVISION",
    "EstablishedTimings3",
    "EstablishedTimings3Byte6",
    "EstablishedTimings3Byte7",
    "EstablishedTimings3Byte8",
    "EstablishedTimings3Byte9",
    "EstablishedTimings3Byte10",
    "EstablishedTimings3Byte11",
    "FeaturesBitmap",
    "MAX_TEXT_LENGTH",
    "PIXEL_CLOCK_UNIT_HZ",
    "StereoMode",
    "Sync",
    "Type",
    "VideoTimingSupport",
    "parse_binary",
]
