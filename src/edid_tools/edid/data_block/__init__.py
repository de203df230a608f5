"""Contains model classes for the data blocks found in CTA-861 extension blocks."""

from .audio import (
    AudioDataBlock,
    AudioFormat,
    LpcmBitDepth,
    SamplingFrequency,
    ShortAudioDescriptor,
)
from .base import (
    MAX_PAYLOAD_LENGTH,
    DataBlock,
    ExtendedTag,
    Tag,
)
from .colorimetry import (
    Colorimetry,
    ColorimetryDataBlock,
    GamutMetadataProfile,
)
from .hdmi import (
    HDMI_OUI,
    ContentType,
    HdmiCapabilities,
    HdmiVendorDataBlock,
    HdmiVideoSubblock,
    ImageSizeMeaning,
    StereoVideoFormat,
    StereoVideoSubsampling,
    StereoVideoSupport,
    StereoVideoTransmissionFormat,
    Vic3dSupport,
)
from .misc import UnknownDataBlock
from .parser import collection_to_binary, parse_binary, parse_collection
from .speaker import Speaker, SpeakerAllocationDataBlock
from .video import VideoDataBlock, svd_to_vic
from .ycbcr420 import YCbCr420CapabilityMapDataBlock

__all__ = [
    "AudioDataBlock",
    "AudioFormat",
    "Colorimetry",
    "ColorimetryDataBlock",
    "ContentType",
    "DataBlock",
    "ExtendedTag",
    "GamutMetadataProfile",
    "HDMI_OUI",
    "HdmiCapabilities",
    "HdmiVendorDataBlock",
    "HdmiVideoSubblock",
    "ImageSizeMeaning",
    "LpcmBitDepth",
    "MAX_PAYLOAD_LENGTH",
    "SamplingFrequency",
    "ShortAudioDescriptor",
    "Speaker",
    "SpeakerAllocationDataBlock",
    "StereoVideoFormat",
    "StereoVideoSubsampling",
    "StereoVideoSupport",
    "StereoVideoTransmissionFormat",
    "Tag",
    "UnknownDataBlock",
    "Vic3dSupport",
    "VideoDataBlock",
    "YCbCr420CapabilityMapDataBlock",
    "collection_to_binary",
    "parse_binary",
    "parse_collection",
    "svd_to_vic",
]
