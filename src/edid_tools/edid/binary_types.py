import ctypes
from typing import ClassVar

# Base block
# VESA E-EDID Standard Release A2 (EDID 1.4) Table 3.1 - EDID Structure Version 1, Revision 4


class _StandardTimingBinaryFields(ctypes.BigEndianStructure):
    _pack_ = 1
    _fields_: ClassVar = [
        ("x_resolution", ctypes.c_uint8),
        ("aspect_ratio", ctypes.c_uint8, 2),
        ("v_frequency", ctypes.c_uint8, 6),
    ]


class _DescriptorSlot(ctypes.BigEndianStructure):
    _pack_ = 1
    _fields_: ClassVar = [
        ("data", ctypes.c_uint8 * 18),
    ]


class _BaseBlockBinaryFields(ctypes.BigEndianStructure):
    _pack_ = 1
    _fields_: ClassVar = [
        ("header", ctypes.c_uint8 * 8),
        # Vendor & product identification
        ("manufacturer_reserved", ctypes.c_uint16, 1),
        ("manufacturer_0", ctypes.c_uint16, 5),
        ("manufacturer_1", ctypes.c_uint16, 5),
        ("manufacturer_2", ctypes.c_uint16, 5),
        ("product_code", ctypes.c_uint8 * 2),  # little endian
        ("serial_number", ctypes.c_uint8 * 4),  # little endian
        ("week", ctypes.c_uint8),
        ("year", ctypes.c_uint8),
        # EDID structure version & revision
        ("version", ctypes.c_uint8),
        ("revision", ctypes.c_uint8),
        # Basic display parameters & features
        ("digital", ctypes.c_uint8, 1),
        ("bit_depth", ctypes.c_uint8, 3),
        ("video_interface", ctypes.c_uint8, 4),
        ("h_screen_size", ctypes.c_uint8),
        ("v_screen_size", ctypes.c_uint8),
        ("gamma", ctypes.c_uint8),
        ("dpms_standby", ctypes.c_uint8, 1),
        ("dpms_suspend", ctypes.c_uint8, 1),
        ("dpms_active_off", ctypes.c_uint8, 1),
        ("display_type", ctypes.c_uint8, 2),
        ("standard_srgb", ctypes.c_uint8, 1),
        ("preferred_timing_mode", ctypes.c_uint8, 1),
        ("continuous_timings", ctypes.c_uint8, 1),
        # Color characteristics
        ("chromaticity", ctypes.c_uint8 * 10),
        # Established timings
        ("established_timings_1", ctypes.c_uint8),
        ("established_timings_2", ctypes.c_uint8),
        ("manufacturer_timings", ctypes.c_uint8),
        ("standard_timings", _StandardTimingBinaryFields * 8),
        ("descriptors", _DescriptorSlot * 4),
        ("extension_count", ctypes.c_uint8),
        ("checksum", ctypes.c_uint8),
    ]


# 18 byte descriptors
# VESA E-EDID Standard Release A2 (EDID 1.4) Section 3.10 - 18 Byte Descriptors


class _DetailedTimingBinaryFields(ctypes.BigEndianStructure):
    _pack_ = 1
    _fields_: ClassVar = [
        ("pixel_clock", ctypes.c_uint8 * 2),  # little endian, 10 kHz units
        ("h_active_lsb", ctypes.c_uint8),
        ("h_blanking_lsb", ctypes.c_uint8),
        ("h_active_msb", ctypes.c_uint8, 4),
        ("h_blanking_msb", ctypes.c_uint8, 4),
        ("v_active_lsb", ctypes.c_uint8),
        ("v_blanking_lsb", ctypes.c_uint8),
        ("v_active_msb", ctypes.c_uint8, 4),
        ("v_blanking_msb", ctypes.c_uint8, 4),
        ("h_front_porch_lsb", ctypes.c_uint8),
        ("h_sync_width_lsb", ctypes.c_uint8),
        ("v_front_porch_lsb", ctypes.c_uint8, 4),
        ("v_sync_width_lsb", ctypes.c_uint8, 4),
        ("h_front_porch_msb", ctypes.c_uint8, 2),
        ("h_sync_width_msb", ctypes.c_uint8, 2),
        ("v_front_porch_msb", ctypes.c_uint8, 2),
        ("v_sync_width_msb", ctypes.c_uint8, 2),
        ("h_image_size_lsb", ctypes.c_uint8),
        ("v_image_size_lsb", ctypes.c_uint8),
        ("h_image_size_msb", ctypes.c_uint8, 4),
        ("v_image_size_msb", ctypes.c_uint8, 4),
        ("h_border", ctypes.c_uint8),
        ("v_border", ctypes.c_uint8),
        # Features bitmap (VESA E-EDID Table 3.22)
        ("interlaced", ctypes.c_uint8, 1),
        ("stereo_msb", ctypes.c_uint8, 2),
        ("digital_sync", ctypes.c_uint8, 1),
        ("sync_bit_3", ctypes.c_uint8, 1),
        ("sync_bit_2", ctypes.c_uint8, 1),
        ("sync_bit_1", ctypes.c_uint8, 1),
        ("stereo_lsb", ctypes.c_uint8, 1),
    ]


class _DisplayDescriptorBinaryFields(ctypes.BigEndianStructure):
    _pack_ = 1
    _fields_: ClassVar = [
        ("zero", ctypes.c_uint8 * 3),
        ("type", ctypes.c_uint8),
        ("reserved", ctypes.c_uint8),
        ("data", ctypes.c_uint8 * 13),
    ]


class _RangeLimitsBinaryFields(ctypes.BigEndianStructure):
    _pack_ = 1
    _fields_: ClassVar = [
        ("zero", ctypes.c_uint8 * 3),
        ("type", ctypes.c_uint8),
        ("reserved", ctypes.c_uint8, 4),
        ("h_rate_offsets", ctypes.c_uint8, 2),
        ("v_rate_offsets", ctypes.c_uint8, 2),
        ("min_v_rate", ctypes.c_uint8),
        ("max_v_rate", ctypes.c_uint8),
        ("min_h_rate", ctypes.c_uint8),
        ("max_h_rate", ctypes.c_uint8),
        ("max_pixel_clock", ctypes.c_uint8),  # 10 MHz units
        ("video_timing_support", ctypes.c_uint8),
        ("timing_parameters", ctypes.c_uint8 * 7),
    ]


class _EstablishedTimings3BinaryFields(ctypes.BigEndianStructure):
    _pack_ = 1
    _fields_: ClassVar = [
        ("zero", ctypes.c_uint8 * 3),
        ("type", ctypes.c_uint8),
        ("reserved", ctypes.c_uint8),
        ("revision", ctypes.c_uint8),
        ("timings", ctypes.c_uint8 * 6),
        ("reserved_end", ctypes.c_uint8 * 6),
    ]


# CTA-861 extension block
# CTA-861-G Section 7.3 - CTA Extension Version 3


class _Cta861HeaderBinaryFields(ctypes.BigEndianStructure):
    _pack_ = 1
    _fields_: ClassVar = [
        ("tag", ctypes.c_uint8),
        ("revision", ctypes.c_uint8),
        ("dtd_offset", ctypes.c_uint8),
        ("underscan", ctypes.c_uint8, 1),
        ("basic_audio", ctypes.c_uint8, 1),
        ("ycbcr_444", ctypes.c_uint8, 1),
        ("ycbcr_422", ctypes.c_uint8, 1),
        ("native_dtds", ctypes.c_uint8, 4),
    ]


class _DataBlockHeaderBinaryFields(ctypes.BigEndianStructure):
    _pack_ = 1
    _fields_: ClassVar = [
        ("tag", ctypes.c_uint8, 3),
        ("length", ctypes.c_uint8, 5),
    ]


class _ShortAudioDescriptorBinaryFields(ctypes.BigEndianStructure):
    _pack_ = 1
    _fields_: ClassVar = [
        ("reserved", ctypes.c_uint8, 1),
        ("format", ctypes.c_uint8, 4),
        ("channels", ctypes.c_uint8, 3),
        ("sampling_frequencies", ctypes.c_uint8),
        ("detail", ctypes.c_uint8),
    ]


# HDMI vendor-specific data block
# HDMI 1.4b Section 8.3.2 - HDMI Vendor-Specific Data Block (HDMI VSDB)


class _HdmiFlagsBinaryFields(ctypes.BigEndianStructure):
    _pack_ = 1
    _fields_: ClassVar = [
        ("latency_present", ctypes.c_uint8, 1),
        ("interlaced_latency_present", ctypes.c_uint8, 1),
        ("hdmi_video_present", ctypes.c_uint8, 1),
        ("reserved", ctypes.c_uint8, 1),
        ("content_types", ctypes.c_uint8, 4),
    ]


class _HdmiVideoBinaryFields(ctypes.BigEndianStructure):
    _pack_ = 1
    _fields_: ClassVar = [
        ("stereo_present", ctypes.c_uint8, 1),
        ("stereo_multi_present", ctypes.c_uint8, 2),
        ("image_size", ctypes.c_uint8, 2),
        ("reserved", ctypes.c_uint8, 3),
        ("hdmi_vic_length", ctypes.c_uint8, 3),
        ("hdmi_3d_length", ctypes.c_uint8, 5),
    ]


class _Hdmi3DEntryBinaryFields(ctypes.BigEndianStructure):
    _pack_ = 1
    _fields_: ClassVar = [
        ("vic_index", ctypes.c_uint8, 4),
        ("structure", ctypes.c_uint8, 4),
    ]
