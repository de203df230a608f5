"""Human-readable description of a decoded EDID."""

from __future__ import annotations

from enum import IntFlag

import edid_tools.edid.data_block as data_block
import edid_tools.edid.descriptor as descriptor
import edid_tools.edid.timing_modes as timing_modes
import edid_tools.edid.traversal as traversal
from edid_tools.edid.base_block import BaseBlock, ManufactureDate, ModelYear
from edid_tools.edid.cta861_block import Cta861Block
from edid_tools.edid.data_util import flag_names, hex_bytes, hex_int
from edid_tools.edid.edid import EdidData

# Lines starting with this prefix are section headings.
SECTION_PREFIX = "=== "

INDENT = "  "


def _names(value: IntFlag) -> str:
    names = flag_names(value)
    return ", ".join(names) if names else "(none)"


def describe_dtd(dtd: descriptor.DetailedTimingDescriptor) -> str:
    mode = timing_modes.to_video_timing_mode(dtd)
    return (
        f"Detailed timing {mode}: pixel clock {dtd.pixel_clock_hz / 1_000_000:.2f} MHz, "
        f"blanking {dtd.h_blanking}/{dtd.v_blanking}, "
        f"front porch {dtd.h_front_porch}/{dtd.v_front_porch}, "
        f"sync width {dtd.h_sync_width}/{dtd.v_sync_width}, "
        f"image size {dtd.h_image_size}x{dtd.v_image_size} mm, "
        f"border {dtd.h_border}/{dtd.v_border}, "
        f"stereo {dtd.features.stereo_mode.name}, sync {dtd.features.sync}"
    )


def describe_descriptor(desc: descriptor.Descriptor) -> str:
    match desc:
        case descriptor.Dummy():
            return "Dummy descriptor"
        case descriptor.DetailedTimingDescriptor():
            return describe_dtd(desc)
        case descriptor.DisplayProductName():
            return f"Display product name: {desc.text!r}"
        case descriptor.DisplaySerialNumber():
            return f"Display serial number: {desc.text!r}"
        case descriptor.AlphanumericData():
            return f"Alphanumeric data: {desc.text!r}"
        case descriptor.DisplayRangeLimits():
            return (
                f"Display range limits: vertical {desc.min_v_rate_hz}-{desc.max_v_rate_hz} Hz, "
                f"horizontal {desc.min_h_rate_khz}-{desc.max_h_rate_khz} kHz, "
                f"max pixel clock {desc.max_pixel_clock_rate_mhz} MHz, "
                f"{desc.video_timing_support.name}"
                + (
                    f", timing parameters {hex_bytes(desc.timing_parameters)}"
                    if desc.timing_parameters is not None
                    else ""
                )
            )
        case descriptor.EstablishedTimings3():
            names = [name for flags in desc.timing_bytes() for name in flag_names(flags)]
            return f"Established timings III: {', '.join(names) if names else '(none)'}"
        case _:
            assert False


def describe_base_block(block: BaseBlock) -> list[str]:
    lines = [f"{SECTION_PREFIX}Base block"]
    lines.append(f"Manufacturer ID: {block.manufacturer_id}")
    lines.append(f"Product code: {hex_int(block.product_code, 4)}")
    lines.append(f"Serial number: {hex_int(block.serial_number, 8)}")
    match block.manufacture_date:
        case ManufactureDate():
            lines.append(
                f"Manufactured: week {block.manufacture_date.week} of "
                f"{block.manufacture_date.year}"
            )
        case ModelYear():
            lines.append(f"Model year: {block.manufacture_date.model_year}")
        case _:
            assert False
    lines.append(f"EDID version: {block.edid_major_version}.{block.edid_minor_version}")
    lines.append(f"Bit depth: {block.bit_depth.name}")
    lines.append(f"Video interface: {block.video_interface.name}")
    lines.append(f"Screen size: {block.h_screen_size}x{block.v_screen_size} cm")
    lines.append(f"Gamma: {block.gamma:.2f}")
    lines.append(
        f"DPMS: standby {block.dpms_standby}, suspend {block.dpms_suspend}, "
        f"active off {block.dpms_active_off}"
    )
    lines.append(f"Display type: {block.display_type.name}")
    lines.append(f"sRGB is primary: {block.standard_srgb}")
    lines.append(f"Preferred timing mode: {block.preferred_timing_mode}")
    lines.append(f"Continuous timings: {block.continuous_timings}")
    lines.append(f"Chromaticity: {hex_bytes(block.chromaticity)}")
    lines.append(f"Established timings I: {_names(block.established_timings_1)}")
    lines.append(f"Established timings II: {_names(block.established_timings_2)}")
    lines.append(f"Manufacturer's timings: {_names(block.manufacturer_timings)}")
    lines.append("Standard timings:")
    for timing in block.standard_timings:
        if timing is None:
            lines.append(f"{INDENT}(unused)")
        else:
            mode = timing_modes.standard_timing_mode(timing)
            lines.append(
                f"{INDENT}{timing.x_resolution}x{timing.y_resolution} "
                f"{timing.aspect_ratio.name} @ {timing.v_frequency} Hz"
                + ("" if mode is not None else " (not a known mode)")
            )
    lines.append("Descriptors:")
    lines.extend(f"{INDENT}{describe_descriptor(desc)}" for desc in block.descriptors)
    return lines


def describe_data_block(db: data_block.DataBlock) -> list[str]:
    match db:
        case data_block.VideoDataBlock():
            lines = ["Video data block:"]
            for svd in db.svds:
                vic = data_block.svd_to_vic(svd)
                mode = traversal.vic_mode(vic)
                lines.append(
                    f"{INDENT}VIC {vic}{' (native)' if vic != svd else ''}: "
                    + (str(mode) if mode is not None else "unknown")
                )
            return lines
        case data_block.AudioDataBlock():
            lines = ["Audio data block:"]
            for sad in db.sads:
                lines.append(
                    f"{INDENT}{sad.format.name}, {sad.channels} channels, "
                    f"{_names(sad.sampling_frequencies)}"
                    + (
                        f", {_names(sad.lpcm_bit_depths)}"
                        if sad.lpcm_bit_depths is not None
                        else f", detail {hex_int(sad.detail, 2)}"
                    )
                )
            return lines
        case data_block.SpeakerAllocationDataBlock():
            return [f"Speaker allocation data block: {_names(db.speaker_allocation)}"]
        case data_block.YCbCr420CapabilityMapDataBlock():
            indices = ", ".join(str(index) for index in sorted(db.svd_indices))
            return [f"YCbCr 4:2:0 capability map data block: SVDs {indices or '(all)'}"]
        case data_block.ColorimetryDataBlock():
            return [
                f"Colorimetry data block: {_names(db.colorimetry)}; "
                f"metadata profiles {_names(db.metadata_profiles)}"
            ]
        case data_block.HdmiVendorDataBlock():
            return _describe_hdmi(db)
        case data_block.UnknownDataBlock():
            return [
                f"Unknown data block: tag {db.data_block_tag}"
                + (f", extended tag {db.extended_tag}" if db.extended_tag is not None else "")
                + f", payload {hex_bytes(db.payload)}"
            ]
        case _:
            assert False


def _describe_hdmi(db: data_block.HdmiVendorDataBlock) -> list[str]:
    lines = ["HDMI vendor-specific data block:"]
    address = ".".join(str(component) for component in db.source_physical_address)
    lines.append(f"{INDENT}Source physical address: {address}")
    if db.capabilities is not None:
        lines.append(f"{INDENT}Capabilities: {_names(db.capabilities)}")
    if db.max_tmds_clock_mhz is not None:
        lines.append(f"{INDENT}Max TMDS clock: {db.max_tmds_clock_mhz} MHz")
    if db.content_types is not None:
        lines.append(f"{INDENT}Content types: {_names(db.content_types)}")
    if db.latency is not None:
        lines.append(f"{INDENT}Latency: video {db.latency[0]}, audio {db.latency[1]}")
    if db.interlaced_latency is not None:
        lines.append(
            f"{INDENT}Interlaced latency: video {db.interlaced_latency[0]}, "
            f"audio {db.interlaced_latency[1]}"
        )
    hdmi_video = db.hdmi_video
    if hdmi_video is not None:
        lines.append(f"{INDENT}Image size meaning: {hdmi_video.image_size_meaning.name}")
        for hdmi_vic in hdmi_video.hdmi_vics:
            mode = traversal.hdmi_vic_mode(hdmi_vic)
            lines.append(
                f"{INDENT}HDMI VIC {hdmi_vic}: {mode if mode is not None else 'unknown'}"
            )
        support = hdmi_video.stereo_video_support
        if support is not None:
            lines.append(
                f"{INDENT}3D present"
                + (f", formats {_names(support.formats)}" if support.formats is not None else "")
                + (
                    f", VIC mask {hex_int(support.vic_mask, 4)}"
                    if support.vic_mask is not None
                    else ""
                )
            )
        for entry in hdmi_video.vic_3d_support:
            lines.append(
                f"{INDENT}3D support for SVD {entry.vic_index}: {entry.format.name}"
                + (f" ({entry.subsampling.name})" if entry.subsampling is not None else "")
            )
    return lines


def describe_cta861_block(block: Cta861Block, index: int) -> list[str]:
    lines = [f"{SECTION_PREFIX}Extension block {index}: CTA-861"]
    lines.append(f"Underscan: {block.underscan}")
    lines.append(f"Basic audio: {block.basic_audio}")
    lines.append(f"YCbCr 4:4:4: {block.ycbcr_444}")
    lines.append(f"YCbCr 4:2:2: {block.ycbcr_422}")
    lines.append(f"Native DTDs: {block.native_dtds}")
    for db in block.data_blocks:
        lines.extend(describe_data_block(db))
    lines.extend(describe_dtd(dtd) for dtd in block.dtds)
    return lines


def describe_edid(edid: EdidData) -> list[str]:
    """Describe every block, descriptor and data block of the EDID, one line per entry."""
    lines = describe_base_block(edid.base_block)
    for index, block in enumerate(edid.extension_blocks, start=1):
        lines.extend(describe_cta861_block(block, index))
    lines.append(f"{SECTION_PREFIX}Video modes")
    lines.extend(str(mode) for mode in traversal.iter_modes(edid))
    return lines
