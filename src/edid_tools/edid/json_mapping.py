"""Convert EDID models to and from plain dictionaries that can be serialized as JSON.

The dictionaries only contain JSON types: enumerations are written by member name, flag sets as
lists of member names, and opaque byte strings as hex text.  Missing keys raise KeyError, and
unknown enumeration names raise KeyError or ValueError.
"""

from __future__ import annotations

from typing import Any

import edid_tools.edid.data_block as data_block
import edid_tools.edid.descriptor as descriptor
from edid_tools.edid.base_block import (
    BaseBlock,
    BitDepth,
    DigitalDisplayType,
    EstablishedTimings1,
    EstablishedTimings2,
    ManufactureDate,
    ManufacturerTimings,
    ModelYear,
    VideoInterface,
)
from edid_tools.edid.cta861_block import Cta861Block
from edid_tools.edid.data_util import flag_names, hex_bytes, parse_flag_names, parse_hex_bytes
from edid_tools.edid.edid import EdidData
from edid_tools.edid.standard_timing import AspectRatio, StandardTiming

JsonDict = dict[str, Any]

KHZ = 1_000


# Standard timings


def standard_timing_to_dict(timing: StandardTiming | None) -> JsonDict | None:
    if timing is None:
        return None
    return {
        "x_resolution": timing.x_resolution,
        "aspect_ratio": timing.aspect_ratio.name,
        "v_frequency": timing.v_frequency,
    }


def standard_timing_from_dict(value: JsonDict | None) -> StandardTiming | None:
    if value is None:
        return None
    return StandardTiming(
        x_resolution=value["x_resolution"],
        aspect_ratio=AspectRatio[value["aspect_ratio"]],
        v_frequency=value["v_frequency"],
    )


# 18 byte descriptors
# Each kind of descriptor is recognized by a key that only it contains.


def _sync_to_dict(sync: descriptor.Sync) -> JsonDict:
    match sync:
        case descriptor.AnalogCompositeSync():
            return {
                "bipolar": sync.bipolar,
                "serrations": sync.serrations,
                "sync_on_rgb_signals": sync.sync_on_rgb_signals,
            }
        case descriptor.DigitalCompositeSync():
            return {"serrations": sync.serrations, "h_sync_polarity": sync.h_sync_polarity}
        case descriptor.DigitalSeparateSync():
            return {
                "v_sync_polarity": sync.v_sync_polarity,
                "h_sync_polarity": sync.h_sync_polarity,
            }
        case _:
            assert False


def _sync_from_dict(value: JsonDict) -> descriptor.Sync:
    if "bipolar" in value:
        return descriptor.AnalogCompositeSync(
            bipolar=value["bipolar"],
            serrations=value["serrations"],
            sync_on_rgb_signals=value["sync_on_rgb_signals"],
        )
    elif "v_sync_polarity" in value:
        return descriptor.DigitalSeparateSync(
            v_sync_polarity=value["v_sync_polarity"], h_sync_polarity=value["h_sync_polarity"]
        )
    return descriptor.DigitalCompositeSync(
        serrations=value["serrations"], h_sync_polarity=value["h_sync_polarity"]
    )


def dtd_to_dict(dtd: descriptor.DetailedTimingDescriptor) -> JsonDict:
    return {
        "pixel_clock_khz": dtd.pixel_clock_hz // KHZ,
        "h_res": dtd.h_res,
        "v_res": dtd.v_res,
        "h_blanking": dtd.h_blanking,
        "v_blanking": dtd.v_blanking,
        "h_front_porch": dtd.h_front_porch,
        "v_front_porch": dtd.v_front_porch,
        "h_sync_width": dtd.h_sync_width,
        "v_sync_width": dtd.v_sync_width,
        "h_image_size": dtd.h_image_size,
        "v_image_size": dtd.v_image_size,
        "h_border": dtd.h_border,
        "v_border": dtd.v_border,
        "interlaced": dtd.features.interlaced,
        "stereo_mode": dtd.features.stereo_mode.name,
        "sync": _sync_to_dict(dtd.features.sync),
    }


def dtd_from_dict(value: JsonDict) -> descriptor.DetailedTimingDescriptor:
    return descriptor.DetailedTimingDescriptor(
        pixel_clock_hz=value["pixel_clock_khz"] * KHZ,
        h_res=value["h_res"],
        v_res=value["v_res"],
        h_blanking=value["h_blanking"],
        v_blanking=value["v_blanking"],
        h_front_porch=value["h_front_porch"],
        v_front_porch=value["v_front_porch"],
        h_sync_width=value["h_sync_width"],
        v_sync_width=value["v_sync_width"],
        h_image_size=value["h_image_size"],
        v_image_size=value["v_image_size"],
        h_border=value["h_border"],
        v_border=value["v_border"],
        features=descriptor.FeaturesBitmap(
            interlaced=value["interlaced"],
            stereo_mode=descriptor.StereoMode[value["stereo_mode"]],
            sync=_sync_from_dict(value["sync"]),
        ),
    )


def _ascii_string_to_dict(key: str, desc: descriptor.AsciiString) -> JsonDict:
    result: JsonDict = {key: desc.text}
    if desc.padding is not None:
        result["padding"] = hex_bytes(desc.padding)
    return result


def descriptor_to_dict(desc: descriptor.Descriptor) -> JsonDict:
    match desc:
        case descriptor.DetailedTimingDescriptor():
            return dtd_to_dict(desc)
        case descriptor.DisplayProductName():
            return _ascii_string_to_dict("display_product_name", desc)
        case descriptor.DisplaySerialNumber():
            return _ascii_string_to_dict("display_serial_number", desc)
        case descriptor.AlphanumericData():
            return _ascii_string_to_dict("alphanumeric_data", desc)
        case descriptor.DisplayRangeLimits():
            return {
                "min_v_rate_hz": desc.min_v_rate_hz,
                "max_v_rate_hz": desc.max_v_rate_hz,
                "min_h_rate_khz": desc.min_h_rate_khz,
                "max_h_rate_khz": desc.max_h_rate_khz,
                "max_pixel_clock_rate_mhz": desc.max_pixel_clock_rate_mhz,
                "video_timing_support": desc.video_timing_support.name,
                "timing_parameters": (
                    hex_bytes(desc.timing_parameters)
                    if desc.timing_parameters is not None
                    else None
                ),
            }
        case descriptor.EstablishedTimings3():
            return {
                "established_timings_iii": [
                    name for flags in desc.timing_bytes() for name in flag_names(flags)
                ],
                "revision": desc.revision,
            }
        case descriptor.Dummy():
            return {"dummy": True}
        case _:
            assert False


def _established_timings_3_from_names(names: list[str], revision: int) -> descriptor.Descriptor:
    timing_bytes = []
    for flag_type in descriptor.ESTABLISHED_TIMINGS_3_BYTES:
        timing_bytes.append(
            parse_flag_names(flag_type, [name for name in names if name in flag_type.__members__])
        )
    unknown_names = set(names) - {
        name
        for flag_type in descriptor.ESTABLISHED_TIMINGS_3_BYTES
        for name in flag_type.__members__
    }
    if unknown_names:
        raise KeyError(f"Unknown established timings III: {sorted(unknown_names)}")
    return descriptor.EstablishedTimings3(
        byte_6=descriptor.EstablishedTimings3Byte6(timing_bytes[0]),
        byte_7=descriptor.EstablishedTimings3Byte7(timing_bytes[1]),
        byte_8=descriptor.EstablishedTimings3Byte8(timing_bytes[2]),
        byte_9=descriptor.EstablishedTimings3Byte9(timing_bytes[3]),
        byte_10=descriptor.EstablishedTimings3Byte10(timing_bytes[4]),
        byte_11=descriptor.EstablishedTimings3Byte11(timing_bytes[5]),
        revision=revision,
    )


def _padding_from_dict(value: JsonDict) -> bytes | None:
    padding = value.get("padding")
    return parse_hex_bytes(padding) if padding is not None else None


def descriptor_from_dict(value: JsonDict) -> descriptor.Descriptor:
    if "pixel_clock_khz" in value:
        return dtd_from_dict(value)
    elif "display_product_name" in value:
        return descriptor.DisplayProductName(
            text=value["display_product_name"], padding=_padding_from_dict(value)
        )
    elif "display_serial_number" in value:
        return descriptor.DisplaySerialNumber(
            text=value["display_serial_number"], padding=_padding_from_dict(value)
        )
    elif "alphanumeric_data" in value:
        return descriptor.AlphanumericData(
            text=value["alphanumeric_data"], padding=_padding_from_dict(value)
        )
    elif "min_v_rate_hz" in value:
        timing_parameters = value.get("timing_parameters")
        return descriptor.DisplayRangeLimits(
            min_v_rate_hz=value["min_v_rate_hz"],
            max_v_rate_hz=value["max_v_rate_hz"],
            min_h_rate_khz=value["min_h_rate_khz"],
            max_h_rate_khz=value["max_h_rate_khz"],
            max_pixel_clock_rate_mhz=value["max_pixel_clock_rate_mhz"],
            video_timing_support=descriptor.VideoTimingSupport[value["video_timing_support"]],
            timing_parameters=(
                parse_hex_bytes(timing_parameters) if timing_parameters is not None else None
            ),
        )
    elif "established_timings_iii" in value:
        return _established_timings_3_from_names(
            value["established_timings_iii"],
            value.get("revision", descriptor.ESTABLISHED_TIMINGS_III_REVISION),
        )
    elif "dummy" in value:
        return descriptor.Dummy()
    raise ValueError(f"Unrecognized 18 byte descriptor with keys {sorted(value.keys())}.")


# Base block


def base_block_to_dict(block: BaseBlock) -> JsonDict:
    result: JsonDict = {
        "manufacturer_id": block.manufacturer_id,
        "product_code": block.product_code,
        "serial_number": block.serial_number,
    }
    match block.manufacture_date:
        case ManufactureDate():
            result["week_of_manufacture"] = block.manufacture_date.week
            result["year_of_manufacture"] = block.manufacture_date.year
        case ModelYear():
            result["model_year"] = block.manufacture_date.model_year
        case _:
            assert False
    result |= {
        "edid_major_version": block.edid_major_version,
        "edid_minor_version": block.edid_minor_version,
        "bit_depth": block.bit_depth.name,
        "video_interface": block.video_interface.name,
        "h_screen_size": block.h_screen_size,
        "v_screen_size": block.v_screen_size,
        "gamma": block.gamma,
        "dpms_standby": block.dpms_standby,
        "dpms_suspend": block.dpms_suspend,
        "dpms_active_off": block.dpms_active_off,
        "digital_display_type": block.display_type.name,
        "srgb_is_primary": block.standard_srgb,
        "preferred_timing_mode": block.preferred_timing_mode,
        "continuous_timings": block.continuous_timings,
        "chromaticity": list(block.chromaticity),
        "established_timings_1": flag_names(block.established_timings_1),
        "established_timings_2": flag_names(block.established_timings_2),
        "established_timings_3": flag_names(block.manufacturer_timings),
        "standard_timings": [standard_timing_to_dict(t) for t in block.standard_timings],
        "eighteen_byte_descriptors": [descriptor_to_dict(d) for d in block.descriptors],
    }
    return result


def base_block_from_dict(value: JsonDict) -> BaseBlock:
    return BaseBlock(
        manufacturer_id=value["manufacturer_id"],
        product_code=value["product_code"],
        serial_number=value["serial_number"],
        manufacture_date=(
            ModelYear(model_year=value["model_year"])
            if "model_year" in value
            else ManufactureDate(
                week=value["week_of_manufacture"], year=value["year_of_manufacture"]
            )
        ),
        edid_major_version=value["edid_major_version"],
        edid_minor_version=value["edid_minor_version"],
        bit_depth=BitDepth[value["bit_depth"]],
        video_interface=VideoInterface[value["video_interface"]],
        h_screen_size=value["h_screen_size"],
        v_screen_size=value["v_screen_size"],
        gamma=float(value["gamma"]),
        dpms_standby=value["dpms_standby"],
        dpms_suspend=value["dpms_suspend"],
        dpms_active_off=value["dpms_active_off"],
        display_type=DigitalDisplayType[value["digital_display_type"]],
        standard_srgb=value["srgb_is_primary"],
        preferred_timing_mode=value["preferred_timing_mode"],
        continuous_timings=value["continuous_timings"],
        chromaticity=bytes(value["chromaticity"]),
        established_timings_1=parse_flag_names(
            EstablishedTimings1, value["established_timings_1"]
        ),
        established_timings_2=parse_flag_names(
            EstablishedTimings2, value["established_timings_2"]
        ),
        manufacturer_timings=parse_flag_names(
            ManufacturerTimings, value["established_timings_3"]
        ),
        standard_timings=[standard_timing_from_dict(t) for t in value["standard_timings"]],
        descriptors=[descriptor_from_dict(d) for d in value["eighteen_byte_descriptors"]],
    )


# CTA-861 data blocks
# Each data block is a dictionary with a single key naming its kind.


def _latency_to_dict(latency: tuple[int, int] | None) -> JsonDict | None:
    if latency is None:
        return None
    return {"video": latency[0], "audio": latency[1]}


def _latency_from_dict(value: JsonDict | None) -> tuple[int, int] | None:
    if value is None:
        return None
    return (value["video"], value["audio"])


def _hdmi_video_to_dict(hdmi_video: data_block.HdmiVideoSubblock | None) -> JsonDict | None:
    if hdmi_video is None:
        return None
    support = hdmi_video.stereo_video_support
    return {
        "image_size_meaning": hdmi_video.image_size_meaning.name,
        "hdmi_vics": list(hdmi_video.hdmi_vics),
        "stereo_video_support": (
            {
                "formats": flag_names(support.formats) if support.formats is not None else None,
                "vic_mask": support.vic_mask,
            }
            if support is not None
            else None
        ),
        "vic_3d_support": [
            {
                "vic_index": entry.vic_index,
                "format": entry.format.name,
                "subsampling": entry.subsampling.name if entry.subsampling is not None else None,
            }
            for entry in hdmi_video.vic_3d_support
        ],
    }


def _hdmi_video_from_dict(value: JsonDict | None) -> data_block.HdmiVideoSubblock | None:
    if value is None:
        return None
    support = value["stereo_video_support"]
    return data_block.HdmiVideoSubblock(
        image_size_meaning=data_block.ImageSizeMeaning[value["image_size_meaning"]],
        hdmi_vics=list(value["hdmi_vics"]),
        stereo_video_support=(
            data_block.StereoVideoSupport(
                formats=(
                    parse_flag_names(data_block.StereoVideoFormat, support["formats"])
                    if support["formats"] is not None
                    else None
                ),
                vic_mask=support["vic_mask"],
            )
            if support is not None
            else None
        ),
        vic_3d_support=[
            data_block.Vic3dSupport(
                vic_index=entry["vic_index"],
                format=data_block.StereoVideoTransmissionFormat[entry["format"]],
                subsampling=(
                    data_block.StereoVideoSubsampling[entry["subsampling"]]
                    if entry["subsampling"] is not None
                    else None
                ),
            )
            for entry in value["vic_3d_support"]
        ],
    )


def _hdmi_to_dict(db: data_block.HdmiVendorDataBlock) -> JsonDict:
    return {
        "source_physical_address": list(db.source_physical_address),
        "capabilities": flag_names(db.capabilities) if db.capabilities is not None else None,
        "max_tmds_clock_mhz": db.max_tmds_clock_mhz,
        "content_types": flag_names(db.content_types) if db.content_types is not None else None,
        "latency": _latency_to_dict(db.latency),
        "interlaced_latency": _latency_to_dict(db.interlaced_latency),
        "hdmi_video": _hdmi_video_to_dict(db.hdmi_video),
    }


def _hdmi_from_dict(value: JsonDict) -> data_block.HdmiVendorDataBlock:
    address = value["source_physical_address"]
    if len(address) != 4:
        raise ValueError("HDMI source physical address must have exactly 4 components.")
    return data_block.HdmiVendorDataBlock(
        source_physical_address=(address[0], address[1], address[2], address[3]),
        capabilities=(
            parse_flag_names(data_block.HdmiCapabilities, value["capabilities"])
            if value.get("capabilities") is not None
            else None
        ),
        max_tmds_clock_mhz=value.get("max_tmds_clock_mhz"),
        content_types=(
            parse_flag_names(data_block.ContentType, value["content_types"])
            if value.get("content_types") is not None
            else None
        ),
        latency=_latency_from_dict(value.get("latency")),
        interlaced_latency=_latency_from_dict(value.get("interlaced_latency")),
        hdmi_video=_hdmi_video_from_dict(value.get("hdmi_video")),
    )


def data_block_to_dict(db: data_block.DataBlock) -> JsonDict:
    match db:
        case data_block.VideoDataBlock():
            # Raw SVD values, so that native VICs keep their flag.
            return {"vics": list(db.svds)}
        case data_block.AudioDataBlock():
            return {
                "sads": [
                    {
                        "format": sad.format.name,
                        "channels": sad.channels,
                        "sampling_frequencies": flag_names(sad.sampling_frequencies),
                        "detail": sad.detail,
                    }
                    for sad in db.sads
                ]
            }
        case data_block.SpeakerAllocationDataBlock():
            return {
                "speaker_allocation": {
                    "speakers": flag_names(db.speaker_allocation),
                    "reserved": hex_bytes(db.reserved),
                }
            }
        case data_block.YCbCr420CapabilityMapDataBlock():
            return {"ycbcr420_capability_map": sorted(db.svd_indices)}
        case data_block.ColorimetryDataBlock():
            return {
                "colorimetry": {
                    "colorimetry": flag_names(db.colorimetry),
                    "metadata_profiles": flag_names(db.metadata_profiles),
                }
            }
        case data_block.HdmiVendorDataBlock():
            return {"hdmi": _hdmi_to_dict(db)}
        case data_block.UnknownDataBlock():
            return {
                "unknown": {
                    "tag": db.data_block_tag,
                    "extended_tag": db.extended_tag,
                    "payload": hex_bytes(db.payload),
                }
            }
        case _:
            assert False


def data_block_from_dict(value: JsonDict) -> data_block.DataBlock:
    if "vics" in value:
        return data_block.VideoDataBlock(svds=list(value["vics"]))
    elif "sads" in value:
        return data_block.AudioDataBlock(
            sads=[
                data_block.ShortAudioDescriptor(
                    format=data_block.AudioFormat[sad["format"]],
                    channels=sad["channels"],
                    sampling_frequencies=parse_flag_names(
                        data_block.SamplingFrequency, sad["sampling_frequencies"]
                    ),
                    detail=sad["detail"],
                )
                for sad in value["sads"]
            ]
        )
    elif "speaker_allocation" in value:
        allocation = value["speaker_allocation"]
        return data_block.SpeakerAllocationDataBlock(
            speaker_allocation=parse_flag_names(data_block.Speaker, allocation["speakers"]),
            reserved=parse_hex_bytes(allocation.get("reserved", "0000")),
        )
    elif "ycbcr420_capability_map" in value:
        return data_block.YCbCr420CapabilityMapDataBlock(
            svd_indices=frozenset(value["ycbcr420_capability_map"])
        )
    elif "colorimetry" in value:
        colorimetry = value["colorimetry"]
        return data_block.ColorimetryDataBlock(
            colorimetry=parse_flag_names(data_block.Colorimetry, colorimetry["colorimetry"]),
            metadata_profiles=parse_flag_names(
                data_block.GamutMetadataProfile, colorimetry["metadata_profiles"]
            ),
        )
    elif "hdmi" in value:
        return _hdmi_from_dict(value["hdmi"])
    elif "unknown" in value:
        unknown = value["unknown"]
        return data_block.UnknownDataBlock(
            data_block_tag=unknown["tag"],
            extended_tag=unknown.get("extended_tag"),
            payload=parse_hex_bytes(unknown["payload"]),
        )
    raise ValueError(f"Unrecognized data block with keys {sorted(value.keys())}.")


# CTA-861 extension block


def cta861_block_to_dict(block: Cta861Block) -> JsonDict:
    return {
        "underscan": block.underscan,
        "basic_audio": block.basic_audio,
        "ycbcr_444": block.ycbcr_444,
        "ycbcr_422": block.ycbcr_422,
        "native_dtds": block.native_dtds,
        "data_blocks": [data_block_to_dict(db) for db in block.data_blocks],
        "detailed_timing_descriptors": [dtd_to_dict(dtd) for dtd in block.dtds],
        "keep_dtd_offset": block.keep_dtd_offset,
    }


def cta861_block_from_dict(value: JsonDict) -> Cta861Block:
    return Cta861Block(
        underscan=value["underscan"],
        basic_audio=value["basic_audio"],
        ycbcr_444=value["ycbcr_444"],
        ycbcr_422=value["ycbcr_422"],
        native_dtds=value.get("native_dtds", 0),
        data_blocks=[data_block_from_dict(db) for db in value["data_blocks"]],
        dtds=[dtd_from_dict(dtd) for dtd in value["detailed_timing_descriptors"]],
        keep_dtd_offset=value.get("keep_dtd_offset", False),
    )


# Complete EDID


def edid_to_dict(edid: EdidData) -> JsonDict:
    return {
        "base_block": base_block_to_dict(edid.base_block),
        "extension_blocks": [cta861_block_to_dict(block) for block in edid.extension_blocks],
    }


def edid_from_dict(value: JsonDict) -> EdidData:
    return EdidData(
        base_block=base_block_from_dict(value["base_block"]),
        extension_blocks=[cta861_block_from_dict(block) for block in value["extension_blocks"]],
    )
