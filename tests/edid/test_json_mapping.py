import json
from dataclasses import replace
from typing import Any

import pytest

import edid_tools.edid.base_block as base_block
import edid_tools.edid.data_block as data_block
import edid_tools.edid.descriptor as descriptor
import edid_tools.edid.edid as edid
import edid_tools.edid.json_mapping as json_mapping
import tests.edid.util as util
from edid_tools.edid.cta861_block import Cta861Block


def json_round_trip(value: Any) -> Any:
    """Serialize to JSON text and back, so that only JSON types survive."""
    return json.loads(json.dumps(value))


@pytest.mark.parametrize(
    "edid_data",
    [
        edid.EdidData(base_block=util.make_base_block()),
        util.make_edid(),
        edid.EdidData(
            base_block=util.make_base_block(),
            extension_blocks=[Cta861Block(keep_dtd_offset=True)],
        ),
    ],
    ids=["base block only", "with CTA-861 block", "with empty CTA-861 block"],
)
def test_edid_round_trip(edid_data: edid.EdidData) -> None:
    value = json_round_trip(json_mapping.edid_to_dict(edid_data))
    assert json_mapping.edid_from_dict(value) == edid_data


def test_edid_to_dict() -> None:
    value = json_round_trip(json_mapping.edid_to_dict(util.make_edid()))

    base = value["base_block"]
    assert base["manufacturer_id"] == "ABC"
    assert base["product_code"] == 1234
    assert base["week_of_manufacture"] == 2
    assert base["year_of_manufacture"] == 2020
    assert "model_year" not in base
    assert base["video_interface"] == "HDMI_A"
    assert base["gamma"] == 1.0
    assert base["chromaticity"] == [0xEE, 0x91, 0xA3, 0x54, 0x4C, 0x99, 0x26, 0x0F, 0x50, 0x54]
    assert base["established_timings_2"] == ["ET_1024x768_87i", "ET_1024x768_70"]
    assert base["established_timings_3"] == ["ET_1152x870_75"]
    assert base["standard_timings"][0] == {
        "x_resolution": 1152,
        "aspect_ratio": "AR_4_3",
        "v_frequency": 75,
    }
    assert base["standard_timings"][7] is None
    descriptors = base["eighteen_byte_descriptors"]
    assert descriptors[0]["pixel_clock_khz"] == 148_500
    assert descriptors[0]["sync"] == {"v_sync_polarity": True, "h_sync_polarity": True}
    assert descriptors[1]["video_timing_support"] == "BARE_LIMITS"
    assert descriptors[1]["timing_parameters"] is None
    assert descriptors[2] == {"display_product_name": "Hello"}
    assert descriptors[3] == {"dummy": True}

    (cta861,) = value["extension_blocks"]
    assert cta861["underscan"] is True
    assert cta861["native_dtds"] == 0
    assert cta861["data_blocks"][0] == {"vics": [16, 4, 31, 19, 2, 18, 1]}
    assert cta861["data_blocks"][1] == {
        "sads": [
            {
                "format": "LPCM",
                "channels": 2,
                "sampling_frequencies": ["SF_48_KHZ", "SF_44_1_KHZ", "SF_32_KHZ"],
                "detail": 1,
            }
        ]
    }
    assert cta861["data_blocks"][2] == {
        "speaker_allocation": {"speakers": ["FC", "FL_FR"], "reserved": "0x0000"}
    }
    hdmi = cta861["data_blocks"][3]["hdmi"]
    assert hdmi["source_physical_address"] == [1, 0, 0, 0]
    assert hdmi["max_tmds_clock_mhz"] == 340
    assert hdmi["latency"] is None
    assert hdmi["hdmi_video"]["hdmi_vics"] == [1, 2, 3, 4]
    assert hdmi["hdmi_video"]["stereo_video_support"] == {
        "formats": ["SIDE_BY_SIDE_HALF_HORIZONTAL", "TOP_AND_BOTTOM", "FRAME_PACKING"],
        "vic_mask": 0,
    }
    assert cta861["data_blocks"][4] == {
        "colorimetry": {
            "colorimetry": ["OPRGB", "BT2020_RGB", "DEFAULT_RGB", "ICTCP"],
            "metadata_profiles": ["MD0"],
        }
    }
    assert len(cta861["detailed_timing_descriptors"]) == 1


def test_model_year() -> None:
    block = util.make_base_block()
    block.manufacture_date = base_block.ModelYear(model_year=2022)
    value = json_round_trip(json_mapping.base_block_to_dict(block))
    assert value["model_year"] == 2022
    assert "week_of_manufacture" not in value
    assert json_mapping.base_block_from_dict(value) == block


@pytest.mark.parametrize(
    "desc",
    [
        util.DTD_1080P_60,
        replace(
            util.DTD_1080P_60,
            features=descriptor.FeaturesBitmap(
                interlaced=True,
                stereo_mode=descriptor.StereoMode.FIELD_SEQUENTIAL_L_R,
                sync=descriptor.AnalogCompositeSync(
                    bipolar=True, serrations=False, sync_on_rgb_signals=True
                ),
            ),
        ),
        replace(
            util.DTD_1080P_60,
            features=descriptor.FeaturesBitmap(
                sync=descriptor.DigitalCompositeSync(serrations=True, h_sync_polarity=False)
            ),
        ),
        util.RANGE_LIMITS,
        descriptor.DisplayRangeLimits(
            min_v_rate_hz=24,
            max_v_rate_hz=300,
            min_h_rate_khz=15,
            max_h_rate_khz=135,
            max_pixel_clock_rate_mhz=600,
            video_timing_support=descriptor.VideoTimingSupport.CVT,
            timing_parameters=bytes.fromhex("11 44 3C 88 F8 00 00"),
        ),
        util.PRODUCT_NAME,
        descriptor.DisplaySerialNumber(text="SN-0001"),
        descriptor.AlphanumericData(text="Rev B"),
        descriptor.AlphanumericData(text="AB", padding=b"\n" * 11),
        descriptor.EstablishedTimings3(
            byte_6=descriptor.EstablishedTimings3Byte6.ET_640x480_85,
            byte_8=(
                descriptor.EstablishedTimings3Byte8.ET_1440x900_60
                | descriptor.EstablishedTimings3Byte8.ET_1440x900_60_RB
            ),
            byte_11=descriptor.EstablishedTimings3Byte11.RESERVED_0,
        ),
        descriptor.Dummy(),
    ],
    ids=lambda d: type(d).__name__,
)
def test_descriptor_round_trip(desc: descriptor.Descriptor) -> None:
    value = json_round_trip(json_mapping.descriptor_to_dict(desc))
    assert json_mapping.descriptor_from_dict(value) == desc


@pytest.mark.parametrize(
    "db",
    [
        data_block.VideoDataBlock(svds=[0x90, 4, 0xC1]),
        data_block.AudioDataBlock(),
        data_block.SpeakerAllocationDataBlock(
            speaker_allocation=data_block.Speaker.FL_FR, reserved=bytes.fromhex("01 02")
        ),
        data_block.YCbCr420CapabilityMapDataBlock(svd_indices=frozenset({1, 9})),
        data_block.ColorimetryDataBlock(),
        data_block.HdmiVendorDataBlock(source_physical_address=(1, 2, 3, 4)),
        data_block.HdmiVendorDataBlock(
            source_physical_address=(2, 0, 0, 0),
            capabilities=data_block.HdmiCapabilities(0),
            max_tmds_clock_mhz=0,
            content_types=data_block.ContentType.GRAPHICS | data_block.ContentType.GAME,
            latency=(0x3C, 0x28),
            interlaced_latency=(0x50, 0x32),
            hdmi_video=data_block.HdmiVideoSubblock(
                image_size_meaning=data_block.ImageSizeMeaning.ASPECT_RATIO_ONLY,
                stereo_video_support=data_block.StereoVideoSupport(),
                vic_3d_support=[
                    data_block.Vic3dSupport(
                        vic_index=1,
                        format=data_block.StereoVideoTransmissionFormat.SIDE_BY_SIDE_HALF,
                        subsampling=data_block.StereoVideoSubsampling.HORIZONTAL,
                    ),
                ],
            ),
        ),
        data_block.UnknownDataBlock(
            data_block_tag=data_block.Tag.EXTENDED, extended_tag=0x06, payload=b"\x01\x02"
        ),
        data_block.UnknownDataBlock(data_block_tag=data_block.Tag.VENDOR_SPECIFIC),
    ],
    ids=lambda db: type(db).__name__,
)
def test_data_block_round_trip(db: data_block.DataBlock) -> None:
    value = json_round_trip(json_mapping.data_block_to_dict(db))
    assert json_mapping.data_block_from_dict(value) == db


def test_optional_keys() -> None:
    # Optional keys may be left out of hand-written JSON.
    assert json_mapping.data_block_from_dict(
        {"speaker_allocation": {"speakers": ["FL_FR"]}}
    ) == data_block.SpeakerAllocationDataBlock(speaker_allocation=data_block.Speaker.FL_FR)
    assert json_mapping.data_block_from_dict(
        {"hdmi": {"source_physical_address": [1, 0, 0, 0]}}
    ) == data_block.HdmiVendorDataBlock(source_physical_address=(1, 0, 0, 0))
    assert json_mapping.descriptor_from_dict(
        {"established_timings_iii": []}
    ) == descriptor.EstablishedTimings3()
    assert json_mapping.descriptor_from_dict(
        {"display_product_name": "Hello"}
    ) == descriptor.DisplayProductName(text="Hello")


def test_from_dict_errors() -> None:
    with pytest.raises(ValueError, match="Unrecognized 18 byte descriptor with keys"):
        json_mapping.descriptor_from_dict({"something": 1})
    with pytest.raises(ValueError, match="Unrecognized data block with keys"):
        json_mapping.data_block_from_dict({"something": 1})
    with pytest.raises(ValueError, match="must have exactly 4 components."):
        json_mapping.data_block_from_dict({"hdmi": {"source_physical_address": [1, 0, 0]}})
    with pytest.raises(KeyError, match="Unknown established timings III"):
        json_mapping.descriptor_from_dict({"established_timings_iii": ["ET_1x1_60"]})
    with pytest.raises(KeyError):
        json_mapping.data_block_from_dict({"sads": [{"format": "NOT_A_FORMAT"}]})
    with pytest.raises(KeyError):
        json_mapping.edid_from_dict({"base_block": {}})
