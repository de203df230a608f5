from dataclasses import dataclass, replace

import pytest

import edid_tools.edid.data_block as data_block
import tests.edid.util as util
from edid_tools.edid.common import (
    InvalidDataBlockLengthError,
    InvalidOuiError,
    ValueOutOfRangeError,
)

# ======================== REUSABLE TEST CASES ========================


@dataclass
class DataBlockBinaryTestCase:
    name: str
    input: str
    parsed: data_block.DataBlock
    output: str | None = None


def run_data_block_binary_test_case(tc: DataBlockBinaryTestCase) -> None:
    """Test round trip of a data block from binary, to parsed, and then back to binary."""
    input = bytes.fromhex(tc.input)
    b = data_block.parse_binary(input)
    assert b == tc.parsed
    output = bytes.fromhex(tc.output) if tc.output is not None else input
    assert b.to_binary() == output
    assert b.size() == len(output)


@dataclass
class DataBlockParseErrorTestCase:
    name: str
    input: str
    error: type[ValueError]
    failure: str


def run_data_block_parse_error_test_case(tc: DataBlockParseErrorTestCase) -> None:
    with pytest.raises(tc.error, match=tc.failure):
        data_block.parse_binary(bytes.fromhex(tc.input))


@dataclass
class DataBlockValidateCase:
    name: str
    input: data_block.DataBlock
    failure: str


def run_data_block_validate_case(tc: DataBlockValidateCase) -> None:
    """Test validation failures when writing a data block to binary."""
    assert tc.input.validate() is not None
    with pytest.raises(ValueOutOfRangeError, match=tc.failure):
        tc.input.to_binary()


def run_data_block_model_round_trip(db: data_block.DataBlock) -> None:
    """Test round trip of a data block from the model, to binary, and then back to the model."""
    b = db.to_binary()
    assert data_block.parse_binary(b) == db
    assert db.size() == len(b)


# ======================== VIDEO DATA BLOCK TESTS ========================


@pytest.mark.parametrize(
    "tc",
    [
        DataBlockBinaryTestCase(
            "testdata block",
            "47 10 04 1F 13 02 12 01",
            data_block.VideoDataBlock(svds=[16, 4, 31, 19, 2, 18, 1]),
        ),
        DataBlockBinaryTestCase(
            "native and high VICs",
            "43 90 04 C1",
            data_block.VideoDataBlock(svds=[0x90, 4, 0xC1]),
        ),
        DataBlockBinaryTestCase("empty", "40", data_block.VideoDataBlock()),
    ],
    ids=lambda tc: tc.name,
)
def test_video_binary(tc: DataBlockBinaryTestCase) -> None:
    run_data_block_binary_test_case(tc)


def test_video_vics() -> None:
    block = data_block.VideoDataBlock(svds=[0x90, 4, 0xC1, 0x81])
    assert block.vics == [16, 4, 193, 1]
    assert block.native_vics == [16, 1]

    assert data_block.svd_to_vic(128) == 128
    assert data_block.svd_to_vic(129) == 1
    assert data_block.svd_to_vic(192) == 64
    assert data_block.svd_to_vic(193) == 193


def test_video_too_long() -> None:
    block = data_block.VideoDataBlock(svds=list(range(1, 33)))
    assert block.validate() is None
    with pytest.raises(
        InvalidDataBlockLengthError,
        match="VideoDataBlock payload of 32 bytes is longer than the maximum of 31 bytes.",
    ):
        block.to_binary()


# ======================== AUDIO DATA BLOCK TESTS ========================


@pytest.mark.parametrize(
    "tc",
    [
        DataBlockBinaryTestCase(
            "L-PCM stereo",
            "23 09 07 01",
            data_block.AudioDataBlock(sads=[util.LPCM_STEREO]),
        ),
        DataBlockBinaryTestCase(
            "L-PCM and AC-3",
            "26 09 07 01 15 07 50",
            data_block.AudioDataBlock(
                sads=[
                    util.LPCM_STEREO,
                    data_block.ShortAudioDescriptor(
                        format=data_block.AudioFormat.AC3,
                        channels=6,
                        sampling_frequencies=(
                            data_block.SamplingFrequency.SF_48_KHZ
                            | data_block.SamplingFrequency.SF_44_1_KHZ
                            | data_block.SamplingFrequency.SF_32_KHZ
                        ),
                        detail=0x50,
                    ),
                ]
            ),
        ),
    ],
    ids=lambda tc: tc.name,
)
def test_audio_binary(tc: DataBlockBinaryTestCase) -> None:
    run_data_block_binary_test_case(tc)


def test_audio_lpcm_bit_depths() -> None:
    assert util.LPCM_STEREO.lpcm_bit_depths == data_block.LpcmBitDepth.BD_16
    assert replace(util.LPCM_STEREO, format=data_block.AudioFormat.AC3).lpcm_bit_depths is None


# ======================== SPEAKER ALLOCATION DATA BLOCK TESTS ========================


@pytest.mark.parametrize(
    "tc",
    [
        DataBlockBinaryTestCase(
            "front speakers",
            "83 05 00 00",
            data_block.SpeakerAllocationDataBlock(
                speaker_allocation=data_block.Speaker.FC | data_block.Speaker.FL_FR
            ),
        ),
        DataBlockBinaryTestCase(
            "reserved bytes are retained",
            "83 4F 01 02",
            data_block.SpeakerAllocationDataBlock(
                speaker_allocation=(
                    data_block.Speaker.RLC_RRC
                    | data_block.Speaker.RL_RR
                    | data_block.Speaker.FC
                    | data_block.Speaker.LFE
                    | data_block.Speaker.FL_FR
                ),
                reserved=bytes.fromhex("01 02"),
            ),
        ),
    ],
    ids=lambda tc: tc.name,
)
def test_speaker_binary(tc: DataBlockBinaryTestCase) -> None:
    run_data_block_binary_test_case(tc)


# ======================== COLORIMETRY DATA BLOCK TESTS ========================


@pytest.mark.parametrize(
    "tc",
    [
        DataBlockBinaryTestCase(
            "testdata block",
            "E3 05 90 51",
            data_block.ColorimetryDataBlock(
                colorimetry=(
                    data_block.Colorimetry.OPRGB
                    | data_block.Colorimetry.BT2020_RGB
                    | data_block.Colorimetry.ICTCP
                    | data_block.Colorimetry.DEFAULT_RGB
                ),
                metadata_profiles=data_block.GamutMetadataProfile.MD0,
            ),
        ),
        DataBlockBinaryTestCase(
            "all flags",
            "E3 05 FF FF",
            data_block.ColorimetryDataBlock(
                colorimetry=data_block.Colorimetry(0xFFF),
                metadata_profiles=data_block.GamutMetadataProfile(0xF),
            ),
        ),
        DataBlockBinaryTestCase("no flags", "E3 05 00 00", data_block.ColorimetryDataBlock()),
    ],
    ids=lambda tc: tc.name,
)
def test_colorimetry_binary(tc: DataBlockBinaryTestCase) -> None:
    run_data_block_binary_test_case(tc)


# ======================== YCBCR 4:2:0 CAPABILITY MAP DATA BLOCK TESTS ========================


@pytest.mark.parametrize(
    "tc",
    [
        DataBlockBinaryTestCase(
            "several SVDs",
            "E3 0F 83 01",
            data_block.YCbCr420CapabilityMapDataBlock(svd_indices=frozenset({1, 2, 8, 9})),
        ),
        DataBlockBinaryTestCase(
            "all SVDs",
            "E1 0F",
            data_block.YCbCr420CapabilityMapDataBlock(),
        ),
        DataBlockBinaryTestCase(
            "trailing zero bytes are dropped",
            "E3 0F 01 00",
            data_block.YCbCr420CapabilityMapDataBlock(svd_indices=frozenset({1})),
            output="E2 0F 01",
        ),
    ],
    ids=lambda tc: tc.name,
)
def test_ycbcr420_binary(tc: DataBlockBinaryTestCase) -> None:
    run_data_block_binary_test_case(tc)


# ======================== HDMI VENDOR-SPECIFIC DATA BLOCK TESTS ========================


@pytest.mark.parametrize(
    "tc",
    [
        DataBlockBinaryTestCase("testdata block", util.HDMI_BYTES, util.make_hdmi_block()),
        DataBlockBinaryTestCase(
            "minimum length",
            "65 03 0C 00 10 00",
            data_block.HdmiVendorDataBlock(source_physical_address=(1, 0, 0, 0)),
        ),
        DataBlockBinaryTestCase(
            "capabilities only",
            "66 03 0C 00 12 34 80",
            data_block.HdmiVendorDataBlock(
                source_physical_address=(1, 2, 3, 4),
                capabilities=data_block.HdmiCapabilities.SUPPORTS_AI,
            ),
        ),
        DataBlockBinaryTestCase(
            "latencies and individual 3D formats",
            "71 03 0C 00 20 00 00 00 E1 3C 28 50 32 88 03 06 18 10",
            data_block.HdmiVendorDataBlock(
                source_physical_address=(2, 0, 0, 0),
                capabilities=data_block.HdmiCapabilities(0),
                max_tmds_clock_mhz=0,
                content_types=data_block.ContentType.GRAPHICS,
                latency=(0x3C, 0x28),
                interlaced_latency=(0x50, 0x32),
                hdmi_video=data_block.HdmiVideoSubblock(
                    image_size_meaning=data_block.ImageSizeMeaning.ASPECT_RATIO_ONLY,
                    stereo_video_support=data_block.StereoVideoSupport(),
                    vic_3d_support=[
                        data_block.Vic3dSupport(
                            vic_index=0,
                            format=data_block.StereoVideoTransmissionFormat.TOP_AND_BOTTOM,
                        ),
                        data_block.Vic3dSupport(
                            vic_index=1,
                            format=data_block.StereoVideoTransmissionFormat.SIDE_BY_SIDE_HALF,
                            subsampling=data_block.StereoVideoSubsampling.HORIZONTAL,
                        ),
                    ],
                ),
            ),
        ),
    ],
    ids=lambda tc: tc.name,
)
def test_hdmi_binary(tc: DataBlockBinaryTestCase) -> None:
    run_data_block_binary_test_case(tc)


@pytest.mark.parametrize(
    "tc",
    [
        DataBlockParseErrorTestCase(
            "too short",
            "64 03 0C 00 10",
            InvalidDataBlockLengthError,
            "HDMI vendor-specific data block length 4 is invalid",
        ),
        DataBlockParseErrorTestCase(
            "impossible length",
            "69 03 0C 00 10 00 00 00 00 00",
            InvalidDataBlockLengthError,
            "HDMI vendor-specific data block length 9 is invalid",
        ),
        DataBlockParseErrorTestCase(
            "bytes beyond the flagged fields",
            "6A 03 0C 00 10 00 00 00 00 00 00",
            InvalidDataBlockLengthError,
            "HDMI vendor-specific data block length 10 is longer than its 8 bytes of flagged "
            "fields.",
        ),
        DataBlockParseErrorTestCase(
            "flagged latency is missing",
            "68 03 0C 00 10 00 00 00 80",
            InvalidDataBlockLengthError,
            "HDMI vendor-specific data block needs 2 more bytes at offset 8, but only 0 remain.",
        ),
        DataBlockParseErrorTestCase(
            "3D_Multi_present without 3D_present",
            "6A 03 0C 00 10 00 00 00 20 20 00",
            ValueOutOfRangeError,
            "3D_Multi_present is set without 3D_present.",
        ),
        DataBlockParseErrorTestCase(
            "reserved flags bit",
            "68 03 0C 00 10 00 00 00 10",
            ValueOutOfRangeError,
            "Reserved bit of the HDMI flags byte must be zero.",
        ),
        DataBlockParseErrorTestCase(
            "reserved video sub-block bits",
            "6A 03 0C 00 10 00 00 00 20 01 00",
            ValueOutOfRangeError,
            "Reserved bits of the HDMI video sub-block must be zero.",
        ),
        DataBlockParseErrorTestCase(
            "reserved 3D_Detail_X bits",
            "6C 03 0C 00 10 00 00 00 20 80 02 08 11",
            ValueOutOfRangeError,
            "Reserved bits of 3D_Detail_X 0x11 must be zero.",
        ),
    ],
    ids=lambda tc: tc.name,
)
def test_hdmi_parse_error(tc: DataBlockParseErrorTestCase) -> None:
    run_data_block_parse_error_test_case(tc)


def test_hdmi_oui() -> None:
    # Other vendors' blocks are not routed to the HDMI block by the general parser.
    input = bytes.fromhex("65 D8 5D C4 01 02")
    assert data_block.parse_binary(input) == data_block.UnknownDataBlock(
        data_block_tag=data_block.Tag.VENDOR_SPECIFIC, payload=bytes.fromhex("D8 5D C4 01 02")
    )
    with pytest.raises(InvalidOuiError, match="OUI D8 5D C4 is not the HDMI OUI."):
        data_block.HdmiVendorDataBlock.parse_binary(input)


def test_hdmi_payload_size() -> None:
    block = data_block.HdmiVendorDataBlock(source_physical_address=(1, 0, 0, 0))
    assert block.payload_size() == 5
    block.capabilities = data_block.HdmiCapabilities(0)
    assert block.payload_size() == 6
    block.max_tmds_clock_mhz = 165
    assert block.payload_size() == 7
    assert block.to_binary() == bytes.fromhex("67 03 0C 00 10 00 00 21")
    block.content_types = data_block.ContentType.GAME
    assert block.payload_size() == 8
    assert util.make_hdmi_block().payload_size() == 18


@pytest.mark.parametrize(
    "db",
    [
        data_block.HdmiVendorDataBlock(
            source_physical_address=(1, 0, 0, 0),
            capabilities=data_block.HdmiCapabilities.DC_36BIT | data_block.HdmiCapabilities.DC_Y444,
        ),
        data_block.HdmiVendorDataBlock(
            source_physical_address=(1, 2, 0, 0),
            capabilities=data_block.HdmiCapabilities(0),
            max_tmds_clock_mhz=600,
        ),
        data_block.HdmiVendorDataBlock(
            source_physical_address=(1, 0, 0, 0),
            capabilities=data_block.HdmiCapabilities(0),
            max_tmds_clock_mhz=0,
            content_types=data_block.ContentType(0),
        ),
        data_block.HdmiVendorDataBlock(
            source_physical_address=(1, 0, 0, 0),
            capabilities=data_block.HdmiCapabilities(0),
            max_tmds_clock_mhz=0,
            content_types=data_block.ContentType(0),
            latency=(10, 20),
        ),
        data_block.HdmiVendorDataBlock(
            source_physical_address=(1, 0, 0, 0),
            capabilities=data_block.HdmiCapabilities.SUPPORTS_AI,
            max_tmds_clock_mhz=340,
            content_types=data_block.ContentType.CINEMA,
            interlaced_latency=(1, 2),
            hdmi_video=data_block.HdmiVideoSubblock(),
        ),
        data_block.HdmiVendorDataBlock(
            source_physical_address=(1, 0, 0, 0),
            capabilities=data_block.HdmiCapabilities(0),
            max_tmds_clock_mhz=0,
            content_types=data_block.ContentType(0),
            hdmi_video=data_block.HdmiVideoSubblock(
                stereo_video_support=data_block.StereoVideoSupport(
                    formats=data_block.StereoVideoFormat.TOP_AND_BOTTOM
                ),
            ),
        ),
    ],
    ids=[
        "capabilities only",
        "TMDS clock",
        "empty flags",
        "latency only",
        "interlaced latency and empty video sub-block",
        "3D formats without mask",
    ],
)
def test_hdmi_model_round_trip(db: data_block.HdmiVendorDataBlock) -> None:
    run_data_block_model_round_trip(db)


# ======================== UNKNOWN DATA BLOCK TESTS ========================


@pytest.mark.parametrize(
    "tc",
    [
        DataBlockBinaryTestCase(
            "unknown extended tag",
            "E3 06 01 02",
            data_block.UnknownDataBlock(
                data_block_tag=data_block.Tag.EXTENDED,
                extended_tag=0x06,
                payload=bytes.fromhex("01 02"),
            ),
        ),
        DataBlockBinaryTestCase(
            "extended tag only",
            "E1 07",
            data_block.UnknownDataBlock(data_block_tag=data_block.Tag.EXTENDED, extended_tag=0x07),
        ),
        DataBlockBinaryTestCase(
            "VESA display transfer characteristic",
            "A2 01 02",
            data_block.UnknownDataBlock(
                data_block_tag=data_block.Tag.VESA_DISPLAY_TRANSFER,
                payload=bytes.fromhex("01 02"),
            ),
        ),
        DataBlockBinaryTestCase(
            "reserved tag, empty",
            "00",
            data_block.UnknownDataBlock(data_block_tag=data_block.Tag.RESERVED_0),
        ),
    ],
    ids=lambda tc: tc.name,
)
def test_unknown_binary(tc: DataBlockBinaryTestCase) -> None:
    run_data_block_binary_test_case(tc)


# ======================== GENERAL PARSING TESTS ========================


@pytest.mark.parametrize(
    "tc",
    [
        DataBlockParseErrorTestCase(
            "audio length",
            "22 09 07",
            InvalidDataBlockLengthError,
            "Audio data block length 2 is not a multiple of 3.",
        ),
        DataBlockParseErrorTestCase(
            "speaker allocation length",
            "82 05 00",
            InvalidDataBlockLengthError,
            "Speaker allocation data block length 2 must be 3.",
        ),
        DataBlockParseErrorTestCase(
            "colorimetry length",
            "E4 05 90 51 00",
            InvalidDataBlockLengthError,
            "Colorimetry data block length 4 must be 3.",
        ),
        DataBlockParseErrorTestCase(
            "extended block without an extended tag",
            "E0",
            InvalidDataBlockLengthError,
            "Extended data block has no extended tag.",
        ),
    ],
    ids=lambda tc: tc.name,
)
def test_parse_error(tc: DataBlockParseErrorTestCase) -> None:
    run_data_block_parse_error_test_case(tc)


def test_collection() -> None:
    cta861_block = util.make_cta861_block()
    collection_hex = " ".join(
        [
            "47 10 04 1F 13 02 12 01",
            "23 09 07 01",
            "83 05 00 00",
            util.HDMI_BYTES,
            "E3 05 90 51",
        ]
    )
    collection = bytes.fromhex(collection_hex)
    assert data_block.parse_collection(collection) == cta861_block.data_blocks
    assert data_block.collection_to_binary(cta861_block.data_blocks) == collection

    assert data_block.parse_collection(b"") == []
    assert data_block.collection_to_binary([]) == b""


def test_collection_truncated() -> None:
    with pytest.raises(
        InvalidDataBlockLengthError,
        match="Data block collection needs 8 more bytes at offset 4, but only 3 remain.",
    ):
        data_block.parse_collection(bytes.fromhex("23 09 07 01 47 10 04"))


# ======================== VALIDATION TESTS ========================


@pytest.mark.parametrize(
    "tc",
    [
        DataBlockValidateCase(
            "SVD too large",
            data_block.VideoDataBlock(svds=[1, 256]),
            "Short video descriptor 256 does not fit in a byte.",
        ),
        DataBlockValidateCase(
            "too many audio channels",
            data_block.AudioDataBlock(sads=[replace(util.LPCM_STEREO, channels=9)]),
            "Audio channel count 9 must be between 1 and 8.",
        ),
        DataBlockValidateCase(
            "no audio channels",
            data_block.AudioDataBlock(sads=[replace(util.LPCM_STEREO, channels=0)]),
            "Audio channel count 0 must be between 1 and 8.",
        ),
        DataBlockValidateCase(
            "short audio descriptor detail",
            data_block.AudioDataBlock(sads=[replace(util.LPCM_STEREO, detail=0x100)]),
            "Short audio descriptor byte 3 value 256 does not fit in a byte.",
        ),
        DataBlockValidateCase(
            "speaker allocation reserved bytes",
            data_block.SpeakerAllocationDataBlock(
                speaker_allocation=data_block.Speaker.FL_FR, reserved=bytes(1)
            ),
            "Speaker allocation reserved bytes must be exactly 2 bytes.",
        ),
        DataBlockValidateCase(
            "YCbCr 4:2:0 SVD index",
            data_block.YCbCr420CapabilityMapDataBlock(svd_indices=frozenset({0, 1})),
            "YCbCr 4:2:0 capability map SVD index 0 must be at least 1.",
        ),
        DataBlockValidateCase(
            "unknown block tag",
            data_block.UnknownDataBlock(data_block_tag=8),
            "Data block tag 8 does not fit in 3 bits.",
        ),
        DataBlockValidateCase(
            "unknown extended block without extended tag",
            data_block.UnknownDataBlock(data_block_tag=data_block.Tag.EXTENDED),
            "An extended tag must be given if, and only if, the block has the extended tag.",
        ),
        DataBlockValidateCase(
            "unknown block with extended tag",
            data_block.UnknownDataBlock(data_block_tag=data_block.Tag.AUDIO, extended_tag=1),
            "An extended tag must be given if, and only if, the block has the extended tag.",
        ),
        DataBlockValidateCase(
            "unknown extended tag too large",
            data_block.UnknownDataBlock(
                data_block_tag=data_block.Tag.EXTENDED, extended_tag=0x100
            ),
            "Extended tag 256 does not fit in a byte.",
        ),
        DataBlockValidateCase(
            "HDMI source physical address",
            data_block.HdmiVendorDataBlock(source_physical_address=(16, 0, 0, 0)),
            "must be 4 nibbles.",
        ),
        DataBlockValidateCase(
            "HDMI TMDS clock",
            data_block.HdmiVendorDataBlock(
                source_physical_address=(1, 0, 0, 0), max_tmds_clock_mhz=341
            ),
            "Maximum TMDS clock 341 MHz must be a multiple of 5 MHz no greater than 1275 MHz.",
        ),
        DataBlockValidateCase(
            "HDMI latency",
            data_block.HdmiVendorDataBlock(
                source_physical_address=(1, 0, 0, 0), latency=(256, 0)
            ),
            "do not fit in a byte.",
        ),
        DataBlockValidateCase(
            "HDMI latency without the earlier fields",
            data_block.HdmiVendorDataBlock(
                source_physical_address=(1, 0, 0, 0), latency=(10, 20)
            ),
            "The HDMI content types must be given when a later field of the block is given.",
        ),
        DataBlockValidateCase(
            "HDMI content types without TMDS clock",
            data_block.HdmiVendorDataBlock(
                source_physical_address=(1, 0, 0, 0),
                capabilities=data_block.HdmiCapabilities(0),
                content_types=data_block.ContentType.GAME,
            ),
            "The HDMI maximum TMDS clock must be given when a later field of the block is given.",
        ),
        DataBlockValidateCase(
            "HDMI TMDS clock without capabilities",
            data_block.HdmiVendorDataBlock(
                source_physical_address=(1, 0, 0, 0), max_tmds_clock_mhz=165
            ),
            "The HDMI capabilities must be given when a later field of the block is given.",
        ),
        DataBlockValidateCase(
            "too many HDMI VICs",
            data_block.HdmiVendorDataBlock(
                source_physical_address=(1, 0, 0, 0),
                hdmi_video=data_block.HdmiVideoSubblock(hdmi_vics=[1, 2, 3, 4, 1, 2, 3, 4]),
            ),
            "At most 7 HDMI VICs can be listed, but there are 8.",
        ),
        DataBlockValidateCase(
            "HDMI 3D mask without formats",
            data_block.HdmiVendorDataBlock(
                source_physical_address=(1, 0, 0, 0),
                hdmi_video=data_block.HdmiVideoSubblock(
                    stereo_video_support=data_block.StereoVideoSupport(vic_mask=1)
                ),
            ),
            "A 3D VIC mask requires the 3D formats to be present.",
        ),
        DataBlockValidateCase(
            "HDMI 3D VIC index",
            data_block.HdmiVendorDataBlock(
                source_physical_address=(1, 0, 0, 0),
                hdmi_video=data_block.HdmiVideoSubblock(
                    vic_3d_support=[
                        data_block.Vic3dSupport(
                            vic_index=16,
                            format=data_block.StereoVideoTransmissionFormat.TOP_AND_BOTTOM,
                        )
                    ]
                ),
            ),
            "3D support VIC index 16 must be between 0 and 15.",
        ),
        DataBlockValidateCase(
            "HDMI 3D side-by-side without sub-sampling",
            data_block.HdmiVendorDataBlock(
                source_physical_address=(1, 0, 0, 0),
                hdmi_video=data_block.HdmiVideoSubblock(
                    vic_3d_support=[
                        data_block.Vic3dSupport(
                            vic_index=0,
                            format=data_block.StereoVideoTransmissionFormat.SIDE_BY_SIDE_HALF,
                        )
                    ]
                ),
            ),
            "requires sub-sampling details",
        ),
    ],
    ids=lambda tc: tc.name,
)
def test_validate(tc: DataBlockValidateCase) -> None:
    run_data_block_validate_case(tc)
