from fractions import Fraction
from pathlib import Path

import edid_tools.edid.base_block as base_block
import edid_tools.edid.data_block as data_block
import edid_tools.edid.descriptor as descriptor
from edid_tools.edid.common import BLOCK_SIZE, checksum
from edid_tools.edid.cta861_block import Cta861Block
from edid_tools.edid.edid import EdidData
from edid_tools.edid.standard_timing import AspectRatio, StandardTiming
from edid_tools.edid.timing_modes import VideoTimingMode

TESTDATA_DIR = Path(__file__).parent / "testdata"

# Files in testdata/ that match the objects returned by make_base_block and make_edid.
BASE_ONLY_FILE = "base_only.edid"
BASE_AND_CTA861_FILE = "base_and_cta861.edid"


def mode(
    h_res: int, v_res: int, v_rate: int | Fraction, interlaced: bool = False
) -> VideoTimingMode:
    return VideoTimingMode(h_res=h_res, v_res=v_res, v_rate=Fraction(v_rate), interlaced=interlaced)


# ======================== DESCRIPTORS ========================

DTD_1080P_60_BYTES = "02 3A 80 18 71 38 2D 40 58 2C 45 00 0F 48 42 00 00 1E"

DTD_1080P_60 = descriptor.DetailedTimingDescriptor(
    pixel_clock_hz=148_500_000,
    h_res=1920,
    v_res=1080,
    h_blanking=280,
    v_blanking=45,
    h_front_porch=88,
    h_sync_width=44,
    v_front_porch=4,
    v_sync_width=5,
    h_image_size=1039,
    v_image_size=584,
    h_border=0,
    v_border=0,
    features=descriptor.FeaturesBitmap(
        sync=descriptor.DigitalSeparateSync(v_sync_polarity=True, h_sync_polarity=True)
    ),
)

RANGE_LIMITS_BYTES = "00 00 00 FD 00 38 4B 1E 53 11 01 0A 20 20 20 20 20 20"

RANGE_LIMITS = descriptor.DisplayRangeLimits(
    min_v_rate_hz=56,
    max_v_rate_hz=75,
    min_h_rate_khz=30,
    max_h_rate_khz=83,
    max_pixel_clock_rate_mhz=170,
    video_timing_support=descriptor.VideoTimingSupport.BARE_LIMITS,
)

PRODUCT_NAME_BYTES = "00 00 00 FC 00 48 65 6C 6C 6F 0A 20 20 20 20 20 20 20"

PRODUCT_NAME = descriptor.DisplayProductName(text="Hello")

DUMMY_BYTES = "00 00 00 10 00" + " 00" * 13


# ======================== BASE BLOCK ========================


def make_base_block() -> base_block.BaseBlock:
    """Base block stored in the testdata files.  A new object is returned for each call."""
    return base_block.BaseBlock(
        manufacturer_id="ABC",
        product_code=1234,
        serial_number=0x01020304,
        manufacture_date=base_block.ManufactureDate(week=2, year=2020),
        edid_major_version=1,
        edid_minor_version=4,
        bit_depth=base_block.BitDepth.BD_8,
        video_interface=base_block.VideoInterface.HDMI_A,
        h_screen_size=60,
        v_screen_size=34,
        gamma=1.0,
        display_type=base_block.DigitalDisplayType.RGB444_YCRCB444,
        preferred_timing_mode=True,
        chromaticity=bytes.fromhex("EE 91 A3 54 4C 99 26 0F 50 54"),
        established_timings_1=base_block.EstablishedTimings1.ET_800x600_56,
        established_timings_2=(
            base_block.EstablishedTimings2.ET_1024x768_70
            | base_block.EstablishedTimings2.ET_1024x768_87i
        ),
        manufacturer_timings=base_block.ManufacturerTimings.ET_1152x870_75,
        standard_timings=[
            StandardTiming(x_resolution=1152, aspect_ratio=AspectRatio.AR_4_3, v_frequency=75),
            StandardTiming(x_resolution=1280, aspect_ratio=AspectRatio.AR_5_4, v_frequency=60),
            StandardTiming(x_resolution=1280, aspect_ratio=AspectRatio.AR_16_10, v_frequency=60),
            StandardTiming(x_resolution=1440, aspect_ratio=AspectRatio.AR_16_10, v_frequency=60),
            StandardTiming(x_resolution=1920, aspect_ratio=AspectRatio.AR_16_9, v_frequency=60),
            None,
            None,
            None,
        ],
        descriptors=[DTD_1080P_60, RANGE_LIMITS, PRODUCT_NAME, descriptor.Dummy()],
    )


BASE_BLOCK_MODES = [
    # established timings
    mode(800, 600, 56),
    mode(1024, 768, 87, interlaced=True),
    mode(1024, 768, 70),
    mode(1152, 870, 75),
    # standard timings
    mode(1152, 864, 75),
    mode(1280, 1024, 60),
    mode(1280, 800, 60),
    mode(1440, 900, 60),
    mode(1920, 1080, 60),
    # descriptors
    mode(1920, 1080, 60),
]


# ======================== CTA-861 EXTENSION BLOCK ========================

HDMI_BYTES = "72 03 0C 00 10 00 B8 44 20 C0 84 01 02 03 04 01 41 00 00"


def make_hdmi_block() -> data_block.HdmiVendorDataBlock:
    return data_block.HdmiVendorDataBlock(
        source_physical_address=(1, 0, 0, 0),
        capabilities=(
            data_block.HdmiCapabilities.SUPPORTS_AI
            | data_block.HdmiCapabilities.DC_36BIT
            | data_block.HdmiCapabilities.DC_30BIT
            | data_block.HdmiCapabilities.DC_Y444
        ),
        max_tmds_clock_mhz=340,
        content_types=data_block.ContentType(0),
        hdmi_video=data_block.HdmiVideoSubblock(
            hdmi_vics=[1, 2, 3, 4],
            stereo_video_support=data_block.StereoVideoSupport(
                formats=(
                    data_block.StereoVideoFormat.SIDE_BY_SIDE_HALF_HORIZONTAL
                    | data_block.StereoVideoFormat.TOP_AND_BOTTOM
                    | data_block.StereoVideoFormat.FRAME_PACKING
                ),
                vic_mask=0,
            ),
        ),
    )


LPCM_STEREO = data_block.ShortAudioDescriptor(
    format=data_block.AudioFormat.LPCM,
    channels=2,
    sampling_frequencies=(
        data_block.SamplingFrequency.SF_48_KHZ
        | data_block.SamplingFrequency.SF_44_1_KHZ
        | data_block.SamplingFrequency.SF_32_KHZ
    ),
    detail=data_block.LpcmBitDepth.BD_16,
)


def make_cta861_block() -> Cta861Block:
    """CTA-861 extension block stored in the testdata file.  A new object is returned each call."""
    return Cta861Block(
        underscan=True,
        basic_audio=True,
        ycbcr_444=True,
        ycbcr_422=True,
        native_dtds=0,
        data_blocks=[
            data_block.VideoDataBlock(svds=[16, 4, 31, 19, 2, 18, 1]),
            data_block.AudioDataBlock(sads=[LPCM_STEREO]),
            data_block.SpeakerAllocationDataBlock(
                speaker_allocation=data_block.Speaker.FC | data_block.Speaker.FL_FR
            ),
            make_hdmi_block(),
            data_block.ColorimetryDataBlock(
                colorimetry=(
                    data_block.Colorimetry.OPRGB
                    | data_block.Colorimetry.BT2020_RGB
                    | data_block.Colorimetry.ICTCP
                    | data_block.Colorimetry.DEFAULT_RGB
                ),
                metadata_profiles=data_block.GamutMetadataProfile.MD0,
            ),
        ],
        dtds=[DTD_1080P_60],
    )


CTA861_BLOCK_MODES = [
    # video data block
    mode(1920, 1080, 60),
    mode(1280, 720, 60),
    mode(1920, 1080, 50),
    mode(1280, 720, 50),
    mode(720, 480, Fraction(60000, 1001)),
    mode(720, 576, 50),
    mode(640, 480, Fraction(5035, 84)),
    # HDMI VICs
    mode(3840, 2160, 30),
    mode(3840, 2160, 25),
    mode(3840, 2160, 24),
    mode(4096, 2160, 24),
    # DTDs
    mode(1920, 1080, 60),
]


def make_edid() -> EdidData:
    return EdidData(base_block=make_base_block(), extension_blocks=[make_cta861_block()])


def read_testdata(filename: str) -> bytes:
    with open(TESTDATA_DIR / filename, mode="rb") as file:
        return file.read()


def read_block(filename: str, index: int) -> bytearray:
    """Read one 128 byte block of a testdata file, so that a test can modify it."""
    data = read_testdata(filename)
    return bytearray(data[index * BLOCK_SIZE : (index + 1) * BLOCK_SIZE])


def with_checksum(block: bytearray) -> bytes:
    """Recalculate the checksum of a modified block."""
    block[BLOCK_SIZE - 1] = checksum(block)
    return bytes(block)
