"""Model class for the mandatory 128 byte EDID base block."""

from __future__ import annotations

import ctypes
from dataclasses import dataclass
from enum import IntEnum, IntFlag

import edid_tools.edid.descriptor as descriptor
import edid_tools.edid.standard_timing as standard_timing
from edid_tools.edid.binary_types import (
    _BaseBlockBinaryFields,
    _DescriptorSlot,
    _StandardTimingBinaryFields,
)
from edid_tools.edid.common import (
    BLOCK_SIZE,
    MalformedHeaderError,
    ValueOutOfRangeError,
    checksum,
    to_enum,
    validate_checksum,
)

HEADER = bytes([0x00, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0x00])

STANDARD_TIMING_COUNT = 8
DESCRIPTOR_COUNT = 4

# Week of manufacture value indicating that the year field holds a model year instead.
MODEL_YEAR_WEEK = 0xFF
YEAR_OFFSET = 1990

# Manufacturer ID letters are transmitted as 5 bit values where 1 is "A".
MANUFACTURER_LETTER_OFFSET = 64


# Color bit depth
# VESA E-EDID Standard Release A2 (EDID 1.4) Table 3.11 - Video Input Definition, bits 6-4
class BitDepth(IntEnum):
    BD_UNDEFINED = 0b000
    BD_6 = 0b001
    BD_8 = 0b010
    BD_10 = 0b011
    BD_12 = 0b100
    BD_14 = 0b101
    BD_16 = 0b110
    BD_RESERVED = 0b111


# Digital video interface standard
# VESA E-EDID Standard Release A2 (EDID 1.4) Table 3.11 - Video Input Definition, bits 3-0
class VideoInterface(IntEnum):
    UNDEFINED = 0b0000
    DVI = 0b0001
    HDMI_A = 0b0010
    HDMI_B = 0b0011
    MDDI = 0b0100
    DISPLAY_PORT = 0b0101


# Supported color encoding formats for digital inputs
# VESA E-EDID Standard Release A2 (EDID 1.4) Table 3.14 - Feature Support, bits 4-3
class DigitalDisplayType(IntEnum):
    RGB444 = 0b00
    RGB444_YCRCB444 = 0b01
    RGB444_YCRCB422 = 0b10
    RGB444_YCRCB444_YCRCB422 = 0b11


# Established timings I & II and the manufacturer's timings
# VESA E-EDID Standard Release A2 (EDID 1.4) Table 3.18 - Established Timings I & II
class EstablishedTimings1(IntFlag):
    ET_720x400_70 = 1 << 7
    ET_720x400_88 = 1 << 6
    ET_640x480_60 = 1 << 5
    ET_640x480_67 = 1 << 4
    ET_640x480_72 = 1 << 3
    ET_640x480_75 = 1 << 2
    ET_800x600_56 = 1 << 1
    ET_800x600_60 = 1 << 0


class EstablishedTimings2(IntFlag):
    ET_800x600_72 = 1 << 7
    ET_800x600_75 = 1 << 6
    ET_832x624_75 = 1 << 5
    ET_1024x768_87i = 1 << 4
    ET_1024x768_60 = 1 << 3
    ET_1024x768_70 = 1 << 2
    ET_1024x768_75 = 1 << 1
    ET_1280x1024_75 = 1 << 0


class ManufacturerTimings(IntFlag):
    ET_1152x870_75 = 1 << 7
    # Bits 6-0 are reserved for manufacturer specified timings.
    MANUFACTURER_6 = 1 << 6
    MANUFACTURER_5 = 1 << 5
    MANUFACTURER_4 = 1 << 4
    MANUFACTURER_3 = 1 << 3
    MANUFACTURER_2 = 1 << 2
    MANUFACTURER_1 = 1 << 1
    MANUFACTURER_0 = 1 << 0


# The week/year pair is either a manufacture date or a model year, but never both.
# VESA E-EDID Standard Release A2 (EDID 1.4) Section 3.4.4 - Week and Year of Manufacture or
# Model Year
@dataclass(frozen=True, kw_only=True)
class ManufactureDate:
    week: int  # 1-54, or 0 if unspecified
    year: int


@dataclass(frozen=True, kw_only=True)
class ModelYear:
    model_year: int


ManufactureDateOrModelYear = ManufactureDate | ModelYear


# EDID base block
# Standards:
#  - VESA E-EDID Standard Release A2 (EDID 1.4) Section 3 - EDID Format: Structure Version 1
#  - VESA E-EDID Standard Release A2 (EDID 1.4) Table 3.1 - EDID Structure Version 1, Revision 4
# Important notes:
#  - Only digital video input definitions are supported.
#  - The number of extension blocks that follow is not part of the model: it is derived from the
#    extension blocks in the enclosing EdidData.
@dataclass(kw_only=True)
class BaseBlock:
    # Vendor & product identification
    manufacturer_id: str  # three letters
    product_code: int
    serial_number: int
    manufacture_date: ManufactureDateOrModelYear

    # EDID structure version & revision
    edid_major_version: int = 1
    edid_minor_version: int = 4

    # Basic display parameters & features
    bit_depth: BitDepth
    video_interface: VideoInterface
    h_screen_size: int  # cm
    v_screen_size: int  # cm
    gamma: float  # transmitted as (gamma * 100) - 100
    dpms_standby: bool = False
    dpms_suspend: bool = False
    dpms_active_off: bool = False
    display_type: DigitalDisplayType
    standard_srgb: bool = False
    preferred_timing_mode: bool = False
    continuous_timings: bool = False

    # Color characteristics, copied verbatim
    chromaticity: bytes

    # Established timings
    established_timings_1: EstablishedTimings1 = EstablishedTimings1(0)
    established_timings_2: EstablishedTimings2 = EstablishedTimings2(0)
    manufacturer_timings: ManufacturerTimings = ManufacturerTimings(0)

    # Exactly 8 slots; None for an unused slot
    standard_timings: list[standard_timing.StandardTiming | None]

    # Exactly 4 slots; an unused slot holds a dummy descriptor
    descriptors: list[descriptor.Descriptor]

    def validate(self) -> str | None:
        """Indicate whether the contents of the block are valid and could be written to binary.

        The return value contains a description of the validation failure.  If the block passes
        validation, then None is returned.
        """
        if len(self.manufacturer_id) != 3 or any(
            not 0 <= ord(letter) - MANUFACTURER_LETTER_OFFSET <= 0x1F
            for letter in self.manufacturer_id
        ):
            return (
                f"Manufacturer ID {self.manufacturer_id!r} must be three letters that fit in "
                "5 bits each (A to Z)."
            )
        if self.product_code < 0 or self.product_code > 0xFFFF:
            return f"Product code {self.product_code} does not fit in 16 bits."
        if self.serial_number < 0 or self.serial_number > 0xFFFFFFFF:
            return f"Serial number {self.serial_number} does not fit in 32 bits."

        match self.manufacture_date:
            case ManufactureDate(week=week, year=year):
                if week < 0 or week > 54:
                    return f"Week of manufacture {week} must be between 0 and 54."
            case ModelYear(model_year=year):
                pass
            case _:
                assert False
        if year < YEAR_OFFSET or year > YEAR_OFFSET + 0xFF:
            return f"Year {year} must be between {YEAR_OFFSET} and {YEAR_OFFSET + 0xFF}."

        for name, value in [
            ("EDID major version", self.edid_major_version),
            ("EDID minor version", self.edid_minor_version),
            ("horizontal screen size", self.h_screen_size),
            ("vertical screen size", self.v_screen_size),
        ]:
            if value < 0 or value > 0xFF:
                return f"The {name} of {value} does not fit in a byte."

        if self._gamma_byte() < 0 or self._gamma_byte() > 0xFF:
            return f"Gamma {self.gamma} must be between 1.00 and 3.55."
        if len(self.chromaticity) != 10:
            return "Chromaticity must be exactly 10 bytes."
        if len(self.standard_timings) != STANDARD_TIMING_COUNT:
            return f"There must be exactly {STANDARD_TIMING_COUNT} standard timing slots."
        if len(self.descriptors) != DESCRIPTOR_COUNT:
            return f"There must be exactly {DESCRIPTOR_COUNT} descriptor slots."
        return None

    def _gamma_byte(self) -> int:
        return round(self.gamma * 100) - 100

    # Functions for going to/from binary blocks

    @classmethod
    def parse_binary(cls, block_bytes: bytes) -> tuple[BaseBlock, int]:
        """Create a new instance of the block by parsing a 128 byte binary base block.

        The number of extension blocks announced by the base block is returned alongside it.
        """
        assert len(block_bytes) == BLOCK_SIZE
        bin = _BaseBlockBinaryFields.from_buffer_copy(block_bytes)
        if bytes(bin.header) != HEADER:
            raise MalformedHeaderError(
                f"EDID base block header {bytes(bin.header).hex(' ').upper()} is not valid."
            )
        validate_checksum(block_bytes, "EDID base block")
        if not bin.digital:
            raise ValueOutOfRangeError("Analog video input definitions are not supported.")

        manufacture_date: ManufactureDateOrModelYear = (
            ModelYear(model_year=bin.year + YEAR_OFFSET)
            if bin.week == MODEL_YEAR_WEEK
            else ManufactureDate(week=bin.week, year=bin.year + YEAR_OFFSET)
        )

        return (
            cls(
                manufacturer_id="".join(
                    chr(letter + MANUFACTURER_LETTER_OFFSET)
                    for letter in (bin.manufacturer_0, bin.manufacturer_1, bin.manufacturer_2)
                ),
                product_code=int.from_bytes(bytes(bin.product_code), byteorder="little"),
                serial_number=int.from_bytes(bytes(bin.serial_number), byteorder="little"),
                manufacture_date=manufacture_date,
                edid_major_version=bin.version,
                edid_minor_version=bin.revision,
                bit_depth=BitDepth(bin.bit_depth),
                video_interface=to_enum(VideoInterface, bin.video_interface, "video interface"),
                h_screen_size=bin.h_screen_size,
                v_screen_size=bin.v_screen_size,
                gamma=(bin.gamma + 100) / 100,
                dpms_standby=bool(bin.dpms_standby),
                dpms_suspend=bool(bin.dpms_suspend),
                dpms_active_off=bool(bin.dpms_active_off),
                display_type=DigitalDisplayType(bin.display_type),
                standard_srgb=bool(bin.standard_srgb),
                preferred_timing_mode=bool(bin.preferred_timing_mode),
                continuous_timings=bool(bin.continuous_timings),
                chromaticity=bytes(bin.chromaticity),
                established_timings_1=EstablishedTimings1(bin.established_timings_1),
                established_timings_2=EstablishedTimings2(bin.established_timings_2),
                manufacturer_timings=ManufacturerTimings(bin.manufacturer_timings),
                standard_timings=[
                    standard_timing.StandardTiming.parse_binary(bytes(timing))
                    for timing in bin.standard_timings
                ],
                descriptors=[descriptor.parse_binary(bytes(slot.data)) for slot in bin.descriptors],
            ),
            bin.extension_count,
        )

    def to_binary(self, extension_count: int) -> bytes:
        """Convert this block to the 128 byte binary format."""
        validation_message = self.validate()
        if validation_message is not None:
            raise ValueOutOfRangeError(validation_message)
        if extension_count < 0 or extension_count > 0xFF:
            raise ValueOutOfRangeError(f"Extension block count {extension_count} is out of range.")

        match self.manufacture_date:
            case ManufactureDate(week=week, year=year):
                pass
            case ModelYear(model_year=year):
                week = MODEL_YEAR_WEEK
            case _:
                assert False

        letters = [ord(letter) - MANUFACTURER_LETTER_OFFSET for letter in self.manufacturer_id]
        bin = _BaseBlockBinaryFields(
            header=(ctypes.c_uint8 * 8)(*HEADER),
            manufacturer_reserved=0,
            manufacturer_0=letters[0],
            manufacturer_1=letters[1],
            manufacturer_2=letters[2],
            product_code=(ctypes.c_uint8 * 2)(*self.product_code.to_bytes(2, byteorder="little")),
            serial_number=(ctypes.c_uint8 * 4)(
                *self.serial_number.to_bytes(4, byteorder="little")
            ),
            week=week,
            year=year - YEAR_OFFSET,
            version=self.edid_major_version,
            revision=self.edid_minor_version,
            digital=1,
            bit_depth=self.bit_depth,
            video_interface=self.video_interface,
            h_screen_size=self.h_screen_size,
            v_screen_size=self.v_screen_size,
            gamma=self._gamma_byte(),
            dpms_standby=1 if self.dpms_standby else 0,
            dpms_suspend=1 if self.dpms_suspend else 0,
            dpms_active_off=1 if self.dpms_active_off else 0,
            display_type=self.display_type,
            standard_srgb=1 if self.standard_srgb else 0,
            preferred_timing_mode=1 if self.preferred_timing_mode else 0,
            continuous_timings=1 if self.continuous_timings else 0,
            chromaticity=(ctypes.c_uint8 * 10)(*self.chromaticity),
            established_timings_1=self.established_timings_1,
            established_timings_2=self.established_timings_2,
            manufacturer_timings=self.manufacturer_timings,
            extension_count=extension_count,
        )
        for index, timing in enumerate(self.standard_timings):
            bin.standard_timings[index] = _StandardTimingBinaryFields.from_buffer_copy(
                standard_timing.to_binary(timing)
            )
        for index, desc in enumerate(self.descriptors):
            bin.descriptors[index] = _DescriptorSlot(
                data=(ctypes.c_uint8 * 18)(*desc.to_binary())
            )

        block_bytes = bytearray(bytes(bin))
        block_bytes[BLOCK_SIZE - 1] = checksum(block_bytes)
        return bytes(block_bytes)
