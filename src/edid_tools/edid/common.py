"""Shared primitives for the EDID codecs: error kinds, checksums, and bit/byte helpers."""

from __future__ import annotations

from enum import Enum
from typing import ClassVar, TypeVar

# Every EDID block, base block or extension block, is exactly this many bytes.
BLOCK_SIZE = 128

# Size of a detailed timing descriptor or display descriptor slot.
DESCRIPTOR_SIZE = 18


class ErrorKind(Enum):
    MALFORMED_HEADER = "malformed header"
    CHECKSUM_MISMATCH = "checksum mismatch"
    UNKNOWN_DESCRIPTOR_TYPE = "unknown descriptor type"
    INVALID_DATA_BLOCK_LENGTH = "invalid data block length"
    INVALID_OUI = "invalid OUI"
    VALUE_OUT_OF_RANGE = "value out of range"
    SIZE_OVERFLOW = "size overflow"
    INVALID_VIC = "invalid VIC"
    TOTAL_SIZE_NOT_BLOCK_MULTIPLE = "total size not a multiple of the block size"


class EdidError(ValueError):
    """Base class of every error raised while parsing or generating EDID binary data."""

    kind: ClassVar[ErrorKind]


class MalformedHeaderError(EdidError):
    kind = ErrorKind.MALFORMED_HEADER


class ChecksumMismatchError(EdidError):
    kind = ErrorKind.CHECKSUM_MISMATCH


class UnknownDescriptorTypeError(EdidError):
    kind = ErrorKind.UNKNOWN_DESCRIPTOR_TYPE


class InvalidDataBlockLengthError(EdidError):
    kind = ErrorKind.INVALID_DATA_BLOCK_LENGTH


class InvalidOuiError(EdidError):
    kind = ErrorKind.INVALID_OUI


class ValueOutOfRangeError(EdidError):
    kind = ErrorKind.VALUE_OUT_OF_RANGE


class SizeOverflowError(EdidError):
    kind = ErrorKind.SIZE_OVERFLOW


class InvalidVicError(EdidError):
    kind = ErrorKind.INVALID_VIC


class TotalSizeNotBlockMultipleError(EdidError):
    kind = ErrorKind.TOTAL_SIZE_NOT_BLOCK_MULTIPLE


E = TypeVar("E", bound=Enum)


def to_enum(enum_type: type[E], value: int, field_name: str) -> E:
    """Convert a wire value to an enumeration member, rejecting values the standards reserve."""
    try:
        return enum_type(value)
    except ValueError:
        raise ValueOutOfRangeError(f"Unrecognized {field_name} value 0x{value:02X}.") from None


# Checksums
# VESA E-EDID Standard Release A2 (EDID 1.4) Section 3.11 - Extension Flag and Checksum
# CTA-861-G Section 7.3 - CTA Extension Version 3


def checksum(block: bytes) -> int:
    """Calculate the byte that makes the sum of all 128 bytes of a block equal 0 modulo 256.

    Only the first 127 bytes are used, so the function works with or without a checksum byte
    already present at the end of the block.
    """
    assert len(block) >= BLOCK_SIZE - 1
    return (256 - sum(block[: BLOCK_SIZE - 1]) % 256) % 256


def validate_checksum(block: bytes, block_name: str) -> None:
    assert len(block) == BLOCK_SIZE
    expected = checksum(block)
    if block[BLOCK_SIZE - 1] != expected:
        raise ChecksumMismatchError(
            f"{block_name} checksum 0x{block[BLOCK_SIZE - 1]:02X} does not match the calculated "
            f"checksum 0x{expected:02X}."
        )


# Bit field helpers.  Offsets count from the least significant bit.


def get_bits(value: int, offset: int, width: int) -> int:
    return (value >> offset) & ((1 << width) - 1)


def set_bits(field: int, offset: int, width: int) -> int:
    assert 0 <= field < (1 << width)
    return field << offset


def bits_to_indices(bitmap: bytes) -> set[int]:
    """Convert a little-endian, LSB-first bitmap into the 0-based positions of its set bits."""
    return {
        byte_index * 8 + bit
        for byte_index, byte in enumerate(bitmap)
        for bit in range(8)
        if get_bits(byte, bit, 1)
    }


def indices_to_bits(indices: set[int]) -> bytes:
    """Convert 0-based bit positions into the shortest LSB-first bitmap that can hold them."""
    if not indices:
        return b""
    result = bytearray((max(indices) // 8) + 1)
    for index in indices:
        result[index // 8] |= 1 << (index % 8)
    return bytes(result)


class ByteReader:
    """Cursor over a byte buffer that consumes variable-length structures from left to right.

    Running out of bytes raises the given error type, so that each structure can report an
    underflow with the error kind that is appropriate for it.
    """

    def __init__(self, data: bytes, error: type[EdidError], context: str) -> None:
        self.data = data
        self.position = 0
        self.error = error
        self.context = context

    @property
    def remaining(self) -> int:
        return len(self.data) - self.position

    def read_byte(self) -> int:
        return self.read_bytes(1)[0]

    def read_bytes(self, count: int) -> bytes:
        if count > self.remaining:
            raise self.error(
                f"{self.context} needs {count} more bytes at offset {self.position}, "
                f"but only {self.remaining} remain."
            )
        result = self.data[self.position : self.position + count]
        self.position += count
        return result

    def peek_byte(self) -> int:
        if self.remaining < 1:
            raise self.error(f"{self.context} unexpectedly ended at offset {self.position}.")
        return self.data[self.position]
