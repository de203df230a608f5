"""Base classes for the data blocks found in the data block collection of a CTA-861 extension."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import ClassVar

from edid_tools.edid.binary_types import _DataBlockHeaderBinaryFields
from edid_tools.edid.common import InvalidDataBlockLengthError, ValueOutOfRangeError

HEADER_SIZE = 1

# The header has five bits for the payload length.
MAX_PAYLOAD_LENGTH = 31


# Data block tag codes
# CTA-861-G Table 54 - CTA Data Block Tag Codes
class Tag(IntEnum):
    RESERVED_0 = 0b000
    AUDIO = 0b001
    VIDEO = 0b010
    VENDOR_SPECIFIC = 0b011
    SPEAKER_ALLOCATION = 0b100
    VESA_DISPLAY_TRANSFER = 0b101
    RESERVED_6 = 0b110
    EXTENDED = 0b111


# Extended tag codes, found in the first payload byte of blocks with the extended tag
# CTA-861-G Table 54 - CTA Data Block Tag Codes
class ExtendedTag(IntEnum):
    COLORIMETRY = 0x05
    YCBCR420_CAPABILITY_MAP = 0x0F


def parse_header(header: int) -> tuple[int, int]:
    """Split a data block header byte into its tag and payload length."""
    bin = _DataBlockHeaderBinaryFields.from_buffer_copy(bytes([header]))
    return bin.tag, bin.length


class DataBlock(ABC):
    """A CTA-861 data block: a one byte header giving the tag and length, then the payload."""

    # Tag code in the header byte.
    tag: ClassVar[Tag]

    @abstractmethod
    def validate(self) -> str | None:
        """Indicate whether the contents of the block are valid and could be written to binary.

        The return value contains a description of the validation failure.  If the block passes
        validation, then None is returned.
        """
        pass

    def header_tag(self) -> int:
        return self.tag

    @classmethod
    @abstractmethod
    def _do_parse_binary(cls, payload: bytes) -> DataBlock:
        """The derived class should parse the payload bytes into a new DataBlock object.

        The payload excludes the header byte, but includes any extended tag or OUI bytes.
        """
        pass

    @classmethod
    def parse_binary(cls, block_bytes: bytes) -> DataBlock:
        """Create a new instance of the block by parsing the header and payload bytes."""
        tag, length = parse_header(block_bytes[0])
        assert tag == cls.tag
        assert len(block_bytes) == HEADER_SIZE + length
        return cls._do_parse_binary(block_bytes[HEADER_SIZE:])

    @abstractmethod
    def _do_to_binary(self) -> bytes:
        """Convert the payload to binary; the block can be assumed to be valid."""
        pass

    def to_binary(self) -> bytes:
        """Convert this block to binary, including the header byte."""
        validation_message = self.validate()
        if validation_message is not None:
            raise ValueOutOfRangeError(validation_message)
        payload = self._do_to_binary()
        if len(payload) > MAX_PAYLOAD_LENGTH:
            raise InvalidDataBlockLengthError(
                f"{type(self).__name__} payload of {len(payload)} bytes is longer than the "
                f"maximum of {MAX_PAYLOAD_LENGTH} bytes."
            )
        header = _DataBlockHeaderBinaryFields(tag=self.header_tag(), length=len(payload))
        return bytes(header) + payload

    def size(self) -> int:
        """Size of the block in bytes, including the header byte."""
        return len(self.to_binary())
