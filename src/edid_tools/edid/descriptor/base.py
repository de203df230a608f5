"""Base classes for the 18 byte descriptors found in the EDID base block."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar

from edid_tools.edid.binary_types import _DisplayDescriptorBinaryFields
from edid_tools.edid.common import DESCRIPTOR_SIZE, ValueOutOfRangeError


# Display descriptor tags
# VESA E-EDID Standard Release A2 (EDID 1.4) Table 3.19 - Display Descriptor Definitions
class Type(IntEnum):
    # VESA E-EDID Section 3.10.3.11 - Dummy Descriptor Definition
    DUMMY = 0x10

    # VESA E-EDID Section 3.10.3.9 - Established Timings III Descriptor Definition
    ESTABLISHED_TIMINGS_III = 0xF7

    # VESA E-EDID Section 3.10.3.4 - Display Product Name (ASCII) String Descriptor Definition
    DISPLAY_PRODUCT_NAME = 0xFC

    # VESA E-EDID Section 3.10.3.3 - Display Range Limits & Additional Timing Descriptor
    DISPLAY_RANGE_LIMITS = 0xFD

    # VESA E-EDID Section 3.10.3.2 - Alphanumeric Data String (ASCII)
    ALPHANUMERIC_DATA = 0xFE

    # VESA E-EDID Section 3.10.3.1 - Display Product Serial Number Descriptor Definition
    DISPLAY_SERIAL_NUMBER = 0xFF


@dataclass(frozen=True, kw_only=True)
class Descriptor(ABC):
    """An 18 byte descriptor: either a detailed timing descriptor or a display descriptor."""

    @abstractmethod
    def validate(self) -> str | None:
        """Indicate whether the contents of the descriptor are valid and could be written to binary.

        The return value contains a description of the validation failure.  If the descriptor
        passes validation, then None is returned.
        """
        pass

    @classmethod
    @abstractmethod
    def _do_parse_binary(cls, descriptor_bytes: bytes) -> Descriptor:
        """The derived class should parse the bytes into a new Descriptor object.

        It does not need to assert the length of descriptor_bytes.  The main parse_binary function
        does that for you.
        """
        pass

    @classmethod
    def parse_binary(cls, descriptor_bytes: bytes) -> Descriptor:
        """Create a new instance of the descriptor by parsing 18 bytes of binary data."""
        assert len(descriptor_bytes) == DESCRIPTOR_SIZE
        return cls._do_parse_binary(descriptor_bytes)

    @abstractmethod
    def _do_to_binary(self) -> bytes:
        """Convert this descriptor to binary; the descriptor can be assumed to be valid."""
        pass

    def to_binary(self) -> bytes:
        """Convert this descriptor to the 18 byte binary format."""
        validation_message = self.validate()
        if validation_message is not None:
            raise ValueOutOfRangeError(validation_message)
        b = self._do_to_binary()
        assert len(b) == DESCRIPTOR_SIZE
        return b


@dataclass(frozen=True, kw_only=True)
class DisplayDescriptor(Descriptor):
    """A descriptor that starts with three zero bytes followed by a display descriptor tag."""

    # Binary byte value for the display descriptor tag.
    descriptor_type: ClassVar[Type]

    @classmethod
    def parse_binary(cls, descriptor_bytes: bytes) -> Descriptor:
        assert len(descriptor_bytes) == DESCRIPTOR_SIZE
        assert descriptor_bytes[0:3] == bytes(3)
        assert descriptor_bytes[3] == cls.descriptor_type
        return cls._do_parse_binary(descriptor_bytes)

    def to_binary(self) -> bytes:
        b = super().to_binary()
        assert b[0:3] == bytes(3)
        assert b[3] == self.descriptor_type
        return b


@dataclass(frozen=True, kw_only=True)
class Dummy(DisplayDescriptor):
    """Unused descriptor slot."""

    def validate(self) -> str | None:
        return None

    descriptor_type: ClassVar[Type] = Type.DUMMY

    @classmethod
    def _do_parse_binary(cls, descriptor_bytes: bytes) -> Dummy:
        return cls()

    def _do_to_binary(self) -> bytes:
        return bytes(
            _DisplayDescriptorBinaryFields(
                type=self.descriptor_type,
            )
        )
