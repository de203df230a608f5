"""Model classes for the ASCII string display descriptors."""

from __future__ import annotations

import ctypes
from dataclasses import dataclass
from typing import ClassVar

from edid_tools.edid.binary_types import _DisplayDescriptorBinaryFields
from edid_tools.edid.common import ValueOutOfRangeError

from .base import DisplayDescriptor, Type

MAX_TEXT_LENGTH = 13


def standard_padding(text_length: int) -> bytes:
    """Line feed followed by spaces, filling the descriptor after text_length characters."""
    if text_length >= MAX_TEXT_LENGTH:
        return b""
    return b"\n".ljust(MAX_TEXT_LENGTH - text_length, b" ")


# ASCII string descriptors
# Standards:
#  - VESA E-EDID Standard Release A2 (EDID 1.4) Sections 3.10.3.1, 3.10.3.2, 3.10.3.4
# Important notes:
#  - Up to 13 characters.  A shorter string is terminated with a line feed, and the remaining
#    bytes are padded with spaces.
#  - Some displays pad with other bytes.  Such padding, starting with the line feed, is kept in
#    padding so that it is written back unchanged.  It is None for the standard padding.
#  - Three descriptor tags share the same layout; they only differ in meaning.
@dataclass(frozen=True, kw_only=True)
class AsciiString(DisplayDescriptor):
    text: str
    padding: bytes | None = None

    def validate(self) -> str | None:
        if len(self.text) > MAX_TEXT_LENGTH:
            return f"ASCII string {self.text!r} is longer than {MAX_TEXT_LENGTH} characters."
        if not self.text.isascii() or "\n" in self.text:
            return f"ASCII string {self.text!r} contains unsupported characters."
        if self.padding is not None and (
            len(self.text) + len(self.padding) != MAX_TEXT_LENGTH
            or not self.padding.startswith(b"\n")
        ):
            return (
                f"ASCII string padding {self.padding.hex(' ')} must start with a line feed and "
                f"fill the {MAX_TEXT_LENGTH} bytes after {len(self.text)} characters."
            )
        return None

    @classmethod
    def _do_parse_binary(cls, descriptor_bytes: bytes) -> AsciiString:
        bin = _DisplayDescriptorBinaryFields.from_buffer_copy(descriptor_bytes)
        text_bytes, line_feed, rest = bytes(bin.data).partition(b"\n")
        try:
            text = text_bytes.decode("ascii")
        except UnicodeDecodeError:
            raise ValueOutOfRangeError(
                f"ASCII string descriptor contains non-ASCII bytes: {text_bytes.hex(' ')}"
            ) from None
        padding = line_feed + rest
        return cls(
            text=text, padding=padding if padding != standard_padding(len(text)) else None
        )

    def _do_to_binary(self) -> bytes:
        padding = self.padding if self.padding is not None else standard_padding(len(self.text))
        bin = _DisplayDescriptorBinaryFields(
            type=self.descriptor_type,
            data=(ctypes.c_uint8 * MAX_TEXT_LENGTH)(*(self.text.encode("ascii") + padding)),
        )
        return bytes(bin)


@dataclass(frozen=True, kw_only=True)
class DisplayProductName(AsciiString):
    descriptor_type: ClassVar[Type] = Type.DISPLAY_PRODUCT_NAME


@dataclass(frozen=True, kw_only=True)
class DisplaySerialNumber(AsciiString):
    descriptor_type: ClassVar[Type] = Type.DISPLAY_SERIAL_NUMBER


@dataclass(frozen=True, kw_only=True)
class AlphanumericData(AsciiString):
    descriptor_type: ClassVar[Type] = Type.ALPHANUMERIC_DATA
