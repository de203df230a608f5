from edid_tools.edid.common import DESCRIPTOR_SIZE, UnknownDescriptorTypeError

from .base import Descriptor, Dummy, Type
from .dtd import DetailedTimingDescriptor
from .established_timings import EstablishedTimings3
from .range_limits import DisplayRangeLimits
from .text import AlphanumericData, DisplayProductName, DisplaySerialNumber


def parse_binary(descriptor_bytes: bytes) -> Descriptor:
    """Create a new instance of a descriptor by parsing an 18 byte descriptor slot.

    Three leading zero bytes mean that this is a display descriptor, whose type is given by the
    fourth byte.  Anything else is a detailed timing descriptor.
    """
    assert len(descriptor_bytes) == DESCRIPTOR_SIZE
    if descriptor_bytes[0:3] != bytes(3):
        return DetailedTimingDescriptor.parse_binary(descriptor_bytes)
    match descriptor_bytes[3]:
        case Type.DUMMY:
            return Dummy.parse_binary(descriptor_bytes)
        case Type.ESTABLISHED_TIMINGS_III:
            return EstablishedTimings3.parse_binary(descriptor_bytes)
        case Type.DISPLAY_PRODUCT_NAME:
            return DisplayProductName.parse_binary(descriptor_bytes)
        case Type.DISPLAY_RANGE_LIMITS:
            return DisplayRangeLimits.parse_binary(descriptor_bytes)
        case Type.ALPHANUMERIC_DATA:
            return AlphanumericData.parse_binary(descriptor_bytes)
        case Type.DISPLAY_SERIAL_NUMBER:
            return DisplaySerialNumber.parse_binary(descriptor_bytes)
        case _:
            raise UnknownDescriptorTypeError(
                f"Unsupported display descriptor type 0x{descriptor_bytes[3]:02X}."
            )
