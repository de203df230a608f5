from enum import IntFlag
from typing import TypeVar

F = TypeVar("F", bound=IntFlag)


def hex_int(int_value: int, digits: int, skip_prefix: bool = False) -> str:
    return f"0x{int_value:0{digits}X}" if not skip_prefix else f"{int_value:0{digits}X}"


def hex_bytes(bytes_value: bytes, separator: str = "") -> str:
    return "0x" + separator.join([hex_int(b, 2, skip_prefix=True) for b in bytes_value])


def parse_hex_bytes(text_value: str) -> bytes:
    """Parse hex text as produced by hex_bytes, with or without the 0x prefix and spaces."""
    return bytes.fromhex(text_value.removeprefix("0x").replace(" ", ""))


# IntFlag values as lists of member names


def flag_names(value: IntFlag) -> list[str]:
    return [flag.name for flag in type(value) if flag in value]


def parse_flag_names(flag_type: type[F], names: list[str]) -> F:
    """Combine flag members by name.  Unknown names raise KeyError."""
    value = flag_type(0)
    for name in names:
        value |= flag_type[name]
    return value
