from typing import BinaryIO


def read_file_bytes(file: BinaryIO, chunk_size: int) -> bytearray:
    """Read exactly chunk_size bytes or until EOF"""

    rv = bytearray([])
    while len(rv) < chunk_size:
        remaining = chunk_size - len(rv)
        next_read = file.read(remaining)
        if len(next_read) == 0:
            return rv
        rv += next_read

    return bytearray(rv)


# Files are read one EDID block at a time.
READ_CHUNK_SIZE = 128


def read_file(path: str) -> bytes:
    """Read an entire binary file."""
    data = bytearray()
    with open(path, mode="rb") as file:
        while chunk := read_file_bytes(file, READ_CHUNK_SIZE):
            data += chunk
    return bytes(data)


def write_file(path: str, data: bytes) -> None:
    with open(path, mode="wb") as file:
        file.write(data)
