from __future__ import annotations

import os
from os import PathLike
from struct import Struct, error
from typing import Any, overload

from .exceptions import ParseError
from .types import ReadableBinStream, ReadSeekableBinStream, T

# Helpers


@overload
def fsdecode_if_pathlike(path: PathLike[Any]) -> str: ...
@overload
def fsdecode_if_pathlike(path: T) -> T: ...
def fsdecode_if_pathlike(path: Any) -> Any:
    if isinstance(path, PathLike):
        return os.fsdecode(path)  # str

    return path


def read_exact(stream: ReadableBinStream, size: int) -> bytes:
    """Reads exactly size bytes from stream, or raises ParseError."""
    if size < 0:
        raise ParseError(f"Cannot read a negative number of bytes: {size}")
    data = stream.read(size)
    if len(data) != size:
        raise ParseError(
            f"Unexpected end of data: needed {size} bytes, got {len(data)}"
        )
    return data


def unpack_from_stream(
    byte_order: str, fmt: str, stream: ReadableBinStream
) -> tuple[Any, ...]:
    """Reads and unpacks one field group. The byte order ("<" or ">")
    is given explicitly per call, as shapefiles mix both in one file."""
    if byte_order not in ("<", ">"):
        raise ValueError(f"byte_order must be '<' or '>'. Got: {byte_order!r}")
    st = Struct(byte_order + fmt)
    try:
        return st.unpack(read_exact(stream, st.size))
    except error as e:
        raise ParseError(f"Could not unpack {fmt!r}: {e}") from e


def stream_length(stream: ReadSeekableBinStream) -> int:
    """Measures the actual length of a seekable stream, restoring the position."""
    checkpoint = stream.tell()
    stream.seek(0, 2)
    length = stream.tell()
    stream.seek(checkpoint)
    return length
