from __future__ import annotations

import array
import logging
import sys

from .constants import SHP_HEADER_LENGTH, SHX_RECORD_LENGTH
from .exceptions import ParseError
from .helpers import read_exact, stream_length, unpack_from_stream
from .types import ReadSeekableBinStream

logger = logging.getLogger(__name__)


class SHXFile:
    """The .shx index: one (offset, content length) entry per shape."""

    pathExtension = "shx"

    def __init__(self, shx: ReadSeekableBinStream):
        self.shx = shx
        self.__shxHeader()
        self.__shxOffsets()

    def __shxHeader(self) -> None:
        """Reads the header information from a .shx file."""
        shx = self.shx
        actual_length = stream_length(shx)
        if actual_length < SHP_HEADER_LENGTH:
            raise ParseError(
                f"The shx header needs {SHP_HEADER_LENGTH} bytes, "
                f"the file only has {actual_length}"
            )
        # File length (16-bit word * 2 = bytes) - header length
        shx.seek(24)
        (file_length_words,) = unpack_from_stream(">", "i", shx)
        declared_count = (file_length_words * 2 - SHP_HEADER_LENGTH) // SHX_RECORD_LENGTH
        actual_count = (actual_length - SHP_HEADER_LENGTH) // SHX_RECORD_LENGTH
        if declared_count != actual_count:
            logger.warning(
                "Actual shx entry count %d != count from header %d, using the actual one",
                actual_count,
                declared_count,
            )
        self.shapeCount: int = actual_count

    def __shxOffsets(self) -> None:
        """Reads the shape offset positions from a .shx file"""
        shx = self.shx
        # Jump to the first record.
        shx.seek(SHP_HEADER_LENGTH)
        # Each index record consists of two nrs, we only want the first one
        shxRecords = array.array(
            "i", read_exact(shx, SHX_RECORD_LENGTH * self.shapeCount)
        )
        if sys.byteorder != "big":
            shxRecords.byteswap()
        self.shapeOffsets: list[int] = [2 * el for el in shxRecords[::2]]
        self.contentLengths: list[int] = [2 * el for el in shxRecords[1::2]]
