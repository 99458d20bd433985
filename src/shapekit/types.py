from __future__ import annotations

import io
from datetime import date
from os import PathLike
from typing import (
    IO,
    Any,
    Final,
    Literal,
    NamedTuple,
    Protocol,
    TypeVar,
    Union,
)

## Custom type variables

T = TypeVar("T")


class Coordinate(NamedTuple):
    """A vertex, stored the way a map consumer wants it: y first."""

    latitude: float
    longitude: float


class MapRect(NamedTuple):
    """An axis-aligned rectangle in map (x, y) coordinates, anchored at its
    minimum corner."""

    origin_x: float
    origin_y: float
    width: float
    height: float

    @classmethod
    def from_bounds(
        cls, xmin: float, ymin: float, xmax: float, ymax: float
    ) -> MapRect:
        return cls(xmin, ymin, xmax - xmin, ymax - ymin)

    @classmethod
    def from_point(cls, x: float, y: float) -> MapRect:
        return cls(x, y, 0.0, 0.0)

    @property
    def min_x(self) -> float:
        return self.origin_x

    @property
    def min_y(self) -> float:
        return self.origin_y

    @property
    def max_x(self) -> float:
        return self.origin_x + self.width

    @property
    def max_y(self) -> float:
        return self.origin_y + self.height

    @property
    def is_empty(self) -> bool:
        return self.width == 0 and self.height == 0


class Range(NamedTuple):
    lower: float
    upper: float


class ReadableBinStream(Protocol):
    def read(self, size: int = -1) -> bytes: ...


class ReadSeekableBinStream(Protocol):
    def seek(self, offset: int, whence: int = 0) -> int: ...
    def tell(self) -> int: ...
    def read(self, size: int = -1) -> bytes: ...


# File name, file object or anything with a read() method that returns bytes.
BinaryFileT = Union[str, PathLike[Any], IO[bytes]]
BinaryFileStreamT = Union[IO[bytes], io.BytesIO, ReadSeekableBinStream]

FieldTypeT = Literal["C", "D", "F", "L", "M", "N"]


# https://en.wikipedia.org/wiki/.dbf#Database_records
class FieldType:
    """A bare bones 'enum', as the enum library noticeably slows performance."""

    C: Final = "C"  # "Character"  # (str)
    D: Final = "D"  # "Date"
    F: Final = "F"  # "Floating point"
    L: Final = "L"  # "Logical"  # (bool)
    M: Final = "M"  # "Memo"  # Legacy. (10 digit str, starting block in an .dbt file)
    N: Final = "N"  # "Numeric"  # (int or float)
    __members__: set[FieldTypeT] = {
        "C",
        "D",
        "F",
        "L",
        "M",
        "N",
    }


FIELD_TYPE_ALIASES: dict[str | bytes, FieldTypeT] = {}
for c in FieldType.__members__:
    FIELD_TYPE_ALIASES[c.upper()] = c
    FIELD_TYPE_ALIASES[c.lower()] = c
    FIELD_TYPE_ALIASES[c.encode("ascii").lower()] = c
    FIELD_TYPE_ALIASES[c.encode("ascii").upper()] = c


RecordValueNotDate = Union[bool, int, float, str]

# A possible value in a dbf record. Blank cells of any type are "".
RecordValue = Union[RecordValueNotDate, date]
