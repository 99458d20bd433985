"""
Reads dBase III+ attribute tables (extended with the dBase IV 'F' type).
Xbase-related code borrows heavily from ActiveState Python Cookbook Recipe
362715 by Raymond Hettinger.
"""

from __future__ import annotations

import codecs
import io
import logging
import string
from collections.abc import Iterable, Iterator
from datetime import date
from struct import Struct
from typing import Any, NamedTuple, SupportsIndex, overload

from .constants import (
    DBF_FIELD_DESCRIPTOR_LENGTH,
    DBF_HEADER_TERMINATOR,
    DEFAULT_ENCODING,
    DEFAULT_ENCODING_ERRORS,
    DELETION_FLAG,
)
from .exceptions import ParseError
from .helpers import read_exact, unpack_from_stream
from .shapetypes import ShapeType
from .types import (
    FIELD_TYPE_ALIASES,
    FieldType,
    FieldTypeT,
    ReadSeekableBinStream,
    RecordValue,
)

logger = logging.getLogger(__name__)

# Fixed width values are padded with blanks, sometimes with null bytes.
_PADDING = string.whitespace + "\x00"
_PADDING_BYTES = string.whitespace.encode("ascii") + b"\x00"
# in wide code pages a null or whitespace byte can be half of a character
_WIDE_PADDING_BYTES = b" "

_NUMERIC_CHARS = frozenset("0123456789+-.eE")

_TRUE_LOGICALS = frozenset("TtYy")


class FieldDescriptor(NamedTuple):
    name: str
    field_type: FieldTypeT
    length: int
    decimal: int

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        encoding: str = DEFAULT_ENCODING,
        encodingErrors: str = DEFAULT_ENCODING_ERRORS,
    ) -> FieldDescriptor:
        """Parses one 32 byte field descriptor of a dbf header."""
        encoded_field_tuple: tuple[bytes, bytes, int, int] = unpack_from_stream(
            "<", "11sc4xBB14x", io.BytesIO(data)
        )
        encoded_name, encoded_type_char, length, decimal = encoded_field_tuple

        # at most 10 name bytes, the 11th is the null terminator
        if b"\x00" in encoded_name:
            idx = encoded_name.index(b"\x00")
        else:
            idx = len(encoded_name) - 1
        encoded_name = encoded_name[:idx]
        try:
            name = encoded_name.decode(encoding, encodingErrors).strip()
        except UnicodeDecodeError as e:
            raise ParseError(f"Could not decode field name {encoded_name!r}: {e}")

        try:
            field_type = FIELD_TYPE_ALIASES[encoded_type_char]
        except KeyError:
            raise ParseError(
                f"Field {name!r} has unsupported type {encoded_type_char!r}"
            )

        return cls(name, field_type, length, decimal)

    def __repr__(self) -> str:
        return f'FieldDescriptor(name="{self.name}", field_type=FieldType.{self.field_type}, length={self.length}, decimal={self.decimal})'


class DBFRecord(list[RecordValue]):
    """
    A decoded dbf row. Subclasses list, so the values can be used
    positionally, and also by field name:

    >>> r = DBFRecord({'ID': 0}, [7])
    >>> r[0], r['ID']
    (7, 7)

    A record is either active (one value per field) or deleted (empty,
    with deleted set). Rows that cannot be decoded raise ParseError
    instead, so the two are never confused.

    Values are plain Python objects, so a Numeric cell holding a float
    looks the same as a Floating one, and Memo looks like Character.
    The field_type of the matching FieldDescriptor (DBFFile.fields,
    offset by the deletion flag) tells them apart.
    """

    def __init__(
        self,
        field_positions: dict[str, int],
        values: Iterable[RecordValue],
        oid: int | None = None,
        deleted: bool = False,
    ):
        self.__field_positions = field_positions
        self.__oid = -1 if oid is None else oid
        self.deleted = deleted
        list.__init__(self, values)

    @overload
    def __getitem__(self, i: SupportsIndex) -> RecordValue: ...
    @overload
    def __getitem__(self, s: slice) -> list[RecordValue]: ...
    @overload
    def __getitem__(self, s: str) -> RecordValue: ...
    def __getitem__(
        self, item: SupportsIndex | slice | str
    ) -> RecordValue | list[RecordValue]:
        if isinstance(item, str):
            try:
                index = self.__field_positions[item]
            except KeyError:
                raise IndexError(f'"{item}" is not a field name')
            return list.__getitem__(self, index)
        return list.__getitem__(self, item)

    @property
    def oid(self) -> int:
        """The index position of the record in the original dbf file"""
        return self.__oid

    def as_dict(self) -> dict[str, RecordValue]:
        """
        Returns this record as a dictionary using the field names as keys.
        A deleted record gives an empty dict.
        """
        if self.deleted:
            return {}
        return {f: list.__getitem__(self, i) for f, i in self.__field_positions.items()}

    def __repr__(self) -> str:
        if self.deleted:
            return f"Record #{self.__oid}: deleted"
        return f"Record #{self.__oid}: {list(self)}"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, DBFRecord) and self.deleted != other.deleted:
            return False
        return list.__eq__(self, other)


def _century_pivot(yy: int) -> int:
    return 1900 + yy if yy > 80 else 2000 + yy


class DBFFile:
    """Reads the header of a .dbf file on construction, then decodes
    records by index on request."""

    pathExtension = "dbf"

    def __init__(
        self,
        dbf: ReadSeekableBinStream,
        encoding: str = DEFAULT_ENCODING,
        encodingErrors: str = DEFAULT_ENCODING_ERRORS,
    ):
        self.dbf = dbf
        self.encoding = encoding
        self.encodingErrors = encodingErrors
        try:
            codec_name = codecs.lookup(encoding).name
        except LookupError:
            raise ParseError(f"Unknown dbf encoding: {encoding!r}")
        # field names and padding are single byte even in wide code pages
        self.__wide = codec_name.startswith(("utf-16", "utf-32"))
        self.fields: list[FieldDescriptor] = []
        self.__dbfHeader()

    def __dbfHeader(self) -> None:
        """Reads a dbf header."""
        dbf = self.dbf
        dbf.seek(0)
        (
            shape_type_code,
            yy,
            mm,
            dd,
            self.numRecords,
            self.headerLength,
            declared_record_length,
        ) = unpack_from_stream("<", "BBBBIHH20x", dbf)

        self.shapeType = ShapeType.lookup(shape_type_code)
        year = _century_pivot(yy)
        try:
            self.lastUpdate: date | None = date(year, mm, dd)
        except ValueError:
            logger.warning("Invalid last update date in dbf header: %d-%d-%d", year, mm, dd)
            self.lastUpdate = None
        logger.debug("dbf shapeType: %s", self.shapeType.shapeTypeName)
        logger.debug("dbf lastUpdate: %s", self.lastUpdate)
        logger.debug("dbf numRecords: %d", self.numRecords)

        # read fields
        numFields = max(0, (self.headerLength - 33) // DBF_FIELD_DESCRIPTOR_LENGTH)
        for __field in range(numFields):
            self.fields.append(
                FieldDescriptor.from_bytes(
                    read_exact(dbf, DBF_FIELD_DESCRIPTOR_LENGTH),
                    "ascii" if self.__wide else self.encoding,
                    self.encodingErrors,
                )
            )

        terminator = read_exact(dbf, 1)
        if terminator != DBF_HEADER_TERMINATOR:
            logger.warning(
                "dbf header lacks expected terminator, got %r (likely corrupt?)",
                terminator,
            )

        # insert deletion field at start
        self.fields.insert(0, FieldDescriptor(DELETION_FLAG, FieldType.C, 1, 0))

        # total size of fields is authoritative over the header's record length
        computed_record_length = sum(field.length for field in self.fields)
        if computed_record_length != declared_record_length:
            logger.warning(
                "Record length declared in dbf header %d != total size of fields %d, "
                "using the total size of fields",
                declared_record_length,
                computed_record_length,
            )
        self.recordLength: int = computed_record_length

        self.__recStruct = Struct("".join(f"{field.length}s" for field in self.fields))
        # note: fieldLookup gives the index position of a field inside a DBFRecord
        self.__fieldLookup = {f.name: i for i, f in enumerate(self.fields[1:])}

    @property
    def fieldNames(self) -> list[str]:
        """Names of the data fields, excluding the deletion flag."""
        return [field.name for field in self.fields[1:]]

    def __len__(self) -> int:
        return self.numRecords

    def __getitem__(self, i: int) -> DBFRecord:
        return self.recordAtIndex(i)

    def __value(self, field: FieldDescriptor, raw: bytes) -> RecordValue:
        # padding is stripped before decoding, it is single byte in every code page
        raw = raw.strip(_WIDE_PADDING_BYTES if self.__wide else _PADDING_BYTES)
        if not raw:
            return ""
        try:
            value = raw.decode(self.encoding, self.encodingErrors).strip(_PADDING)
        except UnicodeDecodeError as e:
            raise ParseError(f"Could not decode value of field {field.name!r}: {e}")

        if not value:
            return ""

        typ = field.field_type
        if typ is FieldType.N:
            # numeric: number stored as a string, right justified, and padded with blanks to the width of the field.
            if not _NUMERIC_CHARS.issuperset(value):
                return ""
            try:
                return int(value)
            except ValueError:
                try:
                    return float(value)
                except ValueError:
                    return ""
        elif typ is FieldType.F:
            try:
                if not _NUMERIC_CHARS.issuperset(value):
                    raise ValueError(value)
                return float(value)
            except ValueError:
                raise ParseError(f"Invalid float in field {field.name!r}: {value!r}")
        elif typ is FieldType.D:
            # date: 8 bytes - date stored as a string in the format YYYYMMDD.
            try:
                if len(value) != 8 or not (value.isascii() and value.isdigit()):
                    raise ValueError(value)
                return date(int(value[:4]), int(value[4:6]), int(value[6:8]))
            except ValueError:
                raise ParseError(f"Invalid date in field {field.name!r}: {value!r}")
        elif typ is FieldType.L:
            # logical: 1 byte - ? Y y N n T t F f (? when not initialized).
            return value in _TRUE_LOGICALS
        # character and memo (a .dbt block number) are kept as text
        return value

    def recordAtIndex(self, i: int) -> DBFRecord:
        """Returns the dbf record at index i."""
        if i < 0:
            raise ParseError(f"Record index must not be negative. Got: {i}")
        self.dbf.seek(self.headerLength + i * self.recordLength)
        data = self.dbf.read(self.recordLength)
        if len(data) != self.recordLength:
            raise ParseError(
                f"Record {i} is truncated: needed {self.recordLength} bytes, "
                f"got {len(data)}"
            )
        recordContents: tuple[bytes, ...] = self.__recStruct.unpack(data)

        # deletion flag field is always unpacked as first value
        if recordContents[0] != b" ":
            return DBFRecord(self.__fieldLookup, [], oid=i, deleted=True)

        values = [
            self.__value(field, raw)
            for field, raw in zip(self.fields[1:], recordContents[1:])
        ]
        return DBFRecord(self.__fieldLookup, values, oid=i)

    def iterRecords(self, start: int = 0, stop: int | None = None) -> Iterator[DBFRecord]:
        """Returns a generator of the records from start up to stop
        (default: number of records), deleted records included."""
        if stop is None:
            stop = self.numRecords
        for i in range(start, stop):
            yield self.recordAtIndex(i)

    def records(self) -> list[DBFRecord]:
        """Returns all records that are not deleted."""
        return [r for r in self.iterRecords() if not r.deleted]
