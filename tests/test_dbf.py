"""
Tests decoding of .dbf headers and records.
"""

import datetime
import io
import logging

import pytest

import shapekit
from shapekit import DBFFile, FieldDescriptor, FieldType, ShapeType
from shapefile_builders import build_dbf

NAME_FIELD = ("NAME", "C", 10, 0)


def open_dbf(data, **kwargs):
    return DBFFile(io.BytesIO(data), **kwargs)


def single_value(field, text):
    """Decodes one on-disk text value of the given field."""
    dbf = open_dbf(build_dbf([field], [[text]]))
    return dbf.recordAtIndex(0)[0]


@pytest.mark.parametrize(
    "date_bytes,expected",
    [
        ((99, 1, 1), datetime.date(1999, 1, 1)),
        ((5, 1, 1), datetime.date(2005, 1, 1)),
        ((81, 12, 31), datetime.date(1981, 12, 31)),
        ((80, 6, 15), datetime.date(2080, 6, 15)),
        ((124, 3, 2), datetime.date(2024, 3, 2)),
    ],
)
def test_last_update_century_pivot(date_bytes, expected):
    dbf = open_dbf(build_dbf([NAME_FIELD], [], date=date_bytes))
    assert dbf.lastUpdate == expected


def test_invalid_last_update(caplog):
    with caplog.at_level(logging.WARNING, logger="shapekit.dbf"):
        dbf = open_dbf(build_dbf([NAME_FIELD], [], date=(99, 0, 0)))
    assert dbf.lastUpdate is None
    assert "Invalid last update date" in caplog.text


def test_header():
    fields = [NAME_FIELD, ("POP", "N", 8, 0), ("AREA", "F", 12, 3)]
    dbf = open_dbf(build_dbf(fields, [["a", "1", "1.5"]] * 3, shape_type=5))
    assert dbf.shapeType is ShapeType.POLYGON
    assert dbf.numRecords == len(dbf) == 3
    assert dbf.headerLength == 32 + 3 * 32 + 1
    assert dbf.recordLength == 1 + 10 + 8 + 12
    assert dbf.fields == [
        FieldDescriptor("DeletionFlag", FieldType.C, 1, 0),
        FieldDescriptor("NAME", FieldType.C, 10, 0),
        FieldDescriptor("POP", FieldType.N, 8, 0),
        FieldDescriptor("AREA", FieldType.F, 12, 3),
    ]
    assert dbf.fieldNames == ["NAME", "POP", "AREA"]


def test_field_name_limit():
    dbf = open_dbf(build_dbf([("A" * 11, "C", 5, 0)], []))
    assert dbf.fields[1].name == "A" * 10


def test_unsupported_field_type():
    with pytest.raises(shapekit.ParseError):
        open_dbf(build_dbf([("X", "Q", 5, 0)], []))


def test_truncated_header():
    data = build_dbf([NAME_FIELD, ("POP", "N", 8, 0)], [])
    with pytest.raises(shapekit.ParseError):
        open_dbf(data[:50])


def test_missing_terminator_is_flagged_not_raised(caplog):
    data = build_dbf([NAME_FIELD], [["Paris"]], terminator=b"X")
    with caplog.at_level(logging.WARNING, logger="shapekit.dbf"):
        dbf = open_dbf(data)
    assert "lacks expected terminator" in caplog.text
    assert dbf.recordAtIndex(0)["NAME"] == "Paris"


def test_record_length_recovery(caplog):
    """
    Assert that when the header declares a record length different
    from the sum of the field sizes, the sum is used to find records.
    """
    fields = [NAME_FIELD, ("POP", "N", 5, 0)]
    rows = [["Oslo", "700"], ["Bergen", "285"], ["Tromso", "77"]]
    with caplog.at_level(logging.WARNING, logger="shapekit.dbf"):
        dbf = open_dbf(build_dbf(fields, rows, record_length=40))
    assert dbf.recordLength == 16
    assert "declared in dbf header 40 != total size of fields 16" in caplog.text
    assert list(dbf.recordAtIndex(1)) == ["Bergen", 285]
    assert list(dbf.recordAtIndex(2)) == ["Tromso", 77]


@pytest.mark.parametrize(
    "text,expected",
    [
        ("42", 42),
        ("  -7", -7),
        ("3.14", 3.14),
        ("1e3", 1000.0),
        ("", ""),
        ("   ", ""),
        ("********", ""),
        ("abc", ""),
        ("1_000", ""),
    ],
)
def test_numeric(text, expected):
    value = single_value(("VAL", "N", 8, 0), text)
    assert value == expected
    assert type(value) is type(expected)


def test_floating():
    assert single_value(("VAL", "F", 12, 4), "  12.5000") == 12.5
    assert single_value(("VAL", "F", 12, 4), "") == ""


def test_floating_invalid():
    dbf = open_dbf(build_dbf([("VAL", "F", 8, 2)], [["x1.0"]]))
    with pytest.raises(shapekit.ParseError):
        dbf.recordAtIndex(0)


def test_numeric_only_ascii_digits():
    """
    Assert that digit separators and non-ASCII digits, which Python's
    int() and float() would accept, are not numbers in a dbf.
    """
    data = build_dbf([("VAL", "N", 8, 0)], [["\u0661\u0662"]], encoding="utf-8")
    assert open_dbf(data, encoding="utf-8").recordAtIndex(0)[0] == ""

    dbf = open_dbf(build_dbf([("VAL", "F", 8, 2)], [["1_0.5"]]))
    with pytest.raises(shapekit.ParseError):
        dbf.recordAtIndex(0)


def test_field_type_distinguishes_equal_values():
    """
    Assert that a Numeric and a Floating cell decoding to the same
    float are told apart through the record's field descriptors.
    """
    fields = [("NUM", "N", 6, 2), ("FLT", "F", 6, 2), ("TXT", "C", 4, 0), ("MEMO", "M", 4, 0)]
    dbf = open_dbf(build_dbf(fields, [["1.50", "1.50", "12", "12"]]))
    record = dbf.recordAtIndex(0)
    assert record[0] == record[1] == 1.5
    assert record["TXT"] == record["MEMO"] == "12"
    types = {f.name: f.field_type for f in dbf.fields[1:]}
    assert [types[name] for name in dbf.fieldNames] == ["N", "F", "C", "M"]


def test_unknown_encoding():
    with pytest.raises(shapekit.ParseError):
        open_dbf(build_dbf([NAME_FIELD], [["a"]]), encoding="no-such-codec")


def test_date():
    assert single_value(("D", "D", 8, 0), "20190308") == datetime.date(2019, 3, 8)
    assert single_value(("D", "D", 8, 0), "") == ""


@pytest.mark.parametrize("text", ["20191308", "2019030", "2019-3-8", "abcdefgh"])
def test_date_invalid(text):
    dbf = open_dbf(build_dbf([("D", "D", 8, 0)], [[text]]))
    with pytest.raises(shapekit.ParseError):
        dbf.recordAtIndex(0)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("T", True),
        ("t", True),
        ("Y", True),
        ("y", True),
        ("F", False),
        ("n", False),
        ("?", False),
        ("", ""),
    ],
)
def test_logical(text, expected):
    assert single_value(("FLAG", "L", 1, 0), text) == expected


def test_character_and_memo_are_trimmed():
    fields = [("NAME", "C", 12, 0), ("NOTE", "M", 10, 0)]
    dbf = open_dbf(build_dbf(fields, [["  Lisbon  ", "      1234"]]))
    record = dbf.recordAtIndex(0)
    assert record["NAME"] == "Lisbon"
    assert record["NOTE"] == "1234"


def test_null_padded_character():
    field_bytes = b" " + b"Rome\x00\x00\x00\x00\x00\x00"
    dbf = open_dbf(build_dbf([NAME_FIELD], [field_bytes]))
    assert dbf.recordAtIndex(0)[0] == "Rome"


def test_deleted_record():
    rows = [["Madrid"], [("*",), "Gone"], ["Seville"]]
    dbf = open_dbf(build_dbf([NAME_FIELD], rows))
    deleted = dbf.recordAtIndex(1)
    assert deleted.deleted
    assert list(deleted) == []
    assert deleted.as_dict() == {}
    assert deleted.oid == 1
    assert not dbf.recordAtIndex(2).deleted
    assert [r["NAME"] for r in dbf.records()] == ["Madrid", "Seville"]
    assert len(list(dbf.iterRecords())) == 3


def test_record_as_dict():
    fields = [NAME_FIELD, ("POP", "N", 5, 0)]
    dbf = open_dbf(build_dbf(fields, [["Oslo", "700"]]))
    record = dbf[0]
    assert record.as_dict() == {"NAME": "Oslo", "POP": 700}
    assert record.oid == 0
    with pytest.raises(IndexError):
        record["MISSING"]


def test_record_past_end_of_file():
    dbf = open_dbf(build_dbf([NAME_FIELD], [["Oslo"]]))
    with pytest.raises(shapekit.ParseError):
        dbf.recordAtIndex(1)
    with pytest.raises(shapekit.ParseError):
        dbf.recordAtIndex(-1)


def test_truncated_record():
    data = build_dbf([NAME_FIELD], [["Oslo"], ["Bergen"]])
    dbf = open_dbf(data[:-4])
    assert dbf.recordAtIndex(0)[0] == "Oslo"
    with pytest.raises(shapekit.ParseError):
        dbf.recordAtIndex(1)


def test_encoding():
    data = build_dbf([NAME_FIELD], [["Zürich"]], encoding="cp1252")
    dbf = open_dbf(data, encoding="cp1252")
    assert dbf.recordAtIndex(0)[0] == "Zürich"


def test_undecodable_value():
    data = build_dbf([NAME_FIELD], [["Zürich"]], encoding="cp1252")
    dbf = open_dbf(data, encoding="utf-8")
    with pytest.raises(shapekit.ParseError):
        dbf.recordAtIndex(0)
