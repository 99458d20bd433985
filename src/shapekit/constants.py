from __future__ import annotations

# Module settings
VERBOSE = True

DEFAULT_ENCODING = "utf-8"
DEFAULT_ENCODING_ERRORS = "strict"

# Constants for shape types
NULL = 0
POINT = 1
POLYLINE = 3
POLYGON = 5
MULTIPOINT = 8
POINTZ = 11
POLYLINEZ = 13
POLYGONZ = 15
MULTIPOINTZ = 18
POINTM = 21
POLYLINEM = 23
POLYGONM = 25
MULTIPOINTM = 28
MULTIPATCH = 31

SHAPETYPE_LOOKUP = {
    NULL: "NULL",
    POINT: "POINT",
    POLYLINE: "POLYLINE",
    POLYGON: "POLYGON",
    MULTIPOINT: "MULTIPOINT",
    POINTZ: "POINTZ",
    POLYLINEZ: "POLYLINEZ",
    POLYGONZ: "POLYGONZ",
    MULTIPOINTZ: "MULTIPOINTZ",
    POINTM: "POINTM",
    POLYLINEM: "POLYLINEM",
    POLYGONM: "POLYGONM",
    MULTIPOINTM: "MULTIPOINTM",
    MULTIPATCH: "MULTIPATCH",
}

TRIANGLE_STRIP = 0
TRIANGLE_FAN = 1
OUTER_RING = 2
INNER_RING = 3
FIRST_RING = 4
RING = 5

PARTTYPE_LOOKUP = {
    TRIANGLE_STRIP: "TRIANGLE_STRIP",
    TRIANGLE_FAN: "TRIANGLE_FAN",
    OUTER_RING: "OUTER_RING",
    INNER_RING: "INNER_RING",
    FIRST_RING: "FIRST_RING",
    RING: "RING",
}

# Measure values below this are "no data" as per the ESRI shapefile technical description.
NODATA = -1e38

SHP_HEADER_LENGTH = 100
SHP_RECORD_HEADER_LENGTH = 8
SHX_RECORD_LENGTH = 8
DBF_FIELD_DESCRIPTOR_LENGTH = 32
DBF_HEADER_TERMINATOR = b"\r"

DELETION_FLAG = "DeletionFlag"
