"""
shapekit
Reads ESRI Shapefiles (.shp, .shx, .dbf and .cpg) into feature records.
Compatible with Python versions >=3.9
"""

from __future__ import annotations

import logging

from .__version__ import __version__
from .constants import (
    MULTIPATCH,
    MULTIPOINT,
    MULTIPOINTM,
    MULTIPOINTZ,
    NODATA,
    NULL,
    PARTTYPE_LOOKUP,
    POINT,
    POINTM,
    POINTZ,
    POLYGON,
    POLYGONM,
    POLYGONZ,
    POLYLINE,
    POLYLINEM,
    POLYLINEZ,
    SHAPETYPE_LOOKUP,
)
from .cpg import CodePage, CPGFile, resolve
from .dbf import DBFFile, DBFRecord, FieldDescriptor
from .exceptions import ParseError, ShapefileException
from .reader import LoadState, Shapefile
from .shapes import Shape
from .shapetypes import ShapeType
from .shp import SHPFile
from .shx import SHXFile
from .types import (
    Coordinate,
    FieldType,
    FieldTypeT,
    MapRect,
    Range,
    RecordValue,
)

__all__ = [
    "__version__",
    "NULL",
    "POINT",
    "POLYLINE",
    "POLYGON",
    "MULTIPOINT",
    "POINTZ",
    "POLYLINEZ",
    "POLYGONZ",
    "MULTIPOINTZ",
    "POINTM",
    "POLYLINEM",
    "POLYGONM",
    "MULTIPOINTM",
    "MULTIPATCH",
    "NODATA",
    "SHAPETYPE_LOOKUP",
    "PARTTYPE_LOOKUP",
    "Shapefile",
    "LoadState",
    "SHPFile",
    "SHXFile",
    "DBFFile",
    "DBFRecord",
    "FieldDescriptor",
    "CPGFile",
    "CodePage",
    "resolve",
    "Shape",
    "ShapeType",
    "Coordinate",
    "MapRect",
    "Range",
    "FieldType",
    "FieldTypeT",
    "RecordValue",
    "ShapefileException",
    "ParseError",
]

logger = logging.getLogger(__name__)
