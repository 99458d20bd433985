from __future__ import annotations

import enum

from .constants import (
    MULTIPATCH,
    MULTIPOINT,
    MULTIPOINTM,
    MULTIPOINTZ,
    NULL,
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
from .exceptions import ParseError

_HasBoundingBox_shapeTypes = frozenset(
    [
        POLYLINE,
        POLYLINEM,
        POLYLINEZ,
        MULTIPOINT,
        MULTIPOINTM,
        MULTIPOINTZ,
        POLYGON,
        POLYGONM,
        POLYGONZ,
        MULTIPATCH,
    ]
)

_HasParts_shapeTypes = frozenset(
    [
        POLYLINE,
        POLYLINEM,
        POLYLINEZ,
        POLYGON,
        POLYGONM,
        POLYGONZ,
        MULTIPATCH,
    ]
)

# Multipoints carry a point count without a part count.
_HasPoints_shapeTypes = _HasParts_shapeTypes | frozenset(
    [MULTIPOINT, MULTIPOINTM, MULTIPOINTZ]
)

_HasZ_shapeTypes = frozenset([POLYLINEZ, POLYGONZ, MULTIPOINTZ, MULTIPATCH])

_HasM_shapeTypes = frozenset([POLYLINEM, POLYGONM, MULTIPOINTM])

# Z types may be followed by an M section, but only if the record has room.
_HasOptionalM_shapeTypes = frozenset(
    [POINTZ, POLYLINEZ, POLYGONZ, MULTIPOINTZ, MULTIPATCH]
)

_SinglePoint_shapeTypes = frozenset([POINT, POINTM, POINTZ])
_SingleZ_shapeTypes = frozenset([POINTZ])
_SingleM_shapeTypes = frozenset([POINTM])


class ShapeType(enum.IntEnum):
    """The shape types of the ESRI shapefile format, each tagged with the
    optional record sections it carries."""

    NULL = NULL
    POINT = POINT
    POLYLINE = POLYLINE
    POLYGON = POLYGON
    MULTIPOINT = MULTIPOINT
    POINTZ = POINTZ
    POLYLINEZ = POLYLINEZ
    POLYGONZ = POLYGONZ
    MULTIPOINTZ = MULTIPOINTZ
    POINTM = POINTM
    POLYLINEM = POLYLINEM
    POLYGONM = POLYGONM
    MULTIPOINTM = MULTIPOINTM
    MULTIPATCH = MULTIPATCH

    @classmethod
    def lookup(cls, code: int) -> ShapeType:
        """Returns the shape type for code. Unknown codes fail closed to NULL,
        so an unrecognised extension does not abort an otherwise valid file."""
        try:
            return cls(code)
        except ValueError:
            return cls.NULL

    @classmethod
    def strict_lookup(cls, code: int) -> ShapeType:
        """Like lookup(), but raises ParseError for unknown codes. Used inside
        shape records, where the layout that follows depends on the type."""
        try:
            return cls(code)
        except ValueError:
            raise ParseError(f"Unknown shape type code: {code}")

    @property
    def shapeTypeName(self) -> str:
        return SHAPETYPE_LOOKUP[self.value]

    @property
    def hasBoundingBox(self) -> bool:
        return self.value in _HasBoundingBox_shapeTypes

    @property
    def hasParts(self) -> bool:
        return self.value in _HasParts_shapeTypes

    @property
    def hasPoints(self) -> bool:
        return self.value in _HasPoints_shapeTypes

    @property
    def hasZValues(self) -> bool:
        return self.value in _HasZ_shapeTypes

    @property
    def hasMValues(self) -> bool:
        return self.value in _HasM_shapeTypes

    @property
    def hasOptionalMValues(self) -> bool:
        return self.value in _HasOptionalM_shapeTypes

    @property
    def hasSinglePoint(self) -> bool:
        return self.value in _SinglePoint_shapeTypes

    @property
    def hasSingleZ(self) -> bool:
        return self.value in _SingleZ_shapeTypes

    @property
    def hasSingleM(self) -> bool:
        return self.value in _SingleM_shapeTypes

    @property
    def isMultipatch(self) -> bool:
        return self is ShapeType.MULTIPATCH
