from __future__ import annotations

from collections.abc import Sequence

from .shapetypes import ShapeType
from .types import Coordinate, MapRect, RecordValue


class Shape:
    def __init__(
        self,
        shapeType: ShapeType = ShapeType.NULL,
        oid: int | None = None,
    ):
        """Stores the geometry of one shapefile record along with its
        attributes. Every shape type except the "Null" type contains
        coordinates at some level, for example the vertices of a polygon.
        If a shape type has multiple runs of coordinates within a single
        record then those runs are called parts, and are designated by
        their starting index into the coordinates. For MultiPatch geometry,
        partTypes designates the patch type of each of the parts.

        Coordinates are (latitude, longitude) pairs, i.e. (y, x) as stored
        on disk. The geometry is filled in by the shp decoder and the
        attributes in info are merged in afterwards by the Shapefile reader.
        """
        self.shapeType = shapeType
        self.boundingBox: MapRect | None = None
        self.parts: list[int] = []
        self.partTypes: list[int] = []
        self.coordinates: list[Coordinate] = []
        # Per vertex elevations of array Z types
        self.zs: list[float] = []
        self._z: float | None = None
        self.m: list[float | None] = []
        self.info: dict[str, RecordValue] = {}
        self.__oid: int = -1 if oid is None else oid

    @property
    def z(self) -> float | None:
        """The single elevation of a PointZ, otherwise the first of zs."""
        if self._z is not None:
            return self._z
        if self.zs:
            return self.zs[0]
        return None

    @z.setter
    def z(self, value: float | None) -> None:
        self._z = value

    @property
    def oid(self) -> int:
        """The index position of the shape in the original shapefile"""
        return self.__oid

    @property
    def shapeTypeName(self) -> str:
        return self.shapeType.shapeTypeName

    def parts_coordinates(self) -> list[list[Coordinate]]:
        """Splits the coordinates into one list per part. Shapes without
        parts are returned as a single part."""
        if not self.parts:
            return [list(self.coordinates)] if self.coordinates else []
        ends: Sequence[int] = list(self.parts[1:]) + [len(self.coordinates)]
        return [
            self.coordinates[start:end] for start, end in zip(self.parts, ends)
        ]

    def __repr__(self) -> str:
        return f"Shape #{self.__oid}: {self.shapeTypeName}"
