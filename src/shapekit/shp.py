from __future__ import annotations

import logging

from .constants import NODATA, SHP_HEADER_LENGTH, SHP_RECORD_HEADER_LENGTH
from .exceptions import ParseError
from .helpers import read_exact, stream_length, unpack_from_stream
from .shapes import Shape
from .shapetypes import ShapeType
from .types import Coordinate, MapRect, Range, ReadSeekableBinStream

logger = logging.getLogger(__name__)


def _m_or_none(m: float) -> float | None:
    # Measure values less than NODATA are nodata values according to the ESRI shapefile technical description
    return None if m < NODATA else m


class SHPFile:
    """Decodes the geometry records of a .shp file. Only the header is
    read up front; each shape is decoded on request from its byte offset,
    as given by the .shx index."""

    pathExtension = "shp"

    def __init__(self, shp: ReadSeekableBinStream):
        self.shp = shp
        self.__shpHeader()

    def __shpHeader(self) -> None:
        """Reads the header information from a .shp file."""
        shp = self.shp
        shp.seek(0)
        if stream_length(shp) < SHP_HEADER_LENGTH:
            raise ParseError(
                f"The shp header needs {SHP_HEADER_LENGTH} bytes, "
                f"the file only has {stream_length(shp)}"
            )
        # File length (16-bit word * 2 = bytes), the only big endian field
        shp.seek(24)
        (file_length_words,) = unpack_from_stream(">", "i", shp)
        self.storeLength: int = file_length_words * 2
        self.version, shape_type_code = unpack_from_stream("<", "2i", shp)
        self.shapeType = ShapeType.lookup(shape_type_code)
        # The shapefile's bounding box (lower left, upper right)
        xmin, ymin, xmax, ymax = unpack_from_stream("<", "4d", shp)
        self.boundingMapRect = MapRect.from_bounds(xmin, ymin, xmax, ymax)
        zmin, zmax, mmin, mmax = unpack_from_stream("<", "4d", shp)
        self.elevationRange = Range(zmin, zmax)
        self.measureRange = Range(mmin, mmax)

        # Found shapefiles which report incorrect
        # shp file length in the header. Can't trust
        # that so we seek to the end of the file
        # and figure it out.
        actual_length = stream_length(shp)
        if actual_length != self.storeLength:
            logger.warning(
                "Actual shp length %d != length in header %d, using the actual one",
                actual_length,
                self.storeLength,
            )
            self.storeLength = actual_length

    @property
    def hasMeasures(self) -> bool:
        """True if the file level measure range is usable (both bounds non-zero)."""
        return self.measureRange.lower != 0.0 and self.measureRange.upper != 0.0

    def __ensure_available(self, size: int) -> None:
        # Guards against absurd counts before allocating anything for them.
        remaining = self.storeLength - self.shp.tell()
        if size < 0 or size > remaining:
            raise ParseError(
                f"Shape record needs {size} more bytes at offset {self.shp.tell()}, "
                f"only {remaining} remain"
            )

    def __read_doubles(self, n: int) -> list[float]:
        self.__ensure_available(n * 8)
        return list(unpack_from_stream("<", f"{n}d", self.shp))

    def __read_ints(self, n: int) -> list[int]:
        self.__ensure_available(n * 4)
        return list(unpack_from_stream("<", f"{n}i", self.shp))

    def shapeAtOffset(self, offset: int, oid: int | None = None) -> Shape | None:
        """Returns the shape whose record starts at offset, or None if offset
        is the end of the shape records."""
        if offset == self.storeLength:
            return None
        if offset > self.storeLength:
            raise ParseError(
                f"Trying to read shape at offset {offset}, "
                f"but the shp length is only {self.storeLength}"
            )
        if offset < SHP_HEADER_LENGTH:
            raise ParseError(f"Shape offset {offset} points inside the shp header")

        shp = self.shp
        shp.seek(offset)
        # The record number is redundant with the index position, the
        # content length only bounds the optional M section of Z types.
        (__recNum, content_length) = unpack_from_stream(">", "2i", shp)
        record_end = min(
            offset + SHP_RECORD_HEADER_LENGTH + 2 * content_length, self.storeLength
        )

        (shape_type_code,) = unpack_from_stream("<", "i", shp)
        shapeType = ShapeType.strict_lookup(shape_type_code)
        shape = Shape(shapeType, oid=oid)

        nParts = 0
        nPoints = 0

        if shapeType.hasBoundingBox:
            xmin, ymin, xmax, ymax = unpack_from_stream("<", "4d", shp)
            shape.boundingBox = MapRect.from_bounds(xmin, ymin, xmax, ymax)

        if shapeType.hasParts:
            (nParts,) = unpack_from_stream("<", "i", shp)

        if shapeType.hasPoints:
            (nPoints,) = unpack_from_stream("<", "i", shp)

        if nParts:
            shape.parts = self.__read_ints(nParts)

        if shapeType.isMultipatch:
            shape.partTypes = self.__read_ints(nParts)

        if nPoints:
            flat = self.__read_doubles(2 * nPoints)
            shape.coordinates = [
                Coordinate(latitude=y, longitude=x)
                for x, y in zip(flat[0::2], flat[1::2])
            ]

        if shapeType.hasZValues:
            zmin, zmax = unpack_from_stream("<", "2d", shp)
            logger.debug("Shape at %d: zmin %s, zmax %s", offset, zmin, zmax)
            shape.zs = self.__read_doubles(nPoints)

        if (shapeType.hasMValues and self.hasMeasures) or (
            shapeType.hasOptionalMValues
            and not shapeType.hasSinglePoint
            and record_end - shp.tell() >= 16 + 8 * nPoints
        ):
            mmin, mmax = unpack_from_stream("<", "2d", shp)
            logger.debug("Shape at %d: mmin %s, mmax %s", offset, mmin, mmax)
            shape.m = [_m_or_none(m) for m in self.__read_doubles(nPoints)]

        if shapeType.hasSinglePoint:
            x, y = unpack_from_stream("<", "2d", shp)
            shape.boundingBox = MapRect.from_point(x, y)
            shape.coordinates = [Coordinate(latitude=y, longitude=x)]

        if shapeType.hasSingleZ:
            (shape.z,) = unpack_from_stream("<", "d", shp)

        if shapeType.hasSingleM or (
            shapeType.hasOptionalMValues
            and shapeType.hasSinglePoint
            and record_end - shp.tell() >= 8
        ):
            (m,) = unpack_from_stream("<", "d", shp)
            shape.m = [_m_or_none(m)]

        return shape
