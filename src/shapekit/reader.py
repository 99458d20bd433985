from __future__ import annotations

import enum
import io
import logging
import os
from collections.abc import Iterator
from datetime import date
from os import PathLike
from types import TracebackType
from typing import IO, Any

from . import constants
from .constants import DEFAULT_ENCODING, DEFAULT_ENCODING_ERRORS
from .cpg import CPGFile
from .dbf import DBFFile, FieldDescriptor
from .exceptions import ParseError
from .helpers import fsdecode_if_pathlike
from .shapes import Shape
from .shapetypes import ShapeType
from .shp import SHPFile
from .shx import SHXFile
from .types import BinaryFileStreamT, BinaryFileT, MapRect, Range

logger = logging.getLogger(__name__)


class LoadState(enum.Enum):
    UNLOADED = "unloaded"
    LOADED = "loaded"


class Shapefile:
    """Reads the four sibling files of a shapefile (.shp, .shx, .dbf and
    the optional .cpg) as a unit. The "shapefile_path" argument is the
    path to any of them, or to their common base name; the extension is
    ignored. File-like objects may be given instead with the shp, shx,
    dbf and cpg keywords, in which case they are left open on close().

    Only the headers are read on construction, and any failure to open or
    parse them raises ParseError. Calling loadShapes() then decodes every
    shape along with its attributes. A shape or record that fails to
    decode is logged and skipped, it never aborts the load.
    """

    CONSTITUENT_FILE_EXTS = ["shp", "shx", "dbf", "cpg"]
    assert all(ext.islower() for ext in CONSTITUENT_FILE_EXTS)

    def _assert_ext_is_supported(self, ext: str) -> None:
        assert ext in self.CONSTITUENT_FILE_EXTS

    def __init__(
        self,
        shapefile_path: str | PathLike[Any] = "",
        /,
        *,
        encoding: str = DEFAULT_ENCODING,
        encodingErrors: str = DEFAULT_ENCODING_ERRORS,
        shp: BinaryFileT | None = None,
        shx: BinaryFileT | None = None,
        dbf: BinaryFileT | None = None,
        cpg: BinaryFileT | None = None,
    ):
        self._files_to_close: list[BinaryFileStreamT] = []
        self._state = LoadState.UNLOADED
        self.shapes: list[Shape] = []
        # index -> the error that made loadShapes() skip it
        self.skipped: dict[int, ParseError] = {}

        baseName = ""
        path = fsdecode_if_pathlike(shapefile_path)
        if path:
            baseName, __ext = os.path.splitext(path)
            self.fileName = os.path.basename(baseName)
        else:
            self.fileName = "Not specified"

        try:
            shp_file = self.__open_constituent("shp", shp, baseName)
            shx_file = self.__open_constituent("shx", shx, baseName)
            dbf_file = self.__open_constituent("dbf", dbf, baseName)
            cpg_file = self.__open_constituent("cpg", cpg, baseName, required=False)

            if cpg_file is not None:
                self.encoding = CPGFile(cpg_file).encoding
            else:
                self.encoding = encoding

            self.shp = SHPFile(shp_file)
            self.shx = SHXFile(shx_file)
            self.dbf = DBFFile(dbf_file, self.encoding, encodingErrors)
        except Exception:
            self.close()
            raise

        if self.shx.shapeCount != self.dbf.numRecords:
            logger.warning(
                "%s: shx indexes %d shapes but dbf declares %d records",
                self.fileName,
                self.shx.shapeCount,
                self.dbf.numRecords,
            )

    def __open_constituent(
        self,
        ext: str,
        file_: BinaryFileT | None,
        baseName: str,
        required: bool = True,
    ) -> IO[bytes] | None:
        self._assert_ext_is_supported(ext)

        if file_ is None:
            if baseName:
                opened = self._load_constituent_file(baseName, ext)
                if opened is not None or not required:
                    return opened
            elif not required:
                return None
            raise ParseError(f"Unable to open {baseName or 'shapefile'}.{ext}")

        if isinstance(file_, (str, PathLike)):
            name, __ = os.path.splitext(fsdecode_if_pathlike(file_))
            opened = self._load_constituent_file(name, ext)
            if opened is None:
                raise ParseError(f"Unable to open {name}.{ext}")
            return opened

        if hasattr(file_, "read"):
            # Copy if required
            try:
                file_.seek(0)
                return file_
            except (AttributeError, io.UnsupportedOperation):
                return io.BytesIO(file_.read())

        raise ParseError(f"Could not load shapefile constituent file from: {file_}")

    def _try_get_open_constituent_file(
        self,
        shapefile_name: str,
        ext: str,
    ) -> IO[bytes] | None:
        """
        Attempts to open a .shp, .shx, .dbf or .cpg file,
        with both lower case and upper case file extensions,
        and return it.  If it was not possible to open the file, None is returned.
        """
        self._assert_ext_is_supported(ext)

        try:
            return open(f"{shapefile_name}.{ext}", "rb")
        except OSError:
            try:
                return open(f"{shapefile_name}.{ext.upper()}", "rb")
            except OSError:
                return None

    def _load_constituent_file(
        self,
        shapefile_name: str,
        ext: str,
    ) -> IO[bytes] | None:
        """
        Attempts to open a constituent file, with the extension
        as both lower and upper case, and if successful append it to
        self._files_to_close.
        """
        constituent_file = self._try_get_open_constituent_file(shapefile_name, ext)
        if constituent_file is not None:
            self._files_to_close.append(constituent_file)
        return constituent_file

    def __str__(self) -> str:
        """
        Use some general info on the shapefile as __str__
        """
        info = [
            f"Shapefile {self.fileName}",
            f"    {len(self)} shapes (type '{self.geometryShapeType.shapeTypeName}')",
            f"    {self.dbf.numRecords} records ({len(self.dbf.fields) - 1} fields)",
        ]
        if self.isLoaded:
            info.append(f"    {len(self.shapes)} loaded, {len(self.skipped)} skipped")
        return "\n".join(info)

    def __enter__(self) -> Shapefile:
        return self

    def __exit__(
        self,
        exc_type: BaseException | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool | None:
        """
        Exit phase of context manager, close opened files.
        """
        self.close()
        return None

    def __len__(self) -> int:
        """Returns the number of shapes indexed by the shx file."""
        return self.shx.shapeCount

    def __iter__(self) -> Iterator[Shape]:
        """Iterates through the loaded shapes, loading them first if needed."""
        self.loadShapes()
        return iter(self.shapes)

    def __del__(self) -> None:
        self.close()

    def close(self) -> None:
        # Close any files that the reader opened (but not those given by user)
        for attribute in self._files_to_close:
            if hasattr(attribute, "close"):
                try:
                    attribute.close()
                except OSError:
                    pass
        self._files_to_close = []

    @property
    def shapeType(self) -> ShapeType:
        """The shape type declared by the dbf header. It may differ from
        geometryShapeType, the one declared by the shp header."""
        return self.dbf.shapeType

    @property
    def geometryShapeType(self) -> ShapeType:
        return self.shp.shapeType

    @property
    def shapeTypeName(self) -> str:
        return self.shapeType.shapeTypeName

    @property
    def lastUpdate(self) -> date | None:
        return self.dbf.lastUpdate

    @property
    def boundingMapRect(self) -> MapRect:
        return self.shp.boundingMapRect

    @property
    def elevationRange(self) -> Range:
        return self.shp.elevationRange

    @property
    def measureRange(self) -> Range:
        return self.shp.measureRange

    @property
    def fields(self) -> list[FieldDescriptor]:
        return self.dbf.fields

    @property
    def isLoaded(self) -> bool:
        return self._state is LoadState.LOADED

    def loadShapes(self) -> None:
        """Decodes every indexed shape and merges in its attributes, keyed
        by field name. Only the first call does any work."""
        if self._state is LoadState.LOADED:
            return

        shapes: list[Shape] = []
        skipped: dict[int, ParseError] = {}
        fieldNames = self.dbf.fieldNames

        for i, offset in enumerate(self.shx.shapeOffsets):
            try:
                shape = self.shp.shapeAtOffset(offset, oid=i)
                if shape is None:
                    raise ParseError(f"Offset {offset} is the end of the shp file")
                record = self.dbf.recordAtIndex(i)
            except ParseError as e:
                if constants.VERBOSE:
                    logger.warning("%s: skipping shape %d: %s", self.fileName, i, e)
                skipped[i] = e
                continue

            if record.deleted:
                logger.debug("%s: record %d is deleted, no attributes merged", self.fileName, i)
            else:
                shape.info = dict(zip(fieldNames, record))
            shapes.append(shape)

        self.shapes = shapes
        self.skipped = skipped
        self._state = LoadState.LOADED
        logger.info(
            "%s: loaded %d shapes, skipped %d", self.fileName, len(shapes), len(skipped)
        )
