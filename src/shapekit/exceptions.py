class ShapefileException(Exception):
    """An exception to handle shapefile specific problems."""


class ParseError(ShapefileException):
    """Malformed or truncated binary input: too few bytes, an unparsable
    field value, or an unrecognised token."""
