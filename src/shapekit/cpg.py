from __future__ import annotations

import enum

from .exceptions import ParseError
from .types import ReadableBinStream


class CodePage(enum.Enum):
    """The .cpg tokens understood by the reader, valued by Python codec name."""

    ISO_LATIN_2 = "iso8859_2"
    SHIFT_JIS = "shift_jis"
    WINDOWS_1250 = "cp1250"
    WINDOWS_1251 = "cp1251"
    WINDOWS_1252 = "cp1252"
    WINDOWS_1253 = "cp1253"
    WINDOWS_1254 = "cp1254"
    UTF_8 = "utf-8"
    UTF_16 = "utf-16"

    @property
    def encoding(self) -> str:
        return self.value


# Matched case insensitively, after stripping surrounding whitespace.
CODE_PAGE_TOKENS: dict[str, CodePage] = {
    "latin2": CodePage.ISO_LATIN_2,
    "shiftjis": CodePage.SHIFT_JIS,
    "1250": CodePage.WINDOWS_1250,
    "1251": CodePage.WINDOWS_1251,
    "1252": CodePage.WINDOWS_1252,
    "1253": CodePage.WINDOWS_1253,
    "1254": CodePage.WINDOWS_1254,
    "utf-8": CodePage.UTF_8,
    "utf8": CodePage.UTF_8,
    "utf-16": CodePage.UTF_16,
}


def resolve(token: str) -> str:
    """Returns the Python text encoding named by a .cpg token."""
    try:
        return CODE_PAGE_TOKENS[token.strip().lower()].encoding
    except KeyError:
        raise ParseError(f"Unknown code page in cpg file: {token!r}")


class CPGFile:
    pathExtension = "cpg"

    def __init__(self, cpg: ReadableBinStream):
        data = cpg.read()
        if data.startswith(b"\xef\xbb\xbf"):
            data = data[3:]
        try:
            self.token = data.decode("ascii")
        except UnicodeDecodeError:
            raise ParseError(f"cpg file is not ASCII text: {data[:32]!r}")
        self.encoding = resolve(self.token)
