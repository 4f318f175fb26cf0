from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple
import re

from windcube_source.errors import MalformedFileError


_DIGITS = re.compile(r"[0-9]+")


def extract_leading_integer(text: str) -> Optional[int]:
    """Return the first run of decimal digits anywhere in *text*, or None."""
    m = _DIGITS.search(text)
    if not m:
        return None
    return int(m.group(0))


@dataclass(frozen=True)
class HeaderInfo:
    """
    Location and content of the column header of a WindCube file.

    header_size: number of metadata lines announced on line 1.
    columns: all header cells, column 0 (timestamp label) included so that
      indices line up with the data rows.
    """
    header_size: int
    columns: Tuple[str, ...]

    @property
    def header_line_index(self) -> int:
        # line 1 + header_size metadata lines precede the header (0-based)
        return self.header_size + 1

    @property
    def first_data_line_index(self) -> int:
        return self.header_size + 2

    @property
    def data_columns(self) -> Tuple[str, ...]:
        return self.columns[1:]

    def column_index(self, original_name: str) -> int:
        """Index of the cell exactly equal to *original_name*, or -1."""
        for i, cell in enumerate(self.columns):
            if cell == original_name:
                return i
        return -1


def parse_header_size(first_line: Optional[str], source: str = "<stream>") -> int:
    if first_line is None:
        raise MalformedFileError(f"{source}: file is empty (first line missing).")
    n = extract_leading_integer(first_line)
    if n is None:
        raise MalformedFileError(f"{source}: no header line count found in first line {first_line!r}.")
    return n


def read_header(lines: Iterable[str], source: str = "<stream>") -> HeaderInfo:
    """
    Parse the preamble of a WindCube file.

    *lines* may be an open text stream positioned at the start of the file or any
    iterable of lines; it is consumed up to and including the header line, so a
    stream is left positioned at the first data row.
    """
    it = iter(lines)
    n = parse_header_size(next(it, None), source)

    for k in range(n):
        if next(it, None) is None:
            raise MalformedFileError(f"{source}: file ends inside the metadata block (line {k + 2} of {n + 1}).")

    headline = next(it, None)
    if headline is None:
        raise MalformedFileError(f"{source}: header line {n + 2} is missing.")

    return HeaderInfo(header_size=n, columns=tuple(headline.rstrip("\r\n").split("\t")))
