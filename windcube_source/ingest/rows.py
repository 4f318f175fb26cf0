"""Row-level decoding shared by the availability estimator and the reader.

Data rows are tab-separated; column 0 starts with a ``yyyy/MM/dd HH:mm`` timestamp
(the END of the 10-minute interval), columns 1.. are invariant-culture decimals.

Policy (asymmetric on purpose):
  - a row whose leading 16 characters are not a valid timestamp is skipped
  - a value that is not a valid decimal is an error
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import List, Sequence
import math

import numpy as np
import pandas as pd

from windcube_source.errors import NumericFormatError


DEFAULT_ENCODING = "cp1252"

IN_FILE_DATE_FORMAT = "%Y/%m/%d %H:%M"
TIMESTAMP_WIDTH = 16
_TIMESTAMP_SHAPE = r"[0-9]{4}/[0-9]{2}/[0-9]{2} [0-9]{2}:[0-9]{2}"

# "." decimal separator, no group separator, optional sign and exponent
_DECIMAL = r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
_SPECIAL_VALUES = {
    "NaN": math.nan,
    "Infinity": math.inf,
    "+Infinity": math.inf,
    "-Infinity": -math.inf,
}


def read_lines(path: str | Path, encoding: str = DEFAULT_ENCODING) -> List[str]:
    """
    Read a whole file as a list of lines without terminators.

    Only ``\\n``, ``\\r\\n`` and ``\\r`` terminate lines; a trailing terminator does not
    produce an extra empty line. Undecodable bytes are replaced.
    """
    with open(path, "r", encoding=encoding, errors="replace", newline=None) as f:
        text = f.read()
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def parse_row_timestamps(lines: Sequence[str]) -> pd.Series:
    """
    Parse the leading 16 characters of each line as ``yyyy/MM/dd HH:mm``.

    Returns a naive datetime64 Series aligned with *lines*; rows that are too short,
    not zero-padded, or name an impossible date/time are NaT.
    """
    s = pd.Series(list(lines), dtype=object)
    if s.empty:
        return pd.Series([], dtype="datetime64[ns]")
    head = s.str.slice(0, TIMESTAMP_WIDTH)
    shape_ok = head.str.fullmatch(_TIMESTAMP_SHAPE, na=False)
    return pd.to_datetime(head.where(shape_ok), format=IN_FILE_DATE_FORMAT, errors="coerce")


def count_valid_timestamps(lines: Sequence[str]) -> int:
    return int(parse_row_timestamps(lines).notna().sum())


def to_naive_utc(ts: datetime) -> pd.Timestamp:
    """Naive timestamps are taken as UTC; aware ones are converted to UTC."""
    t = pd.Timestamp(ts)
    if t.tzinfo is not None:
        t = t.tz_convert(timezone.utc).tz_localize(None)
    return t


def parse_decimal_cells(
    cells: pd.Series,
    *,
    line_numbers: np.ndarray,
    column: int,
    source: str,
) -> np.ndarray:
    """
    Convert string cells to float64, raising NumericFormatError on the first bad cell.

    A missing cell (row shorter than the header) counts as a bad cell.
    line_numbers are 1-based file line numbers aligned with *cells*, used for the message.
    """
    if cells.empty:
        return np.empty(0, dtype=np.float64)

    cells = cells.astype(object)
    stripped = cells.str.strip()
    ok = stripped.str.fullmatch(_DECIMAL, na=False) | stripped.isin(list(_SPECIAL_VALUES))
    ok = ok.to_numpy()

    if not ok.all():
        k = int(np.argmin(ok))
        raw = cells.iloc[k]
        what = "missing value" if not isinstance(raw, str) else f"value {raw!r}"
        raise NumericFormatError(
            f"{source}: line {int(line_numbers[k])}: {what} in column {column} is not a decimal number."
        )

    return np.fromiter(
        (_SPECIAL_VALUES[v] if v in _SPECIAL_VALUES else float(v) for v in stripped),
        dtype=np.float64,
        count=len(stripped),
    )
