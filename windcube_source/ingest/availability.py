from __future__ import annotations

from pathlib import Path

from windcube_source.ingest.header import parse_header_size
from windcube_source.ingest.rows import DEFAULT_ENCODING, count_valid_timestamps, read_lines


# One day at 10-minute cadence. The denominator is fixed, whatever the file period.
EXPECTED_DAILY_SLOTS = 144


def estimate_availability(path: str | Path, encoding: str = DEFAULT_ENCODING) -> float:
    """
    Fraction of the 144 daily slots for which the file holds a timestamped row.

    Rows are counted, not deduplicated or bounded to the file period, so the
    result can exceed 1.0 for files covering more than one day.
    Raises MalformedFileError if line 1 carries no metadata line count.
    """
    lines = read_lines(path, encoding)
    header_size = parse_header_size(lines[0] if lines else None, source=str(path))
    valid_rows = count_valid_timestamps(lines[header_size + 2:])
    return valid_rows / float(EXPECTED_DAILY_SLOTS)
