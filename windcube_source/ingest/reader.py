from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from windcube_source.ingest.header import read_header
from windcube_source.ingest.rows import (
    DEFAULT_ENCODING,
    parse_decimal_cells,
    parse_row_timestamps,
    read_lines,
    to_naive_utc,
)
from windcube_source.models.catalog import SAMPLE_PERIOD
from windcube_source.models.requests import ReadReport, ReadRequest


LOGGER = logging.getLogger(__name__)

_PERIOD_NS = int(pd.Timedelta(SAMPLE_PERIOD).value)


@dataclass(frozen=True)
class FileReadJob:
    """All requests for one file, with the file's nominal grid start."""
    path: Path
    file_begin: datetime
    requests: Tuple[ReadRequest, ...]


def grid_slots(stamps: np.ndarray, file_begin: datetime) -> np.ndarray:
    """
    Grid slot of each row timestamp.

    Row timestamps mark the END of their 10-minute interval, so one period is
    subtracted before flooring: slot = floor((t - 10 min - begin) / 10 min).
    """
    begin = to_naive_utc(file_begin).to_datetime64().astype("datetime64[ns]")
    elapsed = (stamps.astype("datetime64[ns]") - begin).astype(np.int64)
    return np.floor_divide(elapsed - _PERIOD_NS, _PERIOD_NS)


class TimeAlignedReader:
    """
    Reads WindCube columns into caller-owned, time-aligned buffers.

    Contract:
      - the column is located by exact match of the verbatim header label
      - rows with an unparseable timestamp are skipped
      - rows outside [0, slot_count) are skipped
      - an unparseable value in a kept row raises NumericFormatError before
        anything is written for that request
      - when several rows fall into one slot, the last one in the file wins
    """

    def __init__(self, encoding: str = DEFAULT_ENCODING):
        self.encoding = encoding

    def read(
        self,
        path: str | Path,
        file_begin: datetime,
        requests: Sequence[ReadRequest],
    ) -> List[ReadReport]:
        return [self.read_one(path, file_begin, request) for request in requests]

    def read_one(self, path: str | Path, file_begin: datetime, request: ReadRequest) -> ReadReport:
        request.validate()
        fp = Path(path)
        src = str(fp)

        # each request re-reads the file; requests share no state
        lines = read_lines(fp, self.encoding)
        header = read_header(lines, source=src)

        column = header.column_index(request.original_name)
        if column < 0:
            LOGGER.debug("Could not find column %r (resource %s) in %s", request.original_name, request.resource.id, src)
            return ReadReport(
                resource_id=request.resource.id,
                column_index=-1,
                warnings=(f"column {request.original_name!r} not found in {fp.name}",),
            )

        first = header.first_data_line_index
        body = lines[first:]
        n_rows = len(body)

        stamps = parse_row_timestamps(body).to_numpy(dtype="datetime64[ns]")
        valid = ~np.isnat(stamps)
        row_idx = np.flatnonzero(valid)

        slots = grid_slots(stamps[valid], file_begin)
        in_range = (slots >= 0) & (slots < request.slot_count)
        row_idx = row_idx[in_range]
        slots = slots[in_range]

        cells = pd.Series(body, dtype=object).iloc[row_idx].str.split("\t").str.get(column)
        values = parse_decimal_cells(
            cells,
            line_numbers=row_idx + first + 1,
            column=column,
            source=src,
        )

        # keep the last occurrence of each slot (file order)
        rev_slots = slots[::-1]
        _, rev_first = np.unique(rev_slots, return_index=True)
        keep = len(slots) - 1 - rev_first

        target = request.values()
        target[slots[keep]] = values[keep]
        request.status[slots[keep]] = 1

        warnings: List[str] = []
        n_dupes = int(len(slots) - len(keep))
        if n_dupes:
            warnings.append(f"{n_dupes} rows share a grid slot with a later row and were overwritten")

        return ReadReport(
            resource_id=request.resource.id,
            column_index=column,
            n_rows=n_rows,
            n_written=int(len(keep)),
            n_bad_timestamp=int(n_rows - valid.sum()),
            n_out_of_range=int((~in_range).sum()),
            warnings=tuple(warnings),
        )

    def read_many(
        self,
        jobs: Sequence[FileReadJob],
        max_workers: Optional[int] = None,
    ) -> List[List[ReadReport]]:
        """Read several files concurrently. Results are in job order; the first error propagates."""
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            futures = [pool.submit(self.read, job.path, job.file_begin, job.requests) for job in jobs]
            return [f.result() for f in futures]
