from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from windcube_source.ingest.availability import estimate_availability
from windcube_source.ingest.catalog_builder import read_file_resources
from windcube_source.ingest.reader import TimeAlignedReader
from windcube_source.models.catalog import SAMPLE_PERIOD, ResourceCatalog
from windcube_source.models.requests import ReadRequest, allocate_buffers


def _parse_begin(text: str) -> datetime:
    t = datetime.fromisoformat(text)
    if t.tzinfo is None:
        t = t.replace(tzinfo=timezone.utc)
    return t


def main(argv: Optional[Sequence[str]] = None) -> int:
    import argparse
    import textwrap

    p = argparse.ArgumentParser(
        prog="windcube-inspect",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            Inspect a single WindCube file.

            Prints the resources derived from the column header. With --availability,
            also prints the fraction of the 144 daily slots present. With --resource
            and --begin, reads one channel onto the 10-minute grid and prints it.
            """
        ),
    )
    p.add_argument("file", help="WindCube file")
    p.add_argument("--file-source-id", default="default", help="File source id attached to the resources")
    p.add_argument("--encoding", default="cp1252", help="File encoding (default: cp1252)")
    p.add_argument("--availability", action="store_true", help="Print the availability fraction")
    p.add_argument("--resource", default=None, help="Resource id to read")
    p.add_argument("--begin", default=None, help="Grid start of the file, ISO 8601 (naive = UTC)")
    p.add_argument("--period-hours", type=float, default=24.0, help="File period in hours (default: 24)")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    ns = p.parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(level=logging.DEBUG if ns.verbose else logging.WARNING)

    path = Path(ns.file).expanduser()
    resources = read_file_resources(path, ns.file_source_id, encoding=ns.encoding)

    table = ResourceCatalog.from_resources(path.name, resources).to_frame()
    with pd.option_context("display.max_rows", None, "display.width", 200):
        print(table.to_string(index=False))

    if ns.availability:
        print(f"availability: {estimate_availability(path, encoding=ns.encoding):.6f}")

    if ns.resource is not None:
        if ns.begin is None:
            p.error("--resource requires --begin")
        matches = [r for r in resources if r.id == ns.resource]
        if not matches:
            p.error(f"resource {ns.resource!r} not found in {path.name}")

        begin = _parse_begin(ns.begin)
        data, status = allocate_buffers(timedelta(hours=ns.period_hours))
        request = ReadRequest(resource=matches[0], data=data, status=status)
        report = TimeAlignedReader(encoding=ns.encoding).read_one(path, begin, request)

        values = np.where(status == 1, request.values(), np.nan)
        index = pd.date_range(begin, periods=len(status), freq=pd.Timedelta(SAMPLE_PERIOD))
        print(pd.Series(values, index=index, name=ns.resource).to_string())
        print(
            f"written={report.n_written} bad_timestamp={report.n_bad_timestamp} "
            f"out_of_range={report.n_out_of_range}"
        )
        for w in report.warnings:
            print(f"[warn] {w}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
