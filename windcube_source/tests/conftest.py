from __future__ import annotations

import json
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import pytest


HEADER = (
    "Timestamp (end of interval)",
    "Int Temp (°C)",
    "Ext Temp (°C)",
    "Pressure (hPa)",
    "Rel. Humidity (%)",
    "Wiper count",
    "Wind Speed (10m) (m/s)",
    "40m Wind Direction (°)",
)

STEP = timedelta(minutes=10)


def end_stamp(begin: datetime, slot: int) -> str:
    """In-file timestamp of the row filling *slot* (rows carry the interval END)."""
    return (begin + (slot + 1) * STEP).strftime("%Y/%m/%d %H:%M")


def default_row(begin: datetime, slot: int, first_value: str) -> str:
    cells = [end_stamp(begin, slot), first_value, "12.5", "1013.2", "81.0", "0", "5.25", "270.0"]
    return "\t".join(cells)


def windcube_text(
    rows: Sequence[str],
    *,
    header_size: int = 3,
    header: Sequence[str] = HEADER,
    first_line: Optional[str] = None,
) -> str:
    lines: List[str] = [first_line if first_line is not None else f"HeaderSize={header_size}"]
    lines += [f"Meta{i}=value {i}" for i in range(header_size)]
    lines.append("\t".join(header))
    lines += list(rows)
    return "\n".join(lines) + "\n"


def day_rows(begin: datetime, n: int) -> List[str]:
    """n rows starting at slot 0 with first-column values 10.0, 10.1, ... and 11.9 at slot 53."""
    rows = []
    for i in range(n):
        value = "11.9" if i == 53 else f"{10.0 + 0.1 * i:.1f}"
        rows.append(default_row(begin, i, value))
    return rows


@pytest.fixture
def write_wc(tmp_path: Path) -> Callable[..., Path]:
    def _write(name: str, rows: Sequence[str], **kwargs) -> Path:
        p = tmp_path / name
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(windcube_text(rows, **kwargs), encoding="cp1252")
        return p

    return _write


@pytest.fixture
def database(tmp_path: Path) -> Path:
    """
    Data root with two daily files and a config.json.

    2020-10-07: 144 rows (full day)
    2020-10-08: 54 rows (slots 0..53)
    """
    root = tmp_path / "Database"
    for day, n in ((datetime(2020, 10, 7), 144), (datetime(2020, 10, 8), 54)):
        d = root / "DATA" / day.strftime("%Y-%m")
        d.mkdir(parents=True, exist_ok=True)
        name = day.strftime("WLS7-436_%Y_%m_%d.sta")
        (d / name).write_text(windcube_text(day_rows(day, n), header_size=40), encoding="cp1252")

    config = {
        "/A/B/C": {
            "Title": "WindCube WLS7-436",
            "FileSourceGroups": {
                "default": [
                    {
                        "PathSegments": ["'DATA'", "yyyy-MM"],
                        "FileTemplate": "'WLS7-436_'yyyy_MM_dd'.sta'",
                        "FilePeriod": "1.00:00:00",
                        "UtcOffset": "00:00:00",
                    }
                ]
            },
        }
    }
    (root / "config.json").write_text(json.dumps(config, indent=2), encoding="utf-8")
    return root
