from __future__ import annotations

from datetime import datetime

import pytest

from windcube_source.cli import main

from conftest import day_rows


def test_prints_resources_and_availability(write_wc, capsys) -> None:
    p = write_wc("day.sta", day_rows(datetime(2020, 10, 8), 54))

    assert main([str(p), "--availability"]) == 0

    out = capsys.readouterr().out
    assert "WC_Pressure" in out
    assert "WC_Rel_Humidity" in out
    assert "availability: 0.375000" in out


def test_resource_table_columns(write_wc, capsys) -> None:
    p = write_wc("day.sta", day_rows(datetime(2020, 10, 8), 1))

    assert main([str(p), "--file-source-id", "lidar"]) == 0

    header, *rows = capsys.readouterr().out.splitlines()
    assert header.split() == ["id", "unit", "group", "file_source_id", "original_name", "representation"]
    assert any("WC_Pressure" in r and "lidar" in r and "10_min" in r for r in rows)


def test_reads_one_resource(write_wc, capsys) -> None:
    p = write_wc("day.sta", day_rows(datetime(2020, 10, 8), 3))

    assert main([str(p), "--resource", "WC_Int_Temp", "--begin", "2020-10-08T00:00:00"]) == 0

    out = capsys.readouterr().out
    assert "written=3" in out
    assert "10.1" in out


def test_resource_requires_begin(write_wc) -> None:
    p = write_wc("day.sta", day_rows(datetime(2020, 10, 8), 3))
    with pytest.raises(SystemExit):
        main([str(p), "--resource", "WC_Int_Temp"])


def test_unknown_resource(write_wc) -> None:
    p = write_wc("day.sta", day_rows(datetime(2020, 10, 8), 3))
    with pytest.raises(SystemExit):
        main([str(p), "--resource", "WC_Nope", "--begin", "2020-10-08T00:00:00"])
