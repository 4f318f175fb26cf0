import io

import pytest

from windcube_source.errors import MalformedFileError
from windcube_source.ingest.header import extract_leading_integer, read_header

from conftest import HEADER, windcube_text


def test_extract_leading_integer() -> None:
    assert extract_leading_integer("HeaderSize=40") == 40
    assert extract_leading_integer("12 lines, version 3") == 12
    assert extract_leading_integer("no digits here") is None
    assert extract_leading_integer("") is None


@pytest.mark.parametrize("k", [0, 1, 2, 7, 40])
def test_skips_exactly_k_lines(k: int) -> None:
    text = windcube_text(["2020/10/08 00:10\t1.0"], header_size=k)
    stream = io.StringIO(text)

    header = read_header(stream)

    assert header.header_size == k
    assert header.columns == HEADER
    assert header.header_line_index == k + 1
    assert header.first_data_line_index == k + 2
    # the stream is left at the first data row
    assert stream.readline().startswith("2020/10/08 00:10")


def test_digit_run_anywhere_in_first_line() -> None:
    text = windcube_text([], first_line="Header lines: 2 (see manual v5)", header_size=2)
    header = read_header(text.splitlines())
    assert header.header_size == 2


def test_data_columns_exclude_timestamp() -> None:
    header = read_header(windcube_text([]).splitlines())
    assert header.data_columns == HEADER[1:]
    assert header.column_index("Pressure (hPa)") == 3
    assert header.column_index("Pressure") == -1


def test_empty_file_is_malformed() -> None:
    with pytest.raises(MalformedFileError):
        read_header([])


def test_first_line_without_digits_is_malformed() -> None:
    with pytest.raises(MalformedFileError):
        read_header(["HeaderSize=?", "Time\tA"])


def test_missing_header_line_is_malformed() -> None:
    with pytest.raises(MalformedFileError):
        read_header(["HeaderSize=2", "a=1", "b=2"])


def test_file_ending_inside_metadata_is_malformed() -> None:
    with pytest.raises(MalformedFileError):
        read_header(["HeaderSize=5", "a=1"])
