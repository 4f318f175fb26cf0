import tempfile
import unittest
from datetime import datetime, timedelta
from pathlib import Path

from windcube_source.ingest.discovery import TemplateFileDiscovery, file_begin_from_name, pattern_to_regex
from windcube_source.models.catalog import FileSource


def _fs(**kw) -> FileSource:
    base = dict(
        path_segments=("'DATA'", "yyyy-MM"),
        file_template="'WLS7-436_'yyyy_MM_dd'.sta'",
        file_period=timedelta(days=1),
    )
    base.update(kw)
    return FileSource(**base)


class TestPatternToRegex(unittest.TestCase):
    def test_literal_and_tokens(self):
        rx = pattern_to_regex("'WLS7-436_'yyyy_MM_dd'.sta'")
        m = rx.fullmatch("WLS7-436_2020_10_08.sta")
        self.assertIsNotNone(m)
        self.assertEqual(m.group("year"), "2020")
        self.assertEqual(m.group("month"), "10")
        self.assertEqual(m.group("day"), "08")
        self.assertIsNone(rx.fullmatch("WLS7-436_2020_10_08.rtd"))
        self.assertIsNone(rx.fullmatch("WLS7-436_2020_1_08.sta"))

    def test_repeated_token(self):
        rx = pattern_to_regex("yyyy'/'yyyy-MM")
        self.assertIsNotNone(rx.fullmatch("2020/2020-10"))

    def test_unquoted_literals_are_escaped(self):
        rx = pattern_to_regex("yyyy.MM")
        self.assertIsNotNone(rx.fullmatch("2020.10"))
        self.assertIsNone(rx.fullmatch("2020x10"))


class TestTemplateFileDiscovery(unittest.TestCase):
    def _touch(self, root: Path, rel: str) -> Path:
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text("HeaderSize=0\nTime\n", encoding="utf-8")
        return p

    def test_first_file_in_lexical_order(self):
        with tempfile.TemporaryDirectory() as d:
            root = Path(d)
            self._touch(root, "DATA/2020-11/WLS7-436_2020_11_01.sta")
            first = self._touch(root, "DATA/2020-10/WLS7-436_2020_10_07.sta")
            self._touch(root, "DATA/2020-10/WLS7-436_2020_10_08.sta")
            self._touch(root, "DATA/2020-10/notes.txt")

            disc = TemplateFileDiscovery(root)
            self.assertEqual(disc.resolve_first(_fs()), first.resolve())

    def test_none_when_nothing_matches(self):
        with tempfile.TemporaryDirectory() as d:
            root = Path(d)
            self._touch(root, "DATA/misc/WLS7-436_2020_10_07.sta")
            self.assertIsNone(TemplateFileDiscovery(root).resolve_first(_fs()))
            self.assertIsNone(TemplateFileDiscovery(root / "missing").resolve_first(_fs()))

    def test_skips_empty_directories(self):
        with tempfile.TemporaryDirectory() as d:
            root = Path(d)
            (root / "DATA" / "2020-09").mkdir(parents=True)
            p = self._touch(root, "DATA/2020-10/WLS7-436_2020_10_07.sta")
            self.assertEqual(TemplateFileDiscovery(root).resolve_first(_fs()), p.resolve())


class TestFileBegin(unittest.TestCase):
    def test_begin_from_name(self):
        self.assertEqual(
            file_begin_from_name(_fs(), "WLS7-436_2020_10_08.sta"),
            datetime(2020, 10, 8),
        )

    def test_utc_offset_is_subtracted(self):
        fs = _fs(utc_offset=timedelta(hours=2))
        self.assertEqual(file_begin_from_name(fs, "WLS7-436_2020_10_08.sta"), datetime(2020, 10, 7, 22))

    def test_no_match(self):
        self.assertIsNone(file_begin_from_name(_fs(), "other.sta"))
        self.assertIsNone(file_begin_from_name(_fs(file_template="'x_'MM'.sta'"), "x_10.sta"))


if __name__ == "__main__":
    unittest.main()
