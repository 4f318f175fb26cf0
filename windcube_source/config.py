"""Loading of ``<root>/config.json``.

The file maps catalog ids to catalog descriptions::

    {
      "/A/B/C": {
        "Title": "WindCube lidar",
        "FileSourceGroups": {
          "default": [
            {
              "PathSegments": ["'DATA'", "yyyy-MM"],
              "FileTemplate": "'WLS7-436_'yyyy_MM_dd'.sta'",
              "FilePeriod": "1.00:00:00",
              "UtcOffset": "00:00:00",
              "AdditionalProperties": {"CatalogSourceFiles": ["DATA/2020-10/WLS7-436_2020_10_08.sta"]}
            }
          ]
        }
      }
    }

Keys are accepted in PascalCase or camelCase. Time spans are .NET ``[d.]hh:mm:ss[.fff]``
strings or numbers of seconds. The result is an immutable mapping; it is built
once and only read afterwards.
"""

from __future__ import annotations

import json
from datetime import timedelta
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple
import re

from windcube_source.errors import ConfigurationError
from windcube_source.models.catalog import CatalogDescription, FileSource


CONFIG_FILE_NAME = "config.json"

_TIMESPAN = re.compile(r"^(?P<neg>-)?(?:(?P<d>\d+)\.)?(?P<h>\d{1,2}):(?P<m>\d{1,2})(?::(?P<s>\d{1,2})(?:\.(?P<f>\d{1,7}))?)?$")


def parse_timespan(value: Any, key: str = "timespan") -> timedelta:
    if isinstance(value, bool):
        raise ConfigurationError(f"{key}: expected a time span, got {value!r}")
    if isinstance(value, (int, float)):
        return timedelta(seconds=float(value))
    if not isinstance(value, str):
        raise ConfigurationError(f"{key}: expected a time span, got {value!r}")
    m = _TIMESPAN.match(value.strip())
    if not m:
        raise ConfigurationError(f"{key}: cannot parse time span {value!r}")
    frac = m.group("f") or "0"
    td = timedelta(
        days=int(m.group("d") or 0),
        hours=int(m.group("h")),
        minutes=int(m.group("m")),
        seconds=int(m.group("s") or 0),
        microseconds=int(frac.ljust(7, "0")) // 10,
    )
    return -td if m.group("neg") else td


def _get(d: Mapping[str, Any], *names: str, default: Any = None) -> Any:
    """First present key among *names*, each tried as given and with a lowercase first letter."""
    for name in names:
        for k in (name, name[:1].lower() + name[1:]):
            if k in d:
                return d[k]
    return default


def _require(d: Mapping[str, Any], *names: str, where: str) -> Any:
    v = _get(d, *names)
    if v is None:
        raise ConfigurationError(f"{where}: missing required key '{names[0]}'")
    return v


def _string_tuple(value: Any, where: str) -> Tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(x, str) or x is None for x in value):
        raise ConfigurationError(f"{where}: expected a list of strings, got {value!r}")
    return tuple(x for x in value if x is not None)


def _frozen(d: Optional[Mapping[str, Any]], where: str) -> Mapping[str, Any]:
    if d is None:
        return MappingProxyType({})
    if not isinstance(d, dict):
        raise ConfigurationError(f"{where}: expected an object, got {d!r}")
    return MappingProxyType(dict(d))


def parse_file_source(raw: Any, where: str) -> FileSource:
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{where}: expected an object, got {raw!r}")

    additional = _get(raw, "AdditionalProperties")
    if additional is not None and not isinstance(additional, dict):
        raise ConfigurationError(f"{where}.AdditionalProperties: expected an object")

    source_files = _get(raw, "CatalogSourceFiles")
    if source_files is None and additional is not None:
        source_files = _get(additional, "CatalogSourceFiles")

    return FileSource(
        path_segments=_string_tuple(_get(raw, "PathSegments", default=[]), f"{where}.PathSegments"),
        file_template=str(_require(raw, "FileTemplate", "FileNameTemplate", where=where)),
        file_period=parse_timespan(_require(raw, "FilePeriod", where=where), f"{where}.FilePeriod"),
        utc_offset=parse_timespan(_get(raw, "UtcOffset", default="00:00:00"), f"{where}.UtcOffset"),
        file_date_time_preselector=_get(raw, "FileDateTimePreselector"),
        file_date_time_selector=_get(raw, "FileDateTimeSelector"),
        catalog_source_files=None if source_files is None else _string_tuple(source_files, f"{where}.CatalogSourceFiles"),
        additional_properties=_frozen(additional, f"{where}.AdditionalProperties"),
    )


def parse_catalog_description(raw: Any, catalog_id: str) -> CatalogDescription:
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{catalog_id}: expected an object, got {raw!r}")

    groups_raw = _require(raw, "FileSourceGroups", where=catalog_id)
    if not isinstance(groups_raw, dict):
        raise ConfigurationError(f"{catalog_id}.FileSourceGroups: expected an object")

    groups: Dict[str, Tuple[FileSource, ...]] = {}
    for name, sources in groups_raw.items():
        where = f"{catalog_id}.FileSourceGroups.{name}"
        if not isinstance(sources, list):
            raise ConfigurationError(f"{where}: expected a list of file sources")
        groups[name] = tuple(parse_file_source(s, f"{where}[{i}]") for i, s in enumerate(sources))

    return CatalogDescription(
        title=str(_require(raw, "Title", where=catalog_id)),
        file_source_groups=MappingProxyType(groups),
        additional_properties=_frozen(_get(raw, "AdditionalProperties"), f"{catalog_id}.AdditionalProperties"),
    )


def parse_config(data: Any) -> Mapping[str, CatalogDescription]:
    if not isinstance(data, dict):
        raise ConfigurationError("configuration root must be an object")
    return MappingProxyType({cid: parse_catalog_description(raw, cid) for cid, raw in data.items()})


def load_config(root: str | Path) -> Mapping[str, CatalogDescription]:
    path = Path(root) / CONFIG_FILE_NAME
    if not path.is_file():
        raise ConfigurationError(f"Configuration file {path} not found.")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Configuration file {path} could not be read: {e}") from e
    return parse_config(data)
