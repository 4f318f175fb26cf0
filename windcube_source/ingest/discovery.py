from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Protocol
import re

from windcube_source.models.catalog import FileSource


class FileDiscovery(Protocol):
    """Locates physical files for a FileSource. Injected into the catalog builder."""

    def resolve_first(self, file_source: FileSource) -> Optional[Path]:
        ...


# .NET-style custom date tokens used in path segments and file templates
_TOKENS = {
    "yyyy": ("year", r"[0-9]{4}"),
    "MM": ("month", r"[0-9]{2}"),
    "dd": ("day", r"[0-9]{2}"),
    "HH": ("hour", r"[0-9]{2}"),
    "mm": ("minute", r"[0-9]{2}"),
    "ss": ("second", r"[0-9]{2}"),
}
_TOKEN_SPLIT = re.compile(r"('[^']*'|yyyy|MM|dd|HH|mm|ss)")


def pattern_to_regex(pattern: str) -> re.Pattern:
    """
    Compile a date pattern such as ``'WLS7-436_'yyyy_MM_dd'.sta'`` into a regex.

    Quoted text is literal, date tokens become named digit groups (repeated tokens
    become anonymous groups), everything else is literal.
    """
    out: List[str] = []
    used: set[str] = set()
    for part in _TOKEN_SPLIT.split(pattern):
        if not part:
            continue
        if part.startswith("'") and part.endswith("'") and len(part) >= 2:
            out.append(re.escape(part[1:-1]))
        elif part in _TOKENS:
            name, rx = _TOKENS[part]
            if name in used:
                out.append(f"(?:{rx})")
            else:
                used.add(name)
                out.append(f"(?P<{name}>{rx})")
        else:
            out.append(re.escape(part))
    return re.compile("".join(out))


def file_begin_from_name(file_source: FileSource, path: str | Path) -> Optional[datetime]:
    """
    Nominal (UTC) begin of a file, decoded from its name via the file template.

    Missing date fields default to the start of the period (month/day = 1, time = 0).
    Returns None when the name does not match the template or has no year.
    """
    m = pattern_to_regex(file_source.file_template).fullmatch(Path(path).name)
    if not m:
        return None
    g: Dict[str, str] = {k: v for k, v in m.groupdict().items() if v is not None}
    if "year" not in g:
        return None
    local = datetime(
        int(g["year"]),
        int(g.get("month", 1)),
        int(g.get("day", 1)),
        int(g.get("hour", 0)),
        int(g.get("minute", 0)),
        int(g.get("second", 0)),
    )
    return local - file_source.utc_offset


class TemplateFileDiscovery:
    """
    Filesystem discovery driven by FileSource.path_segments and file_template.

    Directories and files are visited in lexical order; the first file whose name
    matches the template is returned.
    """

    def __init__(self, root: str | Path):
        self.root = Path(root).expanduser().resolve()

    def _matching_dirs(self, file_source: FileSource) -> List[Path]:
        dirs = [self.root]
        for segment in file_source.path_segments:
            rx = pattern_to_regex(segment)
            nxt: List[Path] = []
            for d in dirs:
                if not d.is_dir():
                    continue
                nxt.extend(sorted(p for p in d.iterdir() if p.is_dir() and rx.fullmatch(p.name)))
            dirs = nxt
        return dirs

    def resolve_first(self, file_source: FileSource) -> Optional[Path]:
        rx = pattern_to_regex(file_source.file_template)
        for d in self._matching_dirs(file_source):
            for p in sorted(d.iterdir()):
                if p.is_file() and rx.fullmatch(p.name):
                    return p
        return None
