"""Ingest package - WindCube file parsing, discovery and time-aligned reading.

This package handles:
- Locating the metadata line count and the column header of a file
- Normalizing column labels into resource ids, units and groups
- Discovering files from path/file-name date templates
- Building resource catalogs from file headers
- Counting timestamped rows (availability)
- Reading columns into 10-minute grid buffers with a presence mask

Key classes:
- CatalogBuilder: Drives header parsing + label normalization across file sources
- TemplateFileDiscovery: Finds the first file matching a FileSource template
- TimeAlignedReader: Writes requested columns into caller-owned buffers

Design principle:
- Every operation re-parses the file header; no per-file index is kept
- Unparseable row timestamps are skipped, unparseable values are errors
"""
from .availability import EXPECTED_DAILY_SLOTS, estimate_availability
from .catalog_builder import CatalogBuilder, read_file_resources, resources_from_header
from .discovery import FileDiscovery, TemplateFileDiscovery
from .header import HeaderInfo, extract_leading_integer, read_header
from .labels import NormalizedLabel, normalize_label
from .reader import FileReadJob, TimeAlignedReader

__all__ = [
    "EXPECTED_DAILY_SLOTS",
    "estimate_availability",
    "CatalogBuilder",
    "read_file_resources",
    "resources_from_header",
    "FileDiscovery",
    "TemplateFileDiscovery",
    "HeaderInfo",
    "extract_leading_integer",
    "read_header",
    "NormalizedLabel",
    "normalize_label",
    "FileReadJob",
    "TimeAlignedReader",
]
