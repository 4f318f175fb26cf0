"""WindCube data source -- Python tooling for WindCube lidar text exports.

This package provides tools for:
- Parsing the metadata preamble and column header of WindCube files
- Deriving validated resource ids, units and height groups from column labels
- Building resource catalogs from configured file sources
- Estimating the data availability of a file
- Reading channels into caller-owned buffers on a fixed 10-minute grid

Key principles:
- Time comes from the file: row timestamps mark the END of each 10-minute interval
- No resampling: one row fills at most one grid slot
- Strict headers: a malformed preamble fails the operation, a bad value fails the read

Main subpackages:
- ingest: Header parsing, label normalization, discovery, catalog building, reading
- models: Data models (FileSource, Resource, ResourceCatalog, ReadRequest)
"""

from .errors import (
    ConfigurationError,
    InvalidResourceNameError,
    MalformedFileError,
    NumericFormatError,
    OperationCancelledError,
    WindCubeError,
)
from .source import WindCubeSource

__all__ = [
    "ConfigurationError",
    "InvalidResourceNameError",
    "MalformedFileError",
    "NumericFormatError",
    "OperationCancelledError",
    "WindCubeError",
    "WindCubeSource",
]
