"""Exception hierarchy for the WindCube data source.

Every error raised on purpose by this package derives from :class:`WindCubeError`.
File-content errors also derive from ``ValueError`` so callers that only know
about builtin exceptions still catch them.

Tolerated conditions (unparseable row timestamps, missing columns) never raise.
"""

from __future__ import annotations


class WindCubeError(Exception):
    """Base class for all WindCube data source errors."""


class ConfigurationError(WindCubeError):
    """config.json is missing, unreadable or malformed, or a catalog id is unknown."""


class MalformedFileError(WindCubeError, ValueError):
    """File preamble is unusable: missing first line, no skip count, or missing header line."""


class InvalidResourceNameError(WindCubeError, ValueError):
    """A normalized column label does not satisfy the resource id grammar."""


class NumericFormatError(WindCubeError, ValueError):
    """A value in a requested column is not an invariant-culture decimal number."""


class OperationCancelledError(WindCubeError):
    """A cooperative cancellation request was observed."""
