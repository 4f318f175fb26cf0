from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Tuple

import numpy as np

from windcube_source.models.catalog import ELEMENT_SIZE, SAMPLE_PERIOD, Resource


def slot_count_for(file_period: timedelta) -> int:
    """Number of 10-minute grid slots in one file period."""
    n = file_period // SAMPLE_PERIOD
    if n <= 0:
        raise ValueError(f"file_period {file_period} is shorter than the sample period {SAMPLE_PERIOD}")
    return int(n)


def allocate_buffers(file_period: timedelta) -> Tuple[np.ndarray, np.ndarray]:
    """
    Allocate a zeroed (data, status) pair for one file.

    data:   uint8, slot_count * 8 bytes (little-endian float64 payload)
    status: uint8, slot_count bytes (0 = absent, 1 = present)
    """
    n = slot_count_for(file_period)
    return np.zeros(n * ELEMENT_SIZE, dtype=np.uint8), np.zeros(n, dtype=np.uint8)


@dataclass(frozen=True)
class ReadRequest:
    """
    One channel to be read from one file into caller-owned buffers.

    The buffers are written in place; the request itself is never mutated.
    """
    resource: Resource
    data: np.ndarray
    status: np.ndarray

    @property
    def original_name(self) -> str:
        return self.resource.original_name

    @property
    def slot_count(self) -> int:
        return int(self.status.shape[0])

    def values(self) -> np.ndarray:
        """Float64 view onto the data buffer (no copy)."""
        return self.data.view("<f8")

    def validate(self) -> None:
        if self.data.dtype != np.uint8 or self.status.dtype != np.uint8:
            raise ValueError("data and status buffers must be uint8 arrays")
        if self.data.ndim != 1 or self.status.ndim != 1:
            raise ValueError("data and status buffers must be one-dimensional")
        if self.data.shape[0] != self.status.shape[0] * ELEMENT_SIZE:
            raise ValueError(
                f"data buffer has {self.data.shape[0]} bytes, expected "
                f"{self.status.shape[0]} slots * {ELEMENT_SIZE} bytes"
            )


@dataclass(frozen=True)
class ReadReport:
    """
    Diagnostics for one completed ReadRequest.

    column_index is -1 when the requested column was not present in the file.
    """
    resource_id: str
    column_index: int
    n_rows: int = 0
    n_written: int = 0
    n_bad_timestamp: int = 0
    n_out_of_range: int = 0
    warnings: Tuple[str, ...] = ()

    @property
    def found(self) -> bool:
        return self.column_index >= 0
