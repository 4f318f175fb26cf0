from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import timedelta
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import numpy as np
import pandas as pd


SAMPLE_PERIOD = timedelta(minutes=10)
ELEMENT_SIZE = int(np.dtype("<f8").itemsize)
FLOAT64 = "FLOAT64"

def _empty_mapping() -> Mapping[str, Any]:
    return MappingProxyType({})


@dataclass(frozen=True)
class FileSource:
    """
    One physical file layout feeding a logical file-source group.

    path_segments / file_template: date patterns used by file discovery.
    file_period: time span covered by one file.
    utc_offset: offset of the file timestamps relative to UTC (used by discovery only).
    catalog_source_files: explicit files (relative to the data root) that bypass
      discovery during catalog building; None means "use discovery".
    """
    path_segments: Tuple[str, ...]
    file_template: str
    file_period: timedelta
    utc_offset: timedelta = timedelta(0)
    file_date_time_preselector: Optional[str] = None
    file_date_time_selector: Optional[str] = None
    catalog_source_files: Optional[Tuple[str, ...]] = None
    additional_properties: Mapping[str, Any] = field(default_factory=_empty_mapping)


@dataclass(frozen=True)
class CatalogDescription:
    """
    Configured catalog: a title plus ordered FileSource lists keyed by file-source id.
    """
    title: str
    file_source_groups: Mapping[str, Tuple[FileSource, ...]]
    additional_properties: Mapping[str, Any] = field(default_factory=_empty_mapping)


@dataclass(frozen=True)
class Representation:
    """Storage representation of a resource. WindCube channels are always 10-minute float64."""
    data_type: str = FLOAT64
    sample_period: timedelta = SAMPLE_PERIOD
    element_size: int = ELEMENT_SIZE

    @property
    def id(self) -> str:
        minutes = int(self.sample_period.total_seconds() // 60)
        return f"{minutes}_min"


@dataclass(frozen=True)
class Resource:
    """
    One channel of a catalog.

    original_name is the verbatim column label; normalization is lossy, so readers
    relocate the column by this label rather than by the id.
    """
    id: str
    unit: str
    groups: Tuple[str, ...]
    file_source_id: str
    original_name: str
    representations: Tuple[Representation, ...] = (Representation(),)

    def merge(self, other: "Resource") -> "Resource":
        """Union of two descriptions of the same id; scalar properties of *other* win when set."""
        if other.id != self.id:
            raise ValueError(f"Cannot merge resource '{other.id}' into '{self.id}'.")

        groups = self.groups + tuple(g for g in other.groups if g not in self.groups)
        seen = {r.id for r in self.representations}
        reps = self.representations + tuple(r for r in other.representations if r.id not in seen)

        return replace(
            self,
            unit=other.unit or self.unit,
            groups=groups,
            file_source_id=other.file_source_id or self.file_source_id,
            original_name=other.original_name or self.original_name,
            representations=reps,
        )


@dataclass(frozen=True)
class ResourceCatalog:
    """
    Ordered, id-keyed collection of resources.

    Catalogs are immutable; merge() returns a new catalog. Resource order is the
    order of first appearance.
    """
    id: str
    resources: Tuple[Resource, ...] = ()

    def __post_init__(self) -> None:
        ids = [r.id for r in self.resources]
        if len(ids) != len(set(ids)):
            dupes = sorted({i for i in ids if ids.count(i) > 1})
            raise ValueError(f"Duplicate resource ids in catalog '{self.id}': {dupes}")

    @classmethod
    def from_resources(cls, catalog_id: str, resources: Iterable[Resource]) -> "ResourceCatalog":
        """Catalog of one resource list; duplicate ids are rejected, not merged."""
        return cls(id=catalog_id, resources=tuple(resources))

    def merge(self, other: "ResourceCatalog") -> "ResourceCatalog":
        if other.id != self.id:
            raise ValueError(f"Cannot merge catalog '{other.id}' into '{self.id}'.")
        return self.merge_resources(other.resources)

    def merge_resources(self, resources: Iterable[Resource]) -> "ResourceCatalog":
        merged: Dict[str, Resource] = {r.id: r for r in self.resources}
        for res in resources:
            prev = merged.get(res.id)
            merged[res.id] = res if prev is None else prev.merge(res)
        return ResourceCatalog(id=self.id, resources=tuple(merged.values()))

    def find(self, resource_id: str) -> Resource:
        for res in self.resources:
            if res.id == resource_id:
                return res
        raise KeyError(f"Resource '{resource_id}' not found in catalog '{self.id}'.")

    @property
    def resource_ids(self) -> List[str]:
        return [r.id for r in self.resources]

    def to_frame(self) -> pd.DataFrame:
        """One row per resource, in catalog order."""
        rows = [
            {
                "id": r.id,
                "unit": r.unit,
                "group": ",".join(r.groups),
                "file_source_id": r.file_source_id,
                "original_name": r.original_name,
                "representation": ",".join(rep.id for rep in r.representations),
            }
            for r in self.resources
        ]
        return pd.DataFrame(
            rows,
            columns=["id", "unit", "group", "file_source_id", "original_name", "representation"],
        )
