from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from windcube_source.errors import InvalidResourceNameError, OperationCancelledError
from windcube_source.ingest.discovery import FileDiscovery
from windcube_source.ingest.header import read_header
from windcube_source.ingest.labels import normalize_label
from windcube_source.ingest.rows import DEFAULT_ENCODING
from windcube_source.models.catalog import (
    CatalogDescription,
    FileSource,
    Representation,
    Resource,
    ResourceCatalog,
)


LOGGER = logging.getLogger(__name__)


def resources_from_header(columns: Iterable[str], file_source_id: str, source: str = "<header>") -> List[Resource]:
    """
    One Resource per non-blank header cell, column 0 (timestamp) excluded.

    Raises InvalidResourceNameError for a label that cannot be normalized, or when
    two labels of the same header normalize to the same id.
    """
    resources: List[Resource] = []
    seen: Dict[str, str] = {}
    for original_name in list(columns)[1:]:
        if not original_name.strip():
            continue
        label = normalize_label(original_name)
        if label.resource_id in seen:
            raise InvalidResourceNameError(
                f"{source}: columns {seen[label.resource_id]!r} and {original_name!r} "
                f"both normalize to {label.resource_id!r}"
            )
        seen[label.resource_id] = original_name
        resources.append(
            Resource(
                id=label.resource_id,
                unit=label.unit,
                groups=(label.group,),
                file_source_id=file_source_id,
                original_name=original_name,
                representations=(Representation(),),
            )
        )
    return resources


def read_file_resources(path: str | Path, file_source_id: str, encoding: str = DEFAULT_ENCODING) -> List[Resource]:
    with open(path, "r", encoding=encoding, errors="replace", newline=None) as f:
        header = read_header(f, source=str(path))
    return resources_from_header(header.columns, file_source_id, source=str(path))


class CatalogBuilder:
    """
    Builds a ResourceCatalog from the headers of the files of each file source.

    Strict: any malformed file or invalid label aborts the whole build; a file
    source without any file is skipped.
    """

    def __init__(self, root: str | Path, discovery: FileDiscovery, encoding: str = DEFAULT_ENCODING):
        self.root = Path(root)
        self.discovery = discovery
        self.encoding = encoding

    def resolve_paths(self, file_source: FileSource) -> List[Path]:
        if file_source.catalog_source_files is not None:
            return [self.root / p for p in file_source.catalog_source_files if p is not None]
        first = self.discovery.resolve_first(file_source)
        return [] if first is None else [Path(first)]

    def build(
        self,
        catalog_id: str,
        description: CatalogDescription,
        cancel_event: Optional[threading.Event] = None,
    ) -> ResourceCatalog:
        catalog = ResourceCatalog(id=catalog_id)

        for file_source_id, group in description.file_source_groups.items():
            for file_source in group:
                paths = self.resolve_paths(file_source)
                if not paths:
                    LOGGER.debug("No file found for file source %s of catalog %s, skipping", file_source_id, catalog_id)
                    continue

                if cancel_event is not None and cancel_event.is_set():
                    raise OperationCancelledError(f"Catalog build for {catalog_id} was cancelled.")

                for path in paths:
                    resources = read_file_resources(path, file_source_id, self.encoding)
                    LOGGER.debug("%s: %d resources for file source %s", path, len(resources), file_source_id)
                    catalog = catalog.merge(ResourceCatalog.from_resources(catalog_id, resources))

        LOGGER.info("Built catalog %s with %d resources", catalog_id, len(catalog.resources))
        return catalog
