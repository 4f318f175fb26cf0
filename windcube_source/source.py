from __future__ import annotations

import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Tuple

from windcube_source.config import load_config
from windcube_source.errors import ConfigurationError
from windcube_source.ingest.availability import estimate_availability
from windcube_source.ingest.catalog_builder import CatalogBuilder
from windcube_source.ingest.discovery import FileDiscovery, TemplateFileDiscovery
from windcube_source.ingest.reader import TimeAlignedReader
from windcube_source.ingest.rows import DEFAULT_ENCODING
from windcube_source.models.catalog import CatalogDescription, FileSource, ResourceCatalog
from windcube_source.models.requests import ReadReport, ReadRequest


LOGGER = logging.getLogger(__name__)


class WindCubeSource:
    """
    Data source over a directory of WindCube files described by ``<root>/config.json``.

    The configuration is loaded once in the constructor and never modified.
    File discovery is injected; by default files are located from the path and
    file-name templates of each FileSource.
    """

    def __init__(
        self,
        root: str | Path,
        *,
        discovery: Optional[FileDiscovery] = None,
        encoding: str = DEFAULT_ENCODING,
    ):
        self.root = Path(root).expanduser().resolve()
        self.encoding = encoding
        self.discovery = discovery or TemplateFileDiscovery(self.root)
        self._config: Mapping[str, CatalogDescription] = load_config(self.root)
        self._reader = TimeAlignedReader(encoding=encoding)
        LOGGER.debug("Loaded %d catalog descriptions from %s", len(self._config), self.root)

    @property
    def config(self) -> Mapping[str, CatalogDescription]:
        return self._config

    def _description(self, catalog_id: str) -> CatalogDescription:
        try:
            return self._config[catalog_id]
        except KeyError:
            raise ConfigurationError(f"Unknown catalog id '{catalog_id}'.") from None

    def catalog_registrations(self, path: str = "/") -> List[Tuple[str, str]]:
        """(catalog id, title) pairs. All catalogs are registered at the top level."""
        if path != "/":
            return []
        return [(cid, desc.title) for cid, desc in self._config.items()]

    def file_source_groups(self, catalog_id: str) -> Mapping[str, Tuple[FileSource, ...]]:
        return self._description(catalog_id).file_source_groups

    def get_catalog(self, catalog_id: str, cancel_event: Optional[threading.Event] = None) -> ResourceCatalog:
        builder = CatalogBuilder(self.root, self.discovery, encoding=self.encoding)
        return builder.build(catalog_id, self._description(catalog_id), cancel_event=cancel_event)

    def get_file_availability(self, file_path: str | Path) -> float:
        return estimate_availability(file_path, encoding=self.encoding)

    def read(
        self,
        file_path: str | Path,
        file_begin: datetime,
        requests: Sequence[ReadRequest],
    ) -> List[ReadReport]:
        return self._reader.read(file_path, file_begin, requests)
