from .catalog import (
    CatalogDescription,
    FileSource,
    Representation,
    Resource,
    ResourceCatalog,
    ELEMENT_SIZE,
    SAMPLE_PERIOD,
)
from .requests import ReadReport, ReadRequest, allocate_buffers, slot_count_for

__all__ = [
    "CatalogDescription",
    "FileSource",
    "Representation",
    "Resource",
    "ResourceCatalog",
    "ELEMENT_SIZE",
    "SAMPLE_PERIOD",
    "ReadReport",
    "ReadRequest",
    "allocate_buffers",
    "slot_count_for",
]
