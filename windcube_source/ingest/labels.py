"""Column label normalization.

A WindCube header cell looks like ``"<name>"`` or ``"<name> (<unit>)"``, e.g.
``"Wind Speed (10m) (m/s)"``. From it we derive:

- a resource id: ``"WC_" + name`` with invalid characters replaced by ``_``
- the unit: text of the trailing parenthesized group (empty if none)
- a group tag: the first ``<digits>m`` height token, else ``"Environment"``

The three extractions are independent pure functions so they can be tested and
reused on their own.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple
import re

from windcube_source.errors import InvalidResourceNameError


RESOURCE_ID_PREFIX = "WC_"
DEFAULT_GROUP = "Environment"

VALID_ID = re.compile(r"^[a-zA-Z_][a-zA-Z_0-9]*$")
_INVALID_ID_CHARS = re.compile(r"[^a-zA-Z_0-9]+")
_INVALID_ID_START_CHARS = re.compile(r"^[^a-zA-Z_]+")

# greedy: the unit is the LAST "(...)" group preceded by whitespace
_NAME_UNIT = re.compile(r"(.*)\s\((.*)\)")
_HEIGHT = re.compile(r"[0-9]+m")


@dataclass(frozen=True)
class NormalizedLabel:
    resource_id: str
    unit: str
    group: str


def split_name_unit(label: str) -> Tuple[str, str]:
    """Split ``"name (unit)"`` into ``(name, unit)``; labels without a unit give ``(label, "")``."""
    m = _NAME_UNIT.search(label)
    if not m:
        return label, ""
    return m.group(1).strip(), m.group(2)


def find_height_group(label: str) -> str:
    m = _HEIGHT.search(label)
    return m.group(0) if m else DEFAULT_GROUP


def is_valid_resource_id(resource_id: str) -> bool:
    return VALID_ID.match(resource_id) is not None


def enforce_naming_convention(candidate: str) -> str:
    """
    Substitute invalid characters and validate.

    Valid ids are returned unchanged. Raises InvalidResourceNameError when the
    substituted result still violates the grammar (e.g. an empty candidate).
    """
    resource_id = _INVALID_ID_CHARS.sub("_", candidate)
    resource_id = _INVALID_ID_START_CHARS.sub("_", resource_id)
    if not is_valid_resource_id(resource_id):
        raise InvalidResourceNameError(f"The name {candidate!r} is not a valid resource id.")
    return resource_id


def normalize_label(label: str) -> NormalizedLabel:
    name, unit = split_name_unit(label)
    return NormalizedLabel(
        resource_id=enforce_naming_convention(RESOURCE_ID_PREFIX + name),
        unit=unit,
        group=find_height_group(label),
    )
