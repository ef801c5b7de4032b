"""Field reflection — Discover the declared fields of a container class.

A declared field is a pydantic model field. Its index key is the field alias
when one is set (for keys such as ``@timestamp``), the attribute name
otherwise. The sentinel key ``document`` is never treated as a field.
Fields inherited from a parent model are included, so subclassing extends
the schema.
"""

from __future__ import annotations

from functools import cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pydantic import BaseModel

REJECTED_FIELD_NAMES = frozenset({"document"})


@cache
def _collect(model_class: type[BaseModel]) -> tuple[tuple[str, str], ...]:
    pairs: list[tuple[str, str]] = []
    seen: set[str] = set()
    for attr, info in model_class.model_fields.items():
        key = info.alias or attr
        if key in REJECTED_FIELD_NAMES or key in seen:
            continue
        seen.add(key)
        pairs.append((key, attr))
    return tuple(pairs)


def declared_fields(model_class: type[BaseModel]) -> list[str]:
    """Return the index keys declared by *model_class*, in declaration order."""
    return [key for key, _ in _collect(model_class)]


def field_attributes(model_class: type[BaseModel]) -> dict[str, str]:
    """Map each declared index key to the attribute that holds its value."""
    return dict(_collect(model_class))
