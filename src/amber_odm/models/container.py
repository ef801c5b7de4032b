"""Attribute container — Typed projection of a raw index document.

A container hydrates its declared fields from a raw mapping and keeps the
mapping around, so keys it does not declare survive a round trip through
``to_dict()``. Keys starting with ``_`` are internal to the index and are
never passed through.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any, Self

from pydantic import BaseModel, PrivateAttr, ValidatorFunctionWrapHandler, model_validator

from amber_odm.models.fields import declared_fields, field_attributes

INTERNAL_PREFIX = "_"


def serialize_value(value: Any) -> Any:
    """Serialize a field value: containers to dicts, sequences element-wise."""
    if isinstance(value, AttrContainer):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [serialize_value(item) for item in value]
    return value


class AttrContainer(BaseModel):
    """Base class for typed views over raw index documents.

    Subclasses declare fields as regular pydantic fields. Fields should have a
    default, since any field absent (or ``None``) in the raw document keeps
    it::

        class Address(AttrContainer):
            city: str | None = None
            tags: list[str] = Field(default_factory=list)

        address = Address.from_document({"city": "Lyon", "zip": "69001"})
        address.to_dict()  # {"city": "Lyon", "tags": [], "zip": "69001"}

    Container-typed fields (and lists of them) are hydrated from nested
    mappings and keep their own raw mapping for passthrough.
    """

    _document: Mapping[str, Any] | None = PrivateAttr(default=None)

    def __init__(self, /, **data: Any) -> None:
        super().__init__(**self._keyword_document(data))

    @classmethod
    def _keyword_document(cls, data: dict[str, Any]) -> dict[str, Any]:
        # Keyword arguments may name an aliased field by its attribute.
        for key, attr in field_attributes(cls).items():
            if attr != key and attr in data and key not in data:
                data[key] = data.pop(attr)
        return data

    @model_validator(mode="wrap")
    @classmethod
    def _hydrate(cls, data: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        if isinstance(data, BaseModel) or (data is not None and not isinstance(data, Mapping)):
            return handler(data)
        cls._check_fields()
        instance = handler(cls._pick_declared(cls._field_source(data)))
        instance._retain(data)
        return instance

    @classmethod
    def _check_fields(cls) -> None:
        """Hook for subclasses that restrict which fields may be declared."""

    @classmethod
    def _field_source(cls, document: Mapping[str, Any] | None) -> Mapping[str, Any] | None:
        return document

    @classmethod
    def _pick_declared(cls, source: Mapping[str, Any] | None) -> dict[str, Any]:
        values: dict[str, Any] = {}
        if not source:
            return values
        for key in declared_fields(cls):
            value = source.get(key)
            if value is not None:
                values[key] = copy.deepcopy(value)
        return values

    def _retain(self, document: Mapping[str, Any] | None) -> None:
        self._document = document

    def _passthrough_source(self) -> Mapping[str, Any] | None:
        return self._document

    # ── Public API ──────────────────────────────────────────────────────

    @classmethod
    def fields(cls) -> list[str]:
        """Index keys declared by this class, in declaration order."""
        return declared_fields(cls)

    @classmethod
    def from_document(cls, document: Mapping[str, Any] | None) -> Self:
        """Build an instance from a raw mapping (``None`` yields an empty one)."""
        return cls.model_validate(document)

    @property
    def raw_document(self) -> Mapping[str, Any] | None:
        """The raw mapping this instance was built from."""
        return self._document

    def is_empty(self) -> bool:
        """True if the instance was built from ``None`` or an empty mapping."""
        return not self._document

    def to_dict(self) -> dict[str, Any]:
        """Serialize declared fields, then append undeclared public raw keys."""
        result: dict[str, Any] = {}
        for key, attr in field_attributes(type(self)).items():
            result[key] = serialize_value(getattr(self, attr))

        for key, value in (self._passthrough_source() or {}).items():
            if key in result or str(key).startswith(INTERNAL_PREFIX):
                continue
            result[key] = value
        return result
