"""Document models — Typed containers over raw index documents."""

from amber_odm.models.container import AttrContainer, serialize_value
from amber_odm.models.document import RESERVED_FIELDS, Document
from amber_odm.models.fields import declared_fields

__all__ = ["RESERVED_FIELDS", "AttrContainer", "Document", "declared_fields", "serialize_value"]
