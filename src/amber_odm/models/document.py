"""Document — Typed projection of one hit of an index.

A ``Document`` subclass binds its fields to an index of a named database and
carries the hit metadata needed for optimistic concurrency control::

    class User(Document):
        db_name = "main"
        index_name = "users"

        name: str | None = None
        address: Address | None = None

    users = User.search({"term": {"name": "ann"}}, size=10)
    users[0].name = "Ann"
    users[0].build_bulk_update("name")
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Mapping
from typing import Any, ClassVar, Self

from pydantic import PrivateAttr

from amber_odm.connector.registry import ConnectorRegistry, default_registry
from amber_odm.exceptions import (
    ConfigurationError,
    IllegalArgumentException,
    ReservedField,
    UnknownWriteFieldException,
)
from amber_odm.models.container import AttrContainer, serialize_value
from amber_odm.models.fields import declared_fields, field_attributes

logger = logging.getLogger(__name__)

RESERVED_FIELDS = ("_id", "_score", "sort", "_seq_no", "_primary_term")
HIT_ENVELOPE_KEYS = ("_id", "_index")


class Document(AttrContainer):
    """Base class for documents stored in a search index.

    Class attributes:
        db_name: Database id used to look up the client.
        index_name: Index searched and targeted by updates.
        use_seq_verification: Request ``_seq_no``/``_primary_term`` on search
            and guard updates with them.
        connector_registry: Registry resolving ``db_name``; the process-wide
            registry when ``None``.
    """

    db_name: ClassVar[str | None] = None
    index_name: ClassVar[str | None] = None
    use_seq_verification: ClassVar[bool] = True
    connector_registry: ClassVar[ConnectorRegistry | None] = None

    _id: Any = PrivateAttr(default=None)
    _score: Any = PrivateAttr(default=None)
    _sort: Any = PrivateAttr(default=None)
    _seq_no: Any = PrivateAttr(default=None)
    _primary_term: Any = PrivateAttr(default=None)

    @classmethod
    def _check_fields(cls) -> None:
        for field in declared_fields(cls):
            if field in RESERVED_FIELDS:
                raise ReservedField(f"Field {field} is reserved, remove it from the fields list")

    @classmethod
    def _keyword_document(cls, data: dict[str, Any]) -> dict[str, Any]:
        data = super()._keyword_document(data)
        metadata = {key: data.pop(key) for key in (*RESERVED_FIELDS, *HIT_ENVELOPE_KEYS) if key in data}
        if not metadata or "_source" in data:
            return {**data, **metadata}
        return {**metadata, "_source": data}

    @classmethod
    def _field_source(cls, document: Mapping[str, Any] | None) -> Mapping[str, Any] | None:
        if not document:
            return document
        if "_source" in document:
            return document["_source"]
        # A hit fetched without ``_source`` carries no field values.
        if any(key in document for key in HIT_ENVELOPE_KEYS):
            return {}
        return document

    def _retain(self, document: Mapping[str, Any] | None) -> None:
        super()._retain(document)
        document = document or {}
        self._id = copy.deepcopy(document.get("_id"))
        self._score = copy.deepcopy(document.get("_score"))
        self._sort = copy.deepcopy(document.get("sort"))
        self._seq_no = copy.deepcopy(document.get("_seq_no"))
        self._primary_term = copy.deepcopy(document.get("_primary_term"))

    def _passthrough_source(self) -> Mapping[str, Any] | None:
        return self._field_source(self._document)

    @property
    def sort(self) -> Any:
        """Sort values of the hit, usable as ``search_after``."""
        return self._sort

    # ── Client ──────────────────────────────────────────────────────────

    @classmethod
    def client(cls) -> Any:
        """The client bound to :attr:`db_name`."""
        registry = cls.connector_registry or default_registry
        return registry.get_client(cls.db_name)

    # ── Search ──────────────────────────────────────────────────────────

    @classmethod
    def build_search_body(
        cls,
        query: Mapping[str, Any],
        source_fields: list[str] | None = None,
        sort: Any = None,
        search_after: list[Any] | None = None,
        size: int = 0,
    ) -> dict[str, Any]:
        """Build the search request body.

        Args:
            query: Query clause, passed to the cluster untouched.
            source_fields: ``_source`` fields to fetch; all declared fields
                when empty.
            sort: Sort clause, omitted when empty.
            search_after: Sort values to resume after, omitted when empty.
            size: Number of hits, omitted when zero.

        Raises:
            IllegalArgumentException: If *query* is empty.
        """
        if not query:
            raise IllegalArgumentException()
        if not source_fields:
            source_fields = cls.fields()

        body: dict[str, Any] = {"_source": list(source_fields), "query": query}
        if cls.use_seq_verification:
            body["seq_no_primary_term"] = True
        if sort:
            body["sort"] = sort
        if search_after:
            body["search_after"] = search_after
        if size:
            body["size"] = size
        return body

    def execute_search(
        self,
        query: Mapping[str, Any],
        source_fields: list[str] | None = None,
        sort: Any = None,
        search_after: list[Any] | None = None,
        size: int = 0,
    ) -> list[Self]:
        """Run a search on this document's index and wrap every hit."""
        cls = type(self)
        body = cls.build_search_body(query, source_fields, sort, search_after, size)
        if cls.index_name is None:
            raise ConfigurationError(f"{cls.__name__} does not declare an index_name")

        response = cls.client().search(index=str(cls.index_name), body=body)
        payload = getattr(response, "body", response) or {}
        hits = (payload.get("hits") or {}).get("hits") or []
        logger.debug("Search on index %s returned %d hits", cls.index_name, len(hits))
        return [cls.model_validate(hit) for hit in hits]

    @classmethod
    def search(
        cls,
        query: Mapping[str, Any],
        source_fields: list[str] | None = None,
        sort: Any = None,
        search_after: list[Any] | None = None,
        size: int = 0,
    ) -> list[Self]:
        """Search without an instance at hand; see :meth:`execute_search`."""
        return cls().execute_search(
            query,
            source_fields=source_fields,
            sort=sort,
            search_after=search_after,
            size=size,
        )

    # ── Writes ──────────────────────────────────────────────────────────

    @classmethod
    def is_valid_fields(cls, names: Iterable[Any]) -> bool:
        """True if every name is a declared field."""
        declared = set(cls.fields())
        return all(str(name) in declared for name in names)

    @classmethod
    def validate_fields(cls, names: Iterable[Any]) -> list[str]:
        """Normalize *names* to strings and check they are declared fields.

        Returns:
            The normalized names.

        Raises:
            UnknownWriteFieldException: If some names are not declared.
            IllegalArgumentException: If *names* is empty.
        """
        normalized = [str(name) for name in names]
        declared = set(cls.fields())
        unknown = [name for name in normalized if name not in declared]
        if unknown:
            raise UnknownWriteFieldException(
                f"Unknown fields: {unknown}, declare them on {cls.__name__} before using them",
                fields=unknown,
            )
        if not normalized:
            raise IllegalArgumentException("Empty fields")
        return normalized

    def build_bulk_update(self, *fields: Any) -> dict[str, Any]:
        """Build a bulk ``update`` instruction holding the current value of *fields*.

        When :attr:`use_seq_verification` is set, the instruction carries
        ``if_seq_no`` and ``if_primary_term`` from the hit this instance was
        read from, so the cluster rejects it if the document changed since.
        """
        names = self.validate_fields(fields)
        attributes = field_attributes(type(self))
        doc = {name: serialize_value(getattr(self, attributes[name])) for name in names}

        update: dict[str, Any] = {
            "_index": None if self.index_name is None else str(self.index_name),
            "_id": self._id,
            "data": {"doc": doc},
        }
        if self.use_seq_verification:
            update["if_seq_no"] = self._seq_no
            update["if_primary_term"] = self._primary_term
        return {"update": update}
