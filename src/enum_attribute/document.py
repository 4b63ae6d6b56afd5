"""
Minimal document-style record type.

``Document`` is the host the enum builder extends. It provides exactly the
collaborator surface the builder relies on:

- a per-class field registry (``register_field``)
- a per-class validation pipeline (``register_validator``, ``is_valid``)
- named query scopes (``define_scope``) evaluated by a ``DocumentStore``

Records keep their data in an attribute dict keyed by field name and are
persisted as plain dicts, so stored values stay JSON-compatible.
"""

from __future__ import annotations

import copy
import logging
import uuid
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, ClassVar

from .errors import DocumentInvalid, DocumentNotFound, UnknownAttributeError, ValidationError
from .query import Criteria, Criterion
from .store import DocumentStore, MemoryStore

logger = logging.getLogger(__name__)


class FieldKind(StrEnum):
    """Storage type of a registered field."""

    ANY = "any"
    STRING = "string"
    SYMBOL = "symbol"
    ARRAY = "array"


@dataclass(frozen=True)
class FieldDef:
    """A field registered on a document class."""

    name: str
    kind: FieldKind = FieldKind.ANY
    default: Any = None

    def default_value(self) -> Any:
        # Copied so list defaults are never shared between records
        return copy.deepcopy(self.default)


_default_store: DocumentStore | None = None


def default_store() -> DocumentStore:
    """Return the store used by document classes that do not set their own."""
    global _default_store
    if _default_store is None:
        _default_store = MemoryStore()
    return _default_store


class _ScopeAccessor:
    """Class attribute that builds a ``Criteria`` for its owner class."""

    def __init__(self, name: str):
        self.name = name

    def __get__(self, instance: Any, owner: type[Document]) -> Any:
        criterion = owner.scopes[self.name]
        return lambda: Criteria(owner, (criterion,))


class Document:
    """
    Base class for persisted records.

    Class-level registries are copied on subclassing, so a subclass inherits
    its parent's fields, validators and scopes, and additions to the
    subclass do not leak upwards.
    """

    fields: ClassVar[dict[str, FieldDef]] = {}
    validators: ClassVar[dict[str, list[Any]]] = {}
    scopes: ClassVar[dict[str, Criterion]] = {}
    store: ClassVar[DocumentStore | None] = None
    collection_name: ClassVar[str] = "documents"
    # Set per instance, so enums may not claim them
    reserved_attributes: ClassVar[frozenset[str]] = frozenset(
        {"id", "new_record", "destroyed", "errors", "_attributes"}
    )

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.fields = dict(cls.fields)
        cls.validators = {name: list(rules) for name, rules in cls.validators.items()}
        cls.scopes = dict(cls.scopes)
        if "collection_name" not in cls.__dict__:
            cls.collection_name = cls.__name__.lower()

    def __init__(self, **attributes: Any):
        self.id = str(uuid.uuid4())
        self.new_record = True
        self.destroyed = False
        self.errors: list[ValidationError] = []
        self._attributes: dict[str, Any] = {
            name: field.default_value() for name, field in self.fields.items()
        }
        for name, value in attributes.items():
            self._assign(name, value)

    # =========================================================================
    # Class-level registration
    # =========================================================================

    @classmethod
    def register_field(
        cls, name: str, kind: FieldKind = FieldKind.ANY, default: Any = None
    ) -> FieldDef:
        field = FieldDef(name=name, kind=kind, default=default)
        cls.fields[name] = field
        return field

    @classmethod
    def register_validator(cls, field_name: str, validator: Any) -> None:
        cls.validators.setdefault(field_name, []).append(validator)

    @classmethod
    def define_scope(cls, name: str, criterion: Criterion) -> None:
        cls.scopes[name] = criterion
        setattr(cls, name, _ScopeAccessor(name))

    @classmethod
    def get_store(cls) -> DocumentStore:
        return cls.store if cls.store is not None else default_store()

    # =========================================================================
    # Querying
    # =========================================================================

    @classmethod
    def all(cls) -> Criteria:
        return Criteria(cls)

    @classmethod
    def where(cls, *criteria: Criterion) -> Criteria:
        return Criteria(cls, criteria)

    @classmethod
    def count(cls) -> int:
        return cls.all().count()

    @classmethod
    def find(cls, doc_id: str) -> Document:
        attributes = cls.get_store().get(cls.collection_name, doc_id)
        if attributes is None:
            raise DocumentNotFound(f"{cls.__name__} {doc_id!r} not found")
        return cls.from_storage(doc_id, attributes)

    @classmethod
    def from_storage(cls, doc_id: str, attributes: dict[str, Any]) -> Document:
        """Rebuild a persisted record without running setters."""
        record = cls.__new__(cls)
        record.id = doc_id
        record.new_record = False
        record.destroyed = False
        record.errors = []
        record._attributes = {name: field.default_value() for name, field in cls.fields.items()}
        record._attributes.update(attributes)
        return record

    # =========================================================================
    # Attributes
    # =========================================================================

    @property
    def attributes(self) -> dict[str, Any]:
        return copy.deepcopy(self._attributes)

    @property
    def persisted(self) -> bool:
        return not self.new_record and not self.destroyed

    def read_attribute(self, name: str) -> Any:
        if name not in self.fields:
            raise UnknownAttributeError(f"{type(self).__name__} has no field {name!r}")
        return self._attributes.get(name)

    def write_attribute(self, name: str, value: Any) -> None:
        if name not in self.fields:
            raise UnknownAttributeError(f"{type(self).__name__} has no field {name!r}")
        self._attributes[name] = value

    def update_attribute(self, name: str, value: Any) -> None:
        """Write a field and, for persisted records, save it without validation."""
        self.write_attribute(name, value)
        if self.persisted:
            self.get_store().update(self.collection_name, self.id, self._attributes)

    def _assign(self, name: str, value: Any) -> None:
        prop = getattr(type(self), name, None)
        if isinstance(prop, property):
            if prop.fset is None:
                raise UnknownAttributeError(
                    f"Attribute {name!r} of {type(self).__name__} is read-only"
                )
            setattr(self, name, value)
        elif name in self.fields:
            self.write_attribute(name, value)
        else:
            raise UnknownAttributeError(f"Unknown attribute {name!r} for {type(self).__name__}")

    # =========================================================================
    # Validation & persistence
    # =========================================================================

    def is_valid(self) -> bool:
        """Run every registered validator and store the failures in ``errors``."""
        errors: list[ValidationError] = []
        for rules in self.validators.values():
            for validator in rules:
                errors.extend(validator.validate(self))
        self.errors = errors
        return not errors

    def save(self, validate: bool = True, strict: bool = False) -> bool:
        """
        Persist the record.

        Args:
            validate: Run validators first and refuse to save invalid records
            strict: Raise ``DocumentInvalid`` instead of returning False

        Returns:
            True when the record was written
        """
        if validate and not self.is_valid():
            logger.debug("Not saving invalid %s %s: %s", type(self).__name__, self.id, self.errors)
            if strict:
                raise DocumentInvalid(self, self.errors)
            return False

        store = self.get_store()
        if self.new_record:
            store.insert(self.collection_name, self.id, self._attributes)
            self.new_record = False
        else:
            store.update(self.collection_name, self.id, self._attributes)
        return True

    def reload(self) -> Document:
        attributes = self.get_store().get(self.collection_name, self.id)
        if attributes is None:
            raise DocumentNotFound(f"{type(self).__name__} {self.id!r} not found")
        self._attributes.update(attributes)
        return self

    def delete(self) -> bool:
        deleted = self.get_store().delete(self.collection_name, self.id)
        self.destroyed = True
        return deleted

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return type(self) is type(other) and self.id == other.id

    def __hash__(self) -> int:
        return hash((type(self), self.id))

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r} {self._attributes!r}>"
