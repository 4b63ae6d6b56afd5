"""
Query predicates and chainable criteria over persisted records.

Enum scopes only need two predicate shapes: equality for scalar fields and
list membership for multi-valued fields. Stores translate ``Criterion``
objects into their own query language.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .document import Document


class CriterionOperator(StrEnum):
    """Supported predicate shapes."""

    EQ = "eq"  # field equals value
    CONTAINS = "contains"  # list field contains value


@dataclass(frozen=True)
class Criterion:
    """A single filter on a stored field."""

    field: str
    operator: CriterionOperator
    value: Any

    def matches(self, attributes: Mapping[str, Any]) -> bool:
        current = attributes.get(self.field)
        if self.operator == CriterionOperator.CONTAINS:
            return isinstance(current, list) and self.value in current
        return current == self.value


class Criteria:
    """
    Lazily evaluated query over one record type.

    Criteria are immutable; ``where`` and scope calls return new instances,
    so scopes chain: ``Account.author().editor()``.
    """

    __slots__ = ("document_class", "criteria")

    def __init__(self, document_class: type[Document], criteria: tuple[Criterion, ...] = ()):
        self.document_class = document_class
        self.criteria = criteria

    def where(self, *criteria: Criterion) -> Criteria:
        return Criteria(self.document_class, self.criteria + criteria)

    def to_list(self) -> list[Document]:
        store = self.document_class.get_store()
        rows = store.find(self.document_class.collection_name, list(self.criteria))
        return [self.document_class.from_storage(doc_id, attrs) for doc_id, attrs in rows]

    def first(self) -> Document | None:
        records = self.to_list()
        return records[0] if records else None

    def count(self) -> int:
        return len(self.to_list())

    def exists(self) -> bool:
        return self.count() > 0

    def __iter__(self) -> Iterator[Document]:
        return iter(self.to_list())

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, record: object) -> bool:
        return record in self.to_list()

    def __getattr__(self, name: str) -> Any:
        # Scope chaining; dunder and private lookups must not recurse here
        if name.startswith("_"):
            raise AttributeError(name)
        scopes = self.document_class.scopes
        if name not in scopes:
            raise AttributeError(f"{self.document_class.__name__} has no scope {name!r}")
        criterion = scopes[name]
        return lambda: self.where(criterion)

    def __repr__(self) -> str:
        return f"Criteria({self.document_class.__name__}, {list(self.criteria)!r})"
