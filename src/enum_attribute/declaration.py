"""
Data model for enum declarations.

An ``EnumDeclaration`` captures everything the builder decided for one
``enum(...)`` call: the public name, the prefixed storage field, the legal
values and the multiplicity options. It is immutable once built.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class EnumOptions(BaseModel):
    """
    Recognised options of an ``enum(...)`` call.

    ``default`` is only meaningful when it was passed explicitly; check
    ``has_default`` rather than comparing against ``None``.
    """

    multiple: bool = False
    required: bool | None = None
    default: Any = None

    model_config = ConfigDict(extra="forbid", frozen=True, strict=True)

    @property
    def has_default(self) -> bool:
        return "default" in self.model_fields_set


class EnumDeclaration(BaseModel):
    """
    One enum attached to a record type.

    Attributes:
        name: Public accessor name (e.g. ``status``)
        storage_field_name: Prefixed field holding the value (e.g. ``_status``)
        values: Legal values in declaration order
        multiple: Whether the field holds a list of values
        required: Whether absence is invalid (always False when ``multiple``)
        default: Initial value for new records
    """

    name: str
    storage_field_name: str
    values: tuple[str, ...]
    multiple: bool = False
    required: bool = True
    default: str | tuple[str, ...] | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def constant_name(self) -> str:
        """Name of the class constant listing ``values`` (``STATUS``)."""
        return self.name.upper()

    def predicate_name(self, value: str) -> str:
        return f"is_{value}"

    def mutator_name(self, value: str) -> str:
        return f"mark_{value}"

    def scope_name(self, value: str) -> str:
        return value

    def generated_names(self) -> list[str]:
        """Every attribute name the builder installs on the record type."""
        names = [self.name, self.constant_name]
        for value in self.values:
            names.extend(
                [self.predicate_name(value), self.mutator_name(value), self.scope_name(value)]
            )
        return names

    def includes(self, value: Any) -> bool:
        """Check whether ``value`` is one of the declared values."""
        return isinstance(value, str) and value in self.values

    def initial_value(self) -> Any:
        """Fresh field value for a new record (a new list for multiple)."""
        if self.multiple:
            return list(self.default or ())
        return self.default
