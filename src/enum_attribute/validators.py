"""
Validation rules attached to enum storage fields.

Validators never raise for bad data. They return ``ValidationError`` records
which the host record collects into its ``errors`` list.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from .declaration import EnumDeclaration
from .errors import ValidationError, ValidationErrorKind


class EnumValidator(ABC):
    """Base class for validators bound to a single enum declaration."""

    def __init__(self, declaration: EnumDeclaration):
        self.declaration = declaration

    @property
    def field_name(self) -> str:
        return self.declaration.storage_field_name

    @abstractmethod
    def validate(self, record: Any) -> list[ValidationError]:
        """Return the validation failures for ``record`` (empty when valid)."""

    def __repr__(self) -> str:
        values = list(self.declaration.values)
        return f"{type(self).__name__}({self.field_name!r}, values={values!r})"


class InclusionValidator(EnumValidator):
    """Scalar fields: the value must be one of the declared values."""

    def validate(self, record: Any) -> list[ValidationError]:
        value = record.read_attribute(self.field_name)
        if value is None or value == "":
            if self.declaration.required:
                return [ValidationError(self.field_name, ValidationErrorKind.MISSING)]
            return []
        if not self.declaration.includes(value):
            return [ValidationError(self.field_name, ValidationErrorKind.NOT_IN_SET, value)]
        return []


class MultipleValidator(EnumValidator):
    """Multi-valued fields: every element must be a declared value.

    An empty or absent list is always valid.
    """

    def validate(self, record: Any) -> list[ValidationError]:
        elements = record.read_attribute(self.field_name) or []
        if not isinstance(elements, list):
            elements = [elements]
        return [
            ValidationError(self.field_name, ValidationErrorKind.NOT_IN_SET, element)
            for element in elements
            if not self.declaration.includes(element)
        ]
