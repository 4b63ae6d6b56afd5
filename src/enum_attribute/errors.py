"""
Error types for enum declaration, validation and the host record layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class EnumAttributeError(Exception):
    """Base exception for all enum-attribute errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationErrorKind(StrEnum):
    """Reasons an enum declaration can be rejected."""

    EMPTY_VALUE_SET = "empty_value_set"
    DUPLICATE_VALUE = "duplicate_value"
    INVALID_VALUE = "invalid_value"
    INVALID_OPTION = "invalid_option"
    INVALID_DEFAULT = "invalid_default"
    DUPLICATE_FIELD = "duplicate_field"
    RESERVED_METHOD_COLLISION = "reserved_method_collision"
    UNSUPPORTED_RECORD_TYPE = "unsupported_record_type"


class ConfigurationError(EnumAttributeError):
    """
    Raised when an enum declaration is invalid.

    Declarations happen at class-definition time, so this is a programming
    error and is never caught by the library.

    Examples:
    - Empty value list
    - Storage field already registered on the record type
    - Generated method name already taken
    """

    def __init__(
        self,
        message: str,
        kind: ConfigurationErrorKind,
        *,
        record_type: type | None = None,
        name: str | None = None,
    ):
        self.kind = kind
        self.record_type = record_type
        self.name = name
        super().__init__(self._format_message(message))

    def _format_message(self, message: str) -> str:
        if self.record_type is not None and self.name:
            return f"{self.record_type.__name__}.{self.name}: {message}"
        return message


class ValidationErrorKind(StrEnum):
    """Kinds of validation failure reported for enum fields."""

    MISSING = "missing"
    NOT_IN_SET = "not_in_set"


@dataclass(frozen=True)
class ValidationError:
    """
    A single validation failure on a record.

    Not an exception: validators return these and the record collects them
    into ``errors``.

    Attributes:
        field: Storage field name that failed
        kind: Failure kind
        value: Offending value (the element, for multi-valued fields)
    """

    field: str
    kind: ValidationErrorKind
    value: Any = None

    @property
    def message(self) -> str:
        if self.kind == ValidationErrorKind.MISSING:
            return f"{self.field} can't be blank"
        return f"{self.field} has invalid value {self.value!r}"

    def __str__(self) -> str:
        return self.message


class DocumentInvalid(EnumAttributeError):
    """Raised by a strict save when the record fails validation."""

    def __init__(self, record: Any, errors: list[ValidationError]):
        self.record = record
        self.errors = list(errors)
        details = "; ".join(e.message for e in self.errors)
        super().__init__(f"{type(record).__name__} is invalid: {details}")


class UnknownAttributeError(EnumAttributeError):
    """Raised when assigning an attribute the record type does not define."""

    pass


class DocumentNotFound(EnumAttributeError):
    """Raised when a record cannot be found in its store."""

    pass
