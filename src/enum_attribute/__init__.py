"""
enum-attribute - enumerated attributes for document-style records.

Declare a field restricted to a fixed set of values and get a validated
storage field, coercing accessors, per-value predicates, mutators and query
scopes, and a constant listing the values.
"""

from __future__ import annotations

from ._version import get_version
from .builder import EnumBuilder, declarations_for, enum
from .coercion import coerce_scalar, coerce_set
from .config import Configuration, configuration, configure, reset_configuration
from .declaration import EnumDeclaration, EnumOptions
from .document import Document, FieldDef, FieldKind, default_store
from .errors import (
    ConfigurationError,
    ConfigurationErrorKind,
    DocumentInvalid,
    DocumentNotFound,
    EnumAttributeError,
    UnknownAttributeError,
    ValidationError,
    ValidationErrorKind,
)
from .mixin import EnumAttribute
from .query import Criteria, Criterion, CriterionOperator
from .store import DocumentStore, MemoryStore, SQLiteStore
from .validators import InclusionValidator, MultipleValidator

__version__ = get_version()

__all__ = [
    "__version__",
    # Declaration
    "EnumAttribute",
    "EnumBuilder",
    "EnumDeclaration",
    "EnumOptions",
    "declarations_for",
    "enum",
    # Configuration
    "Configuration",
    "configuration",
    "configure",
    "reset_configuration",
    # Coercion & validation
    "coerce_scalar",
    "coerce_set",
    "InclusionValidator",
    "MultipleValidator",
    # Host records
    "Document",
    "FieldDef",
    "FieldKind",
    "Criteria",
    "Criterion",
    "CriterionOperator",
    "DocumentStore",
    "MemoryStore",
    "SQLiteStore",
    "default_store",
    # Errors
    "EnumAttributeError",
    "ConfigurationError",
    "ConfigurationErrorKind",
    "ValidationError",
    "ValidationErrorKind",
    "DocumentInvalid",
    "DocumentNotFound",
    "UnknownAttributeError",
]
