"""
Enum declaration engine.

``EnumBuilder.declare`` turns one ``enum(name, values, **options)`` call into
the full behavioural surface on a record type:

- a storage field (``_status``) with its default
- an inclusion or membership validator on that field
- a constant listing the values (``STATUS``)
- a ``status`` property that coerces on write
- ``is_<value>()`` predicates and ``mark_<value>()`` mutators
- a ``<value>()`` query scope per value

Every check runs before the record type is touched, so a rejected
declaration leaves the class as it was.
"""

from __future__ import annotations

import keyword
import logging
from collections.abc import Iterable
from enum import Enum
from typing import Any, Protocol

from pydantic import ValidationError as PydanticValidationError

from .coercion import coerce_scalar, coerce_set
from .config import Configuration, configuration
from .declaration import EnumDeclaration, EnumOptions
from .document import FieldKind
from .errors import ConfigurationError, ConfigurationErrorKind
from .query import Criteria, Criterion, CriterionOperator
from .validators import EnumValidator, InclusionValidator, MultipleValidator

logger = logging.getLogger(__name__)

DECLARATIONS_ATTR = "__enum_declarations__"


class RecordSchema(Protocol):
    """Class-level surface a record type must offer to receive enums."""

    fields: dict[str, Any]

    @classmethod
    def register_field(cls, name: str, kind: FieldKind, default: Any = None) -> Any: ...

    @classmethod
    def register_validator(cls, field_name: str, validator: Any) -> None: ...

    @classmethod
    def define_scope(cls, name: str, criterion: Criterion) -> None: ...


_REQUIRED_HOOKS = ("fields", "register_field", "register_validator", "define_scope")


def declarations_for(record_type: type) -> dict[str, EnumDeclaration]:
    """Return the enums declared on ``record_type`` (and its bases), in order."""
    return dict(getattr(record_type, DECLARATIONS_ATTR, {}))


class EnumBuilder:
    """
    Declares enums on record types.

    Args:
        config: Explicit configuration. When omitted, the process-wide
            configuration is read at each ``declare`` call.
    """

    def __init__(self, config: Configuration | None = None):
        self.config = config

    def declare(
        self,
        record_type: type,
        name: str,
        values: Iterable[Any] | type[Enum],
        **options: Any,
    ) -> EnumDeclaration:
        """
        Declare an enum on ``record_type``.

        Args:
            record_type: Host record class
            name: Public attribute name (e.g. ``"status"``)
            values: Legal values, or an ``Enum`` subclass
            **options: ``multiple``, ``required``, ``default``

        Returns:
            The resulting declaration

        Raises:
            ConfigurationError: If the declaration is invalid or collides
        """
        missing = [hook for hook in _REQUIRED_HOOKS if not hasattr(record_type, hook)]
        if missing:
            raise ConfigurationError(
                f"record type lacks {', '.join(missing)}",
                ConfigurationErrorKind.UNSUPPORTED_RECORD_TYPE,
                record_type=record_type,
                name=name,
            )

        declaration = self._build_declaration(record_type, name, values, options)
        self._check_collisions(record_type, declaration)
        self._install(record_type, declaration)

        logger.debug(
            "Declared enum %s.%s (field=%s, values=%s, multiple=%s)",
            record_type.__name__,
            declaration.name,
            declaration.storage_field_name,
            list(declaration.values),
            declaration.multiple,
        )
        return declaration

    # =========================================================================
    # Checks
    # =========================================================================

    def _build_declaration(
        self,
        record_type: type,
        name: str,
        values: Iterable[Any] | type[Enum],
        options: dict[str, Any],
    ) -> EnumDeclaration:
        def fail(message: str, kind: ConfigurationErrorKind) -> ConfigurationError:
            return ConfigurationError(message, kind, record_type=record_type, name=name)

        if not isinstance(name, str) or not name.isidentifier() or keyword.iskeyword(name):
            raise fail(
                f"enum name {name!r} is not a valid identifier",
                ConfigurationErrorKind.INVALID_VALUE,
            )

        normalized = self._normalize_values(values, fail)

        try:
            opts = EnumOptions(**options)
        except PydanticValidationError as e:
            raise fail(f"invalid options: {e}", ConfigurationErrorKind.INVALID_OPTION) from e

        if opts.multiple:
            if opts.required:
                logger.warning(
                    "Ignoring required=True for multi-valued enum %s.%s",
                    record_type.__name__,
                    name,
                )
            required = False
            default: Any = tuple(coerce_set(opts.default)) if opts.has_default else ()
            invalid = [v for v in default if v not in normalized]
        else:
            required = True if opts.required is None else opts.required
            default = coerce_scalar(opts.default) if opts.has_default else normalized[0]
            invalid = [] if default is None or default in normalized else [default]
        if invalid:
            raise fail(
                f"default {invalid!r} is not among {list(normalized)!r}",
                ConfigurationErrorKind.INVALID_DEFAULT,
            )

        prefix = (self.config or configuration()).field_name_prefix
        return EnumDeclaration(
            name=name,
            storage_field_name=f"{prefix}{name}",
            values=normalized,
            multiple=opts.multiple,
            required=required,
            default=default,
        )

    @staticmethod
    def _normalize_values(values: Iterable[Any] | type[Enum], fail: Any) -> tuple[str, ...]:
        if isinstance(values, type) and issubclass(values, Enum):
            raw = [member.value for member in values]
        elif isinstance(values, (str, bytes)):
            raw = [values]
        else:
            raw = list(values)

        if not raw:
            raise fail("at least one value is required", ConfigurationErrorKind.EMPTY_VALUE_SET)

        normalized: list[str] = []
        for value in raw:
            value = coerce_scalar(value)
            if not isinstance(value, str) or not value.isidentifier() or keyword.iskeyword(value):
                raise fail(
                    f"value {value!r} is not a valid identifier",
                    ConfigurationErrorKind.INVALID_VALUE,
                )
            if value in normalized:
                raise fail(
                    f"value {value!r} is listed twice", ConfigurationErrorKind.DUPLICATE_VALUE
                )
            normalized.append(value)
        return tuple(normalized)

    @staticmethod
    def _check_collisions(record_type: type, declaration: EnumDeclaration) -> None:
        def fail(message: str, kind: ConfigurationErrorKind) -> ConfigurationError:
            return ConfigurationError(message, kind, record_type=record_type, name=declaration.name)

        if declaration.storage_field_name in record_type.fields:
            raise fail(
                f"field {declaration.storage_field_name!r} is already defined",
                ConfigurationErrorKind.DUPLICATE_FIELD,
            )

        # Instance-only attributes are invisible to hasattr on the class
        reserved = getattr(record_type, "reserved_attributes", frozenset())
        seen: set[str] = set()
        for attr in declaration.generated_names():
            if attr in seen:
                raise fail(
                    f"generated name {attr!r} is produced twice",
                    ConfigurationErrorKind.RESERVED_METHOD_COLLISION,
                )
            seen.add(attr)
            if attr in reserved or hasattr(record_type, attr):
                raise fail(
                    f"{attr!r} is already defined on {record_type.__name__}",
                    ConfigurationErrorKind.RESERVED_METHOD_COLLISION,
                )

        # Scopes chain through Criteria, so they must not shadow its members
        for value in declaration.values:
            scope = declaration.scope_name(value)
            if hasattr(Criteria, scope):
                raise fail(
                    f"scope {scope!r} would shadow Criteria.{scope}",
                    ConfigurationErrorKind.RESERVED_METHOD_COLLISION,
                )

    # =========================================================================
    # Installation
    # =========================================================================

    def _install(self, record_type: type[RecordSchema], declaration: EnumDeclaration) -> None:
        field_name = declaration.storage_field_name
        kind = FieldKind.ARRAY if declaration.multiple else FieldKind.SYMBOL
        validator: EnumValidator = (
            MultipleValidator(declaration)
            if declaration.multiple
            else InclusionValidator(declaration)
        )

        record_type.register_field(field_name, kind, declaration.initial_value())
        setattr(record_type, declaration.constant_name, list(declaration.values))
        record_type.register_validator(field_name, validator)
        setattr(record_type, declaration.name, _accessor(declaration))

        operator = CriterionOperator.CONTAINS if declaration.multiple else CriterionOperator.EQ
        for value in declaration.values:
            setattr(record_type, declaration.predicate_name(value), _predicate(declaration, value))
            setattr(record_type, declaration.mutator_name(value), _mutator(declaration, value))
            record_type.define_scope(
                declaration.scope_name(value), Criterion(field_name, operator, value)
            )

        registry = declarations_for(record_type)
        registry[declaration.name] = declaration
        setattr(record_type, DECLARATIONS_ATTR, registry)


def _accessor(declaration: EnumDeclaration) -> property:
    field_name = declaration.storage_field_name
    coerce = coerce_set if declaration.multiple else coerce_scalar

    def getter(self: Any) -> Any:
        return coerce(self.read_attribute(field_name))

    def setter(self: Any, value: Any) -> None:
        self.write_attribute(field_name, coerce(value))

    return property(getter, setter, doc=f"Enum {declaration.name!r} stored in {field_name!r}.")


def _predicate(declaration: EnumDeclaration, value: str) -> Any:
    field_name = declaration.storage_field_name

    if declaration.multiple:

        def predicate(self: Any) -> bool:
            return value in coerce_set(self.read_attribute(field_name))

    else:

        def predicate(self: Any) -> bool:
            return self.read_attribute(field_name) == value

    predicate.__name__ = declaration.predicate_name(value)
    return predicate


def _mutator(declaration: EnumDeclaration, value: str) -> Any:
    field_name = declaration.storage_field_name

    if declaration.multiple:

        def mutator(self: Any) -> None:
            current = coerce_set(self.read_attribute(field_name))
            if value not in current:
                current.append(value)
            self.update_attribute(field_name, current)

    else:

        def mutator(self: Any) -> None:
            self.update_attribute(field_name, value)

    mutator.__name__ = declaration.mutator_name(value)
    return mutator


_default_builder = EnumBuilder()


def enum(
    record_type: type, name: str, values: Iterable[Any] | type[Enum], **options: Any
) -> EnumDeclaration:
    """Declare an enum on ``record_type`` using the process-wide configuration."""
    return _default_builder.declare(record_type, name, values, **options)
