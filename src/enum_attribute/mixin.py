"""
Record integration shim.

Mixing ``EnumAttribute`` into a ``Document`` subclass gives it a class-level
``enum`` call::

    class Account(Document, EnumAttribute):
        pass

    Account.enum("status", ["awaiting_approval", "approved", "banned"])
    Account.enum("roles", ["author", "editor", "admin"], multiple=True)
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Any

from .builder import EnumBuilder, declarations_for
from .declaration import EnumDeclaration


class EnumAttribute:
    """Mixin exposing ``enum`` and ``enum_declarations`` on a record type."""

    enum_builder: EnumBuilder = EnumBuilder()

    @classmethod
    def enum(cls, name: str, values: Iterable[Any] | type[Enum], **options: Any) -> EnumDeclaration:
        """Declare an enum on this record type. See ``EnumBuilder.declare``."""
        return cls.enum_builder.declare(cls, name, values, **options)

    @classmethod
    def enum_declarations(cls) -> dict[str, EnumDeclaration]:
        return declarations_for(cls)
