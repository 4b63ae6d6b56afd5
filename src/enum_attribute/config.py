"""
Process-wide configuration for enum declarations.

The only tunable is the prefix used to build the hidden storage field name
(``"_"`` by default, so ``status`` is stored as ``_status``).

Usage:
    from enum_attribute.config import configure

    configure(lambda config: setattr(config, "field_name_prefix", "enum_"))

The prefix is read when an enum is declared. Changing it later affects enums
declared afterwards, never the storage field names already fixed into
existing declarations. Configuration is meant to be set once during startup;
no locking is done.

The ``ENUM_ATTRIBUTE_FIELD_PREFIX`` environment variable seeds the default
instance when it is first created.
"""

from __future__ import annotations

import os
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict, Field

# Environment variable consulted when the default configuration is created
FIELD_PREFIX_ENV_VAR = "ENUM_ATTRIBUTE_FIELD_PREFIX"

DEFAULT_FIELD_NAME_PREFIX = "_"


class Configuration(BaseModel):
    """
    Settings read by the declaration engine.

    Attributes:
        field_name_prefix: Prepended to the enum name to form the storage field
    """

    field_name_prefix: str = Field(
        default=DEFAULT_FIELD_NAME_PREFIX,
        pattern=r"^[A-Za-z_][A-Za-z0-9_]*$",
    )

    model_config = ConfigDict(validate_assignment=True)

    @classmethod
    def from_env(cls) -> Configuration:
        """Build a configuration, honouring ``ENUM_ATTRIBUTE_FIELD_PREFIX``."""
        prefix = os.environ.get(FIELD_PREFIX_ENV_VAR, "").strip()
        if prefix:
            return cls(field_name_prefix=prefix)
        return cls()


_configuration: Configuration | None = None


def configuration() -> Configuration:
    """Return the process-wide configuration, creating it on first use."""
    global _configuration
    if _configuration is None:
        _configuration = Configuration.from_env()
    return _configuration


def configure(callback: Callable[[Configuration], object]) -> None:
    """Invoke ``callback`` with the process-wide configuration for in-place edits."""
    callback(configuration())


def reset_configuration() -> None:
    """Forget the process-wide configuration; the next access recreates it."""
    global _configuration
    _configuration = None
