"""Shared pytest fixtures for enum-attribute tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from enum_attribute import Document, EnumAttribute, MemoryStore, reset_configuration
from enum_attribute.config import FIELD_PREFIX_ENV_VAR

STATUS_VALUES = ["awaiting_approval", "approved", "banned"]
ROLE_VALUES = ["author", "editor", "admin"]


@pytest.fixture(autouse=True)
def fresh_configuration(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Every test starts from the default configuration."""
    monkeypatch.delenv(FIELD_PREFIX_ENV_VAR, raising=False)
    reset_configuration()
    yield
    reset_configuration()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def account_class(store: MemoryStore) -> type[Document]:
    """Record type with a scalar ``status`` and a multi-valued ``roles`` enum."""

    class Account(Document, EnumAttribute):
        pass

    Account.store = store
    Account.enum("status", STATUS_VALUES)
    Account.enum("roles", ROLE_VALUES, multiple=True)
    return Account


@pytest.fixture
def account(account_class: type[Document]) -> Document:
    return account_class()
