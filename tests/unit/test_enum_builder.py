"""Tests for enum declarations on record types."""

import logging
import sys
from enum import StrEnum

import pytest

from enum_attribute import (
    ConfigurationError,
    ConfigurationErrorKind,
    Document,
    EnumAttribute,
    EnumDeclaration,
    FieldKind,
    declarations_for,
    enum,
)

STATUS_VALUES = ["awaiting_approval", "approved", "banned"]
ROLE_VALUES = ["author", "editor", "admin"]


class Colour(StrEnum):
    RED = "red"
    GREEN = "green"


@pytest.fixture
def bare_class() -> type[Document]:
    class Item(Document, EnumAttribute):
        pass

    return Item


class TestStorageField:
    """The storage field registered for each enum."""

    def test_scalar_field_is_registered(self, account_class: type[Document]) -> None:
        field = account_class.fields["_status"]
        assert field.kind == FieldKind.SYMBOL
        assert field.default == "awaiting_approval"

    def test_multiple_field_is_registered(self, account_class: type[Document]) -> None:
        field = account_class.fields["_roles"]
        assert field.kind == FieldKind.ARRAY
        assert field.default == []

    def test_public_name_is_not_a_field(self, account_class: type[Document]) -> None:
        assert "status" not in account_class.fields


class TestConstant:
    def test_constants_list_values(self, account_class: type[Document]) -> None:
        assert account_class.STATUS == STATUS_VALUES
        assert account_class.ROLES == ROLE_VALUES


class TestScalarAccessors:
    """Accessors, predicates and mutators of a scalar enum."""

    def test_responds_to_accessors(self, account: Document) -> None:
        assert hasattr(account, "status")
        assert isinstance(type(account).status, property)

    def test_default_is_first_value(self, account: Document) -> None:
        assert account.status == "awaiting_approval"

    def test_accepts_strings(self, account: Document) -> None:
        account.status = "banned"
        assert account.status == "banned"

    def test_accepts_constructor_keyword(self, account_class: type[Document]) -> None:
        assert account_class(status="approved").status == "approved"

    def test_mutator_sets_value(self, account: Document) -> None:
        account.mark_banned()
        assert account.status == "banned"
        assert account.is_banned()
        assert not account.is_approved()
        assert not account.is_awaiting_approval()

    @pytest.mark.parametrize("value", STATUS_VALUES)
    def test_mutator_makes_only_its_predicate_true(self, account: Document, value: str) -> None:
        getattr(account, f"mark_{value}")()
        for other in STATUS_VALUES:
            assert getattr(account, f"is_{other}")() is (other == value)

    def test_stores_canonical_value(self, account: Document) -> None:
        account.status = "".join(["appro", "ved"])
        assert account.read_attribute("_status") is sys.intern("approved")

    def test_invalid_value_is_stored_not_raised(self, account: Document) -> None:
        account.status = "deleted"
        assert account.status == "deleted"
        assert not account.is_approved()


class TestMultipleAccessors:
    """Accessors, predicates and mutators of a multi-valued enum."""

    def test_default_is_empty(self, account: Document) -> None:
        assert account.roles == []

    def test_defaults_are_not_shared(self, account_class: type[Document]) -> None:
        first, second = account_class(), account_class()
        first.mark_author()
        assert second.roles == []

    def test_accepts_string(self, account: Document) -> None:
        account.roles = "author"
        assert account.roles == ["author"]

    def test_accepts_list_of_strings(self, account: Document) -> None:
        account.roles = ["author", "editor"]
        assert account.roles == ["author", "editor"]

    def test_deduplicates(self, account: Document) -> None:
        account.roles = ["editor", "author", "editor"]
        assert account.roles == ["editor", "author"]

    def test_mutator_from_none(self, account: Document) -> None:
        account.roles = None
        account.mark_author()
        assert account.roles == ["author"]

    def test_mutator_appends(self, account: Document) -> None:
        account.mark_author()
        account.mark_editor()
        assert account.roles == ["author", "editor"]

    def test_mutator_is_idempotent(self, account: Document) -> None:
        account.mark_editor()
        account.mark_author()
        account.mark_editor()
        assert account.roles == ["editor", "author"]

    def test_predicates(self, account: Document) -> None:
        account.mark_author()
        account.mark_editor()
        assert account.is_author()
        assert account.is_editor()
        assert not account.is_admin()

    def test_returned_list_is_a_copy(self, account: Document) -> None:
        account.roles.append("admin")
        assert account.roles == []


class TestDefaults:
    def test_explicit_scalar_default(self, bare_class: type[Document]) -> None:
        bare_class.enum("size", ["small", "large"], default="large")
        assert bare_class().size == "large"

    def test_explicit_multiple_default(self, bare_class: type[Document]) -> None:
        bare_class.enum("tags", ["new", "hot", "sale"], multiple=True, default=["hot", "new"])
        assert bare_class().tags == ["hot", "new"]

    def test_enum_member_default(self, bare_class: type[Document]) -> None:
        bare_class.enum("colour", Colour, default=Colour.GREEN)
        assert bare_class().colour == "green"


class TestDeclaration:
    def test_returns_declaration(self, bare_class: type[Document]) -> None:
        declaration = bare_class.enum("size", ["small", "large"])
        assert declaration == EnumDeclaration(
            name="size",
            storage_field_name="_size",
            values=("small", "large"),
            multiple=False,
            required=True,
            default="small",
        )

    def test_declarations_are_recorded_in_order(self, account_class: type[Document]) -> None:
        assert list(account_class.enum_declarations()) == ["status", "roles"]
        assert declarations_for(account_class)["roles"].multiple

    def test_enum_class_as_values(self, bare_class: type[Document]) -> None:
        bare_class.enum("colour", Colour)
        assert bare_class.COLOUR == ["red", "green"]
        item = bare_class(colour=Colour.RED)
        assert item.colour == "red"
        assert item.is_red()

    def test_module_level_enum_on_plain_document(self) -> None:
        class Ticket(Document):
            pass

        enum(Ticket, "state", ["open", "closed"])
        ticket = Ticket()
        ticket.mark_closed()
        assert ticket.state == "closed"
        assert declarations_for(Ticket)["state"].storage_field_name == "_state"

    def test_multiple_ignores_required(
        self, bare_class: type[Document], caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="enum_attribute.builder"):
            declaration = bare_class.enum("tags", ["new", "hot"], multiple=True, required=True)
        assert declaration.required is False
        assert "Ignoring required=True" in caplog.text
        assert bare_class(tags=None).is_valid()

    def test_subclass_inherits_declarations(self, account_class: type[Document]) -> None:
        class Admin(account_class):
            pass

        Admin.enum("level", ["junior", "senior"])
        admin = Admin()
        assert admin.status == "awaiting_approval"
        assert admin.level == "junior"
        assert list(Admin.enum_declarations()) == ["status", "roles", "level"]
        assert "level" not in account_class.enum_declarations()
        assert "_level" not in account_class.fields


class TestDeclarationErrors:
    """Invalid declarations fail loudly and leave the class untouched."""

    def _assert_error(self, kind: ConfigurationErrorKind, call) -> ConfigurationError:
        with pytest.raises(ConfigurationError) as exc_info:
            call()
        assert exc_info.value.kind == kind
        return exc_info.value

    def test_empty_values(self, bare_class: type[Document]) -> None:
        self._assert_error(
            ConfigurationErrorKind.EMPTY_VALUE_SET, lambda: bare_class.enum("size", [])
        )

    def test_duplicate_values(self, bare_class: type[Document]) -> None:
        self._assert_error(
            ConfigurationErrorKind.DUPLICATE_VALUE,
            lambda: bare_class.enum("size", ["small", "large", "small"]),
        )

    @pytest.mark.parametrize("values", [["small", "extra large"], ["class"], [1, 2]])
    def test_invalid_values(self, bare_class: type[Document], values: list) -> None:
        self._assert_error(
            ConfigurationErrorKind.INVALID_VALUE, lambda: bare_class.enum("size", values)
        )

    def test_invalid_name(self, bare_class: type[Document]) -> None:
        self._assert_error(
            ConfigurationErrorKind.INVALID_VALUE, lambda: bare_class.enum("my size", ["small"])
        )

    def test_unknown_option(self, bare_class: type[Document]) -> None:
        self._assert_error(
            ConfigurationErrorKind.INVALID_OPTION,
            lambda: bare_class.enum("size", ["small"], multi=True),
        )

    def test_wrongly_typed_option(self, bare_class: type[Document]) -> None:
        self._assert_error(
            ConfigurationErrorKind.INVALID_OPTION,
            lambda: bare_class.enum("size", ["small"], multiple="yes"),
        )

    def test_default_outside_values(self, bare_class: type[Document]) -> None:
        self._assert_error(
            ConfigurationErrorKind.INVALID_DEFAULT,
            lambda: bare_class.enum("size", ["small", "large"], default="huge"),
        )
        self._assert_error(
            ConfigurationErrorKind.INVALID_DEFAULT,
            lambda: bare_class.enum("tags", ["new"], multiple=True, default=["new", "old"]),
        )

    def test_duplicate_field(self, account_class: type[Document]) -> None:
        error = self._assert_error(
            ConfigurationErrorKind.DUPLICATE_FIELD,
            lambda: account_class.enum("status", ["open", "closed"]),
        )
        assert "Account.status" in str(error)

    def test_value_shared_between_enums(self, account_class: type[Document]) -> None:
        self._assert_error(
            ConfigurationErrorKind.RESERVED_METHOD_COLLISION,
            lambda: account_class.enum("review", ["pending", "approved"]),
        )

    def test_value_shadowing_document_method(self, bare_class: type[Document]) -> None:
        self._assert_error(
            ConfigurationErrorKind.RESERVED_METHOD_COLLISION,
            lambda: bare_class.enum("action", ["save", "skip"]),
        )

    def test_value_named_like_enum(self, bare_class: type[Document]) -> None:
        self._assert_error(
            ConfigurationErrorKind.RESERVED_METHOD_COLLISION,
            lambda: bare_class.enum("state", ["state", "other"]),
        )

    @pytest.mark.parametrize("name", ["id", "errors", "new_record", "destroyed"])
    def test_enum_named_after_instance_attribute(
        self, bare_class: type[Document], name: str
    ) -> None:
        self._assert_error(
            ConfigurationErrorKind.RESERVED_METHOD_COLLISION,
            lambda: bare_class.enum(name, ["alpha", "beta"]),
        )
        assert name not in bare_class.enum_declarations()
        assert bare_class().errors == []

    def test_value_named_after_instance_attribute(self, bare_class: type[Document]) -> None:
        self._assert_error(
            ConfigurationErrorKind.RESERVED_METHOD_COLLISION,
            lambda: bare_class.enum("marker", ["id", "other"]),
        )

    @pytest.mark.parametrize("value", ["first", "exists", "to_list", "criteria", "document_class"])
    def test_scope_shadowing_criteria_member(self, bare_class: type[Document], value: str) -> None:
        self._assert_error(
            ConfigurationErrorKind.RESERVED_METHOD_COLLISION,
            lambda: bare_class.enum("rank", [value, "last"]),
        )
        assert not hasattr(bare_class, "last")

    def test_unsupported_record_type(self) -> None:
        class Plain:
            pass

        self._assert_error(
            ConfigurationErrorKind.UNSUPPORTED_RECORD_TYPE,
            lambda: enum(Plain, "state", ["open"]),
        )

    def test_failed_declaration_leaves_class_untouched(self, account_class: type[Document]) -> None:
        fields_before = dict(account_class.fields)
        with pytest.raises(ConfigurationError):
            account_class.enum("review", ["pending", "approved"])

        assert account_class.fields == fields_before
        assert not hasattr(account_class, "REVIEW")
        assert not hasattr(account_class, "pending")
        assert not hasattr(account_class, "is_pending")
        assert "review" not in account_class.enum_declarations()
