"""Unit tests for core types and state snapshots.

Tests cover:
- FieldKind inference and membership
- UploadedFile helpers
- FieldDescriptor transform/validate defaults
- FormState derived flags, queries and immutability
- Error types
"""

import pytest

from formstate.errors import FieldKindError, FormStateError, UnknownFieldError
from formstate.state import FormState
from formstate.types import FieldDescriptor, FieldKind, UploadedFile


class TestFieldKind:
    """Test kind inference from values."""

    @pytest.mark.parametrize(
        "value,kind",
        [
            ("", FieldKind.TEXT),
            ("hello", FieldKind.TEXT),
            (0, FieldKind.NUMBER),
            (2.5, FieldKind.NUMBER),
            (False, FieldKind.BOOLEAN),
            (True, FieldKind.BOOLEAN),
            (UploadedFile(name="a.txt"), FieldKind.FILE),
            ((), FieldKind.FILE_LIST),
            ([UploadedFile(name="a.txt")], FieldKind.FILE_LIST),
        ],
    )
    def test_of(self, value, kind):
        assert FieldKind.of(value) is kind

    def test_bool_is_not_a_number(self):
        """Should classify booleans as BOOLEAN even though bool subclasses int."""
        assert FieldKind.NUMBER.accepts(True) is False
        assert FieldKind.BOOLEAN.accepts(True) is True

    @pytest.mark.parametrize("value", [None, {"a": 1}, object(), ["not", "files"]])
    def test_unsupported_values(self, value):
        with pytest.raises(FieldKindError) as exc_info:
            FieldKind.of(value)
        assert exc_info.value.received == type(value).__name__

    def test_accepts_rejects_unsupported(self):
        assert FieldKind.TEXT.accepts(None) is False


class TestUploadedFile:
    """Test the file value type."""

    def test_size(self):
        assert UploadedFile(name="a.bin", content=b"abc").size == 3

    def test_empty(self):
        empty = UploadedFile.empty()
        assert empty.name == ""
        assert empty.size == 0
        assert empty == UploadedFile.empty()

    def test_to_dict(self):
        f = UploadedFile(name="w9.pdf", content=b"%PDF", content_type="application/pdf")
        assert f.to_dict() == {"name": "w9.pdf", "size": 4, "contentType": "application/pdf"}
        assert "contentType" not in UploadedFile(name="x").to_dict()


class TestFieldDescriptor:
    """Test descriptor defaults."""

    def test_identity_transformation_by_default(self):
        descriptor = FieldDescriptor("name", FieldKind.TEXT, "")
        assert descriptor.transform("  Raw ") == "  Raw "

    def test_always_valid_by_default(self):
        descriptor = FieldDescriptor("name", FieldKind.TEXT, "")
        assert descriptor.validate("", {"name": ""}) is None

    def test_empty_message_means_valid(self):
        """Should treat an empty string from a rule as no error."""
        descriptor = FieldDescriptor("name", FieldKind.TEXT, "", rule=lambda v, f: "")
        assert descriptor.validate("x", {"name": "x"}) is None

    def test_rule_receives_value_and_fields(self):
        calls = []
        descriptor = FieldDescriptor(
            "name", FieldKind.TEXT, "", rule=lambda v, f: calls.append((v, f)) or "bad"
        )
        assert descriptor.validate("x", {"name": "x", "other": 1}) == "bad"
        assert calls == [("x", {"name": "x", "other": 1})]


class TestFormState:
    """Test snapshot derivations."""

    def _state(self, touched=None, errors=None):
        return FormState.build(
            order=("email", "password"),
            values={"email": "a@b.com", "password": "secret"},
            touched=touched or {"email": False, "password": False},
            errors=errors or {"email": None, "password": None},
        )

    def test_pristine_when_nothing_touched(self):
        state = self._state()
        assert state.dirty is False
        assert state.pristine is True

    def test_dirty_when_any_touched(self):
        state = self._state(touched={"email": False, "password": True})
        assert state.dirty is True
        assert state.pristine is False

    def test_disabled_iff_any_error(self):
        assert self._state().disabled is False
        state = self._state(errors={"email": None, "password": "Too short"})
        assert state.disabled is True
        assert state.has_error_for("password") is True
        assert state.has_error_for("email") is False
        assert state.errors_for("password") == "Too short"

    def test_first_invalid_field_uses_declaration_order(self):
        state = self._state(errors={"email": "Invalid", "password": "Too short"})
        assert state.first_invalid_field() == "email"
        assert self._state().first_invalid_field() is None

    def test_mappings_are_read_only(self):
        state = self._state()
        with pytest.raises(TypeError):
            state.values["email"] = "x"
        with pytest.raises(TypeError):
            state.touched["email"] = True

    def test_build_copies_inputs(self):
        values = {"email": "a@b.com", "password": "secret"}
        state = FormState.build(
            order=("email", "password"),
            values=values,
            touched={"email": False, "password": False},
            errors={"email": None, "password": None},
        )
        values["email"] = "changed"
        assert state.values["email"] == "a@b.com"

    def test_evolve_returns_new_snapshot(self):
        state = self._state()
        evolved = state.evolve(touched={"email": True, "password": False})
        assert evolved is not state
        assert evolved.touched["email"] is True
        assert state.touched["email"] is False
        assert evolved.values == state.values

    def test_to_dict(self):
        state = self._state(errors={"email": "Invalid", "password": None})
        assert state.to_dict() == {
            "fields": {"email": "a@b.com", "password": "secret"},
            "touched": {"email": False, "password": False},
            "errors": {"email": "Invalid", "password": None},
            "dirty": False,
            "disabled": True,
        }


class TestErrorTypes:
    """Test the programming-error hierarchy."""

    def test_unknown_field_error(self):
        error = UnknownFieldError("emial", ["email", "password"])
        assert isinstance(error, FormStateError)
        assert isinstance(error, KeyError)
        assert str(error) == "Unknown field 'emial'. Declared fields are: email, password"
        assert error.to_dict() == {
            "type": "UnknownFieldError",
            "message": "Unknown field 'emial'. Declared fields are: email, password",
            "field": "emial",
            "knownFields": ["email", "password"],
        }

    def test_field_kind_error(self):
        error = FieldKindError(field="age", expected="number", received="str", message="bad kind")
        assert isinstance(error, FormStateError)
        assert isinstance(error, TypeError)
        assert error.to_dict() == {
            "type": "FieldKindError",
            "message": "bad kind",
            "field": "age",
            "expected": "number",
            "received": "str",
        }
