"""Validation rules and the eager error computation for the formstate engine.

A rule is a plain function ``(value, all_field_values) -> message or None``.
Because every rule sees all current values, rules may depend on sibling
fields, so the FieldValidator always re-evaluates the whole rule table.

This module also provides a few stock rules and ``schema_rule``, which turns
a JSON Schema fragment into a rule with the jsonschema library.
"""

import re
from typing import Any, Dict, List, Mapping, Optional, Sequence

import jsonschema
from jsonschema import Draft7Validator

from formstate.types import FieldDescriptor, Rule, UploadedFile


_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def no_validation(value: Any, fields: Mapping[str, Any]) -> Optional[str]:
    """Rule that accepts every value."""
    return None


def no_transformation(value: Any) -> Any:
    """Transformation that stores the raw value unchanged."""
    return value


class FieldValidator:
    """Computes the error state of a form from its descriptor table.

    Attributes:
        descriptors: Field descriptors in declaration order

    Examples:
        >>> from formstate.types import FieldDescriptor, FieldKind
        >>> validator = FieldValidator([
        ...     FieldDescriptor("name", FieldKind.TEXT, "", rule=required()),
        ...     FieldDescriptor("nickname", FieldKind.TEXT, ""),
        ... ])
        >>> validator.validate({"name": "", "nickname": ""})
        {'name': 'This field is required', 'nickname': None}
    """

    def __init__(self, descriptors: Sequence[FieldDescriptor]) -> None:
        self.descriptors = list(descriptors)

    def validate(self, values: Mapping[str, Any]) -> Dict[str, Optional[str]]:
        """Run every rule against the given values.

        Rules receive a plain dict copy of the values so they cannot mutate
        the engine's state. Exceptions raised by a rule propagate.

        Returns:
            Mapping of field name to error message (None when valid), in
            declaration order
        """
        snapshot = dict(values)
        return {
            descriptor.name: descriptor.validate(snapshot[descriptor.name], snapshot)
            for descriptor in self.descriptors
        }


def required(message: str = "This field is required") -> Rule:
    """Reject empty text, False, an empty file and an empty file list."""
    def rule(value: Any, fields: Mapping[str, Any]) -> Optional[str]:
        if isinstance(value, str):
            return message if not value.strip() else None
        if isinstance(value, (tuple, list)):
            return message if not value else None
        if isinstance(value, UploadedFile):
            return message if not value.name else None
        # numbers are always present, booleans must be checked
        if value is False:
            return message
        return None
    return rule


def min_length(length: int, message: Optional[str] = None) -> Rule:
    def rule(value: Any, fields: Mapping[str, Any]) -> Optional[str]:
        if len(value) < length:
            return message or f"Must be at least {length} characters, got {len(value)}"
        return None
    return rule


def max_length(length: int, message: Optional[str] = None) -> Rule:
    def rule(value: Any, fields: Mapping[str, Any]) -> Optional[str]:
        if len(value) > length:
            return message or f"Must be at most {length} characters, got {len(value)}"
        return None
    return rule


def email(message: str = "Invalid email address") -> Rule:
    """Reject text that does not look like an email address.

    Empty text is accepted; combine with ``required`` to forbid it.
    """
    def rule(value: Any, fields: Mapping[str, Any]) -> Optional[str]:
        if value and not _EMAIL_RE.match(value):
            return message
        return None
    return rule


def matches(other: str, message: Optional[str] = None) -> Rule:
    """Require the value to equal the current value of another field.

    Examples:
        >>> rule = matches("password")
        >>> rule("secret", {"password": "secret"}) is None
        True
        >>> rule("secrte", {"password": "secret"})
        "Must match 'password'"
    """
    def rule(value: Any, fields: Mapping[str, Any]) -> Optional[str]:
        if value != fields[other]:
            return message or f"Must match '{other}'"
        return None
    return rule


def all_of(*rules: Rule) -> Rule:
    """Combine rules, returning the first error found."""
    def rule(value: Any, fields: Mapping[str, Any]) -> Optional[str]:
        for inner in rules:
            error = inner(value, fields)
            if error:
                return error
        return None
    return rule


def schema_rule(schema: Dict[str, Any]) -> Rule:
    """Build a rule from a JSON Schema fragment describing a single value.

    The first violation reported by the validator becomes the error message.

    Raises:
        jsonschema.SchemaError: If the fragment itself is not a valid schema

    Examples:
        >>> rule = schema_rule({"type": "integer", "minimum": 18})
        >>> rule(30, {}) is None
        True
        >>> rule(12, {})
        'Must be at least 18'
    """
    Draft7Validator.check_schema(schema)
    validator = Draft7Validator(schema, format_checker=Draft7Validator.FORMAT_CHECKER)

    def rule(value: Any, fields: Mapping[str, Any]) -> Optional[str]:
        errors: List[jsonschema.ValidationError] = list(validator.iter_errors(value))
        if not errors:
            return None
        return _translate_error(errors[0])

    return rule


def _translate_error(error: jsonschema.ValidationError) -> str:
    """Translate a jsonschema ValidationError into a user-facing message.

    Error mapping:
        - 'type' errors -> expected type
        - 'format' errors -> expected format
        - 'enum' or 'const' errors -> allowed values
        - 'minLength'/'maxLength' errors -> length bounds
        - numeric bound errors -> bound value
        - 'pattern' errors -> pattern
        - anything else -> the validator's own message
    """
    if error.validator == "type":
        return f"Expected {error.validator_value}, got {type(error.instance).__name__}"

    if error.validator == "format":
        return f"Invalid format, expected {error.validator_value}"

    if error.validator == "enum":
        return f"Must be one of: {', '.join(str(v) for v in error.validator_value)}"

    if error.validator == "const":
        return f"Must be {error.validator_value}"

    if error.validator == "minLength":
        return f"Must be at least {error.validator_value} characters, got {len(error.instance)}"

    if error.validator == "maxLength":
        return f"Must be at most {error.validator_value} characters, got {len(error.instance)}"

    if error.validator == "minimum":
        return f"Must be at least {error.validator_value}"

    if error.validator == "maximum":
        return f"Must be at most {error.validator_value}"

    if error.validator == "exclusiveMinimum":
        return f"Must be greater than {error.validator_value}"

    if error.validator == "exclusiveMaximum":
        return f"Must be less than {error.validator_value}"

    if error.validator == "pattern":
        return f"Does not match pattern: {error.validator_value}"

    return error.message


__all__ = [
    "FieldValidator",
    "no_validation",
    "no_transformation",
    "required",
    "min_length",
    "max_length",
    "email",
    "matches",
    "all_of",
    "schema_rule",
]
