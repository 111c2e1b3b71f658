"""Exception types for the formstate engine.

Only contract violations are exceptions: an unknown field name or a value of
the wrong kind means the caller (or a transformation) is broken. Invalid user
input is never raised; it is carried as data in the form's error state.
"""

from typing import Any, Dict, Iterable, Optional


class FormStateError(Exception):
    """Base class for all engine programming errors."""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {"type": type(self).__name__, "message": str(self)}


class UnknownFieldError(FormStateError, KeyError):
    """Raised when an operation names a field outside the fixed field set.

    Attributes:
        field: The unknown field name
        known_fields: The field names declared at construction

    Examples:
        >>> err = UnknownFieldError("emial", ["email", "password"])
        >>> err.field
        'emial'
        >>> str(err)
        "Unknown field 'emial'. Declared fields are: email, password"
    """

    def __init__(self, field: str, known_fields: Iterable[str]):
        self.field = field
        self.known_fields = list(known_fields)
        super().__init__(
            f"Unknown field '{field}'. Declared fields are: {', '.join(self.known_fields)}"
        )

    # KeyError.__str__ would repr() the message
    def __str__(self) -> str:
        return str(self.args[0])

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["field"] = self.field
        result["knownFields"] = self.known_fields
        return result


class FieldKindError(FormStateError, TypeError):
    """Raised when a value does not match its field's declared kind.

    Attributes:
        field: The field being written, None when inferring a kind in isolation
        expected: Expected kind value (e.g. "text"), if known
        received: Type name of the rejected value
    """

    def __init__(
        self,
        field: Optional[str],
        expected: Optional[str],
        received: str,
        message: str,
    ):
        self.field = field
        self.expected = expected
        self.received = received
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        if self.field is not None:
            result["field"] = self.field
        if self.expected is not None:
            result["expected"] = self.expected
        result["received"] = self.received
        return result


__all__ = [
    "FormStateError",
    "UnknownFieldError",
    "FieldKindError",
]
