"""Core type definitions for the formstate engine.

This module defines the fundamental types used throughout the engine:
- FieldKind: The closed set of value kinds a field can hold
- UploadedFile: Value type for file and file-list fields
- SubmissionState: States of a single submission attempt
- EventType: Event types emitted when the form state changes
- FieldDescriptor: Per-field table entry built once at construction

These types form the contract between the view-binding layer and the engine.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from formstate.errors import FieldKindError


Rule = Callable[[Any, Dict[str, Any]], Optional[str]]
"""Validation rule: ``(value, all_field_values) -> error message or None``."""

Transformation = Callable[[Any], Any]
"""Transformation: ``(raw_value) -> stored_value``."""


@dataclass(frozen=True)
class UploadedFile:
    """A file selected through a file input.

    Attributes:
        name: Original file name as reported by the client
        content: Raw file bytes
        content_type: MIME type, if known

    Examples:
        >>> f = UploadedFile(name="w9.pdf", content=b"%PDF", content_type="application/pdf")
        >>> f.size
        4
        >>> UploadedFile.empty().name
        ''
    """
    name: str
    content: bytes = b""
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)

    @classmethod
    def empty(cls) -> "UploadedFile":
        """The placeholder stored when a single-file input is cleared."""
        return cls(name="")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization (content omitted)."""
        result: Dict[str, Any] = {"name": self.name, "size": self.size}
        if self.content_type is not None:
            result["contentType"] = self.content_type
        return result


class FieldKind(str, Enum):
    """Value kinds a field can hold.

    The kind of each field is inferred from its initial value and fixed for
    the lifetime of the engine.
    """
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    FILE = "file"
    FILE_LIST = "file_list"

    @classmethod
    def of(cls, value: Any) -> "FieldKind":
        """Infer the kind of a value.

        Raises:
            FieldKindError: If the value is not of a supported kind

        Examples:
            >>> FieldKind.of("x")
            <FieldKind.TEXT: 'text'>
            >>> FieldKind.of(True)
            <FieldKind.BOOLEAN: 'boolean'>
            >>> FieldKind.of(3.5)
            <FieldKind.NUMBER: 'number'>
        """
        # bool is a subclass of int, check it first
        if isinstance(value, bool):
            return cls.BOOLEAN
        if isinstance(value, (int, float)):
            return cls.NUMBER
        if isinstance(value, str):
            return cls.TEXT
        if isinstance(value, UploadedFile):
            return cls.FILE
        if isinstance(value, (tuple, list)) and all(isinstance(v, UploadedFile) for v in value):
            return cls.FILE_LIST
        raise FieldKindError(
            field=None,
            expected=None,
            received=type(value).__name__,
            message=f"Unsupported field value of type {type(value).__name__}",
        )

    def accepts(self, value: Any) -> bool:
        """Check whether a value belongs to this kind."""
        try:
            return FieldKind.of(value) is self
        except FieldKindError:
            return False


class SubmissionState(str, Enum):
    """States of a single submission attempt.

    Terminal states: accepted, rejected.
    """
    IDLE = "idle"
    VALIDATING = "validating"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class EventType(str, Enum):
    """Event types emitted by the engine after each state change."""
    FIELD_SET = "field.set"
    FIELD_CHANGED = "field.changed"
    FORM_RESET = "form.reset"
    SUBMISSION_ACCEPTED = "submission.accepted"
    SUBMISSION_REJECTED = "submission.rejected"
    FOCUS_REQUESTED = "focus.requested"


@dataclass(frozen=True)
class FieldDescriptor:
    """Static description of one field.

    Attributes:
        name: Field name, unique within the form
        kind: Value kind inferred from the initial value
        initial: Initial value, restored by reset
        rule: Optional validation rule, None means always valid
        transformation: Optional transformation, None means identity
    """
    name: str
    kind: FieldKind
    initial: Any
    rule: Optional[Rule] = None
    transformation: Optional[Transformation] = None

    def transform(self, raw_value: Any) -> Any:
        if self.transformation is None:
            return raw_value
        return self.transformation(raw_value)

    def validate(self, value: Any, fields: Dict[str, Any]) -> Optional[str]:
        """Run the rule, normalizing an empty message to None."""
        if self.rule is None:
            return None
        return self.rule(value, fields) or None


__all__ = [
    "Rule",
    "Transformation",
    "UploadedFile",
    "FieldKind",
    "SubmissionState",
    "EventType",
    "FieldDescriptor",
]
