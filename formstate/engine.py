"""FormEngine: the form state container.

This module provides the FormEngine class that coordinates the field
descriptor table, the validator, the submission state machine and the event
emitter. A view-binding layer calls its mutation entry points on user
interaction and renders from its read-only state.

Policies:
    - Errors are recomputed eagerly for every field on every mutation, since
      any rule may read sibling fields.
    - ``reset()`` restores the initial values, clears every touched flag and
      recomputes errors against the restored values.

Usage:
    >>> from formstate.engine import FormEngine
    >>> from formstate.validation import email
    >>> form = FormEngine(
    ...     fields={"email": "", "password": ""},
    ...     validations={"email": email()},
    ...     transformations={"email": lambda v: v.strip().lower()},
    ... )
    >>> form.change_field("email", "  A@B.COM ")
    >>> form.fields["email"]
    'a@b.com'
    >>> form.dirty, form.disabled
    (True, False)
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Union

from formstate.errors import FieldKindError, FormStateError, UnknownFieldError
from formstate.events import EventEmitter, EventListener, FormEvent
from formstate.focus import FocusRouter, Focusable, ReferenceFocusRouter
from formstate.state import FormState
from formstate.state_machine import SubmissionStateMachine
from formstate.types import (
    EventType,
    FieldDescriptor,
    FieldKind,
    Rule,
    SubmissionState,
    Transformation,
    UploadedFile,
)
from formstate.validation import FieldValidator

logger = logging.getLogger(__name__)


SubmitCallback = Callable[[Mapping[str, Any]], None]


@dataclass(frozen=True)
class FormOptions:
    """Construction options for a FormEngine.

    Attributes:
        fields: Initial value per field, in declaration order
        validations: Optional rule per field
        transformations: Optional transformation per field
        focus: Focus router, or a mapping of field name to focusable control
        form_id: Identifier used on emitted events, generated when omitted
    """
    fields: Mapping[str, Any]
    validations: Mapping[str, Rule] = field(default_factory=dict)
    transformations: Mapping[str, Transformation] = field(default_factory=dict)
    focus: Optional[Union[FocusRouter, Mapping[str, Optional[Focusable]]]] = None
    form_id: Optional[str] = None


class FormEngine:
    """State container for one form.

    The field set is fixed at construction: values, touched flags and errors
    always share the same keys. Unknown field names raise UnknownFieldError
    and values of the wrong kind raise FieldKindError. Invalid user input is
    never raised; it shows up in ``errors`` and ``disabled``.

    Attributes:
        form_id: Identifier used on emitted events

    Examples:
        >>> form = FormEngine(fields={"agree": False})
        >>> form.set_checked("agree", True)
        >>> form.fields["agree"], form.touched["agree"]
        (True, True)
        >>> form.reset()
        >>> form.pristine
        True
    """

    def __init__(
        self,
        fields: Mapping[str, Any],
        validations: Optional[Mapping[str, Rule]] = None,
        transformations: Optional[Mapping[str, Transformation]] = None,
        focus: Optional[Union[FocusRouter, Mapping[str, Optional[Focusable]]]] = None,
        form_id: Optional[str] = None,
    ):
        """Initialize the engine.

        Args:
            fields: Initial value per field; iteration order is the field order
            validations: Optional rule per field, missing means always valid
            transformations: Optional transformation per field, missing means identity
            focus: Focus router called with the first invalid field on a
                rejected submission, or a mapping of field name to control;
                a field missing from the mapping is treated as not mounted
            form_id: Identifier used on emitted events

        Raises:
            UnknownFieldError: If a rule, transformation or focus reference
                names an undeclared field
            FieldKindError: If an initial value is not of a supported kind
        """
        self.form_id = form_id or f"form_{uuid.uuid4().hex[:16]}"
        self._order = tuple(fields)
        validations = dict(validations or {})
        transformations = dict(transformations or {})

        for name in list(validations) + list(transformations):
            if name not in fields:
                raise UnknownFieldError(name, self._order)

        self._descriptors: Dict[str, FieldDescriptor] = {}
        for name in self._order:
            initial = fields[name]
            try:
                kind = FieldKind.of(initial)
            except FieldKindError as exc:
                raise FieldKindError(
                    field=name,
                    expected=None,
                    received=exc.received,
                    message=f"Field '{name}' has an unsupported initial value of type {exc.received}",
                ) from exc
            if kind is FieldKind.FILE_LIST:
                initial = tuple(initial)
            self._descriptors[name] = FieldDescriptor(
                name=name,
                kind=kind,
                initial=initial,
                rule=validations.get(name),
                transformation=transformations.get(name),
            )

        if isinstance(focus, Mapping):
            focus = ReferenceFocusRouter(focus, fields=self._order)
        elif isinstance(focus, ReferenceFocusRouter):
            focus = ReferenceFocusRouter(focus.references, fields=self._order)
        self._focus: Optional[FocusRouter] = focus

        self._validator = FieldValidator(list(self._descriptors.values()))
        self._emitter = EventEmitter()
        self._validating = False
        self._last_submission: Optional[SubmissionState] = None

        initial_values = self._initial_values()
        self._state = FormState.build(
            order=self._order,
            values=initial_values,
            touched={name: False for name in self._order},
            errors=self._compute_errors(initial_values),
        )

    @classmethod
    def from_options(cls, options: FormOptions) -> "FormEngine":
        """Create an engine from a FormOptions bundle."""
        return cls(
            fields=options.fields,
            validations=options.validations,
            transformations=options.transformations,
            focus=options.focus,
            form_id=options.form_id,
        )

    # Read-only state

    @property
    def state(self) -> FormState:
        """The current snapshot; replaced (never mutated) by every operation."""
        return self._state

    @property
    def fields(self) -> Mapping[str, Any]:
        return self._state.values

    @property
    def touched(self) -> Mapping[str, bool]:
        return self._state.touched

    @property
    def errors(self) -> Mapping[str, Optional[str]]:
        return self._state.errors

    @property
    def dirty(self) -> bool:
        return self._state.dirty

    @property
    def pristine(self) -> bool:
        return self._state.pristine

    @property
    def disabled(self) -> bool:
        return self._state.disabled

    @property
    def field_names(self) -> Sequence[str]:
        return self._order

    @property
    def initial(self) -> Mapping[str, Any]:
        """The values captured at construction and restored by reset."""
        return MappingProxyType(self._initial_values())

    @property
    def focus_router(self) -> Optional[FocusRouter]:
        """The router used for focus requests, None when focus is not routed.

        A mapping of controls passed at construction is exposed as a
        ReferenceFocusRouter whose ``references`` are read-only.
        """
        return self._focus

    @property
    def last_submission(self) -> Optional[SubmissionState]:
        """Outcome of the most recent submit call, None before the first one."""
        return self._last_submission

    def descriptor(self, name: str) -> FieldDescriptor:
        """Return the static descriptor of a field.

        Raises:
            UnknownFieldError: If name is not a declared field
        """
        if name not in self._descriptors:
            raise UnknownFieldError(name, self._order)
        return self._descriptors[name]

    def has_error_for(self, name: str) -> bool:
        self.descriptor(name)
        return self._state.has_error_for(name)

    def errors_for(self, name: str) -> Optional[str]:
        self.descriptor(name)
        return self._state.errors_for(name)

    # Mutations

    def set(self, name: str, value: Any) -> None:
        """Assign a value programmatically.

        The field is not marked touched and its transformation is not applied.

        Raises:
            UnknownFieldError: If name is not a declared field
            FieldKindError: If value does not match the field's kind
        """
        descriptor = self.descriptor(name)
        values = dict(self._state.values)
        values[name] = self._check_kind(descriptor, value)
        self._commit(values=values)
        logger.debug("Form %s: field %r set", self.form_id, name)
        self._emit(EventType.FIELD_SET, field=name)

    def change_field(self, name: str, raw_value: Any) -> None:
        """Apply a UI-originated change to a field.

        The field's transformation is applied to raw_value, the result is
        stored, the field is marked touched and every error is recomputed.

        Raises:
            UnknownFieldError: If name is not a declared field
            FieldKindError: If the transformed value does not match the field's kind
        """
        descriptor = self.descriptor(name)
        stored = self._check_kind(descriptor, descriptor.transform(raw_value))
        values = dict(self._state.values)
        values[name] = stored
        touched = dict(self._state.touched)
        touched[name] = True
        self._commit(values=values, touched=touched)
        logger.debug("Form %s: field %r changed", self.form_id, name)
        self._emit(EventType.FIELD_CHANGED, field=name)

    def set_text(self, name: str, text: str) -> None:
        """Change from a text input."""
        self.change_field(name, text)

    def select(self, name: str, option: str) -> None:
        """Change from a select control; the selected option value is stored as text."""
        self.change_field(name, option)

    def set_checked(self, name: str, checked: bool) -> None:
        """Change from a checkbox."""
        self.change_field(name, bool(checked))

    def set_file(self, name: str, files: Optional[Sequence[UploadedFile]]) -> None:
        """Change from a single-file input.

        The first selected file is stored; when nothing is selected the
        field receives ``UploadedFile.empty()``.
        """
        self.change_field(name, files[0] if files else UploadedFile.empty())

    def set_file_list(self, name: str, files: Optional[Sequence[UploadedFile]]) -> None:
        """Change from a multi-file input. Stored as a tuple."""
        self.change_field(name, tuple(files or ()))

    def reset(self) -> None:
        """Restore the initial values, clear touched flags and recompute errors."""
        self._commit(
            values=self._initial_values(),
            touched={name: False for name in self._order},
        )
        logger.debug("Form %s: reset", self.form_id)
        self._emit(EventType.FORM_RESET)

    def reset_field(self, name: str) -> None:
        """Restore one field's initial value and clear its touched flag."""
        descriptor = self.descriptor(name)
        values = dict(self._state.values)
        values[name] = descriptor.initial
        touched = dict(self._state.touched)
        touched[name] = False
        self._commit(values=values, touched=touched)
        logger.debug("Form %s: field %r reset", self.form_id, name)
        self._emit(EventType.FIELD_SET, field=name, payload={"reset": True})

    # Submission and focus

    def submit(self, on_valid: SubmitCallback) -> SubmissionState:
        """Attempt a submission.

        Every field is marked touched and errors are recomputed. When no field
        has an error, on_valid is called exactly once with a read-only snapshot
        of the values. Otherwise on_valid is not called and focus is routed to
        the first invalid field in declaration order. Rejection never raises.

        Returns:
            SubmissionState.ACCEPTED or SubmissionState.REJECTED
        """
        machine = SubmissionStateMachine()
        machine.transition_to(SubmissionState.VALIDATING)
        self._commit(touched={name: True for name in self._order})

        first_invalid = self._state.first_invalid_field()
        if first_invalid is None:
            machine.transition_to(SubmissionState.ACCEPTED)
            self._last_submission = machine.state
            logger.debug("Form %s: submission accepted", self.form_id)
            on_valid(self._state.values)
            self._emit(EventType.SUBMISSION_ACCEPTED)
            return machine.state

        machine.transition_to(SubmissionState.REJECTED)
        self._last_submission = machine.state
        invalid = [name for name in self._order if self._state.errors[name]]
        logger.debug(
            "Form %s: submission rejected, invalid fields: %s",
            self.form_id, ", ".join(invalid),
        )
        self._emit(
            EventType.SUBMISSION_REJECTED,
            field=first_invalid,
            payload={"invalidFields": invalid},
        )
        self.focus(first_invalid)
        return machine.state

    def focus(self, name: str) -> None:
        """Ask the focus router to focus the control bound to a field.

        Raises:
            UnknownFieldError: If name is not a declared field
        """
        self.descriptor(name)
        if self._focus is None:
            logger.debug("Form %s: no focus router, focus on %r dropped", self.form_id, name)
            return
        self._focus(name)
        self._emit(EventType.FOCUS_REQUESTED, field=name)

    # Subscriptions

    def on(self, event_type: EventType, listener: EventListener) -> None:
        self._emitter.on(event_type, listener)

    def on_any(self, listener: EventListener) -> None:
        self._emitter.on_any(listener)

    def off(self, event_type: EventType, listener: EventListener) -> None:
        self._emitter.off(event_type, listener)

    def off_any(self, listener: EventListener) -> None:
        self._emitter.off_any(listener)

    # Internals

    def _initial_values(self) -> Dict[str, Any]:
        return {name: self._descriptors[name].initial for name in self._order}

    def _check_kind(self, descriptor: FieldDescriptor, value: Any) -> Any:
        """Validate a value against the field's kind, normalizing file lists to tuples."""
        if descriptor.kind is FieldKind.FILE_LIST and isinstance(value, list):
            value = tuple(value)
        if not descriptor.kind.accepts(value):
            raise FieldKindError(
                field=descriptor.name,
                expected=descriptor.kind.value,
                received=type(value).__name__,
                message=(
                    f"Field '{descriptor.name}' expects a {descriptor.kind.value} value, "
                    f"got {type(value).__name__}"
                ),
            )
        return value

    def _compute_errors(self, values: Mapping[str, Any]) -> Dict[str, Optional[str]]:
        if self._validating:
            raise FormStateError(
                f"Form {self.form_id}: re-entrant call from inside a validation rule"
            )
        self._validating = True
        try:
            return self._validator.validate(values)
        finally:
            self._validating = False

    def _commit(
        self,
        values: Optional[Mapping[str, Any]] = None,
        touched: Optional[Mapping[str, bool]] = None,
    ) -> None:
        """Replace the snapshot, recomputing every error against the new values."""
        values = self._state.values if values is None else values
        self._state = self._state.evolve(
            values=values,
            touched=touched,
            errors=self._compute_errors(values),
        )

    def _emit(
        self,
        event_type: EventType,
        field: Optional[str] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._emitter.emit(
            FormEvent(
                event_id=f"evt_{uuid.uuid4().hex[:16]}",
                type=event_type,
                form_id=self.form_id,
                ts=datetime.now(timezone.utc),
                field=field,
                payload=payload,
            )
        )


__all__ = [
    "FormEngine",
    "FormOptions",
    "SubmitCallback",
]
