"""formstate: a UI-framework-agnostic form state engine.

formstate keeps the state of a form between a view layer and the user:
- Current field values, with per-field transformations applied on input
- Touched flags and the derived dirty/pristine status
- Validation errors, recomputed for every field on every change
- Submission gating, with focus routed to the first invalid field

The view-binding layer calls the engine's mutation entry points on user
interaction and renders from its read-only state.

Basic usage:
    >>> from formstate import FormEngine
    >>> from formstate.validation import email
    >>> form = FormEngine(
    ...     fields={"email": "bad", "password": "secret"},
    ...     validations={"email": email()},
    ... )
    >>> form.submit(lambda fields: None)
    <SubmissionState.REJECTED: 'rejected'>
    >>> form.errors["email"]
    'Invalid email address'
"""

__version__ = "0.1.0"
__author__ = "formstate contributors"

# Version info
VERSION = (0, 1, 0)

# Core exports
from formstate.engine import FormEngine, FormOptions
from formstate.errors import FieldKindError, FormStateError, UnknownFieldError
from formstate.focus import ReferenceFocusRouter
from formstate.state import FormState
from formstate.types import EventType, FieldKind, SubmissionState, UploadedFile
from formstate.validation import no_transformation, no_validation

# Package metadata
__all__ = [
    "__version__",
    "VERSION",
    "FormEngine",
    "FormOptions",
    "FormState",
    "FormStateError",
    "UnknownFieldError",
    "FieldKindError",
    "ReferenceFocusRouter",
    "EventType",
    "FieldKind",
    "SubmissionState",
    "UploadedFile",
    "no_validation",
    "no_transformation",
]
