"""Focus routing between the engine and the view layer.

The engine only knows field names. Moving focus to an actual control is the
job of a FocusRouter supplied by the view-binding layer.
"""

import logging
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Tuple

from typing_extensions import Protocol, runtime_checkable

from formstate.errors import UnknownFieldError

logger = logging.getLogger(__name__)


@runtime_checkable
class FocusRouter(Protocol):
    """Moves UI focus to the control bound to a field name."""

    def __call__(self, name: str) -> None:
        ...


@runtime_checkable
class Focusable(Protocol):
    """Any control exposing a ``focus()`` method."""

    def focus(self) -> None:
        ...


class ReferenceFocusRouter:
    """Routes focus through a mapping of field name to control.

    A control may be None, or absent from the mapping, while it is not
    mounted; focusing it is then a no-op. When ``fields`` is given, every
    reference key must be one of them and only those names may be focused;
    otherwise the reference keys are the known names.

    Examples:
        >>> class Input:
        ...     def focus(self):
        ...         print("focused")
        >>> router = ReferenceFocusRouter({"email": Input(), "password": None})
        >>> router("email")
        focused
        >>> router("password")
    """

    def __init__(
        self,
        references: Mapping[str, Optional[Focusable]],
        fields: Optional[Sequence[str]] = None,
    ):
        self.fields: Tuple[str, ...] = tuple(references if fields is None else fields)
        for name in references:
            if name not in self.fields:
                raise UnknownFieldError(name, self.fields)
        self._references = dict(references)

    @property
    def references(self) -> Mapping[str, Optional[Focusable]]:
        return MappingProxyType(self._references)

    def __call__(self, name: str) -> None:
        if name not in self.fields:
            raise UnknownFieldError(name, self.fields)
        control = self._references.get(name)
        if control is None:
            logger.debug("No control mounted for field %r, focus skipped", name)
            return
        control.focus()


__all__ = [
    "FocusRouter",
    "Focusable",
    "ReferenceFocusRouter",
]
