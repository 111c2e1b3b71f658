"""Immutable form state snapshots.

Every mutation of a FormEngine produces a new FormState rather than changing
the previous one in place, so a view-binding layer can detect changes by
identity. Values, touched flags and errors always share the key set fixed
at construction.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple


def _freeze(mapping: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class FormState:
    """A read-only snapshot of values, touched flags and validation errors.

    Attributes:
        order: Field names in declaration order
        values: Current value per field
        touched: Whether each field has received a UI-originated change
        errors: Error message per field, None when the field is valid

    Examples:
        >>> state = FormState.build(
        ...     order=("email", "password"),
        ...     values={"email": "", "password": ""},
        ...     touched={"email": True, "password": False},
        ...     errors={"email": "Required", "password": None},
        ... )
        >>> state.dirty, state.disabled
        (True, True)
        >>> state.first_invalid_field()
        'email'
    """
    order: Tuple[str, ...]
    values: Mapping[str, Any]
    touched: Mapping[str, bool]
    errors: Mapping[str, Optional[str]]

    @classmethod
    def build(
        cls,
        order: Tuple[str, ...],
        values: Mapping[str, Any],
        touched: Mapping[str, bool],
        errors: Mapping[str, Optional[str]],
    ) -> "FormState":
        """Create a snapshot, copying every mapping in field order."""
        return cls(
            order=tuple(order),
            values=_freeze({name: values[name] for name in order}),
            touched=_freeze({name: touched[name] for name in order}),
            errors=_freeze({name: errors[name] for name in order}),
        )

    def evolve(
        self,
        values: Optional[Mapping[str, Any]] = None,
        touched: Optional[Mapping[str, bool]] = None,
        errors: Optional[Mapping[str, Optional[str]]] = None,
    ) -> "FormState":
        """Return a new snapshot with the given mappings replaced."""
        return FormState.build(
            order=self.order,
            values=self.values if values is None else values,
            touched=self.touched if touched is None else touched,
            errors=self.errors if errors is None else errors,
        )

    @property
    def dirty(self) -> bool:
        return any(self.touched.values())

    @property
    def pristine(self) -> bool:
        return not self.dirty

    @property
    def disabled(self) -> bool:
        """True when at least one field currently has an error."""
        return any(self.errors.values())

    def has_error_for(self, name: str) -> bool:
        return bool(self.errors[name])

    def errors_for(self, name: str) -> Optional[str]:
        return self.errors[name]

    def first_invalid_field(self) -> Optional[str]:
        """Return the first field in declaration order that has an error."""
        for name in self.order:
            if self.errors[name]:
                return name
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for rendering or debugging."""
        return {
            "fields": dict(self.values),
            "touched": dict(self.touched),
            "errors": dict(self.errors),
            "dirty": self.dirty,
            "disabled": self.disabled,
        }


__all__ = [
    "FormState",
]
