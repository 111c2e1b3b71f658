"""Submission state machine for the formstate engine.

A submission attempt moves through Idle -> Validating -> {Accepted, Rejected}.
Each call to ``FormEngine.submit`` drives its own machine from start to end
synchronously; nothing persists between attempts except the final outcome.

Usage:
    >>> from formstate.state_machine import SubmissionStateMachine
    >>> from formstate.types import SubmissionState
    >>> sm = SubmissionStateMachine()
    >>> sm.state
    <SubmissionState.IDLE: 'idle'>
    >>> sm.transition_to(SubmissionState.VALIDATING)
    >>> sm.transition_to(SubmissionState.ACCEPTED)
    >>> sm.can_transition_to(SubmissionState.VALIDATING)
    False
"""

from dataclasses import dataclass
from typing import Any, Dict, Set

from formstate.errors import FormStateError
from formstate.types import SubmissionState


class InvalidStateTransitionError(FormStateError):
    """Raised when attempting an invalid submission state transition.

    Attributes:
        current_state: The current state before the attempted transition
        target_state: The target state that was attempted
    """

    def __init__(self, current_state: SubmissionState, target_state: SubmissionState, message: str):
        self.current_state = current_state
        self.target_state = target_state
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["from"] = self.current_state.value
        result["to"] = self.target_state.value
        return result


# Maps each state to the set of states it can transition to
VALID_TRANSITIONS: Dict[SubmissionState, Set[SubmissionState]] = {
    SubmissionState.IDLE: {
        SubmissionState.VALIDATING,
    },
    SubmissionState.VALIDATING: {
        SubmissionState.ACCEPTED,
        SubmissionState.REJECTED,
    },
    # Terminal states - no transitions allowed
    SubmissionState.ACCEPTED: set(),
    SubmissionState.REJECTED: set(),
}


@dataclass
class SubmissionStateMachine:
    """State machine for a single submission attempt.

    Attributes:
        state: Current state of the attempt

    Examples:
        >>> sm = SubmissionStateMachine()
        >>> sm.can_transition_to(SubmissionState.ACCEPTED)
        False
        >>> sm.can_transition_to(SubmissionState.VALIDATING)
        True
    """

    state: SubmissionState = SubmissionState.IDLE

    def can_transition_to(self, target_state: SubmissionState) -> bool:
        """Check if transition to target state is valid."""
        return target_state in VALID_TRANSITIONS.get(self.state, set())

    def transition_to(self, target_state: SubmissionState) -> None:
        """Transition to a new state.

        Raises:
            InvalidStateTransitionError: If the transition is not allowed
        """
        if not self.can_transition_to(target_state):
            raise InvalidStateTransitionError(
                current_state=self.state,
                target_state=target_state,
                message=(
                    f"Invalid state transition: cannot transition from "
                    f"'{self.state.value}' to '{target_state.value}'. "
                    f"Valid transitions from '{self.state.value}' are: "
                    f"{', '.join(sorted(s.value for s in VALID_TRANSITIONS[self.state]))}"
                    if VALID_TRANSITIONS[self.state]
                    else f"Invalid state transition: '{self.state.value}' is a terminal state, "
                    f"no transitions are allowed."
                ),
            )
        self.state = target_state


__all__ = [
    "SubmissionStateMachine",
    "InvalidStateTransitionError",
    "VALID_TRANSITIONS",
]
