"""Unit tests for the submission state machine.

Tests cover:
- Initialization
- Valid transitions Idle -> Validating -> {Accepted, Rejected}
- Invalid transitions and terminal states
"""

import pytest

from formstate.errors import FormStateError
from formstate.state_machine import (
    InvalidStateTransitionError,
    SubmissionStateMachine,
    VALID_TRANSITIONS,
)
from formstate.types import SubmissionState


class TestStateMachineInitialization:
    """Test state machine initialization and defaults."""

    def test_defaults_to_idle(self):
        """Should start in IDLE state."""
        assert SubmissionStateMachine().state == SubmissionState.IDLE

    def test_init_with_custom_state(self):
        """Should initialize with custom state if provided."""
        sm = SubmissionStateMachine(state=SubmissionState.VALIDATING)
        assert sm.state == SubmissionState.VALIDATING


class TestValidTransitions:
    """Test the transitions a submission attempt goes through."""

    def test_idle_to_validating(self):
        sm = SubmissionStateMachine()
        sm.transition_to(SubmissionState.VALIDATING)
        assert sm.state == SubmissionState.VALIDATING

    def test_validating_to_accepted(self):
        sm = SubmissionStateMachine(state=SubmissionState.VALIDATING)
        sm.transition_to(SubmissionState.ACCEPTED)
        assert sm.state == SubmissionState.ACCEPTED

    def test_validating_to_rejected(self):
        sm = SubmissionStateMachine(state=SubmissionState.VALIDATING)
        sm.transition_to(SubmissionState.REJECTED)
        assert sm.state == SubmissionState.REJECTED

    def test_every_state_has_transition_entry(self):
        """Should define transitions for every SubmissionState."""
        assert set(VALID_TRANSITIONS) == set(SubmissionState)


class TestInvalidTransitions:
    """Test that illegal transitions raise."""

    def test_idle_cannot_skip_validation(self):
        """Should not accept a submission that was never validated."""
        sm = SubmissionStateMachine()
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            sm.transition_to(SubmissionState.ACCEPTED)

        assert exc_info.value.current_state == SubmissionState.IDLE
        assert exc_info.value.target_state == SubmissionState.ACCEPTED
        assert "validating" in str(exc_info.value)
        assert sm.state == SubmissionState.IDLE

    @pytest.mark.parametrize("terminal", [SubmissionState.ACCEPTED, SubmissionState.REJECTED])
    def test_terminal_states_allow_nothing(self, terminal):
        sm = SubmissionStateMachine(state=terminal)
        assert not any(sm.can_transition_to(s) for s in SubmissionState)
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            sm.transition_to(SubmissionState.VALIDATING)
        assert "terminal state" in str(exc_info.value)

    def test_error_is_form_state_error(self):
        """Should be catchable as the package's base programming error."""
        sm = SubmissionStateMachine(state=SubmissionState.REJECTED)
        with pytest.raises(FormStateError):
            sm.transition_to(SubmissionState.ACCEPTED)

    def test_error_to_dict(self):
        error = InvalidStateTransitionError(
            SubmissionState.IDLE, SubmissionState.REJECTED, "nope"
        )
        assert error.to_dict() == {
            "type": "InvalidStateTransitionError",
            "message": "nope",
            "from": "idle",
            "to": "rejected",
        }


class TestCanTransitionTo:
    """Test the can_transition_to helper."""

    def test_from_idle(self):
        sm = SubmissionStateMachine()
        assert sm.can_transition_to(SubmissionState.VALIDATING) is True
        assert sm.can_transition_to(SubmissionState.ACCEPTED) is False
        assert sm.can_transition_to(SubmissionState.REJECTED) is False
        assert sm.can_transition_to(SubmissionState.IDLE) is False
