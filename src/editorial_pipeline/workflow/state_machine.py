"""Editorial workflow state machine.

States:
    proposed → drafting → in-review → editing → approved → published
                   ↑           │
                   └───────────┘  (changes requested)

Every transition is checked against TRANSITIONS before the record is
touched, then appended to the record's history with a UTC timestamp.
"""

import logging
from datetime import datetime, timezone

from editorial_pipeline.exceptions import (
    IllegalTransitionError,
    InvalidEnumError,
    StaleRevisionError,
)
from schemas.workflow import TransitionRecord, WorkflowRecord, WorkflowState

logger = logging.getLogger(__name__)

INITIAL_STATE = WorkflowState.PROPOSED

TRANSITIONS: dict[WorkflowState, frozenset[WorkflowState]] = {
    WorkflowState.PROPOSED: frozenset({WorkflowState.DRAFTING}),
    WorkflowState.DRAFTING: frozenset({WorkflowState.IN_REVIEW}),
    WorkflowState.IN_REVIEW: frozenset({WorkflowState.EDITING, WorkflowState.DRAFTING}),
    WorkflowState.EDITING: frozenset({WorkflowState.APPROVED}),
    WorkflowState.APPROVED: frozenset({WorkflowState.PUBLISHED}),
    WorkflowState.PUBLISHED: frozenset(),
}


def parse_state(value: WorkflowState | str) -> WorkflowState:
    """Convert a state name to a WorkflowState.

    Raises:
        InvalidEnumError: If the name is not a workflow state
    """
    if isinstance(value, WorkflowState):
        return value
    try:
        return WorkflowState(value.strip().lower())
    except (ValueError, AttributeError):
        raise InvalidEnumError("state", value, WorkflowState.values()) from None


def can_transition(current: WorkflowState, target: WorkflowState) -> bool:
    return target in TRANSITIONS[current]


class WorkflowStateMachine:
    """Drive a WorkflowRecord through the editorial stages.

    Example:
        machine = WorkflowStateMachine(record)
        machine.transition_to("drafting", actor="olasubomioluwalana")
    """

    def __init__(self, record: WorkflowRecord):
        self.record = record

    def __repr__(self) -> str:
        return f"WorkflowStateMachine({self.record.slug}: {self.state.value})"

    @property
    def state(self) -> WorkflowState:
        return self.record.state

    @property
    def revision(self) -> int:
        return self.record.revision

    @property
    def history(self) -> list[TransitionRecord]:
        return list(self.record.history)

    def allowed_targets(self) -> set[WorkflowState]:
        return set(TRANSITIONS[self.state])

    def transition_to(
        self,
        target: WorkflowState | str,
        expected_revision: int | None = None,
        actor: str | None = None,
        note: str | None = None,
    ) -> TransitionRecord:
        """Move the record to a new state.

        Args:
            target: State to move to
            expected_revision: Revision the caller last saw; if given and it
                differs from the record's, the transition is rejected
            actor: Who requested the transition
            note: Free-form note stored with the transition

        Returns:
            The recorded transition

        Raises:
            StaleRevisionError: If expected_revision does not match
            IllegalTransitionError: If the edge is not in TRANSITIONS
            InvalidEnumError: If target is not a workflow state
        """
        target_state = parse_state(target)

        if expected_revision is not None and expected_revision != self.record.revision:
            raise StaleRevisionError(expected_revision, self.record.revision)

        current = self.state
        if not can_transition(current, target_state):
            raise IllegalTransitionError(current.value, target_state.value)

        transition = TransitionRecord(
            from_state=current,
            to_state=target_state,
            timestamp=datetime.now(timezone.utc),
            actor=actor,
            note=note,
        )
        self.record.history.append(transition)
        self.record.state = target_state
        self.record.revision += 1

        logger.info(
            f"{self.record.slug}: {current.value} -> {target_state.value} "
            f"(revision {self.record.revision})"
        )
        return transition

    def request_changes(
        self,
        note: str | None = None,
        actor: str | None = None,
        expected_revision: int | None = None,
    ) -> TransitionRecord:
        """Send an article under review back to drafting."""
        if self.state is not WorkflowState.IN_REVIEW:
            raise IllegalTransitionError(self.state.value, WorkflowState.DRAFTING.value)
        return self.transition_to(
            WorkflowState.DRAFTING,
            expected_revision=expected_revision,
            actor=actor,
            note=note,
        )
