"""Editorial workflow tracking."""

from .state_machine import (
    INITIAL_STATE,
    TRANSITIONS,
    WorkflowStateMachine,
    can_transition,
    parse_state,
)
from .store import WORKFLOW_FILENAME, WorkflowStore

__all__ = [
    "INITIAL_STATE",
    "TRANSITIONS",
    "WORKFLOW_FILENAME",
    "WorkflowStateMachine",
    "WorkflowStore",
    "can_transition",
    "parse_state",
]
