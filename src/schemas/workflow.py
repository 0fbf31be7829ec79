"""Workflow state schemas.

An article moves through a fixed set of editorial stages. The record of
where it is, and how it got there, lives beside the bundle:

    articles/
    └── {slug}/
        ├── _datasheet.yml
        ├── article.md
        └── _workflow.json     # WorkflowRecord
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


class WorkflowState(str, Enum):
    """Editorial stages an article passes through."""

    PROPOSED = "proposed"
    DRAFTING = "drafting"
    IN_REVIEW = "in-review"
    EDITING = "editing"
    APPROVED = "approved"
    PUBLISHED = "published"

    @classmethod
    def values(cls) -> list[str]:
        return [state.value for state in cls]

    @property
    def is_terminal(self) -> bool:
        return self is WorkflowState.PUBLISHED


class TransitionRecord(BaseModel):
    """A single audited state change.

    Attributes:
        from_state: State before the transition
        to_state: State after the transition
        timestamp: When the transition happened (UTC)
        actor: Who requested the transition, if known
        note: Free-form note (e.g., reviewer's reason for requesting changes)
    """

    from_state: WorkflowState
    to_state: WorkflowState
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    actor: str | None = None
    note: str | None = None


class WorkflowRecord(BaseModel):
    """Persistent workflow state for one article.

    Attributes:
        slug: Article slug (the sidecar's path)
        state: Current workflow state
        revision: Incremented on every transition; used for optimistic
            concurrency checks
        history: Ordered transitions from the initial state
    """

    slug: str
    state: WorkflowState = WorkflowState.PROPOSED
    revision: int = 0
    history: list[TransitionRecord] = []
