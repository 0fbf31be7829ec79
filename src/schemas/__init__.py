"""Schema definitions for the editorial pipeline."""

from .article import Article
from .export import ExportBundle
from .metadata import ArticleMetadata, MarketingNotes
from .violation import StyleViolation
from .workflow import TransitionRecord, WorkflowRecord, WorkflowState

__all__ = [
    "Article",
    "ArticleMetadata",
    "ExportBundle",
    "MarketingNotes",
    "StyleViolation",
    "TransitionRecord",
    "WorkflowRecord",
    "WorkflowState",
]
