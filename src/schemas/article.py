"""Article domain object."""

from dataclasses import dataclass
from pathlib import Path

from .metadata import ArticleMetadata
from .workflow import WorkflowRecord, WorkflowState


@dataclass
class Article:
    """Represents a single article bundle loaded from disk.

    Attributes:
        slug: Unique article identifier (the sidecar's path)
        body: Markdown body text
        metadata: Normalized sidecar metadata
        workflow: Workflow record tracking the article's editorial stage
        source_path: Bundle directory the article was loaded from
        body_filename: Name of the body file within the bundle
    """

    slug: str
    body: str
    metadata: ArticleMetadata
    workflow: WorkflowRecord | None = None
    source_path: Path | None = None
    body_filename: str = "article.md"

    def __post_init__(self):
        if self.workflow is None:
            self.workflow = WorkflowRecord(slug=self.slug)

    @property
    def state(self) -> WorkflowState:
        return self.workflow.state

    @property
    def author(self) -> str:
        return self.metadata.author
