"""Publication export bundle schemas.

Export bundles are handed to the external publishing collaborator. They
are immutable once written.

Directory structure:
    exports/
    └── {slug}/
        ├── metadata.json     # ArticleMetadata, dumped by alias
        ├── article.md        # Article body
        └── export.json       # ExportBundle header (without metadata/body)
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from .metadata import ArticleMetadata


class ExportBundle(BaseModel):
    """Normalized metadata and body of a published article.

    Attributes:
        slug: Article slug
        metadata: Normalized sidecar metadata
        body: Markdown body text
        exported_at: When the bundle was produced
        source_revision: Workflow revision the export was taken from
        exporter: Software that produced the bundle
    """

    model_config = {"frozen": True}

    slug: str
    metadata: ArticleMetadata
    body: str
    exported_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    source_revision: int = 0
    exporter: str = "editorial-pipeline"
