"""Article token content schema for pipeline processing."""

from pydantic import BaseModel


class ArticleTokenContent(BaseModel):
    """Schema for article token content.

    This model defines the structure of data carried by article tokens
    as they flow through the pipeline.

    Attributes:
        id: Unique token identifier (the bundle directory name)
        bundle_path: Path to the content bundle directory
        slug: Article slug, once the sidecar has validated
        metadata: Normalized sidecar metadata, dumped by alias
        violations: Style violations found by the linter
        state: Workflow state after the last stage
        export_path: Path to the written export bundle
        error: Error message if processing failed
    """

    id: str
    bundle_path: str
    slug: str | None = None
    metadata: dict | None = None
    violations: list[dict] = []
    state: str | None = None
    export_path: str | None = None
    error: str | None = None

    model_config = {"extra": "allow"}  # Allow additional fields like 'log'
