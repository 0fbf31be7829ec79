"""Metadata sidecar schemas.

Every article bundle carries a sidecar datasheet describing the post for
the blog and for marketing. The sidecar keys use hyphens (``publish-on``,
``marketing-notes``, ``short-description``); the models accept either the
hyphenated alias or the Python field name and always dump by alias.
"""

from datetime import date

from pydantic import BaseModel, Field

from .workflow import WorkflowState


class MarketingNotes(BaseModel):
    """Marketing notes attached to an article.

    Attributes:
        eli5: The article described in terms a smart non-programmer would understand
        who: Who the article is written for
        what: What the article does for them
        why: Why that is important
        msc: Anything else marketing should know
    """

    model_config = {"frozen": True}

    eli5: str
    who: str
    what: str
    why: str
    msc: str | None = None


class ArticleMetadata(BaseModel):
    """Normalized metadata sidecar for an article.

    Attributes:
        title: Title as published on the blog
        path: URL path slug of the post
        author: Author slug (first and last name concatenated, lowercase)
        tags: Normalized, lowercase tags
        publish_on: Scheduled publication date
        marketing_notes: Marketing notes
        short_description: Teaser shown on the blog index and article header
        status: Workflow status declared in the sidecar, if any
    """

    model_config = {"frozen": True, "populate_by_name": True}

    title: str
    path: str
    author: str
    tags: tuple[str, ...]
    publish_on: date = Field(alias="publish-on")
    marketing_notes: MarketingNotes = Field(alias="marketing-notes")
    short_description: str = Field(alias="short-description")
    status: WorkflowState | None = None
