"""Token content schemas for pipeline processing."""

from .article_token import ArticleTokenContent

__all__ = ["ArticleTokenContent"]
