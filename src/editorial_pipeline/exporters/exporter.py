"""Base class for publication exporters."""

from abc import ABC, abstractmethod

from schemas.article import Article
from schemas.export import ExportBundle


class Exporter(ABC):
    """Abstract base class for exporters.

    Exporters hand approved articles to an external publishing
    collaborator and mark them published.
    """

    @abstractmethod
    def export(self, article: Article, expected_revision: int | None = None) -> ExportBundle:
        """Export an approved article.

        Args:
            article: The article to export
            expected_revision: Workflow revision the caller last saw

        Returns:
            The immutable export bundle
        """
        pass
