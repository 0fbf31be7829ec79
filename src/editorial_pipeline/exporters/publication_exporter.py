"""Publication exporter for approved articles.

Writes an export bundle for the publishing collaborator, then advances the
article's workflow to published. The state check and the revision check
both happen before anything is written.
"""

import json
import logging
from pathlib import Path

from editorial_pipeline.exceptions import BundleError, NotReadyError, StaleRevisionError
from editorial_pipeline.workflow.state_machine import WorkflowStateMachine
from editorial_pipeline.workflow.store import WorkflowStore
from schemas.article import Article
from schemas.export import ExportBundle
from schemas.metadata import ArticleMetadata
from schemas.workflow import WorkflowState

from .exporter import Exporter

logger = logging.getLogger(__name__)

METADATA_FILENAME = "metadata.json"
BODY_FILENAME = "article.md"
HEADER_FILENAME = "export.json"
HEADER_FIELDS = {"slug", "exported_at", "source_revision", "exporter"}


def dump_metadata(metadata: ArticleMetadata) -> str:
    """Serialize metadata the way it is written into export bundles."""
    return metadata.model_dump_json(indent=2, by_alias=True, exclude_none=True)


class PublicationExporter(Exporter):
    """Export approved articles into a directory of export bundles.

    Example:
        exporter = PublicationExporter(Path("./workspace/exports"))
        bundle = exporter.export(article)
    """

    def __init__(self, output_dir: Path, store: WorkflowStore | None = None):
        self.output_dir = output_dir
        self.store = store or WorkflowStore()

    def bundle_path(self, slug: str) -> Path:
        return self.output_dir / slug

    def export(self, article: Article, expected_revision: int | None = None) -> ExportBundle:
        """Export an approved article and mark it published.

        Args:
            article: Article in the approved state
            expected_revision: Workflow revision the caller last saw

        Returns:
            The immutable export bundle

        Raises:
            NotReadyError: If the article is not approved
            StaleRevisionError: If the workflow record changed since it was read
        """
        if article.state is not WorkflowState.APPROVED:
            raise NotReadyError(article.slug, article.state.value)

        loaded_revision = article.workflow.revision
        if expected_revision is not None and expected_revision != loaded_revision:
            raise StaleRevisionError(expected_revision, loaded_revision)
        if article.source_path is not None:
            self.store.check_revision(article.source_path, loaded_revision)

        record = article.workflow.model_copy(deep=True)
        WorkflowStateMachine(record).transition_to(WorkflowState.PUBLISHED)

        bundle = ExportBundle(
            slug=article.slug,
            metadata=article.metadata,
            body=article.body,
            source_revision=loaded_revision,
        )
        destination = self._write_bundle(bundle)

        if article.source_path is not None:
            self.store.save(article.source_path, record, expected_revision=loaded_revision)
        article.workflow = record

        logger.info(f"Exported {article.slug} to {destination}")
        return bundle

    def _write_bundle(self, bundle: ExportBundle) -> Path:
        """Write the bundle's files and return its directory."""
        destination = self.bundle_path(bundle.slug)
        destination.mkdir(parents=True, exist_ok=True)

        (destination / METADATA_FILENAME).write_text(
            dump_metadata(bundle.metadata), encoding="utf-8"
        )
        (destination / BODY_FILENAME).write_text(bundle.body, encoding="utf-8")
        (destination / HEADER_FILENAME).write_text(
            bundle.model_dump_json(indent=2, include=HEADER_FIELDS), encoding="utf-8"
        )
        logger.debug(f"Wrote export bundle files to {destination}")
        return destination


def load_export(bundle_path: Path) -> ExportBundle:
    """Re-import an export bundle written by PublicationExporter.

    Args:
        bundle_path: Export bundle directory

    Returns:
        The export bundle

    Raises:
        BundleError: If a bundle file is missing or unreadable
    """
    try:
        header = json.loads((bundle_path / HEADER_FILENAME).read_text(encoding="utf-8"))
        metadata = ArticleMetadata.model_validate_json(
            (bundle_path / METADATA_FILENAME).read_text(encoding="utf-8")
        )
        body = (bundle_path / BODY_FILENAME).read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise BundleError(f"Incomplete export bundle {bundle_path}: {e.filename}") from e
    except ValueError as e:
        raise BundleError(f"Unreadable export bundle {bundle_path}: {e}") from e

    return ExportBundle.model_validate({**header, "metadata": metadata, "body": body})
