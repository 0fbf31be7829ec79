"""Pipeline orchestrator for end-to-end bundle processing.

Wires the validate, lint and export filters together and runs a single
content bundle through them.
"""

import logging
from pathlib import Path

from editorial_pipeline.config import DEFAULT_CONFIG, EditorialConfig
from editorial_pipeline.exporters.publication_exporter import PublicationExporter
from editorial_pipeline.linters.style_linter import StyleLinter
from editorial_pipeline.loaders.bundle_loader import BundleLoader
from editorial_pipeline.pipeline.filters.export_filter import ExportFilter
from editorial_pipeline.pipeline.filters.lint_filter import LintFilter
from editorial_pipeline.pipeline.filters.validate_filter import ValidateFilter
from editorial_pipeline.pipeline.plumbing import Pipeline, Token, dump_token, load_token
from schemas.tokens import ArticleTokenContent

logger = logging.getLogger(__name__)

BUCKET_NAMES = [
    "submitted",
    "validated",
    "linted",
    "exported",
]


class Orchestrator:
    """End-to-end pipeline orchestrator.

    Creates the bucket directory structure, instantiates the filters, and
    runs one bundle through validation, linting and export.

    Attributes:
        workspace: Root directory for pipeline bucket directories
        export_output: Directory where export bundles are written
        pipeline: Pipeline instance managing all buckets
        filters: Ordered list of Filter instances to run
    """

    def __init__(
        self,
        workspace: Path,
        export_output: Path,
        config: EditorialConfig | None = None,
    ):
        self.workspace = workspace
        self.export_output = export_output
        config = config or DEFAULT_CONFIG

        self.pipeline = Pipeline()
        for name in BUCKET_NAMES:
            bucket_path = workspace / name
            bucket_path.mkdir(parents=True, exist_ok=True)
            self.pipeline.add_bucket(name, bucket_path)

        loader = BundleLoader(config)
        self.filters = [
            ValidateFilter(
                pipe=self.pipeline.pipe("submitted", "validated"),
                loader=loader,
            ),
            LintFilter(
                pipe=self.pipeline.pipe("validated", "linted"),
                loader=loader,
                linter=StyleLinter(
                    strict=config.strict, max_heading_level=config.max_heading_level
                ),
            ),
            ExportFilter(
                pipe=self.pipeline.pipe("linted", "exported"),
                loader=loader,
                exporter=PublicationExporter(export_output, store=loader.store),
            ),
        ]

    def run(self, bundle_path: Path) -> Token:
        """Run a single bundle through the full pipeline.

        Args:
            bundle_path: Path to the content bundle directory

        Returns:
            The token in its final state (from exported, or from the bucket
            where it failed)
        """
        token = self._seed_token(bundle_path)

        for f in self.filters:
            if not f.run_once(token.name):
                logger.warning(
                    f"Filter {f.__class__.__name__} did not process token {token.name}"
                )
                break

        return self._find_token(token.name)

    def _seed_token(self, bundle_path: Path) -> Token:
        """Create a token for the bundle and write it to submitted.

        Token files left in any bucket by an earlier run of the same bundle
        are removed first.
        """
        for name in BUCKET_NAMES:
            for stale in self.pipeline.bucket(name).glob(f"{bundle_path.name}.*"):
                logger.debug(f"Removing token file from earlier run: {stale}")
                stale.unlink()

        content = ArticleTokenContent(
            id=bundle_path.name,
            bundle_path=str(bundle_path),
        ).model_dump(exclude_none=True)
        token = Token(content)
        token_path = self.pipeline.bucket("submitted") / f"{token.name}.json"
        dump_token(token, token_path)
        logger.info(f"Seeded token {token.name} to submitted")
        return token

    def _find_token(self, token_id: str) -> Token:
        """Find the token in any bucket (exported first, then error states)."""
        token_path = self.pipeline.bucket("exported") / f"{token_id}.json"
        if token_path.exists():
            return load_token(token_path)

        for name in reversed(BUCKET_NAMES):
            bucket = self.pipeline.bucket(name)
            err_path = bucket / f"{token_id}.err"
            if err_path.exists():
                return load_token(err_path)
            json_path = bucket / f"{token_id}.json"
            if json_path.exists():
                return load_token(json_path)

        raise FileNotFoundError(f"Token {token_id} not found in any pipeline bucket")
