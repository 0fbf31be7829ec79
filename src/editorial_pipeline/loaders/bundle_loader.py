"""Loader for article content bundles.

An author adds an article by creating a directory holding the body and a
sidecar datasheet:

    articles/
    └── code-loaders-in-ruby-understanding-zeitwerk/
        ├── _datasheet.yml     # Metadata sidecar (YAML)
        ├── article.md         # Article body
        └── _workflow.json     # Workflow record (written by the pipeline)

Drafts sometimes leave revision duplicates of the body behind; when more
than one markdown file is present, a preferred name (article.md, index.md)
picks the body.
"""

import logging
from pathlib import Path

import yaml

from editorial_pipeline.config import DEFAULT_CONFIG, EditorialConfig
from editorial_pipeline.exceptions import BundleError
from editorial_pipeline.validators.schema_validator import SchemaValidator
from editorial_pipeline.workflow.store import WorkflowStore
from schemas.article import Article

logger = logging.getLogger(__name__)


class BundleLoader:
    """Read content bundles from disk into Article objects.

    Example:
        loader = BundleLoader()
        article = loader.load(Path("articles/code-loaders-in-ruby"))
    """

    def __init__(
        self,
        config: EditorialConfig | None = None,
        validator: SchemaValidator | None = None,
        store: WorkflowStore | None = None,
    ):
        self.config = config or DEFAULT_CONFIG
        self.validator = validator or SchemaValidator(self.config)
        self.store = store or WorkflowStore()

    def find_sidecar(self, bundle_path: Path) -> Path:
        """Locate the bundle's single sidecar file.

        Raises:
            BundleError: If there is no sidecar or more than one
        """
        found = [
            bundle_path / name
            for name in self.config.sidecar_names
            if (bundle_path / name).is_file()
        ]
        if not found:
            raise BundleError(
                f"No sidecar in {bundle_path} "
                f"(expected one of: {', '.join(self.config.sidecar_names)})"
            )
        if len(found) > 1:
            raise BundleError(
                f"Multiple sidecars in {bundle_path}: {', '.join(p.name for p in found)}"
            )
        return found[0]

    def find_body(self, bundle_path: Path) -> Path:
        """Locate the bundle's body file.

        Raises:
            BundleError: If there is no body or the choice is ambiguous
        """
        candidates = sorted(p for p in bundle_path.glob("*.md") if p.is_file())
        if not candidates:
            raise BundleError(f"No markdown body in {bundle_path}")
        if len(candidates) == 1:
            return candidates[0]

        for name in self.config.preferred_body_names:
            preferred = bundle_path / name
            if preferred in candidates:
                logger.debug(
                    f"{bundle_path.name}: using {name} out of {len(candidates)} markdown files"
                )
                return preferred

        raise BundleError(
            f"Ambiguous body in {bundle_path}: {', '.join(p.name for p in candidates)}"
        )

    def read_sidecar(self, sidecar_path: Path) -> dict:
        """Parse a sidecar file into a raw mapping."""
        try:
            with sidecar_path.open("r", encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except UnicodeDecodeError as e:
            raise BundleError(f"Sidecar {sidecar_path} is not valid UTF-8: {e}") from e
        except yaml.YAMLError as e:
            raise BundleError(f"Could not parse sidecar {sidecar_path}: {e}") from e

        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise BundleError(f"Sidecar {sidecar_path} must be a mapping")
        return raw

    def read_body(self, body_path: Path) -> str:
        """Read a body file as UTF-8 text."""
        try:
            return body_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise BundleError(f"Body {body_path} is not valid UTF-8: {e}") from e

    def load(self, bundle_path: Path) -> Article:
        """Load and validate a bundle.

        Args:
            bundle_path: Path to the bundle directory

        Returns:
            The Article with normalized metadata and its workflow record

        Raises:
            BundleError: If the bundle layout is invalid
            MissingFieldError: If the sidecar lacks a required field
            InvalidFieldError: If a sidecar field is malformed
        """
        if not bundle_path.is_dir():
            raise BundleError(f"Bundle directory not found: {bundle_path}")

        sidecar_path = self.find_sidecar(bundle_path)
        body_path = self.find_body(bundle_path)

        metadata = self.validator.validate(self.read_sidecar(sidecar_path))
        body = self.read_body(body_path)
        workflow = self.store.load(bundle_path, metadata.path)

        logger.debug(
            f"Loaded bundle {metadata.path} from {bundle_path} "
            f"(state: {workflow.state.value})"
        )
        return Article(
            slug=metadata.path,
            body=body,
            metadata=metadata,
            workflow=workflow,
            source_path=bundle_path,
            body_filename=body_path.name,
        )


def load_bundle(bundle_path: Path, config: EditorialConfig | None = None) -> Article:
    """Load a bundle with a default loader."""
    return BundleLoader(config).load(bundle_path)
