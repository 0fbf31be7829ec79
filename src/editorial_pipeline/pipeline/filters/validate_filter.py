"""Validation filter for the bundle pipeline.

Wraps BundleLoader to check a bundle's layout and sidecar metadata.
"""

from pathlib import Path

from editorial_pipeline.loaders.bundle_loader import BundleLoader
from editorial_pipeline.pipeline.plumbing import Filter, Pipe, Token


class ValidateFilter(Filter):
    """Pipeline filter that loads and validates a content bundle.

    Reads bundle_path from the token and writes the article's slug,
    normalized metadata and workflow state back to it.

    Attributes:
        loader: BundleLoader instance
    """

    def __init__(self, pipe: Pipe, loader: BundleLoader):
        super().__init__(pipe)
        self.loader = loader

    def validate_token(self, token: Token) -> bool:
        return bool(token.get_prop("bundle_path"))

    def process_token(self, token: Token) -> bool:
        article = self.loader.load(Path(token.get_prop("bundle_path")))
        token.put_prop("slug", article.slug)
        token.put_prop(
            "metadata",
            article.metadata.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        token.put_prop("state", article.state.value)
        return True
