"""Export filter for the bundle pipeline.

Wraps PublicationExporter to publish an approved bundle.
"""

from pathlib import Path

from editorial_pipeline.exporters.publication_exporter import PublicationExporter
from editorial_pipeline.loaders.bundle_loader import BundleLoader
from editorial_pipeline.pipeline.plumbing import Filter, Pipe, Token


class ExportFilter(Filter):
    """Pipeline filter that exports an approved bundle.

    Reloads the bundle so the exporter sees the current workflow record,
    then writes export_path and the new state back to the token. An
    article that is not approved fails the token with NotReadyError.

    Attributes:
        loader: BundleLoader instance
        exporter: PublicationExporter instance
    """

    def __init__(self, pipe: Pipe, loader: BundleLoader, exporter: PublicationExporter):
        super().__init__(pipe)
        self.loader = loader
        self.exporter = exporter

    def validate_token(self, token: Token) -> bool:
        return bool(token.get_prop("bundle_path")) and bool(token.get_prop("slug"))

    def process_token(self, token: Token) -> bool:
        article = self.loader.load(Path(token.get_prop("bundle_path")))
        bundle = self.exporter.export(article)
        token.put_prop("export_path", str(self.exporter.bundle_path(bundle.slug)))
        token.put_prop("state", article.state.value)
        return True
