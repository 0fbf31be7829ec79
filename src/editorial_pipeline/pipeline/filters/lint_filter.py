"""Lint filter for the bundle pipeline.

Wraps StyleLinter. Style violations are findings for the author, so they
are recorded on the token but never fail it.
"""

from dataclasses import asdict
from pathlib import Path

from editorial_pipeline.linters.style_linter import StyleLinter
from editorial_pipeline.loaders.bundle_loader import BundleLoader
from editorial_pipeline.pipeline.plumbing import Filter, Pipe, Token


class LintFilter(Filter):
    """Pipeline filter that lints a bundle's body.

    Attributes:
        loader: BundleLoader used to locate and read the body file
        linter: StyleLinter instance
    """

    def __init__(self, pipe: Pipe, loader: BundleLoader, linter: StyleLinter):
        super().__init__(pipe)
        self.loader = loader
        self.linter = linter

    def validate_token(self, token: Token) -> bool:
        return bool(token.get_prop("bundle_path")) and bool(token.get_prop("slug"))

    def process_token(self, token: Token) -> bool:
        body_path = self.loader.find_body(Path(token.get_prop("bundle_path")))
        report = self.linter.lint(self.loader.read_body(body_path))
        violations = [asdict(v) for v in report]
        token.put_prop("violations", violations)

        for violation in violations:
            self.log_to_token(
                token,
                "WARNING",
                f"line {violation['line']}: [{violation['rule']}] {violation['message']}",
            )
        return True
