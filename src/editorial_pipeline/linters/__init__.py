"""Linters for article bodies."""

from .style_linter import LintReport, StyleLinter

__all__ = ["LintReport", "StyleLinter"]
