"""Pipeline filter implementations."""

from .export_filter import ExportFilter
from .lint_filter import LintFilter
from .validate_filter import ValidateFilter

__all__ = ["ExportFilter", "LintFilter", "ValidateFilter"]
