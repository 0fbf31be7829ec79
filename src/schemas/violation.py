"""Style violation domain object."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class StyleViolation:
    """A single non-conformance found by the style linter.

    Attributes:
        rule: Rule identifier (e.g., "heading-depth", "list-nesting")
        line: 1-based line number in the article body
        message: Human-readable description
        severity: "error" for rejected constructs, "warning" for flagged ones
    """

    rule: str
    line: int
    message: str
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        return f"line {self.line}: [{self.rule}] {self.message}"
