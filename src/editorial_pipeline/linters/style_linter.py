"""Style linter for article bodies.

Checks markdown against the blog's constrained subset:

- Headings no deeper than H3 (H2 in strict mode)
- Flat lists only; nested items are rejected
- Tables are flagged for an editor to look at
- Images stand on their own line, optionally followed by a caption line
- No footnotes or reference-style links

Scanning is line-based and skips fenced code blocks.
"""

import re
from typing import Iterator

from schemas.violation import StyleViolation

HEADING = re.compile(r"^ {0,3}(#{1,6})(?:\s|$)")
LIST_ITEM = re.compile(r"^(\s*)(?:[-*+]|\d+[.)])\s+")
FENCE = re.compile(r"^ {0,3}(`{3,}|~{3,})")
# Link destination, allowing one level of balanced parentheses in the URL.
DESTINATION = r"\((?:[^()]|\([^()]*\))*\)"
IMAGE = re.compile(r"!\[[^\]]*\]" + DESTINATION)
LINKED_IMAGE = re.compile(r"\[\s*!\[[^\]]*\]" + DESTINATION + r"\s*\]" + DESTINATION)
THEMATIC_BREAK = re.compile(r"^ {0,3}([-*_])(?:\s*\1){2,}\s*$")
TABLE_SEPARATOR = re.compile(r"\s*\|?(\s*:?-{3,}:?\s*\|)+(\s*:?-{3,}:?\s*)?")
FOOTNOTE = re.compile(r"\[\^[^\]]+\]")
REFERENCE_LINK = re.compile(r"\[[^\]]+\]\[[^\]]*\]")
REFERENCE_DEFINITION = re.compile(r"^ {0,3}\[[^\]]+\]:\s*\S")
CAPTION = re.compile(r"^\s*(\*[^*\s].*\*|_[^_\s].*_)\s*$")
CODE_SPAN = re.compile(r"`+[^`]*`+")

# Indentation (in spaces) a list item needs beyond its parent to nest.
NESTING_INDENT = 2


class LintReport:
    """Lazy, restartable sequence of style violations.

    Each iteration rescans the text, so a report can be consumed any
    number of times.
    """

    def __init__(self, linter: "StyleLinter", text: str):
        self._linter = linter
        self._text = text

    def __iter__(self) -> Iterator[StyleViolation]:
        return self._linter.scan(self._text)

    def __repr__(self) -> str:
        return f"LintReport(strict={self._linter.strict})"

    @property
    def errors(self) -> list[StyleViolation]:
        return [v for v in self if v.severity == "error"]

    @property
    def warnings(self) -> list[StyleViolation]:
        return [v for v in self if v.severity == "warning"]

    @property
    def is_conformant(self) -> bool:
        return next(iter(self), None) is None


class StyleLinter:
    """Scan article bodies for constructs outside the house style.

    Attributes:
        strict: Limit headings to H2 instead of H3
        max_heading_level: Deepest heading level allowed
    """

    def __init__(self, strict: bool = False, max_heading_level: int | None = None):
        self.strict = strict
        self.max_heading_level = max_heading_level or (2 if strict else 3)

    def lint(self, text: str) -> LintReport:
        """Lint an article body.

        Args:
            text: Raw markdown text

        Returns:
            A LintReport; empty when the document is fully conformant
        """
        return LintReport(self, text)

    def scan(self, text: str) -> Iterator[StyleViolation]:
        """Yield style violations in document order."""
        lines = text.splitlines()
        in_fence: str | None = None
        list_indents: list[int] = []

        for index, raw in enumerate(lines):
            lineno = index + 1
            line = raw.expandtabs(4)

            fence = FENCE.match(line)
            if in_fence is not None:
                if fence and fence.group(1)[0] == in_fence[0] and len(fence.group(1)) >= len(in_fence):
                    in_fence = None
                continue
            if fence:
                in_fence = fence.group(1)
                list_indents = []
                continue

            if not line.strip():
                continue

            if THEMATIC_BREAK.match(line):
                list_indents = []
                continue

            heading = HEADING.match(line)
            if heading:
                list_indents = []
                level = len(heading.group(1))
                if level > self.max_heading_level:
                    yield StyleViolation(
                        rule="heading-depth",
                        line=lineno,
                        message=f"H{level} heading is deeper than H{self.max_heading_level}",
                    )

            item = LIST_ITEM.match(line)
            if item:
                depth = self._list_depth(list_indents, len(item.group(1)))
                if depth > 1:
                    yield StyleViolation(
                        rule="list-nesting",
                        line=lineno,
                        message=f"List nested {depth} levels deep; only one level is allowed",
                    )
            elif not line.startswith(" "):
                list_indents = []

            if TABLE_SEPARATOR.fullmatch(line) and index > 0 and "|" in lines[index - 1]:
                yield StyleViolation(
                    rule="table",
                    line=lineno - 1,
                    message="Table found; check that it renders on the blog",
                    severity="warning",
                )

            yield from self._check_images(lines, index, line)
            yield from self._check_references(lineno, line)

    def _list_depth(self, indents: list[int], indent: int) -> int:
        """Track the open list levels and return the depth of a new item."""
        while indents and indent < indents[-1]:
            indents.pop()
        if not indents:
            indents.append(indent)
        elif indent >= indents[-1] + NESTING_INDENT:
            indents.append(indent)
        return len(indents)

    def _check_images(self, lines: list[str], index: int, line: str) -> Iterator[StyleViolation]:
        code_free = CODE_SPAN.sub("", line)
        if not IMAGE.search(code_free):
            return

        content = LIST_ITEM.sub("", code_free, count=1)
        remainder = IMAGE.sub("", LINKED_IMAGE.sub("", content)).strip()
        if remainder:
            yield StyleViolation(
                rule="inline-image",
                line=index + 1,
                message="Image shares its line with text; place it on its own line",
            )
            return

        before = lines[index - 1] if index > 0 else ""
        if _is_paragraph(before):
            yield StyleViolation(
                rule="inline-image",
                line=index + 1,
                message="Image directly follows paragraph text; separate it with a blank line",
            )

        after_index = index + 1
        if after_index < len(lines) and CAPTION.match(lines[after_index]):
            after_index += 1
        after = lines[after_index] if after_index < len(lines) else ""
        if _is_paragraph(after):
            yield StyleViolation(
                rule="inline-image",
                line=index + 1,
                message="Paragraph text directly follows image; separate it with a blank line",
            )

    def _check_references(self, lineno: int, line: str) -> Iterator[StyleViolation]:
        if REFERENCE_DEFINITION.match(line):
            yield StyleViolation(
                rule="footnote-reference",
                line=lineno,
                message="Reference definition found; use inline links instead",
            )
            return

        code_free = CODE_SPAN.sub("", line)
        if FOOTNOTE.search(code_free):
            yield StyleViolation(
                rule="footnote-reference",
                line=lineno,
                message="Footnote found; work the note into the text",
            )
        elif REFERENCE_LINK.search(code_free):
            yield StyleViolation(
                rule="footnote-reference",
                line=lineno,
                message="Reference-style link found; use inline links instead",
            )


def _is_paragraph(line: str) -> bool:
    """Whether a line is plain paragraph text."""
    stripped = line.strip()
    if not stripped:
        return False
    if THEMATIC_BREAK.match(line):
        return False
    if HEADING.match(line) or LIST_ITEM.match(line) or FENCE.match(line):
        return False
    if stripped.startswith((">", "|", "<")):
        return False
    if not IMAGE.sub("", LINKED_IMAGE.sub("", stripped)).strip():
        return False
    return True
