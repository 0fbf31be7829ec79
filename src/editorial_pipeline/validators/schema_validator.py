"""Schema validator for article metadata sidecars.

Each sidecar field is described by a FieldRule in FIELD_RULES: its key,
whether it is required, and the function that checks and normalizes its
value. Validation has no side effects beyond logging.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Mapping

from pydantic import ValidationError

from editorial_pipeline.config import DEFAULT_CONFIG, EditorialConfig
from editorial_pipeline.exceptions import (
    InvalidEnumError,
    InvalidFieldError,
    MissingFieldError,
)
from schemas.metadata import ArticleMetadata
from schemas.workflow import WorkflowState

logger = logging.getLogger(__name__)

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
DATE_FORMATS = ("%m-%d-%Y", "%Y-%m-%d")
MARKETING_REQUIRED = ("eli5", "who", "what", "why")
MARKETING_OPTIONAL = ("msc",)


@dataclass(frozen=True)
class FieldRule:
    """Validation rule for a single sidecar field.

    Attributes:
        name: Sidecar key (hyphenated)
        required: Whether the field must be present and non-blank
        normalize: Callable(validator, field_name, value) returning the
            normalized value or raising a validation error
    """

    name: str
    required: bool
    normalize: Callable[["SchemaValidator", str, Any], Any]


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    if isinstance(value, (list, dict)) and not value:
        return True
    return False


def _text(validator: "SchemaValidator", name: str, value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise InvalidFieldError(name, value, f"{name} must be text")
    text = str(value).strip()
    if not text:
        raise MissingFieldError(name)
    return text


def _slug(validator: "SchemaValidator", name: str, value: Any) -> str:
    text = _text(validator, name, value)
    if not SLUG_PATTERN.match(text):
        raise InvalidFieldError(
            name, value, f"{name} must be lowercase letters, digits and hyphens: {text!r}"
        )
    return text


def _tags(validator: "SchemaValidator", name: str, value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        raw = value.split(",")
    elif isinstance(value, (list, tuple)):
        raw = value
    else:
        raise InvalidFieldError(name, value, f"{name} must be a list or comma-separated text")

    tags: list[str] = []
    for item in raw:
        if not isinstance(item, str):
            raise InvalidFieldError(name, item, f"{name} entries must be text")
        tag = item.strip().lower()
        if tag and tag not in tags:
            tags.append(tag)

    if not tags:
        raise MissingFieldError(name)

    allowed = validator.config.allowed_tags
    if allowed is not None:
        for tag in tags:
            if tag not in allowed:
                raise InvalidEnumError(name, tag, allowed)
    return tuple(tags)


def _date(validator: "SchemaValidator", name: str, value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(value.strip(), fmt).date()
            except ValueError:
                continue
    raise InvalidFieldError(
        name, value, f"{name} must be a date (MM-DD-YYYY or YYYY-MM-DD): {value!r}"
    )


def _marketing(validator: "SchemaValidator", name: str, value: Any) -> dict:
    if not isinstance(value, Mapping):
        raise InvalidFieldError(name, value, f"{name} must be a mapping")

    notes = {}
    for key in MARKETING_REQUIRED:
        sub = f"{name}.{key}"
        if _is_blank(value.get(key)):
            raise MissingFieldError(sub)
        notes[key] = _text(validator, sub, value[key])
    for key in MARKETING_OPTIONAL:
        if not _is_blank(value.get(key)):
            notes[key] = _text(validator, f"{name}.{key}", value[key])
    return notes


def _status(validator: "SchemaValidator", name: str, value: Any) -> str:
    allowed = WorkflowState.values()
    if not isinstance(value, str) or value.strip().lower() not in allowed:
        raise InvalidEnumError(name, value, allowed)
    return value.strip().lower()


FIELD_RULES: tuple[FieldRule, ...] = (
    FieldRule("title", required=True, normalize=_text),
    FieldRule("path", required=True, normalize=_slug),
    FieldRule("author", required=True, normalize=_slug),
    FieldRule("tags", required=True, normalize=_tags),
    FieldRule("publish-on", required=True, normalize=_date),
    FieldRule("marketing-notes", required=True, normalize=_marketing),
    FieldRule("short-description", required=True, normalize=_text),
    FieldRule("status", required=False, normalize=_status),
)


class SchemaValidator:
    """Check a metadata record against FIELD_RULES.

    Keys may be given hyphenated (as in the sidecar) or with underscores
    (as in the Python model); both refer to the same field.

    Example:
        validator = SchemaValidator()
        metadata = validator.validate(yaml.safe_load(sidecar_text))
    """

    def __init__(self, config: EditorialConfig | None = None):
        self.config = config or DEFAULT_CONFIG
        self.rules = FIELD_RULES

    def validate(self, record: Mapping[str, Any]) -> ArticleMetadata:
        """Validate and normalize a metadata record.

        Args:
            record: Mapping of field name to value

        Returns:
            The normalized, immutable metadata

        Raises:
            MissingFieldError: If a required field is absent or blank
            InvalidEnumError: If an enumerated field is outside its set
            InvalidFieldError: If a field holds a malformed value
        """
        if not isinstance(record, Mapping):
            raise InvalidFieldError("sidecar", record, "Sidecar must be a mapping")

        fields: dict[str, Any] = {}
        spellings: dict[str, str] = {}
        for key, value in record.items():
            name = str(key).replace("_", "-")
            if name in fields:
                raise InvalidFieldError(
                    name, value, f"{name} is given twice, as {spellings[name]} and {key}"
                )
            fields[name] = value
            spellings[name] = str(key)

        known = {rule.name for rule in self.rules}
        for key in fields:
            if key not in known:
                logger.debug(f"Ignoring unknown sidecar field: {key}")

        for rule in self.rules:
            if rule.required and _is_blank(fields.get(rule.name)):
                raise MissingFieldError(rule.name)

        normalized: dict[str, Any] = {}
        for rule in self.rules:
            value = fields.get(rule.name)
            if _is_blank(value):
                continue
            normalized[rule.name] = rule.normalize(self, rule.name, value)

        try:
            metadata = ArticleMetadata.model_validate(normalized)
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"])
            raise InvalidFieldError(field, first.get("input"), str(e)) from e

        self._warn(metadata)
        return metadata

    def _warn(self, metadata: ArticleMetadata) -> None:
        """Log non-fatal problems with otherwise valid metadata."""
        limit = self.config.short_description_limit
        if len(metadata.short_description) > limit:
            logger.warning(
                f"{metadata.path}: short-description is "
                f"{len(metadata.short_description)} characters (limit {limit})"
            )

        markers = {marker.lower() for marker in self.config.placeholder_markers}
        texts = {
            "title": metadata.title,
            "short-description": metadata.short_description,
            **{
                f"marketing-notes.{key}": value
                for key, value in metadata.marketing_notes.model_dump().items()
                if value is not None
            },
        }
        for name, value in texts.items():
            if value.strip().lower() in markers:
                logger.warning(f"{metadata.path}: {name} is a placeholder ({value})")
