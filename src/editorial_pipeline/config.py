"""Configuration for the editorial pipeline.

Settings are read from an optional YAML file; any key left out keeps its
default. Example:

    strict: true
    allowed_tags: [ruby, rails, javascript]
    short_description_limit: 350
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

from editorial_pipeline.exceptions import EditorialError

logger = logging.getLogger(__name__)


class EditorialConfig(BaseModel):
    """Settings shared by the loader, validator, linter and CLI.

    Attributes:
        strict: Lint in strict mode (headings limited to H2)
        max_heading_level: Overrides the heading limit implied by strict
        allowed_tags: If set, tags outside this list are rejected
        short_description_limit: Length above which the short description
            draws a warning
        placeholder_markers: Values that mark a sidecar field as unfinished
        sidecar_names: Accepted sidecar filenames inside a bundle
        preferred_body_names: Body filenames that win when a bundle holds
            several markdown files
    """

    strict: bool = False
    max_heading_level: int | None = None
    allowed_tags: list[str] | None = None
    short_description_limit: int = 350
    placeholder_markers: list[str] = ["TODO", "TBD"]
    sidecar_names: list[str] = ["_datasheet.yml", "_datasheet.yaml"]
    preferred_body_names: list[str] = ["article.md", "index.md"]

    model_config = {"extra": "ignore"}


DEFAULT_CONFIG = EditorialConfig()


def load_config(path: Path | None) -> EditorialConfig:
    """Load configuration from a YAML file with defaults.

    Args:
        path: Path to the YAML config file, or None for defaults

    Returns:
        The merged configuration

    Raises:
        EditorialError: If the file cannot be parsed or holds invalid values
    """
    if path is None:
        return DEFAULT_CONFIG

    if not path.is_file():
        raise EditorialError(f"Config file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise EditorialError(f"Could not parse config {path}: {e}") from e

    if not isinstance(raw, dict):
        raise EditorialError(f"Config {path} must be a mapping")

    try:
        config = EditorialConfig.model_validate(raw)
    except ValidationError as e:
        raise EditorialError(f"Invalid config {path}: {e}") from e

    logger.debug(f"Loaded config from {path}")
    return config
