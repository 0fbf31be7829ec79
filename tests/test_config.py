"""Tests for configuration loading."""

import pytest

from editorial_pipeline.config import DEFAULT_CONFIG, EditorialConfig, load_config
from editorial_pipeline.exceptions import EditorialError


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_path(self):
        config = load_config(None)

        assert config is DEFAULT_CONFIG
        assert config.strict is False
        assert config.short_description_limit == 350
        assert config.sidecar_names == ["_datasheet.yml", "_datasheet.yaml"]

    def test_yaml_overrides_defaults(self, tmp_path):
        """Keys in the file override defaults; omitted keys keep them."""
        path = tmp_path / "editorial.yml"
        path.write_text("strict: true\nallowed_tags:\n  - ruby\n  - rails\n")

        config = load_config(path)

        assert config.strict is True
        assert config.allowed_tags == ["ruby", "rails"]
        assert config.placeholder_markers == ["TODO", "TBD"]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "editorial.yml"
        path.write_text("")

        assert load_config(path) == EditorialConfig()

    def test_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / "editorial.yml"
        path.write_text("theme: dark\n")

        assert load_config(path) == EditorialConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(EditorialError, match="Config file not found"):
            load_config(tmp_path / "missing.yml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "editorial.yml"
        path.write_text("strict: [true\n")

        with pytest.raises(EditorialError, match="Could not parse config"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "editorial.yml"
        path.write_text("- strict\n")

        with pytest.raises(EditorialError, match="must be a mapping"):
            load_config(path)

    def test_invalid_value(self, tmp_path):
        """Values of the wrong type are reported as config errors."""
        path = tmp_path / "editorial.yml"
        path.write_text("short_description_limit: lots\n")

        with pytest.raises(EditorialError, match="Invalid config"):
            load_config(path)
