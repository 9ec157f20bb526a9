"""Unit tests for regionforge.config module."""

from pathlib import Path

import pytest

from regionforge.config import (
    DEFAULT_ACTIVE_PROB_THRESHOLD,
    DEFAULT_MAX_REGION_SIZE,
    DEFAULT_MIN_REGION_SIZE,
    DEFAULT_REGION_EXTENSION,
    DEFAULT_VARIANT_PADDING,
    ActivityConfig,
    Config,
    TrimmingConfig,
)


class TestDefaults:
    """Tests for default configuration values."""

    def test_activity_defaults(self) -> None:
        """Activity defaults match the module constants."""
        config = ActivityConfig()
        assert config.threshold == DEFAULT_ACTIVE_PROB_THRESHOLD
        assert config.min_region_size == DEFAULT_MIN_REGION_SIZE
        assert config.max_region_size == DEFAULT_MAX_REGION_SIZE
        assert config.extension == DEFAULT_REGION_EXTENSION
        assert config.max_reads_per_alignment_start == 50
        assert not config.force_active

    def test_trimming_defaults(self) -> None:
        """Trimming defaults match the module constants."""
        config = TrimmingConfig()
        assert config.variant_padding == DEFAULT_VARIANT_PADDING
        assert not config.disable_trimming
        assert not config.cap_to_extension

    def test_defaults_valid(self) -> None:
        """The default configuration validates."""
        Config().validate()


class TestValidate:
    """Tests for configuration validation."""

    @pytest.mark.parametrize(
        "kwargs,match",
        [
            ({"threshold": 1.5}, "threshold"),
            ({"threshold": -0.1}, "threshold"),
            ({"min_region_size": 0}, "region size"),
            ({"max_region_size": -1}, "region size"),
            ({"min_region_size": 400}, "must be <="),
            ({"extension": -1}, "extension"),
            ({"max_reads_per_alignment_start": -1}, "max_reads_per_alignment_start"),
        ],
    )
    def test_invalid_activity(self, kwargs, match) -> None:
        """Invalid activity settings are rejected."""
        with pytest.raises(ValueError, match=match):
            ActivityConfig(**kwargs).validate()

    def test_invalid_trimming(self) -> None:
        """Negative padding is rejected."""
        with pytest.raises(ValueError, match="variant_padding"):
            TrimmingConfig(variant_padding=-5).validate()


class TestFromDict:
    """Tests for building configurations from dictionaries."""

    def test_partial(self) -> None:
        """Missing keys fall back to defaults."""
        config = Config.from_dict({"activity": {"max_region_size": 500}})
        assert config.activity.max_region_size == 500
        assert config.activity.min_region_size == DEFAULT_MIN_REGION_SIZE
        assert config.trimming == TrimmingConfig()

    def test_roundtrip(self) -> None:
        """to_dict output rebuilds an equal configuration."""
        config = Config(
            ActivityConfig(extension=25, force_active=True),
            TrimmingConfig(variant_padding=3, cap_to_extension=True),
        )
        assert Config.from_dict(config.to_dict()) == config

    def test_unknown_section(self) -> None:
        """Unknown sections are rejected."""
        with pytest.raises(ValueError, match="Unknown configuration sections"):
            Config.from_dict({"assembly": {}})

    def test_unknown_key(self) -> None:
        """Unknown keys are rejected with the section name."""
        with pytest.raises(ValueError, match=r"Unknown keys in \[trimming\]"):
            Config.from_dict({"trimming": {"padding": 5}})

    def test_invalid_value(self) -> None:
        """Values are validated after loading."""
        with pytest.raises(ValueError, match="extension"):
            Config.from_dict({"activity": {"extension": -3}})


class TestLoad:
    """Tests for loading configuration files."""

    def test_none_returns_defaults(self) -> None:
        """No path means defaults."""
        assert Config.load(None) == Config()

    def test_load_yaml(self, tmp_path: Path) -> None:
        """Settings are read from YAML."""
        path = tmp_path / "regionforge.yaml"
        path.write_text(
            "activity:\n"
            "  threshold: 0.01\n"
            "  max_region_size: 250\n"
            "\n"
            "trimming:\n"
            "  variant_padding: 10\n"
            "  disable_trimming: true\n"
        )
        config = Config.load(path)

        assert config.activity.threshold == 0.01
        assert config.activity.max_region_size == 250
        assert config.trimming.variant_padding == 10
        assert config.trimming.disable_trimming

    def test_missing_file(self, tmp_path: Path) -> None:
        """Missing files raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            Config.load(tmp_path / "missing.yaml")

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        """Parse errors are reported as ValueError."""
        path = tmp_path / "bad.yaml"
        path.write_text("activity: [threshold: 0.1\n")
        with pytest.raises(ValueError, match="Invalid configuration file"):
            Config.load(path)

    def test_empty_file(self, tmp_path: Path) -> None:
        """An empty file yields the defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert Config.load(path) == Config()

    def test_empty_section(self, tmp_path: Path) -> None:
        """A section with no keys keeps its defaults."""
        path = tmp_path / "partial.yaml"
        path.write_text("activity:\ntrimming:\n  variant_padding: 7\n")
        config = Config.load(path)
        assert config.activity == ActivityConfig()
        assert config.trimming.variant_padding == 7

    def test_non_mapping(self, tmp_path: Path) -> None:
        """A top-level list is not a configuration."""
        path = tmp_path / "list.yaml"
        path.write_text("- activity\n- trimming\n")
        with pytest.raises(ValueError, match="expected a mapping"):
            Config.load(path)
