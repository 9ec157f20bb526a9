"""Configuration management for regionforge.

Components take their settings as plain constructor/method arguments.
This module bundles those settings into attrs classes with validated
defaults, so an application can load them from a file in one place and
hand them out explicitly.

Example:
    >>> from regionforge.config import Config
    >>> config = Config.load("regionforge.yaml")
    >>> config.activity.max_region_size
    300
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import attrs
import yaml

# =============================================================================
# Default Configuration Values
# =============================================================================

# Region detection defaults
DEFAULT_ACTIVE_PROB_THRESHOLD = 0.002
DEFAULT_MIN_REGION_SIZE = 50
DEFAULT_MAX_REGION_SIZE = 300
DEFAULT_REGION_EXTENSION = 100
DEFAULT_MAX_READS_PER_ALIGNMENT_START = 50  # 0 disables downsampling

# Trimming defaults
DEFAULT_VARIANT_PADDING = 20


# =============================================================================
# Configuration Classes
# =============================================================================


@attrs.define
class ActivityConfig:
    """Configuration for turning activity states into regions.

    Attributes:
        threshold: Minimum probability for a locus to be considered active.
        min_region_size: Minimum size of the left piece when an over-long
            active run is cut.
        max_region_size: Maximum size of a region.
        extension: Bases of context added around each region for reads.
        max_reads_per_alignment_start: Reads kept per start position when
            attaching reads; 0 keeps all.
        force_active: Mark every emitted region active (debugging).
    """

    threshold: float = DEFAULT_ACTIVE_PROB_THRESHOLD
    min_region_size: int = DEFAULT_MIN_REGION_SIZE
    max_region_size: int = DEFAULT_MAX_REGION_SIZE
    extension: int = DEFAULT_REGION_EXTENSION
    max_reads_per_alignment_start: int = DEFAULT_MAX_READS_PER_ALIGNMENT_START
    force_active: bool = False

    def validate(self) -> None:
        """Check the settings are usable together.

        Raises:
            ValueError: On the first invalid setting found.
        """
        if not 0.0 <= self.threshold <= 1.0:
            raise ValueError(f"threshold must be in [0, 1], got {self.threshold}")
        if self.min_region_size <= 0 or self.max_region_size <= 0:
            raise ValueError("min/max region size must be > 0")
        if self.min_region_size > self.max_region_size:
            raise ValueError(
                f"min_region_size ({self.min_region_size}) must be <= "
                f"max_region_size ({self.max_region_size})"
            )
        if self.extension < 0:
            raise ValueError(f"extension must be >= 0, got {self.extension}")
        if self.max_reads_per_alignment_start < 0:
            raise ValueError(
                f"max_reads_per_alignment_start must be >= 0, "
                f"got {self.max_reads_per_alignment_start}"
            )


@attrs.define
class TrimmingConfig:
    """Configuration for trimming regions around variants.

    Attributes:
        variant_padding: Bases of padding around the variant span.
        disable_trimming: Keep whole regions instead of trimming them.
        cap_to_extension: Limit the padded span to the region expanded by
            its own extension.
    """

    variant_padding: int = DEFAULT_VARIANT_PADDING
    disable_trimming: bool = False
    cap_to_extension: bool = False

    def validate(self) -> None:
        if self.variant_padding < 0:
            raise ValueError(f"variant_padding must be >= 0, got {self.variant_padding}")


@attrs.define
class Config:
    """Main configuration container for regionforge.

    Attributes:
        activity: Region detection configuration.
        trimming: Region trimming configuration.
    """

    activity: ActivityConfig = attrs.Factory(ActivityConfig)
    trimming: TrimmingConfig = attrs.Factory(TrimmingConfig)

    def validate(self) -> None:
        self.activity.validate()
        self.trimming.validate()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Build a configuration from nested dictionaries.

        Missing sections and keys fall back to defaults.

        Raises:
            ValueError: If a section or key is unknown, or a value is invalid.
        """
        sections = {"activity": ActivityConfig, "trimming": TrimmingConfig}
        unknown = set(data) - set(sections)
        if unknown:
            raise ValueError(f"Unknown configuration sections: {sorted(unknown)}")

        kwargs = {}
        for name, section_cls in sections.items():
            values = data.get(name) or {}
            if not isinstance(values, dict):
                raise ValueError(f"Section [{name}] must be a mapping, got {type(values).__name__}")
            known = {field.name for field in attrs.fields(section_cls)}
            bad_keys = set(values) - known
            if bad_keys:
                raise ValueError(f"Unknown keys in [{name}]: {sorted(bad_keys)}")
            kwargs[name] = section_cls(**values)

        config = cls(**kwargs)
        config.validate()
        return config

    @classmethod
    def load(cls, path: Path | str | None = None) -> Config:
        """Load configuration from a YAML file.

        Args:
            path: Path to configuration file. If None, returns default
                configuration.

        Raises:
            FileNotFoundError: If configuration file doesn't exist.
            ValueError: If configuration file is invalid.
        """
        if path is None:
            return cls()

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid configuration file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Invalid configuration file {path}: expected a mapping at top level")

        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        return attrs.asdict(self)
