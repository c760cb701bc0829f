"""Configuration loading for the stereo frontend."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml
from jsonschema import Draft7Validator

from vio_stereo.exceptions import ConfigValidationError, InvalidConfigError
from vio_stereo.log_config.logger import get_logger

logger = get_logger(__name__)

CONFIG_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "stereo_matching": {
            "type": "object",
            "properties": {
                "min_point_dist": {"type": "number", "exclusiveMinimum": 0},
                "max_point_dist": {"type": "number", "exclusiveMinimum": 0},
            },
            "additionalProperties": False,
        },
        "frontend": {
            "type": "object",
            "properties": {
                "use_stereo_measurements": {"type": "boolean"},
                "check_stereo_frame": {"type": "boolean"},
                "freeze_frames": {"type": "boolean"},
                "write_rectified": {"type": "boolean"},
                "output_dir": {"type": "string", "minLength": 1},
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
}


@dataclass(frozen=True)
class StereoMatchingParams:
    min_point_dist: float = 0.1     # m
    max_point_dist: float = 15.0    # m


@dataclass(frozen=True)
class FrontendParams:
    use_stereo_measurements: bool = True
    check_stereo_frame: bool = True      # O(N) consistency pass per frame
    freeze_frames: bool = True
    write_rectified: bool = False
    output_dir: str = "outputImages"


@dataclass(frozen=True)
class StereoConfig:
    stereo_matching: StereoMatchingParams = field(default_factory=StereoMatchingParams)
    frontend: FrontendParams = field(default_factory=FrontendParams)


def default_config() -> StereoConfig:
    return StereoConfig()


def validate_config(data: Dict[str, Any]) -> None:
    """Validate raw config data against the schema and range rules.

    Raises:
        ConfigValidationError: If any check fails
    """
    validator = Draft7Validator(CONFIG_SCHEMA)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    if errors:
        messages = []
        for error in errors:
            path = ".".join(str(p) for p in error.path) or "<root>"
            messages.append(f"{path}: {error.message}")
        logger.error(f"Configuration validation failed with {len(errors)} error(s)")
        raise ConfigValidationError(
            f"Configuration validation failed: {'; '.join(messages)}",
            validation_errors=messages,
        )

    matching = data.get("stereo_matching", {})
    lo = matching.get("min_point_dist", StereoMatchingParams.min_point_dist)
    hi = matching.get("max_point_dist", StereoMatchingParams.max_point_dist)
    if lo >= hi:
        msg = f"stereo_matching: min_point_dist ({lo}) must be < max_point_dist ({hi})"
        raise ConfigValidationError(msg, validation_errors=[msg])


def config_from_dict(data: Dict[str, Any]) -> StereoConfig:
    validate_config(data)
    return StereoConfig(
        stereo_matching=StereoMatchingParams(**data.get("stereo_matching", {})),
        frontend=FrontendParams(**data.get("frontend", {})),
    )


def load_config(path: Path | str) -> StereoConfig:
    """Load and validate configuration from YAML file.

    Args:
        path: Path to configuration file

    Returns:
        Validated StereoConfig instance

    Raises:
        ConfigError: If configuration is invalid or cannot be loaded
    """
    path = Path(path)
    logger.info(f"Loading configuration from {path}")
    if not path.exists():
        raise InvalidConfigError(f"Configuration file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML configuration: {e}")
        raise InvalidConfigError(f"Failed to parse configuration file: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise InvalidConfigError(f"Configuration root must be a mapping, got {type(data).__name__}")

    return config_from_dict(data)
