from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from common.math_utils import in_range
from common.rgba import RGBA

from .errors import E1004_CONFIG_INVALID, ConfigError

DEFAULT_THRESHOLDS = Path(__file__).resolve().parents[2] / "config" / "compare_thresholds.v1.yaml"


@dataclass(frozen=True)
class CompareThresholds:
    threshold: RGBA
    profile: str | None = None


def _config_error(message: str) -> ConfigError:
    return ConfigError(
        code=E1004_CONFIG_INVALID,
        message=message,
        hint="Use a list of four integers in 0-255, e.g. threshold: [3, 3, 3, 3].",
    )


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text())
    except OSError as exc:
        raise ConfigError(
            code=E1004_CONFIG_INVALID,
            message=f"Cannot read thresholds YAML {path}: {exc}",
            hint="Pass an existing thresholds file with --thresholds.",
        ) from exc
    except yaml.YAMLError as exc:
        raise ConfigError(
            code=E1004_CONFIG_INVALID,
            message=f"Malformed thresholds YAML {path}: {exc}",
            hint="Fix the YAML syntax; see config/compare_thresholds.v1.yaml.",
        ) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            code=E1004_CONFIG_INVALID,
            message=f"Expected mapping at top of YAML: {path}",
            hint="Ensure the thresholds YAML is a mapping at the top level.",
        )
    return data


def load_thresholds(path: Path) -> dict[str, Any]:
    return _load_yaml(path)


def _parse_channel(item: Any) -> int:
    if isinstance(item, (bool, float)):
        raise ValueError(f"Threshold channel must be an integer: {item!r}")
    return int(item)


def parse_threshold(value: Any) -> RGBA:
    if isinstance(value, str):
        value = [item.strip() for item in value.split(",") if item.strip()]
    if not isinstance(value, (list, tuple)) or len(value) != 4:
        raise _config_error(f"Threshold must have four channels: {value!r}")
    try:
        channels = [_parse_channel(item) for item in value]
    except (TypeError, ValueError) as exc:
        raise _config_error(f"Invalid threshold values: {value!r}") from exc
    if not all(in_range(channel, 0, 255) for channel in channels):
        raise _config_error(f"Threshold channels out of range: {channels}")
    return RGBA.from_array(channels)


def load_compare_thresholds(data: dict[str, Any], profile: str | None = None) -> CompareThresholds:
    section = data.get("bilinear", {}) or {}
    if profile is not None:
        profiles = data.get("profiles", {}) or {}
        if profile not in profiles:
            raise ConfigError(
                code=E1004_CONFIG_INVALID,
                message=f"Unknown threshold profile: {profile}",
                hint=f"Available profiles: {', '.join(sorted(profiles)) or 'none'}.",
            )
        section = {**section, **(profiles[profile] or {})}
    if "threshold" not in section:
        raise _config_error("Missing bilinear threshold")
    return CompareThresholds(threshold=parse_threshold(section["threshold"]), profile=profile)
