"""Load and save the glide configuration as a small YAML file."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import yaml

from .domain import GlideConfig

logger = logging.getLogger(__name__)

ConfigPath = Union[str, Path]

# File key -> GlideConfig field
_KEYS = {
    "SamplingWindowSeconds": "sampling_window_s",
    "StabilizationThreshold": "stabilization_threshold",
    "AllowTrim": "allow_trim",
    "AllowControlInput": "allow_control_input",
}


def config_to_dict(config: GlideConfig) -> dict:
    return {key: getattr(config, field) for key, field in _KEYS.items()}


_TRUE_WORDS = {"true", "yes", "on", "1"}
_FALSE_WORDS = {"false", "no", "off", "0"}


def _as_flag(key: str, value) -> bool:
    """YAML booleans, or the quoted words people write for them."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise ValueError(f"{key} must be true or false, got {value!r}")


def config_from_dict(data: dict, name: str = "Default") -> GlideConfig:
    """Build a GlideConfig from file keys; missing keys take the defaults."""
    defaults = GlideConfig()
    unknown = sorted(set(data) - set(_KEYS))
    if unknown:
        logger.warning("Ignoring unknown config keys: %s", unknown)

    return GlideConfig(
        name=name,
        sampling_window_s=float(data.get("SamplingWindowSeconds", defaults.sampling_window_s)),
        stabilization_threshold=float(
            data.get("StabilizationThreshold", defaults.stabilization_threshold)
        ),
        allow_trim=_as_flag("AllowTrim", data.get("AllowTrim", defaults.allow_trim)),
        allow_control_input=_as_flag(
            "AllowControlInput", data.get("AllowControlInput", defaults.allow_control_input)
        ),
    )


def save_config(config: GlideConfig, path: ConfigPath) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(config_to_dict(config), f, sort_keys=False)


def load_config(path: ConfigPath, write_back: bool = True) -> GlideConfig:
    """
    Read the config file at `path`.

    A missing file or missing keys fall back to defaults. With `write_back`
    the effective config is saved again, so the file always lists every
    setting the user can change.
    """
    path = Path(path)
    data: dict = {}
    if path.exists():
        with path.open("r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Config file {path} must contain a mapping, got {type(loaded).__name__}")
        data = loaded

    config = config_from_dict(data, name=path.stem)
    log_config(config)

    if write_back:
        save_config(config, path)
    return config


def log_config(config: GlideConfig) -> None:
    logger.info("Sampling window: %s seconds", config.sampling_window_s)
    logger.info("Stabilization threshold: %s%%", 100.0 * config.stabilization_threshold)
    logger.info("Trim allowed: %s", "yes" if config.allow_trim else "no")
    logger.info("Control input allowed: %s", "yes" if config.allow_control_input else "no")
