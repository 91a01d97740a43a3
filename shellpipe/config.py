"""YAML config parsing, defaults, validation."""

from __future__ import annotations

import os

import yaml

from shellpipe.models import PipeConfig, PipeDefaults


class ConfigError(Exception):
    pass


DEFAULT_CONFIG = os.path.join("~", ".config", "shellpipe", "config.yaml")

_BOOL_KEYS = {"export", "capture", "capture_out", "capture_err", "sh"}
_STR_KEYS = {"shell"}


def validate_version(raw: dict) -> None:
    version = raw.get("version")
    if not version:
        raise ConfigError("Missing 'version' field in config")
    if str(version) not in ("1.0", "1"):
        raise ConfigError(f"Unsupported config version: {version}")


def parse_defaults(raw: dict | None) -> PipeDefaults:
    if raw is None:
        return PipeDefaults()
    if not isinstance(raw, dict):
        raise ConfigError("'defaults' must be a mapping")

    unknown = set(raw.keys()) - _BOOL_KEYS - _STR_KEYS
    if unknown:
        raise ConfigError(f"Unknown defaults key(s): {', '.join(sorted(unknown))}")
    for key in _BOOL_KEYS & raw.keys():
        if not isinstance(raw[key], bool):
            raise ConfigError(f"'{key}' must be true or false, got {raw[key]!r}")
    for key in _STR_KEYS & raw.keys():
        if raw[key] is not None and not isinstance(raw[key], str):
            raise ConfigError(f"'{key}' must be a string, got {raw[key]!r}")

    return PipeDefaults(
        export=raw.get("export", False),
        capture=raw.get("capture", True),
        capture_out=raw.get("capture_out"),
        capture_err=raw.get("capture_err"),
        sh=raw.get("sh", False),
        shell=raw.get("shell") or None,
    )


def find_config(path: str | None = None) -> str | None:
    """Return the config path to load: explicit > $SHELLPIPE_CONFIG > default (if present)."""
    if path:
        return path
    env_path = os.environ.get("SHELLPIPE_CONFIG")
    if env_path:
        return env_path
    default = os.path.expanduser(DEFAULT_CONFIG)
    if os.path.isfile(default):
        return default
    return None


def load_config(path: str | None = None) -> PipeConfig:
    """Load and validate the config file, or return built-in defaults if there is none."""
    config_path = find_config(path)
    if config_path is None:
        return PipeConfig(version="1")

    try:
        with open(config_path) as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config {config_path}: {e.strerror or e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not raw:
        raise ConfigError(f"Empty config file: {config_path}")
    if not isinstance(raw, dict):
        raise ConfigError(f"Config must be a mapping: {config_path}")

    validate_version(raw)
    unknown = set(raw.keys()) - {"version", "defaults"}
    if unknown:
        raise ConfigError(f"Unknown config key(s): {', '.join(sorted(unknown))}")

    return PipeConfig(
        version=str(raw["version"]),
        defaults=parse_defaults(raw.get("defaults")),
        source=config_path,
    )
