"""Configuration loading for proanalyze (.proanalyze.yml plus environment)."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence

import yaml

CONFIG_FILENAME = ".proanalyze.yml"

DEFAULT_MODEL_ENDPOINT = "https://api.together.xyz/v1/chat/completions"
DEFAULT_MODEL_NAME = "mistralai/Mixtral-8x7B-Instruct-v0.1"

ENV_API_KEY_KEYS = ("PROANALYZE_API_KEY", "TOGETHER_API_KEY")
ENV_MODEL_KEYS = ("PROANALYZE_MODEL",)
ENV_ENDPOINT_KEYS = ("PROANALYZE_MODEL_ENDPOINT",)


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass(frozen=True)
class AnalysisConfig:
    """Process-wide settings for one analysis run."""

    max_files: int = 5
    max_file_content_chars: int = 2000
    max_retries: int = 3
    base_delay_ms: int = 2000
    model_endpoint: str = DEFAULT_MODEL_ENDPOINT
    model_name: str = DEFAULT_MODEL_NAME
    max_tokens: int = 2048
    temperature: float = 0.3
    top_p: float = 0.9
    request_timeout: float = 60.0
    min_response_chars: int = 50
    api_key: Optional[str] = None
    wrap_width: int = 30
    min_steps: int = 4

    def backoff_seconds(self, attempt: int) -> float:
        """Delay applied after a throttled ``attempt`` (1-based)."""
        return self.base_delay_ms * (2 ** (attempt - 1)) / 1000.0


def load_config(
    config_path: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> AnalysisConfig:
    """Load settings from ``.proanalyze.yml`` and apply environment overrides.

    ``config_path`` may point at the file itself or at the directory holding
    it. A missing file yields the defaults.
    """
    env = os.environ if environ is None else environ
    config = AnalysisConfig()

    if config_path is not None:
        config_file = _resolve_config_path(config_path)
        if config_file.exists():
            data = _read_config(config_file)
            config = _apply_file_settings(config, data)

    return _apply_env_overrides(config, env)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _apply_file_settings(config: AnalysisConfig, data: Dict[str, Any]) -> AnalysisConfig:
    model = _as_dict(data.get("model"))
    analysis = _as_dict(data.get("analysis"))
    diagrams = _as_dict(data.get("diagrams"))

    updates: Dict[str, Any] = {}
    _set_if(updates, "model_endpoint", _as_str(model.get("endpoint")))
    _set_if(updates, "model_name", _as_str(model.get("name")))
    _set_if(updates, "max_tokens", _as_positive_int(model.get("max_tokens"), "model.max_tokens"))
    _set_if(updates, "temperature", _as_float(model.get("temperature")))
    _set_if(updates, "top_p", _as_float(model.get("top_p")))
    _set_if(updates, "request_timeout", _as_float(model.get("request_timeout")))
    _set_if(updates, "api_key", _as_str(model.get("api_key")))

    _set_if(updates, "max_files", _as_positive_int(analysis.get("max_files"), "analysis.max_files"))
    _set_if(
        updates,
        "max_file_content_chars",
        _as_positive_int(analysis.get("max_file_content_chars"), "analysis.max_file_content_chars"),
    )
    _set_if(updates, "max_retries", _as_positive_int(analysis.get("max_retries"), "analysis.max_retries"))
    _set_if(updates, "base_delay_ms", _as_int(analysis.get("base_delay_ms")))
    _set_if(updates, "min_response_chars", _as_int(analysis.get("min_response_chars")))

    _set_if(updates, "wrap_width", _as_positive_int(diagrams.get("wrap_width"), "diagrams.wrap_width"))
    _set_if(updates, "min_steps", _as_positive_int(diagrams.get("min_steps"), "diagrams.min_steps"))

    return replace(config, **updates)


def _apply_env_overrides(config: AnalysisConfig, env: Mapping[str, str]) -> AnalysisConfig:
    updates: Dict[str, Any] = {}
    if config.api_key is None:
        _set_if(updates, "api_key", _first_env_value(env, ENV_API_KEY_KEYS))
    _set_if(updates, "model_name", _first_env_value(env, ENV_MODEL_KEYS))
    _set_if(updates, "model_endpoint", _first_env_value(env, ENV_ENDPOINT_KEYS))
    if not updates:
        return config
    return replace(config, **updates)


def _first_env_value(env: Mapping[str, str], keys: Sequence[str]) -> str | None:
    for key in keys:
        value = env.get(key)
        if value:
            return value
    return None


def _set_if(target: Dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        target[key] = value


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_positive_int(value: Any, label: str) -> Optional[int]:
    number = _as_int(value)
    if number is None:
        return None
    if number < 1:
        raise ConfigError(f"{label} must be a positive integer (got {number})")
    return number


__all__ = ["AnalysisConfig", "ConfigError", "CONFIG_FILENAME", "load_config"]
