"""Centralized application configuration with schema validation.

Settings are read from a local ``.env`` file, then from the process
environment (process values win). Both nested names (``ENGINE__DECIMAL_PRECISION``)
and flat names (``CORRELATION_DECIMAL_PRECISION``) are accepted.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from pathlib import Path
from threading import Lock

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class EngineSettings(BaseModel):
    """Numerical policy of the correlation engine."""

    model_config = ConfigDict(frozen=True)

    decimal_precision: int = Field(default=50, ge=10, le=1000)
    sqrt_epsilon: Decimal = Field(default=Decimal(0), ge=0)
    sqrt_max_iterations: int = Field(default=200, ge=1, le=100_000)
    kendall_variant: str = Field(default="b")
    max_kendall_observations: int | None = Field(default=None, ge=1)

    @field_validator("sqrt_epsilon", mode="before")
    @classmethod
    def _parse_epsilon(cls, value: object) -> Decimal:
        if value is None:
            return Decimal(0)
        if isinstance(value, Decimal):
            return value
        try:
            return Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValueError(f"sqrt_epsilon must be a decimal number, got {value!r}") from exc

    @field_validator("kendall_variant", mode="before")
    @classmethod
    def _normalize_variant(cls, value: object) -> str:
        text = str(value or "b").strip().lower()
        if text in {"a", "tau-a", "tau_a"}:
            return "a"
        if text in {"b", "tau-b", "tau_b"}:
            return "b"
        raise ValueError(f"kendall_variant must be 'a' or 'b', got {value!r}")


class ReportSettings(BaseModel):
    """Presentation of computed coefficients."""

    model_config = ConfigDict(frozen=True)

    decimal_places: int = Field(default=8, ge=0, le=28)


class LoggingSettings(BaseModel):
    """Repository-wide logging settings."""

    model_config = ConfigDict(frozen=True)

    level: str = Field(default="INFO")
    json_logs: bool = Field(default=False)

    @field_validator("level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        text = str(value or "").strip().upper()
        if text in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            return text
        return "INFO"

    @field_validator("json_logs", mode="before")
    @classmethod
    def _normalize_json_logs(cls, value: object) -> bool:
        if value is None:
            return False
        text = str(value).strip().lower()
        return text in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Top-level settings model."""

    model_config = ConfigDict(frozen=True)

    engine: EngineSettings = Field(default_factory=EngineSettings)
    report: ReportSettings = Field(default_factory=ReportSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_env(
        cls,
        *,
        env: Mapping[str, str] | None = None,
        env_file: str = ".env",
    ) -> Settings:
        """Build settings from `.env` then environment variables."""
        runtime_env = os.environ if env is None else env
        merged_env = _merge_env(_load_dotenv(Path(env_file)), runtime_env)
        payload = _build_payload(merged_env)
        return cls.model_validate(payload)


def _load_dotenv(path: Path) -> dict[str, str]:
    """Parse a minimal `.env` file format."""
    if not path.exists() or not path.is_file():
        return {}

    values: dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, raw_value = line.split("=", 1)
        key_clean = key.strip()
        value = raw_value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        if key_clean:
            values[key_clean] = value
    return values


def _merge_env(dotenv_values: Mapping[str, str], runtime_env: Mapping[str, str]) -> dict[str, str]:
    """Return env map where process env overrides `.env` values."""
    merged = {str(k): str(v) for k, v in dotenv_values.items()}
    for key, value in runtime_env.items():
        merged[str(key)] = str(value)
    return merged


def _first_non_empty(env: Mapping[str, str], *keys: str) -> str | None:
    """Return the first non-empty value for the provided keys."""
    for key in keys:
        value = str(env.get(key, "")).strip()
        if value:
            return value
    return None


def _build_payload(env: Mapping[str, str]) -> dict[str, object]:
    """Build nested settings payload from env values."""
    engine = {
        "decimal_precision": _first_non_empty(
            env, "ENGINE__DECIMAL_PRECISION", "CORRELATION_DECIMAL_PRECISION"
        ),
        "sqrt_epsilon": _first_non_empty(env, "ENGINE__SQRT_EPSILON", "CORRELATION_SQRT_EPSILON"),
        "sqrt_max_iterations": _first_non_empty(
            env, "ENGINE__SQRT_MAX_ITERATIONS", "CORRELATION_SQRT_MAX_ITERATIONS"
        ),
        "kendall_variant": _first_non_empty(
            env, "ENGINE__KENDALL_VARIANT", "CORRELATION_KENDALL_VARIANT"
        ),
        "max_kendall_observations": _first_non_empty(
            env, "ENGINE__MAX_KENDALL_OBSERVATIONS", "CORRELATION_MAX_KENDALL_OBSERVATIONS"
        ),
    }
    report = {
        "decimal_places": _first_non_empty(env, "REPORT__DECIMAL_PLACES", "CORRELATION_DECIMAL_PLACES"),
    }
    logging_settings = {
        "level": _first_non_empty(env, "LOGGING__LEVEL", "CORRELATION_LOG_LEVEL"),
        "json_logs": _first_non_empty(env, "LOGGING__JSON_LOGS", "CORRELATION_LOG_JSON"),
    }
    return {
        "engine": {k: v for k, v in engine.items() if v is not None},
        "report": {k: v for k, v in report.items() if v is not None},
        "logging": {k: v for k, v in logging_settings.items() if v is not None},
    }


_SETTINGS_LOCK = Lock()
_SETTINGS_CACHE: Settings | None = None


def get_settings(*, reload: bool = False) -> Settings:
    """Return cached settings, optionally forcing reload from env."""
    global _SETTINGS_CACHE
    with _SETTINGS_LOCK:
        if reload or _SETTINGS_CACHE is None:
            _SETTINGS_CACHE = Settings.from_env()
        return _SETTINGS_CACHE


def clear_settings_cache() -> None:
    """Clear in-process settings cache."""
    global _SETTINGS_CACHE
    with _SETTINGS_LOCK:
        _SETTINGS_CACHE = None


__all__ = [
    "EngineSettings",
    "LoggingSettings",
    "ReportSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
    "ValidationError",
]
