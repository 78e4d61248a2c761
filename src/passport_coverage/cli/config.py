"""Configuration helpers for the passport-coverage CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from passport_coverage.datasets import DEFAULT_CSCA_URL, DEFAULT_DSC_URL
from passport_coverage.overrides import (
    DEFAULT_COUNTRY_OVERRIDES,
    CountryOverrides,
    OverridesError,
    overrides_from_mapping,
)
from passport_coverage.support_table import CANONICAL_TABLE_VERSION, available_table_versions

DEFAULT_CONFIG_PATH = Path.home() / ".passport_coverage" / "config.toml"
DSC_URL_ENV_VAR = "PASSPORT_COVERAGE_DSC_URL"
CSCA_URL_ENV_VAR = "PASSPORT_COVERAGE_CSCA_URL"
TABLE_VERSION_ENV_VAR = "PASSPORT_COVERAGE_TABLE_VERSION"
_LOG_LEVELS = {"debug", "info", "warning", "error", "critical"}


@dataclass(frozen=True)
class CoverageConfig:
    dsc_url: str = DEFAULT_DSC_URL
    csca_url: str = DEFAULT_CSCA_URL
    country_names_path: str | None = None
    issuing_countries_path: str | None = None
    table_version: str = CANONICAL_TABLE_VERSION
    support_table_path: str | None = None
    timeout: float = 10.0
    log_level: str = "warning"
    overrides: CountryOverrides = field(default_factory=lambda: DEFAULT_COUNTRY_OVERRIDES)


class ConfigError(ValueError):
    """Raised when CLI config is invalid."""


def _load_toml(path: Path) -> dict[str, Any]:
    raw = path.read_text(encoding="utf-8")

    try:  # Python 3.11+
        import tomllib  # type: ignore[attr-defined]
        try:
            return tomllib.loads(raw)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"invalid TOML in {path}: {exc}") from exc
    except ModuleNotFoundError:
        try:
            import tomli
        except ModuleNotFoundError as exc:
            raise ConfigError("toml parser unavailable; install tomli for Python < 3.11") from exc
        try:
            return tomli.loads(raw)
        except tomli.TOMLDecodeError as exc:
            raise ConfigError(f"invalid TOML in {path}: {exc}") from exc


def _optional_path(value: Any) -> str | None:
    if value is None:
        return None
    return str(value).strip() or None


def _required_str(source: dict[str, Any], key: str, default: str, env_var: str | None) -> str:
    env_value = os.getenv(env_var) if env_var else None
    if env_value and env_value.strip():
        return env_value.strip()
    value = str(source.get(key, default)).strip()
    if not value:
        raise ConfigError(f"{key} must not be empty")
    return value


def load_cli_config(path: str | Path | None = None) -> CoverageConfig:
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH
    parsed: dict[str, Any] = _load_toml(config_path) if config_path.exists() else {}

    section = parsed.get("coverage")
    if isinstance(section, dict):
        source = section
    elif section is None:
        source = parsed
    else:
        raise ConfigError("[coverage] must be a table")

    dsc_url = _required_str(source, "dsc_url", DEFAULT_DSC_URL, DSC_URL_ENV_VAR)
    csca_url = _required_str(source, "csca_url", DEFAULT_CSCA_URL, CSCA_URL_ENV_VAR)

    table_version = _required_str(
        source, "table_version", CANONICAL_TABLE_VERSION, TABLE_VERSION_ENV_VAR
    )
    if table_version not in available_table_versions():
        raise ConfigError(
            f"table_version must be one of: {', '.join(available_table_versions())}"
        )

    raw_timeout = source.get("timeout", 10.0)
    if isinstance(raw_timeout, bool) or not isinstance(raw_timeout, (int, float)):
        raise ConfigError("timeout must be a number")
    if raw_timeout <= 0:
        raise ConfigError("timeout must be positive")

    log_level = str(source.get("log_level", "warning")).strip().lower()
    if log_level not in _LOG_LEVELS:
        raise ConfigError("log_level must be one of: debug, info, warning, error, critical")

    raw_overrides = parsed.get("overrides")
    if raw_overrides is None:
        overrides = DEFAULT_COUNTRY_OVERRIDES
    elif isinstance(raw_overrides, dict):
        try:
            overrides = overrides_from_mapping(raw_overrides)
        except OverridesError as exc:
            raise ConfigError(str(exc)) from exc
    else:
        raise ConfigError("[overrides] must be a table")

    return CoverageConfig(
        dsc_url=dsc_url,
        csca_url=csca_url,
        country_names_path=_optional_path(source.get("country_names_path")),
        issuing_countries_path=_optional_path(source.get("issuing_countries_path")),
        table_version=table_version,
        support_table_path=_optional_path(source.get("support_table_path")),
        timeout=float(raw_timeout),
        log_level=log_level,
        overrides=overrides,
    )
