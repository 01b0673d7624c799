"""Rule policy and application settings.

Settings come from, lowest precedence first: field defaults, a config
file (``ianitorlint.toml``, a JSON file, or ``[tool.ianitorlint]`` in
pyproject.toml), and ``IANITOR_*`` environment variables. A file that
cannot be loaded puts the tool in safe mode: defaults are used and the
error is carried on ConfigLoadResult for the CLI to show.

Values are used as supplied. Range checks (positive thresholds and the
like) belong to whoever writes the config.
"""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Mapping
from contextlib import nullcontext
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from unittest.mock import patch

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from ianitorlint.core.result import ConfigurationError

CONFIG_ENV_VAR = "IANITORLINT_CONFIG"
ENV_PREFIX = "IANITOR_"
DEFAULT_CONFIG_NAME = "ianitorlint.toml"


class ComplexityPolicy(BaseModel):
    """Scoring thresholds for one analysis pass.

    Field names double as the rule's camelCase option names
    (``baseThreshold``, ``interfacePenalty``...), so an options object
    copied from an eslint config loads unchanged.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    base_threshold: float = Field(
        default=10, description="Minimum score requiring an explicit check on a plain type."
    )
    warn_threshold: float = Field(default=15, description="Scores at or above this are warnings.")
    error_threshold: float = Field(
        default=25,
        description="Scores at or above this are errors; twice this caps accumulation.",
    )
    interface_penalty: float = Field(
        default=20, description="Base score of every interface and its reporting floor."
    )
    performance_mode: bool = Field(
        default=True, description="Clamp accumulation at error_threshold * 2."
    )
    entry_depth: int = Field(
        default=0,
        description="Depth at which declarations are scored. 0 zeroes every top-level score.",
    )

    @property
    def ceiling(self) -> float:
        return self.error_threshold * 2


@dataclass
class ConfigLoadResult:
    """Where the active configuration came from."""

    path: Path
    file_loaded: bool
    env_overrides: set[str]
    error: str | None = None


class AppConfig(BaseSettings):
    """Application-wide configuration."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
        extra="ignore",
    )

    policy: ComplexityPolicy = Field(default_factory=ComplexityPolicy)
    validator_namespace: str = Field(
        default="Ianitor", description="Identifier whose member calls construct validators."
    )
    static_marker: str = Field(
        default="Ianitor.Static",
        description="Type that extracts a validator's static type (Static<typeof v>).",
    )
    log_level: str = Field(default="WARNING", description="Log level for ianitorlint output.")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # File values arrive as init kwargs; IANITOR_* variables win over them.
        return (env_settings, init_settings)


def _config_file_path(explicit: Path | None, environ: Mapping[str, str]) -> Path:
    if explicit is not None:
        return explicit.expanduser()
    from_env = environ.get(CONFIG_ENV_VAR)
    return Path(from_env).expanduser() if from_env else Path(DEFAULT_CONFIG_NAME)


def _parse_config_file(path: Path) -> dict[str, Any]:
    """Return the ianitorlint settings stored in ``path``, or {} if it is absent."""
    if not path.is_file():
        return {}

    text = path.read_text(encoding="utf-8")
    try:
        document = json.loads(text) if path.suffix.lower() == ".json" else tomllib.loads(text)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ConfigurationError(f"Syntax error in {path}: {exc}") from exc

    if path.name == "pyproject.toml" and isinstance(document, dict):
        document = document.get("tool", {}).get("ianitorlint", {})
    if not isinstance(document, dict):
        raise ConfigurationError(f"ianitorlint settings in {path} must be a table.")
    return document


def _env_override_keys(environ: Mapping[str, str]) -> set[str]:
    """Dotted names of the settings that IANITOR_* variables replace."""
    variables = {
        f"policy.{name}": f"{ENV_PREFIX}POLICY__{name.upper()}"
        for name in ComplexityPolicy.model_fields
    }
    variables.update(
        {name: f"{ENV_PREFIX}{name.upper()}" for name in AppConfig.model_fields if name != "policy"}
    )
    return {dotted for dotted, variable in variables.items() if variable in environ}


def load_config(
    config_path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> tuple[AppConfig, ConfigLoadResult]:
    """Load configuration, falling back to defaults (safe mode) on any error.

    ``env`` layers extra variables over ``os.environ`` for this call only.
    The error, if any, is reported on the returned ConfigLoadResult.
    """
    environ = {**os.environ, **(env or {})}
    path = _config_file_path(config_path, environ)
    meta = ConfigLoadResult(path=path, file_loaded=False, env_overrides=_env_override_keys(environ))

    try:
        file_values = _parse_config_file(path)
    except ConfigurationError as exc:
        meta.error = str(exc)
        file_values = {}
    else:
        meta.file_loaded = path.is_file()

    overlay = patch.dict(os.environ, dict(env)) if env else nullcontext()
    try:
        with overlay:
            config = AppConfig(**file_values)
    except ValidationError as exc:
        meta.error = str(exc)
        # The environment may be what failed, so no source is consulted.
        config = AppConfig.model_construct()

    return config, meta


__all__ = [
    "AppConfig",
    "ComplexityPolicy",
    "ConfigLoadResult",
    "load_config",
]
