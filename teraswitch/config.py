"""TOML-based provider configuration.

Loads ~/.teraswitch/defaults.toml (global) and teraswitch.toml (project),
merges them, and resolves the ``[provider]`` table into a ProviderConfig.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from teraswitch.core.exceptions import ConfigurationError

type RawConfig = dict[str, Any]

GLOBAL_CONFIG_PATH = Path.home() / ".teraswitch" / "defaults.toml"
PROJECT_CONFIG_NAME = "teraswitch.toml"
TOKEN_ENV_VAR = "TSW_API_TOKEN"
ENDPOINT_ENV_VAR = "TSW_ENDPOINT"


@dataclass(frozen=True, slots=True)
class ProviderConfig:
    """Provider configuration as declared by the user.

    Args:
        endpoint: TeraSwitch API URL. Default: https://api.tsw.io.
        api_token: TeraSwitch REST API token. Falls back to TSW_API_TOKEN.
        poll_interval: Seconds between readiness queries after a create. Default: 1.
        ready_timeout: Maximum seconds to wait for readiness, or None to
            wait until cancelled. Default: None.
        request_timeout: Per-request HTTP timeout in seconds. Default: 30.
    """

    endpoint: str | None = None
    api_token: str | None = field(default=None, repr=False)
    poll_interval: float = 1.0
    ready_timeout: float | None = None
    request_timeout: float = 30.0


def _deep_merge(base: RawConfig, override: RawConfig) -> RawConfig:
    """Merge ``override`` into a copy of ``base``; nested tables merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        match merged.get(key), value:
            case dict() as current, dict():
                merged[key] = _deep_merge(current, value)
            case _:
                merged[key] = value
    return merged


def _read_toml(path: Path) -> RawConfig:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {path}: {e}") from e


def load_config(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> RawConfig:
    """Merge the global defaults with the project's teraswitch.toml.

    Project values win. The result always carries a ``provider`` table.
    """
    sources = (
        global_path or GLOBAL_CONFIG_PATH,
        (project_dir or Path.cwd()) / PROJECT_CONFIG_NAME,
    )
    merged: RawConfig = {"provider": {}}
    for source in sources:
        merged = _deep_merge(merged, _read_toml(source))
    return merged


def get_api_token() -> str | None:
    """Get the API token from the environment."""
    return os.environ.get(TOKEN_ENV_VAR) or None


def resolve_provider_config(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> ProviderConfig:
    """Build a ProviderConfig from TOML files and environment variables.

    Values in files win over the environment, so a project can pin its
    endpoint while the token stays in TSW_API_TOKEN.
    """
    match load_config(project_dir=project_dir, global_path=global_path)["provider"]:
        case dict() as table:
            raw = dict(table)
        case other:
            raise ConfigurationError(f"'provider' must be a table, got {type(other).__name__}")

    known = {f.name for f in fields(ProviderConfig)}
    if unknown := sorted(set(raw) - known):
        raise ConfigurationError(
            f"Unknown provider settings: {', '.join(unknown)}. Valid: {', '.join(sorted(known))}"
        )

    raw.setdefault("endpoint", os.environ.get(ENDPOINT_ENV_VAR) or None)
    raw.setdefault("api_token", get_api_token())
    return ProviderConfig(**raw)
