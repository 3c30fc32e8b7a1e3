"""Runtime settings for ghkit.

There is no config file. Settings come from ``GHKIT_*`` environment
variables, optionally merged with a ``.env`` file (read with python-dotenv,
without touching ``os.environ``). Real environment variables win over the
dotenv file.
"""

from __future__ import annotations

import os
import shutil
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import dotenv_values

from .errors import ToolEnvironmentError

DEFAULT_LABEL = "enhancement"
EMPTY_DESCRIPTION = "_No description provided_"
NEW_LABEL_COLOR = "cccccc"
DEFAULT_API_URL = "https://api.github.com"
TOKEN_VARS = ("GHKIT_GITHUB_TOKEN", "GITHUB_TOKEN", "GH_TOKEN")


class ConfigError(ToolEnvironmentError):
    pass


@dataclass
class Settings:
    default_label: str = DEFAULT_LABEL
    empty_description: str = EMPTY_DESCRIPTION
    new_label_color: str = NEW_LABEL_COLOR
    list_limit: int = 100
    gh_path: str = "gh"
    git_path: str = "git"
    # None when fzf is disabled or not on PATH
    fzf_path: str | None = None
    dry_run_default: bool = False
    log_level: str = "WARNING"
    log_json: bool = False
    rest_enabled: bool = True
    github_token: str | None = None
    api_url: str = DEFAULT_API_URL

    @property
    def rest_available(self) -> bool:
        return self.rest_enabled and bool(self.github_token)


def _flag(env: Mapping[str, str | None], name: str) -> bool:
    value = env.get(name)
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _clean(env: Mapping[str, str | None], name: str, default: str) -> str:
    value = env.get(name)
    if value is None:
        return default
    cleaned = value.strip()
    return cleaned or default


def _positive_int(env: Mapping[str, str | None], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def _select_token(env: Mapping[str, str | None]) -> str | None:
    for name in TOKEN_VARS:
        raw = env.get(name)
        if raw is None:
            continue
        token = raw.strip()
        if token:
            return token
    return None


def _resolve_fzf(env: Mapping[str, str | None]) -> str | None:
    raw = env.get("GHKIT_FZF")
    if raw is not None and raw.strip().lower() in {"0", "false", "no", "off"}:
        return None
    return shutil.which(_clean(env, "GHKIT_FZF", "fzf"))


def _merged_environment(environ: Mapping[str, str]) -> dict[str, str | None]:
    merged: dict[str, str | None] = {}
    if environ.get("GHKIT_LOAD_DOTENV", "1").strip() != "0":
        dotenv_path = Path(environ.get("GHKIT_DOTENV") or ".env")
        if dotenv_path.is_file():
            merged.update(dotenv_values(dotenv_path))
    merged.update(environ)
    return merged


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = _merged_environment(os.environ if environ is None else environ)
    return Settings(
        default_label=_clean(env, "GHKIT_DEFAULT_LABEL", DEFAULT_LABEL),
        empty_description=_clean(env, "GHKIT_EMPTY_DESCRIPTION", EMPTY_DESCRIPTION),
        new_label_color=_clean(env, "GHKIT_NEW_LABEL_COLOR", NEW_LABEL_COLOR).lstrip("#"),
        list_limit=_positive_int(env, "GHKIT_LIST_LIMIT", 100),
        gh_path=_clean(env, "GHKIT_GH", "gh"),
        git_path=_clean(env, "GHKIT_GIT", "git"),
        fzf_path=_resolve_fzf(env),
        dry_run_default=_flag(env, "GHKIT_DRY_RUN"),
        log_level=_clean(env, "GHKIT_LOG_LEVEL", "WARNING").upper(),
        log_json=_flag(env, "GHKIT_LOG_JSON"),
        rest_enabled=not _flag(env, "GHKIT_REST_DISABLED"),
        github_token=_select_token(env),
        api_url=_clean(env, "GHKIT_GITHUB_API", DEFAULT_API_URL),
    )


__all__ = ["ConfigError", "Settings", "load_settings"]
