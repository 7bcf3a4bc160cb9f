"""Settings resolution with profile support and write-back to the profile file."""

import os
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any

import tomlkit
import typer
from pydantic import SecretStr
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

CONFIG_PATH = Path.home() / ".config" / "jiranote" / "config.toml"

# Changing any of these invalidates the authenticated client.
CONNECTION_FIELDS = ("host", "username", "api_key")


class JiraSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="JIRANOTE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_profile: str | None = None

    # Connection
    host: str = ""  # https://my-company.atlassian.net
    username: str = ""  # usually an email address
    api_key: SecretStr | None = None

    # Output formatting
    render_to_markdown: bool = True
    issue_yaml_key: str = "issues"
    include_all: bool = False  # include the raw API fields in picked output

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Profile values arrive as init kwargs; env vars and .env win over them.
        return env_settings, dotenv_settings, init_settings, file_secret_settings

    @property
    def is_configured(self) -> bool:
        return bool(self.host and self.username and self.api_key and self.api_key.get_secret_value())


@lru_cache(maxsize=1)
def _load_toml() -> tomlkit.TOMLDocument:
    """Load ~/.config/jiranote/config.toml, returning empty document if missing."""
    if not CONFIG_PATH.exists():
        return tomlkit.document()
    return tomlkit.parse(CONFIG_PATH.read_text())


def _list_profiles(config: Mapping) -> list[str]:
    # tomlkit Table implements MutableMapping but not dict, so check Mapping
    return [k for k, v in config.items() if isinstance(v, Mapping)]


def resolve_profile(profile: str | None = None) -> str | None:
    """Return the active profile name.

    Precedence (highest to lowest):
    1. profile argument (--profile CLI flag)
    2. JIRANOTE_DEFAULT_PROFILE env var
    3. default_profile key in ~/.config/jiranote/config.toml
    4. First profile defined in ~/.config/jiranote/config.toml
    """
    toml_config = _load_toml()
    profiles = _list_profiles(toml_config)
    return (
        profile
        or os.environ.get("JIRANOTE_DEFAULT_PROFILE")
        or toml_config.get("default_profile")
        or (profiles[0] if profiles else None)
    )


def get_settings(profile: str | None = None) -> JiraSettings:
    """Resolve the active profile and return a populated JiraSettings.

    Env vars and .env always override profile values. Missing credentials are not
    an error here: they leave the Jira client uninitialized.
    """
    toml_config = _load_toml()
    active = resolve_profile(profile)

    profile_defaults: dict = {}
    if active:
        if active in toml_config and isinstance(toml_config[active], Mapping):
            profile_defaults = dict(toml_config[active])
        elif active not in toml_config:
            profiles = _list_profiles(toml_config)
            typer.echo(f"Profile '{active}' not found in {CONFIG_PATH}. Available: {profiles or '(none)'}")
            raise typer.Exit(1)

    return JiraSettings(**profile_defaults)


def save_profile(profile: str, values: Mapping[str, Any], make_default: bool = False) -> None:
    """Merge values into the [profile] table of the config file, keeping comments."""
    CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
    doc = tomlkit.parse(CONFIG_PATH.read_text()) if CONFIG_PATH.exists() else tomlkit.document()

    if profile not in doc:
        doc.add(profile, tomlkit.table())
    for key, value in values.items():
        if isinstance(value, SecretStr):
            value = value.get_secret_value()
        if value is None:
            doc[profile].pop(key, None)
        else:
            doc[profile][key] = value
    if make_default:
        doc["default_profile"] = profile

    CONFIG_PATH.write_text(tomlkit.dumps(doc))
    _load_toml.cache_clear()
