"""Configuration helpers for the Confluence publisher."""

from __future__ import annotations

import dataclasses
import os
import tomllib
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, ValidationError

from .errors import ConfigurationError
from .publisher.models import PublishingStrategy


class ConfluenceCredentials(BaseModel):
    """Connection information for the Confluence REST API."""

    root_url: HttpUrl = Field(..., description="Root URL of the Confluence instance, e.g. https://host/wiki")
    username: Optional[str] = Field(None, description="User name; leave empty to send the password as a bearer token")
    password: str = Field(..., description="Password, API token or personal access token")


class PublishDefaults(BaseModel):
    """Default parameters for publish runs."""

    space_key: Optional[str] = Field(None, description="Default Confluence space key")
    ancestor_id: Optional[str] = Field(None, description="Page id the documentation is attached to")
    publishing_strategy: PublishingStrategy = Field(
        PublishingStrategy.APPEND_TO_ANCESTOR, description="How the tree attaches to the ancestor"
    )
    version_message: Optional[str] = Field(None, description="Message stored with every page version")
    notify_watchers: bool = Field(True, description="Notify page watchers about updates")
    timeout: float = Field(30.0, gt=0, description="HTTP timeout in seconds")


class PublisherConfig(BaseModel):
    """Aggregate configuration for the CLI."""

    credentials: ConfluenceCredentials
    defaults: PublishDefaults = Field(default_factory=PublishDefaults)


ENV_PREFIX = "CONFLUENCE_PUBLISHER"
_URL_ADAPTER = TypeAdapter(HttpUrl)
DEFAULT_CONFIG_PATHS = (
    Path.cwd() / "confluence-publisher.toml",
    Path.home() / ".config" / "confluence-publisher" / "config.toml",
)


@dataclasses.dataclass
class ConfigSource:
    """Result of attempting to resolve configuration data."""

    config: Optional[PublisherConfig]
    path: Optional[Path]
    error: Optional[Exception]


def _load_from_env() -> dict[str, object]:
    """Return configuration values found in ``CONFLUENCE_PUBLISHER_*`` variables."""

    def _get(name: str) -> Optional[str]:
        return os.getenv(f"{ENV_PREFIX}_{name}")

    credentials: dict[str, str] = {}
    for key in ("ROOT_URL", "USERNAME", "PASSWORD"):
        value = _get(key)
        if value:
            credentials[key.lower()] = value

    if not credentials:
        return {}

    defaults: dict[str, str] = {}
    for key in ("SPACE_KEY", "ANCESTOR_ID", "PUBLISHING_STRATEGY", "VERSION_MESSAGE", "NOTIFY_WATCHERS"):
        value = _get(key)
        if value:
            defaults[key.lower()] = value

    return {"credentials": credentials, "defaults": defaults}


def _load_toml(path: Path) -> Optional[dict]:
    if not path.exists():
        return None
    with path.open("rb") as handle:
        return tomllib.load(handle)


def resolve_config(explicit_path: Optional[Path] = None) -> ConfigSource:
    """Discover configuration using the first available source.

    The priority order is:
    1. Explicit path provided via CLI argument.
    2. Default configuration files in the working directory or the user's config directory.
    3. Environment variables with the ``CONFLUENCE_PUBLISHER_`` prefix.
    """

    errors: list[Exception] = []
    sources: list[tuple[Optional[Path], dict]] = []

    candidates = (explicit_path,) if explicit_path else DEFAULT_CONFIG_PATHS
    for path in candidates:
        try:
            data = _load_toml(path)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            errors.append(exc)
            continue
        if data is not None:
            sources.append((path, data))
            break

    if not sources:
        env_data = _load_from_env()
        if env_data:
            sources.append((None, env_data))

    for path, data in sources:
        try:
            config = PublisherConfig.model_validate(data)
            return ConfigSource(config=config, path=path, error=None)
        except ValidationError as exc:
            errors.append(exc)

    error = errors[0] if errors else None
    return ConfigSource(config=None, path=None, error=error)


def ensure_config(
    *,
    root_url: Optional[str] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
    space_key: Optional[str] = None,
    ancestor_id: Optional[str] = None,
    publishing_strategy: Optional[PublishingStrategy] = None,
    version_message: Optional[str] = None,
    notify_watchers: Optional[bool] = None,
    config_path: Optional[Path] = None,
) -> PublisherConfig:
    """Resolve configuration from precedence order and apply explicit CLI options on top."""

    source = resolve_config(config_path)

    if source.config:
        config = source.config.model_copy(deep=True)
    else:
        if not (root_url and password):
            hint = f" ({source.error})" if source.error else ""
            raise ConfigurationError(
                "Missing Confluence credentials. Provide them via CLI options, environment variables "
                "or a configuration file" + hint
            )
        try:
            config = PublisherConfig(
                credentials=ConfluenceCredentials(root_url=root_url, username=username, password=password),
            )
        except ValidationError as exc:
            raise ConfigurationError(str(exc)) from exc

    if root_url:
        try:
            config.credentials.root_url = _URL_ADAPTER.validate_python(root_url)
        except ValidationError as exc:
            raise ConfigurationError(str(exc)) from exc
    if username:
        config.credentials.username = username
    if password:
        config.credentials.password = password
    if space_key:
        config.defaults.space_key = space_key
    if ancestor_id:
        config.defaults.ancestor_id = ancestor_id
    if publishing_strategy:
        config.defaults.publishing_strategy = PublishingStrategy(publishing_strategy)
    if version_message:
        config.defaults.version_message = version_message
    if notify_watchers is not None:
        config.defaults.notify_watchers = notify_watchers

    return config
