"""Application Configuration — layered YAML documents validated into typed settings.

Invariants:
    - base.yaml and {environment}.yaml are both required; absence is fatal
    - APP_ENVIRONMENT selects the override document; unset means local, unknown is fatal
    - Override keys win over base keys; nested mappings merge key-by-key
    - APP_-prefixed environment variables win over both documents
    - An explicit environ mapping is the only environment load_settings reads
    - Secrets are SecretStr: rendered as ********** unless get_secret_value() is called
    - Every failure surfaces as ConfigError chained to its cause (no retries)

Design Decisions:
    - pydantic-settings BaseSettings at the root: validation, type coercion and
      APP_DATABASE__HOST style overrides for container deployments
    - No cached get_settings(): the entry point loads once and passes the value into
      create_app, so tests build settings without touching the filesystem
"""

import os
from contextvars import ContextVar
from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import Any, Literal, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, SecretStr, ValidationError
from pydantic_settings import BaseSettings, EnvSettingsSource, SettingsConfigDict
from sqlalchemy.engine import URL

from newsletter.core.errors import ConfigError
from newsletter.core.subscriber_email import SubscriberEmail

ENVIRONMENT_VARIABLE = "APP_ENVIRONMENT"
CONFIGURATION_DIRECTORY = "configuration"
BASE_DOCUMENT = "base"

# Set by load_settings when the caller passes its own environment mapping.
_explicit_environ: ContextVar[Mapping[str, str] | None] = ContextVar(
    "explicit_environ", default=None,
)


class Environment(str, Enum):
    """Deployment environments: each names an override document."""
    LOCAL = "local"
    PRODUCTION = "production"

    @classmethod
    def parse(cls, value: str) -> "Environment":
        """Case-insensitive parse. Unknown values are a hard failure, never a default."""
        try:
            return cls(value.lower())
        except ValueError:
            raise ConfigError(
                f"{value} is not a supported environment. "
                f"Use either `local` or `production`.",
            ) from None


class DatabaseSettings(BaseModel):
    model_config = ConfigDict(hide_input_in_errors=True)

    username: str
    password: SecretStr
    port: int
    host: str
    database_name: str
    require_ssl: bool = False
    pool_size: int = 20
    max_overflow: int = 10

    def connection_url(self, include_database: bool = True) -> URL:
        """asyncpg URL; the server-level form omits the database name."""
        return URL.create(
            "postgresql+asyncpg",
            username=self.username,
            password=self.password.get_secret_value(),
            host=self.host,
            port=self.port,
            database=self.database_name if include_database else None,
        )

    def connect_args(self) -> dict:
        return {"ssl": "require"} if self.require_ssl else {}


class EmailClientSettings(BaseModel):
    model_config = ConfigDict(hide_input_in_errors=True)

    base_url: str
    sender_email: str
    authorization_token: SecretStr
    timeout_milliseconds: int

    @property
    def timeout(self) -> timedelta:
        return timedelta(milliseconds=self.timeout_milliseconds)

    def sender(self) -> SubscriberEmail:
        return SubscriberEmail.parse(self.sender_email)


class ApplicationSettings(BaseModel):
    port: int
    host: str
    base_url: str
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"


class MappingEnvSettingsSource(EnvSettingsSource):
    """APP_ overrides read from a given mapping instead of os.environ."""

    def __init__(self, settings_cls, environ: Mapping[str, str]):
        self._environ = environ
        super().__init__(settings_cls)

    def _load_env_vars(self) -> Mapping[str, str | None]:
        if self.case_sensitive:
            return dict(self._environ)
        return {key.lower(): value for key, value in self._environ.items()}


class Settings(BaseSettings):
    """Root settings object, built once per process."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_nested_delimiter="__",
        case_sensitive=False,
        hide_input_in_errors=True,
    )

    database: DatabaseSettings
    application: ApplicationSettings
    email_client: EmailClientSettings

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        environ = _explicit_environ.get()
        if environ is not None:
            env_settings = MappingEnvSettingsSource(settings_cls, environ)
        # First source wins: environment variables over the merged documents.
        return env_settings, init_settings


def merge_documents(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict:
    """Overlay override onto base. Nested mappings merge, other values replace."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_documents(current, value)
        else:
            merged[key] = value
    return merged


def read_document(path: Path) -> dict:
    """Read one YAML settings document. The file must exist and hold a mapping."""
    if not path.is_file():
        raise ConfigError(f"Configuration file not found: {path}")
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in configuration file {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Configuration file {path} must contain a mapping, "
            f"got {type(data).__name__}",
        )
    return data


def _document_path(directory: Path, name: str) -> Path:
    for suffix in (".yaml", ".yml"):
        candidate = directory / f"{name}{suffix}"
        if candidate.is_file():
            return candidate
    return directory / f"{name}.yaml"


def current_environment(environ: Mapping[str, str] | None = None) -> Environment:
    environ = os.environ if environ is None else environ
    return Environment.parse(environ.get(ENVIRONMENT_VARIABLE, Environment.LOCAL.value))


def load_settings(
    configuration_dir: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Merge base and environment documents, then validate into Settings.

    environ, when given, replaces os.environ for both APP_ENVIRONMENT and the
    APP_<SECTION>__<KEY> overrides.
    """
    directory = configuration_dir or Path.cwd() / CONFIGURATION_DIRECTORY
    base = read_document(_document_path(directory, BASE_DOCUMENT))
    environment = current_environment(environ)
    override = read_document(_document_path(directory, environment.value))
    merged = merge_documents(base, override)
    token = _explicit_environ.set(environ)
    try:
        return Settings(**merged)
    except ValidationError as e:
        raise ConfigError(f"Settings validation failed:\n{e}") from e
    finally:
        _explicit_environ.reset(token)
