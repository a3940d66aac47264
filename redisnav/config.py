"""Configuration file loading and effective app-config resolution.

The optional TOML file holds ``[defaults]`` and named ``[profiles.*]``.
A missing or malformed file behaves like an empty one.
Command-line values win over profile values, which win over defaults.
"""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from urllib.parse import quote, urlsplit, urlunsplit

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "redis-nav"
CONFIG_FILENAME = "config.toml"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 6379
DEFAULT_DELIMITERS: tuple[str, ...] = (":",)
PASSWORD_ENV_VAR = "REDIS_PASSWORD"
URL_SCHEMES = ("redis://", "rediss://", "unix://")


class ConfigError(Exception):
    """Configuration cannot produce a usable connection."""


class ProtectionLevel(Enum):
    WARN = "warn"
    CONFIRM = "confirm"
    BLOCK = "block"


@dataclass(frozen=True)
class ProtectedNamespace:
    prefix: str
    level: ProtectionLevel


@dataclass(frozen=True)
class ConnectionConfig:
    url: str
    db: int = 0
    readonly: bool = False


@dataclass(frozen=True)
class UiConfig:
    delimiters: tuple[str, ...] = DEFAULT_DELIMITERS
    protected_namespaces: tuple[ProtectedNamespace, ...] = ()
    theme: str | None = None


@dataclass(frozen=True)
class AppConfig:
    connection: ConnectionConfig
    ui: UiConfig = field(default_factory=UiConfig)


@dataclass(frozen=True)
class Profile:
    url: str | None = None
    host: str | None = None
    port: int | None = None
    password: str | None = None
    password_env: str | None = None
    db: int | None = None
    delimiters: tuple[str, ...] = ()
    readonly: bool = False
    protected_namespaces: tuple[ProtectedNamespace, ...] = ()


@dataclass(frozen=True)
class ConfigFile:
    delimiters: tuple[str, ...] = ()
    theme: str | None = None
    profiles: dict[str, Profile] = field(default_factory=dict)


def _str_or_none(value: object) -> str | None:
    return value if isinstance(value, str) and value else None


def _int_or_none(value: object) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _delimiters(value: object) -> tuple[str, ...]:
    """Keep the first character of every non-empty string entry."""
    if not isinstance(value, list):
        return ()
    return tuple(item[0] for item in value if isinstance(item, str) and item)


def _protected_namespaces(value: object) -> tuple[ProtectedNamespace, ...]:
    if not isinstance(value, list):
        return ()
    out: list[ProtectedNamespace] = []
    for raw in value:
        if not isinstance(raw, dict):
            continue
        prefix = raw.get("prefix")
        level_name = raw.get("level")
        if not isinstance(prefix, str) or not prefix or not isinstance(level_name, str):
            continue
        try:
            level = ProtectionLevel(level_name.lower())
        except ValueError:
            logger.warning("ignoring protected namespace %r with unknown level %r", prefix, level_name)
            continue
        out.append(ProtectedNamespace(prefix=prefix, level=level))
    return tuple(out)


def _profile(raw: Mapping[str, object]) -> Profile:
    return Profile(
        url=_str_or_none(raw.get("url")),
        host=_str_or_none(raw.get("host")),
        port=_int_or_none(raw.get("port")),
        password=_str_or_none(raw.get("password")),
        password_env=_str_or_none(raw.get("password_env")),
        db=_int_or_none(raw.get("db")),
        delimiters=_delimiters(raw.get("delimiters")),
        readonly=raw.get("readonly") is True,
        protected_namespaces=_protected_namespaces(raw.get("protected_namespaces")),
    )


def parse_config(data: Mapping[str, object]) -> ConfigFile:
    """Convert decoded TOML into a ``ConfigFile``, dropping malformed entries."""
    defaults = data.get("defaults")
    if not isinstance(defaults, dict):
        defaults = {}
    raw_profiles = data.get("profiles")
    profiles: dict[str, Profile] = {}
    if isinstance(raw_profiles, dict):
        for name, raw in raw_profiles.items():
            if isinstance(name, str) and isinstance(raw, dict):
                profiles[name] = _profile(raw)
    return ConfigFile(
        delimiters=_delimiters(defaults.get("delimiters")),
        theme=_str_or_none(defaults.get("theme")),
        profiles=profiles,
    )


def load_config_file(path: Path | None = None) -> ConfigFile | None:
    """Load the TOML config, returning ``None`` when it is missing or unreadable."""
    config_path = DEFAULT_CONFIG_PATH if path is None else path
    try:
        with config_path.open("rb") as handle:
            data = tomllib.load(handle)
    except FileNotFoundError:
        return None
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("ignoring config file %s: %s", config_path, exc)
        return None
    return parse_config(data)


def is_url(value: str) -> bool:
    return value.startswith(URL_SCHEMES)


def build_url(host: str, port: int, password: str | None = None) -> str:
    if password:
        return f"redis://:{quote(password, safe='')}@{host}:{port}"
    return f"redis://{host}:{port}"


def with_db(url: str, db: int) -> str:
    """Append ``/db`` to ``url`` unless it already selects a database."""
    if db <= 0 or url.startswith("unix://"):
        return url
    parts = urlsplit(url)
    if parts.path not in ("", "/"):
        return url
    return urlunsplit((parts.scheme, parts.netloc, f"/{db}", parts.query, parts.fragment))


def redact_url(url: str) -> str:
    """Hide the password part of ``url`` for display."""
    parts = urlsplit(url)
    if parts.password is None:
        return url
    userinfo = f"{parts.username}:***" if parts.username else ":***"
    host = parts.netloc.rsplit("@", 1)[1]
    return urlunsplit((parts.scheme, f"{userinfo}@{host}", parts.path, parts.query, parts.fragment))


def _profile_url(profile: Profile, host: str, port: int, password: str | None, environ: Mapping[str, str]) -> str:
    if profile.url is not None:
        return profile.url
    profile_password = profile.password
    if profile_password is None and profile.password_env is not None:
        profile_password = environ.get(profile.password_env)
    return build_url(
        profile.host or host,
        profile.port if profile.port is not None else port,
        profile_password or password or environ.get(PASSWORD_ENV_VAR),
    )


def resolve_app_config(
    *,
    connection: str | None = None,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    password: str | None = None,
    db: int = 0,
    delimiters: tuple[str, ...] = (),
    profile_name: str | None = None,
    readonly: bool = False,
    theme: str | None = None,
    file_config: ConfigFile | None = None,
    environ: Mapping[str, str] | None = None,
) -> AppConfig:
    """Merge command-line values, the selected profile, and file defaults.

    ``connection`` is either a URL or the name of a profile. Raises
    ``ConfigError`` when ``profile_name`` names a profile that does not exist.
    """
    env = os.environ if environ is None else environ
    profiles = file_config.profiles if file_config is not None else {}
    profile: Profile | None = None

    if connection is not None and is_url(connection):
        url = connection
    elif connection is not None and connection in profiles:
        profile = profiles[connection]
        url = _profile_url(profile, host, port, password, env)
    elif connection is not None:
        url = connection
    elif profile_name is not None:
        if file_config is None:
            raise ConfigError(f"profile {profile_name!r} requested but no config file was found")
        if profile_name not in profiles:
            raise ConfigError(f"profile {profile_name!r} not found in config")
        profile = profiles[profile_name]
        url = _profile_url(profile, host, port, password, env)
    else:
        url = build_url(host, port, password or env.get(PASSWORD_ENV_VAR))

    effective_db = db
    if profile is not None and profile.db is not None and db == 0:
        effective_db = profile.db

    if delimiters:
        effective_delimiters = delimiters
    elif profile is not None and profile.delimiters:
        effective_delimiters = profile.delimiters
    elif file_config is not None and file_config.delimiters:
        effective_delimiters = file_config.delimiters
    else:
        effective_delimiters = DEFAULT_DELIMITERS

    return AppConfig(
        connection=ConnectionConfig(
            url=with_db(url, effective_db),
            db=effective_db,
            readonly=readonly or (profile is not None and profile.readonly),
        ),
        ui=UiConfig(
            delimiters=effective_delimiters,
            protected_namespaces=profile.protected_namespaces if profile is not None else (),
            theme=theme or (file_config.theme if file_config is not None else None),
        ),
    )


def find_protection(key: str, namespaces: tuple[ProtectedNamespace, ...]) -> ProtectedNamespace | None:
    """First protected namespace whose prefix matches ``key``."""
    for namespace in namespaces:
        if key.startswith(namespace.prefix):
            return namespace
    return None
