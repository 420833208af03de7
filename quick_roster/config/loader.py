from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from quick_roster.models.records import Location

"""Config loader.

Responsibilities:
- Load the YAML config (default ``config/quick_roster.yml``)
- Validate it against ``quick_roster/contracts/config_schema.json``
- Apply defaults, then environment overrides (``ROSTER_API_ENDPOINT``)
"""

SCHEMA_PATH = Path(__file__).resolve().parent.parent / "contracts" / "config_schema.json"
DEFAULT_CONFIG_PATH = Path("config/quick_roster.yml")

DEFAULT_API_ENDPOINT = "http://localhost:8000"
DEFAULT_ROSTER_PATH = "/generate_roster"
DEFAULT_REQUEST_TIMEOUT = 30.0


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class DatabaseConfig:
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class AppConfig:
    api_endpoint: str = DEFAULT_API_ENDPOINT
    roster_path: str = DEFAULT_ROSTER_PATH
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    organisation_id: str | None = None
    default_location: Location | None = None
    database: DatabaseConfig = field(default_factory=DatabaseConfig)


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: the schema file is missing or unreadable, or the data
            violates it (unknown keys, wrong types, ...)
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def build_config(data: Mapping[str, Any], env: Mapping[str, str] | None = None) -> AppConfig:
    """Validated config dict (+ environment) -> AppConfig."""
    data = dict(data)
    _validate_config_schema(data)
    env = os.environ if env is None else env

    db_raw = data.get("database", {})
    loc_raw = data.get("default_location")
    default_location = None
    if loc_raw:
        default_location = Location(id=loc_raw.get("id"), name=loc_raw["name"])

    return AppConfig(
        api_endpoint=env.get("ROSTER_API_ENDPOINT") or data.get("api_endpoint", DEFAULT_API_ENDPOINT),
        roster_path=data.get("roster_path", DEFAULT_ROSTER_PATH),
        request_timeout=float(data.get("request_timeout", DEFAULT_REQUEST_TIMEOUT)),
        organisation_id=data.get("organisation_id"),
        default_location=default_location,
        database=DatabaseConfig(
            host=db_raw.get("host"),
            port=db_raw.get("port"),
            user=db_raw.get("user"),
            password=db_raw.get("password"),
            database=db_raw.get("database"),
            dsn=db_raw.get("dsn"),
        ),
    )


def load_config(path: Path, required: bool = True, env: Mapping[str, str] | None = None) -> AppConfig:
    """Load and validate the YAML config at ``path``.

    A missing file is an error when ``required``; otherwise defaults (plus
    environment overrides) are returned.
    """
    if not path.exists():
        if required:
            raise ConfigError(f"config file not found: {path}")
        return build_config({}, env=env)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")
    return build_config(data, env=env)
