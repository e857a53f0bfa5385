"""Runtime settings.

Resolved in order: built-in defaults, an optional YAML file, environment
variables, then explicit overrides (CLI flags).
"""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

DEFAULT_API_HOST = "ws.atonline.com"
DEFAULT_API_PREFIX = "/_rest/"
DEFAULT_DOC_URL = "https://raw.githubusercontent.com/KarpelesLab/klbfw/master/doc/"
DEFAULT_DOC_FILE = "README.md"
DEFAULT_MAX_DEPTH = 4

CONFIG_ENV = "KLB_DESCRIBE_CONFIG"
ENV_VARS = {
    "api_host": "KLB_API_HOST",
    "api_prefix": "KLB_API_PREFIX",
    "doc_base_url": "KLB_DOC_URL",
    "timeout": "KLB_TIMEOUT",
}


class ConfigError(Exception):
    """The configuration file or environment holds unusable values."""


class Settings(BaseModel):
    api_host: str = DEFAULT_API_HOST
    api_prefix: str = DEFAULT_API_PREFIX
    doc_base_url: str = DEFAULT_DOC_URL
    timeout: float = 30.0
    max_depth: int = DEFAULT_MAX_DEPTH

    @property
    def api_base_url(self) -> str:
        return f"https://{self.api_host}{self.api_prefix}"


def _read_yaml(path: Path) -> dict:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def load_settings(path: Path | None = None, **overrides) -> Settings:
    """Build Settings from the config file, environment and overrides."""
    values: dict = {}

    if path is None and os.getenv(CONFIG_ENV):
        path = Path(os.environ[CONFIG_ENV])
    if path is not None:
        values.update(_read_yaml(path))

    for field, var in ENV_VARS.items():
        if os.getenv(var):
            values[field] = os.environ[var]

    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return Settings(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}") from e
