"""Configuration loading from YAML or JSON documents."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Literal, Mapping

import requests
from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from orderflow.core.errors import ConfigError, NetworkError
from orderflow.core.settings import is_url

from .models import AppConfig

LOGGER = logging.getLogger(__name__)

ConfigFormat = Literal["yaml", "json"]

_YAML_SUFFIXES = (".yaml", ".yml")
_YAML_PREFIXES = ("port:", "config:")
DEFAULT_TIMEOUT = 10


def detect_format(content: str, location: str = "") -> ConfigFormat:
    """Guess the document format from its location suffix or leading token.

    ``.yaml``/``.yml`` means YAML and ``.json`` means JSON. Otherwise a
    document starting with ``port:`` or ``config:`` is treated as the legacy
    YAML layout and anything else as JSON.
    """

    lowered = location.lower().split("?", 1)[0]
    if lowered.endswith(_YAML_SUFFIXES):
        return "yaml"
    if lowered.endswith(".json"):
        return "json"
    if content.lstrip().startswith(_YAML_PREFIXES):
        return "yaml"
    return "json"


def _unwrap(document: Any) -> Dict[str, Any]:
    if not isinstance(document, Mapping):
        raise ConfigError("configuration document must be a mapping at the top level")
    # Legacy layout nests the application config under ``config:`` next to
    # server settings such as ``port:``.
    inner = document.get("config")
    if isinstance(inner, Mapping):
        return dict(inner)
    return dict(document)


def _read_document(content: str, fmt: ConfigFormat) -> Any:
    if fmt == "yaml":
        yaml = YAML(typ="safe")
        try:
            return yaml.load(content)
        except YAMLError as exc:
            raise ConfigError(f"invalid YAML: {exc}") from exc
    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON: {exc}") from exc


def parse_config(content: str, fmt: ConfigFormat | None = None) -> AppConfig:
    """Parse configuration text into an :class:`AppConfig`.

    Args:
        content: YAML or JSON text.
        fmt: Explicit format; detected from the content when omitted.

    Raises:
        ConfigError: When the document cannot be parsed, does not match the
            schema, or defines no sources.
    """

    fmt = fmt or detect_format(content)
    raw = _unwrap(_read_document(content, fmt))
    try:
        config = AppConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"invalid configuration: {exc}") from exc

    if not config.sources:
        raise ConfigError(
            "no sources defined",
            ["Add at least one entry under 'sources' in the configuration"],
        )
    LOGGER.info("Configuration %r parsed with %s sources", config.name, len(config.sources))
    return config


def load_config(path: str | Path) -> AppConfig:
    """Load configuration from a local YAML/JSON file."""

    cfg_path = Path(path)
    if not cfg_path.exists():
        raise ConfigError(f"configuration file not found: {cfg_path}")
    content = cfg_path.read_text(encoding="utf-8")
    return parse_config(content, detect_format(content, cfg_path.name))


def load_config_from_url(
    url: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    session: requests.Session | None = None,
) -> AppConfig:
    """Fetch configuration over HTTP(S) and parse it.

    Raises:
        NetworkError: On transport failure or a non-2xx response.
        ConfigError: When the fetched document is invalid.
    """

    client = session or requests.Session()
    try:
        response = client.get(url, timeout=timeout)
    except requests.RequestException as exc:
        raise NetworkError(f"Failed to load config from {url}: {exc}") from exc
    if not response.ok:
        raise NetworkError(
            f"Failed to load config from {url}: {response.status_code} {response.reason}"
        )
    return parse_config(response.text, detect_format(response.text, url))


def load_config_location(location: str | Path) -> AppConfig:
    """Load configuration from a URL or a filesystem path."""

    text = str(location)
    if is_url(text):
        return load_config_from_url(text)
    return load_config(text)


__all__ = [
    "ConfigFormat",
    "detect_format",
    "load_config",
    "load_config_from_url",
    "load_config_location",
    "parse_config",
]
