"""Configuration model and loaders for OrderFlow.

The configuration document (YAML or JSON) lists the supported sources and the
result layout. ``load_config`` / ``parse_config`` return a frozen
:class:`AppConfig`; ``derive_runtime_sources`` projects it for the shell.
"""

from __future__ import annotations

from .loader import (
    detect_format,
    load_config,
    load_config_from_url,
    load_config_location,
    parse_config,
)
from .models import (
    AppConfig,
    DetailSpec,
    FileSpec,
    Replacement,
    ResultConfig,
    ResultProperty,
    SourceConfig,
    SourceProperty,
)
from .runtime import RuntimeSource, UserInputField, derive_runtime_source, derive_runtime_sources

__all__ = [
    "AppConfig",
    "DetailSpec",
    "FileSpec",
    "Replacement",
    "ResultConfig",
    "ResultProperty",
    "RuntimeSource",
    "SourceConfig",
    "SourceProperty",
    "UserInputField",
    "derive_runtime_source",
    "derive_runtime_sources",
    "detect_format",
    "load_config",
    "load_config_from_url",
    "load_config_location",
    "parse_config",
]
