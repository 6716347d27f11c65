"""Runtime view of a source: which result fields the user must supply."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .models import AppConfig, SourceConfig


@dataclass(frozen=True)
class UserInputField:
    """A result header field that must be typed in by the user."""

    name: str
    type: str
    prompt: str
    fyi: Optional[str] = None


@dataclass(frozen=True)
class RuntimeSource:
    """Projection of a source for the shell. Recompute it, never edit it."""

    name: str
    description: str
    user_input_fields: Tuple[UserInputField, ...]

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.user_input_fields)


def derive_runtime_source(config: AppConfig, source: SourceConfig) -> RuntimeSource:
    """Compute the user-input fields for ``source``.

    A result header property needs user input when the source does not
    extract it and neither the source defaults nor the result property give
    it a value.
    """

    extracted = {prop.name for prop in source.header}
    defaulted = set(source.default_values)
    defaulted.update(
        prop.name for prop in config.result.header.properties if prop.default_value is not None
    )

    fields = tuple(
        UserInputField(
            name=prop.name,
            type=prop.type or "text",
            prompt=prop.prompt or prop.name,
            fyi=prop.fyi,
        )
        for prop in config.result.header.properties
        if prop.name not in extracted and prop.name not in defaulted
    )
    return RuntimeSource(name=source.name, description=source.description, user_input_fields=fields)


def derive_runtime_sources(config: AppConfig) -> List[RuntimeSource]:
    """Runtime views for every configured source, in configuration order."""

    return [derive_runtime_source(config, source) for source in config.sources]


__all__ = ["RuntimeSource", "UserInputField", "derive_runtime_source", "derive_runtime_sources"]
