"""Typed configuration model.

The configuration document describes *sources* (how to pull values out of a
given spreadsheet layout) and one *result* (how to render the two output
text files). Models are frozen once validated; field names follow Python
conventions while the document keeps its camelCase keys through aliases.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from orderflow.core.errors import ConfigError


def _to_text(value: Any) -> Optional[str]:
    """Canonical string form of a scalar that YAML may have typed."""

    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class _ConfigModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class Replacement(_ConfigModel):
    """One regex substitution; applied to every match in the value."""

    pattern: str
    replacement: str = ""

    @field_validator("pattern", "replacement", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _to_text(value) if value is not None else ""


class SourceProperty(_ConfigModel):
    """A value to extract: ``locator`` is a cell address or a column label."""

    name: str
    locator: str
    replacements: Tuple[Replacement, ...] = ()

    @field_validator("name", "locator", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _to_text(value)

    @field_validator("replacements", mode="before")
    @classmethod
    def _ordered_pairs(cls, value: Any) -> Any:
        # Mappings keep document order; lists allow explicit ordering.
        if value is None:
            return ()
        if isinstance(value, Mapping):
            return tuple({"pattern": key, "replacement": repl} for key, repl in value.items())
        if isinstance(value, (list, tuple)):
            pairs = []
            for item in value:
                if isinstance(item, (list, tuple)) and len(item) == 2:
                    pairs.append({"pattern": item[0], "replacement": item[1]})
                else:
                    pairs.append(item)
            return tuple(pairs)
        return value


class DetailSpec(_ConfigModel):
    """Anchored table: ``locator`` is the first header cell."""

    locator: str
    end_value: Optional[str] = Field(default=None, alias="endValue")
    properties: Tuple[SourceProperty, ...] = ()

    @field_validator("end_value", mode="before")
    @classmethod
    def _coerce_end_value(cls, value: Any) -> Any:
        return _to_text(value)

    @field_validator("properties", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return () if value is None else value


class SourceConfig(_ConfigModel):
    """One supported input spreadsheet layout."""

    name: str
    description: str = ""
    logo: Optional[str] = None
    sheet_index: int = Field(default=0, alias="sheetIndex")
    header: Tuple[SourceProperty, ...] = ()
    detail: DetailSpec
    default_values: Dict[str, str] = Field(default_factory=dict, alias="defaultValues")

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, value: Any) -> Any:
        return _to_text(value)

    @field_validator("sheet_index", mode="before")
    @classmethod
    def _default_sheet(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("header", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return () if value is None else value

    @field_validator("default_values", mode="before")
    @classmethod
    def _text_defaults(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, Mapping):
            return {str(key): _to_text(item) or "" for key, item in value.items()}
        return value


class ResultProperty(_ConfigModel):
    """One output column. A ``default_value`` means no input is needed."""

    name: str
    type: Optional[str] = None
    prompt: Optional[str] = None
    fyi: Optional[str] = None
    default_value: Optional[str] = Field(default=None, alias="defaultValue")

    @field_validator("name", "default_value", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _to_text(value)


class FileSpec(_ConfigModel):
    """Shape of one rendered output file; property order is column order."""

    filename: str
    prolog: Optional[str] = None
    epilog: Optional[str] = None
    properties: Tuple[ResultProperty, ...] = ()

    @field_validator("properties", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return () if value is None else value


class ResultConfig(_ConfigModel):
    """Output side: field separator, archive name template and both files."""

    separator: str
    base_name: str = Field(alias="baseName")
    header: FileSpec
    detail: FileSpec

    def required_header_fields(self) -> Tuple[str, ...]:
        """Header properties without a default value, in column order."""

        return tuple(p.name for p in self.header.properties if p.default_value is None)


class AppConfig(_ConfigModel):
    """Aggregate root loaded once per session."""

    name: str = ""
    description: str = ""
    logo: Optional[str] = None
    parameters: Dict[str, Any] = Field(default_factory=dict)
    sources: Tuple[SourceConfig, ...] = ()
    result: ResultConfig

    @field_validator("parameters", "sources", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return {} if info.field_name == "parameters" else ()
        return value

    @model_validator(mode="after")
    def _unique_source_names(self) -> "AppConfig":
        seen: set[str] = set()
        for source in self.sources:
            if source.name in seen:
                raise ValueError(f"duplicate source name: {source.name}")
            seen.add(source.name)
        return self

    def source(self, name: str) -> SourceConfig:
        """Return the source called ``name``.

        Raises:
            ConfigError: When no such source is configured.
        """

        for source in self.sources:
            if source.name == name:
                return source
        available = ", ".join(s.name for s in self.sources) or "none"
        raise ConfigError(
            f"Unknown source: {name}",
            [f"Choose one of the configured sources: {available}"],
        )

    @property
    def source_names(self) -> Tuple[str, ...]:
        return tuple(s.name for s in self.sources)


__all__ = [
    "AppConfig",
    "DetailSpec",
    "FileSpec",
    "Replacement",
    "ResultConfig",
    "ResultProperty",
    "SourceConfig",
    "SourceProperty",
]
