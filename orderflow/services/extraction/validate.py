"""Completeness check for the merged header record."""

from __future__ import annotations

from typing import Iterable, List, Mapping, Optional


def _is_missing(value: Optional[str]) -> bool:
    return value is None or value.strip() == ""


def missing_fields(record: Mapping[str, Optional[str]], required: Iterable[str]) -> List[str]:
    """Names from ``required`` whose value is absent, empty or whitespace."""

    return [name for name in required if _is_missing(record.get(name))]


__all__ = ["missing_fields"]
