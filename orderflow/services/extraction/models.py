"""Data containers produced by the extraction engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field

from orderflow.core.errors import OrderFlowError
from orderflow.services.validation import ValidationIssue

Record = Dict[str, str]


@dataclass(slots=True)
class ExtractedData:
    """Header record plus detail rows from one spreadsheet."""

    header: Record = field(default_factory=dict)
    detail: List[Record] = field(default_factory=list)

    def detail_frame(self) -> pd.DataFrame:
        """Expose the detail rows as a DataFrame for previews."""

        if not self.detail:
            return pd.DataFrame()
        columns = list(self.detail[0].keys())
        for row in self.detail[1:]:
            columns.extend(key for key in row if key not in columns)
        return pd.DataFrame(self.detail, columns=columns).fillna("")


class ProcessResult(BaseModel):
    """Outcome of :func:`process`; exactly one of the text fields or ``error`` is set."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    header_text: Optional[str] = None
    detail_text: Optional[str] = None
    archive_name: Optional[str] = None
    extracted_data: Optional[ExtractedData] = None
    error: Optional[OrderFlowError] = None
    warnings: List[ValidationIssue] = Field(default_factory=list)

    def raise_for_error(self) -> None:
        if not self.success and self.error is not None:
            raise self.error


__all__ = ["ExtractedData", "ProcessResult", "Record"]
