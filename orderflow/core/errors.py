"""Custom exceptions used across OrderFlow.

Every failure surfaced to a caller is an :class:`OrderFlowError` carrying an
:class:`ErrorCategory`, a short user-facing message and an ordered list of
remediation suggestions.
"""

from __future__ import annotations

import zipfile
from enum import Enum
from typing import Iterable, Sequence

from orderflow_io import CellAddressError, SheetIndexError, WorkbookFormatError


class ErrorCategory(str, Enum):
    """Broad failure categories shown to users."""

    FILE_FORMAT = "FILE_FORMAT"
    CONFIG = "CONFIG"
    EXTRACTION = "EXTRACTION"
    VALIDATION = "VALIDATION"
    NETWORK = "NETWORK"
    UNKNOWN = "UNKNOWN"


class OrderFlowError(Exception):
    """Base error for the application."""

    category: ErrorCategory = ErrorCategory.UNKNOWN
    prefix: str = ""
    default_suggestions: Sequence[str] = ("If this error persists, please contact support",)

    def __init__(
        self,
        details: str,
        suggestions: Iterable[str] | None = None,
        *,
        user_message: str | None = None,
    ) -> None:
        self.details = details
        self.user_message = user_message or f"{self.prefix}{details}"
        self.suggestions = list(suggestions) if suggestions is not None else list(self.default_suggestions)
        super().__init__(self.user_message)

    def to_display_string(self) -> str:
        """Format the message and suggestions for display."""

        if not self.suggestions:
            return self.user_message
        bullets = "\n".join(f"- {item}" for item in self.suggestions)
        return f"{self.user_message}\n\nSuggestions:\n{bullets}"


class FileFormatError(OrderFlowError):
    """Wrong extension, unknown signature, corrupt or encrypted workbook."""

    category = ErrorCategory.FILE_FORMAT
    prefix = "Invalid file format: "
    default_suggestions = (
        "Ensure the file is a valid Excel file (.xls or .xlsx)",
        "Try opening and re-saving the file in Excel",
        "Check if the file is corrupted or password-protected",
    )


class ConfigError(OrderFlowError):
    """Malformed configuration, invalid locator syntax or unknown source."""

    category = ErrorCategory.CONFIG
    prefix = "Configuration error: "
    default_suggestions = (
        "Verify the configuration file is valid YAML/JSON",
        "Check that all required fields are present",
        "Reload the configuration and try again",
    )


class ExtractionError(OrderFlowError):
    """Sheet or table not found, out-of-range index."""

    category = ErrorCategory.EXTRACTION
    prefix = "Data extraction failed: "
    default_suggestions = (
        "Verify the Excel file matches the selected source type",
        "Check that the file contains the expected data structure",
        "Ensure the file has data in the expected sheet and cells",
    )


class DataValidationError(OrderFlowError):
    """Required output fields are missing after extraction and user input."""

    category = ErrorCategory.VALIDATION
    default_suggestions = ()

    def __init__(
        self,
        details: str,
        suggestions: Iterable[str] | None = None,
        *,
        missing_fields: Sequence[str] = (),
        user_message: str | None = None,
    ) -> None:
        self.missing_fields = list(missing_fields)
        super().__init__(details, suggestions, user_message=user_message)


class NetworkError(OrderFlowError):
    """Configuration could not be fetched."""

    category = ErrorCategory.NETWORK
    prefix = "Failed to load: "
    default_suggestions = (
        "Check your internet connection",
        "Verify the configuration URL is correct",
        "Try again in a few moments",
    )


class DeliveryError(OrderFlowError):
    """Raised when the generated archive cannot be written."""

    prefix = "Delivery failed: "
    default_suggestions = ("Check that the output directory is writable",)


_CATEGORY_ERRORS = {
    ErrorCategory.FILE_FORMAT: FileFormatError,
    ErrorCategory.CONFIG: ConfigError,
    ErrorCategory.EXTRACTION: ExtractionError,
    ErrorCategory.VALIDATION: DataValidationError,
    ErrorCategory.NETWORK: NetworkError,
}


def error_for_category(category: ErrorCategory, details: str) -> OrderFlowError:
    """Build the error type matching ``category`` with default suggestions."""

    return _CATEGORY_ERRORS.get(category, OrderFlowError)(details)


def wrap_error(error: BaseException, context: str) -> OrderFlowError:
    """Wrap an arbitrary exception into a categorized :class:`OrderFlowError`.

    Exceptions raised by the spreadsheet layer carry their kind in their type;
    anything else is classified from its message on a best-effort basis.
    """

    if isinstance(error, OrderFlowError):
        return error

    message = str(error) or error.__class__.__name__

    if isinstance(error, CellAddressError):
        return ConfigError(
            f"Invalid cell locator in configuration: {message}",
            [
                'Check that all cell locators (e.g. "B3", "A12") are valid',
                "Cell locators must be in Excel A1 notation",
            ],
        )
    if isinstance(error, SheetIndexError):
        return ExtractionError(
            f"Sheet not found: {message}",
            [
                "Verify the Excel file has the expected number of sheets",
                "Check the sheetIndex in the source configuration",
            ],
        )
    if isinstance(error, (WorkbookFormatError, zipfile.BadZipFile)):
        return FileFormatError(message)

    lowered = message.lower()
    if "password" in lowered or "encrypted" in lowered:
        return FileFormatError(message)
    if "out of range" in lowered:
        return ExtractionError(message)
    if "failed to load config" in lowered:
        return NetworkError(message)

    return OrderFlowError(message, user_message=f"{context}: {message}")


__all__ = [
    "ConfigError",
    "DataValidationError",
    "DeliveryError",
    "ErrorCategory",
    "ExtractionError",
    "FileFormatError",
    "NetworkError",
    "OrderFlowError",
    "error_for_category",
    "wrap_error",
]
