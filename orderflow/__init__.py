"""OrderFlow: configuration-driven conversion of spreadsheet orders into ERP text files."""

__version__ = "0.1.0"
