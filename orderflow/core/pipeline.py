from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping

from orderflow_io import build_archive, write_archive

from .errors import DeliveryError, FileFormatError
from .logger import get_logger
from .settings import ensure_work_dirs
from orderflow.config import AppConfig
from orderflow.services.extraction import ExtractedData, process
from orderflow.services.validation import ValidationIssue


ProgressCB = Callable[[str, str], None]


@dataclass
class PipelineResult:
    source: str
    input_path: str
    archive_path: str
    archive_name: str
    extracted: ExtractedData
    warnings: list[ValidationIssue] = field(default_factory=list)


class Pipeline:
    """Coordinates Read -> Process -> Package -> Write for one spreadsheet."""

    def __init__(self, config: AppConfig, logger=None) -> None:
        self.config = config
        self.logger = logger or get_logger()

    def run(
        self,
        input_path: Path,
        source_name: str,
        user_input: Mapping[str, str] | None = None,
        out_dir: Path | None = None,
        progress_cb: ProgressCB | None = None,
    ) -> PipelineResult:
        def progress(stage: str, detail: str = ""):
            if progress_cb:
                progress_cb(stage, detail)
            self.logger.info("%s - %s", stage, detail)

        source = self.config.source(source_name)
        result_config = self.config.result
        out_dir = out_dir or ensure_work_dirs()["out"]

        # 1. Read
        progress("1/3 read", input_path.name)
        try:
            data = input_path.read_bytes()
        except OSError as e:
            raise FileFormatError(f"cannot read {input_path}: {e}") from e

        # 2. Process
        progress("2/3 process", f"source={source.name}")
        outcome = process(data, source, result_config, user_input or {}, input_path.name)
        for warning in outcome.warnings:
            self.logger.warning("%s: %s", input_path.name, warning.message)
        outcome.raise_for_error()

        # 3. Package & write
        progress("3/3 deliver", outcome.archive_name or "")
        try:
            payload = build_archive(
                [
                    (result_config.header.filename, outcome.header_text or ""),
                    (result_config.detail.filename, outcome.detail_text or ""),
                ]
            )
            archive_path = write_archive(out_dir, outcome.archive_name, payload)
        except (OSError, ValueError) as e:
            raise DeliveryError(str(e)) from e
        progress("3/3 deliver", f"done: {archive_path}")

        return PipelineResult(
            source=source.name,
            input_path=str(input_path),
            archive_path=str(archive_path),
            archive_name=outcome.archive_name,
            extracted=outcome.extracted_data,
            warnings=list(outcome.warnings),
        )
