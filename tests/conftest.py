from __future__ import annotations

import io
import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Sequence

import pytest
from openpyxl import Workbook

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Package loggers are configured at import time; keep them out of the home directory.
os.environ.setdefault("ORDERFLOW_HOME", tempfile.mkdtemp(prefix="orderflow-home-"))
os.environ.setdefault("ORDERFLOW_LOG_DIR", os.path.join(os.environ["ORDERFLOW_HOME"], "logs"))

from orderflow.config import AppConfig, load_config  # noqa: E402
from orderflow.core.settings import BUNDLED_CONFIG  # noqa: E402

SheetCells = Mapping[str, Any]
WorkbookFactory = Callable[..., bytes]


def build_xlsx(sheets: Sequence[tuple[str, SheetCells]]) -> bytes:
    """Build an .xlsx payload from ``(title, {"A1": value, ...})`` pairs."""

    wb = Workbook()
    wb.remove(wb.active)
    for title, cells in sheets:
        ws = wb.create_sheet(title)
        for address, value in cells.items():
            ws[address] = value
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def el_dorado_cells(**overrides: Any) -> Dict[str, Any]:
    cells: Dict[str, Any] = {
        "A1": "SUPERMERCADOS EL DORADO",
        "B3": "12345",
        "B4": "2024-01-15",
        "A12": "BARRA",
        "B12": "CANTIDAD",
        "A13": 68077,
        "B13": 12,
        "A14": 7861234500012,
        "B14": 2.5,
    }
    cells.update(overrides)
    return {key: value for key, value in cells.items() if value is not None}


@pytest.fixture
def make_workbook() -> WorkbookFactory:
    def _factory(cells: SheetCells | None = None, *, sheets: Sequence[tuple[str, SheetCells]] | None = None) -> bytes:
        if sheets is None:
            sheets = [("Sheet1", cells or {})]
        return build_xlsx(sheets)

    return _factory


@pytest.fixture
def el_dorado_factory() -> Callable[..., bytes]:
    """Build an el-dorado order; pass ``ADDR=None`` to blank a cell."""

    def _factory(**overrides: Any) -> bytes:
        return build_xlsx([("Pedido", el_dorado_cells(**overrides))])

    return _factory


@pytest.fixture
def el_dorado_bytes(el_dorado_factory: Callable[..., bytes]) -> bytes:
    return el_dorado_factory()


@pytest.fixture(scope="session")
def bundled_config() -> AppConfig:
    return load_config(BUNDLED_CONFIG)


@pytest.fixture
def work_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the work directory at a temporary folder."""

    home = tmp_path / "home"
    monkeypatch.setenv("ORDERFLOW_HOME", str(home))
    return home
