"""CLI demo that builds sample order workbooks and converts them."""

# Module responsibilities:
# - Generate fictional order spreadsheets matching the sources in the bundled configuration.
# - Run each one through the pipeline with fixed user input and report the archives produced.

from __future__ import annotations

import argparse
import sys
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict

from openpyxl import Workbook

from orderflow.config import load_config
from orderflow.core.logger import get_logger
from orderflow.core.pipeline import Pipeline
from orderflow.core.settings import BUNDLED_CONFIG
from orderflow.core.errors import OrderFlowError

logger = get_logger()

DEMO_USER_INPUTS: Dict[str, Dict[str, str]] = {
    "el-dorado": {"DocDueDate": "2024-02-15"},
    "la-nanita": {"DocDate": "20240201", "DocDueDate": "20240215", "NumAtCard": "DEMO-LN-001"},
    "uber-gross": {},
}


def build_el_dorado(path: Path) -> None:
    wb = Workbook()
    ws = wb.active
    ws.title = "Pedido"
    ws["A1"] = "SUPERMERCADOS EL DORADO"
    ws["A3"] = "Orden de compra"
    ws["B3"] = "12345"
    ws["A4"] = "Fecha"
    ws["B4"] = "2024-02-01"
    for idx, header in enumerate(["BARRA", "CANTIDAD", "DESCRIPCION"], start=1):
        ws.cell(row=12, column=idx, value=header)
    ws.append([68077, 12, "Queso fresco"])
    ws.append([7861234500012, 2.5, "Yogur natural"])
    wb.save(path)


def build_la_nanita(path: Path) -> None:
    wb = Workbook()
    ws = wb.active
    ws.title = "Hoja1"
    ws.append(["CODIGO", "UNIDADES"])
    ws.append(["PTQ001", 6])
    ws.append(["PTQ002", 10])
    ws.append(["TOTAL", 16])
    wb.save(path)


def build_uber_gross(path: Path) -> None:
    wb = Workbook()
    cover = wb.active
    cover.title = "Portada"
    cover["A1"] = "Distribuidora Uber Gross"
    ws = wb.create_sheet("Pedido")
    ws["C2"] = "OC-778899"
    ws["C3"] = datetime(2024, 2, 1)
    ws["C4"] = datetime(2024, 2, 15)
    ws.cell(row=8, column=2, value="EAN")
    ws.cell(row=8, column=3, value="CANT.")
    ws.cell(row=9, column=2, value="7860000000011")
    ws.cell(row=9, column=3, value=24)
    ws.cell(row=10, column=2, value="7860000000028")
    ws.cell(row=10, column=3, value=3.75)
    ws.cell(row=11, column=2, value="TOTAL")
    ws.cell(row=11, column=3, value=27.75)
    wb.save(path)


BUILDERS: Dict[str, Callable[[Path], None]] = {
    "el-dorado": build_el_dorado,
    "la-nanita": build_la_nanita,
    "uber-gross": build_uber_gross,
}


def generate_workbooks(target_dir: Path) -> Dict[str, Path]:
    """Write one demo workbook per source into ``target_dir``."""

    target_dir.mkdir(parents=True, exist_ok=True)
    paths: Dict[str, Path] = {}
    for name, builder in BUILDERS.items():
        path = target_dir / f"{name}.xlsx"
        builder(path)
        paths[name] = path
        logger.info("Generated demo workbook %s", path)
    return paths


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="OrderFlow demo workbooks")
    parser.add_argument("--workbooks", type=Path, default=Path("examples"))
    parser.add_argument("--config", type=Path, default=BUNDLED_CONFIG)
    parser.add_argument("--out", type=Path, default=None)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        config = load_config(args.config)
        pipeline = Pipeline(config, logger=logger)
        for name, path in generate_workbooks(args.workbooks).items():
            result = pipeline.run(path, name, DEMO_USER_INPUTS.get(name, {}), out_dir=args.out)
            print(f"{name}: {result.archive_path}")
        return 0
    except OrderFlowError as exc:
        logger.error("Demo failed: %s", exc.user_message)
        print(exc.to_display_string(), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
