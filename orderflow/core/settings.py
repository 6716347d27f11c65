from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv


load_dotenv(override=False)

PACKAGE_DIR = Path(__file__).resolve().parents[1]
BUNDLED_CONFIG = PACKAGE_DIR / "config" / "pedidos.yaml"


def _work_dir() -> Path:
    env = os.getenv("ORDERFLOW_HOME")
    if env:
        return Path(env).expanduser()
    return Path.home() / "OrderFlow"


def ensure_work_dirs() -> dict[str, Path]:
    """Create and return the ``out`` and ``logs`` folders under the work dir."""
    base = _work_dir()
    out = base / "out"
    logs = Path(os.getenv("ORDERFLOW_LOG_DIR") or base / "logs").expanduser()
    for p in (out, logs):
        p.mkdir(parents=True, exist_ok=True)
    return {"base": base, "out": out, "logs": logs}


def default_config_location() -> str:
    """Return the configuration path or URL to use when none is given.

    ``ORDERFLOW_CONFIG`` wins; otherwise the bundled sample configuration.
    """
    env = os.getenv("ORDERFLOW_CONFIG")
    if env:
        return env
    return str(BUNDLED_CONFIG)


def is_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))
