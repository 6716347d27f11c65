"""Archive packaging for rendered text outputs."""

# Module responsibilities:
# - Bundle named text entries into a single deflated ZIP payload held in memory.
# - Persist archives under an output directory without clobbering names silently.

from __future__ import annotations

import io
import zipfile
from pathlib import Path
from typing import Iterable, Tuple

from .utils.log import get_logger

logger = get_logger("archive")

ARCHIVE_EXTENSION = ".zip"

ArchiveEntry = Tuple[str, str]


def build_archive(entries: Iterable[ArchiveEntry], encoding: str = "utf-8") -> bytes:
    """Create a ZIP archive from ``(filename, text)`` pairs.

    Entries are written in the given order. Duplicate filenames are rejected
    because the second entry would shadow the first on extraction.

    Raises:
        ValueError: When an entry name is empty or repeated.
    """

    buffer = io.BytesIO()
    seen: set[str] = set()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for filename, content in entries:
            if not filename or not filename.strip():
                raise ValueError("archive entry name must not be empty")
            if filename in seen:
                raise ValueError(f"duplicate archive entry: {filename}")
            seen.add(filename)
            archive.writestr(filename, content.encode(encoding))
    payload = buffer.getvalue()
    logger.info("Archive built", extra={"entries": sorted(seen), "bytes": len(payload)})
    return payload


def write_archive(out_dir: Path, name: str, payload: bytes, *, overwrite: bool = True) -> Path:
    """Write an archive payload to ``out_dir / name``.

    Raises:
        FileExistsError: When the target exists and ``overwrite`` is False.
    """

    out_dir.mkdir(parents=True, exist_ok=True)
    target = out_dir / Path(name).name
    if target.exists() and not overwrite:
        raise FileExistsError(f"Archive already exists: {target}")
    target.write_bytes(payload)
    logger.info("Archive written", extra={"path": str(target), "bytes": len(payload)})
    return target


__all__ = ["ARCHIVE_EXTENSION", "ArchiveEntry", "build_archive", "write_archive"]
