# meeting_mailer/utils/io.py
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Iterable

logger = logging.getLogger("meeting_mailer.io")


def stored_name(original_name: str, *, now_ms: int | None = None) -> str:
    """<epoch-millis>-<basename>; directory parts of the client name are dropped."""
    base = Path((original_name or "upload").replace("\\", "/")).name.strip() or "upload"
    stamp = now_ms if now_ms is not None else time.time_ns() // 1_000_000
    return f"{stamp}-{base}"


def upload_dir(path: str | Path) -> Path:
    p = Path(path)
    if not p.is_absolute():
        p = p.resolve()
    p.mkdir(parents=True, exist_ok=True)
    return p


def save_upload(directory: str | Path, original_name: str, data: bytes) -> Path:
    dest = upload_dir(directory) / stored_name(original_name)
    # same name within the same millisecond: bump the stamp until it is free
    while dest.exists():
        dest = dest.with_name(stored_name(original_name, now_ms=int(dest.name.split("-", 1)[0]) + 1))
    dest.write_bytes(data)
    return dest


def read_text(path: str | Path) -> str:
    return Path(path).read_text(encoding="utf-8", errors="ignore")


def read_bytes(path: str | Path) -> bytes:
    return Path(path).read_bytes()


def remove_files(paths: Iterable[str | Path]) -> None:
    for p in paths:
        try:
            Path(p).unlink(missing_ok=True)
        except OSError as e:
            logger.warning("[io] could not remove %s: %s", p, e)
