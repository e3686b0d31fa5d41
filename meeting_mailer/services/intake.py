# meeting_mailer/services/intake.py
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from ..errors import UploadError, UploadLimitError
from ..schemas import UploadedFile
from ..utils.io import read_bytes, read_text, remove_files, save_upload
from .contacts import parse_contacts

logger = logging.getLogger("meeting_mailer.intake")

MAX_FILES = 10
MAX_BYTES = 50 * 1024 * 1024

TRANSCRIPT_EXTS = {".txt"}
CONTACT_EXTS = {".csv"}

# (original filename, raw bytes)
IncomingFile = Tuple[str, bytes]


def ext_of(name: Optional[str]) -> str:
    if not name:
        return ""
    return os.path.splitext(name.strip().lower())[1]


def classify(name: Optional[str]) -> Optional[str]:
    ext = ext_of(name)
    if ext in TRANSCRIPT_EXTS:
        return "transcript"
    if ext in CONTACT_EXTS:
        return "contacts"
    return None


def intake_files(
    files: Sequence[IncomingFile],
    upload_dir: str | Path,
    *,
    max_files: int = MAX_FILES,
    max_bytes: int = MAX_BYTES,
) -> List[UploadedFile]:
    """
    Store, read back and classify a batch of uploads.

    .txt -> transcript text, .csv -> contact rows, anything else is skipped.
    The batch is all-or-nothing: on a storage error the files already written
    are removed and UploadError is raised. On success the stored copies stay
    on disk (see UploadedFile.stored_path) until the caller removes them.
    """
    if len(files) > max_files:
        raise UploadLimitError(f"Too many files: {len(files)} uploaded, at most {max_files} allowed")

    out: List[UploadedFile] = []
    stored: List[Path] = []
    try:
        for name, data in files:
            kind = classify(name)
            if kind is None:
                logger.info("[intake] skipping %r (unsupported extension %r)", name, ext_of(name))
                continue
            if len(data) > max_bytes:
                raise UploadLimitError(f"File too large: {name} (> {max_bytes} bytes)")

            path = save_upload(upload_dir, name, data)
            stored.append(path)

            if kind == "transcript":
                content = read_text(path)
            else:
                content = parse_contacts(read_bytes(path))

            out.append(UploadedFile(name=name, type=kind, content=content, stored_path=str(path)))
    except OSError as e:
        remove_files(stored)
        logger.error("[intake] storage failure: %s", e)
        raise UploadError(f"Failed to store or read uploaded file: {e}") from e
    except Exception:
        remove_files(stored)
        raise

    logger.info(
        "[intake] accepted %d of %d file(s): %s",
        len(out), len(files), ", ".join(f"{f.name} ({f.type})" for f in out) or "-",
    )
    return out
