# meeting_mailer/services/contacts.py
from __future__ import annotations

import csv
import io
import logging
from typing import Iterator, List

from ..errors import ContactParseError
from ..schemas import ContactRecord

logger = logging.getLogger("meeting_mailer.contacts")


def _decode(data: bytes | str) -> str:
    if isinstance(data, str):
        return data.lstrip("\ufeff")
    return data.decode("utf-8-sig", errors="replace")


def iter_contacts(data: bytes | str) -> Iterator[ContactRecord]:
    """
    Yield one {column: value} dict per data row, in file order.

    The first non-blank row is the header. Rows with too few cells are padded
    with "" and rows with too many are truncated to the header width; either
    way the row is kept and a warning is logged. Blank lines are skipped, and
    so is a row the csv reader rejects (e.g. a cell over the field size limit).
    Calling again re-parses from the start.
    """
    reader = csv.reader(io.StringIO(_decode(data), newline=""))

    header: List[str] | None = None
    while True:
        try:
            row = next(reader)
        except StopIteration:
            break
        except csv.Error as e:
            if header is None:
                raise ContactParseError(f"Contact list header is not valid CSV: {e}") from e
            logger.warning("[contacts] row %d skipped: %s", reader.line_num, e)
            continue

        if not any(cell.strip() for cell in row):
            continue
        if header is None:
            header = [h.strip() for h in row]
            continue

        cells = [c.strip() for c in row]
        if len(cells) != len(header):
            logger.warning(
                "[contacts] row %d has %d cells, header has %d; %s",
                reader.line_num, len(cells), len(header),
                "padding" if len(cells) < len(header) else "truncating",
            )
            cells = (cells + [""] * len(header))[: len(header)]
        yield dict(zip(header, cells))

    if header is None:
        raise ContactParseError("Contact list is empty: expected a header row")


def parse_contacts(data: bytes | str) -> List[ContactRecord]:
    return list(iter_contacts(data))
