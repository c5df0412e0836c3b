"""
Directory lookup.

Finds the contact row correlated to an ID number in a tabular store. The
lookup is best-effort: configuration gaps and backend failures come back as
``Unavailable`` and never fail the verification request.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence

import structlog

from dnicheck.config.settings import DirectoryConfig
from dnicheck.core.errors import DirectoryUnavailable
from dnicheck.directory.masking import mask_contact
from dnicheck.directory.models import DirectoryMatch, Matched, NotMatched, Unavailable

logger = structlog.get_logger()

NOT_CONFIGURED = "not configured"


class RowSource(Protocol):
    """Anything that can return the full row set of the directory."""

    async def fetch_rows(self) -> Sequence[Sequence[Any]]:
        ...


def _cell(row: Sequence[Any], index: int) -> str:
    if index < 0 or index >= len(row) or row[index] is None:
        return ""
    return str(row[index]).strip()


def scan_rows(
    rows: Sequence[Sequence[Any]],
    id_number: str,
    *,
    contact_col_index: int = 0,
    code_col_index: int = 1,
) -> DirectoryMatch:
    """Return the first row, in storage order, whose contact starts with the ID number."""
    prefix = str(id_number)
    for row in rows:
        contact = _cell(row, contact_col_index)
        if not contact:
            continue
        if contact.startswith(prefix):
            code = _cell(row, code_col_index)
            return Matched(masked_contact=mask_contact(contact), secret=code or None)
    return NotMatched()


class DirectoryLookup:
    """Correlates an ID number to a contact record and its secret code."""

    def __init__(self, config: DirectoryConfig, row_source: RowSource | None = None) -> None:
        self._config = config
        self._row_source = row_source

    def _source(self) -> RowSource:
        if self._row_source is None:
            from dnicheck.directory.sheets import GoogleSheetsRowSource

            self._row_source = GoogleSheetsRowSource(self._config)
        return self._row_source

    async def find_contact_for_id(self, id_number: str) -> DirectoryMatch:
        if not self._config.is_configured:
            logger.info("directory_lookup_skipped", dni=id_number, reason=NOT_CONFIGURED)
            return Unavailable(reason=NOT_CONFIGURED, skipped=True)

        try:
            rows = await self._source().fetch_rows()
        except DirectoryUnavailable as exc:
            logger.warning("directory_lookup_unavailable", dni=id_number, reason=exc.message)
            return Unavailable(reason=exc.message)
        except Exception as exc:
            # Auth, transport and parsing failures from the backing store are all soft.
            logger.warning(
                "directory_lookup_unavailable",
                dni=id_number,
                error_type=type(exc).__name__,
                reason=str(exc),
            )
            return Unavailable(reason=str(exc) or type(exc).__name__)

        result = scan_rows(
            rows,
            id_number,
            contact_col_index=self._config.contact_col_index,
            code_col_index=self._config.code_col_index,
        )
        logger.info(
            "directory_lookup_completed",
            dni=id_number,
            matched=isinstance(result, Matched),
            rows=len(rows),
        )
        return result
