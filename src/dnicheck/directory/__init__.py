"""Contact directory lookup (best-effort, never fatal)."""

from dnicheck.directory.lookup import DirectoryLookup, RowSource, scan_rows
from dnicheck.directory.masking import mask_contact
from dnicheck.directory.models import (
    DirectoryMatch,
    Matched,
    NotMatched,
    Unavailable,
    directory_from_payload,
)

__all__ = [
    "DirectoryLookup",
    "DirectoryMatch",
    "Matched",
    "NotMatched",
    "RowSource",
    "Unavailable",
    "directory_from_payload",
    "mask_contact",
    "scan_rows",
]
