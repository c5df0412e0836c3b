"""Outcomes of a directory lookup."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Union


@dataclass(frozen=True)
class Matched:
    """A contact row starting with the ID number was found."""

    masked_contact: str
    secret: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return {"status": "matched", "maskedContact": self.masked_contact, "secret": self.secret}


@dataclass(frozen=True)
class NotMatched:
    """Every row was scanned and none matched."""

    def to_payload(self) -> dict[str, Any]:
        return {"status": "not_matched"}


@dataclass(frozen=True)
class Unavailable:
    """The directory could not be consulted; ``skipped`` means it is not configured."""

    reason: str
    skipped: bool = False

    def to_payload(self) -> dict[str, Any]:
        return {"status": "unavailable", "reason": self.reason, "skipped": self.skipped}


DirectoryMatch = Union[Matched, NotMatched, Unavailable]


def directory_from_payload(payload: Mapping[str, Any] | None) -> DirectoryMatch:
    """Parse the tagged JSON form; anything unrecognised counts as unavailable."""
    if not payload:
        return Unavailable(reason="no directory result")

    status = payload.get("status")
    if status == "matched":
        secret = payload.get("secret")
        return Matched(
            masked_contact=str(payload.get("maskedContact") or ""),
            secret=str(secret) if secret else None,
        )
    if status == "not_matched":
        return NotMatched()
    return Unavailable(
        reason=str(payload.get("reason") or "directory unavailable"),
        skipped=bool(payload.get("skipped", False)),
    )
