"""
Match evaluation between asserted and resolved identities.

Produces the tri-state ``MatchVerdict`` plus a ``VerificationReport`` with the
texts shown to the person being verified.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from dnicheck.directory.models import DirectoryMatch, Matched, Unavailable
from dnicheck.identity.models import AssertedIdentity, MatchVerdict, ResolvedIdentity
from dnicheck.identity.normalizer import canon

PROVIDER_LABELS = {
    "consultasperu": "ConsultasPeru",
    "decolecta": "RENIEC (Decolecta)",
}

NO_DIGIT_NOTE = " (no verification digit available)"


def names_match(asserted: AssertedIdentity, resolved: ResolvedIdentity) -> bool:
    """Given name and surname both equal after ``canon``; empty resolved names never match."""
    resolved_given = canon(resolved.fields.given_name)
    resolved_surname = canon(resolved.fields.surname)
    if not resolved_given or not resolved_surname:
        return False
    return resolved_given == canon(asserted.given_name) and resolved_surname == canon(
        asserted.surname
    )


def digit_matches(asserted: AssertedIdentity, resolved: ResolvedIdentity) -> bool:
    """Exact match against the provider's verification code; vacuously true without one."""
    if not resolved.fields.has_verification_code:
        return True
    expected = str(resolved.fields.verification_code).strip()
    return expected == (asserted.verification_digit or "")


def evaluate(
    asserted: AssertedIdentity,
    resolved: ResolvedIdentity,
    directory: DirectoryMatch,
) -> MatchVerdict:
    if not (names_match(asserted, resolved) and digit_matches(asserted, resolved)):
        return MatchVerdict.IDENTITY_MISMATCH
    if isinstance(directory, Matched):
        return MatchVerdict.IDENTITY_CONFIRMED_WITH_CONTACT
    return MatchVerdict.IDENTITY_CONFIRMED_NO_CONTACT


class ReportVariant(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"


@dataclass(frozen=True)
class VerificationReport:
    """Everything the result card shows."""

    verdict: MatchVerdict
    variant: ReportVariant
    title: str
    message: str
    source_label: str
    directory_label: str
    directory_hint: str | None = None
    digit_available: bool = True


def source_label(resolved: ResolvedIdentity) -> str:
    if resolved.provider:
        return PROVIDER_LABELS.get(resolved.provider, resolved.provider)
    return resolved.source.value


def directory_label(directory: DirectoryMatch) -> str:
    if isinstance(directory, Matched):
        if directory.masked_contact:
            return f"Registered contact ({directory.masked_contact})"
        return "Registered contact"
    if isinstance(directory, Unavailable):
        return "Directory: skipped" if directory.skipped else "Directory: error"
    return "Contact not registered"


def build_report(
    asserted: AssertedIdentity,
    resolved: ResolvedIdentity,
    directory: DirectoryMatch,
) -> VerificationReport:
    verdict = evaluate(asserted, resolved, directory)
    digit_available = resolved.fields.has_verification_code
    note = "" if digit_available else NO_DIGIT_NOTE

    if verdict is MatchVerdict.IDENTITY_MISMATCH:
        variant = ReportVariant.DANGER
        title = "Verification not confirmed"
        message = f"The entered data does not match the lookup{note}."
    elif verdict is MatchVerdict.IDENTITY_CONFIRMED_WITH_CONTACT:
        variant = ReportVariant.SUCCESS
        title = "Confirmed"
        message = f"The data matches and the contact is registered{note}."
    else:
        variant = ReportVariant.WARNING
        title = "Identity validated"
        message = (
            "The data matches, but no registered contact starting with the ID number "
            f"was found{note}."
        )

    return VerificationReport(
        verdict=verdict,
        variant=variant,
        title=title,
        message=message,
        source_label=source_label(resolved),
        directory_label=directory_label(directory),
        directory_hint=directory.reason if isinstance(directory, Unavailable) else None,
        digit_available=digit_available,
    )
