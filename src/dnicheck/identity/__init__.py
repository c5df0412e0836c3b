"""
Identity resolution and matching.

Resolves an ID number through ordered providers and compares the result
against what the person asserted.
"""

from dnicheck.identity.matcher import (
    ReportVariant,
    VerificationReport,
    build_report,
    digit_matches,
    evaluate,
    names_match,
)
from dnicheck.identity.models import (
    AssertedIdentity,
    IdentityFields,
    IdentityQuery,
    IdentitySource,
    MatchVerdict,
    ResolvedIdentity,
    is_valid_id_number,
)
from dnicheck.identity.normalizer import canon, collapse_whitespace
from dnicheck.identity.resolver import IdentityResolver

__all__ = [
    # Models
    "AssertedIdentity",
    "IdentityFields",
    "IdentityQuery",
    "IdentitySource",
    "MatchVerdict",
    "ResolvedIdentity",
    "is_valid_id_number",
    # Normalizer
    "canon",
    "collapse_whitespace",
    # Resolver
    "IdentityResolver",
    # Matcher
    "evaluate",
    "names_match",
    "digit_matches",
    "build_report",
    "ReportVariant",
    "VerificationReport",
]
