"""
Identity models for ID-number verification.

A query carries only the 8-digit ID number. Providers answer with a partial
``IdentityFields`` record; the resolver wraps the winning answer in a
``ResolvedIdentity`` tagged with its source. ``AssertedIdentity`` is what the
person typed in and never leaves the client.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dnicheck.core.errors import ValidationError

ID_NUMBER_PATTERN = re.compile(r"[0-9]{8}")
VERIFICATION_DIGIT_PATTERN = re.compile(r"[0-9]")

# Provider-specific extras are passed through, but only scalars and only so many.
MAX_EXTENSION_FIELDS = 32

Scalar = Union[str, int, float, bool, None]


def is_valid_id_number(value: object) -> bool:
    """True for strings that are exactly 8 ASCII digits after trimming."""
    return isinstance(value, str) and ID_NUMBER_PATTERN.fullmatch(value.strip()) is not None


class IdentityQuery(BaseModel):
    """Request body for a verification: ``{"dni": "12345678"}``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id_number: str = Field(alias="dni")

    @field_validator("id_number", mode="before")
    @classmethod
    def _eight_digits(cls, value: object) -> str:
        if not isinstance(value, str):
            raise ValueError("DNI must be a string")
        value = value.strip()
        if not ID_NUMBER_PATTERN.fullmatch(value):
            raise ValueError("DNI must be 8 digits")
        return value


def _bounded_extensions(extensions: Mapping[str, Any]) -> dict[str, Scalar]:
    bounded: dict[str, Scalar] = {}
    for key, value in extensions.items():
        if len(bounded) >= MAX_EXTENSION_FIELDS:
            break
        if value is None or isinstance(value, (str, int, float, bool)):
            bounded[str(key)] = value
    return bounded


@dataclass(frozen=True)
class IdentityFields:
    """Common identity shape shared by every provider."""

    id_number: str | None = None
    full_name: str | None = None
    given_name: str | None = None
    surname: str | None = None
    verification_code: str | int | None = None

    # Provider-specific attributes (date_of_birth, ubigeo, ...), unmodified
    extensions: Mapping[str, Scalar] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "extensions", _bounded_extensions(self.extensions))

    @property
    def has_verification_code(self) -> bool:
        return self.verification_code is not None and str(self.verification_code).strip() != ""

    def to_payload(self) -> dict[str, Any]:
        """Serialize with extension attributes flattened alongside the common fields."""
        payload: dict[str, Any] = dict(self.extensions)
        payload.update(
            {
                "idNumber": self.id_number,
                "fullName": self.full_name,
                "givenName": self.given_name,
                "surname": self.surname,
                "verificationCode": self.verification_code,
            }
        )
        return payload

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> IdentityFields:
        common = {"idNumber", "fullName", "givenName", "surname", "verificationCode"}
        return cls(
            id_number=payload.get("idNumber"),
            full_name=payload.get("fullName"),
            given_name=payload.get("givenName"),
            surname=payload.get("surname"),
            verification_code=payload.get("verificationCode"),
            extensions={k: v for k, v in payload.items() if k not in common},
        )


class IdentitySource(str, Enum):
    """Which position in the provider chain produced the identity."""

    PRIMARY = "primary"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class ResolvedIdentity:
    """Identity obtained from exactly one provider."""

    source: IdentitySource
    fields: IdentityFields
    provider: str | None = None


@dataclass(frozen=True)
class AssertedIdentity:
    """Identity data typed in by the person being verified."""

    id_number: str
    given_name: str
    surname: str
    verification_digit: str | None = None

    @classmethod
    def create(
        cls,
        id_number: str,
        given_name: str,
        surname: str,
        verification_digit: str | None = None,
    ) -> AssertedIdentity:
        """Validate form input the way the verification form does."""
        id_number = (id_number or "").strip()
        if not ID_NUMBER_PATTERN.fullmatch(id_number):
            raise ValidationError("The ID number must have 8 digits.", {"field": "id_number"})

        given_name = (given_name or "").strip()
        if not given_name:
            raise ValidationError("Enter the given name.", {"field": "given_name"})

        surname = (surname or "").strip()
        if not surname:
            raise ValidationError("Enter the surname(s).", {"field": "surname"})

        digit = (verification_digit or "").strip()
        if digit and not VERIFICATION_DIGIT_PATTERN.fullmatch(digit):
            raise ValidationError(
                "The verification digit must be a single digit (optional).",
                {"field": "verification_digit"},
            )

        return cls(
            id_number=id_number,
            given_name=given_name,
            surname=surname,
            verification_digit=digit or None,
        )


class MatchVerdict(str, Enum):
    """Outcome of comparing asserted vs. resolved identity plus directory presence."""

    IDENTITY_MISMATCH = "identity_mismatch"
    IDENTITY_CONFIRMED_NO_CONTACT = "identity_confirmed_no_contact"
    IDENTITY_CONFIRMED_WITH_CONTACT = "identity_confirmed_with_contact"

    @property
    def confirmed(self) -> bool:
        return self is not MatchVerdict.IDENTITY_MISMATCH
