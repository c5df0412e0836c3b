"""
Verification orchestration.

Resolves the identity and consults the directory for one ID number. The two
calls have no ordering dependency and run concurrently; the outcome is
assembled only after both have completed.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Mapping

import structlog

from dnicheck.config.settings import Settings
from dnicheck.core.errors import UpstreamProtocolError
from dnicheck.directory.lookup import DirectoryLookup
from dnicheck.directory.models import DirectoryMatch, Unavailable, directory_from_payload
from dnicheck.identity.models import (
    IdentityFields,
    IdentityQuery,
    IdentitySource,
    ResolvedIdentity,
)
from dnicheck.identity.resolver import IdentityResolver
from dnicheck.providers import build_providers

logger = structlog.get_logger()


@dataclass(frozen=True)
class VerificationOutcome:
    """Server-side result for one ID number."""

    dni: str
    identity: ResolvedIdentity
    directory: DirectoryMatch

    def to_payload(self) -> dict[str, Any]:
        return {
            "success": True,
            "message": "OK",
            "dni": self.dni,
            "identitySource": self.identity.source.value,
            "identityProvider": self.identity.provider,
            "identity": self.identity.fields.to_payload(),
            "directory": self.directory.to_payload(),
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> VerificationOutcome:
        try:
            source = IdentitySource(payload.get("identitySource", IdentitySource.PRIMARY.value))
            identity = payload.get("identity") or {}
            if not isinstance(identity, Mapping):
                raise TypeError("identity must be an object")
            return cls(
                dni=str(payload.get("dni") or ""),
                identity=ResolvedIdentity(
                    source=source,
                    fields=IdentityFields.from_payload(identity),
                    provider=payload.get("identityProvider"),
                ),
                directory=directory_from_payload(payload.get("directory")),
            )
        except (TypeError, ValueError) as exc:
            raise UpstreamProtocolError("unexpected response shape") from exc


class VerificationService:
    def __init__(self, resolver: IdentityResolver, directory: DirectoryLookup) -> None:
        self._resolver = resolver
        self._directory = directory

    async def validate(self, query: IdentityQuery) -> VerificationOutcome:
        """
        Resolve identity and directory for a validated query.

        Raises:
            ResolutionError: no provider resolved the ID number (raised only
                after the directory lookup has finished too).
        """
        dni = query.id_number
        identity, directory = await asyncio.gather(
            self._resolver.resolve(dni),
            self._directory.find_contact_for_id(dni),
            return_exceptions=True,
        )

        if isinstance(identity, BaseException):
            raise identity
        if isinstance(directory, BaseException):
            logger.warning("directory_lookup_crashed", dni=dni, error=str(directory))
            directory = Unavailable(reason=str(directory) or type(directory).__name__)

        return VerificationOutcome(dni=dni, identity=identity, directory=directory)


def build_verification_service(settings: Settings) -> VerificationService:
    """Wire providers, resolver and directory from settings."""
    return VerificationService(
        resolver=IdentityResolver(build_providers(settings)),
        directory=DirectoryLookup(settings.directory_config()),
    )
