"""Decolecta RENIEC identity provider (fallback)."""

from __future__ import annotations

from typing import Any

import httpx
import pydantic
from pydantic import BaseModel, ConfigDict

from dnicheck.config.settings import DecolectaConfig, Settings
from dnicheck.core.errors import ConfigurationError, UpstreamProtocolError
from dnicheck.identity.models import IdentityFields
from dnicheck.identity.normalizer import collapse_whitespace
from dnicheck.providers.base import BaseIdentityProvider
from dnicheck.providers.registry import register_provider


class DecolectaResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    first_name: str | None = None
    first_last_name: str | None = None
    second_last_name: str | None = None
    full_name: str | None = None
    document_number: int | str | None = None


_COMMON_KEYS = {"first_name", "full_name", "document_number"}


class DecolectaProvider(BaseIdentityProvider):
    """GETs ``?numero=<dni>`` with the raw token in the Authorization header."""

    name = "decolecta"

    def __init__(
        self,
        config: DecolectaConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(timeout=config.timeout, transport=transport)
        self._config = config

    def _check_configuration(self) -> None:
        if not self._config.token:
            raise ConfigurationError("missing configuration: DNICHECK_DECOLECTA_TOKEN")
        if not self._config.api_url:
            raise ConfigurationError("missing configuration: DNICHECK_DECOLECTA_API_URL")

    async def _fetch(self, id_number: str) -> IdentityFields:
        status, body = await self._send(
            "GET",
            self._config.api_url,
            params={"numero": id_number},
            headers={"Authorization": self._config.token or ""},
        )
        self._raise_for_status(status, body)

        try:
            parsed = DecolectaResponse.model_validate(body)
        except pydantic.ValidationError as exc:
            raise UpstreamProtocolError("unexpected response shape", {"status": status}) from exc

        return self._to_fields(parsed)

    @staticmethod
    def _to_fields(data: DecolectaResponse) -> IdentityFields:
        """Map RENIEC naming to the common shape; the two last names form the surname."""
        raw: dict[str, Any] = data.model_dump()
        surname = collapse_whitespace(f"{data.first_last_name or ''} {data.second_last_name or ''}")
        return IdentityFields(
            id_number=str(data.document_number) if data.document_number is not None else None,
            full_name=collapse_whitespace(data.full_name) or None,
            given_name=collapse_whitespace(data.first_name),
            surname=surname,
            verification_code=None,
            extensions={k: v for k, v in raw.items() if k not in _COMMON_KEYS},
        )


def _from_settings(settings: Settings) -> DecolectaProvider:
    return DecolectaProvider(settings.decolecta_config())


register_provider(
    DecolectaProvider.name,
    _from_settings,
    description="Decolecta RENIEC DNI lookup (GET, Authorization header)",
)
