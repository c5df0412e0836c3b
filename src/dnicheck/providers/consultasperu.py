"""ConsultasPeru identity provider (primary)."""

from __future__ import annotations

from typing import Any

import httpx
import pydantic
from pydantic import BaseModel, ConfigDict

from dnicheck.config.settings import ConsultasPeruConfig, Settings
from dnicheck.core.errors import ConfigurationError, UpstreamProtocolError
from dnicheck.identity.models import IdentityFields
from dnicheck.providers.base import BaseIdentityProvider
from dnicheck.providers.registry import register_provider


class ConsultasPeruData(BaseModel):
    model_config = ConfigDict(extra="allow")

    number: int | str | None = None
    full_name: str | None = None
    name: str | None = None
    surname: str | None = None
    verification_code: int | str | None = None
    first_last_name: str | None = None
    second_last_name: str | None = None
    date_of_birth: str | None = None
    gender: str | None = None
    department: str | None = None
    province: str | None = None
    district: str | None = None
    address: str | None = None
    address_complete: str | None = None
    ubigeo: str | None = None
    ubigeo_sunat: str | None = None


class ConsultasPeruResponse(BaseModel):
    success: bool
    message: str | None = None
    data: ConsultasPeruData | None = None


# Keys promoted to the common identity shape; everything else is an extension.
_COMMON_KEYS = {"number", "full_name", "name", "surname", "verification_code"}


class ConsultasPeruProvider(BaseIdentityProvider):
    """POSTs the token and document number as a JSON body."""

    name = "consultasperu"

    def __init__(
        self,
        config: ConsultasPeruConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(timeout=config.timeout, transport=transport)
        self._config = config

    def _check_configuration(self) -> None:
        if not self._config.api_url:
            raise ConfigurationError("missing configuration: DNICHECK_CONSULTASPERU_API_URL")
        if not self._config.token:
            raise ConfigurationError("missing configuration: DNICHECK_CONSULTASPERU_TOKEN")

    async def _fetch(self, id_number: str) -> IdentityFields:
        status, body = await self._send(
            "POST",
            self._config.api_url or "",
            json={
                "token": self._config.token,
                "type_document": "dni",
                "document_number": id_number,
            },
        )
        self._raise_for_status(status, body)

        try:
            parsed = ConsultasPeruResponse.model_validate(body)
        except pydantic.ValidationError as exc:
            raise UpstreamProtocolError("unexpected response shape", {"status": status}) from exc

        if not parsed.success:
            raise UpstreamProtocolError(parsed.message or "upstream reported failure")
        if parsed.data is None:
            raise UpstreamProtocolError("unexpected response shape", {"status": status})

        return self._to_fields(parsed.data)

    @staticmethod
    def _to_fields(data: ConsultasPeruData) -> IdentityFields:
        raw: dict[str, Any] = data.model_dump()
        return IdentityFields(
            id_number=str(data.number) if data.number is not None else None,
            full_name=data.full_name,
            given_name=data.name,
            surname=data.surname,
            verification_code=data.verification_code,
            extensions={k: v for k, v in raw.items() if k not in _COMMON_KEYS},
        )


def _from_settings(settings: Settings) -> ConsultasPeruProvider:
    return ConsultasPeruProvider(settings.consultasperu_config())


register_provider(
    ConsultasPeruProvider.name,
    _from_settings,
    description="ConsultasPeru DNI lookup (POST, token in body)",
)
