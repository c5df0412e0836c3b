"""Tests for the ConsultasPeru and Decolecta identity providers."""

import json

import httpx
import pytest
import respx
from dnicheck.config import ConsultasPeruConfig, DecolectaConfig
from dnicheck.providers import (
    ConsultasPeruProvider,
    DecolectaProvider,
    Err,
    Ok,
    build_providers,
    list_providers,
)
from httpx import Response

CP_URL = "https://consultas.example.com/api/v1/query"
DC_URL = "https://decolecta.example.com/v1/reniec/dni"


def consultas(**overrides) -> ConsultasPeruProvider:
    config = {"api_url": CP_URL, "token": "cp-token", "timeout": 5.0}
    config.update(overrides)
    return ConsultasPeruProvider(ConsultasPeruConfig(**config))


def decolecta(**overrides) -> DecolectaProvider:
    config = {"api_url": DC_URL, "token": "dc-token", "timeout": 5.0}
    config.update(overrides)
    return DecolectaProvider(DecolectaConfig(**config))


class TestConsultasPeru:
    @pytest.mark.asyncio
    async def test_success_maps_fields(self):
        with respx.mock:
            route = respx.post(CP_URL).mock(
                return_value=Response(
                    200,
                    json={
                        "success": True,
                        "data": {
                            "number": "12345678",
                            "full_name": "PEREZ GOMEZ, JUAN",
                            "name": "JUAN",
                            "surname": "PEREZ GOMEZ",
                            "verification_code": 7,
                            "date_of_birth": "1990-01-01",
                            "ubigeo": "150101",
                            "civil_status": "SOLTERO",
                        },
                    },
                )
            )

            result = await consultas().lookup("12345678")

        assert isinstance(result, Ok)
        assert result.fields.id_number == "12345678"
        assert result.fields.given_name == "JUAN"
        assert result.fields.surname == "PEREZ GOMEZ"
        assert result.fields.verification_code == 7
        assert result.fields.extensions["date_of_birth"] == "1990-01-01"
        assert result.fields.extensions["civil_status"] == "SOLTERO"
        assert "name" not in result.fields.extensions

        body = json.loads(route.calls.last.request.content)
        assert body == {"token": "cp-token", "type_document": "dni", "document_number": "12345678"}

    @pytest.mark.asyncio
    async def test_missing_configuration_checked_before_network(self):
        with respx.mock(assert_all_called=False) as respx_mock:
            route = respx_mock.post(CP_URL).mock(return_value=Response(200, json={}))

            no_url = await consultas(api_url=None).lookup("12345678")
            no_token = await consultas(token=None).lookup("12345678")

            assert route.call_count == 0

        assert isinstance(no_url, Err)
        assert no_url.reason == "missing configuration: DNICHECK_CONSULTASPERU_API_URL"
        assert no_url.kind == "ConfigurationError"
        assert isinstance(no_token, Err)
        assert no_token.reason == "missing configuration: DNICHECK_CONSULTASPERU_TOKEN"

    @pytest.mark.asyncio
    async def test_network_error(self):
        with respx.mock:
            respx.post(CP_URL).mock(side_effect=httpx.ConnectError("connection refused"))
            result = await consultas().lookup("12345678")

        assert isinstance(result, Err)
        assert result.reason == "network error: connection refused"
        assert result.kind == "NetworkError"

    @pytest.mark.asyncio
    async def test_timeout_is_network_error(self):
        with respx.mock:
            respx.post(CP_URL).mock(side_effect=httpx.ReadTimeout("timed out"))
            result = await consultas().lookup("12345678")

        assert isinstance(result, Err)
        assert result.reason.startswith("network error: ")

    @pytest.mark.asyncio
    async def test_error_status_uses_upstream_message(self):
        with respx.mock:
            respx.post(CP_URL).mock(
                return_value=Response(401, json={"success": False, "message": "Token invalido"})
            )
            result = await consultas().lookup("12345678")

        assert isinstance(result, Err)
        assert result.reason == "Token invalido"
        assert result.kind == "UpstreamProtocolError"

    @pytest.mark.asyncio
    async def test_error_status_without_message(self):
        with respx.mock:
            respx.post(CP_URL).mock(return_value=Response(500, json={"error": "x"}))
            result = await consultas().lookup("12345678")

        assert isinstance(result, Err)
        assert result.reason == "HTTP 500"

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        with respx.mock:
            respx.post(CP_URL).mock(return_value=Response(502, text="<html>Bad gateway</html>"))
            result = await consultas().lookup("12345678")

        assert isinstance(result, Err)
        assert result.reason == "non-JSON response (HTTP 502)"

    @pytest.mark.asyncio
    async def test_unexpected_shape(self):
        with respx.mock:
            respx.post(CP_URL).mock(return_value=Response(200, json={"data": {"name": "JUAN"}}))
            result = await consultas().lookup("12345678")

        assert isinstance(result, Err)
        assert result.reason == "unexpected response shape"

    @pytest.mark.asyncio
    async def test_empty_body_is_unexpected_shape(self):
        with respx.mock:
            respx.post(CP_URL).mock(return_value=Response(200))
            result = await consultas().lookup("12345678")

        assert isinstance(result, Err)
        assert result.reason == "unexpected response shape"

    @pytest.mark.asyncio
    async def test_reported_failure(self):
        with respx.mock:
            respx.post(CP_URL).mock(
                return_value=Response(200, json={"success": False, "message": "DNI no encontrado"})
            )
            result = await consultas().lookup("12345678")

        assert isinstance(result, Err)
        assert result.reason == "DNI no encontrado"


class TestDecolecta:
    @pytest.mark.asyncio
    async def test_success_concatenates_last_names(self):
        with respx.mock:
            route = respx.get(DC_URL, params={"numero": "12345678"}).mock(
                return_value=Response(
                    200,
                    json={
                        "first_name": "JUAN  CARLOS",
                        "first_last_name": "PEREZ",
                        "second_last_name": "  GOMEZ ",
                        "full_name": "PEREZ GOMEZ JUAN CARLOS",
                        "document_number": "12345678",
                    },
                )
            )

            result = await decolecta().lookup("12345678")

            request = route.calls.last.request
            assert request.headers["Authorization"] == "dc-token"

        assert isinstance(result, Ok)
        assert result.fields.given_name == "JUAN CARLOS"
        assert result.fields.surname == "PEREZ GOMEZ"
        assert result.fields.id_number == "12345678"
        assert result.fields.verification_code is None
        assert result.fields.extensions["first_last_name"] == "PEREZ"

    @pytest.mark.asyncio
    async def test_absent_fields_are_empty(self):
        with respx.mock:
            respx.get(DC_URL).mock(
                return_value=Response(200, json={"first_last_name": "PEREZ"})
            )
            result = await decolecta().lookup("12345678")

        assert isinstance(result, Ok)
        assert result.fields.surname == "PEREZ"
        assert result.fields.given_name == ""

    @pytest.mark.asyncio
    async def test_missing_token(self):
        result = await decolecta(token=None).lookup("12345678")
        assert isinstance(result, Err)
        assert result.reason == "missing configuration: DNICHECK_DECOLECTA_TOKEN"

    @pytest.mark.asyncio
    async def test_not_found_message(self):
        with respx.mock:
            respx.get(DC_URL).mock(return_value=Response(404, json={"message": "dni not found"}))
            result = await decolecta().lookup("12345678")

        assert isinstance(result, Err)
        assert result.reason == "dni not found"

    @pytest.mark.asyncio
    async def test_unexpected_shape(self):
        with respx.mock:
            respx.get(DC_URL).mock(return_value=Response(200, json={"first_name": ["JUAN"]}))
            result = await decolecta().lookup("12345678")

        assert isinstance(result, Err)
        assert result.reason == "unexpected response shape"


class TestRegistry:
    def test_builtins_registered(self):
        names = {spec.name for spec in list_providers()}
        assert {"consultasperu", "decolecta"} <= names

    def test_build_providers_in_configured_order(self, settings):
        providers = build_providers(settings)
        assert [p.name for p in providers] == ["consultasperu", "decolecta"]

        reordered = settings.model_copy(update={"identity_providers": ["decolecta"]})
        assert [p.name for p in build_providers(reordered)] == ["decolecta"]

    def test_unknown_provider(self, settings):
        from dnicheck.core.errors import ConfigurationError

        broken = settings.model_copy(update={"identity_providers": ["nope"]})
        with pytest.raises(ConfigurationError):
            build_providers(broken)


class RaisingTransport(httpx.AsyncBaseTransport):
    def __init__(self, error):
        self.error = error

    async def handle_async_request(self, request):
        raise self.error


class TestLookupNeverRaises:
    @pytest.mark.asyncio
    async def test_non_ascii_header_token(self):
        with respx.mock(assert_all_called=False) as respx_mock:
            route = respx_mock.get(DC_URL).mock(return_value=Response(200, json={}))
            result = await decolecta(token="tökén").lookup("12345678")

        assert isinstance(result, Err)
        assert result.reason.startswith("network error: ")
        assert result.kind == "NetworkError"
        assert not route.called

    @pytest.mark.asyncio
    async def test_invalid_url_is_network_error(self):
        provider = DecolectaProvider(
            DecolectaConfig(api_url=DC_URL, token="dc-token"),
            transport=RaisingTransport(httpx.InvalidURL("Invalid port")),
        )

        result = await provider.lookup("12345678")

        assert isinstance(result, Err)
        assert result.reason == "network error: Invalid port"

    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_err(self):
        provider = ConsultasPeruProvider(
            ConsultasPeruConfig(api_url=CP_URL, token="cp-token"),
            transport=RaisingTransport(RuntimeError("transport exploded")),
        )

        result = await provider.lookup("12345678")

        assert isinstance(result, Err)
        assert result.reason == "unexpected error: transport exploded"
        assert result.kind == "RuntimeError"
