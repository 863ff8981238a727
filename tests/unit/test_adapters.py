"""Unit tests for the completion and geocoding adapters."""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from openai import APIConnectionError

from backend.app.adapters.geocode import (
    GeocodeError,
    LocationNotFoundError,
    build_query,
    geocode,
)
from backend.app.adapters.llm import LLMError, complete
from backend.app.config import MissingOpenAIKeyError


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _mock_client(create: AsyncMock) -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = create
    return client


class TestComplete:
    def test_missing_key(self) -> None:
        with pytest.raises(MissingOpenAIKeyError):
            asyncio.run(complete([{"role": "user", "content": "hi"}]))

    def test_returns_text(self, test_settings) -> None:
        create = AsyncMock(return_value=_completion("Namaskar!"))

        with patch("backend.app.adapters.llm._create_client", return_value=_mock_client(create)):
            text = asyncio.run(complete([{"role": "user", "content": "hi"}], max_tokens=300))

        assert text == "Namaskar!"
        kwargs = create.call_args.kwargs
        assert kwargs["model"] == test_settings.openai_model
        assert kwargs["max_tokens"] == 300

    @pytest.mark.parametrize("content", [None, "", "   "])
    def test_empty_text_is_an_error(self, content) -> None:
        create = AsyncMock(return_value=_completion(content))

        with patch("backend.app.adapters.llm._create_client", return_value=_mock_client(create)):
            with pytest.raises(LLMError, match="Empty response"):
                asyncio.run(complete([{"role": "user", "content": "hi"}]))

    def test_api_error_is_wrapped(self) -> None:
        request = httpx.Request("POST", "https://openrouter.ai/api/v1/chat/completions")
        create = AsyncMock(side_effect=APIConnectionError(request=request))

        with patch("backend.app.adapters.llm._create_client", return_value=_mock_client(create)):
            with pytest.raises(LLMError):
                asyncio.run(complete([{"role": "user", "content": "hi"}]))

    def test_client_uses_configured_endpoint(self, test_settings) -> None:
        from backend.app.adapters.llm import _create_client

        test_settings.openai_api_key = "sk-or-test"
        client = _create_client()

        assert str(client.base_url).startswith("https://openrouter.ai/api/v1")
        assert client.api_key == "sk-or-test"


def _geocode_with(handler) -> object:
    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await geocode("Victoria Memorial", client=client)

    return asyncio.run(run())


class TestGeocode:
    def test_query_is_scoped_to_kolkata(self) -> None:
        assert build_query("Howrah Bridge") == "Howrah Bridge, Kolkata, West Bengal, India"
        assert build_query("Park Street, Kolkata") == "Park Street, Kolkata"

    def test_best_match(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["params"] = dict(request.url.params)
            seen["user_agent"] = request.headers["user-agent"]
            return httpx.Response(
                200,
                json=[
                    {
                        "lat": "22.5448",
                        "lon": "88.3426",
                        "display_name": "Victoria Memorial, Queens Way, Kolkata",
                        "place_id": 1234,
                    }
                ],
            )

        result = _geocode_with(handler)

        assert result.latitude == pytest.approx(22.5448)
        assert result.longitude == pytest.approx(88.3426)
        assert result.formatted_address.startswith("Victoria Memorial")
        assert result.place_id == 1234
        assert seen["params"]["q"] == "Victoria Memorial, Kolkata, West Bengal, India"
        assert seen["params"]["limit"] == "1"
        assert seen["user_agent"] == "KolkataExplorer/1.0"

    def test_no_results(self) -> None:
        with pytest.raises(LocationNotFoundError):
            _geocode_with(lambda request: httpx.Response(200, json=[]))

    def test_error_status(self) -> None:
        with pytest.raises(GeocodeError, match="503"):
            _geocode_with(lambda request: httpx.Response(503))

    def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(GeocodeError, match="request failed"):
            _geocode_with(handler)

    def test_malformed_body(self) -> None:
        with pytest.raises(GeocodeError, match="malformed"):
            _geocode_with(lambda request: httpx.Response(200, content=b"<html>"))
