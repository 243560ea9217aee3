"""
🧪 test_fixer_client.py — unit-тести для FixerClient

Перевіряє:
- Запити symbols / latest з access_key
- Мапінг кодів помилок Fixer у тексти
- Мережеві збої, не-2xx статуси та битий JSON → NetworkFailure
"""

import httpx
import pytest

from fxwidget.infrastructure.currency.fixer_client import (
    RATES_NETWORK_MESSAGE,
    SYMBOLS_NETWORK_MESSAGE,
    FixerClient,
    describe_provider_error,
)
from fxwidget.shared.errors import NetworkFailure, ProviderError


def _client(handler) -> FixerClient:
    transport = httpx.MockTransport(handler)
    return FixerClient(
        base_url="https://fixer.test/api",
        client=httpx.AsyncClient(transport=transport),
        clock=lambda: 1234.0,
    )


@pytest.mark.asyncio
async def test_fetch_latest_parses_rates_and_sends_key():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["key"] = request.url.params.get("access_key")
        return httpx.Response(200, json={"success": True, "base": "EUR", "rates": {"USD": 1.1, "GBP": 0.85}})

    client = _client(handler)
    table = await client.fetch_latest("secret-key")

    assert seen == {"path": "/api/latest", "key": "secret-key"}
    assert table.lookup("USD") == 1.1
    assert table.fetched_at == 1234.0
    await client.close()


@pytest.mark.asyncio
async def test_fetch_symbols_parses_names():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/symbols"
        return httpx.Response(200, json={"success": True, "symbols": {"USD": "United States Dollar", "eur": "Euro"}})

    currencies = await _client(handler).fetch_symbols("k")

    assert currencies.name_of("USD") == "United States Dollar"
    assert "EUR" in currencies
    assert len(currencies) == 2


@pytest.mark.asyncio
async def test_error_101_maps_to_invalid_key_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"success": False, "error": {"code": 101, "info": "raw"}})

    with pytest.raises(ProviderError) as info:
        await _client(handler).fetch_latest("bad")

    assert info.value.message == "Invalid API key. Please check your API key."
    assert info.value.code == 101
    assert info.value.endpoint == "latest"


@pytest.mark.asyncio
async def test_unknown_code_uses_provider_info():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"success": False, "error": {"code": 999, "info": "custom"}})

    with pytest.raises(ProviderError) as info:
        await _client(handler).fetch_symbols("k")
    assert info.value.message == "custom"


@pytest.mark.parametrize(
    "error,expected",
    [
        (None, "Unknown error occurred"),
        ({"code": 104}, "Monthly usage limit exceeded. Try again next month."),
        ({"code": 202}, "Invalid target currency."),
        ({"code": 500}, "An error occurred"),
        ({"code": 999, "info": "custom"}, "custom"),
    ],
)
def test_describe_provider_error(error, expected):
    assert describe_provider_error(error) == expected


@pytest.mark.asyncio
async def test_transport_error_is_network_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("offline", request=request)

    client = _client(handler)
    with pytest.raises(NetworkFailure) as info:
        await client.fetch_latest("k")
    assert info.value.message == RATES_NETWORK_MESSAGE

    with pytest.raises(NetworkFailure) as info:
        await client.fetch_symbols("k")
    assert info.value.message == SYMBOLS_NETWORK_MESSAGE


@pytest.mark.asyncio
async def test_http_status_error_is_network_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="down")

    with pytest.raises(NetworkFailure) as info:
        await _client(handler).fetch_latest("k")
    assert info.value.status_code == 503


@pytest.mark.asyncio
async def test_malformed_json_is_network_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>not json</html>")

    with pytest.raises(NetworkFailure):
        await _client(handler).fetch_latest("k")


@pytest.mark.asyncio
async def test_close_keeps_injected_client_open():
    inner = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json={})))
    client = FixerClient(client=inner)
    await client.close()
    assert not inner.is_closed
    await inner.aclose()
