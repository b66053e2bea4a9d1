"""Bankard HTTP Client — tests for transport and status mapping via httpx.MockTransport.

Tests cover:
    - Bearer header only when a token is given
    - Timeouts → RequestTimeoutError, connection failures → NetworkError
    - Non-2xx statuses map through error_from_status with server detail kept technical
    - Empty bodies decode to None; non-JSON success bodies are UnexpectedError
"""

import json

import httpx
import pytest

from bankard.core.domain_types import Operation
from bankard.core.errors import (
    BadRequestError,
    NetworkError,
    RequestTimeoutError,
    ServerError,
    UnauthorizedError,
    UnexpectedError,
)
from bankard.infrastructure.http_client import BankardHttpClient

OP = Operation.LIST_ACCOUNTS


def _client(handler) -> BankardHttpClient:
    return BankardHttpClient("https://api.test", transport=httpx.MockTransport(handler))


async def test_bearer_header_attached_when_token_given():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=[])

    async with _client(handler) as client:
        await client.request("GET", "/v1/account", operation=OP, token="tok-1")
        await client.request("GET", "/v1/account", operation=OP)

    assert seen[0].headers["Authorization"] == "Bearer tok-1"
    assert "Authorization" not in seen[1].headers


async def test_timeout_maps_to_timeout_error():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    async with _client(handler) as client:
        with pytest.raises(RequestTimeoutError) as exc_info:
            await client.request("GET", "/v1/account", operation=OP)
    assert exc_info.value.context.operation is OP
    assert isinstance(exc_info.value.cause, httpx.ReadTimeout)


async def test_connect_error_maps_to_network_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(NetworkError) as exc_info:
            await client.request("GET", "/v1/account", operation=OP)
    assert exc_info.value.status_code == 0


@pytest.mark.parametrize(
    "status, cls",
    [(400, BadRequestError), (401, UnauthorizedError), (503, ServerError), (418, UnexpectedError)],
)
async def test_status_mapping(status, cls):
    async with _client(lambda r: httpx.Response(status, json={"message": "nope"})) as client:
        with pytest.raises(cls) as exc_info:
            await client.request("GET", "/v1/account", operation=OP)
    assert exc_info.value.status_code == status
    assert exc_info.value.context.detail == "nope"
    assert "nope" not in exc_info.value.message


async def test_plain_text_error_body_kept_as_detail():
    async with _client(lambda r: httpx.Response(500, text="upstream down")) as client:
        with pytest.raises(ServerError) as exc_info:
            await client.request("GET", "/v1/account", operation=OP)
    assert exc_info.value.context.detail == "upstream down"


async def test_empty_body_returns_none():
    async with _client(lambda r: httpx.Response(204)) as client:
        assert await client.request("POST", "/x", operation=OP) is None


async def test_invalid_json_success_body_is_unexpected():
    async with _client(lambda r: httpx.Response(200, text="<html>")) as client:
        with pytest.raises(UnexpectedError):
            await client.request("GET", "/v1/account", operation=OP)


async def test_query_params_and_json_body_forwarded():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    async with _client(handler) as client:
        body = await client.request(
            "POST", "/x", operation=OP, json={"a": 1}, params={"page": 2},
        )
    assert body == {"ok": True}
    assert seen[0].url.params["page"] == "2"
    assert json.loads(seen[0].content) == {"a": 1}
