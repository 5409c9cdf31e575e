"""HubSpot API 클라이언트 어댑터 테스트"""

import json
from urllib.parse import parse_qs

import httpx
import pytest

from adapters.external.hubspot_api_client import HubspotApiClientAdapter
from core.domain.exceptions import AuthError, CrmApiError


def make_client(handler, mock_logger):
    return HubspotApiClientAdapter(
        client_id="cid",
        client_secret="secret",
        logger=mock_logger,
        base_url="https://hubspot.test/",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_search_posts_request_with_bearer_token(mock_logger):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"results": [{"id": "1"}]})

    client = make_client(handler, mock_logger)
    result = await client.search_objects("token-1", "contacts", {"limit": 100, "after": "200"})

    assert seen["url"] == "https://hubspot.test/crm/v3/objects/contacts/search"
    assert seen["auth"] == "Bearer token-1"
    assert seen["body"] == {"limit": 100, "after": "200"}
    assert result == {"results": [{"id": "1"}]}


@pytest.mark.asyncio
async def test_search_failure_raises_api_error_with_status(mock_logger):
    client = make_client(lambda request: httpx.Response(429, text="rate limited"), mock_logger)

    with pytest.raises(CrmApiError) as exc_info:
        await client.search_objects("token", "companies", {})

    assert exc_info.value.status_code == 429


@pytest.mark.asyncio
async def test_batch_read_associations(mock_logger):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(207, json={"results": [{"from": {"id": "1"}, "to": [{"id": "9"}]}]})

    client = make_client(handler, mock_logger)
    results = await client.batch_read_associations("token", "contacts", "companies", ["1", "2"])

    assert seen["path"] == "/crm/v3/associations/contacts/companies/batch/read"
    assert seen["body"] == {"inputs": [{"id": "1"}, {"id": "2"}]}
    assert results == [{"from": {"id": "1"}, "to": [{"id": "9"}]}]


@pytest.mark.asyncio
async def test_batch_read_objects_requests_properties(mock_logger):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"results": [{"id": "9", "properties": {"email": "a@x.io"}}]})

    client = make_client(handler, mock_logger)
    results = await client.batch_read_objects("token", "contacts", ["9"], ["email"])

    assert seen["path"] == "/crm/v3/objects/contacts/batch/read"
    assert seen["body"] == {"properties": ["email"], "inputs": [{"id": "9"}]}
    assert results[0]["properties"]["email"] == "a@x.io"


@pytest.mark.asyncio
async def test_refresh_access_token_posts_form(mock_logger):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["form"] = parse_qs(request.content.decode())
        return httpx.Response(200, json={"access_token": "new", "expires_in": 1800})

    client = make_client(handler, mock_logger)
    result = await client.refresh_access_token("refresh-1")

    assert seen["path"] == "/oauth/v1/token"
    assert seen["form"] == {
        "grant_type": ["refresh_token"],
        "client_id": ["cid"],
        "client_secret": ["secret"],
        "refresh_token": ["refresh-1"],
    }
    assert result["access_token"] == "new"


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [400, 401])
async def test_rejected_refresh_is_auth_error(mock_logger, status_code):
    client = make_client(lambda request: httpx.Response(status_code, json={"status": "BAD_REFRESH_TOKEN"}), mock_logger)

    with pytest.raises(AuthError):
        await client.refresh_access_token("revoked")


@pytest.mark.asyncio
async def test_refresh_server_error_is_api_error(mock_logger):
    client = make_client(lambda request: httpx.Response(503, text="unavailable"), mock_logger)

    with pytest.raises(CrmApiError) as exc_info:
        await client.refresh_access_token("refresh-1")

    assert not isinstance(exc_info.value, AuthError)
    assert exc_info.value.status_code == 503
