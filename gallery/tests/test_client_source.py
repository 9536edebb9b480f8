from __future__ import annotations

import json

import httpx
import pytest

from gallery.client import (
    GalleryEntryNotFoundError,
    GalleryResolutionError,
    GalleryServerError,
    GalleryTransportError,
    GalleryUnauthorizedError,
    GalleryValidationError,
    HttpGallerySource,
    ResourceRef,
)


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url="http://gallery.test", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_login_stores_token_and_fetch_sends_bearer():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path == "/api/login":
            body = json.loads(request.content)
            assert body == {"username": "admin", "password": "secret"}
            return httpx.Response(200, json={"token": "tok"})
        return httpx.Response(
            200,
            json={"items": [{"id": "4", "prompt": "p"}], "hasMore": True, "nextCursor": "4", "limit": 1},
        )

    async with _client(handler) as client:
        source = HttpGallerySource(client)
        assert await source.login("admin", "secret") == "tok"
        page = await source.fetch_page("9", 1)

    assert page.next_cursor == "4"
    request = seen[-1]
    assert request.headers["Authorization"] == "Bearer tok"
    assert request.url.params["limit"] == "1"
    assert request.url.params["cursor"] == "9"


@pytest.mark.asyncio
async def test_fetch_page_rejects_out_of_range_limit():
    async with _client(lambda request: httpx.Response(200, json=[])) as client:
        source = HttpGallerySource(client, token="tok")
        with pytest.raises(ValueError):
            await source.fetch_page(None, 0)
        with pytest.raises(ValueError):
            await source.fetch_page(None, 201)


@pytest.mark.asyncio
async def test_first_page_omits_cursor_and_legacy_omits_both():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"id": "1"}])

    async with _client(handler) as client:
        source = HttpGallerySource(client, token="tok")
        await source.fetch_page(None, 60)
        legacy = await source.fetch_legacy()

    assert "cursor" not in seen[0].url.params
    assert dict(seen[1].url.params) == {}
    assert legacy.has_more is False


@pytest.mark.parametrize(
    ("status", "body", "error_type"),
    [
        (400, {"detail": "Invalid cursor"}, GalleryValidationError),
        (401, {"detail": "Unauthorized"}, GalleryUnauthorizedError),
        (404, {"error": "Not found"}, GalleryEntryNotFoundError),
        (500, {"detail": "db down"}, GalleryServerError),
        (502, {"detail": "Failed to retrieve file URL"}, GalleryResolutionError),
    ],
)
@pytest.mark.asyncio
async def test_error_statuses_map_to_client_errors(status, body, error_type):
    async with _client(lambda request: httpx.Response(status, json=body)) as client:
        source = HttpGallerySource(client, token="tok")
        with pytest.raises(error_type) as exc_info:
            await source.delete_entry("7")

    assert str(exc_info.value) == next(iter(body.values()))


@pytest.mark.asyncio
async def test_delete_sends_id_in_json_body():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True, "deletedId": "7"})

    async with _client(handler) as client:
        await HttpGallerySource(client, token="tok").delete_entry("7")

    assert seen[0].method == "DELETE"
    assert json.loads(seen[0].content) == {"id": "7"}


@pytest.mark.asyncio
async def test_network_failure_becomes_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(GalleryTransportError):
            await HttpGallerySource(client, token="tok").fetch_page(None, 10)


@pytest.mark.asyncio
async def test_resolve_display_url_checks_resource_endpoint():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params["file_id"] == "gone":
            return httpx.Response(502, json={"detail": "Failed to retrieve file URL"})
        return httpx.Response(200, content=b"\xff\xd8", headers={"content-type": "image/jpeg"})

    async with _client(handler) as client:
        source = HttpGallerySource(client, token="tok")
        url = await source.resolve_display_url(ResourceRef(file_id="abc"))
        with pytest.raises(GalleryResolutionError):
            await source.resolve_display_url(ResourceRef(file_id="gone"))
        with pytest.raises(GalleryResolutionError):
            await source.resolve_display_url(ResourceRef(file_id=None))

    assert url == "http://gallery.test/api/fileurl?file_id=abc"
