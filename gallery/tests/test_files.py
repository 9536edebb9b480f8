from __future__ import annotations

import asyncio
import importlib

import httpx
import pytest
from fastapi.testclient import TestClient

files_api = importlib.import_module("gallery.features.files.api")
files_service = importlib.import_module("gallery.features.files.service")
from gallery.features.files import (
    FileProvider,
    LocatedFile,
    MissingProviderCredentialError,
    ResourceLocator,
    ResourceResolutionError,
)
from gallery.main import app

PROVIDERS = [
    FileProvider(name="official", base_url="https://official.test"),
    FileProvider(name="proxy", base_url="https://proxy.test/"),
]


def _open(handler, file_id="abc"):
    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            located = await ResourceLocator(client, PROVIDERS).open(file_id, bot_token="123:tok")
            try:
                body = await located.response.aread()
            finally:
                await located.aclose()
            return located, body

    return asyncio.run(_run())


def test_primary_provider_serves_file():
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        if request.url.path.endswith("/getFile"):
            return httpx.Response(200, json={"ok": True, "result": {"file_path": "photos/a.png"}})
        return httpx.Response(200, content=b"png-bytes", headers={"content-type": "image/png"})

    located, body = _open(handler)

    assert located.provider == "official"
    assert located.content_type == "image/png"
    assert body == b"png-bytes"
    assert seen == [
        "https://official.test/bot123:tok/getFile?file_id=abc",
        "https://official.test/file/bot123:tok/photos/a.png",
    ]


def test_falls_back_to_proxy_when_primary_fails():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "official.test":
            raise httpx.ConnectError("blocked", request=request)
        if request.url.path.endswith("/getFile"):
            return httpx.Response(200, json={"ok": True, "result": {"file_path": "photos/a.jpg"}})
        return httpx.Response(200, content=b"jpg-bytes")

    located, body = _open(handler)

    assert located.provider == "proxy"
    assert located.content_type == "image/jpeg"
    assert body == b"jpg-bytes"


@pytest.mark.parametrize(
    ("status", "kwargs"),
    [
        (200, {"json": {"ok": False, "description": "file not found"}}),
        (200, {"json": {"ok": True, "result": {}}}),
        (502, {"text": "<html>bad gateway</html>"}),
    ],
)
def test_unusable_lookups_exhaust_the_chain(status, kwargs):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, **kwargs)

    with pytest.raises(ResourceResolutionError, match="Failed to retrieve file URL"):
        _open(handler)


def test_download_failure_moves_to_next_provider():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/getFile"):
            return httpx.Response(200, json={"ok": True, "result": {"file_path": "x.jpg"}})
        if request.url.host == "official.test":
            return httpx.Response(404)
        return httpx.Response(200, content=b"ok")

    located, _body = _open(handler)
    assert located.provider == "proxy"


def test_bot_token_prefers_entry_then_default(monkeypatch):
    settings = files_service.get_settings()
    monkeypatch.setattr(settings, "bot_token", "default-token")

    async def _stored(_session, *, file_id):
        return "entry-token" if file_id == "known" else None

    monkeypatch.setattr(files_service, "find_bot_token", _stored)

    assert asyncio.run(files_service.resolve_bot_token(object(), file_id="known")) == "entry-token"
    assert asyncio.run(files_service.resolve_bot_token(object(), file_id="other")) == "default-token"

    monkeypatch.setattr(settings, "bot_token", "")
    with pytest.raises(MissingProviderCredentialError):
        asyncio.run(files_service.resolve_bot_token(object(), file_id="other"))


@pytest.fixture
def api_overrides():
    async def _override_db():
        yield object()

    async def _override_http():
        return object()

    app.dependency_overrides[files_api.get_db_session] = _override_db
    app.dependency_overrides[files_api.get_http_client] = _override_http
    yield
    app.dependency_overrides.pop(files_api.get_db_session, None)
    app.dependency_overrides.pop(files_api.get_http_client, None)


def test_fileurl_streams_bytes_with_immutable_cache(monkeypatch, api_overrides):
    closed: list[bool] = []

    class _Located(LocatedFile):
        async def aclose(self):
            closed.append(True)
            await super().aclose()

    async def _fake_open(_session, _client, *, file_id):
        assert file_id == "abc"
        return _Located(provider="official", content_type="image/webp", response=httpx.Response(200, content=b"webp"))

    monkeypatch.setattr(files_api, "open_file", _fake_open)

    response = TestClient(app).get("/api/fileurl", params={"file_id": "abc"})

    assert response.status_code == 200
    assert response.content == b"webp"
    assert response.headers["content-type"] == "image/webp"
    assert response.headers["cache-control"] == "public, max-age=31536000, immutable"
    assert closed == [True]


def test_fileurl_error_statuses(monkeypatch, api_overrides):
    async def _fail(_session, _client, *, file_id):
        if file_id == "nocred":
            raise MissingProviderCredentialError("No bot token available")
        raise ResourceResolutionError("Failed to retrieve file URL")

    monkeypatch.setattr(files_api, "open_file", _fail)
    client = TestClient(app)

    missing = client.get("/api/fileurl")
    assert missing.status_code == 400
    assert missing.json() == {"detail": "file_id required"}

    unresolved = client.get("/api/fileurl", params={"file_id": "abc"})
    assert unresolved.status_code == 502
    assert unresolved.json() == {"detail": "Failed to retrieve file URL"}

    no_credential = client.get("/api/fileurl", params={"file_id": "nocred"})
    assert no_credential.status_code == 500
