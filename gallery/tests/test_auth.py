from __future__ import annotations

import asyncio
import importlib

import httpx
import pytest
from fastapi.testclient import TestClient

auth_api = importlib.import_module("gallery.features.auth.api")
auth_service = importlib.import_module("gallery.features.auth.service")
from gallery.core.config import get_settings
from gallery.features.auth import InvalidTokenError, TokenExpiredError, issue_token, verify_token
from gallery.features.auth.turnstile import client_ip_from_headers, verify_turnstile_token
from gallery.main import app


@pytest.fixture
def http_override():
    async def _override_http():
        return object()

    app.dependency_overrides[auth_api.get_http_client] = _override_http
    yield
    app.dependency_overrides.pop(auth_api.get_http_client, None)


def test_token_round_trip_and_expiry():
    token = issue_token("admin", secret="s3cret", ttl_seconds=60, now=1_000_000_000)
    claims = verify_token(
        issue_token("admin", secret="s3cret", ttl_seconds=60),
        secret="s3cret",
    )
    assert claims["user"] == "admin"
    assert claims["exp"] - claims["iat"] == 60

    with pytest.raises(TokenExpiredError):
        verify_token(token, secret="s3cret")
    with pytest.raises(InvalidTokenError):
        verify_token("", secret="s3cret")
    with pytest.raises(InvalidTokenError):
        verify_token("not.a.jwt", secret="s3cret")


def test_login_returns_a_token_for_configured_credentials(http_override):
    settings = get_settings()
    response = TestClient(app).post(
        "/api/login",
        json={"username": settings.gallery_user, "password": settings.gallery_pass},
    )

    assert response.status_code == 200
    claims = verify_token(response.json()["token"], secret=settings.jwt_secret)
    assert claims["user"] == settings.gallery_user


@pytest.mark.parametrize("body", [None, {"username": "admin"}, {"username": "admin", "password": "wrong"}])
def test_login_rejects_bad_credentials(http_override, body):
    response = TestClient(app).post("/api/login", json=body)

    assert response.status_code == 401


def test_failed_human_verification_is_forbidden(monkeypatch, http_override):
    seen: dict[str, object] = {}

    async def _reject(_client, *, token, remote_ip, secret_key, verify_url):
        seen.update(token=token, remote_ip=remote_ip)
        return False

    monkeypatch.setattr(auth_service, "verify_turnstile_token", _reject)
    settings = get_settings()

    response = TestClient(app).post(
        "/api/login",
        json={
            "username": settings.gallery_user,
            "password": settings.gallery_pass,
            "turnstileToken": "challenge",
        },
        headers={"x-forwarded-for": "203.0.113.9, 10.0.0.1"},
    )

    assert response.status_code == 403
    assert seen == {"token": "challenge", "remote_ip": "203.0.113.9"}


def test_client_ip_prefers_cloudflare_header():
    assert client_ip_from_headers({"cf-connecting-ip": " 198.51.100.1 ", "x-forwarded-for": "1.1.1.1"}) == "198.51.100.1"
    assert client_ip_from_headers({}) == ""


def test_turnstile_verification_calls_siteverify():
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"success": request.url.host == "verify.test"})

    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            skipped = await verify_turnstile_token(
                client, token="t", remote_ip="", secret_key="", verify_url="https://verify.test/"
            )
            passed = await verify_turnstile_token(
                client, token="t", remote_ip="1.2.3.4", secret_key="key", verify_url="https://verify.test/"
            )
            failed = await verify_turnstile_token(
                client, token="t", remote_ip="1.2.3.4", secret_key="key", verify_url="https://other.test/"
            )
        return skipped, passed, failed

    assert asyncio.run(_run()) == (True, True, False)
    assert len(requests) == 2
