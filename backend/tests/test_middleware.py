"""
StuntCheck Gateway — Middleware and Error Envelope Tests
==========================================================
"""

from unittest.mock import patch

import httpx
import pytest

from stuntcheck.middleware.auth import extract_bearer_token
from stuntcheck.services.identity_client import IdentityProviderClient


class TestExtractBearerToken:

    @pytest.mark.parametrize(
        "header, expected",
        [
            ("Bearer abc.def", "abc.def"),
            ("Bearer   padded  ", "padded"),
            ("Bearer ", None),
            ("Basic dXNlcjpwYXNz", None),
            ("", None),
            (None, None),
        ],
    )
    def test_extract(self, header, expected):
        assert extract_bearer_token(header) == expected


class TestAuthenticationMiddleware:

    @pytest.mark.asyncio
    async def test_anonymous_request_skips_provider(self, test_client, fake_identity):
        await test_client.get("/health")
        assert fake_identity.calls == []

    @pytest.mark.asyncio
    async def test_token_verified_once_per_request(self, test_client, fake_identity, alice_headers):
        await test_client.get("/api/children", headers=alice_headers)
        assert fake_identity.calls == [("get_user", "token-alice")]

    @pytest.mark.asyncio
    async def test_bad_token_does_not_block_anonymous_route(self, test_client):
        response = await test_client.post(
            "/api/predict",
            json={"gender": "male", "age": 1, "height": 70, "weight": 8},
            headers={"Authorization": "Bearer forged"},
        )
        assert response.status_code == 200

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "reply",
        [
            {"text": "<html>gateway</html>"},
            {"json": {"aud": "authenticated"}},
        ],
    )
    async def test_unusable_provider_reply_leaves_request_anonymous(self, test_client, reply):
        provider = IdentityProviderClient(
            base_url="https://identity.test",
            api_key="anon",
            transport=httpx.MockTransport(lambda request: httpx.Response(200, **reply)),
        )
        headers = {"Authorization": "Bearer whatever"}

        with patch("stuntcheck.middleware.auth.identity_client", provider):
            predict = await test_client.post(
                "/api/predict",
                json={"gender": "male", "age": 1, "height": 70, "weight": 8},
                headers=headers,
            )
            children = await test_client.get("/api/children", headers=headers)

        assert predict.status_code == 200
        assert children.status_code == 401
        assert children.json()["error"] == "unauthorized"
        assert "X-Request-ID" in children.headers


class TestRequestID:

    @pytest.mark.asyncio
    async def test_generated_id_is_echoed_in_header_and_error_body(self, test_client):
        response = await test_client.get("/api/children")

        rid = response.headers["X-Request-ID"]
        assert rid
        assert response.json()["request_id"] == rid

    @pytest.mark.asyncio
    async def test_client_id_is_reused(self, test_client):
        response = await test_client.get("/health", headers={"X-Request-ID": "trace-42"})
        assert response.headers["X-Request-ID"] == "trace-42"


class TestErrorEnvelope:

    @pytest.mark.asyncio
    async def test_unknown_route(self, test_client):
        response = await test_client.get("/api/nope")

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "http_error"
        assert set(body) >= {"error", "message", "request_id"}

    @pytest.mark.asyncio
    async def test_malformed_json_body(self, test_client, alice_headers):
        response = await test_client.post(
            "/api/children",
            content=b"{not json",
            headers={**alice_headers, "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
