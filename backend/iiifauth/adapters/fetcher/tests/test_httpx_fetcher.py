"""Unit tests for HttpxResourceFetcher and load_document, over httpx.MockTransport."""

import httpx
import pytest

from iiifauth.adapters.fetcher.fake import FakeResourceFetcher
from iiifauth.adapters.fetcher.httpx_fetcher import HttpxResourceFetcher, load_document
from iiifauth.core.exceptions import ExternalServiceError
from iiifauth.core.protocols.fetcher import ResourceFetcher

INFO = "https://images.example.org/iiif/p1/info.json"
DEGRADED = "https://images.example.org/iiif/p1-degraded/info.json"


def _fetcher(handler) -> HttpxResourceFetcher:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), follow_redirects=True)
    return HttpxResourceFetcher(client)


class TestFetch:
    async def test_sends_bearer_token(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["authorization"] = request.headers.get("Authorization")
            return httpx.Response(200, json={"@id": "https://images.example.org/iiif/p1"})

        fetcher = _fetcher(handler)
        response = await fetcher.fetch(INFO, access_token="abc")

        assert seen["authorization"] == "Bearer abc"
        assert response.ok
        assert response.body["@id"] == "https://images.example.org/iiif/p1"
        assert response.redirected is False

    async def test_no_token_no_header(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["authorization"] = request.headers.get("Authorization")
            return httpx.Response(200, json={})

        await _fetcher(handler).fetch(INFO)

        assert seen["authorization"] is None

    async def test_error_status_is_returned_not_raised(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"service": []})

        response = await _fetcher(handler).fetch(INFO)

        assert response.status_code == 401
        assert not response.ok
        assert response.body == {"service": []}

    async def test_follows_redirect_to_degraded(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if str(request.url) == INFO:
                return httpx.Response(302, headers={"Location": DEGRADED})
            return httpx.Response(200, json={"@id": DEGRADED})

        response = await _fetcher(handler).fetch(INFO)

        assert response.status_code == 200
        assert response.url == DEGRADED
        assert response.redirected is True

    async def test_non_json_body_is_none(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>login</html>")

        response = await _fetcher(handler).fetch(INFO)

        assert response.body is None

    async def test_injected_client_is_left_open(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(204)))
        async with HttpxResourceFetcher(client) as fetcher:
            await fetcher.fetch(INFO)

        assert client.is_closed is False
        await client.aclose()

    def test_satisfies_protocol(self):
        assert isinstance(_fetcher(lambda r: httpx.Response(200)), ResourceFetcher)
        assert isinstance(FakeResourceFetcher(), ResourceFetcher)


class TestLoadDocument:
    async def test_returns_body_text(self):
        manifest = '{"@type": "sc:Manifest"}'
        fetcher = _fetcher(lambda r: httpx.Response(200, text=manifest))

        assert await load_document("https://ex.org/manifest.json", fetcher) == manifest

    async def test_error_status_raises(self):
        fetcher = _fetcher(lambda r: httpx.Response(500, text="boom"))

        with pytest.raises(ExternalServiceError) as exc_info:
            await load_document("https://ex.org/manifest.json", fetcher)

        assert exc_info.value.service_name == "https://ex.org/manifest.json"
        assert "HTTP 500" in exc_info.value.message

    async def test_with_fake_fetcher(self):
        fake = FakeResourceFetcher()
        fake.seed("https://ex.org/manifest.json", body="{}")

        assert await load_document("https://ex.org/manifest.json", fake) == "{}"
