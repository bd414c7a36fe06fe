"""Tests for the upstream API client and its GET cache."""

import httpx
import pytest

from conftest import BASE_URL
from generic_mcp_server.api_client import ApiClient, build_url
from generic_mcp_server.errors import UpstreamError


class TestBuildUrl:
    def test_resolves_endpoint_and_appends_params(self):
        url = build_url(BASE_URL, "/resources", {"status": "active"})
        assert url == "https://api.test/resources?status=active"

    def test_drops_none_and_empty_values(self):
        omitted = build_url(BASE_URL, "/resources", {"status": "active"})
        empty = build_url(BASE_URL, "/resources", {"status": "active", "limit": "", "offset": None})
        assert omitted == empty

    def test_serialises_scalars(self):
        url = build_url(BASE_URL, "/resources", {"limit": 5, "archived": False})
        assert url == "https://api.test/resources?limit=5&archived=false"

    def test_no_params_leaves_url_bare(self):
        assert build_url(BASE_URL, "/resources") == "https://api.test/resources"


class TestGet:
    @pytest.mark.asyncio
    async def test_sends_auth_and_accept_headers(self, api_client, upstream):
        upstream.route("GET", "/resources", {"resources": []})

        await api_client.get("/resources")

        request = upstream.requests[0]
        assert request.headers["Authorization"] == "Bearer secret"
        assert request.headers["Accept"] == "application/json"

    @pytest.mark.asyncio
    async def test_no_authorization_without_api_key(self, upstream):
        client = ApiClient(BASE_URL, transport=upstream.transport)
        upstream.route("GET", "/ping", {"ok": True})

        await client.get("/ping")

        assert "Authorization" not in upstream.requests[0].headers

    @pytest.mark.asyncio
    async def test_second_call_within_ttl_is_served_from_cache(self, api_client, upstream, clock):
        upstream.route("GET", "/resources", {"resources": [{"id": "r1"}]})
        upstream.route("GET", "/resources", {"resources": [{"id": "r2"}]})

        first = await api_client.get("/resources", {"status": "active"})
        clock.advance(59)
        second = await api_client.get("/resources", {"status": "active"})

        assert second == first
        assert len(upstream.requests) == 1
        assert str(upstream.requests[0].url) == "https://api.test/resources?status=active"

    @pytest.mark.asyncio
    async def test_refetches_after_ttl_and_overwrites_entry(self, api_client, upstream, clock):
        upstream.route("GET", "/resources", {"n": 1})
        upstream.route("GET", "/resources", {"n": 2})

        await api_client.get("/resources")
        clock.advance(60)
        fresh = await api_client.get("/resources")
        again = await api_client.get("/resources")

        assert fresh == {"n": 2}
        assert again == {"n": 2}
        assert len(upstream.requests) == 2
        assert api_client.cache.get("https://api.test/resources").stored_at == clock.now

    @pytest.mark.asyncio
    async def test_empty_and_omitted_params_share_cache_entry(self, api_client, upstream):
        upstream.route("GET", "/resources", {"resources": []})

        await api_client.get("/resources", {"status": "active"})
        await api_client.get("/resources", {"status": "active", "limit": ""})

        assert len(upstream.requests) == 1

    @pytest.mark.asyncio
    async def test_use_cache_false_bypasses_cache(self, api_client, upstream):
        upstream.route("GET", "/resources", {"n": 1})

        await api_client.get("/resources", use_cache=False)
        await api_client.get("/resources", use_cache=False)

        assert len(upstream.requests) == 2
        assert len(api_client.cache) == 0

    @pytest.mark.asyncio
    async def test_clear_cache_forces_refetch(self, api_client, upstream):
        upstream.route("GET", "/resources", {"n": 1})

        await api_client.get("/resources")
        assert api_client.clear_cache() is None
        await api_client.get("/resources")

        assert len(upstream.requests) == 2

    @pytest.mark.asyncio
    async def test_non_2xx_raises_upstream_error_and_is_not_cached(self, api_client, upstream):
        upstream.route("GET", "/resources/missing", status=404, text="not here")

        with pytest.raises(UpstreamError) as excinfo:
            await api_client.get("/resources/missing")

        assert excinfo.value.status_code == 404
        assert excinfo.value.body == "not here"
        assert "status 404" in str(excinfo.value)
        assert len(api_client.cache) == 0

    @pytest.mark.asyncio
    async def test_network_fault_raises_upstream_error(self):
        def boom(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = ApiClient(BASE_URL, transport=httpx.MockTransport(boom))

        with pytest.raises(UpstreamError) as excinfo:
            await client.get("/resources")

        assert excinfo.value.status_code is None
        assert "connection refused" in excinfo.value.body

    @pytest.mark.asyncio
    async def test_invalid_json_raises_upstream_error(self, api_client, upstream):
        upstream.route("GET", "/resources", text="<html>oops</html>")

        with pytest.raises(UpstreamError, match="Invalid upstream response"):
            await api_client.get("/resources")


class TestWrites:
    @pytest.mark.asyncio
    async def test_post_sends_json_and_never_caches(self, api_client, upstream):
        upstream.route("POST", "/resources", {"id": "r1"})

        first = await api_client.post("/resources", {"name": "widget"})
        second = await api_client.post("/resources", {"name": "widget"})

        assert first == second == {"id": "r1"}
        assert len(upstream.requests) == 2
        assert upstream.requests[0].headers["Content-Type"] == "application/json"
        assert upstream.body(0) == {"name": "widget"}
        assert len(api_client.cache) == 0

    @pytest.mark.asyncio
    async def test_post_does_not_consult_cache(self, api_client, upstream):
        upstream.route("GET", "/resources", {"from": "get"})
        upstream.route("POST", "/resources", {"from": "post"})

        await api_client.get("/resources")
        result = await api_client.post("/resources", {})

        assert result == {"from": "post"}

    @pytest.mark.asyncio
    async def test_post_failure_raises_upstream_error(self, api_client, upstream):
        upstream.route("POST", "/resources", status=500, text="kaput")

        with pytest.raises(UpstreamError) as excinfo:
            await api_client.post("/resources", {"name": "x"})

        assert excinfo.value.status_code == 500

    @pytest.mark.asyncio
    async def test_put_and_delete(self, api_client, upstream):
        upstream.route("PUT", "/resources/r1", {"id": "r1", "name": "new"})
        upstream.route("DELETE", "/resources/r1", status=204)

        updated = await api_client.put("/resources/r1", {"name": "new"})
        deleted = await api_client.delete("/resources/r1")

        assert updated == {"id": "r1", "name": "new"}
        assert deleted is None
        assert upstream.body(0) == {"name": "new"}
        assert len(api_client.cache) == 0
