# api_client.py: authenticated upstream calls with a read-through GET cache

import logging
from typing import Any, Callable, Mapping, Optional

import httpx

from .cache import DEFAULT_TTL_SECONDS, TtlCache
from .errors import UpstreamError

logger = logging.getLogger("generic_mcp.api")

QueryParams = Mapping[str, Any]


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_url(base_url: str, endpoint: str, params: Optional[QueryParams] = None) -> str:
    """Resolve ``endpoint`` against ``base_url`` and append the usable params.

    ``None`` and empty-string values are dropped, so a call that omits a
    parameter and one that passes ``""`` resolve to the same URL.
    """
    url = httpx.URL(base_url).join(endpoint)
    pairs = [
        (key, _query_value(value))
        for key, value in (params or {}).items()
        if value is not None and value != ""
    ]
    if pairs:
        url = url.copy_merge_params(pairs)
    return str(url)


class ApiClient:
    """HTTP client for one configured upstream service.

    GET responses are cached by full request URL for ``cache_ttl_seconds``.
    Writes (POST/PUT/DELETE) never read or populate the cache. Failures of any
    kind come back as :class:`UpstreamError`; nothing is retried here.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        cache_ttl_seconds: float = DEFAULT_TTL_SECONDS,
        timeout: float = 30.0,
        cache_max_entries: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.base_url = base_url
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport
        self.cache = TtlCache(cache_ttl_seconds, max_entries=cache_max_entries, clock=clock)

    @classmethod
    def from_settings(cls, settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "ApiClient":
        return cls(
            base_url=settings.base_url,
            api_key=settings.api_key,
            cache_ttl_seconds=settings.cache_ttl_seconds,
            timeout=settings.service_timeout,
            cache_max_entries=settings.cache_max_entries,
            transport=transport,
        )

    def headers(self) -> dict:
        h = {"Accept": "application/json"}
        if self._api_key:
            h["Authorization"] = f"Bearer {self._api_key}"
        return h

    async def get(self, endpoint: str, params: Optional[QueryParams] = None, use_cache: bool = True) -> Any:
        url = build_url(self.base_url, endpoint, params)
        if use_cache:
            entry = self.cache.get(url)
            if entry is not None:
                logger.debug(f"Using cached result for: {url}")
                return entry.value

        data = await self._request("GET", url)
        if use_cache:
            self.cache.set(url, data)
        return data

    async def post(self, endpoint: str, body: Any) -> Any:
        return await self._request("POST", build_url(self.base_url, endpoint), body=body)

    async def put(self, endpoint: str, body: Any) -> Any:
        return await self._request("PUT", build_url(self.base_url, endpoint), body=body)

    async def delete(self, endpoint: str) -> Any:
        return await self._request("DELETE", build_url(self.base_url, endpoint))

    def clear_cache(self) -> None:
        self.cache.clear()
        logger.info("API cache cleared")

    async def _request(self, method: str, url: str, body: Any = None) -> Any:
        kwargs = {}
        if method in ("POST", "PUT"):
            kwargs["json"] = body

        logger.info(f"{method} {url}")
        try:
            async with httpx.AsyncClient(headers=self.headers(), timeout=self._timeout, transport=self._transport) as client:
                r = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"API request failed: {method} {url}: {e}")
            raise UpstreamError(None, str(e)) from e

        if not r.is_success:
            logger.error(f"API request failed: {method} {url} -> {r.status_code}")
            raise UpstreamError(r.status_code, r.text)
        return _decode(r)


def _decode(r: httpx.Response) -> Any:
    if not r.content.strip():
        return None
    try:
        return r.json()
    except ValueError as e:
        raise UpstreamError(r.status_code, f"Invalid upstream response: {r.text}") from e
