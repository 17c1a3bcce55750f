"""httpx implementation of the ResourceFetcher protocol.

Redirects are followed so a degraded image service is visible to callers
through the final URL and the ``@id`` of the returned document.
"""

from typing import Any, Optional

import httpx

from iiifauth.core.config import settings
from iiifauth.core.exceptions import ExternalServiceError
from iiifauth.core.logging import logger
from iiifauth.core.protocols.fetcher import FetchResponse, ResourceFetcher


class HttpxResourceFetcher:
    """ResourceFetcher backed by a shared ``httpx.AsyncClient``.

    Use as an async context manager, or call ``aclose()`` when done. An
    externally owned client can be injected (for tests or connection
    sharing); it is then left open on close.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
    ) -> None:
        """Create the fetcher.

        Args:
            client: Pre-built client. When omitted one is created from settings.
            timeout: Override for ``settings.HTTP_TIMEOUT_SECONDS``.
            user_agent: Override for ``settings.HTTP_USER_AGENT``.
        """
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout or settings.HTTP_TIMEOUT_SECONDS),
            limits=httpx.Limits(max_connections=settings.HTTP_MAX_CONNECTIONS),
            headers={"User-Agent": user_agent or settings.HTTP_USER_AGENT},
            follow_redirects=True,
        )

    async def __aenter__(self) -> "HttpxResourceFetcher":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying client if this fetcher created it."""
        if self._owns_client:
            await self._client.aclose()

    async def fetch(self, uri: str, *, access_token: Optional[str] = None) -> FetchResponse:
        """GET ``uri`` expecting JSON.

        Args:
            uri: Address of the document.
            access_token: Bearer token for the ``Authorization`` header.

        Returns:
            The final status, URL and parsed body. Non-2xx answers are
            returned as-is so callers can branch on the status.
        """
        headers = {"Accept": "application/json, application/ld+json;q=0.9, */*;q=0.5"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"

        response = await self._client.get(uri, headers=headers)
        logger.debug(
            f"[HttpxResourceFetcher] GET {uri} -> {response.status_code}"
            + (f" (redirected to {response.url})" if response.history else "")
        )
        return FetchResponse(
            status_code=response.status_code,
            url=str(response.url),
            body=_json_or_none(response),
            redirected=bool(response.history),
        )

    async def fetch_text(self, uri: str) -> FetchResponse:
        """GET ``uri`` and keep the body as text."""
        response = await self._client.get(uri)
        return FetchResponse(
            status_code=response.status_code,
            url=str(response.url),
            body=response.text,
            redirected=bool(response.history),
        )


def _json_or_none(response: httpx.Response) -> Optional[Any]:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


async def load_document(uri: str, fetcher: Optional[ResourceFetcher] = None) -> str:
    """Load a document (typically a manifest) and return its raw text.

    Args:
        uri: Address of the document.
        fetcher: Fetcher to use. A short-lived ``HttpxResourceFetcher`` is
            created when omitted.

    Returns:
        The response body.

    Raises:
        ExternalServiceError: If the server answers with a non-2xx status.
    """
    if fetcher is None:
        async with HttpxResourceFetcher() as owned:
            return await load_document(uri, owned)

    response = await fetcher.fetch_text(uri)
    if not response.ok:
        raise ExternalServiceError(
            service_name=uri, message=f"GET returned HTTP {response.status_code}"
        )
    return response.body or ""
