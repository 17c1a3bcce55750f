"""Fake resource fetcher for testing.

Serves canned responses per (uri, access_token) and records every request.
"""

from typing import Any, Dict, List, Optional, Tuple

from iiifauth.core.protocols.fetcher import FetchResponse


class FakeResourceFetcher:
    """In-memory ResourceFetcher.

    Responses seeded with a token only answer requests carrying that token;
    responses seeded without one answer any request that has no more
    specific match. Unseeded URIs answer 404.

    Usage:
        fake = FakeResourceFetcher()
        fake.seed("https://ex.org/iiif/1/info.json", status_code=401, body={...})
        fake.seed("https://ex.org/iiif/1/info.json", body={...}, access_token="t")
    """

    def __init__(self) -> None:
        """Initialize with no seeded responses."""
        self._responses: Dict[Tuple[str, Optional[str]], FetchResponse] = {}
        self._errors: Dict[str, Exception] = {}
        self.requests: List[Tuple[str, Optional[str]]] = []

    def seed(
        self,
        uri: str,
        *,
        status_code: int = 200,
        body: Optional[Any] = None,
        access_token: Optional[str] = None,
        final_url: Optional[str] = None,
    ) -> None:
        """Register the response for ``uri`` (optionally only for ``access_token``)."""
        self._responses[(uri, access_token)] = FetchResponse(
            status_code=status_code,
            url=final_url or uri,
            body=body,
            redirected=final_url is not None and final_url != uri,
        )

    def seed_error(self, uri: str, error: Exception) -> None:
        """Make every request for ``uri`` raise ``error``."""
        self._errors[uri] = error

    async def fetch(self, uri: str, *, access_token: Optional[str] = None) -> FetchResponse:
        self.requests.append((uri, access_token))
        if uri in self._errors:
            raise self._errors[uri]
        response = self._responses.get((uri, access_token)) or self._responses.get((uri, None))
        return response or FetchResponse(status_code=404, url=uri)

    async def fetch_text(self, uri: str) -> FetchResponse:
        return await self.fetch(uri)

    # Test helpers

    def requests_for(self, uri: str) -> List[Optional[str]]:
        """Tokens sent with each request for ``uri``, in order."""
        return [token for requested, token in self.requests if requested == uri]
