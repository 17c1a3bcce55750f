"""ResourceFetcher protocol for loading remote documents.

Resources never open sockets themselves; they go through a fetcher so the
HTTP stack can be swapped (httpx in production, an in-memory fake in tests).

Usage:
    response = await fetcher.fetch(resource.data_uri, access_token="abc")
    if response.ok:
        payload = response.body
"""

from dataclasses import dataclass
from typing import Any, Optional, Protocol, runtime_checkable


@dataclass(frozen=True)
class FetchResponse:
    """Outcome of a single GET.

    Attributes:
        status_code: Final HTTP status after redirects were followed.
        url: Final URL after redirects.
        body: Parsed JSON body, or None when the body was empty or not JSON.
        redirected: True when at least one redirect was followed.
    """

    status_code: int
    url: str
    body: Optional[Any] = None
    redirected: bool = False

    @property
    def ok(self) -> bool:
        """True for 2xx responses."""
        return 200 <= self.status_code < 300


@runtime_checkable
class ResourceFetcher(Protocol):
    """Protocol for fetching info.json documents and plain text."""

    async def fetch(self, uri: str, *, access_token: Optional[str] = None) -> FetchResponse:
        """GET ``uri``, sending ``access_token`` as a bearer token when given.

        Non-2xx answers are returned, not raised. Transport failures
        (DNS, connection refused, timeouts) propagate to the caller.
        """
        ...

    async def fetch_text(self, uri: str) -> FetchResponse:
        """GET ``uri`` and return its body as text in ``FetchResponse.body``."""
        ...
