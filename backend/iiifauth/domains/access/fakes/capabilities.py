"""Fake access capabilities for testing."""

import asyncio
from typing import Any, Dict, List, Optional, Tuple

from iiifauth.domains.resources.protocols import ExternalResourceProtocol
from iiifauth.domains.resources.types import AccessToken


class FakeAccessCapabilities:
    """In-memory AccessCapabilities.

    Stored tokens live in a dict keyed by data uri or token service id;
    ``store_access_token`` writes under the resource's token service id.
    Seed responses and inspect recorded calls for assertions.

    Usage:
        caps = FakeAccessCapabilities(issued_token=AccessToken("T"))
        await AccessNegotiator(caps).negotiate(resource)
        assert caps.calls_for("login") == [("login", LOGIN_SERVICE_ID)]
    """

    def __init__(self, issued_token: Optional[AccessToken] = None) -> None:
        self.issued_token = issued_token or AccessToken(access_token="fake-token")
        self.stored: Dict[str, AccessToken] = {}
        self.handled: List[Tuple[ExternalResourceProtocol, Optional[AccessToken]]] = []
        self._calls: List[Tuple[Any, ...]] = []
        self._errors: Dict[str, Exception] = {}
        self._gates: Dict[str, asyncio.Event] = {}

    # -- seeding helpers --

    def seed_stored_token(self, key: str, token: AccessToken) -> None:
        self.stored[key] = token

    def set_error(self, method: str, error: Exception) -> None:
        self._errors[method] = error

    def hold(self, method: str) -> asyncio.Event:
        """Make ``method`` wait until the returned event is set."""
        gate = asyncio.Event()
        self._gates[method] = gate
        return gate

    @property
    def calls(self) -> List[Tuple[Any, ...]]:
        return list(self._calls)

    def calls_for(self, method: str) -> List[Tuple[Any, ...]]:
        return [c for c in self._calls if c[0] == method]

    def called(self, method: str) -> bool:
        return bool(self.calls_for(method))

    async def _enter(self, method: str, *args: Any) -> None:
        self._calls.append((method, *args))
        if method in self._gates:
            await self._gates[method].wait()
        if method in self._errors:
            raise self._errors[method]

    # -- AccessCapabilities --

    def click_through(self, resource: ExternalResourceProtocol) -> None:
        self._calls.append(("click_through", resource.data_uri))
        if "click_through" in self._errors:
            raise self._errors["click_through"]

    async def login(self, login_service_id: str) -> None:
        await self._enter("login", login_service_id)

    async def get_access_token(self, token_service_id: str) -> AccessToken:
        await self._enter("get_access_token", token_service_id)
        return self.issued_token

    async def store_access_token(
        self, resource: ExternalResourceProtocol, token: AccessToken
    ) -> None:
        await self._enter("store_access_token", resource.data_uri, token)
        if resource.token_service is not None:
            self.stored[resource.token_service.id] = token

    async def get_stored_access_token(self, key: str) -> Optional[AccessToken]:
        await self._enter("get_stored_access_token", key)
        return self.stored.get(key)

    async def handle_resource_response(self, resource: ExternalResourceProtocol) -> Any:
        await self._enter("handle_resource_response", resource.data_uri)
        self.handled.append((resource, getattr(resource, "access_token", None)))
        return resource
