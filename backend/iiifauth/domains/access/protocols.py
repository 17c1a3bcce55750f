"""Protocols for access negotiation dependencies."""

from typing import Any, Optional, Protocol, runtime_checkable

from iiifauth.domains.resources.protocols import ExternalResourceProtocol
from iiifauth.domains.resources.types import AccessToken


@runtime_checkable
class AccessCapabilities(Protocol):
    """Everything the negotiator needs from its host application.

    Token storage and login UI are owned here; the negotiator never caches
    or prompts on its own.
    """

    def click_through(self, resource: ExternalResourceProtocol) -> None:
        """Send the user through the resource's click-through service (fire and forget)."""
        ...

    async def login(self, login_service_id: str) -> None:
        """Open a session with the login service."""
        ...

    async def get_access_token(self, token_service_id: str) -> AccessToken:
        """Exchange the current session for a token."""
        ...

    async def store_access_token(
        self, resource: ExternalResourceProtocol, token: AccessToken
    ) -> None:
        """Persist a freshly issued token."""
        ...

    async def get_stored_access_token(self, key: str) -> Optional[AccessToken]:
        """Look up a token by token service id or by resource data uri."""
        ...

    async def handle_resource_response(self, resource: ExternalResourceProtocol) -> Any:
        """Final hook once a resource is resolved."""
        ...
