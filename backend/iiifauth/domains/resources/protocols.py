"""Protocol for the resource handle the negotiator drives."""

from typing import Any, Optional, Protocol

from iiifauth.domains.resources.types import AccessToken, Service


class ExternalResourceProtocol(Protocol):
    """A network-addressable resource that may be access controlled.

    ``get_data`` mutates ``status`` (and the payload) in place; everything
    the negotiator decides is read back from these attributes.
    """

    data_uri: str
    status: Optional[int]
    is_response_handled: bool
    click_through_service: Optional[Service]
    login_service: Optional[Service]
    token_service: Optional[Service]
    data: Any

    async def get_data(self, access_token: Optional[AccessToken] = None) -> Any:
        """Fetch the resource, optionally with a bearer token."""
        ...

    def is_access_controlled(self) -> bool:
        """Whether the last fetch discovered an access-control service."""
        ...
