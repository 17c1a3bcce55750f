"""External resource backed by a ResourceFetcher.

An ``ExternalResource`` wraps one info.json address. Every ``get_data``
call refreshes its payload, status and discovered auth services, which is
what the access negotiator branches on.
"""

from typing import Any, Optional

from iiifauth.core.logging import ContextualLogger
from iiifauth.core.logging import logger as default_logger
from iiifauth.core.protocols.fetcher import ResourceFetcher
from iiifauth.domains.resources.types import (
    AccessToken,
    HTTPStatusCode,
    Service,
    ServiceProfile,
    find_service,
    parse_services,
)

_INFO_JSON_SUFFIX = "/info.json"


def _strip_info_json(uri: str) -> str:
    if uri.endswith(_INFO_JSON_SUFFIX):
        return uri[: -len(_INFO_JSON_SUFFIX)]
    return uri


class ExternalResource:
    """An image service (or other document) that may sit behind IIIF auth.

    Attributes:
        data_uri: Address of the document; also the key for stored tokens.
        status: Outcome of the last fetch. MOVED_TEMPORARILY marks a
            degraded response served in place of the protected resource.
        is_response_handled: Set by the caller once it has reacted to a
            degraded response and wants the next pass to prompt for login.
        data: Payload of the last successful fetch.
        error: Body of the last failing response, if any.
        access_token: Token that produced the current OK payload.
    """

    def __init__(
        self,
        data_uri: str,
        fetcher: ResourceFetcher,
        *,
        logger: Optional[ContextualLogger] = None,
    ) -> None:
        """Create an unfetched resource for ``data_uri``."""
        self.data_uri = data_uri
        self._fetcher = fetcher
        self._logger = (logger or default_logger).with_context(data_uri=data_uri)

        self.status: Optional[int] = None
        self.is_response_handled = False
        self.data: Any = {}
        self.error: Optional[Any] = None
        self.access_token: Optional[AccessToken] = None

        self.click_through_service: Optional[Service] = None
        self.login_service: Optional[Service] = None
        self.restricted_service: Optional[Service] = None
        self.token_service: Optional[Service] = None
        self.logout_service: Optional[Service] = None

    def __repr__(self) -> str:
        return f"ExternalResource(data_uri={self.data_uri!r}, status={self.status!r})"

    def is_access_controlled(self) -> bool:
        """Whether the last fetch advertised a click-through, login or restricted service."""
        return bool(self.click_through_service or self.login_service or self.restricted_service)

    async def get_data(self, access_token: Optional[AccessToken] = None) -> "ExternalResource":
        """Fetch the resource and update status, payload and services.

        Args:
            access_token: Sent as a bearer token when given.

        Returns:
            This resource, mutated in place.
        """
        self.data = {}
        response = await self._fetcher.fetch(
            self.data_uri,
            access_token=access_token.access_token if access_token else None,
        )

        if not response.ok:
            self.status = response.status_code
            self.error = response.body
            self._parse_auth_services(response.body if isinstance(response.body, dict) else {})
            self._logger.debug(f"Fetch failed with HTTP {self.status}")
            return self

        self.error = None
        body = response.body
        if not body:
            self._parse_auth_services({})
            self.status = HTTPStatusCode.OK
        else:
            self.data = body
            self._parse_auth_services(body if isinstance(body, dict) else {})
            self.status = self._status_for(body, redirected=response.redirected)

        if self.status == HTTPStatusCode.OK and access_token is not None:
            self.access_token = access_token

        if response.redirected:
            self._logger.debug(f"Fetched via redirect to {response.url} with status {self.status}")
        else:
            self._logger.debug(f"Fetched with status {self.status}")
        return self

    def _status_for(self, body: Any, *, redirected: bool) -> HTTPStatusCode:
        # A login service plus a redirect, or an id that differs from the
        # requested address, means the server answered with a degraded service.
        if not self.login_service:
            return HTTPStatusCode.OK
        if redirected:
            return HTTPStatusCode.MOVED_TEMPORARILY
        returned_id = (body.get("@id") or body.get("id")) if isinstance(body, dict) else None
        if returned_id and _strip_info_json(returned_id) != _strip_info_json(self.data_uri):
            return HTTPStatusCode.MOVED_TEMPORARILY
        return HTTPStatusCode.OK

    def _parse_auth_services(self, document: dict) -> None:
        services = parse_services(document.get("service"))
        self.click_through_service = find_service(services, ServiceProfile.CLICK_THROUGH)
        self.login_service = find_service(services, ServiceProfile.LOGIN)
        self.restricted_service = find_service(services, ServiceProfile.RESTRICTED)

        # Token and logout services hang off whichever login-type service applies.
        owner = self.click_through_service or self.login_service or self.restricted_service
        if owner is not None:
            self.token_service = owner.get_service(ServiceProfile.TOKEN)
            self.logout_service = owner.get_service(ServiceProfile.LOGOUT)
        else:
            self.token_service = None
            self.logout_service = None
