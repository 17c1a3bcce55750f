"""Fake external resource for testing.

Answers ``get_data`` from a status table keyed by bearer string, so tests
can script "401 without a token, 200 with token T" without any fetcher.
"""

import asyncio
from typing import Any, Dict, List, Optional

from iiifauth.domains.resources.types import AccessToken, HTTPStatusCode, Service, ServiceProfile

LOGIN_SERVICE_ID = "https://auth.example.org/login"
CLICK_THROUGH_SERVICE_ID = "https://auth.example.org/clickthrough"
TOKEN_SERVICE_ID = "https://auth.example.org/token"


class FakeExternalResource:
    """In-memory ExternalResourceProtocol.

    Usage:
        resource = FakeExternalResource(
            "https://ex.org/iiif/1/info.json",
            access_controlled=True,
            statuses={None: 401, "T": 200},
        )
        await negotiator.negotiate(resource)
        assert resource.get_data_calls == [None, "T"]
    """

    def __init__(
        self,
        data_uri: str,
        *,
        access_controlled: bool = False,
        click_through: bool = False,
        statuses: Optional[Dict[Optional[str], int]] = None,
        gate: Optional[asyncio.Event] = None,
    ) -> None:
        """Initialize the fake.

        Args:
            data_uri: Address of the resource.
            access_controlled: Advertise auth services once fetched.
            click_through: Advertise a click-through service instead of login.
            statuses: Status per bearer string; ``None`` is the
                unauthenticated status. Unknown tokens answer 401.
            gate: When given, every ``get_data`` waits for it first.
        """
        self.data_uri = data_uri
        self.status: Optional[int] = None
        self.is_response_handled = False
        self.data: Any = {}
        self.access_token: Optional[AccessToken] = None

        self._access_controlled = access_controlled
        self._statuses = statuses if statuses is not None else {None: HTTPStatusCode.OK}
        self._gate = gate
        self._fetched = False
        self.get_data_calls: List[Optional[str]] = []

        self.click_through_service: Optional[Service] = None
        self.login_service: Optional[Service] = None
        self.token_service: Optional[Service] = None
        if access_controlled:
            token = Service(id=TOKEN_SERVICE_ID, profile=ServiceProfile.TOKEN.value)
            if click_through:
                self.click_through_service = Service(
                    id=CLICK_THROUGH_SERVICE_ID,
                    profile=ServiceProfile.CLICK_THROUGH.value,
                    services=[token],
                )
            else:
                self.login_service = Service(
                    id=LOGIN_SERVICE_ID, profile=ServiceProfile.LOGIN.value, services=[token]
                )
            self.token_service = token

    async def get_data(self, access_token: Optional[AccessToken] = None) -> "FakeExternalResource":
        if self._gate is not None:
            await self._gate.wait()
        bearer = access_token.access_token if access_token else None
        self.get_data_calls.append(bearer)
        self._fetched = True
        self.status = self._statuses.get(bearer, HTTPStatusCode.UNAUTHORIZED)
        if self.status == HTTPStatusCode.OK:
            self.data = {"@id": self.data_uri}
            if access_token is not None:
                self.access_token = access_token
        else:
            self.data = {}
        return self

    def is_access_controlled(self) -> bool:
        return self._fetched and self._access_controlled
