"""Adapter turning plain callbacks into an AccessCapabilities object.

Hosts that already have six loose functions (a login popup opener, a token
cache getter ...) wrap them here instead of writing a class. Callbacks may
be sync or async; an async click-through callback is scheduled on the
running loop rather than awaited.
"""

import asyncio
import inspect
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, Set, Union

from iiifauth.core.logging import logger
from iiifauth.domains.resources.protocols import ExternalResourceProtocol
from iiifauth.domains.resources.types import AccessToken

MaybeAwaitable = Union[Any, Awaitable[Any]]


async def _resolve(value: MaybeAwaitable) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


@dataclass(frozen=True)
class CallbackCapabilities:
    """AccessCapabilities built from callables.

    ``on_click_through`` is fire and forget: its return value is discarded,
    and when it returns an awaitable that awaitable runs as a background
    task. Every other callback is awaited when it returns an awaitable.
    """

    on_click_through: Callable[[ExternalResourceProtocol], MaybeAwaitable]
    on_login: Callable[[str], MaybeAwaitable]
    on_get_access_token: Callable[[str], MaybeAwaitable]
    on_store_access_token: Callable[[ExternalResourceProtocol, AccessToken], MaybeAwaitable]
    on_get_stored_access_token: Callable[[str], MaybeAwaitable]
    on_handle_resource_response: Callable[[ExternalResourceProtocol], MaybeAwaitable]

    # Strong references; the event loop only keeps weak ones to tasks.
    _click_through_tasks: Set["asyncio.Future[Any]"] = field(
        default_factory=set, init=False, repr=False, compare=False
    )

    def click_through(self, resource: ExternalResourceProtocol) -> None:
        result = self.on_click_through(resource)
        if not inspect.isawaitable(result):
            return

        task = asyncio.ensure_future(result)
        self._click_through_tasks.add(task)
        task.add_done_callback(self._click_through_done)

    def _click_through_done(self, task: "asyncio.Future[Any]") -> None:
        self._click_through_tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Click-through callback failed: {task.exception()!r}")

    async def login(self, login_service_id: str) -> None:
        await _resolve(self.on_login(login_service_id))

    async def get_access_token(self, token_service_id: str) -> AccessToken:
        return await _resolve(self.on_get_access_token(token_service_id))

    async def store_access_token(
        self, resource: ExternalResourceProtocol, token: AccessToken
    ) -> None:
        await _resolve(self.on_store_access_token(resource, token))

    async def get_stored_access_token(self, key: str) -> Optional[AccessToken]:
        return await _resolve(self.on_get_stored_access_token(key))

    async def handle_resource_response(self, resource: ExternalResourceProtocol) -> Any:
        return await _resolve(self.on_handle_resource_response(resource))
