"""Access negotiator: drives resources through IIIF auth.

The negotiator owns no state between calls. It reads each resource after
every fetch, asks the pure transition functions in ``state_machine`` what
comes next, and performs only that step through the injected capabilities.

Two variants:

- Optimistic (default): reuse tokens stored under the resource's data uri
  or its token service id, log in only when none work, and store new
  tokens. Degraded (302) responses pause until the caller marks them
  handled, so one batch never opens a login window per resource.
- Pessimistic: assume cookies may be gone. Every access-controlled
  resource logs in again; tokens are never stored.

Resources that advertise no login or token service come back with their
401/403 status instead of raising. Errors raised by capabilities or
fetches propagate unchanged.
"""

import asyncio
from typing import List, Optional, Sequence, TypeVar

from iiifauth.core.logging import ContextualLogger
from iiifauth.core.logging import logger as default_logger
from iiifauth.domains.access import state_machine
from iiifauth.domains.access.protocols import AccessCapabilities
from iiifauth.domains.access.types import (
    NegotiationAction,
    NegotiationOptions,
    NegotiationState,
    ResourceSnapshot,
    Transition,
)
from iiifauth.domains.resources.protocols import ExternalResourceProtocol
from iiifauth.domains.resources.types import AccessToken

R = TypeVar("R", bound=ExternalResourceProtocol)


class AccessNegotiator:
    """Negotiates access for one resource at a time, or a batch concurrently."""

    def __init__(
        self,
        capabilities: AccessCapabilities,
        options: Optional[NegotiationOptions] = None,
        *,
        logger: Optional[ContextualLogger] = None,
    ) -> None:
        """Store the capability set and options.

        Args:
            capabilities: Login, token and response hooks of the host.
            options: Variant selection. Defaults follow settings.
            logger: Base logger; ``data_uri`` and ``variant`` are bound per run.
        """
        self._capabilities = capabilities
        self._options = options or NegotiationOptions()
        self._logger = logger or default_logger

    @property
    def options(self) -> NegotiationOptions:
        return self._options

    @property
    def pessimistic(self) -> bool:
        return self._options.pessimistic_access_control

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def negotiate(self, resource: R) -> R:
        """Run the configured variant for ``resource``.

        Returns the same resource once it holds a usable payload or needs
        the caller to act. A non-OK status on the returned resource means
        "needs another pass", not success.
        """
        log = self._bind(resource)
        if self.pessimistic:
            state = await self._negotiate_pessimistic(resource, log)
        else:
            state = await self._negotiate_optimistic(resource, log)

        log.info(f"Negotiation finished in state {state.value} with status {resource.status}")
        return resource

    async def negotiate_all(self, resources: Sequence[R]) -> List[R]:
        """Negotiate every resource concurrently.

        Completes only when all of them have; results keep input order.
        The first error raised by any member propagates.
        """
        self._logger.debug(f"Negotiating {len(resources)} resources")
        return list(await asyncio.gather(*(self.negotiate(r) for r in resources)))

    async def authorize(self, resource: R) -> R:
        """Run the optimistic authorize sub-protocol on its own.

        Callers re-enter here after setting ``is_response_handled`` on a
        resource that paused on a degraded response.
        """
        await self._authorize(resource, self._bind(resource))
        return resource

    # ------------------------------------------------------------------
    # Variants
    # ------------------------------------------------------------------

    async def _negotiate_pessimistic(
        self, resource: ExternalResourceProtocol, log: ContextualLogger
    ) -> NegotiationState:
        await resource.get_data()
        step = self._trace(
            log,
            state_machine.after_probe(ResourceSnapshot.of(resource), pessimistic=True),
        )

        if step.action == NegotiationAction.RESOLVE:
            return step.state
        if step.action == NegotiationAction.CLICK_THROUGH:
            self._capabilities.click_through(resource)
            return step.state
        if step.action == NegotiationAction.STOP:
            log.info(f"No login service to try; returning with status {resource.status}")
            return step.state

        token = await self._login_and_exchange(resource, log)
        await resource.get_data(token)
        await self._capabilities.handle_resource_response(resource)
        return NegotiationState.AUTHENTICATED

    async def _negotiate_optimistic(
        self, resource: ExternalResourceProtocol, log: ContextualLogger
    ) -> NegotiationState:
        stored = await self._capabilities.get_stored_access_token(resource.data_uri)
        step = self._trace(
            log, state_machine.after_data_uri_lookup(token_found=stored is not None)
        )

        if step.action == NegotiationAction.FETCH_WITH_TOKEN:
            await resource.get_data(stored)
            step = self._trace(
                log, state_machine.after_cached_fetch(ResourceSnapshot.of(resource))
            )
            if step.action == NegotiationAction.RESOLVE:
                await self._capabilities.handle_resource_response(resource)
                return step.state
            log.debug(f"Stored token rejected with status {resource.status}")

        step = await self._authorize(resource, log)
        if step.action == NegotiationAction.CLICK_THROUGH:
            # The click-through UI owns the next move; nothing to hand back yet.
            return step.state

        await self._capabilities.handle_resource_response(resource)
        return step.state

    async def _authorize(
        self, resource: ExternalResourceProtocol, log: ContextualLogger
    ) -> Transition:
        await resource.get_data()
        step = self._trace(
            log,
            state_machine.after_probe(ResourceSnapshot.of(resource), pessimistic=False),
        )
        if step.action == NegotiationAction.RESOLVE:
            return step

        stored = None
        if resource.token_service is not None:
            stored = await self._capabilities.get_stored_access_token(resource.token_service.id)
        step = self._trace(
            log,
            state_machine.after_token_lookup(
                ResourceSnapshot.of(resource), token_found=stored is not None
            ),
        )

        if step.action == NegotiationAction.FETCH_WITH_TOKEN:
            await resource.get_data(stored)
            return step
        if step.action == NegotiationAction.PAUSE:
            log.info("Degraded response not yet handled; waiting for caller retry")
            return step
        if step.action == NegotiationAction.CLICK_THROUGH:
            self._capabilities.click_through(resource)
            return step
        if step.action == NegotiationAction.STOP:
            log.info(f"No login service to try; returning with status {resource.status}")
            return step

        token = await self._login_and_exchange(resource, log)
        await self._capabilities.store_access_token(resource, token)
        await resource.get_data(token)
        return Transition(NegotiationState.AUTHENTICATED, NegotiationAction.RESOLVE)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _login_and_exchange(
        self, resource: ExternalResourceProtocol, log: ContextualLogger
    ) -> AccessToken:
        await self._capabilities.login(resource.login_service.id)
        self._trace(log, state_machine.after_login())

        token = await self._capabilities.get_access_token(resource.token_service.id)
        self._trace(log, state_machine.after_token_exchange())
        return token

    def _bind(self, resource: ExternalResourceProtocol) -> ContextualLogger:
        return self._logger.with_context(
            data_uri=resource.data_uri,
            variant="pessimistic" if self.pessimistic else "optimistic",
        )

    @staticmethod
    def _trace(log: ContextualLogger, step: Transition) -> Transition:
        log.debug(f"-> {step.state.value} ({step.action.value})")
        return step


async def negotiate(
    resource: R,
    capabilities: AccessCapabilities,
    options: Optional[NegotiationOptions] = None,
) -> R:
    """Negotiate access for a single resource."""
    return await AccessNegotiator(capabilities, options).negotiate(resource)


async def negotiate_all(
    resources: Sequence[R],
    capabilities: AccessCapabilities,
    options: Optional[NegotiationOptions] = None,
) -> List[R]:
    """Negotiate access for every resource concurrently, preserving order."""
    return await AccessNegotiator(capabilities, options).negotiate_all(resources)


async def authorize(resource: R, capabilities: AccessCapabilities) -> R:
    """Run the optimistic authorize sub-protocol for a single resource."""
    options = NegotiationOptions(pessimistic_access_control=False)
    return await AccessNegotiator(capabilities, options).authorize(resource)
