"""Pure transition functions for access negotiation.

Each function maps what the negotiator just observed to the next
``Transition``. None of them perform I/O, so every branch (including the
degraded-redirect pause) can be tested from a ``ResourceSnapshot`` alone.

Flow (optimistic):

    lookup by data uri -> [found] fetch with token -> [OK] AUTHENTICATED
                       -> [missing / not OK] authorize

    authorize: probe -> [open] AUTHENTICATED
                     -> lookup by token service -> [found] fetch, AUTHENTICATED
                                                -> [302, unhandled] PENDING_CALLER_RETRY
                                                -> [click-through] PENDING_CALLER_RETRY
                                                -> [no login service] PENDING_CALLER_RETRY
                                                -> AWAITING_LOGIN -> EXCHANGING_TOKEN
                                                   -> AUTHENTICATED

Flow (pessimistic):

    probe -> [open] AUTHENTICATED
          -> [click-through] PENDING_CALLER_RETRY
          -> [no login service] PENDING_CALLER_RETRY
          -> AWAITING_LOGIN -> EXCHANGING_TOKEN -> AUTHENTICATED
"""

from iiifauth.domains.access.types import (
    NegotiationAction,
    NegotiationState,
    ResourceSnapshot,
    Transition,
)
from iiifauth.domains.resources.types import HTTPStatusCode


def after_data_uri_lookup(*, token_found: bool) -> Transition:
    """Optimistic entry: a token stored under the resource's data uri."""
    if token_found:
        return Transition(
            NegotiationState.CHECKING_STORED_TOKEN, NegotiationAction.FETCH_WITH_TOKEN
        )
    return Transition(NegotiationState.UNAUTHENTICATED, NegotiationAction.AUTHORIZE)


def after_cached_fetch(snapshot: ResourceSnapshot) -> Transition:
    """Optimistic fast path: was the fetch with the data-uri token accepted?"""
    if snapshot.status == HTTPStatusCode.OK:
        return Transition(NegotiationState.AUTHENTICATED, NegotiationAction.RESOLVE)
    return Transition(NegotiationState.UNAUTHENTICATED, NegotiationAction.AUTHORIZE)


def after_probe(snapshot: ResourceSnapshot, *, pessimistic: bool) -> Transition:
    """After the unauthenticated fetch that reveals whether access control applies."""
    if not snapshot.access_controlled:
        return Transition(NegotiationState.AUTHENTICATED, NegotiationAction.RESOLVE)

    if not pessimistic:
        return Transition(NegotiationState.CHECKING_STORED_TOKEN, NegotiationAction.LOOKUP_TOKEN)

    if snapshot.has_click_through:
        return Transition(NegotiationState.PENDING_CALLER_RETRY, NegotiationAction.CLICK_THROUGH)
    if not snapshot.can_log_in:
        return _cannot_log_in()
    return Transition(NegotiationState.AWAITING_LOGIN, NegotiationAction.LOGIN)


def after_token_lookup(snapshot: ResourceSnapshot, *, token_found: bool) -> Transition:
    """Inside authorize: a token stored under the token service id."""
    if token_found:
        # The fetch result is not re-checked; callers read the status.
        return Transition(NegotiationState.AUTHENTICATED, NegotiationAction.FETCH_WITH_TOKEN)

    if snapshot.status == HTTPStatusCode.MOVED_TEMPORARILY and not snapshot.is_response_handled:
        return Transition(NegotiationState.PENDING_CALLER_RETRY, NegotiationAction.PAUSE)

    if snapshot.has_click_through:
        return Transition(NegotiationState.PENDING_CALLER_RETRY, NegotiationAction.CLICK_THROUGH)
    if not snapshot.can_log_in:
        return _cannot_log_in()
    return Transition(NegotiationState.AWAITING_LOGIN, NegotiationAction.LOGIN)


def _cannot_log_in() -> Transition:
    # No login or token service advertised (a restricted-only resource, say).
    return Transition(NegotiationState.PENDING_CALLER_RETRY, NegotiationAction.STOP)


def after_login() -> Transition:
    """Login completed; a token can now be requested."""
    return Transition(NegotiationState.EXCHANGING_TOKEN, NegotiationAction.EXCHANGE_TOKEN)


def after_token_exchange() -> Transition:
    """Token issued; refetch the resource with it."""
    return Transition(NegotiationState.AUTHENTICATED, NegotiationAction.FETCH_WITH_TOKEN)

