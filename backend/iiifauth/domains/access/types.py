"""Value types for access negotiation.

States, actions and the snapshot the pure transition functions read.
They live apart from the negotiator so the state machine has no I/O
imports at all.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from iiifauth.core.config import settings
from iiifauth.domains.resources.protocols import ExternalResourceProtocol


class NegotiationState(str, Enum):
    """Where a single resource's negotiation stands."""

    UNAUTHENTICATED = "unauthenticated"
    CHECKING_STORED_TOKEN = "checking_stored_token"
    AWAITING_LOGIN = "awaiting_login"
    EXCHANGING_TOKEN = "exchanging_token"
    AUTHENTICATED = "authenticated"
    PENDING_CALLER_RETRY = "pending_caller_retry"


class NegotiationAction(str, Enum):
    """Side effect the negotiator performs on entering a state."""

    RESOLVE = "resolve"
    CLICK_THROUGH = "click_through"
    PAUSE = "pause"
    LOOKUP_TOKEN = "lookup_token"
    FETCH_WITH_TOKEN = "fetch_with_token"
    LOGIN = "login"
    EXCHANGE_TOKEN = "exchange_token"
    AUTHORIZE = "authorize"
    STOP = "stop"


@dataclass(frozen=True)
class Transition:
    """Result of a transition function: the next state and what to do there."""

    state: NegotiationState
    action: NegotiationAction


@dataclass(frozen=True)
class ResourceSnapshot:
    """The resource fields the state machine branches on, frozen at one instant."""

    access_controlled: bool
    status: Optional[int]
    is_response_handled: bool
    has_click_through: bool
    can_log_in: bool = True

    @classmethod
    def of(cls, resource: ExternalResourceProtocol) -> "ResourceSnapshot":
        """Capture ``resource`` as it is right now."""
        return cls(
            access_controlled=resource.is_access_controlled(),
            status=resource.status,
            is_response_handled=resource.is_response_handled,
            has_click_through=resource.click_through_service is not None,
            can_log_in=resource.login_service is not None
            and resource.token_service is not None,
        )


class NegotiationOptions(BaseModel):
    """Options for a negotiation run.

    ``pessimistic_access_control`` assumes browser credentials may have been
    cleared: tokens are never reused and every access-controlled resource
    goes through login again. The optimistic default reuses stored tokens.
    """

    model_config = ConfigDict(frozen=True)

    pessimistic_access_control: bool = Field(
        default_factory=lambda: settings.PESSIMISTIC_ACCESS_CONTROL,
        description="Re-run login for every access-controlled resource",
    )
