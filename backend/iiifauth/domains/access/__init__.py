"""Access negotiation domain."""

from iiifauth.domains.access.capabilities import CallbackCapabilities
from iiifauth.domains.access.negotiator import (
    AccessNegotiator,
    authorize,
    negotiate,
    negotiate_all,
)
from iiifauth.domains.access.protocols import AccessCapabilities
from iiifauth.domains.access.types import (
    NegotiationAction,
    NegotiationOptions,
    NegotiationState,
    ResourceSnapshot,
    Transition,
)

__all__ = [
    "AccessCapabilities",
    "AccessNegotiator",
    "CallbackCapabilities",
    "NegotiationAction",
    "NegotiationOptions",
    "NegotiationState",
    "ResourceSnapshot",
    "Transition",
    "authorize",
    "negotiate",
    "negotiate_all",
]
