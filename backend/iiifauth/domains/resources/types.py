"""Value types for external resources and their auth services.

Kept apart from the resource implementation so the access domain can
import them without pulling in the fetcher stack.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, List, Optional


class HTTPStatusCode(IntEnum):
    """HTTP statuses the negotiation branches on."""

    CONTINUE = 100
    OK = 200
    MOVED_PERMANENTLY = 301
    MOVED_TEMPORARILY = 302
    SEE_OTHER = 303
    NOT_MODIFIED = 304
    TEMPORARY_REDIRECT = 307
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    INTERNAL_SERVER_ERROR = 500


class ServiceProfile(str, Enum):
    """IIIF Authentication API 0.9 service profiles."""

    LOGIN = "http://iiif.io/api/auth/0/login"
    CLICK_THROUGH = "http://iiif.io/api/auth/0/login/clickthrough"
    RESTRICTED = "http://iiif.io/api/auth/0/login/restricted"
    TOKEN = "http://iiif.io/api/auth/0/token"
    LOGOUT = "http://iiif.io/api/auth/0/logout"


@dataclass(frozen=True)
class Service:
    """A service block advertised by a resource.

    Login-type services carry their token and logout services nested in
    ``services``.
    """

    id: str
    profile: str
    label: Optional[str] = None
    services: List["Service"] = field(default_factory=list)

    def get_service(self, profile: ServiceProfile) -> Optional["Service"]:
        """Return the first nested service with ``profile``."""
        return find_service(self.services, profile)

    @classmethod
    def from_json(cls, raw: dict) -> "Service":
        """Build a service from an IIIF ``service`` entry (``@id`` or ``id``)."""
        return cls(
            id=raw.get("@id") or raw.get("id") or "",
            profile=_profile_of(raw),
            label=raw.get("label"),
            services=parse_services(raw.get("service")),
        )


@dataclass(frozen=True)
class AccessToken:
    """Opaque credential issued by a token service.

    Attributes:
        access_token: The bearer string sent with authenticated requests.
        expires_in: Lifetime in seconds, when the token service reports it.
        service_id: Id of the token service that issued it, if known.
    """

    access_token: str
    expires_in: Optional[int] = None
    service_id: Optional[str] = None

    @classmethod
    def from_json(cls, raw: dict, service_id: Optional[str] = None) -> "AccessToken":
        """Build a token from a token-service response body."""
        return cls(
            access_token=raw["accessToken"],
            expires_in=raw.get("expiresIn"),
            service_id=service_id,
        )


def _profile_of(raw: dict) -> str:
    profile = raw.get("profile", "")
    if isinstance(profile, list):
        profile = next((p for p in profile if isinstance(p, str)), "")
    return profile if isinstance(profile, str) else ""


def parse_services(raw: Any) -> List[Service]:
    """Parse a ``service`` value (object, list of objects, or absent)."""
    if raw is None:
        return []
    entries = raw if isinstance(raw, list) else [raw]
    return [Service.from_json(entry) for entry in entries if isinstance(entry, dict)]


def find_service(services: List[Service], profile: ServiceProfile) -> Optional[Service]:
    """Return the first service in ``services`` whose profile is ``profile``."""
    for service in services:
        if service.profile == profile.value:
            return service
    return None
