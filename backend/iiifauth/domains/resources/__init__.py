"""External resources and IIIF auth service discovery."""

from iiifauth.domains.resources.external_resource import ExternalResource
from iiifauth.domains.resources.protocols import ExternalResourceProtocol
from iiifauth.domains.resources.types import (
    AccessToken,
    HTTPStatusCode,
    Service,
    ServiceProfile,
)

__all__ = [
    "AccessToken",
    "ExternalResource",
    "ExternalResourceProtocol",
    "HTTPStatusCode",
    "Service",
    "ServiceProfile",
]
