"""Shared exceptions module.

The negotiator itself never raises these; outcomes there are encoded in
the resource status. They cover the edges around it.
"""

from typing import Optional


class IIIFAuthException(Exception):
    """Base exception for iiifauth."""

    pass


class ExternalServiceError(IIIFAuthException):
    """Exception raised when an external service fails."""

    def __init__(self, service_name: str, message: Optional[str] = "External service failed"):
        """Create a new ExternalServiceError instance.

        Args:
        ----
            service_name (str): The name of the external service.
            message (str, optional): The error message. Has default message.

        """
        self.service_name = service_name
        self.message = message
        super().__init__(f"{service_name}: {message}")
