"""
Domain Errors

Exceptions raised by gateway implementations. The ``Device`` entity never
catches them, so callers see exactly what the gateway raised.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for domain errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ParticleCloudError(DomainError):
    """Raised when a Particle cloud operation fails."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.status_code = status_code
        super().__init__(message, details)


class AuthenticationError(ParticleCloudError):
    """Raised when the access token is missing, invalid or lacks permission."""


class DeviceNotFoundError(ParticleCloudError):
    """Raised when the cloud does not know the requested device."""

    def __init__(self, target: str, details: Optional[Dict[str, Any]] = None):
        self.target = target
        message = f"Device {target} not found"
        super().__init__(message, status_code=404, details=details)


class RateLimitError(ParticleCloudError):
    """Raised when the cloud rejects a request with HTTP 429."""

    def __init__(
        self,
        message: str,
        retry_after: Optional[float] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.retry_after = retry_after
        super().__init__(message, status_code=429, details=details)


class MalformedResponseError(ParticleCloudError):
    """Raised when a response body does not have the expected shape."""


class ParticleConnectionError(ParticleCloudError):
    """Raised when the cloud cannot be reached at all."""
