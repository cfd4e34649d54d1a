"""
Core exception classes for the EC2 resize handler.
"""


class AWSResizeError(Exception):
    """Base exception for all EC2 resize handler errors."""

    def __init__(self, message: str, details: str = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ConfigurationError(AWSResizeError):
    """Raised when handler configuration is invalid or missing."""
    pass


class RequestParseError(AWSResizeError):
    """Raised when the incoming request cannot be turned into resize details."""
    pass


class WaitTimeoutError(AWSResizeError):
    """Raised when a bounded wait runs out of budget."""
    pass


class ResizeError(AWSResizeError):
    """Raised when resizing a single instance fails."""
    pass


class ProviderError(ResizeError):
    """Raised when an EC2 API call fails."""
    pass


class CredentialsMissingError(ProviderError):
    """Raised when no credentials can be found for a profile."""
    pass


class RegionInvalidError(ProviderError):
    """Raised when the region is not a known EC2 endpoint."""
    pass


class InstanceNotFoundError(ProviderError):
    """Raised when exactly one matching instance cannot be found."""
    pass


class StopTimeoutError(ResizeError):
    """Raised when an instance does not reach 'stopped' within the wait budget."""
    pass


class AlreadyCorrectTypeError(ResizeError):
    """Raised when the instance already has the requested type."""
    pass

