"""Shared exceptions module.

Every error raised by the signing and token-exchange core derives from
:class:`OAuthKitException` and carries an :class:`ErrorKind` so callers can
branch on the category without matching concrete classes.
"""

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Category of an oauthkit error."""

    CONFIGURATION = "configuration"
    PRECONDITION = "precondition"
    PROTOCOL = "protocol"
    ENCODING = "encoding"


class OAuthKitException(Exception):
    """Base exception for oauthkit."""

    kind: ErrorKind

    def __init__(self, message: str):
        """Create a new OAuthKitException instance.

        Args:
        ----
            message (str): The error message.

        """
        self.message = message
        super().__init__(self.message)


class ConfigurationError(OAuthKitException):
    """Raised when a service is constructed with missing or invalid configuration."""

    kind = ErrorKind.CONFIGURATION

    def __init__(self, message: Optional[str] = "Invalid OAuth configuration"):
        """Create a new ConfigurationError instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        super().__init__(message)


class PreconditionError(OAuthKitException):
    """Raised when an operation is attempted in a state that does not allow it."""

    kind = ErrorKind.PRECONDITION


class ParametersMissingError(PreconditionError):
    """Raised when credentials are extracted from a request without oauth parameters."""

    def __init__(self, request: Any):
        """Create a new ParametersMissingError instance.

        Args:
        ----
            request (OAuthRequest): The request that has no oauth parameters.

        """
        self.request = request
        super().__init__(
            f"Could not find oauth parameters in request: {request}. "
            "OAuth parameters must be specified with add_oauth_parameter()"
        )


class UnsupportedOperationError(PreconditionError):
    """Raised when an operation does not exist for the active protocol version."""

    def __init__(self, operation: str, version: str, hint: Optional[str] = None):
        """Create a new UnsupportedOperationError instance.

        Args:
        ----
            operation (str): Name of the rejected operation.
            version (str): Protocol version of the service.
            hint (str, optional): What the caller should do instead.

        """
        self.operation = operation
        self.version = version
        message = f"Unsupported operation '{operation}' for OAuth {version}"
        if hint:
            message = f"{message}, {hint}"
        super().__init__(message)


class InvalidTokenStateError(PreconditionError):
    """Raised when a token is used at a step its lifecycle does not permit."""

    pass


class ProtocolError(OAuthKitException):
    """Raised when a provider response lacks the expected token fields."""

    kind = ErrorKind.PROTOCOL

    def __init__(self, message: str, raw_response: Optional[str] = None):
        """Create a new ProtocolError instance.

        Args:
        ----
            message (str): The error message.
            raw_response (str, optional): The provider payload, kept for diagnostics.

        """
        self.raw_response = raw_response
        if raw_response is not None:
            message = f"{message}: '{raw_response}'"
        super().__init__(message)


class ProviderRejectedError(ProtocolError):
    """Raised when a token endpoint answers with a non-success status."""

    def __init__(self, status_code: int, raw_response: Optional[str] = None):
        """Create a new ProviderRejectedError instance.

        Args:
        ----
            status_code (int): HTTP status returned by the provider.
            raw_response (str, optional): The provider payload.

        """
        self.status_code = status_code
        super().__init__(
            f"Provider rejected token request with status {status_code}", raw_response
        )


class EncodingError(OAuthKitException):
    """Raised when text cannot be represented in UTF-8 during canonicalization."""

    kind = ErrorKind.ENCODING
