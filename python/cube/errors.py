"""Cube client error definitions.

Every failure surfaced by the client is a CubeError subclass, one per
failure category:

- ConfigurationError: invalid or missing setup, detected before any I/O
- LocalFileError: the local file to upload could not be opened
- TransportError: network failure, refused connection, timeout
- HttpStatusError: the service answered with a non-2xx status
- ResponseParseError: 2xx status but the body is not a valid envelope
- ServiceError: the envelope carried a non-200 business code
"""

from enum import Enum

# Envelope code signalling success
SUCCESS_CODE = 200

# Synthetic code for "envelope says success but object key is missing"
MISSING_OBJECT_KEY_CODE = 200500
MISSING_OBJECT_KEY_MESSAGE = "Upload reported success but object_key is missing"


class CubeErrorCode(str, Enum):
    """Error categories for the Cube client."""

    E_CONFIG_INVALID = "E_CONFIG_INVALID"
    E_LOCAL_IO = "E_LOCAL_IO"
    E_TRANSPORT = "E_TRANSPORT"
    E_HTTP_STATUS = "E_HTTP_STATUS"
    E_RESPONSE_PARSE = "E_RESPONSE_PARSE"
    E_SERVICE = "E_SERVICE"


class CubeError(Exception):
    """Base exception for Cube client errors.

    Attributes:
        message: Human-readable error message
        error_code: The error category
    """

    def __init__(self, message: str, error_code: CubeErrorCode):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class ConfigurationError(CubeError):
    """Client configuration is missing or invalid."""

    def __init__(self, message: str):
        super().__init__(message, CubeErrorCode.E_CONFIG_INVALID)


class LocalFileError(CubeError):
    """Local file could not be opened for upload."""

    def __init__(self, path: str, message: str):
        super().__init__(message, CubeErrorCode.E_LOCAL_IO)
        self.path = path


class TransportError(CubeError):
    """Request never produced an HTTP response."""

    def __init__(self, message: str):
        super().__init__(message, CubeErrorCode.E_TRANSPORT)


class HttpStatusError(CubeError):
    """Service returned a status outside the 2xx range.

    The raw body is kept for diagnostics.
    """

    def __init__(self, status_code: int, reason_phrase: str, body: str):
        self.status_code = status_code
        self.reason_phrase = reason_phrase
        self.body = body
        super().__init__(
            f"Cube HTTP error: {status_code} {reason_phrase}. Response body: {body}",
            CubeErrorCode.E_HTTP_STATUS,
        )


class ResponseParseError(CubeError):
    """Successful status but the body is not a response envelope."""

    def __init__(self, detail: str, body: str):
        self.detail = detail
        self.body = body
        super().__init__(
            f"Cube response body could not be parsed: {detail}. Response body: {body}",
            CubeErrorCode.E_RESPONSE_PARSE,
        )


class ServiceError(CubeError):
    """Business error reported by the Cube service in the envelope.

    Attributes:
        code: Service-assigned numeric code (never 200)
        message: Service-provided message
    """

    def __init__(self, code: int, message: str):
        super().__init__(message, CubeErrorCode.E_SERVICE)
        self.code = code

    def __str__(self) -> str:
        return f"Cube service error [code: {self.code}]: {self.message}"

    @classmethod
    def missing_object_key(cls) -> "ServiceError":
        """Error for a success envelope that carries no object key."""
        return cls(MISSING_OBJECT_KEY_CODE, MISSING_OBJECT_KEY_MESSAGE)
