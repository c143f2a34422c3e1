"""Error types raised by the Riot API client.

Each HTTP failure class knows its status code and default message, so the
client maps a response to an error with ``error_for_status``.
"""

from typing import Dict, Optional, Type


class RiotAPIError(Exception):
    """A Riot API call failed.

    ``status_code`` is None when no response was received at all.
    """

    status: Optional[int] = None
    default_message = "Request failed"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
        retry_after: Optional[float] = None,
    ) -> None:
        """
        Args:
            message: Error message; the class default when omitted
            status_code: HTTP status; the class status when omitted
            response_body: Raw response text, kept for diagnostics
            retry_after: Retry-After header value in seconds (429 only)
        """
        self.message: str = message or self.default_message
        super().__init__(self.message)
        self.status_code: Optional[int] = (
            status_code if status_code is not None else self.status
        )
        self.response_body: str = response_body or ""
        self.retry_after: Optional[float] = retry_after

    def __str__(self) -> str:
        if self.status_code is None:
            return f"Riot API Error: {self.message}"
        text = f"Riot API Error {self.status_code}: {self.message}"
        return f"{text} - {self.response_body}" if self.response_body else text


class BadRequestError(RiotAPIError):
    status = 400
    default_message = "Invalid request parameters"


class AuthenticationError(RiotAPIError):
    """Missing, invalid or expired API key."""

    status = 401
    default_message = "Invalid API key"


class ForbiddenError(RiotAPIError):
    """Key lacks access to the endpoint; development keys expire daily."""

    status = 403
    default_message = "Access forbidden"


class NotFoundError(RiotAPIError):
    status = 404
    default_message = "Resource not found"


class RateLimitError(RiotAPIError):
    """Still throttled after the retry budget was spent."""

    status = 429
    default_message = "Rate limit exceeded"


class ServiceUnavailableError(RiotAPIError):
    status = 503
    default_message = "Service unavailable"


class TransportError(RiotAPIError):
    """No response was received (network, DNS, TLS or timeout)."""

    def __str__(self) -> str:
        return f"Failed to send request to Riot API: {self.message}"


class ResponseDecodeError(RiotAPIError):
    """Response body is not JSON or does not match the expected schema."""

    def __str__(self) -> str:
        return f"Failed to parse {self.message}"


_ERRORS_BY_STATUS: Dict[int, Type[RiotAPIError]] = {
    error_cls.status: error_cls
    for error_cls in (
        BadRequestError,
        AuthenticationError,
        ForbiddenError,
        NotFoundError,
        RateLimitError,
        ServiceUnavailableError,
    )
    if error_cls.status is not None
}


def error_for_status(status: int, body: str = "") -> RiotAPIError:
    """Build the error for a non-2xx response."""
    error_cls = _ERRORS_BY_STATUS.get(status)
    if error_cls is None:
        return RiotAPIError(
            f"Request failed with status {status}",
            status_code=status,
            response_body=body,
        )
    return error_cls(status_code=status, response_body=body)
