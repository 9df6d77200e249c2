"""
Custom exceptions for Webglobe API operations
"""

from typing import Any, Optional


class WebglobeError(Exception):
    """Base exception for all Webglobe client errors"""

    def __init__(self, message: str, status_code: Optional[int] = None, response_data: Any = None):
        self.message = message
        self.status_code = status_code
        self.response_data = response_data if response_data is not None else {}
        super().__init__(self.message)

    def __str__(self):
        if self.status_code:
            return f"{self.__class__.__name__} (HTTP {self.status_code}): {self.message}"
        return f"{self.__class__.__name__}: {self.message}"


class TransportError(WebglobeError):
    """Raised when the HTTP exchange could not be completed (DNS, connection, TLS)"""
    pass


class DeadlineExceededError(TransportError):
    """Raised when the exchange exceeds the connect timeout or its total deadline"""
    pass


class DecodeError(WebglobeError):
    """Raised when the response body is not valid JSON"""

    def __init__(self, message: str, raw_body: str = "", status_code: Optional[int] = None):
        self.raw_body = raw_body
        super().__init__(message, status_code=status_code)


class ApiResponseError(WebglobeError):
    """Raised when the API answers with HTTP status >= 400"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Any = None,
        response_data: Any = None
    ):
        self.error_code = error_code
        super().__init__(message, status_code=status_code, response_data=response_data)


class AuthenticationError(ApiResponseError):
    """Raised when login fails or the token is rejected (401/403)"""
    pass


class NotFoundError(ApiResponseError):
    """Raised when the requested resource does not exist (404)"""
    pass


class RateLimitError(ApiResponseError):
    """Raised when the API rate limit is exceeded (429)"""
    pass


class ServerError(ApiResponseError):
    """Raised when Webglobe returns 5xx errors"""
    pass


class ConfigurationError(WebglobeError, ValueError):
    """Raised on invalid client-side configuration, before any network activity"""
    pass


def error_class_for_status(status_code: int) -> type:
    """
    Pick the ApiResponseError subclass matching an HTTP status code.

    Args:
        status_code: HTTP status (>= 400)

    Returns:
        Exception class to raise
    """
    if status_code in (401, 403):
        return AuthenticationError
    if status_code == 404:
        return NotFoundError
    if status_code == 429:
        return RateLimitError
    if 500 <= status_code < 600:
        return ServerError
    return ApiResponseError
