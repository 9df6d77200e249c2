"""
Webglobe registrar REST API client
"""

from webglobe.api import (
    WebglobeClient,
    WebglobeError,
    TransportError,
    DeadlineExceededError,
    DecodeError,
    ApiResponseError,
    AuthenticationError,
    NotFoundError,
    RateLimitError,
    ServerError,
    ConfigurationError
)
from webglobe.payloads import Contact, Order

__version__ = "0.1.0"

__all__ = [
    "WebglobeClient",
    "Contact",
    "Order",
    "WebglobeError",
    "TransportError",
    "DeadlineExceededError",
    "DecodeError",
    "ApiResponseError",
    "AuthenticationError",
    "NotFoundError",
    "RateLimitError",
    "ServerError",
    "ConfigurationError",
]
