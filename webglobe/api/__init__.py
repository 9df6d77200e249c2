"""
API Layer - Webglobe REST API client
Session handling, request pipeline and endpoint catalogue
"""

# Exceptions
from webglobe.api.exceptions import (
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

# Core
from webglobe.api.error_extractor import ErrorEnvelope, ExtractedError, extract_error, UNKNOWN_ERROR
from webglobe.api.session import Credentials, Session, SessionState
from webglobe.api.pipeline import ExchangeResult, RequestPipeline
from webglobe.api.endpoints import ENDPOINTS, Endpoint

# Client
from webglobe.api.webglobe_client import WebglobeClient

__all__ = [
    # Client
    "WebglobeClient",

    # Core
    "Credentials",
    "Session",
    "SessionState",
    "RequestPipeline",
    "ExchangeResult",
    "Endpoint",
    "ENDPOINTS",
    "ErrorEnvelope",
    "ExtractedError",
    "extract_error",
    "UNKNOWN_ERROR",

    # Exceptions
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
