"""
Request Pipeline
Sends one HTTP exchange to the Webglobe API, decodes the JSON body
and turns failed exchanges into WebglobeError subclasses
"""

import json
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import requests

from webglobe.api.error_extractor import extract_error
from webglobe.api.exceptions import (
    ConfigurationError,
    DeadlineExceededError,
    DecodeError,
    TransportError,
    error_class_for_status
)
from webglobe.api.session import Session
from webglobe.utils.logger import get_logger


logger = get_logger(__name__)

METHODS = ("GET", "POST", "PUT", "DELETE")

DEFAULT_CONNECT_TIMEOUT = 60
DEFAULT_TOTAL_TIMEOUT = 90

CHUNK_SIZE = 8192


@dataclass
class ExchangeResult:
    """Outcome of the most recent exchange"""

    status_code: Optional[int] = None
    error_code: Any = None
    body: Any = field(default_factory=dict)


def _query_value(value: Any) -> Any:
    # Booleans go over the wire as 1/0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (list, tuple)):
        return [_query_value(item) for item in value]
    return value


def build_query(payload: Dict[str, Any]) -> str:
    """
    Encode a payload as a URL query string.

    Args:
        payload: Flat mapping of query parameters

    Returns:
        Encoded query string without the leading '?'
    """
    return urlencode({key: _query_value(value) for key, value in payload.items()}, doseq=True)


class RequestPipeline:
    """
    Dispatches requests to the Webglobe API on behalf of a Session.

    dispatch() returns nothing; the outcome of the latest exchange is kept
    in `last` and replaced on every call.
    """

    def __init__(
        self,
        api_url: str,
        session: Session,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        total_timeout: float = DEFAULT_TOTAL_TIMEOUT
    ):
        self.api_url = api_url.rstrip("/")
        self.session = session
        self.connect_timeout = connect_timeout
        self.total_timeout = total_timeout
        # No single read may outlast the whole exchange
        self.timeout = (connect_timeout, total_timeout)
        self.last = ExchangeResult()

    def dispatch(self, method: str, endpoint: str, payload: Optional[Dict[str, Any]] = None) -> None:
        """
        Send a request to the API.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: Service relative path (e.g., '/order/listTld')
            payload: Query parameters for GET, JSON body otherwise

        Raises:
            ConfigurationError: If the method is not supported
            TransportError: If no response was received
            DeadlineExceededError: If the request timed out
            DecodeError: If the response body is not JSON
            ApiResponseError: If the API answered with status >= 400
        """
        self.last = ExchangeResult()

        method = method.upper()
        if method not in METHODS:
            raise ConfigurationError(f"Unsupported HTTP method: {method}")

        self.session.ensure_valid_token(self)
        payload = self.session.with_form_name(payload)

        # Login or refresh may have run above; report only this exchange
        self.last = ExchangeResult()

        url = f"{self.api_url}{endpoint}"
        headers = {"Content-Type": "application/json"}
        headers.update(self.session.authorization_header())
        data = None

        if method == "GET":
            if payload:
                separator = "&" if "?" in url else "?"
                url = f"{url}{separator}{build_query(payload)}"
        else:
            data = json.dumps(payload) if payload else "{}"
            headers["Content-Length"] = str(len(data.encode("utf-8")))

        logger.debug(f"{method} {url}")

        deadline = time.monotonic() + self.total_timeout

        try:
            response = requests.request(
                method=method,
                url=url,
                headers=headers,
                data=data,
                timeout=self.timeout,
                allow_redirects=True,
                stream=True
            )
        except requests.exceptions.RequestException as e:
            raise self._transport_error(method, endpoint, e) from e

        try:
            self.last.status_code = response.status_code
            logger.debug(f"{method} {endpoint} -> HTTP {response.status_code}")

            try:
                raw = self._read_body(response, deadline)
            except requests.exceptions.RequestException as e:
                raise self._transport_error(method, endpoint, e) from e

            if raw is None:
                logger.error(f"{method} {endpoint} exceeded {self.total_timeout}s")
                raise DeadlineExceededError(
                    f"Request exceeded the total timeout of {self.total_timeout}s",
                    status_code=response.status_code
                )

            self._handle_response(method, endpoint, response, raw)
        finally:
            response.close()

    def _transport_error(self, method: str, endpoint: str, e: Exception) -> TransportError:
        if isinstance(e, requests.exceptions.Timeout):
            logger.error(f"{method} {endpoint} timed out")
            return DeadlineExceededError(
                f"Request timed out (connect {self.connect_timeout}s, total {self.total_timeout}s)"
            )
        if isinstance(e, requests.exceptions.ConnectionError):
            logger.error(f"{method} {endpoint} connection error: {e}")
            return TransportError(f"Connection error: {str(e)}")
        logger.error(f"{method} {endpoint} network error: {e}")
        return TransportError(f"Network error: {str(e)}")

    @staticmethod
    def _read_body(response: requests.Response, deadline: float) -> Optional[bytes]:
        """
        Read the streamed body in chunks.

        Returns:
            The raw body, or None when the deadline passed before it was complete
        """
        chunks = []
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            if time.monotonic() > deadline:
                return None
            chunks.append(chunk)
        if time.monotonic() > deadline:
            return None
        return b"".join(chunks)

    def _handle_response(
        self,
        method: str,
        endpoint: str,
        response: requests.Response,
        raw: bytes
    ) -> None:
        text = raw.decode(response.encoding or "utf-8", errors="replace")

        try:
            body = json.loads(text)
        except ValueError as e:
            raise DecodeError(
                f"JSON decode error: {str(e)}. Response: {text}",
                raw_body=text,
                status_code=response.status_code
            ) from e

        self.last.body = body

        if response.status_code >= 400:
            error = extract_error(body)
            self.last.error_code = error.code
            logger.warning(
                f"{method} {endpoint} failed: HTTP {response.status_code}, "
                f"code {error.code}: {error.message}"
            )
            raise error_class_for_status(response.status_code)(
                f"API Error ({response.status_code}): {error.message}",
                status_code=response.status_code,
                error_code=error.code,
                response_data=body
            )
