"""
Webglobe Session
Owns the JWT token, its expiry and the login credentials.
Decides between full re-authentication and token refresh before each request.

A Session is not thread-safe. One client instance must be used from a
single thread at a time, or callers must serialize access themselves.
"""

import re
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, TYPE_CHECKING

from webglobe.api.error_extractor import first_available_value
from webglobe.api.exceptions import AuthenticationError, WebglobeError
from webglobe.utils.logger import get_logger

if TYPE_CHECKING:
    from webglobe.api.pipeline import RequestPipeline


logger = get_logger(__name__)

LOGIN_ENDPOINT = "/auth/login"
REFRESH_ENDPOINT = "/auth/refresh"

# Refresh the token when it expires within this many seconds
DEFAULT_REFRESH_MARGIN = 600

JWT_PATTERN = re.compile(r"[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+")

# Login answers {"data": {"token": ...}}, refresh answers {"token": ...}
TOKEN_KEY_PATHS = (("data", "token"), ("token",))
EXPIRES_IN_KEY_PATHS = (("data", "expires_in"), ("expires_in",))


@dataclass(frozen=True)
class Credentials:
    """Login and password used for /auth/login"""

    login: str
    password: str

    def as_payload(self) -> Dict[str, str]:
        return {"login": self.login, "password": self.password}

    def __repr__(self) -> str:
        return f"Credentials(login={self.login!r}, password='***')"


class SessionState(str, Enum):
    """Authentication lifecycle states"""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    REFRESHING = "refreshing"


def _as_seconds(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def is_jwt(token: str) -> bool:
    """Check that a token has the three dot-separated base64url segments of a JWT"""
    return bool(token) and JWT_PATTERN.fullmatch(token) is not None


class Session:
    """
    Authentication state for one client instance.

    The session never talks HTTP itself. Login and refresh are routed
    through the RequestPipeline passed to each call, which in turn calls
    ensure_valid_token() before every exchange. While a login or refresh is
    in flight the state is AUTHENTICATING or REFRESHING and nested expiry
    checks return immediately.
    """

    def __init__(self, credentials: Credentials, refresh_margin: int = DEFAULT_REFRESH_MARGIN):
        self.credentials = credentials
        self.refresh_margin = refresh_margin
        self.token = ""
        self.token_expiry = 0.0
        self.auth_payload: Dict[str, Any] = {}
        self.state = SessionState.UNAUTHENTICATED

    @property
    def auth_in_progress(self) -> bool:
        return self.state in (SessionState.AUTHENTICATING, SessionState.REFRESHING)

    def authorization_header(self) -> Dict[str, str]:
        """
        Build the Authorization header for the current token.

        Returns:
            {"Authorization": "Bearer <token>"} when the token looks like a JWT,
            otherwise an empty dict
        """
        if is_jwt(self.token):
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    def with_form_name(self, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Copy a payload and add the customer's form_name from the login response.

        Webglobe expects form_name to be repeated on every request.
        """
        payload = dict(payload or {})
        if "form_name" in self.auth_payload:
            payload["form_name"] = self.auth_payload["form_name"]
        return payload

    def ensure_valid_token(self, pipeline: "RequestPipeline") -> None:
        """
        Make sure a usable token is available before an outgoing request.

        Args:
            pipeline: Pipeline used to send the login or refresh request
        """
        if self.auth_in_progress:
            return

        now = time.time()

        if now > self.token_expiry:
            if self.state == SessionState.AUTHENTICATED:
                logger.info("Token expired, re-authenticating")
            self.authenticate(pipeline)
            return

        if now + self.refresh_margin > self.token_expiry:
            self.refresh(pipeline)

    def authenticate(self, pipeline: "RequestPipeline") -> None:
        """
        Log in with the stored credentials and replace the session token.

        Args:
            pipeline: Pipeline used to send the login request

        Raises:
            WebglobeError: If the login exchange fails. The previous token and
                state are kept.
        """
        previous_state = self.state
        self.state = SessionState.AUTHENTICATING
        logger.info(f"Authenticating as {self.credentials.login}")

        try:
            pipeline.dispatch("POST", LOGIN_ENDPOINT, self.credentials.as_payload())
            body = pipeline.last.body
            token = first_available_value(body, TOKEN_KEY_PATHS)
            expires_in = _as_seconds(first_available_value(body, EXPIRES_IN_KEY_PATHS))

            if not isinstance(token, str) or expires_in is None:
                raise AuthenticationError(
                    "Login response is missing token or expires_in",
                    status_code=pipeline.last.status_code,
                    response_data=body
                )
        except WebglobeError:
            self.state = previous_state
            raise

        data = body.get("data") if isinstance(body.get("data"), dict) else body
        self.token = token
        self.auth_payload = data
        self.token_expiry = time.time() + expires_in
        self.state = SessionState.AUTHENTICATED

        logger.info(f"Authenticated, token valid for {int(expires_in)}s")

    def refresh(self, pipeline: "RequestPipeline") -> None:
        """
        Exchange the current, still valid token for a fresh one.

        Failures are not raised: the current token stays in use until its own
        expiry triggers a full re-authentication.

        Args:
            pipeline: Pipeline used to send the refresh request
        """
        previous_state = self.state
        self.state = SessionState.REFRESHING
        logger.info("Token expires soon, refreshing")

        try:
            pipeline.dispatch("GET", REFRESH_ENDPOINT)
        except WebglobeError as e:
            logger.warning(f"Token refresh failed, keeping current token: {e}")
            return
        finally:
            self.state = previous_state

        if pipeline.last.status_code != 200:
            logger.warning(
                f"Token refresh returned HTTP {pipeline.last.status_code}, keeping current token"
            )
            return

        body = pipeline.last.body
        token = first_available_value(body, TOKEN_KEY_PATHS)
        expires_in = _as_seconds(first_available_value(body, EXPIRES_IN_KEY_PATHS))

        if not isinstance(token, str) or expires_in is None:
            logger.warning("Token refresh response is missing token or expires_in, keeping current token")
            return

        self.token = token
        self.token_expiry = time.time() + expires_in
        logger.info(f"Token refreshed, valid for {int(expires_in)}s")
