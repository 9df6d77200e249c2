"""
Tests for the session state machine: login, re-authentication after expiry,
proactive refresh and the in-progress guard.

Run:
    python -m pytest tests/test_session.py -v
"""

import time

import pytest
import requests

from conftest import API_URL, NEW_TOKEN, TOKEN, login_body, make_response
from webglobe.api.exceptions import AuthenticationError, TransportError
from webglobe.api.pipeline import ExchangeResult
from webglobe.api.session import Credentials, Session, SessionState


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class FakePipeline:
    """
    Records dispatches and replays canned (status, body) results.
    Like the real pipeline it checks the token before every exchange.
    """

    def __init__(self, session, results):
        self.session = session
        self.results = list(results)
        self.calls = []
        self.last = ExchangeResult()

    def dispatch(self, method, endpoint, payload=None):
        self.calls.append((method, endpoint, self.session.state))
        self.session.ensure_valid_token(self)
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        status, body = result
        self.last = ExchangeResult(status_code=status, body=body)


def _session(token=TOKEN, expires_in=3600, state=SessionState.AUTHENTICATED) -> Session:
    session = Session(Credentials("user", "secret"))
    session.token = token
    session.token_expiry = time.time() + expires_in
    session.state = state
    return session


# ===========================================================================
# 1. authenticate()
# ===========================================================================

class TestAuthenticate:

    def test_login_sets_token_expiry_and_payload(self):
        session = Session(Credentials("user", "secret"))
        pipeline = FakePipeline(session, [(200, login_body(expires_in=1800))])

        before = time.time()
        session.authenticate(pipeline)

        assert pipeline.calls == [("POST", "/auth/login", SessionState.AUTHENTICATING)]
        assert session.token == TOKEN
        assert session.state == SessionState.AUTHENTICATED
        assert before + 1800 <= session.token_expiry <= time.time() + 1800
        assert session.auth_payload["form_name"] == "FORM-1"

    def test_nested_check_during_login_is_noop(self):
        """The login request itself must not trigger a second login."""
        session = Session(Credentials("user", "secret"))
        pipeline = FakePipeline(session, [(200, login_body())])

        session.authenticate(pipeline)

        assert len(pipeline.calls) == 1

    def test_failed_login_keeps_previous_state(self):
        session = Session(Credentials("user", "secret"))
        pipeline = FakePipeline(session, [AuthenticationError("bad credentials", status_code=401)])

        with pytest.raises(AuthenticationError):
            session.authenticate(pipeline)

        assert session.state == SessionState.UNAUTHENTICATED
        assert session.token == ""
        assert not session.auth_in_progress

    def test_failed_reauth_keeps_old_token(self):
        session = _session(expires_in=-10)
        pipeline = FakePipeline(session, [TransportError("down")])

        with pytest.raises(TransportError):
            session.authenticate(pipeline)

        assert session.token == TOKEN
        assert session.state == SessionState.AUTHENTICATED

    def test_login_response_without_token(self):
        session = Session(Credentials("user", "secret"))
        pipeline = FakePipeline(session, [(200, {"data": {"expires_in": 60}})])

        with pytest.raises(AuthenticationError):
            session.authenticate(pipeline)

        assert session.state == SessionState.UNAUTHENTICATED

    def test_credentials_repr_hides_password(self):
        assert "secret" not in repr(Credentials("user", "secret"))


# ===========================================================================
# 2. ensure_valid_token()
# ===========================================================================

class TestEnsureValidToken:

    def test_fresh_token_is_noop(self):
        session = _session(expires_in=3600)
        pipeline = FakePipeline(session, [])

        session.ensure_valid_token(pipeline)

        assert pipeline.calls == []

    def test_unauthenticated_session_logs_in(self):
        session = Session(Credentials("user", "secret"))
        pipeline = FakePipeline(session, [(200, login_body())])

        session.ensure_valid_token(pipeline)

        assert [call[1] for call in pipeline.calls] == ["/auth/login"]
        assert session.state == SessionState.AUTHENTICATED

    def test_expired_token_triggers_full_login(self):
        session = _session(token="old.old.old", expires_in=-1)
        pipeline = FakePipeline(session, [(200, login_body(token=NEW_TOKEN))])

        session.ensure_valid_token(pipeline)

        assert [call[1] for call in pipeline.calls] == ["/auth/login"]
        assert session.token == NEW_TOKEN

    def test_token_near_expiry_is_refreshed(self):
        session = _session(expires_in=300)
        pipeline = FakePipeline(session, [(200, {"token": NEW_TOKEN, "expires_in": 3600})])

        session.ensure_valid_token(pipeline)

        assert pipeline.calls == [("GET", "/auth/refresh", SessionState.REFRESHING)]
        assert session.token == NEW_TOKEN
        assert session.token_expiry > time.time() + 3000
        assert session.state == SessionState.AUTHENTICATED

    @pytest.mark.parametrize("state", [SessionState.AUTHENTICATING, SessionState.REFRESHING])
    def test_noop_while_auth_in_progress(self, state):
        session = _session(expires_in=-100, state=state)
        pipeline = FakePipeline(session, [])

        session.ensure_valid_token(pipeline)

        assert pipeline.calls == []

    def test_custom_refresh_margin(self):
        session = _session(expires_in=300)
        session.refresh_margin = 60
        pipeline = FakePipeline(session, [])

        session.ensure_valid_token(pipeline)

        assert pipeline.calls == []


# ===========================================================================
# 3. refresh()
# ===========================================================================

class TestRefresh:

    def test_non_200_status_keeps_token(self):
        session = _session(expires_in=300)
        expiry = session.token_expiry
        pipeline = FakePipeline(session, [(202, {"token": NEW_TOKEN, "expires_in": 3600})])

        session.refresh(pipeline)

        assert session.token == TOKEN
        assert session.token_expiry == expiry
        assert session.state == SessionState.AUTHENTICATED

    def test_api_error_is_swallowed(self):
        session = _session(expires_in=300)
        pipeline = FakePipeline(session, [AuthenticationError("expired", status_code=401)])

        session.refresh(pipeline)

        assert session.token == TOKEN
        assert session.state == SessionState.AUTHENTICATED

    def test_transport_error_is_swallowed(self):
        session = _session(expires_in=300)
        pipeline = FakePipeline(session, [TransportError("connection reset")])

        session.refresh(pipeline)

        assert session.token == TOKEN
        assert not session.auth_in_progress

    def test_refresh_accepts_data_envelope(self):
        session = _session(expires_in=300)
        pipeline = FakePipeline(session, [(200, {"data": {"token": NEW_TOKEN, "expires_in": 900}})])

        session.refresh(pipeline)

        assert session.token == NEW_TOKEN

    def test_refresh_response_without_token(self):
        session = _session(expires_in=300)
        pipeline = FakePipeline(session, [(200, {"status": "ok"})])

        session.refresh(pipeline)

        assert session.token == TOKEN

    def test_refresh_keeps_auth_payload(self):
        session = _session(expires_in=300)
        session.auth_payload = {"form_name": "FORM-1", "credit_account_info": {"balance_base": "10"}}
        pipeline = FakePipeline(session, [(200, {"token": NEW_TOKEN, "expires_in": 3600})])

        session.refresh(pipeline)

        assert session.auth_payload["credit_account_info"] == {"balance_base": "10"}


# ===========================================================================
# 4. Through the real pipeline
# ===========================================================================

class TestTokenLifecycleOverHttp:

    def test_expired_token_relogin_before_request(self, client, mock_request):
        """The account request goes out with the token from the new login."""
        client.session.token_expiry = time.time() - 1
        mock_request.side_effect = [
            make_response(200, login_body(token=NEW_TOKEN)),
            make_response(200, {"data": {"login": "user"}}),
        ]

        client.my_account()

        login_call, account_call = mock_request.call_args_list
        assert login_call.kwargs["url"] == f"{API_URL}/auth/login"
        assert account_call.kwargs["url"].startswith(f"{API_URL}/my-account")
        assert account_call.kwargs["headers"]["Authorization"] == f"Bearer {NEW_TOKEN}"
        assert client.get_response() == {"data": {"login": "user"}}
        assert client.get_return_code() == 200

    def test_proactive_refresh_before_request(self, client, mock_request):
        client.session.token_expiry = time.time() + 120
        mock_request.side_effect = [
            make_response(200, {"token": NEW_TOKEN, "expires_in": 3600}),
            make_response(200, {"data": {}}),
        ]

        client.my_account()

        refresh_call, account_call = mock_request.call_args_list
        assert refresh_call.kwargs["url"].startswith(f"{API_URL}/auth/refresh")
        assert refresh_call.kwargs["headers"]["Authorization"] == f"Bearer {TOKEN}"
        assert account_call.kwargs["headers"]["Authorization"] == f"Bearer {NEW_TOKEN}"

    def test_failed_refresh_does_not_fail_request(self, client, mock_request):
        expiry = time.time() + 120
        client.session.token_expiry = expiry
        mock_request.side_effect = [
            make_response(401, {"message": "Token invalid"}),
            make_response(200, {"data": "ok"}),
        ]

        client.my_account()

        assert client.session.token == TOKEN
        assert client.session.token_expiry == expiry
        assert client.get_return_code() == 200
        assert client.get_error_code() is None
        assert mock_request.call_args_list[1].kwargs["headers"]["Authorization"] == f"Bearer {TOKEN}"

    def test_refresh_transport_failure_does_not_fail_request(self, client, mock_request):
        client.session.token_expiry = time.time() + 120
        mock_request.side_effect = [
            requests.exceptions.ConnectionError("reset"),
            make_response(200, {"data": "ok"}),
        ]

        client.my_account()

        assert client.get_response() == {"data": "ok"}
        assert client.session.state == SessionState.AUTHENTICATED
