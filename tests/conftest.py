"""
Shared fixtures. All HTTP traffic is mocked at requests.request.
"""

import json
from unittest.mock import MagicMock, patch

import pytest


API_URL = "https://api.test.webglobe"
TOKEN = "aaaa.bbbb.cccc"
NEW_TOKEN = "dddd.eeee.ffff"


def make_response(status_code: int = 200, body=None, text: str = None) -> MagicMock:
    """Build a streamed requests.Response stand-in."""
    if text is None:
        text = json.dumps(body) if body is not None else ""
    raw = text.encode("utf-8")
    response = MagicMock()
    response.status_code = status_code
    response.encoding = "utf-8"
    response.iter_content.side_effect = lambda chunk_size=1: iter([raw] if raw else [])
    return response


def login_body(token: str = TOKEN, expires_in: int = 3600, form_name: str = "FORM-1", **extra) -> dict:
    data = {"token": token, "expires_in": expires_in, **extra}
    if form_name is not None:
        data["form_name"] = form_name
    return {"data": data}


@pytest.fixture
def mock_request():
    with patch("webglobe.api.pipeline.requests.request") as mocked:
        yield mocked


@pytest.fixture
def client(mock_request):
    """A logged in client; the login call is cleared from the mock."""
    from webglobe.api import WebglobeClient

    mock_request.return_value = make_response(
        200, login_body(credit_account_info={"balance_base": "1520.50"})
    )
    instance = WebglobeClient(API_URL, "user", "secret")
    mock_request.reset_mock(return_value=True, side_effect=True)
    return instance
