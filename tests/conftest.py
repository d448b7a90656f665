import base64
import hashlib
import hmac
import urllib.parse
from unittest.mock import MagicMock

import pytest
import requests

from dingtalk_robot.config import RobotConfig

WEBHOOK_URL = "https://oapi.dingtalk.com/robot/send?access_token=test-token"


@pytest.fixture
def make_response():
    def _make(json_data=None, status_code=200, json_error=None):
        response = MagicMock()
        response.status_code = status_code
        if status_code >= 400:
            response.raise_for_status.side_effect = requests.exceptions.HTTPError(
                f"{status_code} Server Error"
            )
        if json_error is not None:
            response.json.side_effect = json_error
        else:
            response.json.return_value = json_data
        return response

    return _make


@pytest.fixture
def mock_session(make_response):
    session = MagicMock()
    session.headers = {}
    session.post.return_value = make_response({"errcode": 0, "errmsg": "ok"})
    return session


@pytest.fixture
def expected_sign():
    def _sign(secret, timestamp):
        digest = hmac.new(
            secret.encode("utf-8"),
            f"{timestamp}\n{secret}".encode("utf-8"),
            hashlib.sha256,
        ).digest()
        return urllib.parse.quote_plus(base64.b64encode(digest).decode("ascii"))

    return _sign


@pytest.fixture
def config():
    return RobotConfig(webhook_url=WEBHOOK_URL)


@pytest.fixture
def signed_config():
    return RobotConfig(webhook_url=WEBHOOK_URL, secret="SECtest")
