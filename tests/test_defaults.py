import threading
from unittest.mock import patch

import pytest

from dingtalk_robot import defaults
from dingtalk_robot.config import RobotConfig
from dingtalk_robot.exceptions import ConfigError
from dingtalk_robot.models.message import Text
from dingtalk_robot.models.result import SendResult


@pytest.fixture(autouse=True)
def reset_default_config():
    defaults.clear_default_config()
    yield
    defaults.clear_default_config()


def test_get_default_config_requires_set():
    with pytest.raises(ConfigError):
        defaults.get_default_config()


def test_set_and_replace_default_config():
    first = RobotConfig(webhook_url="https://example.com/1")
    second = RobotConfig(webhook_url="https://example.com/2", secret="SECabc")

    defaults.set_default_config(first)
    assert defaults.get_default_config() is first

    defaults.set_default_config(second)
    assert defaults.get_default_config() is second


def test_set_default_config_rejects_other_types():
    with pytest.raises(ConfigError):
        defaults.set_default_config({"webhook_url": "https://example.com"})


def test_concurrent_replace_leaves_one_complete_config():
    configs = [RobotConfig(webhook_url=f"https://example.com/{i}") for i in range(20)]
    threads = [threading.Thread(target=defaults.set_default_config, args=(c,)) for c in configs]

    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert defaults.get_default_config() in configs


def test_convenience_functions_require_default_config():
    with pytest.raises(ConfigError):
        defaults.send_text("hi")


def test_send_text_uses_default_config():
    config = RobotConfig(webhook_url="https://example.com/robot")
    defaults.set_default_config(config)

    with patch("dingtalk_robot.defaults.DingTalkClient") as client_cls:
        client = client_cls.return_value.__enter__.return_value
        client.send_text.return_value = SendResult.ok()

        result = defaults.send_text("hi")

    client_cls.assert_called_once_with(config)
    client.send_text.assert_called_once_with("hi", None)
    assert result.success


def test_send_uses_default_config():
    defaults.set_default_config(RobotConfig(webhook_url="https://example.com/robot"))
    message = Text(content="hi")

    with patch("dingtalk_robot.defaults.DingTalkClient") as client_cls:
        client = client_cls.return_value.__enter__.return_value
        client.send.return_value = SendResult.application_failure(300001, "token is not exist")

        result = defaults.send(message)

    client.send.assert_called_once_with(message)
    assert result.is_application_error


@pytest.mark.parametrize("func, args, method", [
    (defaults.send_markdown, ("t", "x"), "send_markdown"),
    (defaults.send_link, ("t", "x", "https://example.com"), "send_link"),
    (defaults.send_action_card, ("t", "x", "阅读全文", "https://example.com"), "send_action_card"),
    (defaults.send_feed_card, ([{"title": "a", "messageURL": "https://example.com"}],), "send_feed_card"),
])
def test_helpers_delegate_to_client(func, args, method):
    defaults.set_default_config(RobotConfig(webhook_url="https://example.com/robot"))

    with patch("dingtalk_robot.defaults.DingTalkClient") as client_cls:
        client = client_cls.return_value.__enter__.return_value
        func(*args)

    getattr(client, method).assert_called_once()
