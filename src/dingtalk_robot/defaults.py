import logging
import threading
from typing import Dict, Iterable, Optional, Union

from dingtalk_robot.config import RobotConfig
from dingtalk_robot.exceptions import ConfigError
from dingtalk_robot.models.message import ActionCardButton, FeedCardLink, Mention, Message
from dingtalk_robot.models.result import SendResult
from dingtalk_robot.services.dingtalk import DingTalkClient

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_default_config: Optional[RobotConfig] = None


def set_default_config(config: RobotConfig) -> None:
    """
    设置进程级默认机器人配置，整体替换旧配置
    """
    global _default_config
    if not isinstance(config, RobotConfig):
        raise ConfigError(f"默认配置必须是RobotConfig: {config!r}")
    with _lock:
        _default_config = config
    logger.info(f"已设置默认钉钉配置: {config!r}")


def get_default_config() -> RobotConfig:
    with _lock:
        config = _default_config
    if config is None:
        raise ConfigError("未设置默认钉钉配置，请先调用set_default_config")
    return config


def clear_default_config() -> None:
    global _default_config
    with _lock:
        _default_config = None


def send(message: Message) -> SendResult:
    with DingTalkClient(get_default_config()) as client:
        return client.send(message)


def send_text(content: str, mention: Optional[Mention] = None) -> SendResult:
    with DingTalkClient(get_default_config()) as client:
        return client.send_text(content, mention)


def send_markdown(title: str, text: str, mention: Optional[Mention] = None) -> SendResult:
    with DingTalkClient(get_default_config()) as client:
        return client.send_markdown(title, text, mention)


def send_link(title: str, text: str, message_url: str, pic_url: str = "") -> SendResult:
    with DingTalkClient(get_default_config()) as client:
        return client.send_link(title, text, message_url, pic_url)


def send_action_card(
    title: str,
    text: str,
    single_title: Optional[str] = None,
    single_url: Optional[str] = None,
    buttons: Iterable[Union[ActionCardButton, Dict[str, str]]] = (),
    btn_orientation: Optional[str] = None,
) -> SendResult:
    with DingTalkClient(get_default_config()) as client:
        return client.send_action_card(title, text, single_title, single_url, buttons, btn_orientation)


def send_feed_card(links: Iterable[Union[FeedCardLink, Dict[str, str]]]) -> SendResult:
    with DingTalkClient(get_default_config()) as client:
        return client.send_feed_card(links)
