"""
钉钉自定义机器人SDK: 构造消息、加签并发送到群机器人webhook
"""

from dingtalk_robot.config import DEFAULT_WEBHOOK_URL, RobotConfig
from dingtalk_robot.defaults import clear_default_config, get_default_config, set_default_config
from dingtalk_robot.exceptions import (
    ApplicationError,
    ConfigError,
    DingTalkError,
    MessageFormatError,
    TemplateRenderError,
    TransportError,
)
from dingtalk_robot.models import (
    ActionCard,
    ActionCardButton,
    FailureKind,
    FeedCard,
    FeedCardLink,
    Link,
    Markdown,
    Mention,
    Message,
    SendResult,
    Text,
    parse_payload,
)
from dingtalk_robot.services import DingTalkClient, NotificationLevel, TemplateService

__version__ = "1.0.0"

__all__ = [
    "DEFAULT_WEBHOOK_URL",
    "ActionCard",
    "ActionCardButton",
    "ApplicationError",
    "ConfigError",
    "DingTalkClient",
    "DingTalkError",
    "FailureKind",
    "FeedCard",
    "FeedCardLink",
    "Link",
    "Markdown",
    "Mention",
    "Message",
    "MessageFormatError",
    "NotificationLevel",
    "RobotConfig",
    "SendResult",
    "TemplateRenderError",
    "TemplateService",
    "Text",
    "TransportError",
    "clear_default_config",
    "get_default_config",
    "parse_payload",
    "set_default_config",
]
