from dingtalk_robot.models.message import (
    MESSAGE_TYPES,
    ActionCard,
    ActionCardButton,
    FeedCard,
    FeedCardLink,
    Link,
    Markdown,
    Mention,
    Message,
    Text,
    parse_payload,
)
from dingtalk_robot.models.result import FailureKind, SendResult

__all__ = [
    "MESSAGE_TYPES",
    "ActionCard",
    "ActionCardButton",
    "FailureKind",
    "FeedCard",
    "FeedCardLink",
    "Link",
    "Markdown",
    "Mention",
    "Message",
    "SendResult",
    "Text",
    "parse_payload",
]
