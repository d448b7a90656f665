import json
from typing import Annotated, Any, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from dingtalk_robot.exceptions import MessageFormatError

# 字段名由钉钉开放平台文档固定，Python侧使用下划线命名 + alias


class Mention(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    at_mobiles: Tuple[str, ...] = Field((), alias="atMobiles", description="被@人的手机号")
    at_all: bool = Field(False, alias="isAtAll", description="是否@所有人")

    @classmethod
    def everyone(cls) -> "Mention":
        return cls(at_all=True)

    @classmethod
    def mobiles(cls, *numbers: str) -> "Mention":
        return cls(at_mobiles=numbers)

    @property
    def is_empty(self) -> bool:
        return not self.at_all and not self.at_mobiles

    def to_payload(self) -> Dict[str, Any]:
        return {"atMobiles": list(self.at_mobiles), "isAtAll": self.at_all}


class _MessageBase(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    msgtype: str

    def _body(self) -> Dict[str, Any]:
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            exclude={"msgtype", "mention"},
        )

    def to_payload(self) -> Dict[str, Any]:
        """
        转换为钉钉webhook要求的消息体
        """
        payload: Dict[str, Any] = {"msgtype": self.msgtype, self.msgtype: self._body()}
        mention: Optional[Mention] = getattr(self, "mention", None)
        if mention is not None and not mention.is_empty:
            payload["at"] = mention.to_payload()
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_payload(), ensure_ascii=False)


class Text(_MessageBase):
    msgtype: Literal["text"] = "text"
    content: str = Field(..., description="文本内容")
    mention: Mention = Field(default_factory=Mention, description="@用户配置")


class Markdown(_MessageBase):
    msgtype: Literal["markdown"] = "markdown"
    title: str = Field(..., description="标题")
    text: str = Field(..., description="markdown内容")
    mention: Mention = Field(default_factory=Mention, description="@用户配置")


class Link(_MessageBase):
    msgtype: Literal["link"] = "link"
    title: str = Field(..., description="链接标题")
    text: str = Field(..., description="链接内容")
    message_url: str = Field(..., alias="messageUrl", description="链接URL")
    pic_url: str = Field("", alias="picUrl", description="图片URL")


class ActionCardButton(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = Field(..., description="按钮标题")
    action_url: str = Field(..., alias="actionURL", description="点击按钮触发的URL")


class ActionCard(_MessageBase):
    """
    整体跳转(single_title/single_url)与独立跳转(buttons)二选一，
    buttons非空时只发送btns
    """

    msgtype: Literal["actionCard"] = "actionCard"
    title: str = Field(..., description="标题")
    text: str = Field(..., description="markdown内容")
    single_title: Optional[str] = Field(None, alias="singleTitle", description="单个按钮的标题")
    single_url: Optional[str] = Field(None, alias="singleURL", description="单个按钮的跳转URL")
    buttons: Tuple[ActionCardButton, ...] = Field((), alias="btns", description="独立跳转按钮")
    btn_orientation: Optional[str] = Field(None, alias="btnOrientation", description="0:竖直排列 1:横向排列")

    def _body(self) -> Dict[str, Any]:
        exclude = {"msgtype"}
        if self.buttons:
            exclude |= {"single_title", "single_url"}
        else:
            exclude.add("buttons")
        return self.model_dump(mode="json", by_alias=True, exclude_none=True, exclude=exclude)


class FeedCardLink(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str = Field(..., description="标题")
    message_url: str = Field(..., alias="messageURL", description="跳转URL")
    pic_url: str = Field("", alias="picURL", description="图片URL")


class FeedCard(_MessageBase):
    msgtype: Literal["feedCard"] = "feedCard"
    links: Tuple[FeedCardLink, ...] = Field((), description="卡片列表")


Message = Annotated[
    Union[Text, Markdown, Link, ActionCard, FeedCard],
    Field(discriminator="msgtype"),
]

MESSAGE_TYPES = ("text", "markdown", "link", "actionCard", "feedCard")
_MENTION_TYPES = ("text", "markdown")

_message_adapter = TypeAdapter(Message)


def parse_payload(payload: Dict[str, Any]) -> Message:
    """
    将钉钉格式的消息体还原为消息对象
    """
    if not isinstance(payload, dict):
        raise MessageFormatError(f"消息体必须是JSON对象: {payload!r}")

    msgtype = payload.get("msgtype")
    if msgtype not in MESSAGE_TYPES:
        raise MessageFormatError(f"不支持的消息类型: {msgtype}")

    body = payload.get(msgtype)
    if not isinstance(body, dict):
        raise MessageFormatError(f"缺少消息内容: {msgtype}")

    data = dict(body)
    data["msgtype"] = msgtype
    if msgtype in _MENTION_TYPES and isinstance(payload.get("at"), dict):
        data["mention"] = payload["at"]

    try:
        return _message_adapter.validate_python(data)
    except ValidationError as e:
        raise MessageFormatError(f"消息格式错误: {e}") from e
