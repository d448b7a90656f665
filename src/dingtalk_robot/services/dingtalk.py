import json
import logging
from typing import Any, Dict, Iterable, Optional, Union

import requests

from dingtalk_robot.config import RobotConfig
from dingtalk_robot.exceptions import MessageFormatError
from dingtalk_robot.models.message import (
    ActionCard,
    ActionCardButton,
    FeedCard,
    FeedCardLink,
    Link,
    Markdown,
    Mention,
    Message,
    Text,
)
from dingtalk_robot.models.result import SendResult
from dingtalk_robot.utils.security import DingTalkSecurity

logger = logging.getLogger(__name__)

CONTENT_TYPE = 'application/json; charset=utf-8'


class DingTalkClient:
    """
    钉钉自定义机器人客户端

    文档: https://open.dingtalk.com/document/robots/custom-robot-access

        client = DingTalkClient(RobotConfig.from_token("<token>", "<secret>"))
        result = client.send_text("Hello world!", mention=Mention.everyone())
        if not result.success:
            ...

    每次发送只请求一次钉钉API，不做重试。失败通过SendResult返回，不抛出异常。
    """

    def __init__(
        self,
        config: RobotConfig,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.config = config
        self.timeout = timeout
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({
            'Content-Type': CONTENT_TYPE
        })

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "DingTalkClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def signed_url(self, timestamp: Optional[str] = None) -> str:
        return DingTalkSecurity.sign_url(self.config.webhook_url, self.config.secret, timestamp)

    def send(self, message: Message) -> SendResult:
        """
        发送消息到钉钉
        """
        return self.send_payload(message.to_payload())

    def send_payload(self, payload: Dict[str, Any]) -> SendResult:
        """
        直接发送钉钉格式的JSON消息
        """
        if not isinstance(payload, dict):
            raise MessageFormatError(f"消息体必须是JSON对象: {payload!r}")

        full_url = self.signed_url()
        data = json.dumps(payload, ensure_ascii=False)
        logger.info(f"发送钉钉消息: {payload.get('msgtype')}")

        try:
            response = self.session.post(full_url, data=data.encode('utf-8'), timeout=self.timeout)
            response.raise_for_status()
            result = response.json()
        except requests.exceptions.Timeout as e:
            logger.error("钉钉API请求超时")
            return SendResult.transport_failure(e, message="请求钉钉API超时")
        except ValueError as e:
            # requests的JSONDecodeError同时是ValueError
            logger.error(f"钉钉API响应不是合法的JSON: {str(e)}")
            return SendResult.transport_failure(e, message="钉钉API响应格式错误")
        except requests.exceptions.RequestException as e:
            logger.error(f"钉钉API请求失败: {str(e)}")
            return SendResult.transport_failure(e)

        return self._parse_result(result)

    @staticmethod
    def _parse_result(result: Any) -> SendResult:
        errcode = result.get('errcode') if isinstance(result, dict) else None
        if not isinstance(errcode, int) or isinstance(errcode, bool):
            logger.error(f"钉钉API响应缺少errcode: {result!r}")
            return SendResult.transport_failure(
                f"响应缺少errcode: {result!r}",
                message="钉钉API响应格式错误",
            )

        errmsg = str(result.get('errmsg', ''))
        if errcode == 0:
            logger.info("钉钉消息发送成功")
            return SendResult.ok(errmsg)

        logger.error(f"钉钉API错误: [{errcode}] {errmsg}")
        return SendResult.application_failure(errcode, errmsg)

    def send_text(self, content: str, mention: Optional[Mention] = None) -> SendResult:
        return self.send(Text(content=content, mention=mention or Mention()))

    def send_markdown(self, title: str, text: str, mention: Optional[Mention] = None) -> SendResult:
        return self.send(Markdown(title=title, text=text, mention=mention or Mention()))

    def send_link(self, title: str, text: str, message_url: str, pic_url: str = "") -> SendResult:
        return self.send(Link(title=title, text=text, message_url=message_url, pic_url=pic_url))

    def send_action_card(
        self,
        title: str,
        text: str,
        single_title: Optional[str] = None,
        single_url: Optional[str] = None,
        buttons: Iterable[Union[ActionCardButton, Dict[str, str]]] = (),
        btn_orientation: Optional[str] = None,
    ) -> SendResult:
        return self.send(ActionCard(
            title=title,
            text=text,
            single_title=single_title,
            single_url=single_url,
            buttons=tuple(buttons),
            btn_orientation=btn_orientation,
        ))

    def send_feed_card(self, links: Iterable[Union[FeedCardLink, Dict[str, str]]]) -> SendResult:
        return self.send(FeedCard(links=tuple(links)))

    def send_notification(
        self,
        content: str,
        title: Optional[str] = None,
        level: str = "info",
        source: Optional[str] = None,
        mention: Optional[Mention] = None,
        **extra_data: Any,
    ) -> SendResult:
        """
        使用默认模板渲染markdown通知并发送
        """
        from dingtalk_robot.services.template import TemplateService

        message = TemplateService.build_notification(
            content,
            title=title,
            level=level,
            source=source,
            mention=mention,
            **extra_data,
        )
        return self.send(message)
