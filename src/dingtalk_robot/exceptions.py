from typing import Optional


class DingTalkError(Exception):
    """钉钉机器人相关错误的基类"""


class ConfigError(DingTalkError):
    """机器人配置缺失或格式错误"""


class MessageFormatError(DingTalkError):
    """无法解析的钉钉消息"""


class TemplateRenderError(DingTalkError):
    """消息模板渲染失败"""


class TransportError(DingTalkError):
    """无法请求钉钉API，或响应无法解析"""

    def __init__(self, message: str, cause: Optional[str] = None):
        super().__init__(message)
        self.cause = cause


class ApplicationError(DingTalkError):
    """钉钉API返回了非0的errcode"""

    def __init__(self, errcode: int, errmsg: str):
        super().__init__(f"钉钉API错误 [{errcode}]: {errmsg}")
        self.errcode = errcode
        self.errmsg = errmsg
