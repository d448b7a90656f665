from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from dingtalk_robot.exceptions import ApplicationError, TransportError


class FailureKind(str, Enum):
    TRANSPORT = "transport"
    APPLICATION = "application"


class SendResult(BaseModel):
    success: bool = Field(..., description="是否成功")
    message: str = Field(..., description="响应消息")
    failure: Optional[FailureKind] = Field(None, description="失败类型")
    errcode: Optional[int] = Field(None, description="钉钉返回的errcode")
    errmsg: Optional[str] = Field(None, description="钉钉返回的errmsg")
    cause: Optional[str] = Field(None, description="底层异常描述")
    timestamp: datetime = Field(default_factory=datetime.now)

    @classmethod
    def ok(cls, errmsg: str = "ok") -> "SendResult":
        return cls(success=True, message="消息发送成功", errcode=0, errmsg=errmsg)

    @classmethod
    def transport_failure(cls, cause, message: str = "请求钉钉API失败") -> "SendResult":
        return cls(
            success=False,
            message=message,
            failure=FailureKind.TRANSPORT,
            cause=str(cause),
        )

    @classmethod
    def application_failure(cls, errcode: int, errmsg: str) -> "SendResult":
        return cls(
            success=False,
            message=f"钉钉API错误: {errmsg}",
            failure=FailureKind.APPLICATION,
            errcode=errcode,
            errmsg=errmsg,
        )

    @property
    def is_transport_error(self) -> bool:
        return self.failure == FailureKind.TRANSPORT

    @property
    def is_application_error(self) -> bool:
        return self.failure == FailureKind.APPLICATION

    def raise_for_error(self) -> "SendResult":
        """
        发送失败时抛出对应异常，成功时返回自身
        """
        if self.is_transport_error:
            raise TransportError(self.message, cause=self.cause)
        if self.is_application_error:
            raise ApplicationError(self.errcode, self.errmsg or "")
        return self

    def __bool__(self) -> bool:
        return self.success
