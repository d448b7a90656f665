import json
import logging
import os
import urllib.parse
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from dingtalk_robot.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_WEBHOOK_URL = "https://oapi.dingtalk.com/robot/send?access_token="
DEFAULT_WEBHOOK_NAME = "default"

ENV_WEBHOOK_URL = "DINGTALK_WEBHOOK_URL"
ENV_ACCESS_TOKEN = "DINGTALK_ACCESS_TOKEN"
ENV_SECRET = "DINGTALK_SECRET"


class RobotConfig(BaseModel):
    """
    钉钉机器人配置

    支持的配置格式:

        {"webhook_url": "https://oapi.dingtalk.com/robot/send?access_token=xxx", "secret": "SECxxx"}
        {"access_token": "xxx", "sec_token": "SECxxx", "default_webhook_url": "..."}

    以及与config.yaml一致的多webhook格式:

        dingtalk:
          webhooks:
            default:
              url: https://oapi.dingtalk.com/robot/send?access_token=xxx
              secret: SECxxx
    """

    model_config = ConfigDict(frozen=True)

    webhook_url: str = Field(..., min_length=1, description="webhook地址")
    secret: Optional[str] = Field(None, repr=False, description="加签密钥")

    @field_validator("secret")
    @classmethod
    def _empty_secret_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @property
    def signed(self) -> bool:
        return self.secret is not None

    @classmethod
    def from_token(
        cls,
        access_token: str,
        secret: Optional[str] = None,
        base_url: str = DEFAULT_WEBHOOK_URL,
    ) -> "RobotConfig":
        if not access_token:
            raise ConfigError("未提供access_token")
        if not isinstance(access_token, str) or not isinstance(base_url, str):
            raise ConfigError("配置格式错误: access_token和webhook地址必须是字符串")
        return cls(webhook_url=base_url + urllib.parse.quote(access_token), secret=secret)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], name: Optional[str] = None) -> "RobotConfig":
        if not isinstance(data, Mapping):
            raise ConfigError(f"配置格式错误，应为JSON对象: {data!r}")

        data = _select_webhook(data, name)
        secret = data.get("secret") or data.get("sec_token")
        url = data.get("webhook_url") or data.get("url")

        try:
            if url:
                return cls(webhook_url=url, secret=secret)
            if data.get("access_token"):
                return cls.from_token(
                    data["access_token"],
                    secret,
                    data.get("default_webhook_url") or DEFAULT_WEBHOOK_URL,
                )
        except ValidationError as e:
            raise ConfigError(f"配置格式错误: {e}") from e

        raise ConfigError("配置中缺少webhook_url或access_token")

    @classmethod
    def from_json(cls, text: str, name: Optional[str] = None) -> "RobotConfig":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigError(f"配置JSON解析失败: {e}") from e
        return cls.from_mapping(data, name)

    @classmethod
    def from_file(cls, path: Union[str, os.PathLike], name: Optional[str] = None) -> "RobotConfig":
        """
        从JSON或YAML文件加载配置，支持 ~/ 开头的路径
        """
        config_path = Path(path).expanduser()
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                if config_path.suffix in ('.yaml', '.yml'):
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except OSError as e:
            logger.error(f"加载配置文件失败: {config_path}, 错误: {e}")
            raise ConfigError(f"加载配置文件失败: {config_path}") from e
        except (UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
            logger.error(f"解析配置文件失败: {config_path}, 错误: {e}")
            raise ConfigError(f"解析配置文件失败: {config_path}") from e

        logger.info(f"已加载钉钉配置: {config_path}")
        return cls.from_mapping(data, name)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RobotConfig":
        environ = os.environ if environ is None else environ
        url = environ.get(ENV_WEBHOOK_URL)
        token = environ.get(ENV_ACCESS_TOKEN)
        if not url and not token:
            raise ConfigError(f"未设置环境变量 {ENV_WEBHOOK_URL} 或 {ENV_ACCESS_TOKEN}")
        return cls.from_mapping({
            "webhook_url": url,
            "access_token": token,
            "secret": environ.get(ENV_SECRET),
        })


def _select_webhook(data: Mapping[str, Any], name: Optional[str]) -> Dict[str, Any]:
    if "dingtalk" not in data:
        if name is not None:
            logger.warning(f"配置不是多webhook格式，忽略webhook名称: {name}")
        return dict(data)

    section = data.get("dingtalk")
    webhooks = section.get("webhooks") if isinstance(section, Mapping) else None
    if not isinstance(webhooks, Mapping):
        raise ConfigError("配置中缺少 dingtalk.webhooks")
    key = name or DEFAULT_WEBHOOK_NAME
    webhook = webhooks.get(key)
    if not isinstance(webhook, Mapping):
        raise ConfigError(f"未找到webhook配置: {key}")
    return dict(webhook)
