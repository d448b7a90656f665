from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Union

from jinja2 import Template, TemplateError

from dingtalk_robot.exceptions import TemplateRenderError
from dingtalk_robot.models.message import Markdown, Mention


class NotificationLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


DEFAULT_TITLE = "系统通知"
DEFAULT_SOURCE = "未知来源"

_HEADINGS = {
    NotificationLevel.INFO: "ℹ️ 信息通知",
    NotificationLevel.WARNING: "⚠️ 警告通知",
    NotificationLevel.ERROR: "❌ 错误通知",
    NotificationLevel.CRITICAL: "🚨 严重告警",
}

# extra为调用方附加的字段，逐行列在末尾
_BODY = """{{ content }}

- 标题: {{ title }}
- 级别: {{ level }}
- 来源: {{ source }}
- 时间: {{ timestamp }}
{%- for key, value in (extra or {}).items() %}
- {{ key }}: {{ value }}
{%- endfor %}"""


class TemplateService:
    @staticmethod
    def render_markdown_template(template: str, data: Dict[str, Any]) -> str:
        """
        渲染markdown模板
        """
        try:
            jinja_template = Template(template)
            context = {"timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"), **data}
            return jinja_template.render(**context)
        except TemplateError as e:
            raise TemplateRenderError(f"模板渲染错误: {str(e)}") from e

    @staticmethod
    def get_default_template(level: Union[NotificationLevel, str]) -> str:
        """
        获取默认模板，未知级别使用info模板
        """
        try:
            level = NotificationLevel(level)
        except ValueError:
            level = NotificationLevel.INFO
        return f"### {_HEADINGS[level]}\n\n" + _BODY

    @classmethod
    def build_notification(
        cls,
        content: str,
        title: Optional[str] = None,
        level: Union[NotificationLevel, str] = NotificationLevel.INFO,
        source: Optional[str] = None,
        mention: Optional[Mention] = None,
        **extra_data: Any,
    ) -> Markdown:
        level_value = level.value if isinstance(level, NotificationLevel) else str(level)
        template_data = {
            **extra_data,
            "extra": extra_data,
            "content": content,
            "title": title or DEFAULT_TITLE,
            "level": level_value,
            "source": source or DEFAULT_SOURCE,
        }
        text = cls.render_markdown_template(cls.get_default_template(level), template_data)
        return Markdown(title=title or DEFAULT_TITLE, text=text, mention=mention or Mention())
