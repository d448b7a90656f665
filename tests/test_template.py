import pytest

from dingtalk_robot.exceptions import TemplateRenderError
from dingtalk_robot.models.message import Markdown, Mention
from dingtalk_robot.services.template import NotificationLevel, TemplateService


@pytest.mark.parametrize("level, heading", [
    ("info", "信息通知"),
    ("warning", "警告通知"),
    (NotificationLevel.ERROR, "错误通知"),
    (NotificationLevel.CRITICAL, "严重告警"),
])
def test_default_template_per_level(level, heading):
    assert heading in TemplateService.get_default_template(level)


def test_unknown_level_falls_back_to_info():
    assert TemplateService.get_default_template("debug") == TemplateService.get_default_template("info")


def test_render_injects_timestamp():
    rendered = TemplateService.render_markdown_template("{{ content }} @ {{ timestamp }}", {"content": "hi"})

    assert rendered.startswith("hi @ ")
    assert len(rendered) > len("hi @ ")


def test_render_allows_timestamp_override():
    rendered = TemplateService.render_markdown_template(
        "{{ timestamp }}", {"timestamp": "2024-01-01 00:00:00"}
    )

    assert rendered == "2024-01-01 00:00:00"


def test_render_error_is_raised():
    with pytest.raises(TemplateRenderError):
        TemplateService.render_markdown_template("{{ content ", {"content": "hi"})


def test_build_notification_defaults():
    message = TemplateService.build_notification("服务已重启")

    assert isinstance(message, Markdown)
    assert message.title == "系统通知"
    assert "服务已重启" in message.text
    assert "未知来源" in message.text
    assert message.mention.is_empty


def test_build_notification_with_level_and_extra_data():
    message = TemplateService.build_notification(
        "CPU 99%",
        title="CPU告警",
        level=NotificationLevel.WARNING,
        source="prometheus",
        mention=Mention.mobiles("13800000000"),
        instance="node-1",
    )

    assert message.title == "CPU告警"
    assert "警告通知" in message.text
    assert "- 级别: warning" in message.text
    assert "- instance: node-1" in message.text
    assert "prometheus" in message.text
    assert message.to_payload()["at"]["atMobiles"] == ["13800000000"]


def test_default_template_renders_without_extra_fields():
    template = TemplateService.get_default_template("info")

    rendered = TemplateService.render_markdown_template(
        template, {"content": "hi", "title": "t", "level": "info", "source": "cron"}
    )

    assert rendered.startswith("### ℹ️ 信息通知\n\nhi\n")
    assert rendered.splitlines()[-1].startswith("- 时间: ")
    assert "- 来源: cron" in rendered
