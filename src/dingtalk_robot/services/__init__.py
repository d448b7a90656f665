from dingtalk_robot.services.dingtalk import DingTalkClient
from dingtalk_robot.services.template import NotificationLevel, TemplateService

__all__ = ["DingTalkClient", "NotificationLevel", "TemplateService"]
