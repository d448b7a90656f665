from dingtalk_robot.utils.security import DingTalkSecurity, current_timestamp

__all__ = ["DingTalkSecurity", "current_timestamp"]
