import base64
import hashlib
import hmac
import time
import urllib.parse
from typing import Dict, Optional


def current_timestamp() -> str:
    """当前时间的毫秒时间戳"""
    return str(round(time.time() * 1000))


class DingTalkSecurity:
    @staticmethod
    def generate_signature(secret: str, timestamp: Optional[str] = None) -> Dict[str, str]:
        """
        生成钉钉加签: base64(HmacSHA256(secret, "timestamp\\nsecret"))
        """
        if timestamp is None:
            timestamp = current_timestamp()
        timestamp = str(timestamp)
        secret_enc = secret.encode('utf-8')
        string_to_sign = f'{timestamp}\n{secret}'
        string_to_sign_enc = string_to_sign.encode('utf-8')
        hmac_code = hmac.new(secret_enc, string_to_sign_enc, digestmod=hashlib.sha256).digest()
        sign = urllib.parse.quote_plus(base64.b64encode(hmac_code))
        return {"timestamp": timestamp, "sign": sign}

    @staticmethod
    def sign_url(webhook_url: str, secret: Optional[str], timestamp: Optional[str] = None) -> str:
        """
        为webhook地址追加timestamp和sign参数，未配置secret时原样返回
        """
        if not secret:
            return webhook_url

        signature = DingTalkSecurity.generate_signature(secret, timestamp)
        # 钉钉的webhook一般已带有 ?access_token=
        sep = '&' if '?' in webhook_url else '?'
        return f"{webhook_url}{sep}timestamp={signature['timestamp']}&sign={signature['sign']}"
