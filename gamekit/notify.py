"""Push text alerts to DingTalk robots and Telegram bots."""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import time
from dataclasses import dataclass
from typing import Any, Optional

import requests

DINGDING_WEBHOOK = "https://oapi.dingtalk.com/robot/send?access_token="
TELEGRAM_API_ENDPOINT = "https://api.telegram.org/bot{}/sendMessage"
TELEGRAM_FILE_ENDPOINT = "https://api.telegram.org/file/bot{}/{}"


@dataclass
class DingdingClient:
    """A DingTalk custom robot with signed requests."""

    access_token: str
    secret: str
    enable_at: bool = True
    at_all: bool = True
    timeout: Optional[float] = 10.0

    def build_message(self, text: str, *args: str) -> dict[str, Any]:
        """Text message body; args are mobile numbers to mention."""
        message: dict[str, Any] = {"msgtype": "text", "text": {"content": text}}
        if self.enable_at:
            if self.at_all:
                if args:
                    raise ValueError(
                        'the parameter "AtAll" is "true", but the "at" parameter of SendMessage is not empty'
                    )
                message["at"] = {"isAtAll": True}
            else:
                message["at"] = {"atMobiles": list(args) or None, "isAtAll": False}
        elif args:
            raise ValueError(
                'the parameter "EnableAt" is "false", but the "at" parameter of SendMessage is not empty'
            )
        return message

    def sign(self, timestamp: int) -> str:
        """Base64 HMAC-SHA256 of "timestamp\\nsecret" keyed by the secret."""
        string_to_sign = f"{timestamp}\n{self.secret}"
        digest = hmac.new(self.secret.encode("utf-8"), string_to_sign.encode("utf-8"), hashlib.sha256).digest()
        return base64.b64encode(digest).decode("ascii")

    def push(self, text: str, *args: str) -> bytes:
        """Send a text message; returns the robot's reply body."""
        message = self.build_message(text, *args)
        timestamp = time.time_ns() // 1_000_000
        url = f"{DINGDING_WEBHOOK}{self.access_token}&timestamp={timestamp}&sign={self.sign(timestamp)}"
        reply = requests.post(
            url,
            data=json.dumps(message, ensure_ascii=False).encode("utf-8"),
            headers={"Content-Type": "application/json"},
            timeout=self.timeout,
        )
        return reply.content


@dataclass
class TelegramClient:
    """A Telegram bot posting to one chat."""

    token: str
    chat_id: str
    timeout: float = 10.0

    def push(self, text: str) -> bytes:
        """Send a text message; returns the API's reply body."""
        reply = requests.post(
            TELEGRAM_API_ENDPOINT.format(self.token),
            params={"chat_id": self.chat_id, "text": text},
            timeout=self.timeout,
        )
        return reply.content