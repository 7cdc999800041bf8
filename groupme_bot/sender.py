"""
GroupMe bot-post client.
"""

import logging
from typing import Optional

import requests

from .models import SendResult, SendStatus

logger = logging.getLogger(__name__)

GROUPME_POST_URL = "https://api.groupme.com/v3/bots/post"

# GroupMe answers a successful bot post with 202 Accepted
ACCEPTED = 202


class GroupMeSender:
    """Posts messages as a GroupMe bot."""

    def __init__(
        self,
        bot_id: Optional[str] = None,
        url: str = GROUPME_POST_URL,
        timeout: float = 10
    ):
        self.bot_id = bot_id
        self.url = url
        self.timeout = timeout

    def send(self, text: str, picture_url: Optional[str] = None) -> SendResult:
        """
        Send a message to the bot's group.

        Args:
            text: Message text, trimmed before sending
            picture_url: Optional image URL attached to the message

        Returns:
            SendResult, never raises for network or API failures
        """
        if not self.bot_id:
            logger.error("Cannot send message: bot_id not configured")
            return SendResult(status=SendStatus.ERROR, error="bot_id not configured")

        params = {
            "bot_id": self.bot_id,
            "text": text.strip(),
        }
        if picture_url:
            params["picture_url"] = picture_url

        try:
            resp = requests.post(self.url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"GroupMe request failed: {e}")
            return SendResult(status=SendStatus.ERROR, error=f"Request failed: {e}")

        if resp.status_code == ACCEPTED:
            return SendResult(status=SendStatus.SUCCESS, status_code=resp.status_code)

        logger.error(f"GroupMe API error {resp.status_code}: {resp.text}")
        return SendResult(
            status=SendStatus.ERROR,
            error=resp.text,
            status_code=resp.status_code
        )
