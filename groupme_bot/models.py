"""
Data models for the GroupMe feature bot.
"""

from dataclasses import dataclass, field
from typing import Optional, Any, Callable
from enum import Enum


class SendStatus(Enum):
    """Result of sending a bot message."""
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class SendResult:
    """Outcome of a single bot-post attempt."""
    status: SendStatus
    error: Optional[str] = None
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.status is SendStatus.SUCCESS


@dataclass(frozen=True)
class Message:
    """
    An inbound GroupMe message.

    Only `text` and `sender_type` are interpreted by the bot. Everything else
    GroupMe sends (name, group_id, attachments, ...) stays in `payload`.
    """
    text: str
    sender_type: str
    payload: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Message":
        return cls(
            text=payload.get("text") or "",
            sender_type=payload.get("sender_type") or "",
            payload=dict(payload),
        )

    @property
    def is_from_user(self) -> bool:
        return self.sender_type == "user"

    def get(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)


@dataclass(frozen=True)
class Feature:
    """
    A single bot behavior.

    `check` decides whether the feature fires for a message and `respond`
    runs only when it does. An empty description hides the feature from /help.
    """
    check: Callable[[Message], bool]
    respond: Callable[[Message], None]
    description: str = ""

    @property
    def visible(self) -> bool:
        return self.description != ""


@dataclass(frozen=True)
class Plugin:
    """
    A named extension of the bot's builder API.

    `fn` is called as fn(bot, *args, **kwargs) and usually registers
    features through the bot it receives.
    """
    name: str
    fn: Callable[..., None]
