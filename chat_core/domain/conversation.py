from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from .models import ChatMessage


DEFAULT_TITLE = "New Conversation"
TITLE_MAX_LENGTH = 30


@dataclass
class StoredConversation:
    id: str
    title: str
    messages: List[ChatMessage] = field(default_factory=list)
    timestamp: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "messages": [m.to_dict() for m in self.messages],
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoredConversation":
        return cls(
            id=str(data["id"]),
            title=str(data.get("title", DEFAULT_TITLE)),
            messages=[ChatMessage.from_dict(m) for m in data.get("messages") or []],
            timestamp=int(data.get("timestamp") or 0),
        )


def derive_title(messages: List[ChatMessage]) -> str:
    """用第一条用户消息生成会话标题，超长截断。"""

    for m in messages:
        if m.role == "user":
            title = m.content.strip()
            if len(title) > TITLE_MAX_LENGTH:
                return title[:TITLE_MAX_LENGTH] + "..."
            return title
    return DEFAULT_TITLE


class KeyValueStorage(Protocol):
    """字符串键值存储协议（语义等同浏览器 localStorage）。"""

    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...

    def remove_item(self, key: str) -> None:
        ...
