"""统一的对话数据模型。

本模块定义了客户端 Store、中转服务与上游 Provider 之间共享的标准数据结构：

- ChatMessage: 一条对话消息（system/user/assistant），带毫秒时间戳。
- RelayResult: 中转接口返回给客户端的统一结果。

所有 Provider 适配器都只依赖这些模型，并负责在各自的 API JSON
和这些模型之间做转换。
"""

import time
from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional


# LLM 消息角色类型（与 OpenAI 兼容接口的 role 字段对应）
Role = Literal["system", "user", "assistant"]


def now_ms() -> int:
    """当前时间的毫秒时间戳（与浏览器 Date.now() 同一量纲）。"""

    return int(time.time() * 1000)


@dataclass
class ChatMessage:
    """一条对话消息，既可用于请求，也可用于持久化。

    - role: 消息角色，如 system/user/assistant。
    - content: 纯文本内容。
    - timestamp: 创建/编辑时间（毫秒），为空时由 Store 补齐。
    """

    role: Role
    content: str
    timestamp: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"role": self.role, "content": self.content}
        if self.timestamp is not None:
            payload["timestamp"] = self.timestamp
        return payload

    def to_payload(self) -> Dict[str, str]:
        """发给上游时只保留 role/content。"""

        return {"role": self.role, "content": self.content}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChatMessage":
        ts = data.get("timestamp")
        return cls(
            role=data["role"],
            content=data.get("content") or "",
            timestamp=int(ts) if ts is not None else None,
        )


@dataclass
class RelayResult:
    """中转接口的成功结果：{message, status}。"""

    message: str
    status: str = "success"

    def to_dict(self) -> Dict[str, str]:
        return {"message": self.message, "status": self.status}
