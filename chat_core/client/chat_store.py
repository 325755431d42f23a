"""客户端会话 Store。

维护当前工作消息列表与已保存会话列表，并与本地键值存储同步：

- chatConversations: 全部会话的 JSON 列表；
- activeConversationId: 当前激活会话的 ID。

任意时刻最多只有一个激活会话，且其消息列表与工作列表在每次修改后保持一致。
存储读写失败只记录日志，不影响运行：读失败保持空状态，写失败保留旧数据。
"""

import json
import logging
import random
import string
from typing import Any, Callable, Dict, List, Optional, Protocol

from chat_core.domain.conversation import (
    DEFAULT_TITLE,
    KeyValueStorage,
    StoredConversation,
    derive_title,
)
from chat_core.domain.exceptions import StorageError
from chat_core.domain.models import ChatMessage, now_ms
from chat_core.infrastructure.logging.logger import log_fields
from chat_core.prompts import assistant_persona


CONVERSATIONS_KEY = "chatConversations"
ACTIVE_CONVERSATION_KEY = "activeConversationId"
UNPARSEABLE_RESPONSE = "Received response but unable to parse it."
DEFAULT_ERROR = "Failed to get response from AI"

_BASE36 = string.digits + string.ascii_lowercase


class RelayTransport(Protocol):
    def post_chat(self, messages: List[Dict[str, str]]) -> Dict[str, Any]:
        ...


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_id(clock: Callable[[], int] = now_ms) -> str:
    """时间 + 随机数组成的会话 ID。"""

    suffix = "".join(random.choices(_BASE36, k=11))
    return _to_base36(clock()) + suffix


class ChatStore:
    def __init__(
        self,
        storage: KeyValueStorage,
        relay: RelayTransport,
        clock: Callable[[], int] = now_ms,
    ):
        self._storage = storage
        self._relay = relay
        self._clock = clock

        self.messages: List[ChatMessage] = []
        self.is_loading = False
        self.error: Optional[str] = None
        self.conversations: List[StoredConversation] = []
        self.active_conversation_id: Optional[str] = None

        self.load_conversations()
        self._load_active_conversation()

    # ---- 持久化 ----

    def load_conversations(self) -> None:
        try:
            raw = self._storage.get_item(CONVERSATIONS_KEY)
            if raw:
                items = json.loads(raw)
                self.conversations = [StoredConversation.from_dict(c) for c in items]
        except (StorageError, ValueError, TypeError, KeyError) as e:
            log_fields(logging.ERROR, "Failed to load conversations from storage", error=str(e))

    def _save_conversations(self) -> None:
        try:
            raw = json.dumps([c.to_dict() for c in self.conversations], ensure_ascii=False)
            self._storage.set_item(CONVERSATIONS_KEY, raw)
        except (StorageError, ValueError, TypeError) as e:
            log_fields(logging.ERROR, "Failed to save conversations to storage", error=str(e))

    def _load_active_conversation(self) -> None:
        try:
            stored_id = self._storage.get_item(ACTIVE_CONVERSATION_KEY)
        except StorageError as e:
            log_fields(logging.ERROR, "Failed to load active conversation", error=str(e))
            return
        if not stored_id:
            return
        conversation = self._find(stored_id)
        if conversation is None:
            # 指向已不存在的会话，丢弃该指针
            self._remove_active_pointer()
            return
        self.active_conversation_id = stored_id
        self.messages = list(conversation.messages)

    def _save_active_conversation(self) -> None:
        if not self.active_conversation_id:
            return
        try:
            self._storage.set_item(ACTIVE_CONVERSATION_KEY, self.active_conversation_id)
        except StorageError as e:
            log_fields(logging.ERROR, "Failed to save active conversation ID", error=str(e))

    def _remove_active_pointer(self) -> None:
        try:
            self._storage.remove_item(ACTIVE_CONVERSATION_KEY)
        except StorageError as e:
            log_fields(logging.ERROR, "Failed to remove active conversation ID", error=str(e))

    # ---- 会话管理 ----

    def create_conversation(self, title: str = DEFAULT_TITLE) -> str:
        cid = generate_id(self._clock)
        conversation = StoredConversation(id=cid, title=title, messages=[], timestamp=self._clock())
        self.conversations.insert(0, conversation)
        self.active_conversation_id = cid
        self.messages = []

        self._save_conversations()
        self._save_active_conversation()
        return cid

    def switch_conversation(self, conversation_id: str) -> None:
        conversation = self._find(conversation_id)
        if conversation is None:
            return
        self.active_conversation_id = conversation_id
        self.messages = list(conversation.messages)
        self._save_active_conversation()

    def delete_conversation(self, conversation_id: str) -> None:
        index = self._index_of(conversation_id)
        if index == -1:
            return
        del self.conversations[index]
        self._save_conversations()

        if self.active_conversation_id == conversation_id:
            if self.conversations:
                self.switch_conversation(self.conversations[0].id)
            else:
                self.active_conversation_id = None
                self.messages = []
                self._remove_active_pointer()

    def _update_current_conversation(self) -> None:
        """把工作消息列表同步到激活会话（没有则新建）。"""

        if not self.active_conversation_id:
            if not self.messages:
                return
            conversation = StoredConversation(
                id=generate_id(self._clock),
                title=derive_title(self.messages),
                messages=list(self.messages),
                timestamp=self._clock(),
            )
            self.conversations.insert(0, conversation)
            self.active_conversation_id = conversation.id
            self._save_conversations()
            self._save_active_conversation()
            return

        index = self._index_of(self.active_conversation_id)
        if index == -1:
            return
        current = self.conversations[index]
        self.conversations[index] = StoredConversation(
            id=current.id,
            title=derive_title(self.messages),
            messages=list(self.messages),
            timestamp=self._clock(),
        )
        self._save_conversations()

    # ---- 消息操作 ----

    def add_message(self, message: ChatMessage) -> None:
        if not message.timestamp:
            message.timestamp = self._clock()
        self.messages.append(message)
        self._update_current_conversation()

    def set_messages(self, messages: List[ChatMessage]) -> None:
        for msg in messages:
            if not msg.timestamp:
                msg.timestamp = self._clock()
        self.messages = list(messages)
        self._update_current_conversation()

    def clear_messages(self) -> None:
        self.messages = []
        self.active_conversation_id = None
        self._remove_active_pointer()

    def edit_message(self, index: int, new_content: str) -> None:
        """编辑一条消息；编辑的是非末尾的用户消息时截断后续并重新生成回复。"""

        if index < 0 or index >= len(self.messages):
            return
        message = self.messages[index]
        message.content = new_content
        message.timestamp = self._clock()

        if message.role == "user" and index < len(self.messages) - 1:
            self.messages = self.messages[: index + 1]
            self._update_current_conversation()
            self.send_message(new_content, is_resending=True)
            return

        self._update_current_conversation()

    def send_message(self, content: str, is_resending: bool = False) -> None:
        if not content.strip():
            return

        self.error = None
        if not is_resending:
            self.add_message(ChatMessage(role="user", content=content, timestamp=self._clock()))

        self.is_loading = True
        try:
            payload = [{"role": "system", "content": assistant_persona()}]
            payload.extend(m.to_payload() for m in self.messages)
            response = self._relay.post_chat(payload)
            self.add_message(
                ChatMessage(role="assistant", content=self._response_content(response), timestamp=self._clock())
            )
        except Exception as e:
            self.error = str(getattr(e, "message", None) or e) or DEFAULT_ERROR
            log_fields(logging.ERROR, "Chat error", error=self.error)
        finally:
            self.is_loading = False

    @staticmethod
    def _response_content(response: Any) -> str:
        if not isinstance(response, dict):
            return UNPARSEABLE_RESPONSE
        if isinstance(response.get("message"), str):
            return response["message"]
        if response.get("rawResponse"):
            return json.dumps(response["rawResponse"], ensure_ascii=False)
        return UNPARSEABLE_RESPONSE

    # ---- 内部工具 ----

    def _find(self, conversation_id: str) -> Optional[StoredConversation]:
        index = self._index_of(conversation_id)
        return self.conversations[index] if index != -1 else None

    def _index_of(self, conversation_id: str) -> int:
        for i, c in enumerate(self.conversations):
            if c.id == conversation_id:
                return i
        return -1
