"""客户端侧组件：会话 Store、中转接口客户端与通知工具。"""

from chat_core.client.chat_store import ChatStore
from chat_core.client.relay_client import RelayClient
from chat_core.client.toast import ToastCenter, use_toast

__all__ = ["ChatStore", "RelayClient", "ToastCenter", "use_toast"]
