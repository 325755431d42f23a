"""Chat Core 顶层包。

该包提供浏览器聊天界面背后的核心实现，
包括配置加载、领域模型、上游 Provider 适配、中转接口、
客户端会话 Store、通知工具与本地持久化存储等能力。
"""

from chat_core.relay import RelayService

__all__ = ["RelayService"]
