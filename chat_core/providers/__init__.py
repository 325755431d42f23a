"""LLM Provider 集成层。

该包下的模块负责：
- 定义 Provider 抽象接口 (base)。
- 维护上游模型配置 (registry)。
- 提供两个具体实现：自定义兼容端点 (custom_client) 与 OpenAI 官方 (openai_client)。
"""

from chat_core.config.settings import settings
from chat_core.providers.base import ProviderClient
from chat_core.providers.custom_client import CustomEndpointClient
from chat_core.providers.openai_client import OpenAIClient
from chat_core.providers.registry import get_provider_config


def create_provider(name: str, cfg=None) -> ProviderClient:
    """根据名称创建 Provider 实例，默认使用全局配置。"""

    provider_name = get_provider_config(name).name
    cfg = cfg or settings
    if provider_name == "custom":
        return CustomEndpointClient(cfg)
    return OpenAIClient(cfg)

