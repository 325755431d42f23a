"""上游 Provider 与模型配置。

中转接口对两个上游都使用同一套固定参数：模型名、温度、最大 token 数。
集中放在这里，便于后续升级模型或调整参数。"""

from dataclasses import dataclass
from typing import Dict, Mapping


@dataclass
class ModelConfig:
    """单个逻辑模型的配置。"""

    logical_name: str
    provider_model: str
    max_tokens: int
    default_temperature: float


@dataclass
class ProviderConfig:
    """某个 Provider 的整体配置。"""

    name: str
    completions_path: str
    models: Dict[str, ModelConfig]


RELAY_MODEL = ModelConfig(
    logical_name="relay-chat",
    provider_model="gpt-4o-mini",
    max_tokens=1000,
    default_temperature=0.7,
)

# 自定义 OpenAI 兼容端点：{base}/v1/chat/completions
CUSTOM_CONFIG = ProviderConfig(
    name="custom",
    completions_path="/v1/chat/completions",
    models={"relay-chat": RELAY_MODEL},
)

# OpenAI 官方 API，路径由 SDK 负责
OPENAI_CONFIG = ProviderConfig(
    name="openai",
    completions_path="",
    models={"relay-chat": RELAY_MODEL},
)


PROVIDER_REGISTRY: Mapping[str, ProviderConfig] = {
    "custom": CUSTOM_CONFIG,
    "openai": OPENAI_CONFIG,
}


def get_provider_config(name: str) -> ProviderConfig:
    """根据名称获取 ProviderConfig，名称不区分大小写。"""

    key = name.lower()
    for k, cfg in PROVIDER_REGISTRY.items():
        if k.lower() == key:
            return cfg
    raise KeyError(f"Unknown provider: {name!r}")
