"""Provider 抽象接口。

中转服务不直接依赖具体上游的 HTTP SDK，而是依赖此协议：

- 每个上游实现一个 ProviderClient（CustomEndpointClient、OpenAIClient）。
- 负责：把消息列表转成具体 API 请求，并从响应中提取回复文本。
"""

from typing import Dict, List, Protocol


class ProviderClient(Protocol):
    """LLM Provider 客户端协议。

    实现者需要提供：
    - name: Provider 名称，用于日志。
    - complete(messages): 执行一次非流式对话调用，返回回复文本。
    """

    name: str

    def complete(self, messages: List[Dict[str, str]]) -> str:
        ...
