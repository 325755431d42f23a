"""OpenAI 官方 API 适配器。

通过官方 SDK 调用 chat.completions，参数与自定义端点保持一致：
固定模型、temperature=0.7、max_tokens=1000，非流式。
"""

from typing import Dict, List

import openai

from chat_core.domain.exceptions import ApiError, ConfigurationError, NetworkError
from chat_core.infrastructure.logging.logger import logger
from chat_core.providers.registry import OPENAI_CONFIG


class OpenAIClient:
    """OpenAI 官方 Provider 客户端实现。"""

    name = "openai"

    def __init__(self, settings, model: str = "relay-chat"):
        self._settings = settings
        self._model_cfg = OPENAI_CONFIG.models[model]

    def complete(self, messages: List[Dict[str, str]]) -> str:
        api_key = getattr(self._settings, "openai_api_key", None)
        if not api_key:
            # 配置缺失走 ConfigurationError，方便上层统一处理
            raise ConfigurationError(code="MISSING_API_KEY", message="OPENAI_API_KEY not set", http_status=500)
        logger.info("Using official OpenAI API", extra={"extra": {"model": self._model_cfg.provider_model}})
        client = openai.OpenAI(api_key=api_key, timeout=self._settings.http_timeout)
        try:
            response = client.chat.completions.create(
                model=self._model_cfg.provider_model,
                messages=messages,
                temperature=self._model_cfg.default_temperature,
                max_tokens=self._model_cfg.max_tokens,
            )
        except openai.APIConnectionError as e:
            raise NetworkError(code="NETWORK_ERROR", message=str(e), http_status=500)
        except openai.APIStatusError as e:
            raise ApiError(code="API_ERROR", message=e.message, http_status=e.status_code)
        except openai.APIError as e:
            raise ApiError(code="API_ERROR", message=e.message, http_status=500)

        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        message = getattr(choices[0], "message", None)
        return (getattr(message, "content", None) or "") if message is not None else ""
