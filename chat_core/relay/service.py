"""聊天中转服务。

把客户端传来的消息列表转发给上游 LLM：

1. 给 system 消息追加格式要求（没有 system 消息则插入一条）。
2. 配置了自定义端点时优先调用它；失败且配置了官方 Key 时回退到 OpenAI 一次。
3. 只配置了官方 Key 时直接调用 OpenAI。
4. 两者都没有时立即失败。
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional
from uuid import uuid4

from chat_core.config.settings import DEFAULT_API_BASE_URL
from chat_core.domain.exceptions import BusinessError, ConfigurationError
from chat_core.domain.models import RelayResult
from chat_core.infrastructure.logging.logger import log_fields
from chat_core.prompts import assistant_persona, formatting_instructions
from chat_core.providers import create_provider
from chat_core.providers.base import ProviderClient


def augment_system_message(messages: Iterable[Mapping[str, Any]]) -> List[Dict[str, str]]:
    """复制消息列表，并让第一条 system 消息携带格式要求。

    调用方的列表与字典不会被修改；只保留 role/content 字段。
    """

    instructions = formatting_instructions()
    result = [{"role": str(m["role"]), "content": str(m.get("content") or "")} for m in messages]
    for msg in result:
        if msg["role"] == "system":
            msg["content"] = f"{msg['content']} {instructions}"
            return result
    result.insert(0, {"role": "system", "content": f"{assistant_persona()} {instructions}"})
    return result


class RelayService:
    def __init__(
        self,
        settings,
        custom_client: Optional[ProviderClient] = None,
        openai_client: Optional[ProviderClient] = None,
    ):
        self._settings = settings
        self._custom_client = custom_client or create_provider("custom", settings)
        self._openai_client = openai_client or create_provider("openai", settings)

    @property
    def has_api_key(self) -> bool:
        return bool(getattr(self._settings, "openai_api_key", None))

    @property
    def has_custom_endpoint(self) -> bool:
        base = getattr(self._settings, "api_base_url", None)
        return bool(base) and base != DEFAULT_API_BASE_URL

    def relay(self, messages: Iterable[Mapping[str, Any]]) -> RelayResult:
        """执行一次中转，返回 {message, status}。

        Raises:
            ConfigurationError: 既没有官方 Key 也没有自定义端点。
            BusinessError: 上游失败且无法回退时，携带上游的 HTTP 状态码。
        """
        log_ctx: Dict[str, Any] = {"trace_id": f"tr-{uuid4().hex}"}
        self._log(logging.INFO, "Relay request received", log_ctx, api_base_url=self._settings.api_base_url)

        if not self.has_api_key and not self.has_custom_endpoint:
            raise ConfigurationError(
                code="MISSING_CONFIGURATION",
                message="No API configuration available. Please set OPENAI_API_KEY or API_BASE_URL.",
                http_status=500,
            )

        payload = augment_system_message(messages)

        if self.has_custom_endpoint:
            self._log(logging.INFO, "Using custom API endpoint", log_ctx, provider=self._custom_client.name)
            try:
                content = self._custom_client.complete(payload)
            except BusinessError as e:
                self._log(
                    logging.ERROR,
                    "Custom API call failed",
                    log_ctx,
                    code=e.code,
                    error=e.message,
                    http_status=e.http_status,
                )
                if not self.has_api_key:
                    raise
                self._log(logging.INFO, "Falling back to official OpenAI API", log_ctx)
                return self._call_openai(payload, log_ctx)
            return RelayResult(message=content)

        return self._call_openai(payload, log_ctx)

    def _call_openai(self, payload: List[Dict[str, str]], log_ctx: Dict[str, Any]) -> RelayResult:
        try:
            content = self._openai_client.complete(payload)
        except BusinessError as e:
            self._log(
                logging.ERROR,
                "OpenAI API call failed",
                log_ctx,
                code=e.code,
                error=e.message,
                http_status=e.http_status,
            )
            raise
        return RelayResult(message=content or "")

    @staticmethod
    def _log(level: int, message: str, log_ctx: Dict[str, Any], **fields: Any) -> None:
        log_fields(level, message, **{**log_ctx, **fields})
