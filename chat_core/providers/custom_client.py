"""自定义 OpenAI 兼容端点适配器。

本模块负责：

1. 接收已补充好 system 消息的消息列表。
2. 将其转换为 {base}/v1/chat/completions 的请求格式（固定模型/温度/上限）。
3. 调用 HTTP 接口：5xx 视为传输失败，其余状态码都当作应用层响应。
4. 对响应做“形状嗅探”，尽量提取出回复文本。

提取顺序：
- OpenAI 兼容格式 choices[0].message.content；
- 扁平的 message 字符串字段；
- 常见备选字段 content / answer / text / result，都没有则整包序列化；
- 非 JSON 响应直接判定失败。
"""

import json
from typing import Any, Dict, List

import httpx

from chat_core.domain.exceptions import NetworkError, UnexpectedResponseError, UpstreamError
from chat_core.infrastructure.logging.logger import logger
from chat_core.providers.registry import CUSTOM_CONFIG, ModelConfig


ALTERNATE_CONTENT_FIELDS = ("content", "answer", "text", "result")


class CustomEndpointClient:
    """自定义端点客户端实现。"""

    name = "custom"

    def __init__(self, settings, model: str = "relay-chat"):
        # Settings 里包含 api_base_url、api_token、超时等配置
        self._settings = settings
        self._model_cfg = CUSTOM_CONFIG.models[model]

    @property
    def url(self) -> str:
        base = (self._settings.api_base_url or "").rstrip("/")
        return f"{base}{CUSTOM_CONFIG.completions_path}"

    def complete(self, messages: List[Dict[str, str]]) -> str:
        payload = self._build_payload(messages, self._model_cfg)
        try:
            with httpx.Client(timeout=self._settings.http_timeout, trust_env=False) as client:
                resp = client.post(
                    self.url,
                    json=payload,
                    headers={
                        "Content-Type": "application/json",
                        "Accept": "application/json",
                        "Authorization": f"Bearer {self._settings.api_token}",
                    },
                )
        except httpx.RequestError as e:
            # 网络错误：DNS 失败、连接超时等
            raise NetworkError(code="NETWORK_ERROR", message=str(e), http_status=500)

        content_type = resp.headers.get("content-type") or ""
        if resp.status_code >= 500:
            self._log_error_body(resp, content_type)
            raise UpstreamError(
                code="UPSTREAM_ERROR",
                message=f"Custom API responded with status {resp.status_code}",
                http_status=resp.status_code,
            )
        if "application/json" not in content_type:
            logger.error(
                "Received non-JSON response from custom API",
                extra={"extra": {"status": resp.status_code, "content_type": content_type}},
            )
            raise UnexpectedResponseError(
                code="UNEXPECTED_RESPONSE",
                message=f"Unexpected response type: {content_type or 'unknown'}",
                http_status=500,
            )
        try:
            data = resp.json()
        except ValueError as e:
            raise UnexpectedResponseError(code="INVALID_JSON", message=str(e), http_status=500)
        logger.info("Received JSON response from custom API", extra={"extra": {"status": resp.status_code}})
        return self.extract_content(data)

    def _build_payload(self, messages: List[Dict[str, str]], model_cfg: ModelConfig) -> dict:
        return {
            "model": model_cfg.provider_model,
            "messages": messages,
            "temperature": model_cfg.default_temperature,
            "max_tokens": model_cfg.max_tokens,
            "stream": False,
        }

    @staticmethod
    def extract_content(data: Any) -> str:
        """从任意 JSON 响应中提取回复文本。"""

        if data is None or data == {} or data == [] or data == "":
            raise UnexpectedResponseError(
                code="EMPTY_RESPONSE",
                message="Custom API returned an empty payload",
                http_status=500,
            )
        if not isinstance(data, dict):
            return json.dumps(data, ensure_ascii=False)

        choices = data.get("choices")
        if isinstance(choices, list) and choices and isinstance(choices[0], dict):
            message = choices[0].get("message")
            if isinstance(message, dict) and message.get("content"):
                return _as_text(message["content"])

        if isinstance(data.get("message"), str):
            return data["message"]

        for field in ALTERNATE_CONTENT_FIELDS:
            value = data.get(field)
            if value:
                return _as_text(value)
        return json.dumps(data, ensure_ascii=False)

    @staticmethod
    def _log_error_body(resp, content_type: str) -> None:
        if "application/json" in content_type:
            try:
                body = json.dumps(resp.json(), ensure_ascii=False)[:200] + "..."
            except ValueError:
                body = None
        else:
            body = None
        logger.error(
            "Custom API returned server error",
            extra={"extra": {"status": resp.status_code, "content_type": content_type, "body": body}},
        )


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)
