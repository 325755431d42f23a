"""客户端调用中转接口的 HTTP 封装。"""

from typing import Any, Dict, List

import httpx

from chat_core.domain.exceptions import ApiError, NetworkError


class RelayClient:
    name = "relay"

    def __init__(self, settings):
        self._settings = settings

    def post_chat(self, messages: List[Dict[str, str]]) -> Dict[str, Any]:
        """POST {messages} 到中转接口，返回解析后的 JSON。"""

        try:
            with httpx.Client(timeout=self._settings.http_timeout, trust_env=False) as client:
                resp = client.post(
                    self._settings.relay_url,
                    json={"messages": messages},
                    headers={"Content-Type": "application/json", "Accept": "application/json"},
                )
        except httpx.RequestError as e:
            raise NetworkError(code="NETWORK_ERROR", message=str(e), http_status=500)
        if resp.status_code >= 400:
            raise ApiError(code="API_ERROR", message=self._error_message(resp), http_status=resp.status_code)
        try:
            data = resp.json()
        except ValueError as e:
            raise ApiError(code="INVALID_JSON", message=str(e), http_status=resp.status_code)
        return data if isinstance(data, dict) else {"rawResponse": data}

    @staticmethod
    def _error_message(resp) -> str:
        try:
            data = resp.json()
        except ValueError:
            return resp.text or f"HTTP {resp.status_code}"
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return f"HTTP {resp.status_code}"
