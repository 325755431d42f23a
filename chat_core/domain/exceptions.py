"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
便于在 API 层或客户端 Store 中做统一捕获与用户提示。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "STORE_READ_ERROR"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 upstream、content_type 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class NetworkError(BusinessError):
    """网络层错误，例如连接失败、超时等。"""


class ApiError(BusinessError):
    """第三方 API 返回错误状态时抛出。"""


class UpstreamError(BusinessError):
    """上游返回 5xx，视为传输失败，可触发回退。"""


class UnexpectedResponseError(BusinessError):
    """上游响应不是 JSON 或无法提取内容。"""


class ConfigurationError(BusinessError):
    """缺少必要配置（API Key / 自定义端点都没有）。"""


class StorageError(BusinessError):
    """本地持久化读写失败。"""


class ValidationError(BusinessError):
    """参数校验失败。"""
