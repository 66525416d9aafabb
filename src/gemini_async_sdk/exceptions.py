"""
异常处理模块

定义 Gemini SDK 的封闭错误类型集合。每次 API 调用的失败结果都恰好是
HttpErrorStatus、JsonDeserializationError、UnexpectedError 三者之一。
"""

from enum import Enum
from typing import Optional, Dict, Any
import json

class ErrorCode(str, Enum):
    """错误分类代码"""
    HTTP_ERROR = "HTTP_ERROR"
    JSON_DESERIALIZATION_ERROR = "JSON_DESERIALIZATION_ERROR"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

class GeminiError(Exception):
    """Gemini 错误基类"""

    error_code: ErrorCode = ErrorCode.UNEXPECTED_ERROR

    def __init__(self, message: str, context: Optional[str] = None,
                 cause_exception: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.context = context
        self.cause_exception = cause_exception

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式"""
        data: Dict[str, Any] = {
            "errorCode": self.error_code.value,
            "message": self.message
        }
        if self.context:
            data["context"] = self.context
        if self.cause_exception is not None:
            data["cause"] = str(self.cause_exception)
        return data

    def to_json(self) -> str:
        """转换为JSON字符串"""
        return json.dumps(self.to_dict(), ensure_ascii=False)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"

class HttpErrorStatus(GeminiError):
    """远端返回了非 2xx 状态码"""

    error_code = ErrorCode.HTTP_ERROR

    def __init__(self, status_code: int, body: str, context: Optional[str] = None,
                 cause_exception: Optional[BaseException] = None):
        self.status_code = status_code
        self.body = body
        prefix = f"HTTP error: {status_code}"
        if context:
            prefix = f"{prefix}, Request: {context}"
        super().__init__(f"{prefix}, Response: {body}", context, cause_exception)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "httpStatusCode": self.status_code,
            "responseBody": self.body
        })
        return data

class JsonDeserializationError(GeminiError):
    """HTTP 成功但响应体不符合预期结构"""

    error_code = ErrorCode.JSON_DESERIALIZATION_ERROR

    def __init__(self, original_payload: str, cause_description: str,
                 context: Optional[str] = None,
                 cause_exception: Optional[BaseException] = None):
        self.original_payload = original_payload
        self.cause_description = cause_description
        message = f"Deserialization error: Original: {original_payload}, Cause: {cause_description}"
        if context:
            message = f"{message}, Request: {context}"
        super().__init__(message, context, cause_exception)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "originalJson": self.original_payload,
            "deserializationCause": self.cause_description
        })
        return data

class UnexpectedError(GeminiError):
    """其他所有失败：传输层故障、超时、编程错误等"""

    error_code = ErrorCode.UNEXPECTED_ERROR

    def __init__(self, cause_description: str, context: Optional[str] = None,
                 cause_exception: Optional[BaseException] = None):
        self.cause_description = cause_description
        super().__init__(f"Unexpected error: {cause_description}", context, cause_exception)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["unexpectedCause"] = self.cause_description
        return data

class ConfigurationError(Exception):
    """配置或调用方式错误（不是 HTTP 错误）"""

    error_code = ErrorCode.CONFIGURATION_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

# 封闭的错误类型集合
GEMINI_ERROR_TYPES = (HttpErrorStatus, JsonDeserializationError, UnexpectedError)
