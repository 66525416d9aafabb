"""
响应归一化

把一次请求的原始结果映射为解码后的值或 HttpErrorStatus / JsonDeserializationError，
并在返回之前以脱敏形式记录错误。
"""

from typing import Iterable, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .exceptions import GeminiError, HttpErrorStatus, JsonDeserializationError
from .logger import SDKLogger, get_logger, redact_secrets
from .request_builder import PreparedRequest
from .result import GeminiResult
from .transport import TransportResponse

T = TypeVar("T", bound=BaseModel)

class ResponseNormalizer:
    """响应归一化器"""

    def __init__(self, logger: Optional[SDKLogger] = None):
        self.logger = logger or get_logger("gemini_response_normalizer")

    def normalize(
        self,
        request: PreparedRequest,
        response: TransportResponse,
        expected_type: Type[T],
        secrets: Iterable[str] = ()
    ) -> GeminiResult[T]:
        context = request.context

        if not response.is_success:
            error = HttpErrorStatus(response.status_code, response.body, context=context)
            self.log_error(context, error, secrets)
            return GeminiResult.fail(error)

        try:
            value = expected_type.model_validate_json(response.body)
        except ValidationError as e:
            description = f"StatusCode: {response.status_code}, Cause: {self._describe(e)}"
            error = JsonDeserializationError(
                response.body, description, context=context, cause_exception=e
            )
            self.log_error(context, error, secrets)
            return GeminiResult.fail(error)

        return GeminiResult.ok(value)

    def log_error(self, context: str, error: GeminiError, secrets: Iterable[str] = ()) -> None:
        """以错误级别记录，写出前脱敏密钥"""
        secrets = tuple(secrets)
        data = {"error_code": error.error_code.value}
        status_code = getattr(error, "status_code", None)
        if status_code is not None:
            data["status_code"] = status_code
        self.logger.error(
            redact_secrets(f"[{context}] {error.message}", secrets),
            **data
        )

    @staticmethod
    def _describe(error: ValidationError) -> str:
        problems = []
        for item in error.errors():
            location = ".".join(str(part) for part in item.get("loc", ())) or "<root>"
            problems.append(f"{location}: {item.get('msg')}")
        return "; ".join(problems)
