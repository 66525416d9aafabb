"""
调用结果类型

每个 API 调用都返回 GeminiResult：要么是解码后的值，要么是一个 GeminiError。
"""

from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from .exceptions import GeminiError

T = TypeVar("T")
U = TypeVar("U")

@dataclass(frozen=True)
class GeminiResult(Generic[T]):
    """成功值或错误，二者恰有其一"""
    value: Optional[T] = None
    error: Optional[GeminiError] = None

    def __post_init__(self):
        if self.error is not None and self.value is not None:
            raise ValueError("GeminiResult不能同时包含值和错误")

    @classmethod
    def ok(cls, value: T) -> "GeminiResult[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, error: GeminiError) -> "GeminiResult[T]":
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def unwrap(self) -> T:
        """返回成功值，失败时抛出对应的 GeminiError"""
        if self.error is not None:
            raise self.error
        return self.value

    def unwrap_or(self, default: T) -> T:
        return default if self.error is not None else self.value

    def map(self, fn: Callable[[T], U]) -> "GeminiResult[U]":
        if self.error is not None:
            return GeminiResult(error=self.error)
        return GeminiResult(value=fn(self.value))
