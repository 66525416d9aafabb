"""
HTTP 传输层

定义客户端依赖的最小传输能力：发送一个 PreparedRequest，返回一个 TransportResponse。
请求构建和响应归一化都不依赖具体实现，测试中可以替换为脚本化的桩实现。
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional, TYPE_CHECKING
import threading

import httpx

from .logger import SDKLogger, redact_secrets

if TYPE_CHECKING:
    from .request_builder import PreparedRequest

class TransportError(Exception):
    """请求未得到任何响应（连接失败、读写失败等）"""
    pass

class TransportTimeoutError(TransportError):
    """请求超时"""

    def __init__(self, message: str, timeout_millis: int):
        super().__init__(message)
        self.timeout_millis = timeout_millis

@dataclass(frozen=True)
class TransportResponse:
    """原始HTTP响应"""
    status_code: int
    body: str
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code <= 299

class Transport(ABC):
    """传输层接口，send 在客户端的工作线程池上同步执行"""

    @abstractmethod
    def send(self, request: "PreparedRequest") -> TransportResponse:
        """发送请求并返回原始响应，传输层故障时抛出异常"""

    @abstractmethod
    def close(self) -> None:
        """释放底层资源"""

class HttpxTransport(Transport):
    """基于 httpx.Client 的传输实现"""

    def __init__(
        self,
        timeout_millis: int = 30000,
        client: Optional[httpx.Client] = None,
        log_level: str = "INFO"
    ):
        self.timeout_millis = timeout_millis
        self.logger = SDKLogger("gemini_transport", log_level)
        self._owns_client = client is None
        # httpx 的超时按连接/读/写分阶段计算，整个请求的截止时间由客户端控制
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout_millis / 1000))
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, request: "PreparedRequest") -> TransportResponse:
        if self._closed:
            raise TransportError(f"传输层已关闭: {request.context}")
        try:
            response = self._client.request(
                request.method,
                request.url,
                headers=request.headers,
                content=request.body
            )
        except httpx.TimeoutException as e:
            raise TransportTimeoutError(
                f"请求超时 (超过 {self.timeout_millis}ms): {request.context}",
                self.timeout_millis
            ) from e
        except httpx.HTTPError as e:
            # httpx 的异常信息可能包含完整URL
            raise TransportError(
                f"网络请求失败: {request.context}: {redact_secrets(str(e))}"
            ) from e

        self.logger.debug(
            "收到响应",
            request=request.context,
            status_code=response.status_code,
            response_size=len(response.content)
        )
        return TransportResponse(
            status_code=response.status_code,
            body=response.text,
            headers=dict(response.headers)
        )

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        if self._owns_client:
            self._client.close()
            self.logger.debug("已关闭 HTTP 客户端")
