"""
Gemini 异步 API 客户端

提供模型列表、模型详情、内容生成和令牌计数四个操作。每个操作依次执行
请求构建 → 在工作线程池上分发 → 响应归一化，返回 GeminiResult，不向调用方抛出异常。
"""

import asyncio
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Callable, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .config import GeminiConfig
from .exceptions import ConfigurationError, GeminiError, UnexpectedError
from .logger import SDKLogger
from .models import (
    ContentItem,
    CountTokensRequest,
    GenerateContentRequest,
    GenerateContentResponse,
    GenerationConfig,
    ModelInfo,
    ModelList,
    TokenCountResponse,
)
from .request_builder import RequestBuilder, model_path
from .response_normalizer import ResponseNormalizer
from .result import GeminiResult
from .transport import HttpxTransport, Transport, TransportTimeoutError

T = TypeVar("T", bound=BaseModel)

class AsyncGeminiClient:
    """Gemini API 异步客户端"""

    def __init__(
        self,
        config: Optional[GeminiConfig] = None,
        transport: Optional[Transport] = None,
        executor: Optional[Executor] = None,
        owns_executor: Optional[bool] = None
    ):
        self.config = config or GeminiConfig()
        self.logger = SDKLogger("gemini_client", self.config.log_level)

        self.transport = transport or HttpxTransport(
            self.config.request_timeout_millis, log_level=self.config.log_level
        )
        if executor is None:
            self.executor: Executor = ThreadPoolExecutor(
                max_workers=self.config.thread_pool_size,
                thread_name_prefix="gemini-dispatch"
            )
            self.owns_executor = True if owns_executor is None else owns_executor
        else:
            self.executor = executor
            self.owns_executor = bool(owns_executor)

        self.request_builder = RequestBuilder(self.config.base_url, self.config.log_level)
        self.normalizer = ResponseNormalizer(self.logger)

        self._shutdown_lock = threading.Lock()
        self._closed = False

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器退出"""
        await self.aclose()

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def list_models(self, api_key: Optional[str] = None) -> GeminiResult[ModelList]:
        """获取可用模型列表"""
        return await self._execute("GET", lambda: "models", ModelList, api_key)

    async def get_model_details(
        self, model_name: str, api_key: Optional[str] = None
    ) -> GeminiResult[ModelInfo]:
        """
        获取模型详情

        Args:
            model_name: 模型名称，可带或不带 ``models/`` 前缀
            api_key: API密钥，默认使用配置中的密钥
        """
        return await self._execute(
            "GET", lambda: model_path(model_name), ModelInfo, api_key
        )

    async def generate_content(
        self,
        model_name: str,
        prompt: str,
        config: Optional[GenerationConfig] = None,
        api_key: Optional[str] = None
    ) -> GeminiResult[GenerateContentResponse]:
        """
        生成内容

        Args:
            model_name: 模型名称，可带或不带 ``models/`` 前缀
            prompt: 提示文本，作为一条 user 输入发送
            config: 可选的生成参数，提供时原样透传
            api_key: API密钥，默认使用配置中的密钥

        Returns:
            GenerateContentResponse 或 GeminiError
        """
        return await self._execute(
            "POST", lambda: model_path(model_name, "generateContent"),
            GenerateContentResponse, api_key,
            lambda: GenerateContentRequest(
                contents=[ContentItem.user_text(prompt)],
                generation_config=config
            )
        )

    async def count_tokens(
        self, model_name: str, text: str, api_key: Optional[str] = None
    ) -> GeminiResult[TokenCountResponse]:
        """使用指定模型的分词器统计令牌数"""
        return await self._execute(
            "POST", lambda: model_path(model_name, "countTokens"),
            TokenCountResponse, api_key,
            lambda: CountTokensRequest(contents=[ContentItem.user_text(text)])
        )

    async def _execute(
        self,
        method: str,
        build_path: Callable[[], str],
        expected_type: Type[T],
        api_key: Optional[str],
        build_body: Optional[Callable[[], BaseModel]] = None
    ) -> GeminiResult[T]:
        key = api_key if api_key is not None else self.config.api_key
        context = method

        if self._closed:
            return self._fail(UnexpectedError("client is closed", context=context), key)

        try:
            path = build_path()
            context = f"{method} {path}"
            body = build_body() if build_body else None
            request = self.request_builder.build(method, path, key, body)
        except ConfigurationError as e:
            return self._fail(
                UnexpectedError(f"configuration error: {e.message}", context=context,
                                cause_exception=e),
                key
            )
        except ValidationError as e:
            return self._fail(
                UnexpectedError(f"invalid request body: {e}", context=context, cause_exception=e),
                key
            )

        timeout_millis = self.config.request_timeout_millis
        try:
            loop = asyncio.get_running_loop()
            response = await asyncio.wait_for(
                loop.run_in_executor(self.executor, self.transport.send, request),
                timeout=timeout_millis / 1000
            )
        except TransportTimeoutError as e:
            return self._fail(
                UnexpectedError(f"request timed out after {e.timeout_millis}ms",
                                context=context, cause_exception=e),
                key
            )
        except asyncio.TimeoutError as e:
            # 工作线程中的请求不会被中断，结果直接丢弃
            return self._fail(
                UnexpectedError(f"request timed out after {timeout_millis}ms",
                                context=context, cause_exception=e),
                key
            )
        except Exception as e:
            return self._fail(
                UnexpectedError(f"{type(e).__name__}: {e}", context=context, cause_exception=e),
                key
            )

        return self.normalizer.normalize(request, response, expected_type, secrets=(key,))

    def _fail(self, error: GeminiError, api_key: Optional[str]) -> GeminiResult:
        self.normalizer.log_error(error.context or "client", error, secrets=(api_key or "",))
        return GeminiResult.fail(error)

    def shutdown(self, wait: bool = True) -> None:
        """
        释放传输层和（仅在本实例独占时）工作线程池

        可以重复调用，只有第一次调用生效。
        """
        with self._shutdown_lock:
            if self._closed:
                self.logger.debug("客户端已关闭，忽略重复的 shutdown")
                return
            self._closed = True

        self.transport.close()
        if self.owns_executor:
            self.logger.info("正在关闭工作线程池")
            self.executor.shutdown(wait=wait)
        else:
            self.logger.debug("工作线程池由外部提供，不关闭")

    async def aclose(self) -> None:
        """在事件循环之外执行 shutdown，避免阻塞事件循环"""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self.shutdown)

def create_client(config: Optional[GeminiConfig] = None, **kwargs) -> AsyncGeminiClient:
    """由应用在启动时调用一次，创建客户端并通过依赖注入传递"""
    config = config or GeminiConfig.from_env()
    config.validate()
    return AsyncGeminiClient(config, **kwargs)
