"""
pytest配置和共用fixtures

提供测试所需的配置、桩传输层和客户端。
"""

import pytest
from concurrent.futures import ThreadPoolExecutor
from io import StringIO
from typing import Generator

from src.gemini_async_sdk.client import AsyncGeminiClient
from src.gemini_async_sdk.config import GeminiConfig
from tests.mocks import StubTransport

TEST_API_KEY = "MOCK_API_KEY"


# pytest配置
def pytest_configure(config):
    """pytest配置"""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


@pytest.fixture
def gemini_config() -> GeminiConfig:
    """测试用Gemini配置"""
    return GeminiConfig(
        api_key=TEST_API_KEY,
        base_url="https://generativelanguage.googleapis.com/v1beta",
        thread_pool_size=2,
        request_timeout_millis=5000
    )


@pytest.fixture
def stub_transport() -> StubTransport:
    """空的桩传输层，各测试自行添加规则"""
    return StubTransport()


@pytest.fixture
def gemini_client(gemini_config, stub_transport) -> Generator[AsyncGeminiClient, None, None]:
    """使用桩传输层的客户端"""
    client = AsyncGeminiClient(gemini_config, transport=stub_transport)
    yield client
    client.shutdown()


@pytest.fixture
def log_output(gemini_client) -> StringIO:
    """捕获客户端日志输出"""
    output = StringIO()
    gemini_client.logger.logger.handlers[0].stream = output
    return output


@pytest.fixture
def shared_executor() -> Generator[ThreadPoolExecutor, None, None]:
    """外部提供的共享线程池"""
    executor = ThreadPoolExecutor(max_workers=2)
    yield executor
    executor.shutdown(wait=True)


@pytest.fixture
def sample_model_info() -> dict:
    return {
        "name": "models/gemini-test",
        "displayName": "Test",
        "description": "d",
        "inputTokenLimit": 100,
        "outputTokenLimit": 50
    }
