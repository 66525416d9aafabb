"""
测试响应归一化
"""

import json
import pytest
from io import StringIO

from src.gemini_async_sdk.exceptions import HttpErrorStatus, JsonDeserializationError
from src.gemini_async_sdk.logger import SDKLogger
from src.gemini_async_sdk.models import ModelList, TokenCountResponse
from src.gemini_async_sdk.request_builder import RequestBuilder
from src.gemini_async_sdk.response_normalizer import ResponseNormalizer
from src.gemini_async_sdk.transport import TransportResponse

API_KEY = "SECRET-KEY-123"


@pytest.fixture
def output():
    return StringIO()


@pytest.fixture
def normalizer(output):
    logger = SDKLogger("test.normalizer", "DEBUG")
    logger.logger.handlers[0].stream = output
    return ResponseNormalizer(logger)


@pytest.fixture
def request_description():
    return RequestBuilder("https://example.test/v1").build(
        "POST", "models/gemini-test:countTokens", API_KEY, {"contents": []}
    )


def error_lines(output: StringIO):
    lines = [json.loads(line) for line in output.getvalue().splitlines() if line]
    return [line for line in lines if line["level"] == "ERROR"]


class TestSuccess:
    """测试成功响应"""

    def test_decoded_value_returned(self, normalizer, request_description, output):
        response = TransportResponse(200, '{"totalTokens": 3}')

        result = normalizer.normalize(request_description, response, TokenCountResponse)

        assert result.is_ok
        assert result.value == TokenCountResponse(total_tokens=3)
        assert error_lines(output) == []

    @pytest.mark.parametrize("status", [200, 201, 204, 299])
    def test_any_2xx_is_success(self, normalizer, request_description, status):
        response = TransportResponse(status, '{"models": []}')
        result = normalizer.normalize(request_description, response, ModelList)
        assert result.is_ok
        assert result.value.models == []


class TestHttpError:
    """测试HTTP错误响应"""

    @pytest.mark.parametrize("status", [199, 300, 400, 401, 404, 429, 500, 503])
    def test_non_2xx(self, normalizer, request_description, status):
        response = TransportResponse(status, "Boom")

        result = normalizer.normalize(request_description, response, TokenCountResponse)

        assert isinstance(result.error, HttpErrorStatus)
        assert result.error.status_code == status
        assert result.error.body == "Boom"
        assert result.error.context == "POST models/gemini-test:countTokens"
        assert f"HTTP error: {status}" in result.error.message

    def test_error_logged_without_key(self, normalizer, request_description, output):
        body = f"bad request for https://example.test/v1/models?key={API_KEY}"
        response = TransportResponse(400, body)

        normalizer.normalize(request_description, response, TokenCountResponse,
                             secrets=(API_KEY,))

        lines = error_lines(output)
        assert len(lines) == 1
        assert API_KEY not in output.getvalue()
        assert lines[0]["message"].startswith("[POST models/gemini-test:countTokens]")
        assert "key=REDACTED" in lines[0]["message"]
        assert lines[0]["data"]["status_code"] == 400
        assert lines[0]["data"]["error_code"] == "HTTP_ERROR"

    def test_error_body_echoing_raw_secret(self, normalizer, request_description, output):
        response = TransportResponse(403, f"API key {API_KEY} is invalid")

        result = normalizer.normalize(request_description, response, TokenCountResponse,
                                      secrets=(API_KEY,))

        # 返回给调用方的错误保留原始响应体，只有日志脱敏
        assert result.error.body == f"API key {API_KEY} is invalid"
        assert API_KEY not in output.getvalue()


class TestDeserializationError:
    """测试响应体解析失败"""

    def test_invalid_json(self, normalizer, request_description, output):
        response = TransportResponse(200, "{ invalid_json }")

        result = normalizer.normalize(request_description, response, ModelList)

        assert isinstance(result.error, JsonDeserializationError)
        assert result.error.original_payload == "{ invalid_json }"
        assert "Deserialization error" in result.error.message
        assert len(error_lines(output)) == 1

    def test_shape_mismatch(self, normalizer, request_description):
        response = TransportResponse(200, '{"totalTokens": "many"}')

        result = normalizer.normalize(request_description, response, TokenCountResponse)

        assert isinstance(result.error, JsonDeserializationError)
        assert result.error.original_payload == '{"totalTokens": "many"}'
        assert "totalTokens" in result.error.cause_description
        assert "StatusCode: 200" in result.error.cause_description

    def test_missing_required_field(self, normalizer, request_description):
        response = TransportResponse(200, "{}")
        result = normalizer.normalize(request_description, response, TokenCountResponse)
        assert isinstance(result.error, JsonDeserializationError)
