"""
脚本化的桩传输层

按请求方法和路径返回预设响应，记录收到的所有请求，不访问网络。
"""

import json
import threading
from typing import Any, Callable, List, Tuple, Union

from src.gemini_async_sdk.request_builder import PreparedRequest
from src.gemini_async_sdk.transport import Transport, TransportResponse

Matcher = Callable[[PreparedRequest], bool]
Reply = Union[TransportResponse, BaseException, Callable[[PreparedRequest], TransportResponse]]


class StubTransport(Transport):
    """模拟传输层"""

    def __init__(self):
        self._rules: List[Tuple[Matcher, Reply]] = []
        self.requests: List[PreparedRequest] = []
        self.close_count = 0
        self._lock = threading.Lock()

    def when(self, method: str, path_suffix: str) -> "_RuleBuilder":
        def matcher(request: PreparedRequest) -> bool:
            return request.method == method and request.path.endswith(path_suffix)
        return _RuleBuilder(self, matcher)

    def when_any(self) -> "_RuleBuilder":
        return _RuleBuilder(self, lambda request: True)

    def send(self, request: PreparedRequest) -> TransportResponse:
        with self._lock:
            self.requests.append(request)
        for matcher, reply in self._rules:
            if matcher(request):
                return self._resolve(reply, request)
        return TransportResponse(404, "Not Found")

    def close(self) -> None:
        self.close_count += 1

    @property
    def last_request(self) -> PreparedRequest:
        return self.requests[-1]

    @staticmethod
    def _resolve(reply: Reply, request: PreparedRequest) -> TransportResponse:
        if isinstance(reply, BaseException):
            raise reply
        if callable(reply):
            return reply(request)
        return reply


class _RuleBuilder:
    def __init__(self, transport: StubTransport, matcher: Matcher):
        self.transport = transport
        self.matcher = matcher

    def respond(self, body: Any, status_code: int = 200) -> StubTransport:
        text = body if isinstance(body, str) else json.dumps(body)
        return self._add(TransportResponse(status_code, text))

    def raise_error(self, error: BaseException) -> StubTransport:
        return self._add(error)

    def reply_with(self, fn: Callable[[PreparedRequest], TransportResponse]) -> StubTransport:
        return self._add(fn)

    def _add(self, reply: Reply) -> StubTransport:
        self.transport._rules.append((self.matcher, reply))
        return self.transport
