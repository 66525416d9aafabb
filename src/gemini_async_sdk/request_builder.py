"""
请求构建器

把逻辑资源路径（如 ``models``、``models/{id}``、``models/{id}:generateContent``）
和 API 密钥组装成完整的请求描述。
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union
from urllib.parse import quote, urlencode

from pydantic import BaseModel

from . import __version__
from .exceptions import ConfigurationError
from .logger import SDKLogger, redact_secrets

MODELS_PREFIX = "models/"
SUPPORTED_METHODS = ("GET", "POST")

def normalize_model_name(model_name: str) -> str:
    """去掉所有前导的 ``models/`` 前缀，返回不带前缀的模型ID"""
    if model_name is None:
        raise ConfigurationError("模型名称不能为空")
    if not isinstance(model_name, str):
        raise ConfigurationError(
            f"模型名称必须是字符串: {model_name!r}",
            details={"type": type(model_name).__name__}
        )
    name = model_name.strip()
    while name.startswith(MODELS_PREFIX):
        name = name[len(MODELS_PREFIX):].lstrip()
    if not name:
        raise ConfigurationError(f"模型名称无效: {model_name!r}")
    return name

def model_path(model_name: str, method: Optional[str] = None) -> str:
    """生成 ``models/{id}`` 或 ``models/{id}:{method}`` 路径"""
    path = f"{MODELS_PREFIX}{normalize_model_name(model_name)}"
    if method:
        path = f"{path}:{method}"
    return path

def _encode_segment(segment: str) -> str:
    # 冒号后缀必须保持字面量，编码成 %3A 会导致远端路由失败
    resource, sep, method = segment.rpartition(":")
    if not sep:
        return quote(segment, safe="")
    return f"{quote(resource, safe='')}:{quote(method, safe='')}"

def build_url(base_url: str, path: str, api_key: str) -> str:
    """构建完整URL，密钥作为查询参数传递"""
    segments = [_encode_segment(s) for s in path.strip("/").split("/") if s]
    query = urlencode({"key": api_key})
    return f"{base_url.rstrip('/')}/{'/'.join(segments)}?{query}"

@dataclass(frozen=True)
class PreparedRequest:
    """完整的请求描述"""
    method: str
    url: str
    path: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None

    @property
    def context(self) -> str:
        """用于日志和错误信息的调用上下文"""
        return f"{self.method} {self.path}"

    @property
    def redacted_url(self) -> str:
        return redact_secrets(self.url)

class RequestBuilder:
    """请求构建器"""

    def __init__(self, base_url: str, log_level: str = "INFO"):
        self.base_url = base_url.rstrip("/")
        self.logger = SDKLogger("gemini_request_builder", log_level)
        self.default_headers = {
            "Accept": "application/json",
            "User-Agent": f"gemini-async-sdk/{__version__}"
        }

    def build(
        self,
        method: str,
        path: str,
        api_key: str,
        body: Optional[Union[BaseModel, Dict[str, Any]]] = None
    ) -> PreparedRequest:
        """构建请求，不支持的方法或GET携带请求体时立即抛出 ConfigurationError"""
        verb = (method or "").upper()
        if verb not in SUPPORTED_METHODS:
            raise ConfigurationError(
                f"不支持的HTTP方法: {method}",
                details={"method": method, "path": path}
            )
        if verb == "GET" and body is not None:
            raise ConfigurationError(
                f"GET请求不能携带请求体: {path}",
                details={"method": verb, "path": path}
            )

        headers = dict(self.default_headers)
        payload = None
        if body is not None:
            payload = self._serialize(body)
            headers["Content-Type"] = "application/json"

        self.logger.log_request(verb, path, body_size=len(payload) if payload else 0)

        return PreparedRequest(
            method=verb,
            url=build_url(self.base_url, path, api_key),
            path=path,
            headers=headers,
            body=payload
        )

    @staticmethod
    def _serialize(body: Union[BaseModel, Dict[str, Any]]) -> bytes:
        if isinstance(body, BaseModel):
            return body.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")
        return json.dumps(body, ensure_ascii=False).encode("utf-8")
