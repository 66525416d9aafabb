"""
结构化日志系统模块

每条日志输出为一行 JSON，写出之前脱敏 API 密钥。

同名的 SDKLogger 共享底层 ``logging.Logger`` 及其输出 handler，日志级别则保存在
SDKLogger 实例上，因此多个客户端可以各自使用配置中的级别而互不覆盖。
"""

import json
import logging
import re
import sys
from datetime import datetime
from typing import Any, Dict, Iterable

SERVICE_NAME = "gemini-async-sdk"
REDACTION_MARKER = "REDACTED"

_KEY_PARAM_PATTERN = re.compile(r"(key=)[^&\s,\"']*")
_SENSITIVE_KEYS = ("api_key", "apikey", "password", "token", "secret", "auth")

def redact_secrets(text: str, secrets: Iterable[str] = ()) -> str:
    """将查询参数中的 key 值以及给定的明文密钥替换为脱敏标记"""
    if not text:
        return text
    redacted = _KEY_PARAM_PATTERN.sub(r"\g<1>" + REDACTION_MARKER, text)
    for secret in secrets:
        if secret:
            redacted = redacted.replace(secret, REDACTION_MARKER)
    return redacted

def parse_level(level: str) -> int:
    """日志级别名称转换为数值，无法识别时使用 INFO"""
    value = getattr(logging, str(level).upper(), None)
    return value if isinstance(value, int) else logging.INFO

class StructuredFormatter(logging.Formatter):
    """把日志记录格式化为单行 JSON"""

    def __init__(self, service_name: str = SERVICE_NAME):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno
        }
        data = getattr(record, "extra_data", None)
        if data:
            entry["data"] = data
        return json.dumps(entry, ensure_ascii=False, separators=(',', ':'), default=str)

class SDKLogger:
    """SDK 专用日志器"""

    def __init__(self, name: str, level: str = "INFO", service_name: str = SERVICE_NAME):
        self.logger = logging.getLogger(name)
        self.level = parse_level(level)

        # handler 只在第一次创建同名日志器时安装，之后的实例复用
        if not self.logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(StructuredFormatter(service_name))
            self.logger.addHandler(handler)
            self.logger.propagate = False
        self.logger.setLevel(logging.DEBUG)

    def is_enabled_for(self, level: int) -> bool:
        return level >= self.level

    def _log_with_context(self, level: int, message: str, **kwargs) -> None:
        if not self.is_enabled_for(level):
            return
        extra = {"extra_data": self._filter_sensitive_data(kwargs)} if kwargs else {}
        # stacklevel 指向调用 debug/info/... 的代码位置
        self.logger.log(level, message, extra=extra, stacklevel=3)

    def debug(self, message: str, **kwargs) -> None:
        self._log_with_context(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        self._log_with_context(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._log_with_context(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        self._log_with_context(logging.ERROR, message, **kwargs)

    def log_request(self, method: str, path: str, **kwargs) -> None:
        """记录请求日志（path 中不含密钥）"""
        self.debug(f"[Request] {method} {path}", method=method, path=path, **kwargs)

    def _filter_sensitive_data(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """敏感字段替换为 ***，字符串值中的 key= 查询参数脱敏"""
        filtered = {}
        for key, value in data.items():
            if any(sensitive in key.lower() for sensitive in _SENSITIVE_KEYS):
                filtered[key] = "***"
            elif isinstance(value, dict):
                filtered[key] = self._filter_sensitive_data(value)
            elif isinstance(value, str):
                filtered[key] = redact_secrets(value)
            else:
                filtered[key] = value
        return filtered

_module_loggers: Dict[str, SDKLogger] = {}

def get_logger(name: str) -> SDKLogger:
    """获取模块级共享日志器（INFO 级别），客户端组件应直接创建 SDKLogger 并传入配置的级别"""
    if name not in _module_loggers:
        _module_loggers[name] = SDKLogger(name)
    return _module_loggers[name]
