"""
配置管理模块

从环境变量和配置文件加载 SDK 配置，环境变量优先，其次是配置文件，最后是默认值。
"""

import os
import json
from dataclasses import dataclass
from typing import Dict, Any, Optional
from pathlib import Path

from .exceptions import ConfigurationError
from .logger import get_logger

PLACEHOLDER_API_KEY = "YOUR_API_KEY"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_THREAD_POOL_SIZE = 4
DEFAULT_REQUEST_TIMEOUT_MILLIS = 30000

logger = get_logger("gemini_config")

def _get_int(raw: Optional[Any], name: str, default: int) -> int:
    """解析整数配置，无效时回退到默认值"""
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning(f"配置项 '{name}' 无效，使用默认值: {default}", name=name, value=str(raw))
        return default

@dataclass(frozen=True)
class GeminiConfig:
    """Gemini SDK 配置"""
    api_key: str = PLACEHOLDER_API_KEY
    base_url: str = DEFAULT_BASE_URL
    thread_pool_size: int = DEFAULT_THREAD_POOL_SIZE
    request_timeout_millis: int = DEFAULT_REQUEST_TIMEOUT_MILLIS
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "GeminiConfig":
        """从环境变量加载配置"""
        config = cls(
            api_key=os.getenv("GEMINI_API_KEY") or PLACEHOLDER_API_KEY,
            base_url=os.getenv("GEMINI_BASE_URL", DEFAULT_BASE_URL),
            thread_pool_size=_get_int(os.getenv("GEMINI_THREAD_POOL_SIZE"),
                                      "GEMINI_THREAD_POOL_SIZE", DEFAULT_THREAD_POOL_SIZE),
            request_timeout_millis=_get_int(os.getenv("GEMINI_REQUEST_TIMEOUT_MILLIS"),
                                            "GEMINI_REQUEST_TIMEOUT_MILLIS",
                                            DEFAULT_REQUEST_TIMEOUT_MILLIS),
            log_level=os.getenv("LOG_LEVEL", "INFO")
        )
        config._log_loaded()
        return config

    @classmethod
    def from_file(cls, config_path: str) -> "GeminiConfig":
        """从JSON配置文件加载配置，环境变量覆盖文件中的值"""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"配置文件不存在: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = json.load(f)

        gemini = config_data.get("gemini", {})
        server = config_data.get("server", {})

        config = cls(
            api_key=os.getenv("GEMINI_API_KEY") or gemini.get("api_key") or PLACEHOLDER_API_KEY,
            base_url=os.getenv("GEMINI_BASE_URL", gemini.get("base_url", DEFAULT_BASE_URL)),
            thread_pool_size=_get_int(
                os.getenv("GEMINI_THREAD_POOL_SIZE", gemini.get("thread_pool_size")),
                "thread_pool_size", DEFAULT_THREAD_POOL_SIZE
            ),
            request_timeout_millis=_get_int(
                os.getenv("GEMINI_REQUEST_TIMEOUT_MILLIS", gemini.get("request_timeout_millis")),
                "request_timeout_millis", DEFAULT_REQUEST_TIMEOUT_MILLIS
            ),
            log_level=os.getenv("LOG_LEVEL", server.get("log_level", "INFO"))
        )
        config._log_loaded()
        return config

    @property
    def uses_placeholder_key(self) -> bool:
        return self.api_key == PLACEHOLDER_API_KEY

    def _log_loaded(self) -> None:
        if self.uses_placeholder_key:
            logger.info("使用默认的API密钥占位符")
        logger.debug("已加载配置", **self.to_dict())

    def validate(self) -> None:
        """验证配置"""
        errors = []

        if not self.api_key:
            errors.append("Gemini API密钥未设置")
        if not self.base_url.startswith(("http://", "https://")):
            errors.append(f"基础URL无效: {self.base_url}")
        if self.thread_pool_size <= 0:
            errors.append(f"线程池大小无效: {self.thread_pool_size}")
        if self.request_timeout_millis <= 0:
            errors.append(f"请求超时时间无效: {self.request_timeout_millis}")

        if errors:
            raise ConfigurationError(
                "配置验证失败:\n" + "\n".join(f"- {error}" for error in errors),
                details={"errors": errors}
            )

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式（隐藏敏感信息）"""
        return {
            "api_key": "default (placeholder)" if self.uses_placeholder_key else "***",
            "base_url": self.base_url,
            "thread_pool_size": self.thread_pool_size,
            "request_timeout_millis": self.request_timeout_millis,
            "log_level": self.log_level
        }

def load_config(config_path: Optional[str] = None) -> GeminiConfig:
    """加载并验证配置"""
    if config_path and os.path.exists(config_path):
        config = GeminiConfig.from_file(config_path)
    else:
        config = GeminiConfig.from_env()

    config.validate()
    return config
