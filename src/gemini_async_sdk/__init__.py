"""
Gemini Async SDK

An asyncio client for the Gemini generative-language REST API: list models,
fetch model details, generate content and count tokens. Every call returns a
GeminiResult holding either the decoded payload or a structured GeminiError.
"""

__version__ = "0.1.0"
__author__ = "Gemini SDK Team"

from .client import AsyncGeminiClient, create_client
from .config import GeminiConfig, load_config
from .exceptions import (
    ConfigurationError,
    ErrorCode,
    GeminiError,
    HttpErrorStatus,
    JsonDeserializationError,
    UnexpectedError,
)
from .models import (
    Candidate,
    Content,
    ContentItem,
    CountTokensRequest,
    GenerateContentRequest,
    GenerateContentResponse,
    GenerationConfig,
    ModelInfo,
    ModelList,
    Part,
    TokenCountResponse,
)
from .result import GeminiResult

__all__ = [
    "AsyncGeminiClient",
    "create_client",
    "GeminiConfig",
    "load_config",
    "GeminiResult",
    "GeminiError",
    "HttpErrorStatus",
    "JsonDeserializationError",
    "UnexpectedError",
    "ConfigurationError",
    "ErrorCode",
    "Candidate",
    "Content",
    "ContentItem",
    "CountTokensRequest",
    "GenerateContentRequest",
    "GenerateContentResponse",
    "GenerationConfig",
    "ModelInfo",
    "ModelList",
    "Part",
    "TokenCountResponse",
]
