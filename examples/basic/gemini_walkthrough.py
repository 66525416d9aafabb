#!/usr/bin/env python3
"""
Gemini SDK 基础示例

依次演示四个操作：列出模型、获取模型详情、生成内容、统计令牌数。

运行示例:
    python examples/basic/gemini_walkthrough.py

环境变量:
    GEMINI_API_KEY: Gemini API密钥 (必需)
    GEMINI_BASE_URL: API基础地址 (可选)
    LOG_LEVEL: 日志级别 (可选，默认: info)
"""

import asyncio
import os
import sys
import logging
from pathlib import Path

# 添加项目根目录到 Python 路径
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from src.gemini_async_sdk import AsyncGeminiClient, GeminiConfig, GeminiResult

logging.basicConfig(
    level=getattr(logging, os.getenv('LOG_LEVEL', 'INFO').upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

MODEL_NAME = "models/gemini-2.0-flash-exp"


def report(title: str, result: GeminiResult, render) -> None:
    """打印一次调用的结果"""
    logger.info(f"=== {title} ===")
    if result.is_error:
        logger.error(f"{title} 失败: {result.error.message}")
        return
    for line in render(result.value):
        logger.info(line)


async def main():
    config = GeminiConfig.from_env()
    if config.uses_placeholder_key:
        logger.warning("未提供真实的API密钥，请先设置 GEMINI_API_KEY")

    async with AsyncGeminiClient(config) as client:
        models = await client.list_models()
        report("Get Models", models,
               lambda value: [f"- {m.name}: {m.display_name}" for m in value.models])

        details = await client.get_model_details(MODEL_NAME)
        report("Get Model Details", details, lambda info: [
            f"Name: {info.name}",
            f"DisplayName: {info.display_name}",
            f"Description: {info.description}",
        ])

        generated = await client.generate_content(
            MODEL_NAME, "What is the capital of the United Kingdom?"
        )
        report("Generate Content", generated, lambda response: response.text().splitlines())

        tokens = await client.count_tokens(MODEL_NAME, "Hello world")
        report("Count Tokens", tokens, lambda response: [f"Token Count: {response.total_tokens}"])

    logger.info("所有演示已完成，资源已释放")


if __name__ == "__main__":
    asyncio.run(main())
