"""
Gemini API 数据模型

定义与 Gemini REST API 交互的请求/响应结构。字段以 snake_case 命名，
序列化和解析时使用 API 的 camelCase 别名。
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

USER_ROLE = "user"

class GeminiSchema(BaseModel):
    """所有 API 记录的基类"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        """转换为请求体字典（camelCase，省略空字段）"""
        return self.model_dump(by_alias=True, exclude_none=True)

class GenerationConfig(GeminiSchema):
    """
    文本生成参数

    原样透传给 API，客户端不做取值范围校验。
    """
    temperature: float = Field(default=0.7, description="生成温度 (0.0-1.0)")
    top_p: float = Field(default=0.9, description="核采样阈值 (0.0-1.0)")
    top_k: int = Field(default=40, description="Top-K采样参数")
    max_output_tokens: int = Field(default=1024, description="最大输出令牌数")

class ModelInfo(GeminiSchema):
    """模型信息"""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="模型名称，可能带 models/ 前缀")
    display_name: str = Field(..., description="显示名称")
    description: str = Field(..., description="模型描述")
    input_token_limit: int = Field(..., description="最大输入令牌数")
    output_token_limit: int = Field(..., description="最大输出令牌数")

class ModelList(GeminiSchema):
    """模型列表（保持服务端顺序）"""
    models: List[ModelInfo] = Field(default_factory=list)

class Part(GeminiSchema):
    text: str

class Content(GeminiSchema):
    parts: List[Part]

class ContentItem(GeminiSchema):
    """带角色标记的一轮输入"""
    role: str
    parts: List[Part]

    @classmethod
    def user_text(cls, text: str) -> "ContentItem":
        """创建只含一段文本的用户输入"""
        return cls(role=USER_ROLE, parts=[Part(text=text)])

class SafetyRating(GeminiSchema):
    category: str
    probability: str

class Citation(GeminiSchema):
    url: str
    title: str

class CitationMetadata(GeminiSchema):
    citations: List[Citation]

class Candidate(GeminiSchema):
    """
    生成的候选结果

    safety_ratings 为 None 表示未进行安全评估，与空列表含义不同。
    """
    content: Content
    safety_ratings: Optional[List[SafetyRating]] = None
    citation_metadata: Optional[CitationMetadata] = None

class GenerateContentResponse(GeminiSchema):
    """内容生成响应，模型拒绝回答时 candidates 可能为空"""
    candidates: List[Candidate] = Field(default_factory=list)

    def text(self) -> str:
        """拼接所有候选结果中的文本"""
        return "\n".join(
            part.text
            for candidate in self.candidates
            for part in candidate.content.parts
        )

class GenerateContentRequest(GeminiSchema):
    """内容生成请求，model 默认不写入请求体（模型由URL路径指定）"""
    contents: List[ContentItem]
    model: Optional[str] = None
    generation_config: Optional[GenerationConfig] = None

class CountTokensRequest(GeminiSchema):
    """令牌计数请求，contents 与 generate_content_request 至多填写其一"""
    contents: Optional[List[ContentItem]] = None
    generate_content_request: Optional[GenerateContentRequest] = None
    model: Optional[str] = None

    @model_validator(mode="after")
    def check_one_of(self) -> "CountTokensRequest":
        if self.contents is not None and self.generate_content_request is not None:
            raise ValueError("contents 和 generate_content_request 不能同时设置")
        return self

class TokenCountResponse(GeminiSchema):
    """令牌计数响应"""
    total_tokens: int = Field(..., ge=0)
