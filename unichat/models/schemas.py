from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Chat ---
class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    model_id: str = Field(default="", alias="modelId")
    messages: list[ChatMessage] = []
    max_tokens: int = Field(default=1000, gt=0, alias="maxTokens")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)


class TokenUsage(BaseModel):
    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)
    total_tokens: int = Field(default=0, ge=0)


class ChatResult(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    content: str
    model_id: str
    usage: TokenUsage


# --- Usage ---
class UsageCounterResponse(BaseModel):
    user_id: str
    request_count: int = 0
    total_tokens: int = 0
    total_cost: float = 0.0
    window_start: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UsageHistoryResponse(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    user_id: str
    model_id: str
    input_tokens: int
    output_tokens: int
    cost: float
    timestamp: datetime


class UsageResponse(BaseModel):
    current: UsageCounterResponse
    history: list[UsageHistoryResponse]


# --- Models ---
class ModelInfo(BaseModel):
    id: str
    name: str
    provider: str
    description: str = ""
    input_cost: float
    output_cost: float
    max_tokens: int


class ModelListResponse(BaseModel):
    models: list[ModelInfo]


# --- Health ---
class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str = "0.1.0"
