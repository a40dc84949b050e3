from __future__ import annotations
from typing import Any, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

Likelihood = Literal["Low", "Medium", "High"]

# Request scoped data structures, nothing here outlives a single chat turn
class ImagePayload(BaseModel):
    # Decoded upload ready to be sent inline to the AI provider
    mime_type: str
    data: bytes

class ChatRequest(BaseModel):
    # user_text stays untyped so the orchestrator can reject non strings itself
    user_text: Any = None
    image: Optional[ImagePayload] = None

class QualityMetrics(BaseModel):
    accuracy: float = Field(ge=0, le=100)
    tone: float = Field(ge=0, le=100)
    safety: float = Field(ge=0, le=100)
    confidence: float = Field(ge=0, le=100)

class PurchaseIntent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    score: int = Field(ge=0, le=100)
    likelihood: Likelihood
    suggested_action: str = Field(alias="suggestedAction")

class AssistantResult(BaseModel):
    # source is "keyword", "fallback", "error" or the provider name
    reply_text: str
    source: str
    quality_metrics: Optional[QualityMetrics] = None
    purchase_intent: Optional[PurchaseIntent] = None
    error_detail: Optional[str] = None

# HTTP payloads, camelCase on the wire to match the storefront UI
class ChatBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: Any = None
    image_data: Optional[str] = Field(default=None, alias="imageData")

class ChatResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    reply: str
    source: str
    quality_metrics: Optional[QualityMetrics] = Field(default=None, alias="qualityMetrics")
    purchase_intent: Optional[PurchaseIntent] = Field(default=None, alias="purchaseIntent")

    @classmethod
    def from_result(cls, result: AssistantResult) -> "ChatResponse":
        return cls(
            reply=result.reply_text,
            source=result.source or "unknown",
            quality_metrics=result.quality_metrics,
            purchase_intent=result.purchase_intent,
        )

class FeedbackBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message_id: Optional[str] = Field(default=None, alias="messageId")
    rating: Optional[str] = None

class FeedbackResponse(BaseModel):
    success: bool
    message: str
