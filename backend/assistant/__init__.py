from .models import (
    ImagePayload, ChatRequest, QualityMetrics, PurchaseIntent, AssistantResult,
    ChatBody, ChatResponse, FeedbackBody, FeedbackResponse,
)
from .errors import AssistantError, ValidationError, ConfigurationMissing, OracleError, InternalError
from .keywords import KeywordRule, KEYWORD_RULES, find_rule, match_keyword
from .scoring import (
    KEYWORD_QUALITY_METRICS, analyze_purchase_intent, analyze_response_quality,
    likelihood_for_score, suggested_action_for,
)
from .orchestrator import ShoppingAssistant

__all__ = [
    'ImagePayload','ChatRequest','QualityMetrics','PurchaseIntent','AssistantResult',
    'ChatBody','ChatResponse','FeedbackBody','FeedbackResponse',
    'AssistantError','ValidationError','ConfigurationMissing','OracleError','InternalError',
    'KeywordRule','KEYWORD_RULES','find_rule','match_keyword',
    'KEYWORD_QUALITY_METRICS','analyze_purchase_intent','analyze_response_quality',
    'likelihood_for_score','suggested_action_for',
    'ShoppingAssistant',
]
