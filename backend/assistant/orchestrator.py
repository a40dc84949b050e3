"""Decide how each chat turn gets answered

The order of checks is fixed:

1. reject a missing or non string message
2. answer from the keyword table when it matches and no image is attached
3. answer with the fallback text when no AI provider is configured
4. call the AI provider and score its reply, or apologise when the call fails

Only step 1 raises. Every other path returns a well formed AssistantResult.
"""

from __future__ import annotations
import logging
from typing import Optional

from .errors import ValidationError
from .keywords import find_rule
from .models import AssistantResult, ChatRequest
from .oracle import Oracle
from .prompts import ERROR_REPLY, FALLBACK_REPLY, build_oracle_prompt
from .scoring import KEYWORD_QUALITY_METRICS, analyze_purchase_intent, analyze_response_quality

logger = logging.getLogger(__name__)

KEYWORD_SOURCE = "keyword"
FALLBACK_SOURCE = "fallback"
ERROR_SOURCE = "error"


class ShoppingAssistant:
    def __init__(self, oracle: Optional[Oracle] = None, provider: str = "gemini"):
        # oracle is None when no credential is configured
        self.oracle = oracle
        self.provider = (provider or "gemini").lower()

    @property
    def configured(self) -> bool:
        return self.oracle is not None

    def handle(self, request: ChatRequest) -> AssistantResult:
        text = request.user_text
        if not isinstance(text, str) or not text:
            raise ValidationError("Message is required")
        has_image = request.image is not None
        logger.info("Chat turn received chars=%d image=%s", len(text), has_image)

        # Images always go to the AI provider, even when the text matches a keyword
        rule = None if has_image else find_rule(text)
        if rule is not None:
            logger.info("Keyword rule %s matched, skipping AI provider", rule.tag)
            return AssistantResult(
                reply_text=rule.reply,
                source=KEYWORD_SOURCE,
                quality_metrics=KEYWORD_QUALITY_METRICS.model_copy(),
                purchase_intent=analyze_purchase_intent(text),
            )

        if self.oracle is None:
            logger.warning("No AI_API_KEY configured, using fallback reply")
            return AssistantResult(reply_text=FALLBACK_REPLY, source=FALLBACK_SOURCE)

        prompt = build_oracle_prompt(text, has_image)
        logger.info("Calling %s AI provider", self.provider.upper())
        try:
            reply = self.oracle.generate(prompt, request.image)
        except Exception as exc:
            logger.error("AI provider error: %s", exc)
            return AssistantResult(reply_text=ERROR_REPLY, source=ERROR_SOURCE, error_detail=str(exc))

        return AssistantResult(
            reply_text=reply,
            source=self.provider,
            quality_metrics=analyze_response_quality(reply),
            purchase_intent=analyze_purchase_intent(text),
        )
