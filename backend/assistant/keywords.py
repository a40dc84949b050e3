"""Keyword gate for cheap canned replies

Rules are checked in order and the first rule with any phrase contained in the
message wins, so the order of KEYWORD_RULES is a priority list. Matching is a
plain substring test on the lowercased text, which means short phrases such as
"hi" also fire inside longer words.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeywordRule:
    tag: str
    trigger_phrases: Tuple[str, ...]
    reply: str

    def matched_phrases(self, normalized: str) -> list[str]:
        return [p for p in self.trigger_phrases if p in normalized]


KEYWORD_RULES: Tuple[KeywordRule, ...] = (
    KeywordRule(
        tag="greeting",
        trigger_phrases=("hello", "hi", "hey", "greetings", "good morning", "good afternoon", "good evening"),
        reply=(
            "Hello! 👋 Welcome to our online store. I'm your AI shopping assistant with visual search "
            "and voice capabilities. How can I help you today?"
        ),
    ),
    KeywordRule(
        tag="pricing",
        trigger_phrases=("price", "cost", "how much", "expensive", "cheap", "budget"),
        reply=(
            "Our products range from budget-friendly to premium options. We have electronics, fashion, "
            "home, and fitness categories. What type of product are you looking for?"
        ),
    ),
    KeywordRule(
        tag="suggestion",
        trigger_phrases=("suggestion", "suggest", "what should", "best product"),
        reply=(
            "I'd love to help you find the perfect product! Could you tell me what category you're "
            "interested in? Electronics, fashion, home goods, or fitness equipment?"
        ),
    ),
    KeywordRule(
        tag="returns",
        trigger_phrases=("return", "refund", "exchange", "policy", "send back", "money back"),
        reply=(
            "🔹 Our Return Policy:\n\n✓ 30-day money-back guarantee\n✓ Free return shipping\n"
            "✓ Full refund or exchange\n✓ Items must be unused with original packaging\n"
            "✓ 90-day warranty for defective items\n\nNeed help processing a return?"
        ),
    ),
    KeywordRule(
        tag="shipping",
        trigger_phrases=("shipping", "delivery", "when will", "how long", "tracking", "ship", "arrive"),
        reply=(
            "📦 Shipping Options:\n\n🔹 Standard (5-7 days): FREE on orders $50+\n"
            "🔹 Express (2-3 days): $9.99\n🔹 Overnight (next day): $24.99\n\n"
            "All orders include tracking via email!"
        ),
    ),
    KeywordRule(
        tag="warranty",
        trigger_phrases=("warranty", "guarantee", "coverage", "defect", "broken", "not working"),
        reply=(
            "🛡️ Warranty Coverage:\n\n🔹 Electronics: 1-year manufacturer warranty\n"
            "🔹 Extended warranties available at checkout\n🔹 90-day hassle-free returns for defects\n\n"
            "Which product do you need warranty info for?"
        ),
    ),
    KeywordRule(
        tag="availability",
        trigger_phrases=("size", "color", "colour", "available", "stock", "in stock", "out of stock"),
        reply=(
            "Check product pages for available sizes and colors. You can sign up for notifications "
            "when items are back in stock. Which product are you interested in?"
        ),
    ),
    KeywordRule(
        tag="thanks",
        trigger_phrases=("thank", "thanks", "thank you", "appreciate"),
        reply="You're welcome! Anything else I can help with? 😊",
    ),
)


def find_rule(text: str) -> Optional[KeywordRule]:
    """Return the first rule whose phrases appear in the text, or None"""
    normalized = (text or "").lower().strip()
    for rule in KEYWORD_RULES:
        hits = rule.matched_phrases(normalized)
        if hits:
            logger.debug("Keyword rule %s matched: %s", rule.tag, ", ".join(hits))
            return rule
    return None


def match_keyword(text: str) -> Optional[str]:
    rule = find_rule(text)
    return rule.reply if rule else None
