"""Heuristic scoring of chat text

Two pure functions turn free text into bounded numbers:

- analyze_purchase_intent reads the user's message and adds fixed weights for
  urgency, budget and product signals
- analyze_response_quality reads an AI generated reply and produces four
  independent sub scores

The weights and thresholds are tuned constants and are kept exactly as they
are, including the strict comparisons in the likelihood bands.
"""

from __future__ import annotations
import re
from .models import Likelihood, PurchaseIntent, QualityMetrics

# Purchase intent signals
_URGENCY = re.compile(r"urgent|asap|immediately|today|now|quickly|right now", re.I)
_BUDGET = re.compile(r"\$\d+|budget|cheap|expensive|price|cost|under|below|around", re.I)
_PRODUCT = re.compile(r"laptop|phone|headphone|watch|camera|tablet|computer|gaming|iphone|macbook", re.I)

URGENCY_WEIGHT = 40
BUDGET_WEIGHT = 30
PRODUCT_WEIGHT = 30

# Response quality signals
_SPECIFIC_DETAILS = re.compile(r"\$\d+|%|\d+\s*(day|hour|item|product)", re.I)
_STRUCTURE = re.compile(r"\n|•|🔹|-\s")
_POSITIVE = re.compile(r"great|excellent|perfect|recommend|happy|glad|delighted", re.I)
_PROFESSIONAL = re.compile(r"certainly|definitely|specifically|particularly", re.I)
_EMOJI = re.compile(r"[🔹📦✨🎁👍]")
_UNSAFE = re.compile(r"hack|cheat|fake|illegal|unauthorized|steal", re.I)
_SAFETY_CAVEAT = re.compile(r"caution|warning|careful|risk|consult|professional", re.I)
_CALL_TO_ACTION = re.compile(r"would you like|can i help|let me know|feel free", re.I)
_OPTIONS = re.compile(r"option|choice|alternative", re.I)

SCORE_CAP = 95

# Keyword replies are hand written, so they get a fixed score instead of a computed one
KEYWORD_QUALITY_METRICS = QualityMetrics(accuracy=95, tone=90, safety=100, confidence=95)


def likelihood_for_score(score: int) -> Likelihood:
    # Strict comparisons: 60 is still Medium and 30 is still Low
    if score > 60:
        return "High"
    if score > 30:
        return "Medium"
    return "Low"


def suggested_action_for(likelihood: Likelihood) -> str:
    return "Show checkout assistance" if likelihood == "High" else "Continue browsing"


def analyze_purchase_intent(user_text: str) -> PurchaseIntent:
    """Score how close the user is to buying, from 0 to 100"""
    t = (user_text or "").lower()
    score = 0
    if _URGENCY.search(t):
        score += URGENCY_WEIGHT
    if _BUDGET.search(t):
        score += BUDGET_WEIGHT
    if _PRODUCT.search(t):
        score += PRODUCT_WEIGHT
    likelihood = likelihood_for_score(score)
    return PurchaseIntent(score=score, likelihood=likelihood, suggested_action=suggested_action_for(likelihood))


def _word_count(text: str) -> int:
    # Split on single spaces only, an empty reply still counts as one word
    return len(text.split(" "))


def analyze_response_quality(reply_text: str) -> QualityMetrics:
    """Score an AI reply on accuracy, tone, safety and confidence

    Only replies produced by the AI provider go through here. Each score is
    computed on its own and is never normalised against the others.
    """
    text = reply_text or ""
    words = _word_count(text)

    # Accuracy: specific and well structured answers score higher
    accuracy = 60 + (15 if words > 50 else words * 0.3)
    if _SPECIFIC_DETAILS.search(text):
        accuracy += 10
    if _STRUCTURE.search(text):
        accuracy += 10

    # Tone: every friendly or professional word counts
    tone = 70 + len(_POSITIVE.findall(text)) * 3 + len(_PROFESSIONAL.findall(text)) * 2 + len(_EMOJI.findall(text)) * 2

    # Safety: unsafe content wins over any caveat
    if _UNSAFE.search(text):
        safety = 40
    elif _SAFETY_CAVEAT.search(text):
        safety = 100
    else:
        safety = 95

    # Confidence: complete answers offer a next step and options
    confidence = 65 + (15 if words > 100 else words * 0.15)
    if _CALL_TO_ACTION.search(text):
        confidence += 10
    if _OPTIONS.search(text):
        confidence += 5

    return QualityMetrics(
        accuracy=min(SCORE_CAP, accuracy),
        tone=min(SCORE_CAP, tone),
        safety=safety,
        confidence=min(SCORE_CAP, confidence),
    )
