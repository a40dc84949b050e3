import pytest
from assistant.scoring import (
    KEYWORD_QUALITY_METRICS,
    analyze_purchase_intent,
    analyze_response_quality,
    likelihood_for_score,
    suggested_action_for,
)

# Purchase intent

def test_intent_all_signals_is_100():
    intent = analyze_purchase_intent("I need a laptop under $800 today")
    assert intent.score == 100
    assert intent.likelihood == "High"
    assert intent.suggested_action == "Show checkout assistance"

def test_intent_no_signals_is_0():
    intent = analyze_purchase_intent("xyzzy random text")
    assert intent.score == 0
    assert intent.likelihood == "Low"
    assert intent.suggested_action == "Continue browsing"

def test_intent_single_signals():
    assert analyze_purchase_intent("I need it asap").score == 40
    assert analyze_purchase_intent("what is the price").score == 30
    assert analyze_purchase_intent("show me cameras").score == 30
    assert analyze_purchase_intent("cheap headphones").score == 60

def test_intent_is_case_insensitive():
    assert analyze_purchase_intent("MACBOOK RIGHT NOW").score == 70

def test_intent_bounds_over_mixed_inputs():
    samples = ["", "now now now $5 $6 laptop phone", "hello", "Budget gaming PC ASAP", "??"]
    for text in samples:
        assert 0 <= analyze_purchase_intent(text).score <= 100

@pytest.mark.parametrize("score,expected", [
    (100, "High"), (61, "High"), (60, "Medium"), (31, "Medium"), (30, "Low"), (0, "Low"),
])
def test_likelihood_bands_are_strict(score, expected):
    assert likelihood_for_score(score) == expected

def test_suggested_action_follows_likelihood():
    assert suggested_action_for("High") == "Show checkout assistance"
    assert suggested_action_for("Medium") == "Continue browsing"
    assert suggested_action_for("Low") == "Continue browsing"

# Response quality

def test_quality_short_plain_reply():
    m = analyze_response_quality("Sure.")
    assert m.accuracy == pytest.approx(60.3)
    assert m.tone == 70
    assert m.safety == 95
    assert m.confidence == pytest.approx(65.15)

def test_quality_empty_reply_counts_one_word():
    m = analyze_response_quality("")
    assert m.accuracy == pytest.approx(60.3)
    assert m.confidence == pytest.approx(65.15)

def test_quality_details_and_structure_add_to_accuracy():
    m = analyze_response_quality("Ships in 3 days\n- free returns")
    # 6 words: 60 + 1.8 + 10 + 10
    assert m.accuracy == pytest.approx(81.8)

def test_quality_long_reply_caps_at_95():
    text = " ".join(["great"] * 120) + " $20 - would you like another option?"
    m = analyze_response_quality(text)
    assert m.accuracy == 95
    assert m.tone == 95
    assert m.confidence == 95

def test_quality_tone_counts_each_occurrence():
    m = analyze_response_quality("Great! I certainly recommend it 👍")
    # two positive, one professional, one emoji
    assert m.tone == 70 + 6 + 2 + 2

def test_quality_each_emoji_counts_once():
    # 🔹📦🎁👍 sit outside the BMP, ✨ does not; every glyph adds 2
    for glyph in "🔹📦✨🎁👍":
        assert analyze_response_quality(f"Thanks {glyph}").tone == 72
    assert analyze_response_quality("📦📦").tone == 74
    assert analyze_response_quality("Thanks 😊").tone == 70

def test_quality_hack_forces_safety_40_even_with_caution():
    m = analyze_response_quality("Caution: please consult a professional before you hack the device.")
    assert m.safety == 40

def test_quality_caveat_gives_full_safety():
    assert analyze_response_quality("Be careful with the battery.").safety == 100

def test_quality_confidence_call_to_action_and_options():
    m = analyze_response_quality("Let me know if you want another option")
    # 8 words: 65 + 1.2 + 10 + 5
    assert m.confidence == pytest.approx(81.2)

def test_quality_scores_stay_in_range():
    samples = ["", "x", "great " * 500, "steal " * 30, "risk\n$5 10% 3 items " * 40]
    for text in samples:
        m = analyze_response_quality(text)
        for value in (m.accuracy, m.tone, m.confidence):
            assert 0 <= value <= 95
        assert m.safety in (40, 95, 100)

def test_keyword_placeholder_metrics_are_fixed():
    assert KEYWORD_QUALITY_METRICS.model_dump() == {"accuracy": 95, "tone": 90, "safety": 100, "confidence": 95}
