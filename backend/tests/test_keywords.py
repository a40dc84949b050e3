from assistant.keywords import KEYWORD_RULES, find_rule, match_keyword

GREETING = KEYWORD_RULES[0].reply

# Greeting is the first rule so any "hello" wins
def test_hello_any_case_returns_greeting():
    for text in ["hello", "HELLO there", "  Oh, Hello!  ", "hello, what is your return policy"]:
        assert match_keyword(text) == GREETING

def test_rule_order_is_priority_order():
    assert [r.tag for r in KEYWORD_RULES] == [
        "greeting", "pricing", "suggestion", "returns", "shipping", "warranty", "availability", "thanks",
    ]

def test_each_rule_matches_its_own_phrase():
    assert find_rule("How much does the blender cost?").tag == "pricing"
    assert find_rule("Can you suggest a gift for my dad").tag == "suggestion"
    assert find_rule("I want a refund").tag == "returns"
    assert find_rule("track my delivery").tag == "shipping"
    assert find_rule("my speaker is broken").tag == "warranty"
    assert find_rule("do you carry it in a larger size").tag == "availability"
    assert find_rule("thanks a lot").tag == "thanks"

# Substring matching means "hi" inside "shipping" fires the greeting first
def test_substring_match_inside_words():
    assert find_rule("what are your shipping options").tag == "greeting"

def test_no_match_returns_none():
    assert match_keyword("xyzzy random text") is None
    assert find_rule("") is None
