import pytest
from assistant.config import load_settings

def test_defaults_without_env(monkeypatch):
    for name in ["AI_API_KEY", "AI_MODEL", "AI_PROVIDER", "AI_TIMEOUT_SECONDS", "MAX_IMAGE_BYTES", "ALLOWED_ORIGINS", "LOG_LEVEL"]:
        monkeypatch.delenv(name, raising=False)
    s = load_settings()
    assert s.ai_api_key == ""
    assert s.oracle_configured is False
    assert s.ai_model == "gemini-1.5-flash"
    assert s.ai_provider == "gemini"
    assert s.ai_timeout_seconds == 30.0
    assert s.max_image_bytes == 4 * 1024 * 1024
    assert "http://localhost:3000" in s.allowed_origins
    assert s.log_level == "INFO"

def test_overrides_from_env(monkeypatch):
    monkeypatch.setenv("AI_API_KEY", "abc")
    monkeypatch.setenv("AI_MODEL", " gemini-2.0-flash ")
    monkeypatch.setenv("AI_PROVIDER", "Gemini")
    monkeypatch.setenv("AI_TIMEOUT_SECONDS", "5")
    monkeypatch.setenv("ALLOWED_ORIGINS", "http://a.test, http://b.test,")
    s = load_settings()
    assert s.oracle_configured is True
    assert s.ai_model == "gemini-2.0-flash"
    assert s.ai_provider == "gemini"
    assert s.ai_timeout_seconds == 5.0
    assert s.allowed_origins == ("http://a.test", "http://b.test")

def test_invalid_number_raises(monkeypatch):
    monkeypatch.setenv("MAX_IMAGE_BYTES", "lots")
    with pytest.raises(ValueError):
        load_settings()
