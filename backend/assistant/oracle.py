from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol

import google.generativeai as genai

from .config import Settings
from .errors import ConfigurationMissing, OracleError
from .models import ImagePayload
from .prompts import SYSTEM_PROMPT, USER_TURN_TEMPLATE

logger = logging.getLogger(__name__)

GENERATION_CONFIG = {
    "temperature": 0.7,
    "max_output_tokens": 1024,
    "top_p": 0.95,
    "top_k": 40,
}

SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
]


class Oracle(Protocol):
    """Text (plus optional image) in, text out"""

    def generate(self, prompt: str, image: Optional[ImagePayload] = None) -> str:
        ...


class GeminiClient:
    """Thin wrapper around the Gemini SDK with a fixed system prompt and safety settings."""

    def __init__(self, settings: Settings) -> None:
        """Configure the SDK and create the model once.

        Raises ConfigurationMissing when no API key is set, so callers can
        fall back to running without an AI provider.
        """
        if not settings.oracle_configured:
            raise ConfigurationMissing()
        genai.configure(api_key=settings.ai_api_key.strip())
        self.model_name = _normalize_model_name(settings.ai_model)
        self.timeout = settings.ai_timeout_seconds
        self._model = genai.GenerativeModel(self.model_name, system_instruction=SYSTEM_PROMPT)

    def generate(self, prompt: str, image: Optional[ImagePayload] = None) -> str:
        """Send one user turn and return the first candidate's text.

        Every failure, including timeouts and blocked or empty candidates,
        is raised as OracleError.
        """
        parts = _build_parts(prompt, image)
        logger.info("Calling Gemini model=%s prompt_chars=%d image=%s", self.model_name, len(prompt), image is not None)
        try:
            response = self._model.generate_content(
                [{"role": "user", "parts": parts}],
                generation_config=GENERATION_CONFIG,
                safety_settings=SAFETY_SETTINGS,
                request_options={"timeout": self.timeout},
            )
        except Exception as exc:
            raise OracleError(f"Gemini call failed: {exc}") from exc

        text = _extract_text(response)
        if not text:
            raise OracleError("Invalid response from Gemini")
        logger.debug("Gemini reply (first 100 chars): %s", text[:100])
        return text


def _build_parts(prompt: str, image: Optional[ImagePayload]) -> List[Dict[str, Any]]:
    parts: List[Dict[str, Any]] = [{"text": USER_TURN_TEMPLATE.format(message=prompt)}]
    if image is not None:
        parts.append({"inline_data": {"mime_type": image.mime_type, "data": image.data}})
    return parts


def _extract_text(response: Any) -> str:
    # response.text raises ValueError when the candidate was blocked or has no parts
    try:
        text: Optional[str] = response.text
    except (ValueError, AttributeError, IndexError) as exc:
        raise OracleError(f"Invalid response from Gemini: {exc}") from exc
    return (text or "").strip()


def _normalize_model_name(name: Optional[str]) -> str:
    """Strip whitespace and a leading "models/" prefix."""
    if not name:
        return ""
    cleaned = name.strip()
    if cleaned.startswith("models/"):
        return cleaned.split("/", 1)[1]
    return cleaned
