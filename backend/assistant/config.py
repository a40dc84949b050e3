from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Tuple

DEFAULT_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173"


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the assistant and its AI provider"""
    ai_api_key: str
    ai_model: str
    ai_provider: str
    ai_timeout_seconds: float
    max_image_bytes: int
    allowed_origins: Tuple[str, ...]
    log_level: str

    @property
    def oracle_configured(self) -> bool:
        return bool(self.ai_api_key.strip())


def load_settings() -> Settings:
    """Build Settings from environment variables

    A missing AI_API_KEY is a valid state: the assistant then answers with its
    fallback reply. Invalid numeric values raise ValueError.
    """
    origins = os.getenv("ALLOWED_ORIGINS", DEFAULT_ORIGINS)
    return Settings(
        ai_api_key=os.getenv("AI_API_KEY", ""),
        ai_model=(os.getenv("AI_MODEL") or "gemini-1.5-flash").strip(),
        ai_provider=(os.getenv("AI_PROVIDER") or "gemini").strip().lower(),
        ai_timeout_seconds=float(os.getenv("AI_TIMEOUT_SECONDS", "30")),
        max_image_bytes=int(os.getenv("MAX_IMAGE_BYTES", str(4 * 1024 * 1024))),
        allowed_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
