"""Error types raised by the shopping assistant

Only ValidationError ever reaches the HTTP caller. The others are absorbed
and turned into a fallback or apology reply.
"""

from __future__ import annotations
from typing import Any, Dict, Optional


class AssistantError(Exception):
    """Base class for assistant errors

    Attributes:
        code: Short error code for identification
        message: Human readable error message
    """

    code: str = "ASSISTANT_ERROR"
    message: str = "The assistant could not handle the request"

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None, **extra: Any):
        self.message = message or self.message
        self.code = code or self.code
        self.extra = extra
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "code": self.code, **self.extra}


class ValidationError(AssistantError):
    """Malformed request, surfaced to the caller as a 400"""
    code = "INVALID_REQUEST"
    message = "Message is required"


class ConfigurationMissing(AssistantError):
    """No oracle credential, the assistant degrades to its fallback reply"""
    code = "CONFIGURATION_MISSING"
    message = "AI_API_KEY is not configured"


class OracleError(AssistantError):
    """Network, timeout, non 2xx or malformed payload from the AI provider"""
    code = "ORACLE_ERROR"
    message = "The AI service failed to respond"


class InternalError(AssistantError):
    code = "INTERNAL_ERROR"
    message = "Internal server error"
