# FastAPI backend for the AI Shopping Assistant
# Handles chat turns (text plus optional image), rating feedback and health checks
import logging
import time
from collections import Counter, deque
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Deque, Dict

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from assistant.config import load_settings
from assistant.errors import ConfigurationMissing, InternalError, ValidationError
from assistant.images import decode_image_data
from assistant.models import ChatBody, ChatRequest, ChatResponse, FeedbackBody, FeedbackResponse
from assistant.oracle import GeminiClient
from assistant.orchestrator import FALLBACK_SOURCE, ShoppingAssistant
from assistant.prompts import BOUNDARY_FALLBACK_REPLY, INTERNAL_ERROR_REPLY

BASE_DIR = Path(__file__).resolve().parent
ENV_PATH = BASE_DIR / ".env"
if ENV_PATH.exists():
    load_dotenv(ENV_PATH)

settings = load_settings()

if not logging.getLogger().handlers:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
logger = logging.getLogger("shopping_assistant")

# app

APP_VERSION = "2.0.0"
app = FastAPI(title="AI Shopping Assistant API", version=APP_VERSION)

# Include evaluation API endpoints
try:
    from evaluation.api_endpoints import router as eval_router
    app.include_router(eval_router, prefix="/api/eval", tags=["evaluation"])
except ImportError as e:
    logger.warning("Could not load evaluation endpoints: %s", e)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.allowed_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

ENDPOINTS = {
    "chat": "POST /api/chat",
    "feedback": "POST /api/feedback",
    "health": "GET /api/health",
}
FEATURES = {
    "voiceSupport": True,
    "visualSearch": True,
    "qualityRanking": True,
    "purchaseIntent": True,
}

# Process wide diagnostics, append only and bounded
STARTED_AT = time.monotonic()
REPLIES_BY_SOURCE: Counter = Counter()
FEEDBACK_LOG_SIZE = 1000
FEEDBACK_LOG: Deque[Dict[str, Any]] = deque(maxlen=FEEDBACK_LOG_SIZE)

ASSISTANT: ShoppingAssistant | None = None


def _get_assistant() -> ShoppingAssistant:
    global ASSISTANT
    if ASSISTANT is None:
        try:
            oracle = GeminiClient(settings)
        except ConfigurationMissing:
            logger.warning("AI_API_KEY not set, running in fallback mode")
            oracle = None
        ASSISTANT = ShoppingAssistant(oracle=oracle, provider=settings.ai_provider)
    return ASSISTANT


@app.on_event("startup")
def startup():
    assistant = _get_assistant()
    logger.info(
        "AI Shopping Assistant started provider=%s model=%s key=%s",
        settings.ai_provider,
        settings.ai_model,
        "configured" if assistant.configured else "not set (fallback mode)",
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Malformed JSON bodies are reported as 400 like every other validation failure
    return _bad_request("Invalid request body")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and exc.detail == "Not Found":
        return JSONResponse(
            status_code=404,
            content={"error": "Route not found", "availableEndpoints": ["/api/chat", "/api/feedback", "/api/health"]},
        )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={**InternalError().to_dict(), "reply": INTERNAL_ERROR_REPLY},
    )


@app.get("/")
def root():
    return {
        "message": "AI Shopping Assistant API",
        "version": APP_VERSION,
        "features": [
            "Voice Input/Output Support",
            "Visual Product Search",
            "Response Quality Ranking",
            "Purchase Intent Analysis",
            "User Feedback System",
        ],
        "endpoints": ENDPOINTS,
    }


@app.get("/api/health")
def health():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": APP_VERSION,
        "provider": settings.ai_provider,
        "model": settings.ai_model,
        "oracle_configured": _get_assistant().configured,
        "uptime": time.monotonic() - STARTED_AT,
        "features": FEATURES,
        "replies_by_source": dict(REPLIES_BY_SOURCE),
    }


@app.post("/api/chat", response_model=ChatResponse)
def chat(body: ChatBody):
    # Validation failures are the only errors the caller ever sees
    if not isinstance(body.message, str) or not body.message:
        logger.info("Rejected chat request without a message")
        return _bad_request("Message is required")
    try:
        image = decode_image_data(body.image_data, settings.max_image_bytes) if body.image_data else None
    except ValidationError as e:
        logger.info("Rejected chat request: %s", e.message)
        return _bad_request(e.message)

    try:
        result = _get_assistant().handle(ChatRequest(user_text=body.message, image=image))
        response = ChatResponse.from_result(result)
    except ValidationError as e:
        return _bad_request(e.message)
    except Exception:
        logger.exception("Assistant failed, answering with fallback")
        response = ChatResponse(reply=BOUNDARY_FALLBACK_REPLY, source=FALLBACK_SOURCE)

    REPLIES_BY_SOURCE[response.source] += 1
    logger.info(
        "Reply sent source=%s metrics=%s intent=%s",
        response.source, response.quality_metrics is not None, response.purchase_intent is not None,
    )
    return response


@app.post("/api/feedback", response_model=FeedbackResponse)
def feedback(body: FeedbackBody):
    # Ratings are only recorded, nothing reads them back
    if not body.message_id or not body.rating:
        return _bad_request("messageId and rating are required")
    entry = {
        "message_id": body.message_id,
        "rating": body.rating,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    FEEDBACK_LOG.append(entry)
    logger.info("Feedback received message_id=%s rating=%s", body.message_id, body.rating)
    return FeedbackResponse(success=True, message="Thank you for your feedback!")
