from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from agents import assistant_agent
from core.config import Settings, load_settings
from core.errors import AssistantError, InputError
from core.llm import ChatModel
from core.logging_config import configure_logging, get_logger
from core.models import AssistantRequest
from core.store import SupabaseStore
from policy.pip import bearer_token


@lru_cache
def get_settings() -> Settings:
    return load_settings()


_settings = get_settings()
configure_logging(_settings.log_level, format_json=_settings.log_json)
log = get_logger(__name__)

app = FastAPI(title="Planmoni AI Assistant", version="1.0")

# Browser-hosted clients (Expo web) call the API cross-origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

MALFORMED_BODY_MESSAGE = (
    "Something went wrong sending your message. Please update the app and try again."
)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


@app.get("/health")
def health():
    return {"ok": True}


# -----------------------------
# Dependencies
# -----------------------------
def get_store(
    settings: Settings = Depends(get_settings),
    authorization: Optional[str] = Header(None),
) -> Optional[SupabaseStore]:
    if not settings.has_store:
        return None
    return SupabaseStore(
        settings.supabase_url,
        settings.supabase_key,
        access_token=bearer_token(authorization),
        timeout=settings.timeout_seconds,
    )


def get_chat_model(settings: Settings = Depends(get_settings)) -> Optional[ChatModel]:
    if not settings.has_llm:
        return None
    return ChatModel(settings.openai_api_key, model=settings.openai_model, timeout=settings.timeout_seconds)


def error_response(exc: AssistantError) -> JSONResponse:
    return JSONResponse(exc.to_body(), status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def invalid_body(request: Request, exc: RequestValidationError):
    log.info("request_body_invalid", errors=len(exc.errors()))
    return error_response(InputError("Invalid request body", MALFORMED_BODY_MESSAGE))


# -----------------------------
# API: AI assistant
# -----------------------------
@app.options("/api/ai-assistant")
def ai_assistant_preflight():
    return Response(status_code=204, headers=CORS_HEADERS)


@app.post("/api/ai-assistant")
async def ai_assistant(
    req: AssistantRequest,
    authorization: Optional[str] = Header(None),
    store: Optional[SupabaseStore] = Depends(get_store),
    chat_model: Optional[ChatModel] = Depends(get_chat_model),
):
    try:
        reply = await assistant_agent.answer(req, authorization, store, chat_model)
    except AssistantError as e:
        log.warning("assistant_request_failed", status_code=e.status_code, error=e.error)
        return error_response(e)
    except Exception:
        # the client always gets a body back, never a dropped connection
        log.exception("assistant_request_crashed")
        return error_response(AssistantError())

    return reply.to_body()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000)
