"""Chat stream API backend using FastAPI + Mangum for AWS Lambda."""

import logging

from fastapi import APIRouter, FastAPI, HTTPException
from fastapi.responses import StreamingResponse
from mangum import Mangum
from starlette.background import BackgroundTask

from chat_stream.errors import BadRequestError, NoModelsAvailableError
from chat_stream.infra.runtime import (
    ensure_langsmith_configured,
    flush_langsmith_traces,
    get_chat_service,
    get_provider_registry,
)
from chat_stream.prompts import PromptLibrary
from chat_stream.schemas import ChatStreamRequest, ModelInfo, PromptInfo, StreamResponse
from chat_stream.usage import StreamCallbacks

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

app = FastAPI()
router = APIRouter(prefix="/api")


def _log_usage(response: StreamResponse) -> None:
    if response.usage is None:
        return
    logger.info(
        "Chat usage recorded",
        extra={
            "prompt_tokens": response.usage.prompt_tokens,
            "completion_tokens": response.usage.completion_tokens,
            "total_tokens": response.usage.total_tokens,
        },
    )


@router.post("/chat")
async def chat(request: ChatStreamRequest) -> StreamingResponse:
    """Stream an assistant reply as plain text."""
    ensure_langsmith_configured()
    try:
        handle = await get_chat_service().stream_chat(
            request, callbacks=StreamCallbacks(on_response=_log_usage)
        )
    except BadRequestError as e:
        flush_langsmith_traces()
        raise HTTPException(status_code=400, detail=str(e)) from e
    except NoModelsAvailableError as e:
        flush_langsmith_traces()
        raise HTTPException(status_code=503, detail=str(e)) from e
    except Exception as e:
        logger.exception("Chat stream setup failed")
        flush_langsmith_traces()
        raise HTTPException(status_code=502, detail=str(e)) from e

    return StreamingResponse(
        handle,
        media_type="text/plain; charset=utf-8",
        background=BackgroundTask(flush_langsmith_traces),
    )


@router.get("/models", response_model=list[ModelInfo])
def models() -> list[ModelInfo]:
    """List statically known models across providers."""
    return get_provider_registry().static_models()


@router.get("/prompts", response_model=list[PromptInfo])
def prompts() -> list[PromptInfo]:
    return PromptLibrary().list_prompts()


@router.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


app.include_router(router)


handler = Mangum(app)
