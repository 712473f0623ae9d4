import logging
import time

from fastapi import APIRouter, BackgroundTasks, Depends, Request

from finchat.api.deps import ChatServiceDep, UsageTrackerDep
from finchat.core.rate_limit import enforce_chat_rate_limit, get_client_id
from finchat.schemas.chat import ChatRequest, ChatResponse
from finchat.services.usage_tracking import estimate_token_count

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Chat"])


@router.post(
    "/chat",
    response_model=ChatResponse,
    dependencies=[Depends(enforce_chat_rate_limit)],
)
async def chat(
    payload: ChatRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    chat_service: ChatServiceDep,
    tracker: UsageTrackerDep,
) -> ChatResponse:
    """Answer a finance question.

    The per-client rate limit is checked first (429 when exhausted). Usage is
    recorded in the background after the response is sent.

    Raises:
        ValidationAppError: 400 when the message is empty or too long.
        LLMAppError: 500 when the provider is unavailable or fails.
    """
    start = time.perf_counter()
    client_id = get_client_id(request)

    reply = await chat_service.reply(payload.message, payload.conversation_history)

    duration_ms = int((time.perf_counter() - start) * 1000)
    model = chat_service.model
    logger.info("chat.completed", extra={"model": model, "duration_ms": duration_ms})

    background_tasks.add_task(
        tracker.track_chat,
        client_id,
        estimate_token_count(payload.message),
        estimate_token_count(reply),
        model,
        duration_ms,
    )

    return ChatResponse(message=reply)
