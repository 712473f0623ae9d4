import logging
import time

from fastapi import APIRouter, BackgroundTasks, Request, Response

from finchat.api.deps import SpeechServiceDep, UsageTrackerDep
from finchat.core.rate_limit import get_client_id
from finchat.schemas.tts import TTSRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Speech"])


@router.post(
    "/tts",
    response_class=Response,
    responses={200: {"content": {"audio/mpeg": {}}, "description": "MP3 audio"}},
)
async def text_to_speech(
    payload: TTSRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    speech_service: SpeechServiceDep,
    tracker: UsageTrackerDep,
) -> Response:
    """Synthesize speech for a piece of text and return MP3 bytes."""
    start = time.perf_counter()
    client_id = get_client_id(request)

    audio = await speech_service.synthesize(payload.text, voice=payload.voice, speed=payload.speed)

    duration_ms = int((time.perf_counter() - start) * 1000)
    logger.info("tts.completed", extra={"audio_bytes": len(audio), "duration_ms": duration_ms})

    background_tasks.add_task(
        tracker.track_tts,
        client_id,
        len(payload.text),
        speech_service.model,
        duration_ms,
    )

    return Response(content=audio, media_type="audio/mpeg")
