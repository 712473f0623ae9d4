from fastapi import APIRouter

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe. Never contacts an AI provider, so it stays green without keys."""
    return {"status": "ok"}
