from fastapi import APIRouter

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("", summary="Liveness probe")
def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
