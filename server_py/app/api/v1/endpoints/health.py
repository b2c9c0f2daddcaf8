from datetime import datetime, timezone

from fastapi import APIRouter

from app.core.config import settings

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness probe."""
    return {
        "status": "OK",
        "message": f"{settings.PROJECT_NAME} is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
