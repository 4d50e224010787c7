from fastapi import APIRouter
import datetime
import tzlocal # type: ignore

from todo_api.common.config import Config

router = APIRouter(tags=["health"])


@router.get("/")
async def root() -> dict[str, str]:
    """Indicates if the server is alive"""
    return {"message": f"Welcome to {Config.SERVICE_NAME}", "status": "running"}


@router.get("/health")
async def health() -> dict[str, str]:
    tz = tzlocal.get_localzone()
    return {
        "status": "UP",
        "timestamp": datetime.datetime.now(tz).isoformat(),
        "timezone": str(tz),
        "service": Config.SERVICE_NAME,
        "version": Config.APP_VERSION,
        "commit": Config.GIT_COMMIT,
    }


@router.get("/status")
async def status() -> dict[str, str]:
    return {"status": "OK"}
