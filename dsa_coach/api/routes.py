from fastapi import APIRouter

from dsa_coach.api import api_router
from dsa_coach.api.endpoints.chat import router as chat_router
from dsa_coach.api.endpoints.problems import router as problems_router

router = APIRouter()


@router.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """
    Liveness check; does not touch the database or any upstream service.
    """

    return {"status": "ok", "message": "Server is running"}


api_router.include_router(router)
api_router.include_router(chat_router)
api_router.include_router(problems_router)
