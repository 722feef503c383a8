from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from dsa_coach.db.base import DATABASE_ERRORS
from dsa_coach.dependencies import get_coach_pipeline, get_history_store
from dsa_coach.schemas.chat import (
    ChatHistoryResponse,
    ChatRequest,
    ChatResponse,
    UrlValidationRequest,
    UrlValidationResponse,
)
from dsa_coach.services.catalog import extract_title_slug
from dsa_coach.services.coach import CoachPipeline
from dsa_coach.services.history import ChatHistoryStore

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("", response_model=ChatResponse)
async def handle_chat(
    request: ChatRequest,
    pipeline: CoachPipeline = Depends(get_coach_pipeline),
) -> ChatResponse:
    if not request.message.strip():
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Message cannot be empty.")

    return await pipeline.run(request)


@router.post("/validate-url", response_model=UrlValidationResponse)
async def validate_leetcode_url(request: UrlValidationRequest) -> UrlValidationResponse:
    title_slug = extract_title_slug(request.url)
    return UrlValidationResponse(is_valid=title_slug is not None, title_slug=title_slug)


@router.get("/{session_id}", response_model=ChatHistoryResponse)
async def get_chat_history(
    session_id: str,
    store: Optional[ChatHistoryStore] = Depends(get_history_store),
) -> ChatHistoryResponse:
    if store is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Chat history is unavailable.")

    try:
        conversation = await store.load(session_id)
    except DATABASE_ERRORS as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Chat history is unavailable.") from exc

    if conversation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Chat session not found.")

    return ChatHistoryResponse(
        session_id=conversation.session_id,
        messages=conversation.messages,
        introduced_titles=conversation.introduced_titles,
    )
