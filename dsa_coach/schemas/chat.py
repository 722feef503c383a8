from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from dsa_coach.schemas.problems import ProblemDetails


class ChatTurn(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["system", "user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    leetcode_url: Optional[str] = Field(default=None, alias="leetcodeUrl")
    chat_history: List[ChatTurn] = Field(default_factory=list, alias="chatHistory")
    provider: Optional[str] = None
    session_id: Optional[str] = Field(default=None, alias="sessionId")


class ChatResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    response: str
    provider: Optional[str] = None
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    problem: Optional[ProblemDetails] = None


class UrlValidationRequest(BaseModel):
    url: str


class UrlValidationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_valid: bool = Field(alias="isValid")
    title_slug: Optional[str] = Field(default=None, alias="titleSlug")


class ChatHistoryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    session_id: str = Field(alias="sessionId")
    messages: List[ChatTurn] = Field(default_factory=list)
    introduced_titles: List[str] = Field(default_factory=list, alias="introducedTitles")
