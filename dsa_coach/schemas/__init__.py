from dsa_coach.schemas.chat import (
    ChatHistoryResponse,
    ChatRequest,
    ChatResponse,
    ChatTurn,
    UrlValidationRequest,
    UrlValidationResponse,
)
from dsa_coach.schemas.problems import ProblemDetails, ProblemExample, ProblemSummary, ProblemValidation

__all__ = [
    "ChatHistoryResponse",
    "ChatRequest",
    "ChatResponse",
    "ChatTurn",
    "UrlValidationRequest",
    "UrlValidationResponse",
    "ProblemDetails",
    "ProblemExample",
    "ProblemSummary",
    "ProblemValidation",
]
