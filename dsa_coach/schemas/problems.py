from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Difficulty = Literal["Easy", "Medium", "Hard"]


class ProblemExample(BaseModel):
    model_config = ConfigDict(frozen=True)

    input: str
    output: str
    explanation: Optional[str] = None


class ProblemSummary(BaseModel):
    """
    A single catalog search hit.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    title_slug: str = Field(alias="titleSlug")
    title: str = ""
    difficulty: Optional[Difficulty] = None
    paid_only: bool = Field(default=False, alias="paidOnly")


class ProblemDetails(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    title_slug: str = Field(alias="titleSlug")
    title: str
    difficulty: Difficulty
    content: str
    examples: List[ProblemExample] = Field(default_factory=list)
    constraints: List[str] = Field(default_factory=list)


class ProblemValidation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title_slug: str = Field(alias="titleSlug")
    exists: bool
