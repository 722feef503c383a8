from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

import pytest

from dsa_coach.core.errors import ProblemNotFound, UpstreamLookupFailure
from dsa_coach.schemas.chat import ChatTurn
from dsa_coach.schemas.problems import ProblemDetails, ProblemExample, ProblemSummary
from dsa_coach.services.providers import ProviderDispatcher, SamplingOptions


class FakeCatalog:
    def __init__(
        self,
        problems: Iterable[ProblemDetails] = (),
        search_results: Optional[Dict[str, List[str]]] = None,
        fail: bool = False,
    ) -> None:
        self.problems = {problem.title_slug: problem for problem in problems}
        self.search_results = search_results or {}
        self.fail = fail
        self.searches: List[str] = []
        self.fetches: List[str] = []

    async def search(self, query: str) -> List[ProblemSummary]:
        self.searches.append(query)
        if self.fail:
            raise UpstreamLookupFailure("catalog is down")
        return [ProblemSummary(title_slug=slug) for slug in self.search_results.get(query, [])]

    async def get_details(self, title_slug: str) -> ProblemDetails:
        self.fetches.append(title_slug)
        if self.fail:
            raise UpstreamLookupFailure("catalog is down")
        if title_slug not in self.problems:
            raise ProblemNotFound(title_slug)
        return self.problems[title_slug]

    async def exists(self, title_slug: str) -> bool:
        try:
            await self.get_details(title_slug)
        except ProblemNotFound:
            return False
        return True


class RecordingBackend:
    def __init__(self, name: str, reply: str = "", error: Optional[Exception] = None) -> None:
        self.name = name
        self.reply = reply or f"reply from {name}"
        self.error = error
        self.calls: List[tuple[List[ChatTurn], SamplingOptions]] = []

    async def complete(self, messages: Sequence[ChatTurn], options: SamplingOptions) -> str:
        self.calls.append((list(messages), options))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def two_sum() -> ProblemDetails:
    return ProblemDetails(
        title_slug="two-sum",
        title="Two Sum",
        difficulty="Easy",
        content="<p>Find two numbers...</p>",
        examples=[ProblemExample(input="nums = [2,7,11,15], target = 9", output="[0,1]")],
        constraints=["2 <= nums.length <= 10^4", "Only one valid answer exists."],
    )


@pytest.fixture
def backends() -> Dict[str, RecordingBackend]:
    return {name: RecordingBackend(name) for name in ("gemini", "openai", "megallm", "groq")}


@pytest.fixture
def dispatcher(backends: Dict[str, RecordingBackend]) -> ProviderDispatcher:
    return ProviderDispatcher(backends, default_provider="groq")
