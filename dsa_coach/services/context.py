from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Collection, Optional, Sequence

from dsa_coach.core.config import settings
from dsa_coach.core.errors import UpstreamLookupFailure
from dsa_coach.schemas.chat import ChatTurn
from dsa_coach.schemas.problems import ProblemDetails
from dsa_coach.services.catalog import ProblemCatalog, extract_title_slug
from dsa_coach.services.formatter import introduction_marker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProblemContext:
    problem: Optional[ProblemDetails] = None
    is_new: bool = False


def build_search_phrase(message: str, word_count: int) -> str:
    return " ".join(message.lower().split()[:word_count])


def is_problem_introduced(
    problem: ProblemDetails,
    history: Sequence[ChatTurn],
    introduced_titles: Collection[str] = (),
) -> bool:
    if problem.title in introduced_titles:
        return True
    marker = introduction_marker(problem.title)
    return any(marker in turn.content for turn in history)


class ProblemContextResolver:
    """
    Decides which problem, if any, a chat turn is about and whether it is being
    surfaced for the first time.

    Catalog failures never escape: the conversation simply continues without
    problem context.
    """

    def __init__(self, catalog: ProblemCatalog, search_words: Optional[int] = None) -> None:
        self._catalog = catalog
        self._search_words = search_words or settings.search_phrase_words

    async def _fetch(self, title_slug: str) -> Optional[ProblemDetails]:
        try:
            return await self._catalog.get_details(title_slug)
        except UpstreamLookupFailure as exc:
            logger.warning("Problem lookup for %s failed: %s", title_slug, exc)
            return None

    async def _search(self, message: str) -> Optional[ProblemDetails]:
        phrase = build_search_phrase(message, self._search_words)
        if not phrase:
            return None
        try:
            results = await self._catalog.search(phrase)
        except UpstreamLookupFailure as exc:
            logger.warning("Problem search for %r failed: %s", phrase, exc)
            return None
        if not results:
            return None
        return await self._fetch(results[0].title_slug)

    async def resolve(
        self,
        message: str,
        leetcode_url: Optional[str],
        history: Sequence[ChatTurn],
        problem_details: Optional[ProblemDetails] = None,
        introduced_titles: Collection[str] = (),
    ) -> ProblemContext:
        problem = problem_details
        if problem is None and leetcode_url:
            title_slug = extract_title_slug(leetcode_url)
            if title_slug:
                problem = await self._fetch(title_slug)
            else:
                logger.info("Ignoring unrecognised problem URL %s", leetcode_url)

        if problem is not None:
            is_new = bool(history) and not is_problem_introduced(problem, history, introduced_titles)
            return ProblemContext(problem=problem, is_new=is_new)

        if not leetcode_url:
            found = await self._search(message)
            if found is not None:
                return ProblemContext(problem=found, is_new=True)

        return ProblemContext()
