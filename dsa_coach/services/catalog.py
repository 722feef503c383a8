from __future__ import annotations

import html
import logging
import re
from typing import Any, Dict, List, Optional, Protocol

import httpx
from pydantic import ValidationError

from dsa_coach.core.config import settings
from dsa_coach.core.errors import ProblemNotFound, UpstreamLookupFailure
from dsa_coach.schemas.problems import ProblemDetails, ProblemExample, ProblemSummary
from dsa_coach.services.cache import CacheService
from dsa_coach.services.html import strip_html

logger = logging.getLogger(__name__)

SEARCH_QUERY = """
query problemsetQuestionList($categorySlug: String, $limit: Int, $skip: Int, $filters: QuestionListFilterInput) {
  problemsetQuestionList: questionList(categorySlug: $categorySlug, limit: $limit, skip: $skip, filters: $filters) {
    questions: data {
      title
      titleSlug
      difficulty
      paidOnly: isPaidOnly
    }
  }
}
"""

DETAILS_QUERY = """
query questionData($titleSlug: String!) {
  question(titleSlug: $titleSlug) {
    title
    titleSlug
    difficulty
    content
  }
}
"""

_PROBLEM_URL_PATTERN = re.compile(r"^https?://(?:www\.)?leetcode\.(?:com|cn)/problems/([a-z0-9-]+)/?", re.IGNORECASE)
_EXAMPLE_PATTERN = re.compile(
    r"Input:\s*(?P<input>.+?)\s*Output:\s*(?P<output>.+?)"
    r"(?:\s*Explanation:\s*(?P<explanation>.+?))?"
    r"\s*(?=Example\s*\d+:|Constraints:|Follow[\s-]?up|$)",
    re.DOTALL,
)
_CONSTRAINTS_PATTERN = re.compile(r"Constraints:.*?<ul>(?P<items>.*?)</ul>", re.DOTALL)
_LIST_ITEM_PATTERN = re.compile(r"<li>(.*?)</li>", re.DOTALL)


class ProblemCatalog(Protocol):
    async def search(self, query: str) -> List[ProblemSummary]: ...

    async def get_details(self, title_slug: str) -> ProblemDetails: ...


def extract_title_slug(url: str) -> Optional[str]:
    match = _PROBLEM_URL_PATTERN.match(url.strip())
    if match is None:
        return None
    return match.group(1).lower()


def _plain_text(fragment: str) -> str:
    return html.unescape(strip_html(fragment.replace("<sup>", "^"))).strip()


def parse_examples(content: str) -> List[ProblemExample]:
    text = html.unescape(strip_html(content))
    examples: List[ProblemExample] = []
    for match in _EXAMPLE_PATTERN.finditer(text):
        explanation = match.group("explanation")
        examples.append(
            ProblemExample(
                input=match.group("input").strip(),
                output=match.group("output").strip(),
                explanation=explanation.strip() if explanation else None,
            ),
        )
    return examples


def parse_constraints(content: str) -> List[str]:
    section = _CONSTRAINTS_PATTERN.search(content)
    if section is None:
        return []
    items = (_plain_text(item) for item in _LIST_ITEM_PATTERN.findall(section.group("items")))
    return [item for item in items if item]


class LeetCodeCatalog:
    """
    Read-only client for the LeetCode GraphQL API.

    Problem details are cached when a ``CacheService`` is supplied; searches are not.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        cache: Optional[CacheService] = None,
        graphql_url: Optional[str] = None,
        search_limit: Optional[int] = None,
    ) -> None:
        self._client = client
        self._cache = cache
        self._graphql_url = graphql_url or settings.leetcode_graphql_url
        self._search_limit = search_limit or settings.catalog_search_limit

    async def _execute(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = await self._client.post(
                self._graphql_url,
                json={"query": query, "variables": variables},
                headers={"Referer": "https://leetcode.com", "Content-Type": "application/json"},
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise UpstreamLookupFailure(f"LeetCode request failed: {exc}") from exc

        if not isinstance(payload, dict):
            raise UpstreamLookupFailure("LeetCode returned a malformed response")
        errors = payload.get("errors")
        if errors:
            first = errors[0] if isinstance(errors, list) and errors else {}
            message = first.get("message", "unknown error") if isinstance(first, dict) else str(first)
            raise UpstreamLookupFailure(f"LeetCode returned an error: {message}")
        data = payload.get("data")
        return data if isinstance(data, dict) else {}

    async def search(self, query: str) -> List[ProblemSummary]:
        data = await self._execute(
            SEARCH_QUERY,
            {
                "categorySlug": "",
                "skip": 0,
                "limit": self._search_limit,
                "filters": {"searchKeywords": query},
            },
        )
        try:
            questions = (data.get("problemsetQuestionList") or {}).get("questions") or []
            return [ProblemSummary.model_validate(question) for question in questions]
        except (AttributeError, TypeError, ValidationError) as exc:
            raise UpstreamLookupFailure(f"Unexpected search payload for {query!r}") from exc

    async def get_details(self, title_slug: str) -> ProblemDetails:
        cache_key = CacheService.build_key("problem", {"titleSlug": title_slug})
        if self._cache is not None:
            cached = await self._cache.get(cache_key)
            if cached:
                try:
                    return ProblemDetails.model_validate(cached)
                except ValidationError:
                    logger.warning("Ignoring stale cache entry for %s", title_slug)

        data = await self._execute(DETAILS_QUERY, {"titleSlug": title_slug})
        question = data.get("question")
        if not question:
            raise ProblemNotFound(title_slug)
        if not isinstance(question, dict):
            raise UpstreamLookupFailure(f"Unexpected problem payload for '{title_slug}'")

        content = question.get("content") or ""
        try:
            problem = ProblemDetails(
                title_slug=question["titleSlug"],
                title=question["title"],
                difficulty=question["difficulty"],
                content=content,
                examples=parse_examples(content),
                constraints=parse_constraints(content),
            )
        except (KeyError, TypeError, ValidationError) as exc:
            raise UpstreamLookupFailure(f"Unexpected problem payload for '{title_slug}'") from exc

        if self._cache is not None:
            await self._cache.set(cache_key, problem.model_dump(by_alias=True))
        return problem

    async def exists(self, title_slug: str) -> bool:
        try:
            await self.get_details(title_slug)
        except ProblemNotFound:
            return False
        return True
