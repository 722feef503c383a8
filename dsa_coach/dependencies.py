from functools import lru_cache
from typing import Optional

import httpx
from fastapi import Depends, Request
from redis import asyncio as aioredis
from redis.asyncio import Redis

from dsa_coach.core.config import settings
from dsa_coach.db.session import get_session
from dsa_coach.services.cache import CacheService
from dsa_coach.services.catalog import LeetCodeCatalog
from dsa_coach.services.coach import CoachPipeline
from dsa_coach.services.context import ProblemContextResolver
from dsa_coach.services.history import ChatHistoryStore
from dsa_coach.services.providers import ProviderDispatcher, SamplingOptions, build_dispatcher

_redis_client: Redis | None = None
_http_client: httpx.AsyncClient | None = None


async def get_redis_client() -> Redis:
    global _redis_client  # noqa: PLW0603 - module-level cache is intentional
    if _redis_client is None:
        _redis_client = aioredis.from_url(settings.redis_url, decode_responses=True)
    return _redis_client


async def get_http_client() -> httpx.AsyncClient:
    global _http_client  # noqa: PLW0603 - module-level cache is intentional
    if _http_client is None:
        _http_client = httpx.AsyncClient(timeout=settings.catalog_timeout_seconds)
    return _http_client


async def close_clients() -> None:
    global _redis_client, _http_client  # noqa: PLW0603
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None


async def get_cache_service(
    redis_client=Depends(get_redis_client),
) -> CacheService:
    return CacheService(redis_client)


async def get_catalog(
    client: httpx.AsyncClient = Depends(get_http_client),
    cache: CacheService = Depends(get_cache_service),
) -> LeetCodeCatalog:
    return LeetCodeCatalog(client=client, cache=cache)


@lru_cache
def get_dispatcher() -> ProviderDispatcher:
    return build_dispatcher(settings)


def get_history_store(request: Request) -> Optional[ChatHistoryStore]:
    if not settings.persist_chat_history:
        return None
    if not getattr(request.app.state, "database_available", False):
        return None
    return ChatHistoryStore(session_factory=get_session)


async def get_coach_pipeline(
    catalog: LeetCodeCatalog = Depends(get_catalog),
    dispatcher: ProviderDispatcher = Depends(get_dispatcher),
    history_store: Optional[ChatHistoryStore] = Depends(get_history_store),
) -> CoachPipeline:
    return CoachPipeline(
        resolver=ProblemContextResolver(catalog),
        dispatcher=dispatcher,
        history_store=history_store,
        options=SamplingOptions(temperature=settings.llm_temperature, max_tokens=settings.llm_max_tokens),
        track_introductions=settings.track_introduced_problems,
    )
