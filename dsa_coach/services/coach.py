from __future__ import annotations

import logging
from typing import Optional, Sequence

from dsa_coach.db.base import DATABASE_ERRORS
from dsa_coach.schemas.chat import ChatRequest, ChatResponse, ChatTurn
from dsa_coach.services.context import ProblemContextResolver
from dsa_coach.services.formatter import format_introduction
from dsa_coach.services.history import ChatHistoryStore, StoredConversation
from dsa_coach.services.prompts import build_messages
from dsa_coach.services.providers import ProviderDispatcher, SamplingOptions

logger = logging.getLogger(__name__)


class CoachPipeline:
    """
    Handles one chat turn: resolve problem context, then either introduce a newly
    detected problem or ask the selected provider for a coaching reply.

    With ``track_introductions`` enabled, titles already introduced in a stored
    session also suppress the introduction, even when the client history no
    longer contains it.
    """

    def __init__(
        self,
        resolver: ProblemContextResolver,
        dispatcher: ProviderDispatcher,
        history_store: Optional[ChatHistoryStore] = None,
        options: Optional[SamplingOptions] = None,
        track_introductions: bool = False,
    ) -> None:
        self._resolver = resolver
        self._dispatcher = dispatcher
        self._history_store = history_store
        self._options = options or SamplingOptions()
        self._track_introductions = track_introductions

    async def _load_session(self, session_id: Optional[str]) -> Optional[StoredConversation]:
        if not session_id or self._history_store is None:
            return None
        try:
            return await self._history_store.load(session_id)
        except DATABASE_ERRORS as exc:
            logger.warning("Could not load chat session %s: %s", session_id, exc)
            return None

    async def _record(
        self,
        session_id: Optional[str],
        turns: Sequence[ChatTurn],
        introduced_title: Optional[str],
    ) -> None:
        if not session_id or self._history_store is None:
            return
        try:
            await self._history_store.append(session_id, turns, introduced_title=introduced_title)
        except DATABASE_ERRORS as exc:
            logger.warning("Could not save chat session %s: %s", session_id, exc)

    async def run(self, request: ChatRequest) -> ChatResponse:
        stored = await self._load_session(request.session_id) if self._track_introductions else None
        context = await self._resolver.resolve(
            request.message,
            request.leetcode_url,
            request.chat_history,
            introduced_titles=stored.introduced_titles if stored else (),
        )

        provider: Optional[str] = None
        introduced_title: Optional[str] = None
        if context.is_new and context.problem is not None:
            reply = format_introduction(context.problem)
            introduced_title = context.problem.title
        else:
            messages = build_messages(request.message, context.problem, request.chat_history)
            provider = self._dispatcher.select(request.provider)
            reply = await self._dispatcher.dispatch(provider, messages, self._options)

        await self._record(
            request.session_id,
            [ChatTurn(role="user", content=request.message), ChatTurn(role="assistant", content=reply)],
            introduced_title,
        )

        return ChatResponse(
            response=reply,
            provider=provider,
            session_id=request.session_id,
            problem=context.problem,
        )
