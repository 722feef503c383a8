from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dsa_coach.models import ChatSession
from dsa_coach.schemas.chat import ChatTurn

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


@dataclass
class StoredConversation:
    session_id: str
    messages: List[ChatTurn] = field(default_factory=list)
    introduced_titles: List[str] = field(default_factory=list)


class ChatHistoryStore:
    """
    Stores conversations keyed by client session id.

    Database errors propagate; callers decide whether persistence is best-effort.
    """

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    @staticmethod
    async def _find(session: AsyncSession, session_id: str) -> Optional[ChatSession]:
        result = await session.execute(select(ChatSession).where(ChatSession.session_id == session_id))
        return result.scalar_one_or_none()

    async def load(self, session_id: str) -> Optional[StoredConversation]:
        async with self._session_factory() as session:
            record = await self._find(session, session_id)
            if record is None:
                return None
            return StoredConversation(
                session_id=record.session_id,
                messages=[ChatTurn.model_validate(message) for message in record.messages or []],
                introduced_titles=list(record.introduced_titles or []),
            )

    async def append(
        self,
        session_id: str,
        turns: Sequence[ChatTurn],
        introduced_title: Optional[str] = None,
    ) -> None:
        async with self._session_factory() as session:
            record = await self._find(session, session_id)
            if record is None:
                record = ChatSession(session_id=session_id, messages=[], introduced_titles=[])
                session.add(record)

            # JSON columns are only flushed when reassigned
            record.messages = [*(record.messages or []), *(turn.model_dump() for turn in turns)]
            titles = list(record.introduced_titles or [])
            if introduced_title and introduced_title not in titles:
                titles.append(introduced_title)
            record.introduced_titles = titles

            await session.commit()
