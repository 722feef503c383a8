import asyncio

import pytest
from conftest import FakeCatalog
from sqlalchemy.exc import OperationalError

from dsa_coach.core.errors import GenerationFailure
from dsa_coach.schemas.chat import ChatRequest, ChatTurn
from dsa_coach.services.coach import CoachPipeline
from dsa_coach.services.context import ProblemContextResolver
from dsa_coach.services.history import StoredConversation
from dsa_coach.services.providers import ProviderDispatcher, SamplingOptions


class InMemoryHistoryStore:
    def __init__(self):
        self.sessions = {}

    async def load(self, session_id):
        return self.sessions.get(session_id)

    async def append(self, session_id, turns, introduced_title=None):
        conversation = self.sessions.setdefault(session_id, StoredConversation(session_id=session_id))
        conversation.messages.extend(turns)
        if introduced_title and introduced_title not in conversation.introduced_titles:
            conversation.introduced_titles.append(introduced_title)


class BrokenHistoryStore:
    async def load(self, session_id):
        raise OperationalError("SELECT", {}, Exception("connection refused"))

    async def append(self, session_id, turns, introduced_title=None):
        raise OperationalError("INSERT", {}, Exception("connection refused"))


class SlowHistoryStore:
    async def load(self, session_id):
        raise asyncio.TimeoutError()

    async def append(self, session_id, turns, introduced_title=None):
        raise asyncio.TimeoutError()


def make_pipeline(catalog, dispatcher, history_store=None, track_introductions=False):
    return CoachPipeline(
        resolver=ProblemContextResolver(catalog, search_words=3),
        dispatcher=dispatcher,
        history_store=history_store,
        track_introductions=track_introductions,
        options=SamplingOptions(temperature=0.7, max_tokens=500),
    )


def test_new_problem_gets_canned_introduction_without_llm_call(two_sum, dispatcher, backends):
    catalog = FakeCatalog([two_sum], search_results={"two sum please": ["two-sum"]})
    pipeline = make_pipeline(catalog, dispatcher)

    result = asyncio.run(pipeline.run(ChatRequest(message="two sum please", leetcode_url=None, chat_history=[])))

    assert 'I\'ve found the problem "Two Sum" (Easy).' in result.response
    assert "Find two numbers..." in result.response
    assert "<p>" not in result.response
    assert result.provider is None
    assert result.problem == two_sum
    assert all(not backend.calls for backend in backends.values())


def test_without_problem_context_prompt_omits_problem_block(dispatcher, backends):
    pipeline = make_pipeline(FakeCatalog(), dispatcher)

    result = asyncio.run(pipeline.run(ChatRequest(message="what is a hash map", provider="openai")))

    assert result.response == "reply from openai"
    assert result.provider == "openai"
    messages, options = backends["openai"].calls[0]
    assert "Currently discussing" not in messages[0].content
    assert messages[-1] == ChatTurn(role="user", content="what is a hash map")
    assert options == SamplingOptions(temperature=0.7, max_tokens=500)


def test_introduced_problem_continues_with_llm(two_sum, dispatcher, backends):
    history = [
        ChatTurn(role="user", content="help"),
        ChatTurn(role="assistant", content='I\'ve found the problem "Two Sum" (Easy).'),
    ]
    catalog = FakeCatalog([two_sum])
    pipeline = make_pipeline(catalog, dispatcher)

    result = asyncio.run(
        pipeline.run(
            ChatRequest(
                message="yes, let's work on it",
                leetcode_url="https://leetcode.com/problems/two-sum/",
                chat_history=history,
            ),
        ),
    )

    assert result.response == "reply from groq"
    messages, _ = backends["groq"].calls[0]
    assert "Currently discussing: Two Sum" in messages[0].content
    assert messages[1:3] == history


def test_generation_failure_propagates(two_sum, backends):
    backends["groq"].error = RuntimeError("boom")
    pipeline = make_pipeline(FakeCatalog(), ProviderDispatcher(backends))

    with pytest.raises(GenerationFailure):
        asyncio.run(pipeline.run(ChatRequest(message="hello there")))


def test_session_history_records_turns_and_introductions(two_sum, dispatcher, backends):
    store = InMemoryHistoryStore()
    catalog = FakeCatalog([two_sum])
    pipeline = make_pipeline(catalog, dispatcher, history_store=store, track_introductions=True)
    url = "https://leetcode.com/problems/two-sum/"
    history = [ChatTurn(role="user", content="hi"), ChatTurn(role="assistant", content="hello")]

    first = asyncio.run(pipeline.run(ChatRequest(message="start", leetcode_url=url, chat_history=history, session_id="s1")))
    # the client dropped the canned reply from its history; the stored title still prevents a repeat
    second = asyncio.run(pipeline.run(ChatRequest(message="go on", leetcode_url=url, chat_history=history, session_id="s1")))

    assert first.provider is None
    assert second.response == "reply from groq"
    stored = store.sessions["s1"]
    assert stored.introduced_titles == ["Two Sum"]
    assert [turn.role for turn in stored.messages] == ["user", "assistant", "user", "assistant"]


def test_persistence_errors_do_not_break_chat(dispatcher):
    pipeline = make_pipeline(FakeCatalog(), dispatcher, history_store=BrokenHistoryStore())

    result = asyncio.run(pipeline.run(ChatRequest(message="hello", session_id="s2")))

    assert result.response == "reply from groq"
    assert result.session_id == "s2"


def test_database_timeouts_do_not_break_chat(dispatcher):
    pipeline = make_pipeline(FakeCatalog(), dispatcher, history_store=SlowHistoryStore(), track_introductions=True)

    result = asyncio.run(pipeline.run(ChatRequest(message="hello", session_id="s3")))

    assert result.response == "reply from groq"


def test_stored_introductions_are_ignored_unless_tracking_enabled(two_sum, dispatcher, backends):
    store = InMemoryHistoryStore()
    pipeline = make_pipeline(FakeCatalog([two_sum]), dispatcher, history_store=store)
    url = "https://leetcode.com/problems/two-sum/"
    history = [ChatTurn(role="user", content="hi"), ChatTurn(role="assistant", content="hello")]

    first = asyncio.run(pipeline.run(ChatRequest(message="start", leetcode_url=url, chat_history=history, session_id="s4")))
    second = asyncio.run(pipeline.run(ChatRequest(message="go on", leetcode_url=url, chat_history=history, session_id="s4")))

    # only the chat history decides, so the missing marker triggers the introduction again
    assert first.provider is None
    assert second.provider is None
    assert not backends["groq"].calls
    assert store.sessions["s4"].introduced_titles == ["Two Sum"]
