import asyncio
from datetime import date

import httpx
import pytest

from client.assistant_client import AssistantClient
from client.context import Balances, ContextBuilder, StaticSession
from core.errors import GENERIC_RETRY_MESSAGE
from core.models import AssistantReply
from memory.conversation import (
    SUGGESTED_PROMPTS,
    ConversationSession,
    MessageType,
    Sender,
    TurnState,
)

URL = "http://assistant.test/api/ai-assistant"


class FakeBalances:
    def get_balances(self):
        return Balances(balance=250000, locked_balance=150000, available_balance=100000)


class FakePlans:
    def __init__(self):
        self.plans = [{"status": "active"}, {"status": "completed"}]

    def list_plans(self):
        return self.plans


class FakeTransactions:
    def list_transactions(self):
        return [
            {"type": "deposit", "amount": 1000 * i, "status": "completed", "created_at": "2026-10-01T00:00:00Z"}
            for i in range(1, 8)
        ]


def _builder():
    return ContextBuilder(FakeBalances(), FakePlans(), FakeTransactions())


def _session(handler):
    client = AssistantClient(URL, StaticSession("u1", "tok"), transport=httpx.MockTransport(handler))
    return ConversationSession(client, _builder(), today=lambda: date(2026, 10, 15))


def _unreachable(request):
    raise AssertionError("backend should not be called")


def test_plan_request_end_to_end():
    session = _session(_unreachable)
    reply = asyncio.run(session.submit("I want to save ₦1,000,000 in 12 months"))

    assert [m.sender for m in session.messages[1:]] == [Sender.USER, Sender.ASSISTANT]
    assert reply.type is MessageType.PLAN
    plans = reply.metadata["plans"]
    assert len(plans) == 3
    assert next(p for p in plans if p["cadence"] == "monthly")["amount_per_cadence"] == 83334
    assert session.state is TurnState.RENDERED


def test_choosing_a_plan_hands_off_to_creation_flow():
    session = _session(_unreachable)
    reply = asyncio.run(session.submit("Create a plan to save ₦1M in 6 months"))
    h = session.choose_plan(reply, "weekly")
    assert (h.amount, h.frequency.value, h.duration_in_weeks) == (1_000_000, "weekly", 24)


def test_choose_plan_rejects_non_plan_messages():
    session = _session(lambda r: httpx.Response(200, json={"response": "hi"}))
    reply = asyncio.run(session.submit("hello there"))
    with pytest.raises(ValueError):
        session.choose_plan(reply, "weekly")


def test_insight_request_is_answered_locally():
    session = _session(_unreachable)
    reply = asyncio.run(session.submit("Analyze my spending patterns"))
    assert reply.type is MessageType.INSIGHT
    assert reply.metadata["insights"][2]["value"] == "₦20,000"


def test_generic_question_goes_to_backend():
    body = {"response": "You have ₦100,000 available.", "actions": [{"label": "Add Funds", "route": "/add-funds"}]}
    session = _session(lambda r: httpx.Response(200, json=body))
    reply = asyncio.run(session.submit("What's my balance?"))
    assert reply.sender is Sender.ASSISTANT
    assert reply.type is MessageType.TEXT
    assert reply.content == "You have ₦100,000 available."
    assert reply.actions[0].label == "Add Funds"
    assert session.state is TurnState.RENDERED


def test_backend_500_yields_one_generic_assistant_message():
    session = _session(lambda r: httpx.Response(500))
    asyncio.run(session.submit("What's my balance?"))

    assistant = [m for m in session.messages[1:] if m.sender is Sender.ASSISTANT]
    assert len(assistant) == 1
    assert assistant[0].content == GENERIC_RETRY_MESSAGE
    assert not session.is_loading
    assert session.state is TurnState.ERRORED


def test_blank_input_is_ignored():
    session = _session(_unreachable)
    assert asyncio.run(session.submit("   ")) is None
    assert len(session.messages) == 1
    assert session.state is TurnState.IDLE


def test_context_is_rebuilt_for_every_message():
    builder = _builder()
    seen = []

    class RecordingClient:
        async def ask(self, message, context):
            seen.append(context)
            return AssistantReply(response="ok")

    session = ConversationSession(RecordingClient(), builder)
    asyncio.run(session.submit("hello"))
    builder.plans.plans.append({"status": "active"})
    asyncio.run(session.submit("hello again"))

    assert [c.active_plan_count for c in seen] == [1, 2]
    assert len(seen[0].recent_transactions) == 5


def test_second_submit_while_awaiting_is_rejected():
    # one request in flight per conversation keeps replies in submission order
    class SlowClient:
        release = None

        async def ask(self, message, context):
            await self.release.wait()
            return AssistantReply(response=f"answer to {message}")

    client = SlowClient()
    session = ConversationSession(client, _builder())

    async def scenario():
        client.release = asyncio.Event()
        first = asyncio.create_task(session.submit("first question"))
        await asyncio.sleep(0)
        assert session.is_loading
        assert await session.submit("second question") is None
        client.release.set()
        return await first

    reply = asyncio.run(scenario())

    assert reply.content == "answer to first question"
    assert [m.content for m in session.messages[1:]] == ["first question", "answer to first question"]
    assert not session.is_loading


def test_sessions_do_not_share_logs():
    a = _session(_unreachable)
    b = _session(_unreachable)
    asyncio.run(a.submit("save 100k in 2 months"))
    assert len(a.messages) == 3
    assert len(b.messages) == 1


def test_reset_clears_log_back_to_greeting():
    client = AssistantClient(URL, StaticSession("u1", "tok", "Ada"), transport=httpx.MockTransport(_unreachable))
    session = ConversationSession(client, _builder(), session=client.session)
    asyncio.run(session.submit("save 100k in 2 months"))
    session.reset()
    assert len(session.messages) == 1
    assert session.messages[0].content.startswith("Hi Ada!")
    assert session.state is TurnState.IDLE


def test_messages_are_immutable():
    session = _session(_unreachable)
    reply = asyncio.run(session.submit("save 100k in 2 months"))
    with pytest.raises(Exception):
        reply.content = "changed"


def test_new_session_greets_user_by_name():
    session = ConversationSession(None, _builder(), session=StaticSession("u1", "tok", "Ada"))
    (hello,) = session.messages
    assert hello.sender is Sender.ASSISTANT
    assert hello.type is MessageType.TEXT
    assert hello.content.startswith("Hi Ada! I'm your financial assistant.")
    assert session.state is TurnState.IDLE


@pytest.mark.parametrize("provider", [None, StaticSession("u1", "tok", None), StaticSession("u1", "tok", "  ")])
def test_greeting_without_display_name(provider):
    session = ConversationSession(None, _builder(), session=provider)
    assert session.messages[0].content.startswith("Hi there!")


def test_suggested_prompts_route_to_local_answers():
    assert len(SUGGESTED_PROMPTS) == 6
    session = _session(_unreachable)
    reply = asyncio.run(session.submit(SUGGESTED_PROMPTS[3]))
    assert reply.type is MessageType.PLAN
