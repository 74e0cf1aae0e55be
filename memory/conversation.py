"""
Per-screen conversation state: an append-only message log plus the turn
state machine Idle -> AwaitingResponse -> Rendered | Errored.

Each ConversationSession owns its own log, so two open conversations never
see each other's messages.
"""
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from agents import insights_agent, planner_agent
from client.assistant_client import AssistantClient
from client.context import SessionProvider
from core.errors import GENERIC_RETRY_MESSAGE
from core.logging_config import get_logger
from core.models import AssistantAction, FinancialContext
from core.router import Intent, classify

log = get_logger(__name__)

# Offered before the first message
SUGGESTED_PROMPTS = [
    "I want to save ₦500,000 for rent by September",
    "I earn 200k monthly. Can you help me budget?",
    "How can I improve my savings habits?",
    "Create a plan to save ₦1M in 6 months",
    "Analyze my spending patterns",
    "What's the best way to save for emergencies?",
]


class Sender(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class MessageType(str, Enum):
    TEXT = "text"
    PLAN = "plan"
    INSIGHT = "insight"


class TurnState(str, Enum):
    IDLE = "idle"
    AWAITING_RESPONSE = "awaiting_response"
    RENDERED = "rendered"
    ERRORED = "errored"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Message:
    sender: Sender
    type: MessageType
    content: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = field(default_factory=_now)
    metadata: Optional[Dict[str, Any]] = None
    actions: Tuple[AssistantAction, ...] = ()


def greeting(display_name: Optional[str] = None) -> Message:
    name = (display_name or "").strip() or "there"
    return Message(
        Sender.ASSISTANT,
        MessageType.TEXT,
        f"Hi {name}! I'm your financial assistant. I can help you create savings plans, "
        "analyze your spending, and provide personalized financial advice. "
        "How can I help you today?",
    )


class ConversationSession:
    def __init__(
        self,
        client: AssistantClient,
        context_builder: Callable[[], FinancialContext],
        today: Callable[[], date] = date.today,
        session: Optional[SessionProvider] = None,
    ):
        self.client = client
        self.context_builder = context_builder
        self.today = today
        self.session = session
        self.reset()

    @property
    def messages(self) -> Tuple[Message, ...]:
        return tuple(self._log)

    @property
    def is_loading(self) -> bool:
        return self.state is TurnState.AWAITING_RESPONSE

    def _append(self, message: Message) -> Message:
        self._log.append(message)
        return message

    def reset(self) -> None:
        """Start over, as when the chat screen is mounted again."""
        display_name = self.session.display_name if self.session else None
        self._log = [greeting(display_name)]
        self.state = TurnState.IDLE

    async def submit(self, text: str) -> Optional[Message]:
        """
        Handle one user turn and return the assistant message it produced.

        Returns None without touching the log when the text is blank or a
        previous turn is still awaiting its reply.
        """
        text = (text or "").strip()
        if not text:
            return None
        if self.is_loading:
            log.info("submit_ignored_while_awaiting")
            return None

        self._append(Message(Sender.USER, MessageType.TEXT, text))
        self.state = TurnState.AWAITING_RESPONSE
        try:
            reply, failed = await self._respond(text)
        except Exception:
            log.exception("turn_failed")
            self.state = TurnState.ERRORED
            return self._append(
                Message(Sender.ASSISTANT, MessageType.TEXT, GENERIC_RETRY_MESSAGE)
            )

        self.state = TurnState.ERRORED if failed else TurnState.RENDERED
        return self._append(reply)

    async def _respond(self, text: str) -> Tuple[Message, bool]:
        intent = classify(text)
        log.info("turn_classified", intent=intent.value)

        if intent is Intent.PLAN:
            draft = planner_agent.handle(text, today=self.today())
            return Message(Sender.ASSISTANT, MessageType.PLAN, draft["content"], metadata=draft["metadata"]), False

        context = self.context_builder()
        if intent is Intent.INSIGHT:
            draft = insights_agent.handle(context)
            return Message(Sender.ASSISTANT, MessageType.INSIGHT, draft["content"], metadata=draft["metadata"]), False

        reply = await self.client.ask(text, context)
        message = Message(Sender.ASSISTANT, MessageType.TEXT, reply.response, actions=tuple(reply.actions))
        return message, reply.error is not None

    def choose_plan(self, message: Message, cadence) -> planner_agent.PlanHandoff:
        """Turn the user's pick on a plan message into the plan-creation handoff."""
        if message.type is not MessageType.PLAN or not message.metadata:
            raise ValueError("only plan messages carry selectable proposals")
        return planner_agent.handoff(
            message.metadata["targetAmount"],
            message.metadata["timeframe"],
            cadence,
        )
