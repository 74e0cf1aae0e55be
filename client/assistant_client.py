from typing import Optional

import httpx
from pydantic import ValidationError

from client.context import SessionProvider
from core.config import DEFAULT_TIMEOUT_SECONDS
from core.errors import GENERIC_RETRY_MESSAGE
from core.logging_config import get_logger
from core.models import AssistantReply, FinancialContext

log = get_logger(__name__)

TIMEOUT_MESSAGE = "The assistant is taking too long to respond. Please try again in a moment."
NETWORK_MESSAGE = "I couldn't reach the assistant. Please check your connection and try again."


class AssistantClient:
    """
    Talks to POST /api/ai-assistant.

    ask() never raises: every failure comes back as an AssistantReply with
    `error` set and a user-facing `response`.
    """

    def __init__(
        self,
        url: str,
        session: SessionProvider,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.session = session
        self.timeout = timeout
        self.transport = transport

    def _failure(self, error: str, message: str = GENERIC_RETRY_MESSAGE) -> AssistantReply:
        return AssistantReply(response=message, error=error)

    async def ask(self, message: str, context: FinancialContext) -> AssistantReply:
        payload = {
            "message": message,
            "financialContext": context.model_dump(by_alias=True),
            "userId": self.session.user_id,
        }
        headers = {"Authorization": f"Bearer {self.session.access_token or ''}"}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.url, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            log.warning("assistant_timeout", timeout=self.timeout, error=str(e))
            return self._failure("timeout", TIMEOUT_MESSAGE)
        except httpx.HTTPError as e:
            log.warning("assistant_unreachable", error=str(e))
            return self._failure("network", NETWORK_MESSAGE)

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.is_success:
            log.warning("assistant_http_error", status_code=response.status_code)
            server_message = body.get("response") if isinstance(body, dict) else None
            if isinstance(server_message, str) and server_message.strip():
                return self._failure(f"http_{response.status_code}", server_message)
            return self._failure(f"http_{response.status_code}")

        try:
            reply = AssistantReply.model_validate(body)
        except ValidationError as e:
            log.warning("assistant_reply_malformed", error=str(e))
            return self._failure("malformed_reply")

        if not reply.response.strip():
            reply.response = "I apologize, but I encountered an issue processing your request."
        return reply
