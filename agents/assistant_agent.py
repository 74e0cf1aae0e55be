"""
Backend side of the assistant: validate the request, gather the user's data,
build the system prompt, ask the model and split out suggested actions.
"""
import asyncio
from typing import Any, Awaitable, Optional

from core.actions import split_actions
from core.errors import ConfigurationError, DataFetchError
from core.logging_config import get_logger
from core.models import AssistantReply, AssistantRequest
from core.prompt import build_system_prompt
from policy.pip import bearer_token, evaluate_identity, evaluate_request

log = get_logger(__name__)


async def _fetch_or_default(what: str, fetch: Awaitable[Any], default: Any, user_id: str) -> Any:
    # partial data beats no answer: a failed read is logged and replaced
    try:
        return await fetch
    except DataFetchError as e:
        log.warning("data_fetch_failed", resource=what, user_id=user_id, error=e.error)
        return default


async def answer(
    req: AssistantRequest,
    authorization: Optional[str],
    store,
    chat_model,
) -> AssistantReply:
    """
    Raises AssistantError subclasses (InputError, ConfigurationError,
    UpstreamError); the endpoint turns them into response bodies.
    """
    decision = evaluate_request(req.message, req.user_id)
    if not decision.allow:
        log.info("request_rejected", reason=decision.reason)
        raise decision.error

    if store is None:
        raise ConfigurationError("Data store is not configured")
    if chat_model is None:
        raise ConfigurationError("OpenAI API key is not configured")

    user_id = req.user_id.strip()
    token = bearer_token(authorization)
    token_user_id = await store.resolve_user_id(token) if token else None
    decision = evaluate_identity(user_id, token_user_id)
    if not decision.allow:
        log.info("request_rejected", reason=decision.reason, user_id=user_id)
        raise decision.error

    profile, plans, transactions = await asyncio.gather(
        _fetch_or_default("profile", store.get_profile(user_id), None, user_id),
        _fetch_or_default("payout_plans", store.list_payout_plans(user_id), [], user_id),
        _fetch_or_default("transactions", store.list_transactions(user_id), [], user_id),
    )

    system_prompt = build_system_prompt(req.financial_context, profile, plans, transactions)
    reply = await chat_model.complete(system_prompt, req.message.strip())

    text, actions = split_actions(reply)
    log.info("assistant_replied", user_id=user_id, actions=len(actions), plans=len(plans))
    return AssistantReply(response=text, actions=actions)
