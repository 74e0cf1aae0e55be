from dataclasses import dataclass
from typing import Optional

from core.errors import AssistantError, InputError, missing_user


@dataclass
class PolicyDecision:
    allow: bool
    reason: str = ""
    error: Optional[AssistantError] = None


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """'Bearer abc' -> 'abc'; anything else -> None."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def evaluate_request(message: Optional[str], user_id: Optional[str]) -> PolicyDecision:
    """
    PIP = Policy / Identity / Permissions gate, input half.

    Rules:
      - blank or missing message => 400
      - missing user id          => 401
    """
    if not (message or "").strip():
        return PolicyDecision(False, "Message is required", InputError())

    if not (user_id or "").strip():
        return PolicyDecision(False, "User is required", missing_user())

    return PolicyDecision(True, "Allowed")


def evaluate_identity(user_id: str, token_user_id: Optional[str]) -> PolicyDecision:
    """Identity half: the bearer token must resolve to the user the request names."""
    if token_user_id is None:
        return PolicyDecision(False, "Invalid or missing credential", missing_user())
    if token_user_id != user_id:
        return PolicyDecision(False, "Credential does not match user", missing_user())
    return PolicyDecision(True, "Allowed")
