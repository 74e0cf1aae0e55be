from enum import Enum
from typing import Optional


GENERIC_RETRY_MESSAGE = (
    "I apologize, but I encountered an issue processing your request. Please try again later."
)


class AssistantError(Exception):
    """
    Base for every failure the assistant endpoint turns into a response body.

    status_code: HTTP status the endpoint answers with
    error:       short machine-facing description (the `error` field)
    user_message: text shown to the user as an assistant chat message
    """

    status_code = 500
    error = "Internal server error"
    user_message = "I apologize, but I encountered an unexpected error. Please try again later."

    def __init__(
        self,
        error: Optional[str] = None,
        user_message: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.error = error or self.error
        self.user_message = user_message or self.user_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.error)

    def to_body(self):
        return {"error": self.error, "response": self.user_message}


class InputError(AssistantError):
    status_code = 400
    error = "Message is required"
    user_message = "Please type a message so I can help you."


def missing_user() -> InputError:
    return InputError(
        "User is required",
        "I couldn't verify your account. Please sign in again and retry.",
        status_code=401,
    )


class ConfigurationError(AssistantError):
    status_code = 500
    error = "Assistant is not configured"
    user_message = "The assistant isn't configured yet. Please contact support."


class UpstreamKind(str, Enum):
    RATE_LIMIT = "rate_limit"
    QUOTA = "quota"
    INVALID_CREDENTIAL = "invalid_credential"
    UNAVAILABLE = "unavailable"


_UPSTREAM_MESSAGES = {
    UpstreamKind.RATE_LIMIT: "I'm getting a lot of requests right now. Please wait a moment and try again.",
    UpstreamKind.QUOTA: "The assistant has reached its usage limit for now. Please try again later.",
    UpstreamKind.INVALID_CREDENTIAL: "The assistant can't reach its knowledge base because of a configuration problem. Please contact support.",
    UpstreamKind.UNAVAILABLE: "I'm sorry, I'm having trouble connecting to my knowledge base right now. Please try again later.",
}


class UpstreamError(AssistantError):
    status_code = 500
    error = "Failed to get AI response"

    def __init__(self, kind: UpstreamKind = UpstreamKind.UNAVAILABLE):
        self.kind = kind
        super().__init__(user_message=_UPSTREAM_MESSAGES[kind])


class DataFetchError(AssistantError):
    """Profile/plans/transactions read failed. Logged, never sent to the user."""

    error = "Failed to fetch user data"

    def __init__(self, resource: str, detail: str = ""):
        self.resource = resource
        super().__init__(f"Failed to fetch {resource}: {detail}".rstrip(": "))


class IdentityLookupError(AssistantError):
    """The sign-in service could not be reached to check the bearer token."""

    status_code = 500
    error = "Identity service unavailable"
    user_message = "I couldn't reach the sign-in service right now. Please try again in a moment."
