import json
import re
from typing import List, Tuple

from pydantic import ValidationError

from core.logging_config import get_logger
from core.models import AssistantAction

log = get_logger(__name__)

ACTION_BLOCK_RE = re.compile(r"```json\s*\n(.*?)\n\s*```", re.DOTALL)


def split_actions(reply: str) -> Tuple[str, List[AssistantAction]]:
    """
    Pull a fenced ```json [...] ``` action list out of a model reply.

    Returns (text without the block, actions). If there is no block, or it
    does not hold a valid list of {label, route, params?}, the reply is
    returned untouched with no actions.
    """
    m = ACTION_BLOCK_RE.search(reply or "")
    if not m:
        return reply, []

    try:
        raw = json.loads(m.group(1))
        if not isinstance(raw, list):
            raise ValueError("action block is not a list")
        actions = [AssistantAction.model_validate(item) for item in raw]
    except (ValueError, ValidationError) as e:
        # json.JSONDecodeError is a ValueError
        log.warning("action_block_unparseable", error=str(e))
        return reply, []

    cleaned = (reply[: m.start()] + reply[m.end():]).strip()
    return cleaned, actions
