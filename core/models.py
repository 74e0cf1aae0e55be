from typing import Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


class _Wire(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# -----------------------------
# Client -> backend
# -----------------------------
class TransactionSummary(_Wire):
    type: str
    amount: float
    status: str = ""
    date: str = ""


class FinancialContext(_Wire):
    balance: float = 0.0
    locked_balance: float = Field(0.0, alias="lockedBalance")
    available_balance: float = Field(0.0, alias="availableBalance")
    active_plan_count: int = Field(
        0, alias="activePlanCount", validation_alias=AliasChoices("activePlanCount", "activePlans")
    )
    total_plan_count: int = Field(
        0, alias="totalPlanCount", validation_alias=AliasChoices("totalPlanCount", "totalPlans")
    )
    recent_transactions: List[TransactionSummary] = Field(default_factory=list, alias="recentTransactions")


class AssistantRequest(_Wire):
    # Optional so that missing fields reach the policy gate instead of a 422
    message: Optional[str] = None
    financial_context: FinancialContext = Field(default_factory=FinancialContext, alias="financialContext")
    user_id: Optional[str] = Field(None, alias="userId")


# -----------------------------
# Backend -> client
# -----------------------------
class AssistantAction(_Wire):
    label: str
    route: str
    params: Optional[Dict[str, str]] = None

    @field_validator("params", mode="before")
    @classmethod
    def _stringify_params(cls, v):
        if v is None:
            return None
        if not isinstance(v, dict):
            raise ValueError("params must be an object")
        return {str(k): str(val) for k, val in v.items()}


class AssistantReply(_Wire):
    response: str
    actions: List[AssistantAction] = Field(default_factory=list)
    # Set by the client when the turn failed; never sent over the wire
    error: Optional[str] = Field(None, exclude=True)

    def to_body(self) -> Dict:
        body = {"response": self.response}
        if self.actions:
            body["actions"] = [a.model_dump(exclude_none=True) for a in self.actions]
        return body


# -----------------------------
# Data store rows
# -----------------------------
class _Row(_Wire):
    @model_validator(mode="before")
    @classmethod
    def _nulls_take_defaults(cls, data):
        # nullable columns come back as null; treat them as unset
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class Profile(_Row):
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class PayoutPlan(_Row):
    name: str = ""
    status: str = ""
    payout_amount: float = 0.0
    frequency: str = ""
    completed_payouts: int = 0
    duration: int = 0


class Transaction(_Row):
    type: str = ""
    amount: float = 0.0
    status: str = ""
    created_at: Optional[str] = None
