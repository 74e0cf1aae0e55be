from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from core.config import DEFAULT_TIMEOUT_SECONDS
from core.errors import DataFetchError, IdentityLookupError
from core.logging_config import get_logger
from core.models import PayoutPlan, Profile, Transaction

log = get_logger(__name__)

TRANSACTION_FETCH_LIMIT = 10


class SupabaseStore:
    """
    Reads the user's profile, payout plans and transactions from Supabase's
    REST (PostgREST) interface.

    Requests carry the caller's access token so row-level security applies;
    without one the anon key is used as the bearer.
    """

    def __init__(
        self,
        url: str,
        key: str,
        access_token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url.rstrip("/")
        self.key = key
        self.access_token = access_token
        self.timeout = timeout
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.key,
            "Authorization": f"Bearer {self.access_token or self.key}",
            "Accept": "application/json",
        }

    async def _get(self, resource: str, path: str, params: Dict[str, str]) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(f"{self.url}{path}", params=params, headers=self._headers())
                response.raise_for_status()
                return response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise DataFetchError(resource, str(e)) from e

    async def resolve_user_id(self, access_token: str) -> Optional[str]:
        """
        Return the user id behind an access token, or None if it is not valid.

        Raises IdentityLookupError when the auth service itself is unreachable.
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(
                    f"{self.url}/auth/v1/user",
                    headers={"apikey": self.key, "Authorization": f"Bearer {access_token}"},
                )
        except httpx.HTTPError as e:
            log.warning("auth_lookup_failed", error=str(e))
            raise IdentityLookupError() from e
        if response.status_code != 200:
            return None
        try:
            return response.json().get("id")
        except ValueError:
            return None

    async def get_profile(self, user_id: str) -> Optional[Profile]:
        rows = await self._get(
            "profile",
            "/rest/v1/profiles",
            {"select": "first_name,last_name", "id": f"eq.{user_id}", "limit": "1"},
        )
        profiles = self._parse("profile", Profile, rows)
        return profiles[0] if profiles else None

    async def list_payout_plans(self, user_id: str) -> List[PayoutPlan]:
        rows = await self._get(
            "payout_plans",
            "/rest/v1/payout_plans",
            {"select": "*", "user_id": f"eq.{user_id}", "order": "created_at.desc"},
        )
        return self._parse("payout_plans", PayoutPlan, rows)

    async def list_transactions(self, user_id: str, limit: int = TRANSACTION_FETCH_LIMIT) -> List[Transaction]:
        rows = await self._get(
            "transactions",
            "/rest/v1/transactions",
            {"select": "*", "user_id": f"eq.{user_id}", "order": "created_at.desc", "limit": str(limit)},
        )
        return self._parse("transactions", Transaction, rows)

    @staticmethod
    def _parse(resource: str, model, rows) -> list:
        if not isinstance(rows, list):
            raise DataFetchError(resource, "expected a list of rows")
        try:
            return [model.model_validate(r) for r in rows]
        except ValidationError as e:
            raise DataFetchError(resource, str(e)) from e
