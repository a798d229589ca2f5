"""
ScamFusion Account Registry Client

Looks up bank account numbers in the police fraud-account registry.

Request:  form POST key=P, no=<digits>, ftype=A
Response: {"result": true, "value": [{"result": "OK", "count": "0"}], "message": ""}
"""

import logging

import aiohttp

from scamfusion.models.registry import AccountReport
from scamfusion.services.enrichment.base import BaseRegistryClient
from scamfusion.services.enrichment.session import Session
from scamfusion.utils.constants import (
    ACCOUNT_REGISTRY_INIT_PATH,
    ACCOUNT_REGISTRY_SEARCH_PATH,
    REGISTRY_HEADERS,
)
from scamfusion.utils.exceptions import RemoteFailureError
from scamfusion.utils.helpers import mask_account, normalize_digits

logger = logging.getLogger(__name__)


def parse_fraud_count(data: dict) -> int:
    """
    Pull the report count out of the registry body; count arrives as a string.

    Raises:
        RemoteFailureError: body carries no readable count
    """
    values = data.get("value")
    if not isinstance(values, list) or not values or not isinstance(values[0], dict):
        raise RemoteFailureError("account_registry response has no result row")
    raw = values[0].get("count")
    try:
        return max(0, int(raw))
    except (TypeError, ValueError) as e:
        raise RemoteFailureError(f"account_registry returned unreadable count: {raw!r}") from e


class AccountRegistryClient(BaseRegistryClient[AccountReport]):
    """Police fraud-account registry."""

    provider_name = "account_registry"
    init_path = ACCOUNT_REGISTRY_INIT_PATH

    def normalize_key(self, raw: str) -> str:
        return normalize_digits(raw or "")

    def _describe(self, key: str) -> str:
        return mask_account(key)

    async def _fetch(self, key: str, session: Session) -> AccountReport:
        async with aiohttp.ClientSession(headers=REGISTRY_HEADERS, cookies=session.cookies) as http:
            async with http.post(
                f"{self.base_url}{ACCOUNT_REGISTRY_SEARCH_PATH}",
                data={"key": "P", "no": key, "ftype": "A"},
                timeout=self._client_timeout(),
            ) as response:
                if response.status != 200:
                    raise RemoteFailureError(f"{self.provider_name} returned HTTP {response.status}")
                data = await response.json(content_type=None)

        if not isinstance(data, dict) or data.get("result") is False:
            raise RemoteFailureError(f"{self.provider_name} rejected the query")

        return AccountReport(key=key, report_count=parse_fraud_count(data))
