"""
ScamFusion Phone Registry Client

Looks up phone numbers in the counter-scam phone registry.

Request:  POST JSON {"telNum": "<digits>"}
Response: {"totalCount": n, "voiceCount": n, "smsCount": n}
"""

import logging

import aiohttp

from scamfusion.models.registry import PhoneReport
from scamfusion.services.enrichment.base import BaseRegistryClient
from scamfusion.services.enrichment.session import Session
from scamfusion.utils.constants import (
    PHONE_REGISTRY_INIT_PATH,
    PHONE_REGISTRY_SEARCH_PATH,
    REGISTRY_HEADERS,
)
from scamfusion.utils.exceptions import RemoteFailureError
from scamfusion.utils.helpers import mask_phone, normalize_phone

logger = logging.getLogger(__name__)


def _count(data: dict, field: str) -> int:
    value = data.get(field) or 0
    return max(0, int(value))


class PhoneRegistryClient(BaseRegistryClient[PhoneReport]):
    """Counter-scam phone number registry."""

    provider_name = "phone_registry"
    init_path = PHONE_REGISTRY_INIT_PATH

    def normalize_key(self, raw: str) -> str:
        return normalize_phone(raw or "")

    def _describe(self, key: str) -> str:
        return mask_phone(key)

    async def _fetch(self, key: str, session: Session) -> PhoneReport:
        async with aiohttp.ClientSession(headers=REGISTRY_HEADERS, cookies=session.cookies) as http:
            async with http.post(
                f"{self.base_url}{PHONE_REGISTRY_SEARCH_PATH}",
                json={"telNum": key},
                timeout=self._client_timeout(),
            ) as response:
                if response.status != 200:
                    raise RemoteFailureError(f"{self.provider_name} returned HTTP {response.status}")
                data = await response.json(content_type=None)

        if not isinstance(data, dict):
            raise RemoteFailureError(f"{self.provider_name} returned malformed body")

        return PhoneReport(
            key=key,
            report_count=_count(data, "totalCount"),
            voice_count=_count(data, "voiceCount"),
            sms_count=_count(data, "smsCount"),
        )
