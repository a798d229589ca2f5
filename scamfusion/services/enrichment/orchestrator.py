"""
ScamFusion Registry Orchestrator

Coordinates phone and account registry analyses and combines results.
"""

import asyncio
import logging
from typing import Optional

from scamfusion.config import Settings, get_settings
from scamfusion.models.registry import RegistryAnalysis, RegistryFindings

from .account_registry import AccountRegistryClient
from .analyzers import AccountRegistryAnalyzer, PhoneRegistryAnalyzer, extract_account_numbers, extract_phone_numbers
from .phone_registry import PhoneRegistryClient

logger = logging.getLogger(__name__)


class RegistryOrchestrator:
    """
    Orchestrates registry enrichment for one text.

    Features:
    - Phone and account analyses run concurrently
    - Each client keeps its own cache and session
    - A failing analysis abstains instead of failing the request
    """

    def __init__(
        self,
        phone_analyzer: PhoneRegistryAnalyzer,
        account_analyzer: AccountRegistryAnalyzer,
    ):
        self.phone_analyzer = phone_analyzer
        self.account_analyzer = account_analyzer

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "RegistryOrchestrator":
        settings = settings or get_settings()
        common = dict(
            timeout=settings.remote_timeout,
            cache_max_entries=settings.cache_max_entries,
            cache_ttl_seconds=settings.cache_ttl_seconds,
            session_ttl_seconds=settings.session_ttl_seconds,
        )
        return cls(
            phone_analyzer=PhoneRegistryAnalyzer(PhoneRegistryClient(settings.phone_registry_url, **common)),
            account_analyzer=AccountRegistryAnalyzer(AccountRegistryClient(settings.account_registry_url, **common)),
        )

    @staticmethod
    def has_identifiers(text: str) -> bool:
        """True when text contains anything worth looking up."""
        return bool(extract_phone_numbers(text) or extract_account_numbers(text))

    def status(self) -> dict:
        status = {}
        for analyzer in (self.phone_analyzer, self.account_analyzer):
            if analyzer.client is not None:
                client = analyzer.client
                status[client.provider_name] = {**client.status.to_dict(), "cache_size": client.cache_size}
        return status

    async def analyze(self, text: str) -> RegistryFindings:
        """
        Run both analyses concurrently.

        Args:
            text: Raw text

        Returns:
            RegistryFindings; an analysis that raised is replaced by an empty one
        """
        phone, account = await asyncio.gather(
            self.phone_analyzer.analyze(text),
            self.account_analyzer.analyze(text),
            return_exceptions=True,
        )

        if isinstance(phone, Exception):
            logger.error(f"Phone registry analysis failed: {phone}")
            phone = RegistryAnalysis()
        if isinstance(account, Exception):
            logger.error(f"Account registry analysis failed: {account}")
            account = RegistryAnalysis()

        return RegistryFindings(phone=phone, account=account)
