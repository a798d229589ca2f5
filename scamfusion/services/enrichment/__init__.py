"""
ScamFusion Enrichment Services

Fraud registry lookups (phone, account) with caching and session handling.
"""

from .cache import CacheEntry, ReputationCache
from .session import Session, SessionManager
from .base import APIStatus, APIStatusInfo, BaseRegistryClient, LookupResult
from .phone_registry import PhoneRegistryClient
from .account_registry import AccountRegistryClient
from .analyzers import (
    AccountRegistryAnalyzer,
    PhoneRegistryAnalyzer,
    extract_account_numbers,
    extract_phone_numbers,
)
from .orchestrator import RegistryOrchestrator

__all__ = [
    'CacheEntry',
    'ReputationCache',
    'Session',
    'SessionManager',
    'APIStatus',
    'APIStatusInfo',
    'BaseRegistryClient',
    'LookupResult',
    'PhoneRegistryClient',
    'AccountRegistryClient',
    'AccountRegistryAnalyzer',
    'PhoneRegistryAnalyzer',
    'extract_account_numbers',
    'extract_phone_numbers',
    'RegistryOrchestrator',
]
