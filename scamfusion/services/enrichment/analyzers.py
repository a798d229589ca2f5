"""
ScamFusion Registry Analyzers

Turn text into registry evidence: extract phone numbers or account numbers,
look each one up, and score what the registry reports. A failed lookup is
recorded and that identifier abstains; it is never treated as clean.
"""

import logging
import re
from typing import List, Optional

from scamfusion.models.registry import RegistryAnalysis
from scamfusion.services.enrichment.account_registry import AccountRegistryClient
from scamfusion.services.enrichment.phone_registry import PhoneRegistryClient
from scamfusion.utils.constants import (
    ACCOUNT_FRAUD_THRESHOLD,
    ACCOUNT_MAX_DIGITS,
    ACCOUNT_MIN_DIGITS,
    ACCOUNT_MULTIPLE_REPORTS,
    ACCOUNT_PATTERNS,
    ACCOUNT_SCORE_MULTIPLE_REPORTS,
    ACCOUNT_SCORE_REGISTERED,
    PHONE_MULTIPLE_REPORTS,
    PHONE_PATTERNS,
    PHONE_PREFIX_EXCLUSION,
    PHONE_SCORE_MULTIPLE_REPORTS,
    PHONE_SCORE_REGISTERED,
    PHONE_SCORE_SMS_PHISHING,
    PHONE_SCORE_SUSPICIOUS_PREFIX,
    PHONE_SCORE_VOICE_PHISHING,
    PHONE_SUSPICIOUS_PREFIXES,
)
from scamfusion.utils.helpers import clamp, dedupe, mask_account, mask_phone, normalize_digits, normalize_phone

logger = logging.getLogger(__name__)

_PHONE_REGEXES = [re.compile(p) for p in PHONE_PATTERNS]
_ACCOUNT_REGEXES = [re.compile(p) for p in ACCOUNT_PATTERNS]
_PHONE_PREFIX = re.compile(PHONE_PREFIX_EXCLUSION)


def extract_phone_numbers(text: str) -> List[str]:
    """Normalized, de-duplicated phone numbers in text."""
    if not text:
        return []
    found = []
    for regex in _PHONE_REGEXES:
        found.extend(normalize_phone(m.group(0)) for m in regex.finditer(text))
    return dedupe(p for p in found if p)


def extract_account_numbers(text: str) -> List[str]:
    """Normalized account numbers in text, excluding anything shaped like a phone number."""
    if not text:
        return []
    found = []
    for regex in _ACCOUNT_REGEXES:
        for match in regex.finditer(text):
            digits = normalize_digits(match.group(0))
            if _PHONE_PREFIX.match(digits):
                continue
            if ACCOUNT_MIN_DIGITS <= len(digits) <= ACCOUNT_MAX_DIGITS:
                found.append(digits)
    return dedupe(found)


class PhoneRegistryAnalyzer:
    """Phone number evidence: local prefix check plus registry lookups."""

    def __init__(self, client: Optional[PhoneRegistryClient] = None):
        self.client = client

    async def analyze(self, text: str) -> RegistryAnalysis:
        phones = extract_phone_numbers(text)
        if not phones:
            return RegistryAnalysis()

        flagged: List[str] = []
        reasons: List[str] = []
        failures: List[str] = []
        risk = 0.0
        suspicious_prefix = False

        for phone in phones:
            if risk >= 1.0:
                logger.debug("Phone risk capped, skipping remaining numbers")
                break

            if phone.startswith(PHONE_SUSPICIOUS_PREFIXES):
                suspicious_prefix = True
                risk = clamp(risk + PHONE_SCORE_SUSPICIOUS_PREFIX)
                reasons.append(f"의심 전화번호 대역: {phone[:3]}xxx")

            if self.client is None:
                continue

            result = await self.client.lookup(phone)
            if not result.success:
                failures.append(phone)
                logger.warning(f"Phone lookup abstained for {mask_phone(phone)}: {result.error_message}")
                continue

            report = result.value
            if not report.is_reported:
                continue

            flagged.append(phone)
            risk = clamp(risk + PHONE_SCORE_REGISTERED)
            reasons.append(f"사기 신고 등록 전화번호: {phone}")
            logger.warning(f"Reported phone detected: {mask_phone(phone)} (total={report.report_count})")

            if report.voice_count > 0:
                risk = clamp(risk + PHONE_SCORE_VOICE_PHISHING)
                reasons.append(f"보이스피싱 신고 {report.voice_count}건")
            if report.sms_count > 0:
                risk = clamp(risk + PHONE_SCORE_SMS_PHISHING)
                reasons.append(f"스미싱 신고 {report.sms_count}건")
            if report.report_count >= PHONE_MULTIPLE_REPORTS:
                risk = clamp(risk + PHONE_SCORE_MULTIPLE_REPORTS)
                reasons.append(f"다수 신고 이력 ({report.report_count}건)")

        return RegistryAnalysis(
            extracted=phones,
            flagged=flagged,
            reasons=dedupe(reasons),
            risk_score=risk,
            failures=failures,
            suspicious_prefix=suspicious_prefix,
        )


class AccountRegistryAnalyzer:
    """Bank account evidence from the fraud-account registry."""

    def __init__(self, client: Optional[AccountRegistryClient] = None):
        self.client = client

    async def analyze(self, text: str) -> RegistryAnalysis:
        accounts = extract_account_numbers(text)
        if not accounts or self.client is None:
            return RegistryAnalysis(extracted=accounts)

        flagged: List[str] = []
        reasons: List[str] = []
        failures: List[str] = []
        risk = 0.0

        for account in accounts:
            if risk >= 1.0:
                break

            result = await self.client.lookup(account)
            if not result.success:
                failures.append(account)
                logger.warning(f"Account lookup abstained for {mask_account(account)}: {result.error_message}")
                continue

            count = result.value.report_count
            if count >= ACCOUNT_FRAUD_THRESHOLD:
                flagged.append(account)
                risk = clamp(risk + ACCOUNT_SCORE_REGISTERED)
                reasons.append(f"경찰청 사기신고 계좌: {mask_account(account)} ({count}건)")
                logger.warning(f"Fraud account detected: {mask_account(account)} (count={count})")
                if count >= ACCOUNT_MULTIPLE_REPORTS:
                    risk = clamp(risk + ACCOUNT_SCORE_MULTIPLE_REPORTS)
                    reasons.append(f"다수 사기 신고 이력 ({count}건)")
            elif count > 0:
                logger.debug(f"Account has minor reports: {mask_account(account)} (count={count})")

        return RegistryAnalysis(
            extracted=accounts,
            flagged=flagged,
            reasons=dedupe(reasons),
            risk_score=risk,
            failures=failures,
        )
