"""
ScamFusion URL Risk Analyzer

Extracts URLs from text and scores each one against independent heuristics:
low-trust TLDs, URL shorteners, phishing vocabulary, bank brand impersonation,
IP-literal hosts, excessive length and excessive special characters.
"""

import ipaddress
import logging
import re
from typing import List, Optional, Set, Tuple
from urllib.parse import urlparse

from scamfusion.models.detection import UrlResult
from scamfusion.services.parser.url_extractor import extract_urls_from_text
from scamfusion.utils.constants import (
    BRAND_TARGETS,
    MAX_URL_LENGTH,
    MAX_URL_SPECIAL_CHARS,
    PHISHING_URL_KEYWORDS,
    SHORTENER_DOMAINS,
    SUSPICIOUS_TLDS,
    URL_SCORE_BRAND_SPOOF,
    URL_SCORE_FREE_TLD,
    URL_SCORE_IP_HOST,
    URL_SCORE_LONG_URL,
    URL_SCORE_PHISHING_KEYWORD,
    URL_SCORE_SHORTENER,
    URL_SCORE_SPECIAL_CHARS,
)
from scamfusion.utils.helpers import clamp, dedupe, extract_host, host_matches_domain, truncate_string

logger = logging.getLogger(__name__)

_TOKEN_SPLIT = re.compile(r'[.\-/_?=&]+')

# Brand keywords shorter than this must equal a whole host/path token
_MIN_SUBSTRING_BRAND = 5


def is_ip_host(host: str) -> bool:
    """True when host is an IPv4 literal."""
    try:
        return isinstance(ipaddress.ip_address(host), ipaddress.IPv4Address)
    except ValueError:
        return False


def official_brand_for_host(host: str) -> Optional[str]:
    """Return the brand id whose official domain this host belongs to."""
    for brand_id, brand_info in BRAND_TARGETS.items():
        if any(host_matches_domain(host, legit) for legit in brand_info["legitimate_domains"]):
            return brand_id
    return None


def find_brand_impersonation(host: str, path: str) -> Optional[Tuple[str, str]]:
    """
    Check whether the URL names a bank brand without being hosted on one of
    that brand's official domains.

    Containment alone is not enough: ``kbstar.com.evil.tk`` contains the
    official domain as a string but is not a subdomain of it.

    Returns:
        (brand name, matched keyword) or None
    """
    haystack = f"{host}{path}".lower()
    tokens = set(t for t in _TOKEN_SPLIT.split(haystack) if t)

    for brand_info in BRAND_TARGETS.values():
        for keyword in brand_info["keywords"]:
            if len(keyword) >= _MIN_SUBSTRING_BRAND:
                present = keyword in haystack
            else:
                present = keyword in tokens
            if not present:
                continue

            is_legitimate = any(
                host_matches_domain(host, legit)
                for legit in brand_info["legitimate_domains"]
            )
            if not is_legitimate:
                return brand_info["name"], keyword
    return None


class UrlRiskAnalyzer:
    """Heuristic URL scorer. Stateless."""

    def analyze(self, text: str) -> UrlResult:
        """
        Extract and score every URL in text.

        Args:
            text: Raw text

        Returns:
            UrlResult whose risk_score is the clamped sum of all triggered checks
        """
        urls = extract_urls_from_text(text)
        if not urls:
            return UrlResult()

        suspicious: Set[str] = set()
        reasons: List[str] = []
        risk = 0.0

        for url in urls:
            url_risk, url_reasons = self.score_url(url)
            if url_reasons:
                suspicious.add(url)
                reasons.extend(url_reasons)
                risk += url_risk

        if suspicious:
            logger.debug(f"{len(suspicious)} suspicious URL(s) out of {len(urls)}")

        return UrlResult(
            urls=urls,
            suspicious_urls=suspicious,
            reasons=dedupe(reasons),
            risk_score=clamp(risk),
        )

    def score_url(self, url: str) -> Tuple[float, List[str]]:
        """Apply every check to one normalized URL."""
        host = extract_host(url)
        if not host:
            return 0.0, []

        parsed = urlparse(url)
        path = parsed.path or ""
        lowered = url.lower()
        display = truncate_string(url, 60)

        risk = 0.0
        reasons: List[str] = []

        # 1. Low-trust TLD
        tld = host.rsplit('.', 1)[-1]
        if tld in SUSPICIOUS_TLDS and not is_ip_host(host):
            risk += URL_SCORE_FREE_TLD
            reasons.append(f"무료/저신뢰 도메인 사용 (.{tld}): {display}")

        # 2. Shortener
        if any(host_matches_domain(host, shortener) for shortener in SHORTENER_DOMAINS):
            risk += URL_SCORE_SHORTENER
            reasons.append(f"단축 URL 사용: {display}")

        # 3. Phishing vocabulary (official bank domains are exempt)
        if official_brand_for_host(host) is None:
            for keyword in PHISHING_URL_KEYWORDS:
                if keyword in lowered:
                    risk += URL_SCORE_PHISHING_KEYWORD
                    reasons.append(f"피싱 의심 키워드 포함 ({keyword}): {display}")

        # 4. Brand impersonation
        impersonation = find_brand_impersonation(host, path)
        if impersonation:
            brand_name, keyword = impersonation
            risk += URL_SCORE_BRAND_SPOOF
            reasons.append(f"{brand_name} 사칭 의심 도메인 ({keyword}): {display}")

        # 5. IP literal host
        if is_ip_host(host):
            risk += URL_SCORE_IP_HOST
            reasons.append(f"IP 주소 직접 접근 URL: {display}")

        # 6. Length
        if len(url) > MAX_URL_LENGTH:
            risk += URL_SCORE_LONG_URL
            reasons.append(f"비정상적으로 긴 URL ({len(url)}자)")

        # 7. Obfuscation characters
        special = sum(url.count(c) for c in '@%&')
        if special > MAX_URL_SPECIAL_CHARS:
            risk += URL_SCORE_SPECIAL_CHARS
            reasons.append(f"특수문자 과다 URL ({special}개)")

        return risk, reasons
