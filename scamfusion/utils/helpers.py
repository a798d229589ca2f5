"""
ScamFusion Helper Functions

Utility functions used throughout the application.
"""

import re
from datetime import datetime, timezone
from typing import Iterable, List, Optional
from urllib.parse import urlparse


# ============================================================================
# Timestamps
# ============================================================================

def utc_now() -> datetime:
    """Get current UTC timestamp."""
    return datetime.now(timezone.utc)


# ============================================================================
# Numeric
# ============================================================================

def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


# ============================================================================
# Collections
# ============================================================================

def dedupe(items: Iterable[str]) -> List[str]:
    """Remove duplicates while preserving first-seen order."""
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


# ============================================================================
# Domain and URL Handling
# ============================================================================

def ensure_scheme(url: str) -> str:
    """Prefix scheme-less URLs with https://."""
    if not url.lower().startswith(('http://', 'https://')):
        return 'https://' + url
    return url


def extract_host(url: str) -> Optional[str]:
    """Extract lowercase host (no port, no credentials) from URL."""
    if not url:
        return None

    try:
        host = urlparse(ensure_scheme(url)).hostname
    except ValueError:
        return None
    return host.lower() if host else None


def normalize_url(url: str) -> str:
    """
    Normalize URL for comparison.

    - Add https:// when scheme is missing
    - Lowercase scheme and domain
    - Remove default ports
    - Remove trailing slashes and fragment
    """
    if not url:
        return ""

    try:
        parsed = urlparse(ensure_scheme(url))

        scheme = parsed.scheme.lower()
        netloc = parsed.netloc.lower()

        if netloc.endswith(':80') and scheme == 'http':
            netloc = netloc[:-3]
        if netloc.endswith(':443') and scheme == 'https':
            netloc = netloc[:-4]

        path = parsed.path.rstrip('/')

        normalized = f"{scheme}://{netloc}{path}"
        if parsed.query:
            normalized += f"?{parsed.query}"

        return normalized
    except ValueError:
        return url.lower()


def url_identity(url: str) -> str:
    """Normalized URL without its scheme; http and https forms compare equal."""
    normalized = normalize_url(url)
    scheme, sep, rest = normalized.partition('://')
    return rest if sep else normalized


def host_matches_domain(host: str, domain: str) -> bool:
    """True when host is domain itself or a subdomain of it."""
    host = host.lower().rstrip('.')
    domain = domain.lower()
    return host == domain or host.endswith(f".{domain}")


# ============================================================================
# Identifiers and PII
# ============================================================================

_NON_DIGITS = re.compile(r'\D')

RESIDENT_ID_PATTERN = re.compile(r'(?<!\d)\d{6}-?[1-4]\d{6}(?!\d)')
PHONE_MASK_PATTERN = re.compile(r'(?<!\d)01[016789]-?\d{3,4}-?\d{4}(?!\d)')
ACCOUNT_MASK_PATTERN = re.compile(r'(?<![\d-])\d{2,6}-\d{2,6}-\d{2,7}(?:-\d{1,3})?(?![\d-])|(?<!\d)\d{10,14}(?!\d)')


def normalize_digits(value: str) -> str:
    """Strip everything but digits."""
    if not value:
        return ""
    return _NON_DIGITS.sub('', value)


def normalize_phone(value: str) -> str:
    """Strip separators and map +82 country code to a leading 0."""
    digits = normalize_digits(value)
    if value.strip().startswith('+82') and digits.startswith('82'):
        digits = '0' + digits[2:]
    return digits


def mask_account(value: str) -> str:
    """Mask account number for logging: first 4 + **** + last 4."""
    digits = normalize_digits(value)
    if len(digits) <= 8:
        return '****'
    return f"{digits[:4]}****{digits[-4:]}"


def mask_phone(value: str) -> str:
    """Mask phone number for logging, keeping only the prefix."""
    digits = normalize_digits(value)
    if len(digits) <= 3:
        return '***'
    return f"{digits[:3]}****"


def mask_pii(text: str) -> str:
    """Replace resident IDs, mobile numbers and account numbers with placeholders."""
    if not text:
        return ""
    text = RESIDENT_ID_PATTERN.sub('[주민번호]', text)
    text = PHONE_MASK_PATTERN.sub('[전화번호]', text)
    text = ACCOUNT_MASK_PATTERN.sub('[계좌번호]', text)
    return text


# ============================================================================
# String Utilities
# ============================================================================

def truncate_string(s: str, max_length: int = 100, suffix: str = "...") -> str:
    """Truncate string to max length with suffix."""
    if not s or len(s) <= max_length:
        return s
    return s[:max_length - len(suffix)] + suffix


def preview_text(text: str, max_length: int = 30) -> str:
    """Single-line, PII-masked, truncated preview for log lines."""
    flattened = ' '.join(mask_pii(text).split())
    return truncate_string(flattened, max_length)
