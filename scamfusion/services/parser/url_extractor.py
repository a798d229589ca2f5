"""
ScamFusion URL Extractor

Extract and normalize URLs from short free-form text (chat, SMS, screen captures).
"""

import logging
import re
from typing import List

from scamfusion.utils.constants import MAX_URLS_PER_TEXT
from scamfusion.utils.helpers import normalize_url, url_identity

logger = logging.getLogger(__name__)


# Explicit scheme, any host
SCHEMED_URL_PATTERN = re.compile(
    r'https?://[A-Za-z0-9\-._~:/?#\[\]@!$&\'()*+,;=%]+',
    re.IGNORECASE,
)

# Scheme-less domain with an alphabetic TLD, optional port and path.
# ASCII-only so it does not swallow adjacent Hangul text.
BARE_URL_PATTERN = re.compile(
    r'(?<![A-Za-z0-9@./:-])'
    r'(?:www\.)?(?:[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z]{2,24}'
    r'(?::\d{2,5})?'
    r'(?:/[A-Za-z0-9\-._~:/?#\[\]@!$&\'()*+,;=%]*)?',
    re.IGNORECASE,
)

_TRAILING_PUNCT = '.,;:!?)]\'"'


def _strip_trailing(url: str) -> str:
    return url.rstrip(_TRAILING_PUNCT)


def extract_urls_from_text(text: str) -> List[str]:
    """
    Extract URLs from plain text using regex.

    Scheme-less URLs are prefixed with https:// and every URL is normalized,
    so the same link written with and without a scheme collapses to one entry.

    Args:
        text: Text to search

    Returns:
        Ordered, de-duplicated list of normalized URLs
    """
    if not text:
        return []

    found = []
    consumed = []

    for match in SCHEMED_URL_PATTERN.finditer(text):
        found.append((match.start(), _strip_trailing(match.group(0))))
        consumed.append((match.start(), match.end()))

    for match in BARE_URL_PATTERN.finditer(text):
        if any(start <= match.start() < end for start, end in consumed):
            continue
        found.append((match.start(), _strip_trailing(match.group(0))))

    found.sort(key=lambda item: item[0])

    # First spelling wins; http://x and bare x are the same link
    urls = []
    seen = set()
    for _, url in found:
        if not url:
            continue
        identity = url_identity(url)
        if identity not in seen:
            seen.add(identity)
            urls.append(normalize_url(url))

    if len(urls) > MAX_URLS_PER_TEXT:
        logger.debug(f"Truncating {len(urls)} URLs to {MAX_URLS_PER_TEXT}")
        urls = urls[:MAX_URLS_PER_TEXT]

    return urls
