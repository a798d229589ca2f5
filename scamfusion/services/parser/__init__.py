"""
ScamFusion Text Parsing Services

URL extraction from short free-form text.
"""

from .url_extractor import extract_urls_from_text

__all__ = [
    'extract_urls_from_text',
]
