"""
ScamFusion Detection Module

Local, network-free scorers: weighted keyword/pattern matching and URL risk
heuristics.
"""

from .lexical import (
    LexicalScorer,
    PatternMatch,
    WeightedSignal,
    normalize_text,
)

from .url_analyzer import (
    UrlRiskAnalyzer,
    find_brand_impersonation,
    is_ip_host,
)

__all__ = [
    'LexicalScorer',
    'PatternMatch',
    'WeightedSignal',
    'normalize_text',
    'UrlRiskAnalyzer',
    'find_brand_impersonation',
    'is_ip_host',
]
