"""
ScamFusion Lexical Scorer

Weighted keyword and structural pattern matching over raw text.

Keywords are grouped in severity tiers (critical / high / medium); every distinct
keyword found adds its tier weight. Structural patterns (account numbers, ID
numbers, phone numbers, money amounts, embedded links) only count when they are
corroborated by another pattern or by a keyword, because isolated numeric shapes
show up constantly in harmless screen content.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Pattern, Tuple

from scamfusion.config import Settings, get_settings
from scamfusion.models.detection import PartialResult, ScamCategory
from scamfusion.utils.constants import (
    CREDENTIAL_MARKERS,
    MAX_REASON_EXAMPLES,
    MONEY_MARKERS,
    PHONE_PREFIX_EXCLUSION,
    STRUCTURAL_PATTERNS,
    TIER_CRITICAL,
    TIER_HIGH,
    TIER_LABELS,
    TIER_MEDIUM,
    URGENCY_MARKERS,
    WEIGHTED_KEYWORDS,
)
from scamfusion.utils.helpers import clamp, normalize_digits

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r'\s+')

TIER_ORDER: Tuple[str, ...] = (TIER_CRITICAL, TIER_HIGH, TIER_MEDIUM)


def normalize_text(text: str) -> str:
    """Lowercase and drop all whitespace. Hangul is left intact."""
    return _WHITESPACE.sub('', text.lower())


@dataclass(frozen=True)
class WeightedSignal:
    """A keyword (or regex) with a severity tier and a category tag."""
    name: str
    tier: str
    weight: float
    category: ScamCategory = ScamCategory.UNKNOWN
    pattern: Optional[Pattern] = None

    def matches(self, normalized_text: str) -> bool:
        if self.pattern is not None:
            return self.pattern.search(normalized_text) is not None
        return self.name in normalized_text


@dataclass(frozen=True)
class PatternMatch:
    """A structural pattern evaluated against the original text."""
    name: str
    pattern: Pattern
    weight: float
    reason: str
    category: ScamCategory = ScamCategory.UNKNOWN
    requires_corroboration: bool = True
    # Matches whose digits satisfy this are discarded (e.g. phone-shaped accounts)
    exclude_digits: Optional[Pattern] = None

    def find_spans(self, text: str) -> List[Tuple[int, int]]:
        spans = []
        for match in self.pattern.finditer(text):
            if self.exclude_digits is not None and self.exclude_digits.match(normalize_digits(match.group(0))):
                continue
            spans.append(match.span())
        return spans


@dataclass
class _TierHits:
    tier: str
    keywords: List[str] = field(default_factory=list)
    categories: List[ScamCategory] = field(default_factory=list)


def build_keyword_signals(settings: Settings) -> List[WeightedSignal]:
    """Expand the keyword tables into WeightedSignal objects."""
    weights = {
        TIER_CRITICAL: settings.critical_weight,
        TIER_HIGH: settings.high_weight,
        TIER_MEDIUM: settings.medium_weight,
    }
    signals = []
    seen = set()
    for tier in TIER_ORDER:
        for category, keywords in WEIGHTED_KEYWORDS[tier].items():
            for keyword in keywords:
                keyword = normalize_text(keyword)
                if keyword in seen:
                    continue
                seen.add(keyword)
                signals.append(WeightedSignal(
                    name=keyword,
                    tier=tier,
                    weight=weights[tier],
                    category=ScamCategory(category),
                ))
    return signals


def build_structural_patterns() -> List[PatternMatch]:
    """Compile the structural pattern table."""
    exclusion = re.compile(PHONE_PREFIX_EXCLUSION)
    patterns = []
    for name, regex, weight, reason, category in STRUCTURAL_PATTERNS:
        patterns.append(PatternMatch(
            name=name,
            pattern=re.compile(regex),
            weight=weight,
            reason=reason,
            category=ScamCategory(category),
            exclude_digits=exclusion if name == "account_number" else None,
        ))
    return patterns


class LexicalScorer:
    """
    Keyword and pattern based scorer.

    Pure: holds only immutable tables built at construction time.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.signals = build_keyword_signals(self.settings)
        self.patterns = build_structural_patterns()

    def score(self, text: str) -> PartialResult:
        """
        Score text.

        Args:
            text: Raw text as captured

        Returns:
            PartialResult with clamped confidence, reasons and detected signals
        """
        if not text or not text.strip():
            return PartialResult()

        normalized = normalize_text(text)

        confidence = 0.0
        reasons: List[str] = []
        detected: List[str] = []
        categories: List[ScamCategory] = []

        # Keyword tiers
        hits: Dict[str, _TierHits] = {tier: _TierHits(tier) for tier in TIER_ORDER}
        for signal in self.signals:
            if signal.matches(normalized):
                tier_hits = hits[signal.tier]
                tier_hits.keywords.append(signal.name)
                tier_hits.categories.append(signal.category)
                confidence += signal.weight

        keyword_count = 0
        for tier in TIER_ORDER:
            tier_hits = hits[tier]
            if not tier_hits.keywords:
                continue
            keyword_count += len(tier_hits.keywords)
            detected.extend(tier_hits.keywords)
            categories.extend(tier_hits.categories)
            examples = ", ".join(tier_hits.keywords[:MAX_REASON_EXAMPLES])
            reasons.append(
                f"{TIER_LABELS[tier]} 키워드 {len(tier_hits.keywords)}개 발견: {examples}"
            )

        # Structural patterns
        matched_patterns = self._match_patterns(text)
        corroborated = len(matched_patterns) >= 2 or (bool(matched_patterns) and keyword_count > 0)
        for pattern in matched_patterns:
            if pattern.requires_corroboration and not corroborated:
                continue
            confidence += pattern.weight
            detected.append(pattern.name)
            categories.append(pattern.category)
            reasons.append(f"{pattern.reason} 발견")

        if matched_patterns and not corroborated:
            logger.debug(f"Ignoring isolated structural pattern: {matched_patterns[0].name}")

        # Urgency + money + credential combination
        if self._has_combination(detected):
            confidence += self.settings.lexical_combo_bonus
            reasons.append("긴급성 + 금전 요구 + 인증정보 요구 조합 감지")

        return PartialResult(
            confidence=clamp(confidence),
            reasons=reasons,
            detected_signals=detected,
            signal_categories=categories,
        )

    def _match_patterns(self, text: str) -> List[PatternMatch]:
        """Return patterns with at least one match not already claimed by an earlier pattern."""
        claimed: List[Tuple[int, int]] = []
        matched = []
        for pattern in self.patterns:
            fresh = [
                span for span in pattern.find_spans(text)
                if not any(span[0] < end and start < span[1] for start, end in claimed)
            ]
            if fresh:
                claimed.extend(fresh)
                matched.append(pattern)
        return matched

    @staticmethod
    def _has_combination(detected: List[str]) -> bool:
        def any_marker(markers):
            return any(marker in signal for signal in detected for marker in markers)

        return (
            any_marker(URGENCY_MARKERS)
            and any_marker(MONEY_MARKERS)
            and any_marker(CREDENTIAL_MARKERS)
        )
