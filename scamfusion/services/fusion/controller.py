"""
ScamFusion Fusion Controller

Combines the local scorers, the fraud registries and the optional secondary
model into one Verdict.

Stages per request:
    lexical + URL -> early return when already conclusive
                  -> registry lookups when identifiers are present
                  -> urgency + money + URL bonus for medium confidence
                  -> secondary model inside the ambiguous band
                  -> rule-only finalization otherwise

Registry and model failures narrow the verdict to the signals that succeeded;
only a blank or non-string text is reported back to the caller as an error.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional

from scamfusion.config import Settings, get_settings
from scamfusion.models.detection import (
    DetectionMethod,
    ModelVerdict,
    ScamCategory,
    Verdict,
)
from scamfusion.models.registry import RegistryFindings
from scamfusion.services.ai.adapter import SecondaryModelAdapter
from scamfusion.services.ai.prompts import build_model_input, wrap_chat_prompt
from scamfusion.services.detection.lexical import LexicalScorer
from scamfusion.services.detection.url_analyzer import UrlRiskAnalyzer
from scamfusion.services.enrichment.orchestrator import RegistryOrchestrator
from scamfusion.utils.constants import (
    FUSION_MONEY_MARKERS,
    FUSION_URGENCY_MARKERS,
    REASON_CATEGORY_HINTS,
)
from scamfusion.utils.exceptions import ConfigurationError, InvalidInputError
from scamfusion.utils.helpers import clamp, dedupe, preview_text

logger = logging.getLogger(__name__)


ADVISORY_TEMPLATES = {
    ScamCategory.INVESTMENT: "이 메시지는 투자 사기로 의심됩니다 (위험도 {pct}%). 고수익을 보장하는 투자는 대부분 사기입니다.",
    ScamCategory.TRADE_FRAUD: "거래 사기가 의심됩니다 (위험도 {pct}%). 선입금을 요구하면 직거래로 진행하세요.",
    ScamCategory.PHISHING: "피싱이 의심됩니다 (위험도 {pct}%). 의심스러운 링크를 누르거나 인증정보를 알려주지 마세요.",
    ScamCategory.IMPERSONATION: "기관 사칭 사기가 의심됩니다 (위험도 {pct}%). 공식 채널을 통해 직접 확인하세요.",
    ScamCategory.LOAN: "대출 사기가 의심됩니다 (위험도 {pct}%). 선수수료 요구는 불법입니다.",
    ScamCategory.UNKNOWN: "사기가 의심되는 메시지입니다 (위험도 {pct}%). 금전 요구나 개인정보 요청에 주의하세요.",
}


def advisory_for(category: ScamCategory, confidence: float) -> str:
    """Rule-based warning text for a category."""
    template = ADVISORY_TEMPLATES.get(category, ADVISORY_TEMPLATES[ScamCategory.UNKNOWN])
    return template.format(pct=int(round(confidence * 100)))


def infer_category_from_reasons(reasons: List[str]) -> ScamCategory:
    """Last-resort categorizer over generated reason text."""
    reason_text = " ".join(reasons)
    for category, hints in REASON_CATEGORY_HINTS:
        if any(hint in reason_text for hint in hints):
            return ScamCategory(category)
    return ScamCategory.UNKNOWN


def infer_category(tags: List[ScamCategory], reasons: List[str]) -> ScamCategory:
    """
    Pick the category from the structured tags carried by matched signals,
    falling back to the reason text when no tag is specific.
    """
    if not tags and not reasons:
        return ScamCategory.SAFE

    specific = [t for t in tags if t not in (ScamCategory.UNKNOWN, ScamCategory.SAFE)]
    if specific:
        counts = Counter(specific)
        best = max(counts.values())
        # First seen wins ties
        for tag in specific:
            if counts[tag] == best:
                return tag

    return infer_category_from_reasons(reasons)


@dataclass
class _Evidence:
    """Mutable accumulator for one request."""
    confidence: float = 0.0
    reasons: List[str] = field(default_factory=list)
    signals: List[str] = field(default_factory=list)
    tags: List[ScamCategory] = field(default_factory=list)
    method: DetectionMethod = DetectionMethod.LEXICAL


class FusionController:
    """
    Long-lived service object owning the scorers, the registry clients (with
    their caches and sessions) and the model adapter (with its quota).
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        lexical: Optional[LexicalScorer] = None,
        url_analyzer: Optional[UrlRiskAnalyzer] = None,
        registry: Optional[RegistryOrchestrator] = None,
        model: Optional[SecondaryModelAdapter] = None,
    ):
        self.settings = settings or get_settings()
        self.lexical = lexical or LexicalScorer(self.settings)
        self.url_analyzer = url_analyzer or UrlRiskAnalyzer()
        self.registry = registry
        self.model = model

    @property
    def registry_available(self) -> bool:
        return self.registry is not None and self.settings.registry_enabled

    @property
    def model_available(self) -> bool:
        return self.model is not None and self.model.is_available()

    async def analyze(self, text: str, use_model: bool = True) -> Verdict:
        """
        Analyze one text.

        Args:
            text: Captured text
            use_model: Allow escalation to the secondary model

        Returns:
            Final Verdict

        Raises:
            InvalidInputError: text is not a non-blank string
        """
        if not isinstance(text, str) or not text.strip():
            raise InvalidInputError("text must be a non-empty string")

        s = self.settings

        # 1. Local stages
        lexical = self.lexical.score(text)
        url = self.url_analyzer.analyze(text)

        ev = _Evidence(
            reasons=lexical.reasons + url.reasons,
            signals=list(lexical.detected_signals),
            tags=list(lexical.signal_categories),
        )

        # 2. Combine
        ev.confidence = lexical.confidence
        if url.has_suspicious:
            ev.confidence = max(ev.confidence, url.risk_score) + url.risk_score * s.url_fusion_factor
            ev.method = DetectionMethod.HYBRID
            ev.signals.append("suspicious_url")
            ev.tags.append(ScamCategory.PHISHING)
        ev.confidence = clamp(ev.confidence)

        logger.debug(
            f"step=rule_result lexical={lexical.confidence:.2f} url={url.risk_score:.2f} "
            f"suspicious_urls={len(url.suspicious_urls)} confidence={ev.confidence:.2f} "
            f"text=\"{preview_text(text)}\""
        )

        # 3. Early return
        if ev.confidence > s.early_return_threshold:
            logger.debug(f"step=early_return confidence={ev.confidence:.2f} method={ev.method.value}")
            return self._finalize_rule(ev)

        # Registry lookups
        if self.registry_available and self.registry.has_identifiers(text):
            findings = await self.registry.analyze(text)
            self._merge_registry(ev, findings)
        else:
            reason = "no_identifiers" if self.registry_available else "disabled"
            logger.debug(f"step=registry_skip reason={reason}")

        # 4. Medium-confidence combination bonus
        if ev.confidence > s.medium_threshold:
            lowered = text.lower()
            has_urgency = any(m in lowered for m in FUSION_URGENCY_MARKERS)
            has_money = any(m in lowered for m in FUSION_MONEY_MARKERS)
            if has_urgency and has_money and url.urls:
                ev.confidence = clamp(ev.confidence + s.fusion_combo_bonus)
                ev.reasons.append("의심스러운 조합: 긴급 + 금전 + URL")

        # 5. Secondary model inside the ambiguous band
        in_band = s.model_band_low <= ev.confidence <= s.model_band_high
        if use_model and in_band and self.model_available:
            logger.debug(f"step=model_trigger confidence={ev.confidence:.2f}")
            prompt = wrap_chat_prompt(build_model_input(text, ev.reasons, ev.signals, ev.confidence))
            result = await self.model.analyze_async(prompt)
            if result.success:
                return self._combine_with_model(ev, result.value)
            logger.warning(f"step=model_fallback reason=\"{result.error_message}\" confidence={ev.confidence:.2f}")
        elif not use_model:
            logger.debug("step=model_bypass reason=use_model_false")
        elif not in_band:
            logger.debug(f"step=model_bypass reason=outside_band confidence={ev.confidence:.2f}")
        else:
            logger.debug("step=model_bypass reason=model_not_available")

        # 6. Rule-only result
        return self._finalize_rule(ev)

    def _merge_registry(self, ev: _Evidence, findings: RegistryFindings) -> None:
        s = self.settings
        for kind, analysis, tag in (
            ("phone", findings.phone, ScamCategory.PHISHING),
            ("account", findings.account, ScamCategory.TRADE_FRAUD),
        ):
            if analysis.has_hit:
                ev.confidence = max(ev.confidence, analysis.risk_score) + analysis.risk_score * s.registry_hit_factor
                ev.method = DetectionMethod.EXTERNAL_REGISTRY
                ev.signals.append(f"reported_{kind}")
                ev.tags.append(tag)
            elif analysis.suspicious_prefix:
                ev.confidence += analysis.risk_score * s.registry_prefix_factor
                ev.signals.append(f"suspicious_{kind}_prefix")
            ev.reasons.extend(analysis.reasons)

        ev.confidence = clamp(ev.confidence)
        logger.debug(
            f"step=registry_result phone_hits={len(findings.phone.flagged)} "
            f"account_hits={len(findings.account.flagged)} failures={len(findings.failures)} "
            f"confidence={ev.confidence:.2f}"
        )

    def _combine_with_model(self, ev: _Evidence, model: ModelVerdict) -> Verdict:
        s = self.settings
        combined = clamp(ev.confidence * s.rule_weight + model.confidence * s.model_weight)
        is_scam = combined > s.scam_threshold or model.is_scam

        category = model.category
        if category == ScamCategory.UNKNOWN or (is_scam and category == ScamCategory.SAFE):
            category = infer_category(ev.tags, ev.reasons)
            if is_scam and category == ScamCategory.SAFE:
                category = ScamCategory.UNKNOWN

        logger.info(
            f"step=combine rule={ev.confidence:.2f} model={model.confidence:.2f} "
            f"final={combined:.2f} is_scam={is_scam} category={category.value}"
        )

        return Verdict(
            is_scam=is_scam,
            confidence=combined,
            reasons=dedupe(ev.reasons + model.reasons),
            detected_signals=dedupe(ev.signals),
            method=DetectionMethod.MODEL,
            scam_category=category,
            advisory_message=model.message or None,
            cited_excerpts=list(model.excerpts),
        )

    def _finalize_rule(self, ev: _Evidence) -> Verdict:
        is_scam = ev.confidence > self.settings.scam_threshold
        category = infer_category(ev.tags, ev.reasons)
        if is_scam and category == ScamCategory.SAFE:
            category = ScamCategory.UNKNOWN

        return Verdict(
            is_scam=is_scam,
            confidence=ev.confidence,
            reasons=dedupe(ev.reasons),
            detected_signals=dedupe(ev.signals),
            method=ev.method,
            scam_category=category,
            advisory_message=advisory_for(category, ev.confidence) if is_scam else None,
        )

    async def close(self) -> None:
        if self.model is not None:
            self.model.close()


def create_fusion_controller(settings: Optional[Settings] = None) -> FusionController:
    """
    Build the service object from settings.

    The registry is wired only when enabled; the model adapter is always
    created but is simply unavailable when no model artifact is configured.

    Raises:
        ConfigurationError: rule and model weights do not sum to 1
    """
    settings = settings or get_settings()

    if abs(settings.rule_weight + settings.model_weight - 1.0) > 1e-6:
        raise ConfigurationError(
            f"rule_weight + model_weight must equal 1.0 "
            f"(got {settings.rule_weight} + {settings.model_weight})"
        )

    registry = RegistryOrchestrator.from_settings(settings) if settings.registry_enabled else None

    model = SecondaryModelAdapter.from_settings(settings)
    init = model.initialize()
    if not init.success:
        logger.info(f"Running without secondary model: {init.error_message}")

    return FusionController(settings=settings, registry=registry, model=model)
