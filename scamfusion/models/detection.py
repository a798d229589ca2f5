"""
ScamFusion Detection Data Models

Pydantic models for partial and final detection results.
"""

from enum import Enum
from typing import List, Optional, Set

from pydantic import BaseModel, Field


class DetectionMethod(str, Enum):
    """Provenance of the final confidence."""
    LEXICAL = "lexical"
    HYBRID = "hybrid"
    EXTERNAL_REGISTRY = "external_registry"
    MODEL = "model"


class ScamCategory(str, Enum):
    """Scam classification."""
    UNKNOWN = "unknown"
    INVESTMENT = "investment"
    TRADE_FRAUD = "trade_fraud"
    PHISHING = "phishing"
    IMPERSONATION = "impersonation"
    LOAN = "loan"
    SAFE = "safe"


class PartialResult(BaseModel):
    """Output of the lexical stage. Never final on its own."""
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    reasons: List[str] = Field(default_factory=list)
    detected_signals: List[str] = Field(default_factory=list)
    # Category tag carried by each matched signal, parallel to detected_signals
    signal_categories: List[ScamCategory] = Field(default_factory=list)

    @property
    def is_scam(self) -> bool:
        return self.confidence > 0.5


class UrlResult(BaseModel):
    """Output of URL risk analysis."""
    urls: List[str] = Field(default_factory=list, description="Normalized URLs found in text")
    suspicious_urls: Set[str] = Field(default_factory=set)
    reasons: List[str] = Field(default_factory=list)
    risk_score: float = Field(0.0, ge=0.0, le=1.0)

    @property
    def has_suspicious(self) -> bool:
        return bool(self.suspicious_urls)


class ModelVerdict(BaseModel):
    """Structured judgment returned by the secondary model."""
    is_scam: bool
    confidence: float = Field(..., ge=0.0, le=1.0)
    category: ScamCategory = ScamCategory.UNKNOWN
    message: str = ""
    reasons: List[str] = Field(default_factory=list)
    excerpts: List[str] = Field(default_factory=list)


class Verdict(BaseModel):
    """Final analysis result handed to callers."""
    is_scam: bool
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasons: List[str] = Field(default_factory=list, description="De-duplicated human-readable evidence")
    detected_signals: List[str] = Field(default_factory=list)
    method: DetectionMethod = DetectionMethod.LEXICAL
    scam_category: ScamCategory = ScamCategory.UNKNOWN
    advisory_message: Optional[str] = None
    cited_excerpts: List[str] = Field(default_factory=list)

    @property
    def risk_percent(self) -> int:
        return int(round(self.confidence * 100))
