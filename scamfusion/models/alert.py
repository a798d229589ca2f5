"""
ScamFusion Alert Data Models

Records handed to the alert store and the display policy used by callers.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .detection import DetectionMethod, ScamCategory, Verdict
from ..utils.helpers import utc_now


class AlertEvent(BaseModel):
    """Persistable alert derived from a verdict."""
    alert_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    source_identifier: str
    timestamp: datetime
    confidence: float = Field(..., ge=0.0, le=1.0)
    scam_category: ScamCategory
    method: DetectionMethod
    reasons: List[str] = Field(default_factory=list)
    advisory_message: Optional[str] = None

    @classmethod
    def from_verdict(
        cls,
        verdict: Verdict,
        source_identifier: str,
        timestamp: Optional[datetime] = None,
    ) -> "AlertEvent":
        return cls(
            source_identifier=source_identifier,
            timestamp=timestamp or utc_now(),
            confidence=verdict.confidence,
            scam_category=verdict.scam_category,
            method=verdict.method,
            reasons=list(verdict.reasons),
            advisory_message=verdict.advisory_message,
        )


def should_display(verdict: Verdict, threshold: float = 0.5) -> bool:
    """Default display policy: show a warning only for confident scam verdicts."""
    return verdict.is_scam and verdict.confidence >= threshold
