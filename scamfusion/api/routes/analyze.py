"""
ScamFusion Analysis Route

Endpoint for analyzing one captured text and deciding whether to alert.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from scamfusion.api.dependencies import get_app_settings, get_controller
from scamfusion.config import Settings
from scamfusion.models import AlertEvent, Verdict, should_display
from scamfusion.services.fusion import FusionController
from scamfusion.utils.constants import MAX_TEXT_LENGTH

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analyze", tags=["analysis"])


class AnalyzeRequest(BaseModel):
    """Request model for text analysis."""
    text: str = Field(..., max_length=MAX_TEXT_LENGTH, description="Captured text, recent lines first")
    source_id: str = Field("unknown", description="Originating app or conversation identifier")
    use_model: bool = Field(True, description="Allow escalation to the secondary model")


class AnalyzeResponse(BaseModel):
    """Verdict plus the caller-facing display decision."""
    verdict: Verdict
    risk_percent: int
    display: bool
    alert: Optional[AlertEvent] = None


@router.post("", response_model=AnalyzeResponse)
async def analyze_text(
    request: AnalyzeRequest,
    controller: FusionController = Depends(get_controller),
    settings: Settings = Depends(get_app_settings),
):
    """
    Analyze a text for scam indicators.

    A blank text is rejected with 400; registry or model outages only narrow
    the verdict.
    """
    verdict = await controller.analyze(request.text, use_model=request.use_model)

    display = should_display(verdict, settings.display_threshold)
    alert = AlertEvent.from_verdict(verdict, request.source_id) if display else None

    logger.info(
        f"Analyzed text from {request.source_id}: is_scam={verdict.is_scam} "
        f"confidence={verdict.confidence:.2f} method={verdict.method.value}"
    )

    return AnalyzeResponse(
        verdict=verdict,
        risk_percent=verdict.risk_percent,
        display=display,
        alert=alert,
    )
