"""
ScamFusion Model Response Parser

Maps the model's JSON answer onto ModelVerdict. Anything that does not fit the
schema raises ModelParseError; the adapter reports that as "model declined".
"""

import json
import logging
import re
from typing import Any, Dict, List

from pydantic import ValidationError

from scamfusion.models.detection import ModelVerdict, ScamCategory
from scamfusion.utils.constants import MODEL_CATEGORY_LABELS
from scamfusion.utils.exceptions import ModelParseError
from scamfusion.utils.helpers import truncate_string

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL | re.IGNORECASE)

DEFAULT_SCAM_REASON = "AI 분석 결과 사기 의심 정황이 확인되었습니다"
DEFAULT_SAFE_REASON = "AI 분석 결과 뚜렷한 사기 정황이 없습니다"


def extract_json_block(raw: str) -> str:
    """Return the fenced ```json block if present, else the outermost {...} span."""
    if not raw:
        raise ModelParseError("Empty model response")

    fenced = _FENCED_JSON.search(raw)
    if fenced:
        return fenced.group(1)

    start = raw.find("{")
    end = raw.rfind("}")
    if start == -1 or end <= start:
        raise ModelParseError(f"No JSON object in model response (length={len(raw)})")
    return raw[start:end + 1]


def parse_category(value: Any) -> ScamCategory:
    """Map English enum names or Korean labels to ScamCategory."""
    if not isinstance(value, str) or not value.strip():
        return ScamCategory.UNKNOWN

    lowered = value.strip().lower()
    for category in ScamCategory:
        if lowered in (category.value, category.name.lower()):
            return category

    for label, category in MODEL_CATEGORY_LABELS.items():
        if label in value:
            return ScamCategory(category)
    return ScamCategory.UNKNOWN


def parse_confidence(value: Any) -> float:
    """Accept 0-1 floats or 0-100 percentages."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ModelParseError(f"confidence is not numeric: {value!r}")
    confidence = float(value)
    if 1.0 < confidence <= 100.0:
        confidence /= 100.0
    if not 0.0 <= confidence <= 1.0:
        raise ModelParseError(f"confidence out of range: {value!r}")
    return confidence


def _string_list(value: Any, field: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ModelParseError(f"{field} must be a list")
    return [str(item).strip() for item in value if str(item).strip()]


def parse_model_response(raw: str) -> ModelVerdict:
    """
    Parse a model completion.

    Args:
        raw: Completion text, possibly with prose around the JSON

    Returns:
        ModelVerdict

    Raises:
        ModelParseError: No JSON, invalid JSON, or schema violation
    """
    block = extract_json_block(raw)
    try:
        data: Dict[str, Any] = json.loads(block)
    except json.JSONDecodeError as e:
        logger.warning(f"Model returned invalid JSON: {truncate_string(block, 80)}")
        raise ModelParseError(f"Invalid JSON from model: {e}") from e

    if not isinstance(data, dict):
        raise ModelParseError("Model JSON is not an object")

    is_scam = data.get("isScam")
    if not isinstance(is_scam, bool):
        raise ModelParseError(f"isScam missing or not boolean: {is_scam!r}")

    confidence = parse_confidence(data.get("confidence"))
    reasons = _string_list(data.get("reasons"), "reasons")
    if not reasons:
        reasons = [DEFAULT_SCAM_REASON if is_scam else DEFAULT_SAFE_REASON]

    message = data.get("warningMessage") or ""
    if not isinstance(message, str):
        raise ModelParseError("warningMessage must be a string")

    try:
        return ModelVerdict(
            is_scam=is_scam,
            confidence=confidence,
            category=parse_category(data.get("scamType")),
            message=message.strip(),
            reasons=reasons,
            excerpts=_string_list(data.get("suspiciousParts"), "suspiciousParts"),
        )
    except ValidationError as e:
        raise ModelParseError(f"Model response failed validation: {e}") from e
