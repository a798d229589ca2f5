"""
ScamFusion Model Prompt Templates

Pure string building for the secondary model: evidence summary plus recent
conversation, PII-masked, wrapped in ChatML for local instruct models.
"""

from typing import List, Optional

from scamfusion.utils.constants import CHATML_END, CHATML_START, RECENT_CONTEXT_LINES
from scamfusion.utils.helpers import mask_pii


# System instruction for scam adjudication
SYSTEM_PROMPT = """너는 금융 사기 탐지 전문가야. 사용자가 보내는 메시지(및 1차 규칙 분석 요약)를 보고, 반드시 아래 JSON 형식으로만 답변해. 다른 텍스트는 출력하지 마.
JSON 형식:
{"isScam": true 또는 false, "confidence": 0.0~1.0, "scamType": "투자사기" 또는 "중고거래사기" 또는 "피싱" 또는 "사칭" 또는 "대출사기" 또는 "정상", "warningMessage": "사용자에게 보여줄 경고 메시지 (한국어, 2문장 이내)", "reasons": ["위험 요소 1", "위험 요소 2"], "suspiciousParts": ["의심되는 문구 인용"]}"""


def split_recent_context(text: str, max_lines: int = RECENT_CONTEXT_LINES) -> tuple:
    """
    Split text into (recent context, current message).

    Recent context is the last ``max_lines`` non-empty lines; the current
    message is the last of them.
    """
    lines = [line.strip() for line in text.split("\n") if line.strip()]
    recent = lines[-max_lines:]
    current = recent[-1] if recent else ""
    return "\n".join(recent), current


def build_model_input(
    text: str,
    rule_reasons: List[str],
    detected_signals: List[str],
    rule_confidence: Optional[float] = None,
) -> str:
    """
    Build the user block for the model.

    Every text field is PII-masked here, before anything reaches a backend.

    Args:
        text: Full captured text
        rule_reasons: Evidence from the rule-based stages
        detected_signals: Matched keyword/pattern identifiers
        rule_confidence: Rule-based confidence, if known

    Returns:
        Plain user input (not yet wrapped in ChatML)
    """
    recent_context, current_message = split_recent_context(text)

    parts = ["[1차 규칙 분석]"]
    if rule_confidence is not None:
        parts.append(f"규칙 기반 위험도: {int(round(rule_confidence * 100))}%")
    if rule_reasons:
        parts.append("탐지 사유:")
        parts.extend(f"- {mask_pii(reason)}" for reason in rule_reasons)
    else:
        parts.append("탐지 사유: 없음")
    if detected_signals:
        parts.append(f"탐지 키워드: {', '.join(detected_signals)}")

    parts.append("")
    parts.append("[최근 대화]")
    parts.append(mask_pii(recent_context))
    parts.append("")
    parts.append("[현재 메시지]")
    parts.append(mask_pii(current_message))

    return "\n".join(parts)


def wrap_chat_prompt(user_input: str, system_instruction: Optional[str] = None) -> str:
    """Render a ChatML prompt that leaves the assistant turn open."""
    system = system_instruction or SYSTEM_PROMPT
    return (
        f"{CHATML_START}system\n{system}\n{CHATML_END}\n"
        f"{CHATML_START}user\n{user_input.strip()}\n{CHATML_END}\n"
        f"{CHATML_START}assistant\n"
    )
