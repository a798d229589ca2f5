"""
ScamFusion AI Module

Optional secondary model: backend contract, quota, prompt and response handling.
"""

from .base import (
    ModelBackend,
    ModelOutput,
    ModelResult,
)

from .local_backend import LocalServerBackend

from .quota import QuotaCounter

from .prompts import (
    SYSTEM_PROMPT,
    build_model_input,
    split_recent_context,
    wrap_chat_prompt,
)

from .parser import (
    extract_json_block,
    parse_category,
    parse_model_response,
)

from .adapter import SecondaryModelAdapter

__all__ = [
    'ModelBackend',
    'ModelOutput',
    'ModelResult',
    'LocalServerBackend',
    'QuotaCounter',
    'SYSTEM_PROMPT',
    'build_model_input',
    'split_recent_context',
    'wrap_chat_prompt',
    'extract_json_block',
    'parse_category',
    'parse_model_response',
    'SecondaryModelAdapter',
]
