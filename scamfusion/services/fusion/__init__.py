"""
ScamFusion Fusion Module

Orchestration of all detection stages into one verdict.
"""

from .controller import (
    ADVISORY_TEMPLATES,
    FusionController,
    advisory_for,
    create_fusion_controller,
    infer_category,
    infer_category_from_reasons,
)

__all__ = [
    'ADVISORY_TEMPLATES',
    'FusionController',
    'advisory_for',
    'create_fusion_controller',
    'infer_category',
    'infer_category_from_reasons',
]
