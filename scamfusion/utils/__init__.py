"""
ScamFusion Utilities Package
============================

Common utilities, constants, and helper functions used throughout the application.
"""

from scamfusion.utils.constants import (
    APP_NAME,
    APP_DESCRIPTION,
    TIER_CRITICAL,
    TIER_HIGH,
    TIER_MEDIUM,
)

from scamfusion.utils.exceptions import (
    ScamFusionError,
    InvalidInputError,
    RegistryError,
    RemoteTimeoutError,
    RemoteFailureError,
    SessionInitError,
    ModelError,
    ModelNotReadyError,
    ModelQuotaExceededError,
    ModelParseError,
    ModelInferenceError,
    ConfigurationError,
)

from scamfusion.utils.helpers import (
    utc_now,
    clamp,
    dedupe,
    normalize_url,
    url_identity,
    extract_host,
    host_matches_domain,
    normalize_digits,
    normalize_phone,
    mask_account,
    mask_phone,
    mask_pii,
    truncate_string,
    preview_text,
)

__all__ = [
    # Constants
    "APP_NAME",
    "APP_DESCRIPTION",
    "TIER_CRITICAL",
    "TIER_HIGH",
    "TIER_MEDIUM",
    # Exceptions
    "ScamFusionError",
    "InvalidInputError",
    "RegistryError",
    "RemoteTimeoutError",
    "RemoteFailureError",
    "SessionInitError",
    "ModelError",
    "ModelNotReadyError",
    "ModelQuotaExceededError",
    "ModelParseError",
    "ModelInferenceError",
    "ConfigurationError",
    # Helpers
    "utc_now",
    "clamp",
    "dedupe",
    "normalize_url",
    "url_identity",
    "extract_host",
    "host_matches_domain",
    "normalize_digits",
    "normalize_phone",
    "mask_account",
    "mask_phone",
    "mask_pii",
    "truncate_string",
    "preview_text",
]
