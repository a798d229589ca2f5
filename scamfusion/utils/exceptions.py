"""
ScamFusion Custom Exceptions

Centralized exception classes for error handling.
"""


class ScamFusionError(Exception):
    """Base exception for all ScamFusion errors."""
    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


# ============================================================================
# Input Exceptions
# ============================================================================

class InvalidInputError(ScamFusionError):
    """Caller supplied text or an identifier that cannot be analyzed."""
    pass


# ============================================================================
# Registry Exceptions
# ============================================================================

class RegistryError(ScamFusionError):
    """Error while consulting an external fraud registry."""
    pass


class RemoteTimeoutError(RegistryError):
    """Remote call exceeded its time bound."""
    pass


class RemoteFailureError(RegistryError):
    """Remote call failed or returned an unusable response."""
    pass


class SessionInitError(RegistryError):
    """Session handshake with the registry failed."""
    pass


# ============================================================================
# Model Exceptions
# ============================================================================

class ModelError(ScamFusionError):
    """Error with the secondary model."""
    pass


class ModelNotReadyError(ModelError):
    """Model backend is absent or not initialized."""
    pass


class ModelQuotaExceededError(ModelError):
    """Daily model call quota is exhausted."""
    pass


class ModelParseError(ModelError):
    """Model response did not match the expected schema."""
    pass


class ModelInferenceError(ModelError):
    """Model backend failed while generating."""
    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================

class ConfigurationError(ScamFusionError):
    """Application configuration error."""
    pass
