"""
ScamFusion Registry Data Models

Pydantic models for fraud registry lookups and the analyses built on them.
"""

from typing import List

from pydantic import BaseModel, Field


class RegistryVerdict(BaseModel):
    """What a registry knows about one normalized identifier."""
    key: str = Field(..., description="Normalized identifier (digits only)")
    report_count: int = Field(0, ge=0)

    @property
    def is_reported(self) -> bool:
        return self.report_count > 0


class PhoneReport(RegistryVerdict):
    """Phone registry record."""
    voice_count: int = Field(0, ge=0, description="Voice phishing reports")
    sms_count: int = Field(0, ge=0, description="SMS phishing reports")


class AccountReport(RegistryVerdict):
    """Account registry record; report_count is the fraud count."""
    pass


class RegistryAnalysis(BaseModel):
    """Result of checking every identifier of one kind found in a text."""
    extracted: List[str] = Field(default_factory=list, description="Normalized identifiers found")
    flagged: List[str] = Field(default_factory=list, description="Identifiers the registry reported")
    reasons: List[str] = Field(default_factory=list)
    risk_score: float = Field(0.0, ge=0.0, le=1.0)
    failures: List[str] = Field(default_factory=list, description="Identifiers whose lookup failed")
    suspicious_prefix: bool = False

    @property
    def has_hit(self) -> bool:
        return bool(self.flagged)


class RegistryFindings(BaseModel):
    """Merged phone and account analyses for one request."""
    phone: RegistryAnalysis = Field(default_factory=RegistryAnalysis)
    account: RegistryAnalysis = Field(default_factory=RegistryAnalysis)

    @property
    def has_hit(self) -> bool:
        return self.phone.has_hit or self.account.has_hit

    @property
    def failures(self) -> List[str]:
        return self.phone.failures + self.account.failures
