"""
Email Scan Data Models

Defines request and response models for scoring inbound email.

Design Considerations:
- Email fields default to empty strings, matching what the inbox view provides
- Scan toggles are optional per request; server defaults fill the gaps
- Conversion helpers keep the domain dataclasses out of the HTTP schema
"""

from dataclasses import asdict
from typing import List, Optional

from pydantic import BaseModel, Field

from secure_inbox.email_processing.models import EmailMessage, ScanSettings, ScoreResult


class ScanSettingsModel(BaseModel):
    """
    Per-request scan toggles.

    Unset toggles fall back to the server's configured defaults.
    """
    enable_phishing: Optional[bool] = Field(
        default=None,
        description="Run heuristic phishing analysis"
    )
    enable_link_check: Optional[bool] = Field(
        default=None,
        description="Check links with Safe Browsing and VirusTotal"
    )
    enable_notifications: Optional[bool] = Field(
        default=None,
        description="Raise a notification when a threat is found"
    )
    scan_contacts: Optional[bool] = Field(
        default=None,
        description="Skip analysis for trusted contacts"
    )
    scan_images: Optional[bool] = Field(
        default=None,
        description="Reserved image scanning toggle"
    )

    def merge_into(self, defaults: ScanSettings) -> ScanSettings:
        """Overlay the toggles set on this request onto ``defaults``."""
        values = asdict(defaults)
        values.update(self.model_dump(exclude_none=True))
        return ScanSettings(**values)


class EmailScanRequest(BaseModel):
    """
    Request model for scoring an email.
    """
    sender: str = Field(
        default="",
        description="Sender address as displayed, e.g. 'Name <addr@example.com>'"
    )
    subject: str = Field(
        default="",
        description="Email subject line"
    )
    snippet: str = Field(
        default="",
        description="Visible body text"
    )
    date: str = Field(
        default="",
        description="Date string as displayed"
    )
    settings: Optional[ScanSettingsModel] = Field(
        default=None,
        description="Scan toggles overriding the server defaults"
    )

    def to_message(self) -> EmailMessage:
        return EmailMessage(
            sender=self.sender,
            subject=self.subject,
            snippet=self.snippet,
            date=self.date,
        )


class EmailScanResponse(BaseModel):
    """
    Response model for a scored email.
    """
    trust_score: int = Field(
        ...,
        ge=0,
        le=100,
        description="Trust score, 100 is fully trusted"
    )
    warnings: List[str] = Field(
        default_factory=list,
        description="Human-readable findings in the order they were found"
    )
    is_threat: bool = Field(
        default=False,
        description="Whether any analyzer flagged the email"
    )

    @classmethod
    def from_result(cls, result: ScoreResult) -> "EmailScanResponse":
        return cls(
            trust_score=result.trust_score,
            warnings=list(result.warnings),
            is_threat=result.is_threat,
        )
