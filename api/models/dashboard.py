"""
Dashboard Data Models

Defines response models for the statistics dashboard and the scan
history view.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from secure_inbox.email_processing.models import AggregateStats, HistoryEntry


class DashboardStats(BaseModel):
    """
    Aggregate scan counters.
    """
    emails_scanned: int = Field(
        default=0,
        ge=0,
        description="Total number of emails scanned"
    )
    threats_blocked: int = Field(
        default=0,
        ge=0,
        description="Number of scans that flagged a threat"
    )
    last_scan_time: Optional[str] = Field(
        default=None,
        description="ISO-8601 time of the most recent scan"
    )

    @classmethod
    def from_stats(cls, stats: AggregateStats) -> "DashboardStats":
        return cls(
            emails_scanned=stats.emails_scanned,
            threats_blocked=stats.threats_blocked,
            last_scan_time=stats.last_scan_time,
        )


class HistoryItem(BaseModel):
    """
    One recorded scan.
    """
    sender: str = Field(default="", description="Sender address")
    subject: str = Field(default="", description="Email subject line")
    snippet: str = Field(default="", description="Visible body text")
    date: str = Field(default="", description="Date string as displayed")
    timestamp: str = Field(..., description="ISO-8601 time the scan was recorded")
    trust_score: int = Field(..., ge=0, le=100, description="Trust score of the scan")
    is_threat: bool = Field(default=False, description="Whether the scan flagged a threat")
    warnings: List[str] = Field(default_factory=list, description="Scan findings")

    @classmethod
    def from_entry(cls, entry: HistoryEntry) -> "HistoryItem":
        return cls(**entry.to_dict())


class HistoryResponse(BaseModel):
    """
    Response model for history listings, most recent first.
    """
    entries: List[HistoryItem] = Field(
        default_factory=list,
        description="Matching history entries"
    )
    total: int = Field(
        ...,
        ge=0,
        description="Number of matching entries"
    )
