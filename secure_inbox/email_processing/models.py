"""
Shared data models for email threat scoring.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class EmailMessage:
    """
    Email fields as captured from the webmail client.

    Produced externally and never modified by the scoring pipeline.
    Missing fields are represented as empty strings.
    """
    sender: str = ""
    subject: str = ""
    snippet: str = ""
    date: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EmailMessage":
        return cls(
            sender=data.get("sender") or "",
            subject=data.get("subject") or "",
            snippet=data.get("snippet") or "",
            date=data.get("date") or "",
        )


@dataclass
class ScanSettings:
    """User-facing scan toggles, loaded and saved by the settings collaborator."""
    enable_phishing: bool = True
    enable_link_check: bool = True
    enable_notifications: bool = True
    scan_contacts: bool = False
    scan_images: bool = False


@dataclass
class HeuristicResult:
    """
    Outcome of local heuristic phishing analysis.

    Attributes:
        is_phishing (bool): True when confidence exceeds the phishing threshold
        confidence (int): Combined signal strength, 0 to 100
        reasons (List[str]): Human-readable description of every signal that fired
    """
    is_phishing: bool
    confidence: int
    reasons: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ThreatDetail:
    kind: str
    source_platform: str
    url: str


@dataclass
class ReputationVerdict:
    """
    Normalized safety verdict for one (provider, URL) pair.

    A verdict with ``error`` set is a fail-open result: the provider could
    not be reached or returned something unusable, so the URL is treated
    as safe and the error is kept for display.

    Attributes:
        safe (bool): Whether the provider considers the URL safe
        threat_details (List[ThreatDetail]): Matches reported by the provider
        error (Optional[str]): Failure description for fail-open verdicts
        provider (str): Name of the provider that produced the verdict
        malicious_count (int): Number of engines flagging the URL (deep scan only)
        total_engines (int): Number of engines that reported (deep scan only)
        analyzed_at (Optional[str]): ISO timestamp of the provider analysis
    """
    safe: bool
    threat_details: List[ThreatDetail] = field(default_factory=list)
    error: Optional[str] = None
    provider: str = ""
    malicious_count: int = 0
    total_engines: int = 0
    analyzed_at: Optional[str] = None

    @property
    def threat_kinds(self) -> List[str]:
        return [detail.kind for detail in self.threat_details]

    @classmethod
    def fail_open(cls, provider: str, error: str) -> "ReputationVerdict":
        return cls(safe=True, error=error, provider=provider)


@dataclass
class ScoreResult:
    """Final trust assessment returned to the caller for one email."""
    trust_score: int
    warnings: List[str] = field(default_factory=list)
    is_threat: bool = False


@dataclass
class HistoryEntry:
    """One row of the bounded scan history log, most recent first."""
    sender: str
    subject: str
    snippet: str
    date: str
    timestamp: str
    trust_score: int
    is_threat: bool
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def from_scan(cls, message: EmailMessage, result: ScoreResult, timestamp: str) -> "HistoryEntry":
        return cls(
            sender=message.sender,
            subject=message.subject,
            snippet=message.snippet,
            date=message.date,
            timestamp=timestamp,
            trust_score=result.trust_score,
            is_threat=result.is_threat,
            warnings=list(result.warnings),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoryEntry":
        return cls(
            sender=data.get("sender") or "",
            subject=data.get("subject") or "",
            snippet=data.get("snippet") or "",
            date=data.get("date") or "",
            timestamp=data.get("timestamp") or "",
            trust_score=int(data.get("trust_score") or 0),
            is_threat=bool(data.get("is_threat")),
            warnings=list(data.get("warnings") or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AggregateStats:
    emails_scanned: int = 0
    threats_blocked: int = 0
    last_scan_time: Optional[str] = None
