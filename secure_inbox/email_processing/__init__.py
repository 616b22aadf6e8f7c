"""
Email processing package initialization.
"""

from .models import (
    AggregateStats,
    EmailMessage,
    HeuristicResult,
    HistoryEntry,
    ReputationVerdict,
    ScanSettings,
    ScoreResult,
    ThreatDetail,
)
from .analyzers.heuristic import PhishingHeuristicAnalyzer, analyze_for_phishing
from .handlers.contacts import TrustedContacts
from .handlers.links import extract_links
from .processor import EmailProcessor

__all__ = [
    'AggregateStats',
    'EmailMessage',
    'HeuristicResult',
    'HistoryEntry',
    'ReputationVerdict',
    'ScanSettings',
    'ScoreResult',
    'ThreatDetail',
    'PhishingHeuristicAnalyzer',
    'analyze_for_phishing',
    'TrustedContacts',
    'extract_links',
    'EmailProcessor',
]
