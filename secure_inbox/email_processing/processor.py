"""
Email Threat Scoring Pipeline

Combines local heuristics with two URL reputation providers into a
single bounded trust score, and records each completed scan with the
statistics aggregator.

Design Considerations:
- Link checks run sequentially in extraction order, so deductions and
  warnings are deterministic for a given email
- A failure checking one link is reported for that link and never
  aborts the rest of the scan
- A link flagged by the first provider is not re-checked by the second
"""

import logging
from typing import TYPE_CHECKING, Optional

from secure_inbox.email_processing.analyzers.heuristic import PhishingHeuristicAnalyzer
from secure_inbox.email_processing.handlers.contacts import TrustedContacts
from secure_inbox.email_processing.handlers.links import extract_links
from secure_inbox.email_processing.models import (
    EmailMessage,
    ReputationVerdict,
    ScanSettings,
    ScoreResult,
)
from secure_inbox.utils.logging_config import mask_email

if TYPE_CHECKING:
    from secure_inbox.integrations.base import ReputationClient
    from secure_inbox.storage.statistics import StatisticsAggregator

logger = logging.getLogger(__name__)

MAX_TRUST_SCORE = 100
MIN_TRUST_SCORE = 0
UNSAFE_LINK_PENALTY = 30
DETECTION_PENALTY = 10


class EmailProcessor:
    """
    Scoring orchestrator for inbound email.

    Runs the heuristic analyzer and, per extracted link, the Safe Browsing
    lookup followed by the VirusTotal deep scan. Provides ``score_email``
    for scoring alone and ``process_email`` for scoring plus recording.
    """

    def __init__(
        self,
        safe_browsing: "ReputationClient",
        virustotal: "ReputationClient",
        statistics: Optional["StatisticsAggregator"] = None,
        trusted_contacts: Optional[TrustedContacts] = None,
        analyzer: Optional[PhishingHeuristicAnalyzer] = None,
    ):
        """
        Initialize the processor with its collaborators.

        Args:
            safe_browsing: First reputation provider (URL lookup)
            virustotal: Second reputation provider (deep scan)
            statistics: Aggregator receiving completed scans
            trusted_contacts: Senders exempt from scanning when enabled
            analyzer: Heuristic analyzer, default vocabularies if omitted
        """
        self.safe_browsing = safe_browsing
        self.virustotal = virustotal
        self.statistics = statistics
        self.trusted_contacts = trusted_contacts if trusted_contacts is not None else TrustedContacts()
        self.analyzer = analyzer or PhishingHeuristicAnalyzer()
        logger.info("EmailProcessor initialized successfully")

    async def score_email(self, message: EmailMessage, settings: ScanSettings) -> ScoreResult:
        """
        Score one email.

        Args:
            message: Email fields to analyze
            settings: User scan toggles

        Returns:
            ScoreResult with trust score in [0, 100], warnings in
            accumulation order and the threat flag
        """
        if settings.scan_contacts and self.trusted_contacts.is_trusted(message.sender):
            logger.debug(f"Skipping scan for trusted contact {mask_email(message.sender)}")
            return ScoreResult(trust_score=MAX_TRUST_SCORE, warnings=[], is_threat=False)

        score = MAX_TRUST_SCORE
        warnings = []
        is_threat = False

        if settings.enable_phishing:
            analysis = self.analyzer.analyze(message)
            if analysis.is_phishing:
                score -= analysis.confidence
                warnings.append(f"Phishing detected (confidence: {analysis.confidence}%)")
                is_threat = True
                logger.info(
                    f"Heuristic phishing match for {mask_email(message.sender)}: "
                    f"{'; '.join(analysis.reasons)}"
                )

        if settings.enable_link_check:
            for link in extract_links(message.snippet):
                try:
                    safety = await self.safe_browsing.check_url(link)
                    if not safety.safe:
                        score -= UNSAFE_LINK_PENALTY
                        warnings.append(f"Unsafe link: {link} ({self._describe_threats(safety)})")
                        is_threat = True
                        continue

                    scan = await self.virustotal.check_url(link)
                    if scan.malicious_count > 0:
                        score -= DETECTION_PENALTY * scan.malicious_count
                        warnings.append(
                            f"VirusTotal: {scan.malicious_count} vendors flagged this URL"
                        )
                        is_threat = True
                except Exception as e:
                    logger.error(f"Link analysis failed for {link}: {e}")
                    warnings.append(f"Security check failed for link: {link}")

        trust_score = max(MIN_TRUST_SCORE, min(MAX_TRUST_SCORE, score))
        logger.info(
            f"Scored email from {mask_email(message.sender)}: trust_score={trust_score} "
            f"threat={is_threat} warnings={len(warnings)}"
        )
        return ScoreResult(trust_score=trust_score, warnings=warnings, is_threat=is_threat)

    async def process_email(self, message: EmailMessage, settings: ScanSettings) -> ScoreResult:
        """
        Score an email and record the outcome.

        The score is returned even when recording fails, since statistics
        are secondary to showing the user the result.
        """
        result = await self.score_email(message, settings)

        if self.statistics is not None:
            try:
                await self.statistics.record(
                    message, result, notify=settings.enable_notifications
                )
            except Exception as e:
                logger.error(f"Failed to record scan statistics: {e}")

        return result

    @staticmethod
    def _describe_threats(verdict: ReputationVerdict) -> str:
        kinds = verdict.threat_kinds
        return ", ".join(kinds) if kinds else "malicious"
