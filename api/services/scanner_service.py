"""
Scanner Service Implementation

Wires the scoring pipeline, the reputation clients and the statistics
aggregator together from API settings, and exposes the operations the
route handlers call.

Design Considerations:
- One service instance per process, so reputation caches and key
  rotation state are shared by all requests
- Route handlers receive the service through dependency injection
- Per-request scan toggles are merged over configured defaults
"""

import logging
from typing import List, Optional

from api.config import APISettings, get_settings
from secure_inbox.email_processing.handlers.contacts import TrustedContacts
from secure_inbox.email_processing.models import (
    AggregateStats,
    EmailMessage,
    HistoryEntry,
    ScanSettings,
    ScoreResult,
)
from secure_inbox.email_processing.processor import EmailProcessor
from secure_inbox.integrations import SafeBrowsingClient, VirusTotalClient
from secure_inbox.storage import SecureStatsStore, StatisticsAggregator

logger = logging.getLogger(__name__)


class ScannerService:
    """
    Service facade over the email scoring pipeline.

    Args:
        processor: Configured scoring orchestrator
        statistics: Aggregator holding counters and history
        default_settings: Scan toggles used when a request sets none
    """

    def __init__(
        self,
        processor: EmailProcessor,
        statistics: StatisticsAggregator,
        default_settings: Optional[ScanSettings] = None,
    ):
        self.processor = processor
        self.statistics = statistics
        self.default_settings = default_settings or ScanSettings()

    @classmethod
    def from_settings(cls, settings: APISettings) -> "ScannerService":
        """
        Build the service and its collaborators from API settings.

        Args:
            settings: Validated API settings

        Returns:
            Ready-to-use scanner service
        """
        safe_browsing = SafeBrowsingClient(
            settings.SAFE_BROWSING_API_KEYS,
            cache_ttl=settings.REPUTATION_CACHE_TTL_SECONDS,
            request_timeout=settings.PROVIDER_REQUEST_TIMEOUT_SECONDS,
        )
        virustotal = VirusTotalClient(
            settings.VIRUSTOTAL_API_KEYS,
            poll_delay=settings.VIRUSTOTAL_POLL_DELAY_SECONDS,
            cache_ttl=settings.REPUTATION_CACHE_TTL_SECONDS,
            request_timeout=settings.PROVIDER_REQUEST_TIMEOUT_SECONDS,
        )
        statistics = StatisticsAggregator(
            SecureStatsStore(settings.STATS_STORAGE_PATH),
            history_limit=settings.HISTORY_LIMIT,
        )
        processor = EmailProcessor(
            safe_browsing,
            virustotal,
            statistics=statistics,
            trusted_contacts=TrustedContacts(settings.TRUSTED_CONTACTS),
        )
        defaults = ScanSettings(
            enable_phishing=settings.ENABLE_PHISHING,
            enable_link_check=settings.ENABLE_LINK_CHECK,
            enable_notifications=settings.ENABLE_NOTIFICATIONS,
            scan_contacts=settings.SCAN_CONTACTS,
            scan_images=settings.SCAN_IMAGES,
        )

        logger.info(
            f"Scanner service initialized with {len(settings.SAFE_BROWSING_API_KEYS)} Safe Browsing "
            f"and {len(settings.VIRUSTOTAL_API_KEYS)} VirusTotal keys"
        )
        return cls(processor, statistics, defaults)

    @property
    def trusted_contacts(self) -> TrustedContacts:
        return self.processor.trusted_contacts

    async def analyze(self, message: EmailMessage, settings: ScanSettings) -> ScoreResult:
        """Score an email and record it in the statistics."""
        return await self.processor.process_email(message, settings)

    async def score(self, message: EmailMessage, settings: ScanSettings) -> ScoreResult:
        """Score an email without recording it."""
        return await self.processor.score_email(message, settings)

    async def get_stats(self) -> AggregateStats:
        return await self.statistics.get_stats()

    async def get_history(self, search: str = "", status: str = "all") -> List[HistoryEntry]:
        return await self.statistics.get_history(search=search, status=status)

    async def get_recent_threats(self, limit: int) -> List[HistoryEntry]:
        return await self.statistics.get_recent_threats(limit)


_scanner_service: Optional[ScannerService] = None


def get_scanner_service() -> ScannerService:
    """Provide the process-wide scanner service for dependency injection."""
    global _scanner_service
    if _scanner_service is None:
        _scanner_service = ScannerService.from_settings(get_settings())
    return _scanner_service
