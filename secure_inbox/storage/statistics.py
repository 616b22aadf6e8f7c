"""
Scan Statistics Aggregator

Maintains the durable scan counters and the bounded history log that
the dashboard and history views read.

Design Considerations:
- Every read-modify-write runs under one asyncio lock, so concurrent
  scan completions never lose an increment
- Counters and history are persisted together in a single store call
- The history entry's trust score always comes from the ScoreResult
"""

import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable, List, Optional

from secure_inbox.config.scanner_config import SCANNER_CONFIG
from secure_inbox.email_processing.models import (
    AggregateStats,
    EmailMessage,
    HistoryEntry,
    ScoreResult,
)
from secure_inbox.storage.base import StatsStore

logger = logging.getLogger(__name__)

EMAILS_SCANNED_KEY = "emailsScanned"
THREATS_BLOCKED_KEY = "threatsBlocked"
LAST_SCAN_TIME_KEY = "lastScanTime"
SCAN_HISTORY_KEY = "scanHistory"

STATS_KEYS = (EMAILS_SCANNED_KEY, THREATS_BLOCKED_KEY, LAST_SCAN_TIME_KEY, SCAN_HISTORY_KEY)

HISTORY_FILTERS = ("all", "threats", "safe")

ThreatNotifier = Callable[[str, str], Awaitable[None]]


async def log_threat_notification(sender: str, subject: str) -> None:
    """Default notifier: record the alert in the application log."""
    logger.warning(f"Potential Threat Detected - From: {sender} Subject: {subject}")


class StatisticsAggregator:
    """
    Sole owner of the scan counters and history log.

    Args:
        store: Backing key/value store
        notifier: Coroutine called as ``notifier(sender, subject)`` for threats
        history_limit: Maximum number of history entries kept
        now: Time source for scan timestamps
    """

    def __init__(
        self,
        store: StatsStore,
        notifier: Optional[ThreatNotifier] = log_threat_notification,
        history_limit: int = SCANNER_CONFIG["statistics"]["history_limit"],
        now: Callable[[], datetime] = datetime.now,
    ):
        if history_limit <= 0:
            raise ValueError("history_limit must be positive")
        self.store = store
        self.notifier = notifier
        self.history_limit = history_limit
        self._now = now
        self._lock = asyncio.Lock()

    async def record(
        self,
        message: EmailMessage,
        result: ScoreResult,
        notify: bool = True,
    ) -> HistoryEntry:
        """
        Record one completed scan.

        Increments the scanned counter (and the threat counter for threats),
        stamps the scan time and prepends a history entry, then persists
        everything in one store call. Threats trigger the notifier once,
        after the update is stored.

        Args:
            message: The scanned email
            result: Its score
            notify: Whether a threat should trigger the notifier

        Returns:
            The history entry that was stored
        """
        async with self._lock:
            data = await self.store.get(STATS_KEYS)

            timestamp = self._now().isoformat()
            emails_scanned = int(data.get(EMAILS_SCANNED_KEY) or 0) + 1
            threats_blocked = int(data.get(THREATS_BLOCKED_KEY) or 0)
            if result.is_threat:
                threats_blocked += 1

            entry = HistoryEntry.from_scan(message, result, timestamp)
            history = [entry.to_dict()] + list(data.get(SCAN_HISTORY_KEY) or [])
            history = history[:self.history_limit]

            await self.store.set({
                EMAILS_SCANNED_KEY: emails_scanned,
                THREATS_BLOCKED_KEY: threats_blocked,
                LAST_SCAN_TIME_KEY: timestamp,
                SCAN_HISTORY_KEY: history,
            })

        logger.debug(
            f"Recorded scan: scanned={emails_scanned} threats={threats_blocked} "
            f"trust_score={result.trust_score}"
        )

        if result.is_threat and notify and self.notifier is not None:
            await self._notify(message)

        return entry

    async def _notify(self, message: EmailMessage) -> None:
        try:
            await self.notifier(message.sender, message.subject)
        except Exception as e:
            logger.error(f"Threat notification failed for message from {message.sender}: {e}")

    async def get_stats(self) -> AggregateStats:
        data = await self.store.get(STATS_KEYS[:3])
        return AggregateStats(
            emails_scanned=int(data.get(EMAILS_SCANNED_KEY) or 0),
            threats_blocked=int(data.get(THREATS_BLOCKED_KEY) or 0),
            last_scan_time=data.get(LAST_SCAN_TIME_KEY) or None,
        )

    async def get_history(self, search: str = "", status: str = "all") -> List[HistoryEntry]:
        """
        Read the history log, most recent first.

        Args:
            search: Case-insensitive text matched against sender, subject and snippet
            status: One of ``all``, ``threats`` or ``safe``

        Returns:
            Matching history entries

        Raises:
            ValueError: If ``status`` is not a known filter
        """
        if status not in HISTORY_FILTERS:
            raise ValueError(f"Unknown history filter: {status}")

        data = await self.store.get((SCAN_HISTORY_KEY,))
        entries = [HistoryEntry.from_dict(item) for item in data.get(SCAN_HISTORY_KEY) or []]

        term = (search or "").lower()
        filtered = []
        for entry in entries:
            if term and not (
                term in entry.sender.lower()
                or term in entry.subject.lower()
                or term in entry.snippet.lower()
            ):
                continue
            if status == "threats" and not entry.is_threat:
                continue
            if status == "safe" and entry.is_threat:
                continue
            filtered.append(entry)
        return filtered

    async def get_recent_threats(
        self,
        limit: int = SCANNER_CONFIG["statistics"]["recent_threats"],
    ) -> List[HistoryEntry]:
        threats = await self.get_history(status="threats")
        return threats[:max(0, limit)]
