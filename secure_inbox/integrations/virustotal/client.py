"""
VirusTotal URL Scanning Client

Two-step deep scan: the URL is submitted for analysis, then the
analysis report is fetched after a fixed delay. Both calls share the
client's credential pool and rotate on rate limits independently, so a
rate-limited poll re-polls with the next key instead of resubmitting.
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional

from secure_inbox.config.scanner_config import SCANNER_CONFIG
from secure_inbox.email_processing.models import ReputationVerdict, ThreatDetail
from secure_inbox.integrations.base import ReputationClient, safe_get
from secure_inbox.integrations.exceptions import TransientProviderError

logger = logging.getLogger(__name__)

VIRUSTOTAL_CONFIG = SCANNER_CONFIG["virustotal"]


class VirusTotalClient(ReputationClient):
    """Deep URL scanning through the VirusTotal v3 API."""

    provider_name = VIRUSTOTAL_CONFIG["name"]
    BASE_URL = VIRUSTOTAL_CONFIG["api_endpoint"]

    def __init__(
        self,
        api_keys: Iterable[str],
        poll_delay: float = VIRUSTOTAL_CONFIG["poll_delay"],
        clock: Callable[[], float] = time.monotonic,
        **kwargs: Any,
    ):
        """
        Initialize the VirusTotal client.

        Args:
            api_keys: Ordered VirusTotal API keys
            poll_delay: Seconds to wait between submission and report retrieval
            clock: Monotonic time source for cache expiry
            **kwargs: Passed through to ReputationClient
        """
        super().__init__(api_keys, clock=clock, **kwargs)
        self.poll_delay = poll_delay

    @staticmethod
    def _headers(api_key: str) -> Dict[str, str]:
        return {"x-apikey": api_key, "Accept": "application/json"}

    async def _fetch_verdict(self, url: str) -> ReputationVerdict:
        analysis_id = await self.submit_url(url)
        logger.debug(f"VirusTotal analysis {analysis_id} queued for {url}")

        await asyncio.sleep(self.poll_delay)

        report = await self.get_analysis(analysis_id)
        verdict = self.parse_analysis(report, url)
        if verdict.malicious_count:
            logger.warning(
                f"VirusTotal: {verdict.malicious_count}/{verdict.total_engines} engines flagged {url}"
            )
        return verdict

    async def submit_url(self, url: str) -> str:
        """
        Submit a URL for analysis.

        Returns:
            Opaque analysis identifier

        Raises:
            TransientProviderError: If the response carries no identifier
            CredentialsExhaustedError: If every key is rate limited
        """

        async def send(api_key: str) -> Dict[str, Any]:
            return await self._request(
                "POST",
                f"{self.BASE_URL}/urls",
                headers=self._headers(api_key),
                data={"url": url},
            )

        data = await self._call_with_rotation("submission", send)
        analysis_id = safe_get(data, "data", "id")
        if not analysis_id:
            raise TransientProviderError(self.provider_name, "Submission response missing analysis id")
        return analysis_id

    async def get_analysis(self, analysis_id: str) -> Dict[str, Any]:
        """Fetch the analysis report for a submitted URL."""

        async def send(api_key: str) -> Dict[str, Any]:
            return await self._request(
                "GET",
                f"{self.BASE_URL}/analyses/{analysis_id}",
                headers=self._headers(api_key),
            )

        return await self._call_with_rotation("analysis poll", send)

    def parse_analysis(self, report: Dict[str, Any], url: str) -> ReputationVerdict:
        """
        Normalize an analysis report.

        Raises:
            TransientProviderError: If the report has no attributes
        """
        attributes = safe_get(report, "data", "attributes")
        if not isinstance(attributes, dict):
            raise TransientProviderError(self.provider_name, "Analysis response missing attributes")

        stats = attributes.get("stats") or {}
        try:
            malicious_count = int(stats.get("malicious") or 0)
            total_engines = sum(int(count or 0) for count in stats.values())
        except (AttributeError, TypeError, ValueError) as e:
            raise TransientProviderError(self.provider_name, f"Malformed analysis stats: {e}") from e

        return ReputationVerdict(
            safe=malicious_count == 0,
            threat_details=self._flagged_engines(attributes.get("results"), url),
            provider=self.provider_name,
            malicious_count=malicious_count,
            total_engines=total_engines,
            analyzed_at=self._format_date(attributes.get("date")),
        )

    @staticmethod
    def _flagged_engines(results: Any, url: str) -> List[ThreatDetail]:
        if not isinstance(results, dict):
            return []
        flagged = []
        for engine, outcome in results.items():
            if isinstance(outcome, dict) and outcome.get("category") == "malicious":
                flagged.append(
                    ThreatDetail(
                        kind=outcome.get("result") or "malicious",
                        source_platform=outcome.get("engine_name") or engine,
                        url=url,
                    )
                )
        return flagged

    @staticmethod
    def _format_date(epoch_seconds: Any) -> Optional[str]:
        if not isinstance(epoch_seconds, (int, float)):
            return None
        return datetime.fromtimestamp(epoch_seconds, tz=timezone.utc).isoformat()
