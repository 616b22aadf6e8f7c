"""
Google Safe Browsing Client

Single round-trip URL reputation lookup against the Safe Browsing v4
``threatMatches:find`` endpoint.
"""

import logging
from typing import Any, Dict, List

from secure_inbox.config.scanner_config import SCANNER_CONFIG
from secure_inbox.email_processing.models import ReputationVerdict, ThreatDetail
from secure_inbox.integrations.base import ReputationClient, safe_get
from secure_inbox.integrations.exceptions import TransientProviderError

logger = logging.getLogger(__name__)

SAFE_BROWSING_CONFIG = SCANNER_CONFIG["safe_browsing"]


class SafeBrowsingClient(ReputationClient):
    """URL reputation lookups through Google Safe Browsing."""

    provider_name = SAFE_BROWSING_CONFIG["name"]
    API_URL = SAFE_BROWSING_CONFIG["api_endpoint"]

    def build_request_body(self, url: str) -> Dict[str, Any]:
        return {
            "client": {
                "clientId": SAFE_BROWSING_CONFIG["client_id"],
                "clientVersion": SAFE_BROWSING_CONFIG["client_version"],
            },
            "threatInfo": {
                "threatTypes": list(SAFE_BROWSING_CONFIG["threat_types"]),
                "platformTypes": list(SAFE_BROWSING_CONFIG["platform_types"]),
                "threatEntryTypes": list(SAFE_BROWSING_CONFIG["threat_entry_types"]),
                "threatEntries": [{"url": url}],
            },
        }

    async def _fetch_verdict(self, url: str) -> ReputationVerdict:
        body = self.build_request_body(url)

        async def send(api_key: str) -> Dict[str, Any]:
            return await self._request(
                "POST",
                self.API_URL,
                params={"key": api_key},
                json=body,
                headers={"Content-Type": "application/json"},
            )

        data = await self._call_with_rotation("lookup", send)
        verdict = self.parse_response(data)
        if not verdict.safe:
            logger.warning(f"Safe Browsing flagged {url}: {', '.join(verdict.threat_kinds)}")
        return verdict

    def parse_response(self, data: Dict[str, Any]) -> ReputationVerdict:
        """
        Normalize a ``threatMatches:find`` response.

        An empty body (no ``matches``) means no known threats.

        Raises:
            TransientProviderError: If ``matches`` is present but malformed
        """
        matches = data.get("matches")
        if not matches:
            return ReputationVerdict(safe=True, provider=self.provider_name)

        if not isinstance(matches, list):
            raise TransientProviderError(self.provider_name, "Malformed matches in response")

        threats: List[ThreatDetail] = []
        for match in matches:
            if not isinstance(match, dict):
                raise TransientProviderError(self.provider_name, "Malformed match record")
            threats.append(
                ThreatDetail(
                    kind=match.get("threatType") or "THREAT_TYPE_UNSPECIFIED",
                    source_platform=match.get("platformType") or "",
                    url=safe_get(match, "threat", "url") or "",
                )
            )

        return ReputationVerdict(safe=False, threat_details=threats, provider=self.provider_name)
