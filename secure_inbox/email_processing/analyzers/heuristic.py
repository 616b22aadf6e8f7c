"""
Heuristic Phishing Analyzer

Scores an email for phishing likelihood from its sender, subject and
snippet alone. Runs before any reputation lookup and never touches the
network, so it is safe to call for every message the client sees.

Design Considerations:
- Pure and deterministic: same message, same result
- Fixed vocabularies, each keyword counted at most once
- Reasons reported in a stable order for display
"""

import logging
from typing import Iterable, List, Optional

from secure_inbox.email_processing.models import EmailMessage, HeuristicResult

logger = logging.getLogger(__name__)

PHISHING_KEYWORDS = (
    "urgent", "verify", "account", "suspended", "password", "login",
    "security", "update", "bank", "paypal", "irs", "social security",
    "limited time", "offer", "click here", "confirm", "immediately",
    "action required", "dear customer", "dear user",
)

URGENCY_PHRASES = (
    "immediately", "urgent", "right away", "within 24 hours",
)

SUSPICIOUS_DOMAINS = (
    "paypai.com", "amaz0n.com", "appleid.com", "netflix.com",
    "micr0soft.com", "g00gle.com", "faceb00k.com",
)

PHISHING_THRESHOLD = 40

DOMAIN_RISK_WEIGHT = 30
KEYWORD_WEIGHT = 10
KEYWORD_CAP = 50
URGENCY_WEIGHT = 20
LINK_MISMATCH_WEIGHT = 25


def extract_sender_domain(sender: str) -> str:
    """
    Return the part of a sender address after ``@``.

    Handles the ``Name <user@host>`` display form by dropping the closing
    bracket. Returns an empty string when there is no ``@``.
    """
    if "@" not in sender:
        return ""
    return sender.split("@", 1)[1].strip().rstrip(">").strip()


def _strip_suffix(domain: str) -> str:
    if "." not in domain:
        return domain
    return domain.rsplit(".", 1)[0]


class PhishingHeuristicAnalyzer:
    """
    Local, stateless phishing detector.

    Combines four signals into a bounded confidence score:
    look-alike sender domain, phishing keywords, urgency language and
    link text mismatch. The vocabularies can be overridden for testing
    or tuning; the defaults are the module-level constants.
    """

    def __init__(
        self,
        keywords: Iterable[str] = PHISHING_KEYWORDS,
        urgency_phrases: Iterable[str] = URGENCY_PHRASES,
        suspicious_domains: Iterable[str] = SUSPICIOUS_DOMAINS,
    ):
        self.keywords = tuple(k.lower() for k in keywords)
        self.urgency_phrases = tuple(p.lower() for p in urgency_phrases)
        self.suspicious_domains = tuple(d.lower() for d in suspicious_domains)

    def analyze(self, message: EmailMessage) -> HeuristicResult:
        """
        Analyze an email for phishing indicators.

        Args:
            message: Email fields to analyze

        Returns:
            HeuristicResult with confidence and ordered reasons
        """
        sender = (message.sender or "").lower()
        subject = (message.subject or "").lower()
        body = (message.snippet or "").lower()

        sender_domain = extract_sender_domain(sender)
        domain_risk = self._has_domain_risk(sender_domain)
        keyword_count = self._count_keywords(subject, body)
        has_urgency = any(
            phrase in subject or phrase in body for phrase in self.urgency_phrases
        )
        link_mismatch = self._detect_link_mismatch(body)

        confidence = self.calculate_confidence(
            domain_risk, keyword_count, has_urgency, link_mismatch
        )

        reasons: List[str] = []
        if domain_risk:
            reasons.append(f"Suspicious sender domain: {sender_domain}")
        if keyword_count > 0:
            reasons.append(f"{keyword_count} phishing keywords detected")
        if has_urgency:
            reasons.append("Urgency language detected")
        if link_mismatch:
            reasons.append("Link text mismatch detected")

        logger.debug(
            f"Heuristic analysis: domain_risk={domain_risk} keywords={keyword_count} "
            f"urgency={has_urgency} confidence={confidence}"
        )

        return HeuristicResult(
            is_phishing=confidence > PHISHING_THRESHOLD,
            confidence=confidence,
            reasons=reasons,
        )

    def _has_domain_risk(self, sender_domain: str) -> bool:
        if not sender_domain:
            return False
        return any(
            _strip_suffix(domain) in sender_domain
            for domain in self.suspicious_domains
        )

    def _count_keywords(self, subject: str, body: str) -> int:
        return sum(
            1 for keyword in self.keywords
            if keyword in subject or keyword in body
        )

    def _detect_link_mismatch(self, text: str) -> bool:
        # Snippets carry no anchor markup, so there is nothing to compare.
        return False

    @staticmethod
    def calculate_confidence(
        domain_risk: bool,
        keyword_count: int,
        has_urgency: bool,
        link_mismatch: bool,
    ) -> int:
        score = 0
        if domain_risk:
            score += DOMAIN_RISK_WEIGHT
        if keyword_count > 0:
            score += min(KEYWORD_CAP, keyword_count * KEYWORD_WEIGHT)
        if has_urgency:
            score += URGENCY_WEIGHT
        if link_mismatch:
            score += LINK_MISMATCH_WEIGHT
        return max(0, min(100, score))


_default_analyzer: Optional[PhishingHeuristicAnalyzer] = None


def analyze_for_phishing(message: EmailMessage) -> HeuristicResult:
    """Analyze a message with the default vocabularies."""
    global _default_analyzer
    if _default_analyzer is None:
        _default_analyzer = PhishingHeuristicAnalyzer()
    return _default_analyzer.analyze(message)
