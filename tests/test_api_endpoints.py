"""
API endpoint tests for the scanner service.

The scanner service dependency is overridden with one built from
AsyncMock reputation clients and an in-memory statistics store, so the
routes run the real scoring pipeline without network or disk access.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from api.main import app
from api.services.scanner_service import ScannerService, get_scanner_service
from secure_inbox.email_processing.handlers.contacts import TrustedContacts
from secure_inbox.email_processing.models import ReputationVerdict, ScanSettings, ThreatDetail
from secure_inbox.email_processing.processor import EmailProcessor
from secure_inbox.storage.base import MemoryStatsStore
from secure_inbox.storage.secure import StorageError
from secure_inbox.storage.statistics import StatisticsAggregator

EVIL_URL = "https://evil.example/login"

PHISHING_PAYLOAD = {
    "sender": "security@paypai.com",
    "subject": "Urgent: verify your account immediately",
    "snippet": "Please login to confirm",
    "date": "Mon, 12 Feb 2024 10:20:00",
}

BENIGN_PAYLOAD = {
    "sender": "Alice <alice@example.com>",
    "subject": "Lunch tomorrow?",
    "snippet": "Are we still on for noon",
}


def reputation_client(verdicts=None):
    verdicts = verdicts or {}

    async def check_url(url):
        return verdicts.get(url, ReputationVerdict(safe=True))

    client = MagicMock()
    client.check_url = AsyncMock(side_effect=check_url)
    return client


@pytest.fixture
def scanner():
    safe_browsing = reputation_client({
        EVIL_URL: ReputationVerdict(
            safe=False,
            threat_details=[ThreatDetail("SOCIAL_ENGINEERING", "ANY_PLATFORM", EVIL_URL)],
        )
    })
    statistics = StatisticsAggregator(MemoryStatsStore(), notifier=AsyncMock())
    processor = EmailProcessor(
        safe_browsing,
        reputation_client(),
        statistics=statistics,
        trusted_contacts=TrustedContacts(["boss@example.com"]),
    )
    return ScannerService(processor, statistics, ScanSettings())


@pytest.fixture
def client(scanner):
    app.dependency_overrides[get_scanner_service] = lambda: scanner
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealth:
    def test_health_check(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestEmailEndpoints:
    """Tests for the scoring endpoints."""

    def test_analyze_phishing_email(self, client):
        response = client.post("/api/v1/emails/analyze", json=PHISHING_PAYLOAD)

        assert response.status_code == 200
        data = response.json()
        assert data["trust_score"] == 0
        assert data["warnings"] == ["Phishing detected (confidence: 100%)"]
        assert data["is_threat"] is True

    def test_analyze_records_statistics(self, client):
        client.post("/api/v1/emails/analyze", json=PHISHING_PAYLOAD)
        client.post("/api/v1/emails/analyze", json=BENIGN_PAYLOAD)

        stats = client.get("/api/v1/dashboard/stats").json()

        assert stats["emails_scanned"] == 2
        assert stats["threats_blocked"] == 1
        assert stats["last_scan_time"] is not None

    def test_score_does_not_record(self, client):
        response = client.post("/api/v1/emails/score", json=BENIGN_PAYLOAD)

        assert response.status_code == 200
        assert response.json() == {"trust_score": 100, "warnings": [], "is_threat": False}
        assert client.get("/api/v1/dashboard/stats").json()["emails_scanned"] == 0

    def test_unsafe_link_warning(self, client):
        payload = dict(BENIGN_PAYLOAD, snippet=f"Log in at {EVIL_URL}")

        data = client.post("/api/v1/emails/score", json=payload).json()

        assert data["warnings"] == [f"Unsafe link: {EVIL_URL} (SOCIAL_ENGINEERING)"]
        assert data["trust_score"] == 70

    def test_request_settings_override_defaults(self, client):
        payload = dict(PHISHING_PAYLOAD, settings={"enable_phishing": False})

        data = client.post("/api/v1/emails/score", json=payload).json()

        assert data == {"trust_score": 100, "warnings": [], "is_threat": False}

    def test_trusted_contact_with_contact_scanning(self, client):
        payload = dict(PHISHING_PAYLOAD, sender="boss@example.com", settings={"scan_contacts": True})

        data = client.post("/api/v1/emails/score", json=payload).json()

        assert data == {"trust_score": 100, "warnings": [], "is_threat": False}

    def test_missing_fields_default_to_empty(self, client):
        response = client.post("/api/v1/emails/score", json={})

        assert response.status_code == 200
        assert response.json()["trust_score"] == 100

    def test_invalid_settings_type(self, client):
        payload = dict(BENIGN_PAYLOAD, settings={"enable_phishing": "sometimes"})

        response = client.post("/api/v1/emails/score", json=payload)

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"


class TestDashboardEndpoints:
    """Tests for the statistics and history endpoints."""

    @pytest.fixture(autouse=True)
    def recorded(self, client):
        client.post("/api/v1/emails/analyze", json=PHISHING_PAYLOAD)
        client.post("/api/v1/emails/analyze", json=BENIGN_PAYLOAD)

    def test_history_most_recent_first(self, client):
        data = client.get("/api/v1/dashboard/history").json()

        assert data["total"] == 2
        assert [e["sender"] for e in data["entries"]] == [
            BENIGN_PAYLOAD["sender"],
            PHISHING_PAYLOAD["sender"],
        ]
        assert data["entries"][1]["trust_score"] == 0

    def test_history_status_filter(self, client):
        data = client.get("/api/v1/dashboard/history", params={"status": "threats"}).json()

        assert [e["sender"] for e in data["entries"]] == [PHISHING_PAYLOAD["sender"]]

    def test_history_search(self, client):
        data = client.get("/api/v1/dashboard/history", params={"search": "lunch"}).json()

        assert data["total"] == 1

    def test_history_invalid_status(self, client):
        response = client.get("/api/v1/dashboard/history", params={"status": "spam"})

        assert response.status_code == 422

    def test_recent_threats(self, client):
        data = client.get("/api/v1/dashboard/threats/recent", params={"limit": 5}).json()

        assert len(data) == 1
        assert data[0]["is_threat"] is True


class TestContactEndpoints:
    """Tests for trusted contact management."""

    def test_list_contacts(self, client):
        assert client.get("/api/v1/contacts/trusted").json() == {"contacts": ["boss@example.com"]}

    def test_add_contact(self, client):
        response = client.post("/api/v1/contacts/trusted", json={"address": "Carol <Carol@Example.com>"})

        assert response.status_code == 201
        assert response.json()["contacts"] == ["boss@example.com", "carol@example.com"]

    def test_add_invalid_contact(self, client):
        response = client.post("/api/v1/contacts/trusted", json={"address": "not-an-address"})

        assert response.status_code == 422

    def test_remove_contact(self, client):
        response = client.delete("/api/v1/contacts/trusted/boss@example.com")

        assert response.status_code == 200
        assert response.json()["contacts"] == []

    def test_remove_unknown_contact(self, client):
        response = client.delete("/api/v1/contacts/trusted/nobody@example.com")

        assert response.status_code == 404
        assert response.json()["error_code"] == "HTTP_404"


class UnreadableStatsStore(MemoryStatsStore):
    async def get(self, keys):
        raise StorageError("Unable to decrypt statistics with any available key")


class TestStorageErrors:
    """Tests for statistics storage failures."""

    @pytest.fixture
    def client(self):
        statistics = StatisticsAggregator(UnreadableStatsStore(), notifier=AsyncMock())
        processor = EmailProcessor(reputation_client(), reputation_client(), statistics=statistics)
        scanner = ScannerService(processor, statistics, ScanSettings())
        app.dependency_overrides[get_scanner_service] = lambda: scanner
        yield TestClient(app)
        app.dependency_overrides.clear()

    @pytest.mark.parametrize("path", [
        "/api/v1/dashboard/stats",
        "/api/v1/dashboard/history",
        "/api/v1/dashboard/threats/recent",
    ])
    def test_unreadable_store_reports_storage_error(self, client, path):
        response = client.get(path)

        assert response.status_code == 500
        assert response.json()["error_code"] == "STORAGE_ERROR"

    def test_analyze_still_scores_when_recording_fails(self, client):
        response = client.post("/api/v1/emails/analyze", json=BENIGN_PAYLOAD)

        assert response.status_code == 200
        assert response.json()["trust_score"] == 100
