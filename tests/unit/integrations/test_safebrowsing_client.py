"""
Unit tests for the Safe Browsing reputation client.

HTTP traffic goes through the ``fake_http`` fixture, which records every
request so the tests can assert on keys used and call counts.
"""

import asyncio
import gc

import aiohttp
import pytest

from secure_inbox.integrations.exceptions import CredentialsExhaustedError
from secure_inbox.integrations.safebrowsing.client import SafeBrowsingClient
from tests.conftest import FakeResponse, safe_browsing_match

URL = "https://evil.example/login"


@pytest.fixture
def client(clock):
    return SafeBrowsingClient(["key-a", "key-b", "key-c"], clock=clock)


class TestSafeBrowsingClient:
    """Test suite for SafeBrowsingClient."""

    @pytest.mark.asyncio
    async def test_no_matches_is_safe(self, client, fake_http):
        fake_http.respond_with(FakeResponse(200, {}))

        verdict = await client.check_url(URL)

        assert verdict.safe is True
        assert verdict.error is None
        assert verdict.provider == "safe_browsing"

    @pytest.mark.asyncio
    async def test_request_shape(self, client, fake_http):
        fake_http.respond_with(FakeResponse(200, {}))

        await client.check_url(URL)

        request = fake_http.requests[0]
        assert request.method == "POST"
        assert request.url == SafeBrowsingClient.API_URL
        assert request.kwargs["params"] == {"key": "key-a"}
        body = request.kwargs["json"]
        assert body["client"]["clientId"] == "secure-inbox-extension"
        assert body["threatInfo"]["threatTypes"] == ["MALWARE", "SOCIAL_ENGINEERING", "UNWANTED_SOFTWARE"]
        assert body["threatInfo"]["platformTypes"] == ["ANY_PLATFORM"]
        assert body["threatInfo"]["threatEntryTypes"] == ["URL"]
        assert body["threatInfo"]["threatEntries"] == [{"url": URL}]

    @pytest.mark.asyncio
    async def test_matches_produce_threat_details(self, client, fake_http):
        fake_http.respond_with(FakeResponse(200, {"matches": [
            safe_browsing_match(URL, "SOCIAL_ENGINEERING"),
            safe_browsing_match(URL, "MALWARE"),
        ]}))

        verdict = await client.check_url(URL)

        assert verdict.safe is False
        assert verdict.threat_kinds == ["SOCIAL_ENGINEERING", "MALWARE"]
        assert verdict.threat_details[0].source_platform == "ANY_PLATFORM"
        assert verdict.threat_details[0].url == URL

    @pytest.mark.asyncio
    async def test_cached_within_ttl(self, client, fake_http, clock):
        fake_http.respond_with(FakeResponse(200, {}), FakeResponse(200, {}))

        first = await client.check_url(URL)
        clock.advance(60)
        second = await client.check_url(URL)

        assert first == second
        assert len(fake_http.requests) == 1

    @pytest.mark.asyncio
    async def test_expired_entry_is_requeried(self, client, fake_http, clock):
        fake_http.respond_with(
            FakeResponse(200, {}),
            FakeResponse(200, {"matches": [safe_browsing_match(URL)]}),
        )

        await client.check_url(URL)
        clock.advance(30 * 60 + 1)
        verdict = await client.check_url(URL)

        assert verdict.safe is False
        assert len(fake_http.requests) == 2

    @pytest.mark.asyncio
    async def test_rate_limit_rotates_to_next_key(self, client, fake_http):
        fake_http.respond_with(FakeResponse(429), FakeResponse(200, {}))

        verdict = await client.check_url(URL)

        assert verdict.safe is True
        assert [r.api_key for r in fake_http.requests] == ["key-a", "key-b"]
        assert client.credentials.current()[0] == "key-b"

    @pytest.mark.asyncio
    async def test_rotation_terminates_after_every_key(self, client, fake_http):
        fake_http.handler = lambda method, url, kwargs: FakeResponse(429)

        with pytest.raises(CredentialsExhaustedError):
            await client.check_url(URL)

        assert [r.api_key for r in fake_http.requests] == ["key-a", "key-b", "key-c"]

    @pytest.mark.asyncio
    async def test_exhaustion_is_not_cached(self, client, fake_http):
        fake_http.respond_with(
            FakeResponse(429), FakeResponse(429), FakeResponse(429),
            FakeResponse(200, {}),
        )

        with pytest.raises(CredentialsExhaustedError):
            await client.check_url(URL)
        verdict = await client.check_url(URL)

        assert verdict.safe is True

    @pytest.mark.asyncio
    async def test_empty_pool_raises_without_request(self, fake_http):
        client = SafeBrowsingClient([])

        with pytest.raises(CredentialsExhaustedError):
            await client.check_url(URL)

        assert fake_http.requests == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "outcome",
        [
            FakeResponse(500, body="backend error"),
            FakeResponse(200, ValueError("not json")),
            FakeResponse(200, ["not", "an", "object"]),
            FakeResponse(200, {"matches": "garbage"}),
            aiohttp.ClientConnectionError("connection reset"),
            asyncio.TimeoutError(),
        ],
    )
    async def test_transient_failures_fail_open(self, client, fake_http, outcome):
        fake_http.handler = lambda method, url, kwargs: outcome

        verdict = await client.check_url(URL)

        assert verdict.safe is True
        assert verdict.error
        assert len(fake_http.requests) == 1

    @pytest.mark.asyncio
    async def test_fail_open_is_not_cached(self, client, fake_http):
        fake_http.respond_with(
            FakeResponse(503),
            FakeResponse(200, {"matches": [safe_browsing_match(URL)]}),
        )

        first = await client.check_url(URL)
        second = await client.check_url(URL)

        assert first.error is not None
        assert second.safe is False
        assert len(fake_http.requests) == 2

    @pytest.mark.asyncio
    async def test_concurrent_lookups_share_one_request(self, client, fake_http):
        fake_http.respond_with(FakeResponse(200, {"matches": [safe_browsing_match(URL)]}))

        results = await asyncio.gather(*(client.check_url(URL) for _ in range(5)))

        assert len(fake_http.requests) == 1
        assert all(verdict.safe is False for verdict in results)

    @pytest.mark.asyncio
    async def test_exhaustion_after_callers_cancelled_is_not_reported_unhandled(self, client):
        release = asyncio.Event()

        async def exhausted_after_release(url):
            await release.wait()
            raise CredentialsExhaustedError("safe_browsing", "All safe_browsing API keys exhausted")

        client._fetch_verdict = exhausted_after_release
        loop = asyncio.get_running_loop()
        unhandled = []
        loop.set_exception_handler(lambda loop, context: unhandled.append(context))
        try:
            caller = asyncio.ensure_future(client.check_url(URL))
            await asyncio.sleep(0)
            lookup = client._pending[URL]

            caller.cancel()
            with pytest.raises(asyncio.CancelledError):
                await caller
            release.set()
            while not lookup.done():
                await asyncio.sleep(0)
            await asyncio.sleep(0)

            assert URL not in client._pending
            del lookup, caller
            gc.collect()
        finally:
            loop.set_exception_handler(None)

        assert unhandled == []

    @pytest.mark.asyncio
    async def test_uses_configured_timeout(self, fake_http):
        client = SafeBrowsingClient(["key-a"], request_timeout=2.5)
        fake_http.respond_with(FakeResponse(200, {}))

        await client.check_url(URL)

        assert fake_http.session_kwargs[0]["timeout"].total == 2.5
