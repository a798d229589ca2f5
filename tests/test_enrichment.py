"""
ScamFusion - Enrichment Module Tests

Tests for the reputation cache, session handling, registry clients and
analyzers without making actual network calls.
"""

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from scamfusion.models.registry import AccountReport, PhoneReport, RegistryAnalysis
from scamfusion.services.enrichment import (
    AccountRegistryAnalyzer,
    AccountRegistryClient,
    APIStatus,
    LookupResult,
    PhoneRegistryAnalyzer,
    PhoneRegistryClient,
    RegistryOrchestrator,
    ReputationCache,
    Session,
    SessionManager,
    extract_account_numbers,
    extract_phone_numbers,
)
from scamfusion.services.enrichment.account_registry import parse_fraud_count
from scamfusion.utils.exceptions import (
    InvalidInputError,
    RemoteFailureError,
    RemoteTimeoutError,
    SessionInitError,
)


def make_phone_client(clock, timeout=5.0):
    """Phone client whose handshake is mocked out."""
    client = PhoneRegistryClient("https://registry.test", timeout=timeout, clock=clock)
    client.sessions._initializer = AsyncMock(return_value={"JSESSIONID": "abc"})
    return client


def mock_http_session(payload, status=200):
    """aiohttp.ClientSession replacement returning one JSON payload."""
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=payload)

    http = MagicMock()
    http.post.return_value.__aenter__.return_value = response

    session_cls = MagicMock()
    session_cls.return_value.__aenter__.return_value = http
    return session_cls, http


class TestReputationCache:
    """Tests for the LRU + TTL cache."""

    def test_put_get(self, clock):
        cache = ReputationCache(max_entries=10, ttl_seconds=60, clock=clock)
        cache.put("01012345678", "verdict")

        assert cache.get("01012345678") == "verdict"
        assert "01012345678" in cache
        assert len(cache) == 1
        assert cache.hits == 1

    def test_put_is_idempotent(self, clock):
        cache = ReputationCache(max_entries=10, ttl_seconds=60, clock=clock)
        cache.put("k", "v")
        cache.put("k", "v")

        assert len(cache) == 1
        assert cache.get("k") == "v"

    def test_entry_expires_at_ttl(self, clock):
        """An entry exactly TTL old is a miss."""
        cache = ReputationCache(max_entries=10, ttl_seconds=60, clock=clock)
        cache.put("k", "v")

        clock.advance(59.9)
        assert cache.get("k") == "v"

        clock.advance(0.1)
        assert cache.get("k") is None
        assert "k" not in cache
        assert cache.misses == 1

    def test_lru_eviction(self, clock):
        cache = ReputationCache(max_entries=2, ttl_seconds=60, clock=clock)
        cache.put("a", 1)
        cache.put("b", 2)
        cache.get("a")
        cache.put("c", 3)

        assert cache.get("b") is None
        assert cache.get("a") == 1
        assert cache.get("c") == 3
        assert len(cache) == 2

    def test_clear(self, clock):
        cache = ReputationCache(clock=clock)
        cache.put("a", 1)
        cache.clear()
        assert len(cache) == 0

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            ReputationCache(max_entries=0)


class TestSessionManager:
    """Tests for lazy, shared session initialization."""

    def test_lazy_initialization(self, clock):
        init = AsyncMock(return_value={"SID": "1"})
        manager = SessionManager("test", init, ttl_seconds=60, clock=clock)

        assert manager.session is None

        session = asyncio.run(manager.ensure())

        assert session.valid
        assert session.cookies == {"SID": "1"}
        assert init.await_count == 1

    def test_concurrent_callers_share_one_handshake(self, clock):
        calls = []

        async def slow_init():
            calls.append(1)
            await asyncio.sleep(0.01)
            return {}

        manager = SessionManager("test", slow_init, ttl_seconds=60, clock=clock)

        async def run_test():
            return await asyncio.gather(*(manager.ensure() for _ in range(5)))

        sessions = asyncio.run(run_test())

        assert len(calls) == 1
        assert manager.initializations == 1
        assert all(s is sessions[0] for s in sessions)

    def test_reinitializes_after_ttl(self, clock):
        init = AsyncMock(return_value={})
        manager = SessionManager("test", init, ttl_seconds=60, clock=clock)

        async def run_test():
            await manager.ensure()
            await manager.ensure()
            clock.advance(60)
            await manager.ensure()

        asyncio.run(run_test())
        assert init.await_count == 2

    def test_invalidate(self, clock):
        init = AsyncMock(return_value={})
        manager = SessionManager("test", init, ttl_seconds=60, clock=clock)

        async def run_test():
            await manager.ensure()
            manager.invalidate()
            assert not manager.is_fresh(manager.session)
            await manager.ensure()

        asyncio.run(run_test())
        assert manager.initializations == 2

    def test_failed_handshake_wrapped(self, clock):
        init = AsyncMock(side_effect=ConnectionError("refused"))
        manager = SessionManager("test", init, clock=clock)

        with pytest.raises(SessionInitError):
            asyncio.run(manager.ensure())
        assert manager.session is None


class TestRegistryClient:
    """Tests for shared lookup behavior in BaseRegistryClient."""

    def test_cache_hit_skips_remote_call(self, clock):
        client = make_phone_client(clock)
        report = PhoneReport(key="01012345678", report_count=3)

        with patch.object(client, "_fetch", AsyncMock(return_value=report)) as fetch:
            async def run_test():
                first = await client.lookup("010-1234-5678")
                second = await client.lookup("01012345678")
                return first, second

            first, second = asyncio.run(run_test())

        assert fetch.await_count == 1
        assert first.success and not first.cached
        assert second.success and second.cached
        assert second.value.report_count == 3
        assert client.status.cache_hits == 1
        assert client.cache_size == 1

    def test_concurrent_lookups_share_one_call(self, clock):
        """A burst of lookups for one key issues a single remote call."""
        client = make_phone_client(clock)
        report = PhoneReport(key="01012345678", report_count=2)
        calls = []

        async def slow_fetch(key, session):
            calls.append(key)
            await asyncio.sleep(0.01)
            return report

        with patch.object(client, "_fetch", slow_fetch):
            async def run_test():
                return await asyncio.gather(*[
                    client.lookup("010-1234-5678") for _ in range(5)
                ])

            results = asyncio.run(run_test())

        assert calls == ["01012345678"]
        assert all(r.success and r.value.report_count == 2 for r in results)
        assert client.sessions.initializations == 1
        assert client._in_flight == {}

        # Later lookups are served from the cache
        with patch.object(client, "_fetch", AsyncMock()) as fetch:
            cached = asyncio.run(client.lookup("01012345678"))
        fetch.assert_not_awaited()
        assert cached.cached

    def test_concurrent_failure_shared(self, clock):
        client = make_phone_client(clock)

        async def failing_fetch(key, session):
            await asyncio.sleep(0.01)
            raise RemoteFailureError("HTTP 500")

        with patch.object(client, "_fetch", failing_fetch):
            async def run_test():
                return await asyncio.gather(*[
                    client.lookup("01012345678") for _ in range(3)
                ])

            results = asyncio.run(run_test())

        assert all(not r.success and r.value is None for r in results)
        assert client.status.requests_failed == 1

    def test_expired_entry_refetched(self, clock):
        client = make_phone_client(clock)
        report = PhoneReport(key="01012345678", report_count=0)

        with patch.object(client, "_fetch", AsyncMock(return_value=report)) as fetch:
            asyncio.run(client.lookup("01012345678"))
            clock.advance(15 * 60)
            asyncio.run(client.lookup("01012345678"))

        assert fetch.await_count == 2

    def test_failure_invalidates_session(self, clock):
        """The lookup after a failure performs a fresh handshake."""
        client = make_phone_client(clock)
        report = PhoneReport(key="01012345678", report_count=1)
        fetch = AsyncMock(side_effect=[RemoteFailureError("HTTP 500"), report])

        with patch.object(client, "_fetch", fetch):
            failed = asyncio.run(client.lookup("01012345678"))

            assert not failed.success
            assert isinstance(failed.error, RemoteFailureError)
            assert failed.value is None
            assert not client.sessions.session.valid
            assert client.cache_size == 0

            recovered = asyncio.run(client.lookup("01012345678"))

        assert recovered.success
        assert client.sessions.initializations == 2
        assert client.sessions._initializer.await_count == 2
        assert client.status.requests_failed == 1
        assert client.status.status == APIStatus.AVAILABLE

    def test_timeout_is_failure_not_clean(self, clock):
        client = make_phone_client(clock, timeout=0.01)

        async def slow_fetch(key, session):
            await asyncio.sleep(1)

        with patch.object(client, "_fetch", slow_fetch):
            result = asyncio.run(client.lookup("01012345678"))

        assert not result.success
        assert isinstance(result.error, RemoteTimeoutError)
        assert result.value is None
        assert client.cache_size == 0
        assert client.status.status == APIStatus.ERROR

    def test_session_failure_skips_lookup(self, clock):
        client = make_phone_client(clock)
        client.sessions._initializer = AsyncMock(side_effect=SessionInitError("registry down"))
        fetch = AsyncMock()

        with patch.object(client, "_fetch", fetch):
            result = asyncio.run(client.lookup("01012345678"))

        assert not result.success
        assert isinstance(result.error, SessionInitError)
        fetch.assert_not_awaited()

    def test_unusable_key_rejected(self, clock):
        client = make_phone_client(clock)

        with pytest.raises(InvalidInputError):
            asyncio.run(client.lookup("no digits"))

    def test_status_dict(self, clock):
        client = make_phone_client(clock)
        status = client.status.to_dict()

        assert status["provider"] == "phone_registry"
        assert status["status"] == "unknown"
        assert status["requests_made"] == 0


class TestPhoneRegistryClient:
    """Tests for the phone registry request and response mapping."""

    def test_fetch_parses_counts(self, clock):
        client = make_phone_client(clock)
        session_cls, http = mock_http_session({"totalCount": 7, "voiceCount": 4, "smsCount": 3})

        with patch("scamfusion.services.enrichment.phone_registry.aiohttp.ClientSession", session_cls):
            report = asyncio.run(client._fetch("01012345678", Session(initialized_at=0.0, cookies={"SID": "x"})))

        assert report.report_count == 7
        assert report.voice_count == 4
        assert report.sms_count == 3
        assert http.post.call_args.kwargs["json"] == {"telNum": "01012345678"}
        assert session_cls.call_args.kwargs["cookies"] == {"SID": "x"}

    def test_fetch_http_error(self, clock):
        client = make_phone_client(clock)
        session_cls, _ = mock_http_session({}, status=503)

        with patch("scamfusion.services.enrichment.phone_registry.aiohttp.ClientSession", session_cls):
            with pytest.raises(RemoteFailureError):
                asyncio.run(client._fetch("01012345678", Session(initialized_at=0.0)))


class TestAccountRegistryClient:
    """Tests for the account registry request and response mapping."""

    def test_parse_fraud_count(self):
        assert parse_fraud_count({"value": [{"result": "OK", "count": "7"}]}) == 7
        assert parse_fraud_count({"value": [{"result": "OK", "count": "0"}]}) == 0

    @pytest.mark.parametrize("body", [
        {},
        {"value": []},
        {"value": [{"count": "n/a"}]},
        {"value": [{"result": "OK"}]},
        {"value": ["7"]},
        {"value": "7"},
    ])
    def test_unreadable_count_is_failure(self, body):
        with pytest.raises(RemoteFailureError):
            parse_fraud_count(body)

    def test_malformed_row_fails_lookup(self, clock):
        """A malformed body is a failed lookup, not a clean account."""
        client = AccountRegistryClient("https://police.test", clock=clock)
        client.sessions._initializer = AsyncMock(return_value={})
        session_cls, _ = mock_http_session({"result": True, "value": ["unexpected"]})

        with patch("scamfusion.services.enrichment.account_registry.aiohttp.ClientSession", session_cls):
            result = asyncio.run(client.lookup("123-456-789012"))

        assert not result.success
        assert isinstance(result.error, RemoteFailureError)
        assert result.value is None
        assert not client.sessions.session.valid
        assert client.status.requests_failed == 1

    def test_fetch_sends_form(self, clock):
        client = AccountRegistryClient("https://police.test", clock=clock)
        session_cls, http = mock_http_session({"result": True, "value": [{"count": "4"}]})

        with patch("scamfusion.services.enrichment.account_registry.aiohttp.ClientSession", session_cls):
            report = asyncio.run(client._fetch("123456789012", Session(initialized_at=0.0)))

        assert isinstance(report, AccountReport)
        assert report.report_count == 4
        assert http.post.call_args.kwargs["data"] == {"key": "P", "no": "123456789012", "ftype": "A"}

    def test_rejected_query(self, clock):
        client = AccountRegistryClient("https://police.test", clock=clock)
        session_cls, _ = mock_http_session({"result": False, "message": "error"})

        with patch("scamfusion.services.enrichment.account_registry.aiohttp.ClientSession", session_cls):
            with pytest.raises(RemoteFailureError):
                asyncio.run(client._fetch("123456789012", Session(initialized_at=0.0)))


class TestExtraction:
    """Tests for identifier extraction."""

    def test_phone_numbers_normalized(self):
        text = "010-1234-5678, +82-10-1234-5678, 070-1234-5678"
        assert extract_phone_numbers(text) == ["01012345678", "07012345678"]

    def test_account_excludes_phone_shapes(self):
        text = "국민 123-456-789012 연락 010-1234-5678"
        assert extract_account_numbers(text) == ["123456789012"]

    def test_short_digits_ignored(self):
        assert extract_account_numbers("주문 123456789") == []


class TestRegistryAnalyzers:
    """Tests for phone and account analyzers."""

    def _client(self, result):
        client = MagicMock()
        client.lookup = AsyncMock(return_value=result)
        return client

    def test_reported_phone(self):
        report = PhoneReport(key="01012345678", report_count=6, voice_count=4, sms_count=2)
        client = self._client(LookupResult(success=True, key="01012345678", value=report))

        result = asyncio.run(PhoneRegistryAnalyzer(client).analyze("010-1234-5678로 연락"))

        assert result.flagged == ["01012345678"]
        assert result.has_hit
        assert result.risk_score == 1.0
        assert "사기 신고 등록 전화번호: 01012345678" in result.reasons

    def test_suspicious_prefix_without_client(self):
        result = asyncio.run(PhoneRegistryAnalyzer(None).analyze("070-1234-5678 로 전화"))

        assert result.suspicious_prefix
        assert not result.has_hit
        assert result.risk_score == pytest.approx(0.2)
        assert result.reasons == ["의심 전화번호 대역: 070xxx"]

    def test_failed_lookup_abstains(self):
        client = self._client(LookupResult(success=False, key="01012345678", error=RemoteTimeoutError("slow")))

        result = asyncio.run(PhoneRegistryAnalyzer(client).analyze("010-1234-5678"))

        assert result.failures == ["01012345678"]
        assert result.flagged == []
        assert result.risk_score == 0.0

    def test_account_below_threshold(self):
        report = AccountReport(key="123456789012", report_count=2)
        client = self._client(LookupResult(success=True, key="123456789012", value=report))

        result = asyncio.run(AccountRegistryAnalyzer(client).analyze("123-456-789012"))

        assert not result.has_hit
        assert result.risk_score == 0.0

    def test_account_flagged(self):
        report = AccountReport(key="123456789012", report_count=5)
        client = self._client(LookupResult(success=True, key="123456789012", value=report))

        result = asyncio.run(AccountRegistryAnalyzer(client).analyze("입금 123-456-789012"))

        assert result.flagged == ["123456789012"]
        assert result.risk_score == 1.0
        assert "경찰청 사기신고 계좌: 1234****9012 (5건)" in result.reasons
        assert "다수 사기 신고 이력 (5건)" in result.reasons


class TestRegistryOrchestrator:
    """Tests for concurrent registry analysis."""

    def test_has_identifiers(self):
        assert RegistryOrchestrator.has_identifiers("010-1234-5678")
        assert RegistryOrchestrator.has_identifiers("계좌 123-456-789012")
        assert not RegistryOrchestrator.has_identifiers("안녕하세요")

    def test_failing_analysis_replaced(self):
        phone = MagicMock()
        phone.analyze = AsyncMock(side_effect=RuntimeError("parser bug"))
        account = MagicMock()
        account.analyze = AsyncMock(return_value=RegistryAnalysis(flagged=["123456789012"], risk_score=0.95))

        findings = asyncio.run(RegistryOrchestrator(phone, account).analyze("text"))

        assert findings.phone == RegistryAnalysis()
        assert findings.account.has_hit
        assert findings.has_hit

    def test_from_settings(self, settings):
        orchestrator = RegistryOrchestrator.from_settings(settings)
        status = orchestrator.status()

        assert set(status) == {"phone_registry", "account_registry"}
        assert status["phone_registry"]["cache_size"] == 0
        assert orchestrator.phone_analyzer.client.timeout == settings.remote_timeout
