"""
ScamFusion - Detection Module Tests

Tests for the lexical scorer, the URL extractor and the URL risk analyzer.
"""

import random

import pytest

from scamfusion.models.detection import ScamCategory
from scamfusion.services.detection.lexical import LexicalScorer, normalize_text
from scamfusion.services.detection.url_analyzer import (
    UrlRiskAnalyzer,
    find_brand_impersonation,
    is_ip_host,
    official_brand_for_host,
)
from scamfusion.services.parser import extract_urls_from_text


@pytest.fixture
def scorer(settings):
    return LexicalScorer(settings)


@pytest.fixture
def analyzer():
    return UrlRiskAnalyzer()


class TestLexicalScorer:
    """Tests for keyword tiers and structural patterns."""

    def test_normalize_text(self):
        assert normalize_text("계좌번호 알려 주세요\n OTP") == "계좌번호알려주세요otp"

    def test_benign_text_scores_zero(self, scorer):
        """Everyday conversation produces no evidence."""
        result = scorer.score("내일 점심 같이 먹을래? 12시에 보자")

        assert result.confidence == 0.0
        assert result.reasons == []
        assert result.detected_signals == []

    def test_empty_text(self, scorer):
        result = scorer.score("   ")
        assert result.confidence == 0.0

    def test_isolated_pattern_ignored(self, scorer):
        """A single numeric shape without keywords does not count."""
        result = scorer.score("주문번호 123-456-789012 입니다")

        assert result.confidence == 0.0
        assert "account_number" not in result.detected_signals

    def test_phone_number_not_counted_as_account(self, scorer):
        """A bare phone number is one pattern, not two."""
        result = scorer.score("연락처 010-1234-5678")

        assert result.confidence == 0.0
        assert result.detected_signals == []

    def test_two_patterns_corroborate(self, scorer):
        """Two independent patterns count without keywords."""
        result = scorer.score("123-456-789012 50,000원")

        assert result.confidence == pytest.approx(0.35)
        assert result.detected_signals == ["account_number", "money_amount"]
        assert "계좌번호 형식 발견" in result.reasons
        assert "금액 표시 발견" in result.reasons

    def test_keyword_corroborates_pattern(self, scorer):
        result = scorer.score("입금 부탁 123-456-789012")

        assert result.confidence == pytest.approx(0.45)
        assert "입금" in result.detected_signals
        assert "account_number" in result.detected_signals

    def test_medium_tier_alone(self, scorer):
        """A lone medium keyword stays far below the scam threshold."""
        result = scorer.score("이벤트 당첨 안내")

        assert result.confidence == pytest.approx(0.15)
        assert result.reasons == ["의심 키워드 1개 발견: 당첨"]
        assert not result.is_scam

    def test_tier_reason_lists_three_examples(self, scorer):
        result = scorer.score("급전 대출 송금 입금")

        assert "위험 키워드 4개 발견: 급전, 대출, 송금" in result.reasons
        assert result.confidence == 1.0

    def test_critical_keywords_with_spacing(self, scorer):
        """Spacing in the text does not hide a keyword."""
        result = scorer.score("계좌 번호 알려 주세요")

        assert "계좌번호알려주" in result.detected_signals
        assert result.signal_categories[0] == ScamCategory.TRADE_FRAUD

    def test_combination_bonus(self, scorer):
        """Urgency + money + credential adds the combination reason."""
        result = scorer.score("급하게 송금 부탁, 인증번호 알려줘")

        assert "긴급성 + 금전 요구 + 인증정보 요구 조합 감지" in result.reasons
        assert result.confidence == 1.0

    def test_no_combination_without_credential(self, scorer):
        result = scorer.score("급하게 송금 부탁해")

        assert "긴급성 + 금전 요구 + 인증정보 요구 조합 감지" not in result.reasons

    def test_confidence_clamped(self, scorer):
        text = "급전 필요합니다. 계좌번호 알려주세요. 인증번호도 보내주세요. 선입금 체포영장 검찰청에서"
        result = scorer.score(text)

        assert result.confidence == 1.0

    def test_categories_parallel_to_signals(self, scorer):
        result = scorer.score("급전 필요합니다. 계좌번호 알려주세요. 인증번호도 보내주세요.")

        assert len(result.signal_categories) == len(result.detected_signals)
        assert result.detected_signals == ["계좌번호알려주", "급전", "계좌번호", "인증번호"]

    def test_confidence_bounded_for_random_mixes(self, scorer, fuzz_fragments):
        rng = random.Random(20240301)
        for _ in range(300):
            text = " ".join(rng.choice(fuzz_fragments) for _ in range(rng.randint(1, 8)))
            result = scorer.score(text)

            assert 0.0 <= result.confidence <= 1.0, text
            assert len(result.signal_categories) == len(result.detected_signals)

    def test_custom_weights(self, settings):
        """Tier weights come from settings."""
        settings.medium_weight = 0.05
        result = LexicalScorer(settings).score("이벤트 당첨 안내")

        assert result.confidence == pytest.approx(0.05)


class TestUrlExtractor:
    """Tests for URL extraction from free text."""

    def test_no_urls(self):
        assert extract_urls_from_text("내일 보자") == []
        assert extract_urls_from_text("") == []

    def test_scheme_and_bare_collapse(self):
        """The same link with and without a scheme is one URL."""
        urls = extract_urls_from_text("링크 bit.ly/abc 또는 https://bit.ly/abc")
        assert urls == ["https://bit.ly/abc"]

    def test_http_and_bare_collapse(self):
        """An http:// link and its bare spelling are one URL; first spelling wins."""
        urls = extract_urls_from_text("링크 http://bit.ly/abc 또는 bit.ly/abc")
        assert urls == ["http://bit.ly/abc"]

        urls = extract_urls_from_text("bit.ly/abc 그리고 http://BIT.LY/abc/")
        assert urls == ["https://bit.ly/abc"]

    def test_trailing_punctuation_stripped(self):
        urls = extract_urls_from_text("확인: https://example.com/path.")
        assert urls == ["https://example.com/path"]

    def test_hangul_boundary(self):
        urls = extract_urls_from_text("example.com에서 확인하세요")
        assert urls == ["https://example.com"]

    def test_email_is_not_url(self):
        assert extract_urls_from_text("메일 user@mail.com 으로") == []

    def test_order_preserved(self):
        urls = extract_urls_from_text("먼저 https://b.com 그다음 a.org/x")
        assert urls == ["https://b.com", "https://a.org/x"]


class TestUrlRiskAnalyzer:
    """Tests for URL heuristics."""

    def test_no_urls(self, analyzer):
        result = analyzer.analyze("그냥 인사")

        assert result.urls == []
        assert not result.has_suspicious
        assert result.risk_score == 0.0

    def test_brand_spoof_on_free_tld(self, analyzer):
        """Containing the official domain is not enough."""
        result = analyzer.analyze("https://kbstar.com.evil.tk/login 에서 확인하세요")

        assert result.has_suspicious
        assert result.risk_score == 1.0
        assert any(".tk" in r for r in result.reasons)
        assert any("login" in r for r in result.reasons)
        assert any("KB국민은행 사칭" in r for r in result.reasons)

    def test_official_bank_domain_is_clean(self, analyzer):
        """Phishing vocabulary on the bank's own host is not evidence."""
        result = analyzer.analyze("https://www.kbstar.com/login")

        assert result.urls == ["https://www.kbstar.com/login"]
        assert not result.has_suspicious
        assert result.risk_score == 0.0

    def test_shortener_deduplicated(self, analyzer):
        result = analyzer.analyze("bit.ly/abc https://bit.ly/abc")

        assert result.suspicious_urls == {"https://bit.ly/abc"}
        assert result.risk_score == pytest.approx(0.3)

    def test_shortener_deduplicated_across_schemes(self, analyzer):
        result = analyzer.analyze("링크 http://bit.ly/abc 또는 bit.ly/abc")

        assert result.suspicious_urls == {"http://bit.ly/abc"}
        assert result.risk_score == pytest.approx(0.3)

    def test_brand_token_inside_foreign_host(self, analyzer):
        """A host that merely contains the official domain is impersonation."""
        result = analyzer.analyze("https://evil-kbstar.com.attacker.net 접속")

        assert result.suspicious_urls == {"https://evil-kbstar.com.attacker.net"}
        assert result.risk_score == pytest.approx(0.5)
        assert any("KB국민은행 사칭" in r for r in result.reasons)

    def test_ip_host(self, analyzer):
        result = analyzer.analyze("http://192.168.0.10/bank")

        assert result.has_suspicious
        assert result.risk_score == pytest.approx(0.35)
        assert any("IP 주소" in r for r in result.reasons)

    def test_short_brand_keyword_needs_token(self, analyzer):
        """Short brand names only match whole tokens."""
        spoof = analyzer.analyze("https://ibk-secure.com")
        assert any("IBK기업은행" in r for r in spoof.reasons)

        clean = analyzer.analyze("https://fibkx.com")
        assert not clean.has_suspicious

    def test_special_characters(self, analyzer):
        result = analyzer.analyze("https://example.com/a?x=%41%42%43%44&y=%45")

        assert result.has_suspicious
        assert any("특수문자 과다" in r for r in result.reasons)

    def test_long_url(self, analyzer):
        url = "https://example.com/" + "a" * 160
        risk, reasons = analyzer.score_url(url)

        assert risk == pytest.approx(0.2)
        assert "비정상적으로 긴 URL" in reasons[0]

    def test_helpers(self):
        assert is_ip_host("10.0.0.1")
        assert not is_ip_host("example.com")
        assert official_brand_for_host("m.shinhan.com") == "shinhan"
        assert official_brand_for_host("shinhan.com.xyz") is None
        assert find_brand_impersonation("www.woori-bank.xyz", "/") == ("우리은행", "woori")
        assert find_brand_impersonation("www.wooribank.com", "/") is None
