"""
ScamFusion Test Configuration

Pytest fixtures and configuration.
"""

import os
from datetime import date, timedelta

import pytest

from scamfusion.config import Settings, get_settings


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeCalendar:
    """Manually advanced date source."""

    def __init__(self, start: date = date(2024, 3, 1)):
        self.today = start

    def __call__(self) -> date:
        return self.today

    def next_day(self) -> None:
        self.today += timedelta(days=1)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Keep the developer's environment out of the tests."""
    for key in list(os.environ):
        if key.startswith("SCAMFUSION_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    """Local-only settings: no registries, no model."""
    return Settings(_env_file=None, registry_enabled=False, model_enabled=False)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def calendar():
    return FakeCalendar()


@pytest.fixture
def fuzz_fragments():
    """Keyword, pattern and filler fragments for randomized text mixes."""
    return [
        "급전", "계좌번호", "인증번호", "송금", "입금", "대출", "선입금",
        "당첨", "이벤트", "급하게", "검찰청", "체포영장", "오늘까지",
        "123-456-789012", "010-1234-5678", "070-1234-5678", "50,000원",
        "bit.ly/abc", "https://kbstar.com.evil.tk/login", "https://www.kbstar.com",
        "내일", "점심", "같이", "먹을래?", "안녕하세요", "확인 부탁", "12시에 보자",
    ]
