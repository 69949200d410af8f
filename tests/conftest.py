"""Shared fixtures."""
import pytest

from phish_agent.analyzer.models import AnalysisResult, EmailData
from phish_agent.config.settings import SettingsProvider
from phish_agent.storage.kv import MemoryStore
from phish_agent.storage.results import ResultStore


@pytest.fixture
def kv():
    return MemoryStore()


@pytest.fixture
def settings_provider(kv):
    return SettingsProvider(kv)


@pytest.fixture
def result_store(kv):
    return ResultStore(kv)


@pytest.fixture
def phishy_email():
    return EmailData(
        from_addr="security@paypa1-alerts.xyz",
        subject="URGENT: Account Suspended",
        body="Your account suspended notice. Please verify account details immediately.",
        links=("http://paypa1-alerts.xyz/login",),
        email_id="msg-001",
    )


@pytest.fixture
def benign_email():
    return EmailData(
        from_addr="friend@example.com",
        subject="Lunch on Friday?",
        body="Are you free for lunch on Friday? Let me know.",
        links=(),
        email_id="msg-002",
    )


@pytest.fixture
def remote_result():
    return AnalysisResult(
        is_phishing=True,
        confidence=92,
        indicators=("Lookalike domain", "Urgent threat"),
        recommendation="Do not click any links.",
    )
