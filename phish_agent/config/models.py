"""Configuration models."""

from dataclasses import dataclass
from typing import Optional

DEFAULT_ENDPOINT = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_MODEL = "meta-llama/llama-3.2-3b-instruct:free"
DEFAULT_THRESHOLD = 70
API_KEY_PREFIX = "sk-or-"


def is_valid_api_key(api_key: Optional[str]) -> bool:
    """Credential format check applied when a key is saved."""
    return bool(api_key) and api_key.startswith(API_KEY_PREFIX)


@dataclass(frozen=True)
class Settings:
    """User settings resolved for one analysis."""
    api_key: Optional[str] = None
    endpoint: str = DEFAULT_ENDPOINT
    model: str = DEFAULT_MODEL
    threshold: int = DEFAULT_THRESHOLD  # 1-100

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    def snapshot(self) -> dict:
        """Settings persisted alongside a result."""
        return {"model": self.model, "threshold": self.threshold}


@dataclass
class AppConfig:
    """Deployment configuration."""
    storage_path: str = "phish_agent_store.json"
    retention_limit: int = 10
    poll_interval: float = 1.0
    poll_attempts: int = 30
    reply_timeout: float = 30.0  # then poll the store
    request_timeout: float = 60.0
    referer: str = "phish-agent"
    title: str = "Phishing Detector"
    log_level: str = "INFO"
    audit_dir: str = ""
