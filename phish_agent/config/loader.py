"""Configuration loader."""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv

from .models import AppConfig


def load_config(config_path: str = "config.yaml") -> AppConfig:
    """Load configuration from environment and an optional YAML file."""
    load_dotenv()

    config = AppConfig(
        storage_path=os.getenv("PHISH_AGENT_STORAGE", "phish_agent_store.json"),
        request_timeout=float(os.getenv("PHISH_AGENT_TIMEOUT", "60")),
        reply_timeout=float(os.getenv("PHISH_AGENT_REPLY_TIMEOUT", "30")),
        log_level=os.getenv("PHISH_AGENT_LOG_LEVEL", "INFO").upper(),
        audit_dir=os.getenv("PHISH_AGENT_AUDIT_DIR", ""),
    )

    config_file = Path(config_path)
    if not config_file.exists():
        return config

    with open(config_file) as f:
        yaml_config = yaml.safe_load(f) or {}

    storage = yaml_config.get("storage", {})
    config.storage_path = storage.get("path", config.storage_path)
    config.retention_limit = int(storage.get("retention_limit", config.retention_limit))

    delivery = yaml_config.get("delivery", {})
    config.poll_interval = float(delivery.get("poll_interval", config.poll_interval))
    config.poll_attempts = int(delivery.get("poll_attempts", config.poll_attempts))
    config.reply_timeout = float(delivery.get("reply_timeout", config.reply_timeout))

    remote = yaml_config.get("remote", {})
    config.request_timeout = float(remote.get("timeout", config.request_timeout))
    config.referer = remote.get("referer", config.referer)
    config.title = remote.get("title", config.title)

    logging_data = yaml_config.get("logging", {})
    config.log_level = str(logging_data.get("level", config.log_level)).upper()
    config.audit_dir = logging_data.get("audit_dir", config.audit_dir)

    return config
