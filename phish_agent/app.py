"""Wiring of the analysis context and a client session from configuration."""

import logging
from dataclasses import dataclass

from .analyzer import LocalScanner, OpenRouterAnalyzer
from .audit import AnalysisLogger
from .config import AppConfig, SettingsProvider
from .delivery import ClientSession, ResultPoller
from .messaging import LocalChannel, MessageHandler
from .router import Router
from .storage import JSONFileStore, ResultStore


@dataclass
class Agent:
    """All components sharing one key-value store."""
    config: AppConfig
    settings: SettingsProvider
    results: ResultStore
    router: Router
    handler: MessageHandler
    channel: LocalChannel
    audit_logger: AnalysisLogger = None

    def session(self) -> ClientSession:
        poller = ResultPoller(
            self.results,
            interval=self.config.poll_interval,
            max_attempts=self.config.poll_attempts,
        )
        return ClientSession(
            self.channel,
            self.results,
            poller=poller,
            retention_limit=self.config.retention_limit,
            reply_timeout=self.config.reply_timeout,
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_agent(config: AppConfig, kv=None, notifier=None) -> Agent:
    """Build the agent. ``kv`` defaults to the JSON file at ``config.storage_path``."""
    kv = kv if kv is not None else JSONFileStore(config.storage_path)
    settings = SettingsProvider(kv)
    results = ResultStore(kv)
    audit_logger = AnalysisLogger(config.audit_dir) if config.audit_dir else None

    router = Router(
        settings,
        results,
        remote=OpenRouterAnalyzer(
            request_timeout=config.request_timeout,
            referer=config.referer,
            title=config.title,
        ),
        local=LocalScanner(),
        audit_logger=audit_logger,
    )
    handler = MessageHandler(router, notifier=notifier)

    return Agent(
        config=config,
        settings=settings,
        results=results,
        router=router,
        handler=handler,
        channel=LocalChannel(handler),
        audit_logger=audit_logger,
    )
