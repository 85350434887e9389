"""
Process wiring: configuration, logging, metrics and the hook pipeline.

Usage:
    hooks = start(questions, channel)
    hooks.run(ON_INGEST, answer)
"""

from typing import Optional

from .config import Settings, build_log
from .hooks import HookRegistry
from .logging_config import get_logger, setup_logging
from .metrics import start_metrics_server
from .notify import Channel
from .plugin import build_plugin
from .questions import QuestionRepository


def start(
    questions: QuestionRepository,
    channel: Channel,
    settings: Optional[Settings] = None,
    clock=None,
) -> HookRegistry:
    """
    Configure ambient services and return a hook registry with the ordering
    plugin registered.
    """
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level, settings.log_format)
    start_metrics_server(enabled=settings.metrics_enabled, port=settings.metrics_port)

    log = build_log(settings, questions)
    hooks = build_plugin(questions, log, channel, clock)
    get_logger(__name__).info(f"Ordering engine started with {settings.log_store} submission log")
    return hooks
