"""
Runtime configuration from environment variables.

Environment Variables:
    ORDERQ_LOG_STORE: Submission log backend (memory, file) - default: memory
    ORDERQ_LOG_PATH: JSONL path for the file backend - default: /tmp/orderq/submissions.log
    ORDERQ_LOG_LEVEL: Log level - default: INFO
    ORDERQ_LOG_FORMAT: Log format (json, text) - default: json
    METRICS_ENABLED: Enable metrics server (true/false) - default: false
    METRICS_PORT: HTTP port for /metrics endpoint - default: 8080
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .log.file_store import FileSubmissionLog
from .log.memory_store import InMemorySubmissionLog
from .log.store import SubmissionLog
from .questions import QuestionRepository

DEFAULT_LOG_PATH = "/tmp/orderq/submissions.log"
DEFAULT_METRICS_PORT = 8080


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    val = env.get(key)
    if not val:
        return default
    try:
        parsed = int(val)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


@dataclass(frozen=True)
class Settings:
    log_store: str = "memory"
    log_path: str = DEFAULT_LOG_PATH
    log_level: str = "INFO"
    log_format: str = "json"
    metrics_enabled: bool = False
    metrics_port: int = DEFAULT_METRICS_PORT

    @staticmethod
    def from_env(env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        return Settings(
            log_store=env.get("ORDERQ_LOG_STORE", "memory").lower(),
            log_path=env.get("ORDERQ_LOG_PATH", DEFAULT_LOG_PATH),
            log_level=env.get("ORDERQ_LOG_LEVEL", "INFO").upper(),
            log_format=env.get("ORDERQ_LOG_FORMAT", "json").lower(),
            metrics_enabled=env.get("METRICS_ENABLED", "false").lower() == "true",
            metrics_port=_env_int(env, "METRICS_PORT", DEFAULT_METRICS_PORT),
        )


def build_log(settings: Settings, questions: QuestionRepository) -> SubmissionLog:
    """Construct the configured submission log (file or in-memory)."""
    if settings.log_store == "file":
        return FileSubmissionLog(settings.log_path, questions)
    return InMemorySubmissionLog(questions)
