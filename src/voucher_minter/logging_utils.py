"""Run-scoped logging utilities.

Every invocation of the CLI gets a run ID so that log lines from one batch can
be told apart when several operators share a log sink.
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Optional

# Context variable holding the ID of the current minting run
run_id_var: ContextVar[Optional[str]] = ContextVar("run_id", default=None)


class RunIdFilter(logging.Filter):
    """Stamp log records with the current run ID."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = run_id_var.get() or "no-run-id"
        return True


def setup_logging(log_level: str = "WARNING", log_format: str = "text") -> None:
    """Configure root logging for the CLI.

    Logs go to stderr; stdout is reserved for prompts and progress lines.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        log_format: Log format (json or text).
    """
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, log_level.upper()))

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)

    if log_format == "json":
        formatter = logging.Formatter(
            '{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
            '"run_id": "%(run_id)s", "name": "%(name)s", '
            '"message": "%(message)s"}'
        )
    else:
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] [%(run_id)s] %(name)s: %(message)s")

    handler.setFormatter(formatter)
    handler.addFilter(RunIdFilter())
    logger.addHandler(handler)

    # httpx logs every request at INFO, including the full URL
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_run_id() -> Optional[str]:
    return run_id_var.get()


def generate_run_id() -> str:
    """Generate a new run ID.

    Returns:
        A UUID-based run ID.
    """
    return f"run-{uuid.uuid4().hex[:12]}"


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class RunIdContext:
    """Context manager binding a run ID to the enclosed block."""

    def __init__(self, run_id: Optional[str] = None):
        self.run_id = run_id or generate_run_id()
        self._token = None

    def __enter__(self) -> str:
        self._token = run_id_var.set(self.run_id)
        return self.run_id

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        run_id_var.reset(self._token)
