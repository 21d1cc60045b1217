"""Lightweight logger for workflow runs."""
import logging
import os
import time
from contextlib import contextmanager

_stats = {
    "llm_calls": 0,
    "search_calls": 0,
    "node_runs": 0,
    "node_errors": 0,
    "start_time": None,
}


class _Formatter(logging.Formatter):
    """Custom formatter: [node] HH:MM:SS message."""

    def format(self, record):
        node = getattr(record, "node", "main")
        ts = time.strftime("%H:%M:%S", time.localtime(record.created))
        return f"[{node}] {ts} {record.getMessage()}"


def get_logger(name: str) -> logging.Logger:
    """Create a logger with custom formatting."""
    logger = logging.getLogger(f"agent_canvas.{name}")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(_Formatter())
        logger.addHandler(handler)
    level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logger.setLevel(getattr(logging, level, logging.INFO))
    return logger


@contextmanager
def log_time(label: str, logger: logging.Logger = None):
    """Context manager that measures and logs elapsed time."""
    start = time.time()
    try:
        yield
    finally:
        elapsed = time.time() - start
        log = logger or get_logger("timer")
        log.info(f"{label} finished in {elapsed:.2f}s", extra={"node": "timer"})


def track(key: str, value: int = 1):
    """Increment a stats counter."""
    if key in _stats and isinstance(_stats[key], (int, float)):
        _stats[key] += value


def start_run():
    """Mark the start of a run."""
    _stats["start_time"] = time.time()
    _stats["llm_calls"] = 0
    _stats["search_calls"] = 0
    _stats["node_runs"] = 0
    _stats["node_errors"] = 0


def log_summary():
    """Log run summary stats."""
    elapsed = time.time() - _stats["start_time"] if _stats["start_time"] else 0
    log = get_logger("summary")
    log.info("--- Run Summary ---", extra={"node": "summary"})
    log.info(f"Nodes executed: {_stats['node_runs']}", extra={"node": "summary"})
    log.info(f"Node errors: {_stats['node_errors']}", extra={"node": "summary"})
    log.info(f"LLM calls: {_stats['llm_calls']} ({_stats['search_calls']} search)", extra={"node": "summary"})
    log.info(f"Total time: {elapsed:.2f}s", extra={"node": "summary"})
