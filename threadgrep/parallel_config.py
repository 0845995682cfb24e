"""
Configuration management for the search worker pool
Provides auto-detection of worker count and environment overrides
"""

import os
from dataclasses import dataclass
from typing import Optional

import psutil

from threadgrep.search_core.constants import DEFAULT_THREADS, QUEUE_MULTIPLIER
from threadgrep.utils import get_logger

logger = get_logger(__name__)

MAX_WORKERS_LIMIT = 256
MAX_QUEUE_MULTIPLIER = 64


@dataclass
class ParallelConfig:
    """Configuration for the search worker pool"""
    max_workers: int
    queue_multiplier: int = QUEUE_MULTIPLIER

    def __post_init__(self):
        """Validate configuration values"""
        self.max_workers = max(1, min(self.max_workers, MAX_WORKERS_LIMIT))
        self.queue_multiplier = max(1, min(self.queue_multiplier, MAX_QUEUE_MULTIPLIER))

    @property
    def queue_size(self) -> int:
        return self.max_workers * self.queue_multiplier


def detect_worker_count() -> int:
    """Number of logical CPUs, or DEFAULT_THREADS when it cannot be detected"""
    try:
        cpu_count = psutil.cpu_count(logical=True)
    except (OSError, NotImplementedError) as e:
        logger.warning(f"Failed to detect CPU count: {e}")
        cpu_count = None

    if not cpu_count:
        logger.debug(f"CPU count unavailable, using {DEFAULT_THREADS} workers")
        return DEFAULT_THREADS

    logger.debug(f"Found {cpu_count} cores")
    return cpu_count


def _read_int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not an integer")
        return default


def get_config(threads: Optional[int] = None) -> ParallelConfig:
    """
    Get the best available configuration

    Priority: explicit argument > environment variables > detection

    Args:
        threads: Worker count requested on the command line (None or 0 = not set)
    """
    queue_multiplier = _read_int_env('THREADGREP_QUEUE_MULTIPLIER', QUEUE_MULTIPLIER)

    max_workers = threads or _read_int_env('THREADGREP_MAX_WORKERS', 0)
    if max_workers <= 0:
        max_workers = detect_worker_count()

    config = ParallelConfig(max_workers=max_workers, queue_multiplier=queue_multiplier)
    logger.debug(f"Parallel config: {config.max_workers} workers, queue size {config.queue_size}")
    return config
