"""
Processor limits for the learners' worker pools.
"""

import logging
from typing import Optional

import psutil


def available_processors() -> int:
    return psutil.cpu_count(logical=True) or 1


def resolve_thread_count(requested: int, label: str, logger: Optional[logging.Logger] = None) -> int:
    """
    Clamp a thread hint to the processors on this machine.

    Hints below 1 or above the processor count are replaced by the processor count.
    """
    max_threads = available_processors()
    threads = requested
    if threads < 1 or threads > max_threads:
        threads = max_threads
    if logger is not None:
        logger.info(f"{label} will use {threads} of {max_threads} available processors.")
    return threads
