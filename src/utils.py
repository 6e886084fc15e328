"""
utils.py
--------
Logging, timing decorators, and shared numerical helpers.
"""

import os
import logging
import time
import functools
from datetime import datetime
from pathlib import Path
from typing import Optional

import numpy as np


def get_logger(name: str, log_dir: Optional[str] = None,
               level: str = "INFO") -> logging.Logger:
    """
    Return a named logger writing to stdout and, optionally, a daily file.

    Parameters
    ----------
    name    : Logger name (typically the module __name__).
    log_dir : Directory for log files. None or "" disables the file handler.
    level   : Logging level string ("DEBUG", "INFO", "WARNING", "ERROR").

    Returns
    -------
    logging.Logger
    """
    logger = logging.getLogger(name)

    if logger.handlers:          # avoid duplicate handlers on re-import
        return logger

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Console handler
    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    # File handler
    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        log_file = os.path.join(
            log_dir, f"npsmle_{datetime.now().strftime('%Y%m%d')}.log"
        )
        fh = logging.FileHandler(log_file)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    return logger


def timeit(func):
    """Decorator that logs the execution time of any function."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger(func.__module__)
        t0 = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed = time.perf_counter() - t0
        logger.debug("%s completed in %.3f s", func.__qualname__, elapsed)
        return result
    return wrapper


def st_dev(sample: np.ndarray, n: Optional[int] = None) -> float:
    """Sample standard deviation (ddof=1) of the first n entries."""
    values = sample if n is None else sample[:n]
    return float(np.std(values, ddof=1))


def interpolate_sentiment(sentiment: np.ndarray, m_sim: int) -> np.ndarray:
    """
    Linearly interpolate an observation-level sentiment series onto the
    simulation substep grid.

    Substep k of observation block i (i = 1..N-1) sits at time
    (i - 1) + k / m_sim, so the output has (N - 1) * m_sim entries and is
    read at index (i - 1) * m_sim + k.
    """
    sentiment = np.asarray(sentiment, dtype=float)
    if sentiment.ndim != 1 or sentiment.size < 2:
        raise ValueError("sentiment must be 1D with at least 2 observations")
    if m_sim < 1:
        raise ValueError(f"m_sim must be >= 1, got {m_sim}")
    n_blocks = sentiment.size - 1
    grid = np.arange(n_blocks * m_sim) / m_sim
    return np.interp(grid, np.arange(sentiment.size), sentiment)
