"""Shared constants and environment helpers"""

import logging
import os
import sys

import psutil


ELLIPSIS = '...'
DEFAULT_WORKERS = 4

TRUTHY_VALUES = ('1', 'true', 'yes')

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_int_env(name: str, default: int = 0) -> int:
    """Read an integer environment variable, falling back to default on missing or malformed values."""
    value = os.getenv(name)
    if value is None or value.strip() == '':
        return default
    try:
        return int(value)
    except ValueError:
        return default


def get_bool_env(name: str) -> bool:
    return os.getenv(name, '').lower() in TRUTHY_VALUES


def get_worker_count() -> int:
    """Get the worker pool size.

    Controlled by GRRS_WORKERS environment variable.
    Default: number of logical CPUs, or DEFAULT_WORKERS if that is unknown.
    """
    workers = get_int_env('GRRS_WORKERS')
    if workers > 0:
        return workers
    return psutil.cpu_count(logical=True) or DEFAULT_WORKERS


def setup_logging(debug: bool = False) -> None:
    """Configure stderr logging from GRRS_LOG_LEVEL (default WARNING), or DEBUG when requested."""
    level_name = 'DEBUG' if debug else os.getenv('GRRS_LOG_LEVEL', 'WARNING').upper()
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)
    logging.getLogger('grrs').setLevel(level)
