# In lexitag/logging_config.py

import logging
import os

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
VERBOSE_ENV_VAR = "LEXITAG_VERBOSE_LOGS"


def _to_bool(value, default=False):
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def resolve_verbose_logs():
    """Reads the verbosity flag from the environment."""
    return _to_bool(os.getenv(VERBOSE_ENV_VAR), default=False)


def resolve_log_level(verbose_logs):
    return logging.DEBUG if verbose_logs else logging.INFO


def configure_logging(force=False, verbose_logs=None):
    """Configures the root logger for the training and prediction drivers."""
    if verbose_logs is None:
        verbose_logs = resolve_verbose_logs()
    logging.basicConfig(
        level=resolve_log_level(verbose_logs),
        format=DEFAULT_LOG_FORMAT,
        datefmt=DEFAULT_LOG_DATEFMT,
        force=force,
    )
    return verbose_logs
