"""Observability module for logging and run tracing."""

from .context import (
    clear_run_context,
    new_run_id,
    run_id_var,
    set_run_context,
)
from .logging import configure_logging, get_logger

__all__ = [
    # Context
    "run_id_var",
    "new_run_id",
    "set_run_context",
    "clear_run_context",
    # Logging
    "configure_logging",
    "get_logger",
]
