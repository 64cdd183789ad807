"""Run context propagation using contextvars."""

from __future__ import annotations

import uuid
from contextvars import ContextVar

import structlog

# Context variable for tracing one generation run
run_id_var: ContextVar[str] = ContextVar("run_id", default="")


def new_run_id() -> str:
    """Generate a short identifier for a generation run."""
    return uuid.uuid4().hex[:8]


def set_run_context(run_id: str) -> None:
    """Set the run context for the current async context.

    The id is also bound into structlog's context vars so every log line
    emitted during the run carries it.
    """
    run_id_var.set(run_id)
    structlog.contextvars.bind_contextvars(run_id=run_id)


def clear_run_context() -> None:
    """Clear run context after a run completes."""
    run_id_var.set("")
    structlog.contextvars.unbind_contextvars("run_id")
