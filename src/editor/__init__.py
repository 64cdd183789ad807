"""Rule drafting pipeline."""

from src.editor.runner import RuleEditor, build_fetcher, default_client_factory, run

__all__ = [
    "RuleEditor",
    "build_fetcher",
    "default_client_factory",
    "run",
]
