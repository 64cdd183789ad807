"""Centralized prompt management for the OpenFisca rule editor.

Usage:
    from config.prompts import RULE_EDITOR_INSTRUCTION, RULE_PROMPT_TEMPLATE
"""

from __future__ import annotations

from .generation import (
    PROMPT_INSTRUCTION,
    RULE_EDITOR_INSTRUCTION,
    RULE_PROMPT_TEMPLATE,
    SEED_ACKNOWLEDGEMENT,
)

__all__ = [
    "RULE_EDITOR_INSTRUCTION",
    "SEED_ACKNOWLEDGEMENT",
    "PROMPT_INSTRUCTION",
    "RULE_PROMPT_TEMPLATE",
]
