"""Few-shot prompt rendering for rule generation."""

from __future__ import annotations

from config.prompts import PROMPT_INSTRUCTION, RULE_PROMPT_TEMPLATE
from src.rules.models import RuleDescriptor


def build_prompt(
    example: RuleDescriptor,
    example_source: str,
    target: RuleDescriptor,
) -> str:
    """Render the prompt asking the model to draft the target rule's source.

    The layout is fixed:
    - The instruction sentence
    - The exemplar's name and fenced description
    - "source code:" and the exemplar's fenced source
    - The target's name and fenced description
    - A trailing "source code:" for the model to complete

    Values are inserted verbatim. An empty description still yields its
    (empty) fenced block so the shape never changes.

    Args:
        example: The exemplar's name and description text.
        example_source: Known-correct source for the exemplar.
        target: The new rule's name and description text.

    Returns:
        The rendered prompt, ending with "source code:".
    """
    return RULE_PROMPT_TEMPLATE.format(
        instruction=PROMPT_INSTRUCTION,
        example_name=example.name,
        example_content=example.content,
        example_source=example_source,
        target_name=target.name,
        target_content=target.content,
    )
