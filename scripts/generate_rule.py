#!/usr/bin/env python3
"""
CLI script to draft OpenFisca source for a new rule with Gemini.

Usage:
    python scripts/generate_rule.py 児童扶養手当 https://example.jp/teate.html
    python scripts/generate_rule.py NAME URL --api-key KEY     # Override GEMINI_API_KEY
    python scripts/generate_rule.py NAME URL --output rule.py  # Write result to a file
    python scripts/generate_rule.py NAME URL --dry-run         # Print the prompt only
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.settings import get_settings
from src.editor.runner import RuleEditor
from src.errors import RuleEditorError
from src.observability.logging import configure_logging, get_logger


async def main() -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        description="Draft OpenFisca rule source from a rule description page",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python scripts/generate_rule.py 児童扶養手当 https://example.jp/teate.html
    python scripts/generate_rule.py NAME URL --dry-run
        """,
    )

    parser.add_argument("rule_name", help="Display name of the new rule")
    parser.add_argument("rule_url", help="URL of the page describing the rule")
    parser.add_argument(
        "--api-key",
        default=None,
        help="Gemini API key (default: GEMINI_API_KEY from the environment)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the generated source to this file instead of stdout",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the rendered prompt without calling Gemini",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    settings = get_settings()
    configure_logging(
        json_output=settings.is_production,
        log_level="DEBUG" if args.verbose else settings.log_level,
    )
    log = get_logger(__name__)

    credential = args.api_key
    if credential is None and settings.gemini_api_key is not None:
        credential = settings.gemini_api_key.get_secret_value()

    try:
        async with RuleEditor(settings=settings) as editor:
            if args.dry_run:
                text = await editor.prepare_prompt(args.rule_name, args.rule_url)
            else:
                text = await editor.run(credential or "", args.rule_name, args.rule_url)
    except RuleEditorError as e:
        log.error("generate_rule_failed", error_code=e.error_code)
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(text, encoding="utf-8")
        log.info("saved_result", filepath=str(args.output))
    else:
        print(text)

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
