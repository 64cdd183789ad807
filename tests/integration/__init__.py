"""Integration tests package.

These tests call the live exemplar page and the Gemini API. They are
skipped unless GEMINI_API_KEY is set.

Run with: pytest -m integration
"""
