"""Pydantic models for rule descriptions and the few-shot exemplar."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RuleDescriptor(BaseModel):
    """A rule's display name and the raw text of its description page."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Display name of the rule (e.g., '児童育成手当')")
    content: str = Field(..., description="Raw description page text, unmodified")


class ExemplarRecord(BaseModel):
    """The fixed worked example shown to the model before the new rule."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Display name of the exemplar rule")
    url: str = Field(..., description="URL of the exemplar's description page")
    source: str = Field(..., description="Known-correct OpenFisca source for the exemplar")
