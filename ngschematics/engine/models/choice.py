"""Prompt choice model, shared by every list offered to the user."""

from __future__ import annotations

from pydantic import BaseModel

from ngschematics.engine.models.enums import ChoiceTag


class Choice(BaseModel):
    """One item of a single or multiple choice prompt."""

    label: str
    description: str = ""
    detail: str = ""
    picked: bool = False
    tag: ChoiceTag | None = None
