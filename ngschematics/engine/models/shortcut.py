"""Shortcut data models: pre-filled option bundles offered as one-click presets."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from ngschematics.engine.generation.options import CliCommandOptions, format_cli_command_options
from ngschematics.engine.models.choice import Choice

NO_OPTION_DESCRIPTION = "No pre-filled option"


class ShortcutType(BaseModel):
    """A named preset of options.

    ``description`` is always computed from ``options`` with the same
    formatter as the final command, so the preview cannot drift from what
    will be launched.
    """

    label: str
    detail: str = ""
    options: CliCommandOptions = Field(default_factory=dict)

    @property
    def description(self) -> str:
        return format_cli_command_options(self.options)

    @property
    def choice(self) -> Choice:
        return Choice(label=self.label, description=self.description or NO_OPTION_DESCRIPTION, detail=self.detail)


class ComponentType(BaseModel):
    """A component type declared by default or in user preferences.

    Eg. ``{"label": "Dialog", "options": [["type", "dialog"], ["skipSelector", "true"]]}``.
    """

    label: str
    options: list[tuple[str, str]] = Field(default_factory=list)
    package: str | None = None
    """Default types are only enabled when this package is installed."""
    detail: str = ""

    @field_validator("label")
    @classmethod
    def _label_not_empty(cls, value: str) -> str:
        if not value.strip():
            msg = "label must not be empty"
            raise ValueError(msg)
        return value

    def to_shortcut(self) -> ShortcutType:
        return ShortcutType(label=self.label, detail=self.detail, options=dict(self.options))
