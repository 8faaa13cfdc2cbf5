"""Schematic data models.

Built by the schematic resolver from ``schema.json`` files after every value
has been narrowed by the JSON validator, so these models can trust their
field types.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from ngschematics.engine.models.choice import Choice
from ngschematics.engine.models.enums import DefaultSource, OptionType


class ComputedDefault(BaseModel):
    """``$default``: a value the Angular CLI computes by itself."""

    source: str
    index: int | None = None

    @property
    def is_first_argument(self) -> bool:
        """``argv[0]``: the first argument after ``ng g <schematic>``."""
        return self.source == DefaultSource.ARGV and self.index == 0


class PromptHint(BaseModel):
    """``x-prompt``, normalised from its string shorthand when needed."""

    message: str | None = None
    multiselect: bool = False
    items: list[str] | None = None


class SchematicOption(BaseModel):
    """One entry of a schematic's ``properties``."""

    name: str
    type: str | None = None
    description: str | None = None
    enum: list[str] | None = None
    items_enum: list[str] | None = None
    """Choices of a multi-select array option (``items.enum``, or legacy ``x-prompt.items``)."""
    default: Any = None
    computed_default: ComputedDefault | None = None
    visible: bool = True
    deprecated: bool = False
    prompt: PromptHint | None = None

    @property
    def is_first_argument(self) -> bool:
        return self.computed_default is not None and self.computed_default.is_first_argument

    @property
    def is_boolean(self) -> bool:
        return self.type == OptionType.BOOLEAN

    @property
    def is_array(self) -> bool:
        return self.type == OptionType.ARRAY

    @property
    def prompt_message(self) -> str:
        """Message to show when asking a value for this option."""
        if self.prompt is not None and self.prompt.message:
            return self.prompt.message
        return self.description or "What value do you want for this option?"


class Schematic(BaseModel):
    """A loaded schematic: its options, required options and prompt choices."""

    name: str
    collection_name: str
    description: str = ""
    path: Path | None = None
    options: dict[str, SchematicOption] = Field(default_factory=dict)
    required_options: list[str] = Field(default_factory=list)
    """Declared ``required`` minus the options the CLI computes itself (``$default``)."""
    choices: list[Choice] = Field(default_factory=list)
    """Options offered in the interactive list, sorted required > suggested > others."""

    @property
    def full_name(self) -> str:
        """Eg. ``@schematics/angular:component``."""
        return f"{self.collection_name}:{self.name}"

    def has_option(self, name: str) -> bool:
        return name in self.options

    def get_option(self, name: str) -> SchematicOption | None:
        return self.options.get(name)

    def get_option_default_value(self, name: str) -> Any:
        option = self.options.get(name)
        return option.default if option is not None else None

    def get_some_options(self, names: list[str]) -> dict[str, SchematicOption]:
        """Options details from their names, unknown names are ignored."""
        return {name: self.options[name] for name in names if name in self.options}

    def get_required_options(self) -> dict[str, SchematicOption]:
        return {name: self.options[name] for name in self.required_options}

    def has_name_as_first_arg(self) -> bool:
        """Tells if the schematic takes ``path/to/name`` as first command line argument."""
        option = self.options.get("name")
        return option is not None and option.is_first_argument
