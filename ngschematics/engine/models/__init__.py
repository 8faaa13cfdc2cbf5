"""Data models for the schematics engine."""

from ngschematics.engine.models.choice import Choice
from ngschematics.engine.models.collection import Collection, CollectionManifest, SchematicEntry
from ngschematics.engine.models.enums import ChoiceTag, DefaultSource, Linter, OptionType, ProjectType
from ngschematics.engine.models.schematic import ComputedDefault, PromptHint, Schematic, SchematicOption
from ngschematics.engine.models.shortcut import NO_OPTION_DESCRIPTION, ComponentType, ShortcutType

__all__ = [
    "NO_OPTION_DESCRIPTION",
    "Choice",
    "ChoiceTag",
    "Collection",
    "CollectionManifest",
    "ComponentType",
    "ComputedDefault",
    "DefaultSource",
    "Linter",
    "OptionType",
    "ProjectType",
    "PromptHint",
    "Schematic",
    "SchematicEntry",
    "SchematicOption",
    "ShortcutType",
]
