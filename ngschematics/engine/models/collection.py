"""Collection data models.

``CollectionManifest`` mirrors a ``collection.json`` file; ``Collection`` is
the resolved result with materialised schematics.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from ngschematics.engine.models.choice import Choice
from ngschematics.engine.models.schematic import Schematic


class SchematicEntry(BaseModel):
    """One entry of a manifest's ``schematics`` map."""

    schema_path: str | None = None
    """Path to ``schema.json``, relative to the manifest directory."""
    description: str | None = None
    hidden: bool = False
    private: bool = False
    extends: str | None = None
    """``<collection>[:<schematic>]`` this entry inherits from."""
    inherited_from: str | None = None
    """Set on placeholders seeded from a collection-level ``extends``."""

    @property
    def is_internal(self) -> bool:
        return self.hidden or self.private


class CollectionManifest(BaseModel):
    """Parsed ``collection.json``."""

    schematics: dict[str, SchematicEntry] = Field(default_factory=dict)
    extends: list[str] = Field(default_factory=list)


class Collection(BaseModel):
    """A resolved collection, ready to generate from."""

    name: str
    path: Path
    extends: list[str] = Field(default_factory=list)
    schematics: dict[str, Schematic] = Field(default_factory=dict)
    choices: list[Choice] = Field(default_factory=list)
    """Schematics offered to the user: own schematics first, then inherited ones."""

    @property
    def is_local(self) -> bool:
        """Local collections live in the workspace, not in ``node_modules``."""
        return "node_modules" not in self.path.parts

    def get_schematics_names(self) -> list[str]:
        return sorted(self.schematics)

    def get_schematic(self, name: str) -> Schematic | None:
        return self.schematics.get(name)
