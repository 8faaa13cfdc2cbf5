"""Collection resolver.

Resolution of one collection:

1. Locate the manifest (local ``.json`` file or package ``schematics`` field).
2. Seed a merge table with the names of every collection-level ``extends``
   parent (names-only load), marked as inherited.  When two parents declare
   the same name, the later one wins.
3. Overlay the collection's own entries.
4. Drop ``ng-add``, hidden/private entries and entries with neither a
   schema nor an ``extends`` target.  Nothing left is a failed load.
5. Materialise each schematic.  A failing schematic is logged and skipped.
6. Offer own schematics first, then inherited ones, both alphabetical.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from ngschematics.engine.models.choice import Choice
from ngschematics.engine.models.collection import Collection, CollectionManifest, SchematicEntry
from ngschematics.engine.models.enums import ChoiceTag
from ngschematics.engine.schematics.locator import (
    find_collection_path,
    find_inherited_schema_path,
    load_manifest,
    split_extends,
)
from ngschematics.engine.schematics.schematic import SchematicLoadError, load_schematic

if TYPE_CHECKING:
    from pathlib import Path

    from ngschematics.engine.context import WorkspaceContext
    from ngschematics.engine.models.schematic import Schematic

IGNORED_SCHEMATICS = frozenset({"ng-add"})
"""Installation schematics, not relevant for generation."""


class CollectionNotFoundError(LookupError):
    """A requested collection is not installed or failed to load."""

    def __init__(self, name: str) -> None:
        super().__init__(f'Cannot load "{name}" collection. It may not be installed in this workspace folder.')
        self.name = name


async def resolve_collection(
    context: WorkspaceContext,
    name: str,
    *,
    silent: bool = False,
    depth: int = 0,
) -> Collection | None:
    """Fully resolve a collection, or ``None`` if it cannot be found or loaded."""
    path = await find_collection_path(context, name, silent=silent)
    if path is None:
        return None

    manifest = await load_manifest(path)
    if manifest is None:
        logger.error('"{}" collection manifest can not be loaded.', name)
        return None

    entries = _filter_entries(name, await _merge_entries(context, name, manifest, depth=depth))
    if not entries:
        logger.error('"{}" collection has no usable schematic.', name)
        return None

    schematics: dict[str, Schematic] = {}
    for schematic_name, entry in entries.items():
        try:
            schematics[schematic_name] = await _materialize(context, name, path, schematic_name, entry, depth=depth)
        except SchematicLoadError as e:
            logger.error(str(e))

    if not schematics:
        logger.error('No schematic of "{}" collection could be loaded.', name)
        return None

    logger.info('"{}" collection loaded with {} schematic(s).', name, len(schematics))

    return Collection(
        name=name,
        path=path,
        extends=manifest.extends,
        schematics=schematics,
        choices=_build_choices(entries, schematics),
    )


async def load_collection_names(context: WorkspaceContext, name: str, *, depth: int = 0) -> list[str] | None:
    """Names-only load: usable schematic names of a collection, its own parents included."""
    path = await find_collection_path(context, name)
    if path is None:
        return None
    manifest = await load_manifest(path)
    if manifest is None:
        return None
    entries = _filter_entries(name, await _merge_entries(context, name, manifest, depth=depth), quiet=True)
    return list(entries)


async def _merge_entries(
    context: WorkspaceContext,
    name: str,
    manifest: CollectionManifest,
    *,
    depth: int,
) -> dict[str, SchematicEntry]:
    merged: dict[str, SchematicEntry] = {}

    for parent_name in manifest.extends:
        if parent_name == name:
            logger.warning('"{}" collection extends itself, ignored.', name)
            continue
        if depth >= context.max_extends_depth:
            logger.warning('"{}" collection inheritance is too deep, stopped at {} levels.', name, depth)
            break

        parent_names = await load_collection_names(context, parent_name, depth=depth + 1)
        if parent_names is None:
            logger.warning('"{}" collection extends "{}", which cannot be found.', name, parent_name)
            continue
        for schematic_name in parent_names:
            merged[schematic_name] = SchematicEntry(inherited_from=parent_name)

    merged.update(manifest.schematics)
    return merged


def _filter_entries(name: str, entries: dict[str, SchematicEntry], *, quiet: bool = False) -> dict[str, SchematicEntry]:
    kept: dict[str, SchematicEntry] = {}
    for schematic_name, entry in entries.items():
        if schematic_name in IGNORED_SCHEMATICS or entry.is_internal:
            continue
        if not entry.schema_path and not entry.extends and not entry.inherited_from:
            if not quiet:
                logger.warning('"{}:{}" schematic has no schema and no "extends", ignored.', name, schematic_name)
            continue
        kept[schematic_name] = entry

    if not quiet:
        logger.debug('{} schematic(s) kept for "{}" collection: {}', len(kept), name, ", ".join(kept))
    return kept


async def _materialize(
    context: WorkspaceContext,
    collection_name: str,
    manifest_path: Path,
    schematic_name: str,
    entry: SchematicEntry,
    *,
    depth: int,
) -> Schematic:
    full_name = f"{collection_name}:{schematic_name}"

    if entry.schema_path:
        return await load_schematic(
            name=schematic_name,
            collection_name=collection_name,
            schema_path=manifest_path.parent / entry.schema_path,
            description=entry.description or "",
        )

    if entry.extends:
        parent_name, parent_schematic = split_extends(entry.extends)
        parent_schematic = parent_schematic or schematic_name
    else:
        parent_name, parent_schematic = entry.inherited_from or "", schematic_name

    if parent_name == collection_name:
        raise SchematicLoadError(full_name, "it extends its own collection")

    schema_path = await find_inherited_schema_path(context, parent_name, parent_schematic, depth=depth + 1)
    if schema_path is None:
        raise SchematicLoadError(full_name, f'inherited schema can not be found in "{parent_name}" collection')

    # Parent's options, local collection's identity
    return await load_schematic(
        name=schematic_name,
        collection_name=collection_name,
        schema_path=schema_path,
        description=entry.description or f'Schematic inherited from "{parent_name}"',
    )


def _build_choices(entries: dict[str, SchematicEntry], schematics: dict[str, Schematic]) -> list[Choice]:
    native: list[Choice] = []
    inherited: list[Choice] = []
    for name in sorted(schematics):
        entry = entries[name]
        if entry.extends or entry.inherited_from:
            inherited.append(Choice(label=name, description=schematics[name].description, tag=ChoiceTag.INHERITED))
        else:
            native.append(Choice(label=name, description=schematics[name].description))
    return native + inherited
