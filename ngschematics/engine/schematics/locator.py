"""Collection manifest location and parsing.

A collection name is either a workspace-relative local file
(``./schematics/collection.json``) or a package name, whose
``package.json`` points to the manifest through its ``schematics`` field.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger

from ngschematics.engine import files
from ngschematics.engine import json_validator as jv
from ngschematics.engine.models.collection import CollectionManifest, SchematicEntry

if TYPE_CHECKING:
    from ngschematics.engine.context import WorkspaceContext


def is_local_collection_name(name: str) -> bool:
    return name.startswith(".") and name.endswith(".json")


def split_extends(target: str) -> tuple[str, str | None]:
    """``@schematics/angular:component`` -> ``("@schematics/angular", "component")``."""
    collection_name, _, schematic_name = target.partition(":")
    return collection_name, schematic_name or None


async def find_collection_path(context: WorkspaceContext, name: str, *, silent: bool = False) -> Path | None:
    """Locate a collection manifest, or ``None``."""
    if is_local_collection_name(name):
        path = context.root / name
        return path if await context.is_readable(path, silent=silent) else None

    package_json_path = await context.find_package_json(name, silent=silent)
    if package_json_path is None:
        return None

    schematics_path = jv.as_string(jv.get_path(await files.parse_json_file(package_json_path), "schematics"))
    if not schematics_path:
        if not silent:
            logger.error('"{}" package has no "schematics" field in its package.json.', name)
        return None

    path = package_json_path.parent / schematics_path
    return path if await context.is_readable(path, silent=silent) else None


async def load_manifest(path: Path) -> CollectionManifest | None:
    raw = await files.parse_json_file(path)
    if raw is None:
        return None
    return parse_manifest(raw)


def parse_manifest(raw: Any) -> CollectionManifest:
    """Narrow a raw ``collection.json``.  Invalid entries are dropped."""
    schematics: dict[str, SchematicEntry] = {}
    for name, entry in (jv.as_object(jv.get_path(raw, "schematics")) or {}).items():
        if jv.as_object(entry) is None:
            logger.warning('"{}" schematic entry is not an object, ignored.', name)
            continue
        schematics[name] = SchematicEntry(
            schema_path=jv.as_string(entry.get("schema")),
            description=jv.as_string(entry.get("description")),
            hidden=jv.as_bool(entry.get("hidden")) or False,
            private=jv.as_bool(entry.get("private")) or False,
            extends=jv.as_string(entry.get("extends")),
        )

    extends_raw = jv.get_path(raw, "extends")
    single = jv.as_string(extends_raw)
    extends = [single] if single is not None else (jv.as_string_list(extends_raw) or [])

    return CollectionManifest(schematics=schematics, extends=extends)


async def find_inherited_schema_path(
    context: WorkspaceContext,
    collection_name: str,
    schematic_name: str,
    *,
    depth: int = 0,
) -> Path | None:
    """Find the ``schema.json`` of a schematic inherited from ``collection_name``.

    The parent's own entry wins (its ``schema``, then its per-entry
    ``extends``), then the parent's collection-level ``extends`` in order.
    """
    if depth > context.max_extends_depth:
        logger.warning(
            'Inheritance of "{}:{}" is deeper than {} levels, stopped.',
            collection_name,
            schematic_name,
            context.max_extends_depth,
        )
        return None

    path = await find_collection_path(context, collection_name, silent=True)
    manifest = await load_manifest(path) if path is not None else None
    if path is None or manifest is None:
        return None

    entry = manifest.schematics.get(schematic_name)
    if entry is not None and entry.schema_path:
        return path.parent / entry.schema_path

    if entry is not None and entry.extends:
        parent_name, parent_schematic = split_extends(entry.extends)
        if parent_name != collection_name:
            return await find_inherited_schema_path(
                context, parent_name, parent_schematic or schematic_name, depth=depth + 1
            )

    for parent_name in manifest.extends:
        if parent_name == collection_name:
            continue
        found = await find_inherited_schema_path(context, parent_name, schematic_name, depth=depth + 1)
        if found is not None:
            return found

    return None
