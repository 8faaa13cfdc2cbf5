"""Per-workspace-folder registry of installed collections."""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from ngschematics.engine.defaults import ANGULAR_COLLECTION_NAME, DEFAULT_COLLECTIONS_NAMES
from ngschematics.engine.schematics.collection import CollectionNotFoundError, resolve_collection

if TYPE_CHECKING:
    from ngschematics.engine.context import WorkspaceContext
    from ngschematics.engine.models.collection import Collection
    from ngschematics.engine.models.schematic import Schematic


class Collections:
    """Collections loaded in one workspace folder, in offering order.

    Order: Angular config default collections (most used), known
    third-party collections, then collections from user preferences.
    """

    def __init__(self) -> None:
        self._collections: dict[str, Collection] = {}

    async def load(self, context: WorkspaceContext, default_collections: list[str]) -> None:
        self._collections = {}

        user_names = context.preferences.schematics
        names = list(dict.fromkeys([*default_collections, *DEFAULT_COLLECTIONS_NAMES, *user_names]))

        for name in names:
            # Only collections the user asked for are worth an error when missing
            silent = name not in default_collections and name not in user_names
            collection = await resolve_collection(context, name, silent=silent)
            if collection is not None:
                self._collections[name] = collection

        if self._collections:
            logger.info("{} installed collection(s) detected: {}", len(self._collections), ", ".join(self._collections))
        else:
            logger.error(
                'No collection found. "{}" should be present in a correctly installed Angular CLI project.',
                ANGULAR_COLLECTION_NAME,
            )

    def get_collections_names(self) -> list[str]:
        return list(self._collections)

    def get_collection(self, name: str) -> Collection | None:
        return self._collections.get(name)

    def require_collection(self, name: str) -> Collection:
        """Like ``get_collection``, but raises ``CollectionNotFoundError``."""
        collection = self._collections.get(name)
        if collection is None:
            raise CollectionNotFoundError(name)
        return collection

    def get_schematic(self, collection_name: str, schematic_name: str) -> Schematic | None:
        collection = self._collections.get(collection_name)
        return collection.get_schematic(schematic_name) if collection is not None else None

    def local_collections(self) -> list[Collection]:
        """Collections living in the workspace, whose manifest changes should trigger a reload."""
        return [collection for collection in self._collections.values() if collection.is_local]

    def __len__(self) -> int:
        return len(self._collections)

    def __contains__(self, name: object) -> bool:
        return name in self._collections
