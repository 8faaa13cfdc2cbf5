"""In-process workspace registry.

Tracks the Angular workspace folders of the session.  Folders load
concurrently (each one's pipeline stays sequential); callers that need a
configuration wait for the first complete load with ``wait_until_stable``.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import anyio
from loguru import logger

from ngschematics.engine.config.angular import AngularConfig
from ngschematics.engine.settings import Preferences
from ngschematics.engine.workspace import WorkspaceFolder


class WorkspaceNotStableError(TimeoutError):
    """Configuration did not finish loading in time."""

    def __init__(self, timeout: float | None) -> None:
        super().__init__(f"Loading configurations took more than {timeout}s")
        self.timeout = timeout


class NoAngularWorkspaceError(LookupError):
    """No registered folder holds an Angular config file."""

    def __init__(self, path: str | Path | None = None) -> None:
        where = f' for "{path}"' if path is not None else ""
        super().__init__(f"No valid Angular config file found{where}. Add an angular.json file to your project.")


class WorkspaceRegistry:
    """Registry of workspace folders, keyed by name.

    Starts "not stable": ``load_all`` sets the stable event once every folder
    has completed its first load.
    """

    def __init__(self, *, preferences: Preferences | None = None, reload_debounce: float = 0.3) -> None:
        self._folders: dict[str, WorkspaceFolder] = {}
        self._stable_event = asyncio.Event()
        self._preferences = preferences or Preferences()
        self._reload_debounce = reload_debounce

    # -- Mutation --------------------------------------------------------------

    async def add(self, root: str | Path, *, name: str = "") -> WorkspaceFolder | None:
        """Register a folder if it holds an Angular config file."""
        root = Path(root).resolve()
        if await AngularConfig.find_config_path(root) is None:
            logger.debug('"{}" is not an Angular workspace folder, ignored.', root)
            return None

        folder = WorkspaceFolder(
            root,
            name=name,
            index=len(self._folders),
            preferences=self._preferences,
            reload_debounce=self._reload_debounce,
        )
        logger.debug("Registry: register workspace folder {} ({})", folder.name, root)
        self._folders[folder.name] = folder
        return folder

    def remove(self, name: str) -> WorkspaceFolder | None:
        folder = self._folders.pop(name, None)
        if folder:
            logger.debug("Registry: unregister workspace folder {}", name)
        return folder

    async def load_all(self) -> None:
        """Load every folder concurrently, then mark the registry stable."""
        async with anyio.create_task_group() as tg:
            for folder in self._folders.values():
                tg.start_soon(folder.load)
        self._stable_event.set()
        logger.debug("Registry: {} workspace folder(s) loaded", len(self._folders))

    # -- Query -----------------------------------------------------------------

    def get(self, name: str) -> WorkspaceFolder | None:
        return self._folders.get(name)

    def all_folders(self) -> list[WorkspaceFolder]:
        return list(self._folders.values())

    def find_for_path(self, path: str | Path) -> WorkspaceFolder | None:
        """Innermost registered folder containing ``path``."""
        path = Path(path).resolve()
        matches = [folder for folder in self._folders.values() if path == folder.root or folder.root in path.parents]
        return max(matches, key=lambda folder: len(folder.root.parts), default=None)

    @property
    def is_stable(self) -> bool:
        return self._stable_event.is_set()

    async def wait_until_stable(self, timeout: float | None = None) -> None:
        """Wait for the first complete load.  Raises ``WorkspaceNotStableError`` on timeout."""
        if self._stable_event.is_set():
            return
        try:
            await asyncio.wait_for(self._stable_event.wait(), timeout=timeout)
        except TimeoutError as e:
            logger.warning("Registry: configuration not stable after {}s", timeout)
            raise WorkspaceNotStableError(timeout) from e
