"""Workspace context.

Explicit handle passed to every resolver call instead of ambient global
state.  A ``WorkspaceContext`` belongs to one workspace folder load: the
folder creates a fresh one at each (re)load, so caches never outlive the
configuration they were computed from, and tests get isolation by simply
constructing a new context.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from ngschematics.engine import files
from ngschematics.engine.defaults import MAX_EXTENDS_DEPTH
from ngschematics.engine.settings import Preferences


@dataclass
class WorkspaceContext:
    """Per-workspace-folder facts and caches shared by the resolvers."""

    # -- Identity --------------------------------------------------------------
    root: Path
    name: str = ""
    index: int = 0

    # -- Inputs ----------------------------------------------------------------
    preferences: Preferences = field(default_factory=Preferences)
    max_extends_depth: int = MAX_EXTENDS_DEPTH

    # -- Caches (mutated only by the owning folder's load) ---------------------
    _readable: dict[Path, bool] = field(default_factory=dict, repr=False)
    _packages: dict[str, Path | None] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        self.root = Path(self.root)
        if not self.name:
            self.name = self.root.name

    async def is_readable(self, path: str | Path, *, silent: bool = False) -> bool:
        """Cached readability check.  Failures are only logged the first time."""
        path = Path(path)
        if path not in self._readable:
            self._readable[path] = await files.is_readable(path, silent=silent)
        return self._readable[path]

    async def find_package_json(self, name: str, *, silent: bool = False) -> Path | None:
        """Cached ``node_modules/<name>/package.json`` lookup, from the root upward."""
        if name not in self._packages:
            self._packages[name] = await files.find_package_json(self.root, name, silent=silent)
            logger.debug('Package "{}" resolved to {}', name, self._packages[name])
        return self._packages[name]

    async def has_package(self, name: str) -> bool:
        return await self.find_package_json(name, silent=True) is not None

    def relative_path(self, path: str | Path) -> str | None:
        """Workspace-relative POSIX path, or ``None`` if ``path`` is outside the workspace."""
        try:
            relative = Path(path).resolve().relative_to(self.root.resolve())
        except ValueError:
            return None
        posix = relative.as_posix()
        return "" if posix == "." else posix
