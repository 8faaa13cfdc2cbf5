"""Workspace folder -- one Angular workspace and everything loaded from it.

The load pipeline is strictly sequential, each stage seeding the next::

    Angular config -> projects (+ their lint configs) -> workspace lint config
        -> collections -> component and module shortcuts

A reload runs the same pipeline on a fresh ``WorkspaceContext`` and swaps
the new state in only once it completed, so readers never observe a
half-loaded folder and the last completed load wins.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from anyio import to_thread
from loguru import logger

from ngschematics.engine.config.angular import AngularConfig
from ngschematics.engine.config.lint import LintConfig
from ngschematics.engine.config.project import AngularProject
from ngschematics.engine.context import WorkspaceContext
from ngschematics.engine.defaults import ANGULAR_COLLECTION_NAME, LOCAL_CLI_BINARY
from ngschematics.engine.models.shortcut import ShortcutType
from ngschematics.engine.schematics.collections import Collections
from ngschematics.engine.settings import Preferences
from ngschematics.engine.shortcuts.component import build_component_types, filter_component_types
from ngschematics.engine.shortcuts.module import build_module_types


class WorkspaceFolder:
    def __init__(
        self,
        root: str | Path,
        *,
        name: str = "",
        index: int = 0,
        preferences: Preferences | None = None,
        reload_debounce: float = 0.3,
    ) -> None:
        self.root = Path(root).resolve()
        self.name = name or self.root.name
        self.index = index
        self.preferences = preferences or Preferences()
        self.reload_debounce = reload_debounce

        self.context = WorkspaceContext(root=self.root, name=self.name, index=index, preferences=self.preferences)
        self.angular_config = AngularConfig()
        self.lint_config = LintConfig()
        self.collections = Collections()
        self.is_cli_local = False
        self.loaded = False

        self._component_types: dict[str, ShortcutType] = {}
        self._module_types: dict[str, ShortcutType] = {}
        self._reload_task: asyncio.Task[None] | None = None

    # -- Loading ---------------------------------------------------------------

    async def load(self) -> None:
        """Run the full load pipeline, then swap the result in."""
        logger.info('Loading "{}" workspace folder configuration.', self.name)
        context = WorkspaceContext(root=self.root, name=self.name, index=self.index, preferences=self.preferences)

        angular_config = await AngularConfig.load(self.root)
        lint_config = await LintConfig.load(self.root)

        collections = Collections()
        await collections.load(context, angular_config.default_collections)

        component_types = await build_component_types(context)

        module_schematic = collections.get_schematic(ANGULAR_COLLECTION_NAME, "module")
        has_lazy_type = module_schematic is not None and module_schematic.has_option("route")
        logger.debug("Lazy-loaded module type: {}", "enabled" if has_lazy_type else "disabled")
        module_types = build_module_types(has_lazy_type=has_lazy_type)

        is_cli_local = await context.is_readable(self.root / LOCAL_CLI_BINARY, silent=True)

        self.context = context
        self.angular_config = angular_config
        self.lint_config = lint_config
        self.collections = collections
        self._component_types = component_types
        self._module_types = module_types
        self.is_cli_local = is_cli_local
        self.loaded = True

        logger.info('"{}" workspace folder configuration loaded.', self.name)

    def request_reload(self) -> asyncio.Task[None]:
        """Schedule a reload after the debounce delay, replacing a pending one.

        Must be called from a running event loop (file watcher callbacks).
        """
        if self._reload_task is not None and not self._reload_task.done():
            self._reload_task.cancel()
        self._reload_task = asyncio.get_running_loop().create_task(self._debounced_reload())
        return self._reload_task

    async def _debounced_reload(self) -> None:
        await asyncio.sleep(self.reload_debounce)
        logger.info('Reloading "{}" workspace folder configuration.', self.name)
        await self.load()

    def watched_paths(self) -> list[Path]:
        """Files whose change should trigger ``request_reload``."""
        paths: list[Path | None] = [self.angular_config.path, self.lint_config.path]
        paths.extend(project.lint.path for project in self.angular_config.projects.values())
        paths.extend(collection.path for collection in self.collections.local_collections())
        return list(dict.fromkeys(path for path in paths if path is not None))

    # -- Angular config --------------------------------------------------------

    def get_default_user_collection(self) -> str:
        return self.angular_config.default_user_collection

    def get_default_collections(self) -> list[str]:
        return self.angular_config.default_collections

    def get_angular_project(self, name: str) -> AngularProject | None:
        return self.angular_config.projects.get(name)

    def get_angular_projects(self) -> dict[str, AngularProject]:
        return self.angular_config.projects

    def get_angular_projects_names(self) -> list[str]:
        return list(self.angular_config.projects)

    def is_root_project(self, name: str) -> bool:
        return self.angular_config.is_root_project(name)

    def get_schematics_option_default_value(self, project_name: str, schematic_full_name: str, option_name: str) -> Any:
        """Project level default first, then workspace level."""
        project = self.get_angular_project(project_name)
        value = project.get_schematics_option_default_value(schematic_full_name, option_name) if project else None
        if value is None:
            value = self.angular_config.get_schematics_option_default_value(schematic_full_name, option_name)
        return value

    def has_component_suffix(self, project_name: str, suffix: str) -> bool:
        """Project lint config first when it declares suffixes, then workspace lint config."""
        project = self.get_angular_project(project_name)
        if project is not None and project.lint.component_suffixes:
            return project.has_component_suffix(suffix)
        return self.lint_config.has_component_suffix(suffix)

    # -- Shortcuts -------------------------------------------------------------

    def get_component_types(self, project_name: str) -> dict[str, ShortcutType]:
        component_schematic = self.collections.get_schematic(ANGULAR_COLLECTION_NAME, "component")
        return filter_component_types(
            self._component_types,
            has_type_option=component_schematic is not None and component_schematic.has_option("type"),
            has_component_suffix=lambda suffix: self.has_component_suffix(project_name, suffix),
        )

    def get_module_types(self) -> dict[str, ShortcutType]:
        return dict(self._module_types)

    # -- Files -----------------------------------------------------------------

    async def find_module_files(self, source_path: Path, *, limit: int = 50) -> list[str]:
        """Existing modules of a project, as ``source_path``-relative paths without ``.module.ts``."""
        return await to_thread.run_sync(_find_module_files, source_path, limit)


def _find_module_files(source_path: Path, limit: int) -> list[str]:
    modules: list[str] = []
    for path in sorted(source_path.rglob("*.module.ts")):
        if "-routing" in path.name or "node_modules" in path.parts:
            continue
        modules.append(path.relative_to(source_path).as_posix().removesuffix(".module.ts"))
        if len(modules) >= limit:
            break
    return modules
