"""Command builder -- synthesise the shortest correct ``ng g`` invocation.

State is only accumulated (project, collection, schematic, first argument,
options), then rendered by ``get_command``.  Rendering is a pure function
of that state, see ``format_command``.
"""

from __future__ import annotations

import posixpath
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger

from ngschematics.engine import files
from ngschematics.engine.defaults import (
    ANGULAR_COLLECTION_NAME,
    BASE_COMMAND,
    LOCAL_CLI_BINARY,
    SPEC_COLLECTION_NAME,
)
from ngschematics.engine.generation.options import CliCommandOptions, OptionValue, format_cli_command_options_list

if TYPE_CHECKING:
    from ngschematics.engine.models.schematic import Schematic
    from ngschematics.engine.workspace import WorkspaceFolder

DEFAULT_APP_PATH = "src/app"
UNSUFFIXED_SCHEMATICS = frozenset({"interface", "class"})
"""Schematics whose generated file has no ``.<schematic>`` suffix."""


def format_schematic_name(collection_name: str, schematic_name: str, default_collection: str) -> str:
    """``component`` in the default collection, ``@angular/material:table`` otherwise."""
    if collection_name == default_collection:
        return schematic_name
    return f"{collection_name}:{schematic_name}"


def format_command(
    *,
    collection_name: str,
    default_collection: str,
    schematic_name: str,
    first_arg: str = "",
    options: Mapping[str, OptionValue] | Iterable[tuple[str, OptionValue]] = (),
    base_command: str = BASE_COMMAND,
) -> str:
    """Render a command.  Tokens are not quoted, empty tokens are omitted."""
    tokens = [
        base_command,
        format_schematic_name(collection_name, schematic_name, default_collection),
        first_arg,
        *format_cli_command_options_list(options),
    ]
    return " ".join(token for token in tokens if token)


def infer_project(
    relative_path: str, source_paths: Mapping[str, str], app_paths: Mapping[str, str]
) -> tuple[str, str]:
    """Map a workspace-relative path to ``(project name, path inside the app or lib folder)``.

    The project whose source path is the longest prefix of ``relative_path``,
    on path segment boundaries, wins.  No match gives ``("", "")``.

    The Angular CLI roots names under ``<sourceRoot>/app`` (or ``/lib``), so
    the returned path is relative to that folder, and empty above it.
    """
    best_name = ""
    best_source = ""
    for name, source_path in source_paths.items():
        source_path = source_path.strip("/")
        if not source_path:
            continue
        if relative_path == source_path or relative_path.startswith(f"{source_path}/"):
            if len(source_path) > len(best_source):
                best_name, best_source = name, source_path

    if not best_name:
        return "", ""

    app_path = app_paths.get(best_name, best_source).strip("/")
    if not relative_path.startswith(f"{app_path}/"):
        return best_name, ""
    return best_name, relative_path[len(app_path) + 1 :]


@dataclass
class ContextPath:
    """Path details of the file or directory the generation was launched from."""

    full: str = ""
    """Eg. ``/home/elmo/angular-project/src/app/some-module``"""
    relative_to_workspace: str = ""
    """Eg. ``src/app/some-module``"""
    relative_to_source: str = ""
    """Eg. ``some-module``, relative to the project's app or lib folder"""


class CliCommand:
    """One generation command, built step by step by the user journey."""

    def __init__(self, workspace: WorkspaceFolder, context_path: str | Path | None = None) -> None:
        self.workspace = workspace
        self.context_path = ContextPath()
        self.base_command = BASE_COMMAND
        self.project = ""
        self.collection_name = ANGULAR_COLLECTION_NAME
        self.schematic_name = ""
        self.schematic: Schematic | None = None
        self.first_arg = ""
        self.options: CliCommandOptions = {}

        self._set_context_path_and_project(context_path)

    # -- Rendering -------------------------------------------------------------

    def get_command(self) -> str:
        """Full generation command, in the shortest form possible."""
        return format_command(
            collection_name=self.collection_name,
            default_collection=self.workspace.get_default_user_collection(),
            schematic_name=self.schematic_name,
            first_arg=self.first_arg,
            options=self.options,
            base_command=self.base_command,
        )

    def get_launch_command(self, *, dry_run: bool = False) -> str:
        """Command actually sent to the shell: local binary when installed, optional ``--dry-run``."""
        command = self.get_command()
        if self.workspace.is_cli_local and command.startswith("ng "):
            command = f'"{LOCAL_CLI_BINARY}"{command[2:]}'
        if dry_run:
            command = f"{command} --dry-run"
        return command

    # -- Accumulation ----------------------------------------------------------

    def set_project(self, name: str) -> None:
        self.project = name

    def set_collection_name(self, name: str) -> None:
        self.collection_name = name

    def set_schematic(self, schematic: Schematic) -> None:
        """Set the schematic, and the ``project`` option when relevant.

        The root project is omitted for brevity, the CLI defaults to it.
        """
        self.schematic = schematic
        self.schematic_name = schematic.name

        if self.project and schematic.has_option("project") and not self.workspace.is_root_project(self.project):
            self.options["project"] = self.project

    def set_name_as_first_arg(self, path_to_name: str) -> None:
        self.first_arg = path_to_name

    def add_options(self, options: Mapping[str, OptionValue] | Iterable[tuple[str, OptionValue]]) -> None:
        """Add options, ignoring the ones the schematic does not know."""
        pairs = options.items() if isinstance(options, Mapping) else options
        for name, value in pairs:
            if self.schematic is not None and not self.schematic.has_option(name):
                logger.warning('"--{}" option has been chosen but does not exist in this schematic, ignored.', name)
                continue
            self.options[name] = list(value) if isinstance(value, list) else value

    def validate_project(self) -> bool:
        """``False`` when the target folder is unknown: no project, but a ``path`` option to fill."""
        if self.project:
            return True
        return self.schematic is None or not self.schematic.has_option("path")

    # -- Context ---------------------------------------------------------------

    def get_context_for_name_as_first_arg(self) -> str:
        """Prefill of the first argument, with a trailing slash so the name can be typed directly."""
        # ``ngx-spec`` works on a file, so keep the file part
        if self.collection_name == SPEC_COLLECTION_NAME:
            return self.context_path.relative_to_source
        # Eg. ``application`` and ``library`` are not generated inside a folder
        if self.schematic is not None and not self.schematic.has_option("path"):
            return ""

        context = files.remove_filename(self.context_path.relative_to_source)
        return f"{context}/" if context not in ("", ".") else ""

    def get_route_from_first_arg(self) -> str:
        """Route of a lazy-loaded module: last segment of the first argument."""
        return posixpath.basename(self.first_arg.rstrip("/"))

    def get_project_source_path(self) -> Path:
        project = self.workspace.get_angular_project(self.project)
        return self.workspace.root / (project.source_path if project is not None else "src")

    def guess_generated_file_path(self) -> Path | None:
        """Where the main generated file should land, or ``None`` without a first argument."""
        if not self.first_arg:
            return None

        project = self.workspace.get_angular_project(self.project)
        base_path = self.workspace.root / (project.app_or_lib_path if project is not None else DEFAULT_APP_PATH)

        name = posixpath.basename(self.first_arg.rstrip("/"))
        suffix = self._generated_file_suffix()
        filename = f"{name}.{suffix}.ts" if suffix else f"{name}.ts"

        directory = base_path / self.first_arg.rstrip("/")
        if self._is_flat():
            directory = directory.parent
        return directory / filename

    # -- Internals -------------------------------------------------------------

    def _generated_file_suffix(self) -> str:
        if self.schematic_name in UNSUFFIXED_SCHEMATICS:
            return ""
        component_type = self.options.get("type")
        if self.schematic_name == "component" and isinstance(component_type, str) and component_type:
            return component_type
        return self.schematic_name

    def _is_flat(self) -> bool:
        """Effective ``flat``: command option, then Angular config, then schema default."""
        value: Any = self.options.get("flat")
        if value is None:
            value = self.workspace.get_schematics_option_default_value(
                self.project, f"{self.collection_name}:{self.schematic_name}", "flat"
            )
        if value is None and self.schematic is not None:
            if not self.schematic.has_option("flat"):
                return True
            value = self.schematic.get_option_default_value("flat")
        return value is True or value == "true"

    def _set_context_path_and_project(self, context_path: str | Path | None) -> None:
        if not context_path:
            logger.debug("No context path detected.")
            return

        self.context_path.full = str(context_path)
        relative = self.workspace.context.relative_path(context_path)
        if relative is None:
            logger.info('Context path "{}" is outside the workspace folder.', context_path)
            return
        self.context_path.relative_to_workspace = relative

        projects = self.workspace.get_angular_projects()
        self.project, self.context_path.relative_to_source = infer_project(
            relative,
            {name: project.source_path for name, project in projects.items()},
            {name: project.app_or_lib_path for name, project in projects.items()},
        )

        if self.project:
            logger.info('Angular project detected from context path: "{}"', self.project)
        else:
            logger.info("No Angular project detected from context path.")
