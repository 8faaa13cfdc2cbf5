"""One Angular project registered in the workspace config."""

from __future__ import annotations

import posixpath
from typing import Any

from loguru import logger
from pydantic import BaseModel, Field

from ngschematics.engine import json_validator as jv
from ngschematics.engine.config.lint import LintConfig
from ngschematics.engine.models.enums import ProjectType


class AngularProject(BaseModel):
    """Paths are POSIX and relative to the workspace folder.

    - root application: root ``""``, source ``src``, app ``src/app``
    - sub-application: root ``projects/hello``, source ``projects/hello/src``, app ``projects/hello/src/app``
    - library: same as a sub-application, but ``projects/hello/src/lib``
    """

    name: str
    type: ProjectType = ProjectType.APPLICATION
    root_path: str = ""
    source_path: str = "src"
    schematics_defaults: dict[str, dict[str, Any]] = Field(default_factory=dict)
    lint: LintConfig = Field(default_factory=LintConfig)

    @classmethod
    def from_json(cls, name: str, raw: Any) -> AngularProject:
        # ``projectType`` is required by the CLI, but not always present
        is_library = jv.as_string(jv.get_path(raw, "projectType")) == ProjectType.LIBRARY
        project_type = ProjectType.LIBRARY if is_library else ProjectType.APPLICATION
        root_path = jv.as_string(jv.get_path(raw, "root")) or ""
        source_path = jv.as_string(jv.get_path(raw, "sourceRoot"))
        if source_path is None:
            source_path = posixpath.join(root_path, "src")

        if not source_path.startswith(root_path):
            logger.error('"root" and "sourceRoot" of "{}" project do not start by the same path.', name)

        return cls(
            name=name,
            type=project_type,
            root_path=root_path,
            source_path=source_path,
            schematics_defaults=parse_schematics_defaults(jv.get_path(raw, "schematics")),
        )

    @property
    def app_or_lib_path(self) -> str:
        """Folder imposed by the Angular CLI inside the source root."""
        return posixpath.join(self.source_path, "lib" if self.type == ProjectType.LIBRARY else "app")

    def has_component_suffix(self, suffix: str) -> bool:
        return self.lint.has_component_suffix(suffix)

    def get_schematics_option_default_value(self, schematic_full_name: str, option_name: str) -> Any:
        return self.schematics_defaults.get(schematic_full_name, {}).get(option_name)


def parse_schematics_defaults(raw: object) -> dict[str, dict[str, Any]]:
    """``{"@schematics/angular:component": {"changeDetection": "OnPush"}}``, invalid blocks dropped."""
    defaults: dict[str, dict[str, Any]] = {}
    for full_name, options in (jv.as_object(raw) or {}).items():
        options = jv.as_object(options)
        if options is not None:
            defaults[full_name] = options
    return defaults
