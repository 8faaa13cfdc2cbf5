"""Angular workspace config reader (``angular.json`` and its legacy names)."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import BaseModel, Field

from ngschematics.engine import files
from ngschematics.engine import json_validator as jv
from ngschematics.engine.config.lint import LintConfig
from ngschematics.engine.config.project import AngularProject, parse_schematics_defaults
from ngschematics.engine.defaults import ANGULAR_COLLECTION_NAME, ANGULAR_CONFIG_FILENAMES


class AngularConfig(BaseModel):
    path: Path | None = None
    projects: dict[str, AngularProject] = Field(default_factory=dict)
    default_user_collection: str = ANGULAR_COLLECTION_NAME
    """``cli.defaultCollection``, otherwise the official Angular collection."""
    root_project_name: str = ""
    schematics_defaults: dict[str, dict[str, Any]] = Field(default_factory=dict)

    @staticmethod
    async def find_config_path(directory: str | Path) -> Path | None:
        """First readable file among the known Angular config file names."""
        for filename in ANGULAR_CONFIG_FILENAMES:
            candidate = Path(directory) / filename
            if await files.is_readable(candidate, silent=True):
                return candidate
        return None

    @classmethod
    async def load(cls, directory: str | Path) -> AngularConfig:
        """Read the workspace config, then each project's lint config.

        A missing file gives an empty config, a malformed one is logged by the
        JSON parser and also gives an empty config.
        """
        directory = Path(directory)
        path = await cls.find_config_path(directory)
        if path is None:
            logger.debug('No Angular config file found in "{}".', directory)
            return cls()

        config = cls.from_json(await files.parse_json_file(path))
        config.path = path

        for project in config.projects.values():
            project.lint = await LintConfig.load(directory / project.root_path, silent=True)

        return config

    @classmethod
    def from_json(cls, raw: Any) -> AngularConfig:
        default_user_collection = jv.as_string(jv.get_path(raw, "cli", "defaultCollection")) or ANGULAR_COLLECTION_NAME
        logger.info("Default schematics collection: {}", default_user_collection)

        projects: dict[str, AngularProject] = {}
        root_project_name = ""
        for name, project_raw in (jv.as_object(jv.get_path(raw, "projects")) or {}).items():
            if jv.as_object(project_raw) is None:
                logger.warning('"{}" project config is not an object, ignored.', name)
                continue
            project = AngularProject.from_json(name, project_raw)
            projects[name] = project
            if not root_project_name and project.root_path == "":
                root_project_name = name
                logger.info('"{}" project is the root Angular project.', name)

        if projects:
            logger.info("{} Angular project(s) detected.", len(projects))
        else:
            logger.warning("No Angular project detected. Check your Angular configuration file.")

        return cls(
            projects=projects,
            default_user_collection=default_user_collection,
            root_project_name=root_project_name,
            schematics_defaults=parse_schematics_defaults(jv.get_path(raw, "schematics")),
        )

    @property
    def default_collections(self) -> list[str]:
        """User default collection and official one, deduplicated."""
        return list(dict.fromkeys([self.default_user_collection, ANGULAR_COLLECTION_NAME]))

    def is_root_project(self, name: str) -> bool:
        return bool(name) and name == self.root_project_name

    def get_schematics_option_default_value(self, schematic_full_name: str, option_name: str) -> Any:
        return self.schematics_defaults.get(schematic_full_name, {}).get(option_name)
