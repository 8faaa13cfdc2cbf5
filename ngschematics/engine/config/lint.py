"""Lint config reader -- authorised component class suffixes.

ESLint (``.eslintrc.json``) is preferred over TSLint (``tslint.json``).
Suffixes are lowercased so membership tests match every casing style.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import BaseModel, Field

from ngschematics.engine import files
from ngschematics.engine import json_validator as jv
from ngschematics.engine.defaults import ESLINT_CONFIG_FILENAME, TSLINT_CONFIG_FILENAME
from ngschematics.engine.models.enums import Linter

ESLINT_SUFFIX_RULE = "@angular-eslint/component-class-suffix"
TSLINT_SUFFIX_RULE = "component-class-suffix"


class LintConfig(BaseModel):
    linter: Linter | None = None
    path: Path | None = None
    component_suffixes: list[str] = Field(default_factory=list)

    @classmethod
    async def load(cls, directory: str | Path, *, silent: bool = False) -> LintConfig:
        """Read the lint config of ``directory``, or an empty config when there is none."""
        directory = Path(directory)
        eslint_path = directory / ESLINT_CONFIG_FILENAME
        tslint_path = directory / TSLINT_CONFIG_FILENAME

        if await files.is_readable(eslint_path, silent=True):
            config = cls.from_eslint(await files.parse_json_file(eslint_path, silent=silent))
            config.path = eslint_path
        elif await files.is_readable(tslint_path, silent=True):
            config = cls.from_tslint(await files.parse_json_file(tslint_path, silent=silent))
            config.path = tslint_path
        else:
            logger.debug('No lint configuration found in "{}".', directory)
            return cls()

        if config.component_suffixes:
            logger.info(
                "{} custom component suffix(es) detected in {} config: {}",
                len(config.component_suffixes),
                config.linter,
                ", ".join(config.component_suffixes),
            )
        return config

    @classmethod
    def from_eslint(cls, raw: Any) -> LintConfig:
        """Union the suffixes of every override block targeting TypeScript files.

        Rule shape: ``["error", {"type": "component", "suffixes": ["Component", "Page"]}]``.
        """
        suffixes: list[str] = []
        for override in jv.as_list(jv.get_path(raw, "overrides")) or []:
            file_globs = _as_globs(jv.get_path(override, "files"))
            if not any(glob.endswith(".ts") for glob in file_globs):
                continue
            rule = jv.as_list(jv.get_path(override, "rules", ESLINT_SUFFIX_RULE)) or []
            if len(rule) < 2:
                continue
            suffixes.extend(jv.as_string_list(jv.get_path(rule[1], "suffixes")) or [])
        return cls(linter=Linter.ESLINT, component_suffixes=_normalize(suffixes))

    @classmethod
    def from_tslint(cls, raw: Any) -> LintConfig:
        """Rule shape: missing, ``true`` (Angular CLI default) or ``[true, "Component", "Dialog"]``."""
        rule = jv.as_list(jv.get_path(raw, "rules", TSLINT_SUFFIX_RULE))
        suffixes = jv.as_string_list(rule[1:]) if rule else None
        return cls(linter=Linter.TSLINT, component_suffixes=_normalize(suffixes or []))

    def has_component_suffix(self, suffix: str) -> bool:
        return suffix.lower() in self.component_suffixes


def _as_globs(value: object) -> list[str]:
    single = jv.as_string(value)
    if single is not None:
        return [single]
    return jv.as_string_list(value) or []


def _normalize(suffixes: list[str]) -> list[str]:
    """Lowercase and deduplicate, keeping declaration order."""
    return list(dict.fromkeys(suffix.lower() for suffix in suffixes))
