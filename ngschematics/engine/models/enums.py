"""Shared enumerations used across the engine."""

from __future__ import annotations

from enum import StrEnum

# -- Angular config ------------------------------------------------------------


class ProjectType(StrEnum):
    """``projectType`` of an ``angular.json`` project."""

    APPLICATION = "application"
    LIBRARY = "library"


class Linter(StrEnum):
    ESLINT = "eslint"
    TSLINT = "tslint"


# -- Schematics ----------------------------------------------------------------


class OptionType(StrEnum):
    """JSON schema ``type`` of a schematic option."""

    STRING = "string"
    BOOLEAN = "boolean"
    ARRAY = "array"
    NUMBER = "number"
    INTEGER = "integer"


class DefaultSource(StrEnum):
    """``$default.$source``: value computed by the Angular CLI itself."""

    ARGV = "argv"
    PROJECT_NAME = "projectName"


class ChoiceTag(StrEnum):
    """Why a choice is pre-selected in a prompt."""

    REQUIRED = "required"
    SUGGESTED = "suggested"
    INHERITED = "inherited"
