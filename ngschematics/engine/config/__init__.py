"""Workspace configuration readers.

Readers never raise on a missing or malformed file: they log and return an
empty configuration, so a broken lint config cannot prevent generation.
"""

from ngschematics.engine.config.angular import AngularConfig
from ngschematics.engine.config.lint import LintConfig
from ngschematics.engine.config.project import AngularProject

__all__ = ["AngularConfig", "AngularProject", "LintConfig"]
