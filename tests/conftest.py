"""Shared test fixtures: an Angular workspace folder built in ``tmp_path``.

The workspace holds three projects (root application, library,
sub-application), a TSLint config at the root, an ESLint config for the
library and a fake ``node_modules`` with the official collection, Angular
Material (which extends it, with comment lines in its manifest), the Ionic
toolkit (per-schematic ``extends``) and a local collection.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator, Iterator
from pathlib import Path
from typing import Any

import pytest
from loguru import logger

from ngschematics.engine.context import WorkspaceContext
from ngschematics.engine.settings import _get_settings_cached
from ngschematics.engine.workspace import WorkspaceFolder


def write_json(path: Path, data: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def write_package(root: Path, name: str, *, schematics: str | None = None) -> Path:
    """``node_modules/<name>/package.json``, optionally pointing to a collection."""
    package: dict[str, Any] = {"name": name, "version": "1.0.0"}
    if schematics is not None:
        package["schematics"] = schematics
    return write_json(root / "node_modules" / name / "package.json", package)


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

NAME_OPTION = {
    "type": "string",
    "description": "The name of the element.",
    "$default": {"$source": "argv", "index": 0},
    "x-prompt": "What name would you like to use?",
}
PROJECT_OPTION = {"type": "string", "description": "The name of the project.", "$default": {"$source": "projectName"}}
PATH_OPTION = {"type": "string", "format": "path", "description": "The path to create the files.", "visible": False}

COMPONENT_SCHEMA = {
    "$schema": "http://json-schema.org/schema",
    "id": "SchematicsAngularComponent",
    "title": "Angular Component Options Schema",
    "type": "object",
    "properties": {
        "path": PATH_OPTION,
        "project": PROJECT_OPTION,
        "name": NAME_OPTION,
        "changeDetection": {
            "description": "The change detection strategy to use in the new component.",
            "enum": ["Default", "OnPush"],
            "type": "string",
            "default": "Default",
            "alias": "c",
        },
        "export": {"type": "boolean", "default": False, "description": "Export the component."},
        "flat": {"type": "boolean", "default": False, "description": "Create the files at the top level."},
        "type": {"type": "string", "default": "Component", "description": "Adds a developer-defined type."},
        "skipSelector": {"type": "boolean", "default": False, "description": "Specifies if there is no selector."},
        "style": {"enum": ["css", "scss", "sass", "less", "none"], "type": "string", "default": "css"},
        "lintFix": {"type": "boolean", "default": False, "x-deprecated": "Use \"ng lint --fix\" directly."},
        "module": {"type": "string", "description": "The declaring NgModule.", "alias": "m"},
    },
    "required": ["name", "project"],
}

SERVICE_SCHEMA = {
    "type": "object",
    "properties": {
        "name": NAME_OPTION,
        "path": PATH_OPTION,
        "project": PROJECT_OPTION,
        "flat": {"type": "boolean", "default": True, "description": "Create the files at the top level."},
        "skipTests": {"type": "boolean", "default": False, "description": "Do not create test files."},
    },
    "required": ["name"],
}

MODULE_SCHEMA = {
    "type": "object",
    "properties": {
        "name": NAME_OPTION,
        "path": PATH_OPTION,
        "project": PROJECT_OPTION,
        "routing": {"type": "boolean", "default": False, "description": "Create a routing module."},
        "routingScope": {"enum": ["Child", "Root"], "type": "string", "default": "Child"},
        "route": {"type": "string", "description": "The route path for a lazy-loaded module."},
        "flat": {"type": "boolean", "default": False, "description": "Create the files at the top level."},
        "module": {"type": "string", "description": "The declaring NgModule.", "alias": "m"},
    },
    "required": ["name"],
}

GUARD_SCHEMA = {
    "type": "object",
    "properties": {
        "name": NAME_OPTION,
        "path": PATH_OPTION,
        "project": PROJECT_OPTION,
        "flat": {"type": "boolean", "default": True},
        "implements": {
            "type": "array",
            "description": "Specifies which interfaces to implement.",
            "uniqueItems": True,
            "minItems": 1,
            "items": {"enum": ["CanActivate", "CanActivateChild", "CanDeactivate", "CanLoad"], "type": "string"},
            "x-prompt": "Which interfaces would you like to implement?",
        },
    },
    "required": ["name"],
}

INTERFACE_SCHEMA = {
    "type": "object",
    "properties": {
        "name": NAME_OPTION,
        "path": PATH_OPTION,
        "project": PROJECT_OPTION,
        "prefix": {"type": "string", "description": "A prefix to apply to generated selectors."},
        "type": {"type": "string", "description": "Adds a developer-defined type to the filename."},
    },
    "required": ["name"],
}

TABLE_SCHEMA = {
    "type": "object",
    "properties": {
        "name": NAME_OPTION,
        "path": PATH_OPTION,
        "project": PROJECT_OPTION,
        "module": {"type": "string", "description": "Allows specification of the declaring module."},
        "skipTests": {"type": "boolean", "default": False, "description": "Do not create test files."},
        "style": {"enum": ["css", "scss"], "type": "string", "description": "The file extension for styles."},
    },
    "required": ["name"],
}

NAVIGATION_SCHEMA = {
    "type": "object",
    "properties": {"name": NAME_OPTION, "project": PROJECT_OPTION},
    "required": ["name"],
}

PAGE_SCHEMA = {
    "type": "object",
    "properties": {
        "name": NAME_OPTION,
        "path": PATH_OPTION,
        "project": PROJECT_OPTION,
        "routing": {"type": "boolean", "default": True},
    },
    "required": ["name"],
}

FEATURE_SCHEMA = {
    "type": "object",
    "properties": {
        "name": NAME_OPTION,
        "title": {"type": "string", "description": "Title of the feature."},
        "description": {"type": "string", "x-prompt": "Describe the feature"},
        "tags": {
            "type": "array",
            "x-prompt": {"message": "Which tags?", "multiselect": True, "items": ["a", {"value": "b", "label": "B"}]},
        },
    },
    "required": ["title", "name"],
}

MATERIAL_COLLECTION = """{
  // Angular Material schematics
  "$schema": "../../../@angular-devkit/schematics/collection-schema.json",
  "extends": "@schematics/angular",
  "schematics": {
    // Installation
    "ng-add": {
      "description": "Adds Angular Material to the application without affecting any templates",
      "factory": "./ng-add/index",
      "schema": "./ng-add/schema.json"
    },
    "table": {
      "description": "Create a component that displays data with a data-table",
      "factory": "./table/index",
      "schema": "./table/schema.json"
    },
    "navigation": {
      "description": "Create a component with a responsive sidenav for navigation",
      "factory": "./navigation/index",
      "schema": "./navigation/schema.json"
    }
  }
}
"""


def build_angular_workspace(root: Path) -> Path:
    write_json(
        root / "angular.json",
        {
            "version": 1,
            "newProjectRoot": "projects",
            "projects": {
                "my-app": {"projectType": "application", "root": "", "sourceRoot": "src"},
                "my-lib": {"projectType": "library", "root": "projects/my-lib", "sourceRoot": "projects/my-lib/src"},
                "other-app": {
                    "projectType": "application",
                    "root": "projects/other-app",
                    "sourceRoot": "projects/other-app/src",
                    "schematics": {"@schematics/angular:component": {"flat": True}},
                },
            },
        },
    )

    write_json(root / "tslint.json", {"rules": {"component-class-suffix": [True, "Component", "Page", "Dialog"]}})
    write_json(
        root / "projects" / "my-lib" / ".eslintrc.json",
        {
            "overrides": [
                {
                    "files": ["*.ts"],
                    "rules": {
                        "@angular-eslint/component-class-suffix": [
                            "error",
                            {"type": "component", "suffixes": ["Component"]},
                        ]
                    },
                },
                {"files": ["*.html"], "rules": {}},
            ]
        },
    )

    # Official collection
    angular = root / "node_modules" / "@schematics" / "angular"
    write_package(root, "@schematics/angular", schematics="./collection.json")
    write_json(
        angular / "collection.json",
        {
            "schematics": {
                "ng-add": {"schema": "./ng-add/schema.json", "description": "Adds Angular."},
                "component": {"schema": "./component/schema.json", "description": "Create an Angular component."},
                "service": {"schema": "./service/schema.json", "description": "Create an Angular service."},
                "module": {"schema": "./module/schema.json", "description": "Create an Angular module."},
                "guard": {"schema": "./guard/schema.json", "description": "Create a guard."},
                "interface": {"schema": "./interface/schema.json", "description": "Create an interface."},
                "app-shell": {"schema": "./app-shell/schema.json", "hidden": True},
                "e2e": {"schema": "./e2e/schema.json", "private": True},
                "broken": {"description": "Entry with no schema and no extends."},
            }
        },
    )
    write_json(angular / "component" / "schema.json", COMPONENT_SCHEMA)
    write_json(angular / "service" / "schema.json", SERVICE_SCHEMA)
    write_json(angular / "module" / "schema.json", MODULE_SCHEMA)
    write_json(angular / "guard" / "schema.json", GUARD_SCHEMA)
    write_json(angular / "interface" / "schema.json", INTERFACE_SCHEMA)

    # Angular Material, with comments in its manifest
    material = root / "node_modules" / "@angular" / "material"
    write_package(root, "@angular/material", schematics="./schematics/collection.json")
    (material / "schematics").mkdir(parents=True, exist_ok=True)
    (material / "schematics" / "collection.json").write_text(MATERIAL_COLLECTION, encoding="utf-8")
    write_json(material / "schematics" / "table" / "schema.json", TABLE_SCHEMA)
    write_json(material / "schematics" / "navigation" / "schema.json", NAVIGATION_SCHEMA)

    # Ionic toolkit: per-schematic extends
    ionic = root / "node_modules" / "@ionic" / "angular-toolkit"
    write_package(root, "@ionic/angular-toolkit", schematics="./collection.json")
    write_json(
        ionic / "collection.json",
        {
            "schematics": {
                "component": {"extends": "@schematics/angular:component"},
                "page": {"schema": "./page/schema.json", "description": "Create an Ionic page."},
            }
        },
    )
    write_json(ionic / "page" / "schema.json", PAGE_SCHEMA)

    # Local collection
    write_json(
        root / "schematics" / "collection.json",
        {"schematics": {"feature": {"schema": "./feature/schema.json", "description": "Local feature."}}},
    )
    write_json(root / "schematics" / "feature" / "schema.json", FEATURE_SCHEMA)

    # Sources
    (root / "src" / "app").mkdir(parents=True, exist_ok=True)
    (root / "src" / "app" / "app.module.ts").write_text("export class AppModule {}\n", encoding="utf-8")
    (root / "src" / "app" / "app-routing.module.ts").write_text("export class AppRoutingModule {}\n", encoding="utf-8")
    (root / "projects" / "my-lib" / "src" / "lib").mkdir(parents=True, exist_ok=True)

    return root


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clean_settings() -> Iterator[None]:
    """Settings are cached process-wide: start and end every test with a fresh read."""
    _get_settings_cached.cache_clear()
    yield
    _get_settings_cached.cache_clear()


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Messages logged at WARNING level or above during the test."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    return build_angular_workspace((tmp_path / "workspace").resolve())


@pytest.fixture
def context(workspace_root: Path) -> WorkspaceContext:
    return WorkspaceContext(root=workspace_root)


@pytest.fixture
async def workspace(workspace_root: Path) -> AsyncIterator[WorkspaceFolder]:
    """Fully loaded workspace folder."""
    folder = WorkspaceFolder(workspace_root, reload_debounce=0)
    await folder.load()
    yield folder
