"""Built-in tables: known file names, collections and component types."""

from __future__ import annotations

from ngschematics.engine.models.shortcut import ComponentType

ANGULAR_COLLECTION_NAME = "@schematics/angular"
"""Official Angular CLI collection, also the default collection."""

ANGULAR_CONFIG_FILENAMES: tuple[str, ...] = (
    "angular.json",
    ".angular.json",
    "angular-cli.json",
    ".angular-cli.json",
)

ESLINT_CONFIG_FILENAME = ".eslintrc.json"
TSLINT_CONFIG_FILENAME = "tslint.json"

BASE_COMMAND = "ng g"
LOCAL_CLI_BINARY = "./node_modules/.bin/ng"

SPEC_COLLECTION_NAME = "ngx-spec"
"""Its schematic works on a file, not on a directory."""

DEFAULT_COLLECTIONS_NAMES: tuple[str, ...] = (
    "@angular/material",
    "@angular/cdk",
    "@ionic/angular-toolkit",
    "@nrwl/angular",
    "@ngrx/schematics",
    "@ngxs/schematics",
    "@nativescript/schematics",
    "@ngx-formly/schematics",
    "primeng-schematics",
    "@ngx-kit/collection",
    "@ngneat/scam",
    SPEC_COLLECTION_NAME,
    "./schematics/collection.json",
)
"""Third-party collections probed (silently) in every workspace folder."""

MAX_EXTENDS_DEPTH = 8

DEFAULT_COMPONENT_TYPES: tuple[ComponentType, ...] = (
    ComponentType(
        label="Dialog",
        options=[("type", "dialog"), ("skipSelector", "true")],
        package="@angular/material",
        detail="Angular Material dialog",
    ),
    ComponentType(
        label="Snackbar",
        options=[("type", "snackbar"), ("skipSelector", "true")],
        package="@angular/material",
        detail="Angular Material snackbar",
    ),
    ComponentType(
        label="Bottomsheet",
        options=[("type", "bottomsheet"), ("skipSelector", "true")],
        package="@angular/material",
        detail="Angular Material bottomsheet",
    ),
    ComponentType(
        label="Modal",
        options=[("type", "modal"), ("skipSelector", "true")],
        package="@ionic/angular",
        detail="Ionic modal",
    ),
    ComponentType(
        label="Popover",
        options=[("type", "popover"), ("skipSelector", "true")],
        package="@ionic/angular",
        detail="Ionic popover",
    ),
    ComponentType(
        label="Dynamic Dialog",
        options=[("type", "dialog"), ("skipSelector", "true")],
        package="primeng",
        detail="PrimeNG dynamic dialog",
    ),
)
"""Enabled only when their package is installed; ``type`` is kept only if lint config allows the suffix."""
