"""Tests for the workspace folder load pipeline and the registry."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from ngschematics.engine.defaults import ANGULAR_COLLECTION_NAME
from ngschematics.engine.registry import WorkspaceNotStableError, WorkspaceRegistry
from ngschematics.engine.shortcuts.module import ModuleTypeLabel
from ngschematics.engine.workspace import WorkspaceFolder

# ---------------------------------------------------------------------------
# Workspace folder
# ---------------------------------------------------------------------------


async def test_load(workspace: WorkspaceFolder, workspace_root: Path) -> None:
    assert workspace.loaded
    assert workspace.name == "workspace"
    assert workspace.get_default_user_collection() == ANGULAR_COLLECTION_NAME
    assert workspace.get_default_collections() == [ANGULAR_COLLECTION_NAME]
    assert workspace.get_angular_projects_names() == ["my-app", "my-lib", "other-app"]
    assert workspace.is_root_project("my-app")
    assert not workspace.is_root_project("my-lib")
    assert workspace.get_angular_project("missing") is None
    assert not workspace.is_cli_local
    assert workspace.collections.get_collections_names() == [
        ANGULAR_COLLECTION_NAME,
        "@angular/material",
        "@ionic/angular-toolkit",
        "./schematics/collection.json",
    ]
    assert ModuleTypeLabel.LAZY in workspace.get_module_types()


async def test_load_without_angular_config(tmp_path: Path) -> None:
    folder = WorkspaceFolder(tmp_path)
    await folder.load()

    assert folder.loaded
    assert folder.get_angular_projects() == {}
    assert len(folder.collections) == 0
    # No route option to detect without the official collection
    assert ModuleTypeLabel.LAZY not in folder.get_module_types()


async def test_schematics_option_default_value(workspace: WorkspaceFolder, workspace_root: Path) -> None:
    component = "@schematics/angular:component"
    assert workspace.get_schematics_option_default_value("other-app", component, "flat") is True
    assert workspace.get_schematics_option_default_value("my-app", component, "flat") is None

    config = json.loads((workspace_root / "angular.json").read_text())
    config["schematics"] = {component: {"flat": False, "style": "scss"}}
    (workspace_root / "angular.json").write_text(json.dumps(config))
    await workspace.load()

    # Project level wins over workspace level
    assert workspace.get_schematics_option_default_value("other-app", component, "flat") is True
    assert workspace.get_schematics_option_default_value("my-app", component, "flat") is False
    assert workspace.get_schematics_option_default_value("my-app", component, "style") == "scss"


async def test_has_component_suffix(workspace: WorkspaceFolder) -> None:
    assert workspace.has_component_suffix("my-app", "Page")
    assert not workspace.has_component_suffix("my-lib", "page")
    assert workspace.has_component_suffix("my-lib", "component")
    assert workspace.has_component_suffix("unknown", "dialog")


async def test_watched_paths(workspace: WorkspaceFolder, workspace_root: Path) -> None:
    assert workspace.watched_paths() == [
        workspace_root / "angular.json",
        workspace_root / "tslint.json",
        workspace_root / "projects" / "my-lib" / ".eslintrc.json",
        workspace_root / "schematics" / "collection.json",
    ]


async def test_find_module_files(workspace: WorkspaceFolder, workspace_root: Path) -> None:
    shared = workspace_root / "src" / "app" / "shared"
    shared.mkdir()
    (shared / "shared.module.ts").write_text("export class SharedModule {}\n")

    modules = await workspace.find_module_files(workspace_root / "src")

    assert modules == ["app/app", "app/shared/shared"]
    assert await workspace.find_module_files(workspace_root / "src", limit=1) == ["app/app"]
    assert await workspace.find_module_files(workspace_root / "projects" / "my-lib" / "src") == []


async def test_reload_picks_up_changes(workspace: WorkspaceFolder, workspace_root: Path) -> None:
    config = json.loads((workspace_root / "angular.json").read_text())
    config["projects"]["new-app"] = {"root": "projects/new-app"}
    (workspace_root / "angular.json").write_text(json.dumps(config))

    await workspace.request_reload()

    assert "new-app" in workspace.get_angular_projects_names()


async def test_reload_is_debounced(workspace_root: Path) -> None:
    folder = WorkspaceFolder(workspace_root, reload_debounce=0.05)

    first = folder.request_reload()
    second = folder.request_reload()
    await second

    assert first.cancelled()
    assert folder.loaded


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


async def test_registry_only_registers_angular_folders(workspace_root: Path, tmp_path: Path) -> None:
    other = tmp_path / "not-angular"
    other.mkdir()
    registry = WorkspaceRegistry()

    assert await registry.add(other) is None
    folder = await registry.add(workspace_root, name="front")

    assert folder is not None
    assert folder.name == "front"
    assert registry.get("front") is folder
    assert registry.all_folders() == [folder]


async def test_registry_load_all_marks_stable(workspace_root: Path) -> None:
    registry = WorkspaceRegistry()
    folder = await registry.add(workspace_root)
    assert not registry.is_stable

    await registry.load_all()

    assert registry.is_stable
    assert folder.loaded
    await registry.wait_until_stable(timeout=0.01)


async def test_registry_wait_until_stable_timeout(workspace_root: Path) -> None:
    registry = WorkspaceRegistry()
    await registry.add(workspace_root)

    with pytest.raises(WorkspaceNotStableError, match="took more than 0.01s"):
        await registry.wait_until_stable(timeout=0.01)


async def test_registry_wait_until_stable_waits_for_load(workspace_root: Path) -> None:
    registry = WorkspaceRegistry()
    await registry.add(workspace_root)

    waiter = asyncio.create_task(registry.wait_until_stable(timeout=5))
    await registry.load_all()
    await waiter

    assert registry.is_stable


async def test_registry_find_for_path(workspace_root: Path) -> None:
    nested_root = workspace_root / "projects" / "nested"
    nested_root.mkdir(parents=True)
    (nested_root / "angular.json").write_text("{}")

    registry = WorkspaceRegistry()
    outer = await registry.add(workspace_root)
    inner = await registry.add(nested_root)

    assert registry.find_for_path(workspace_root / "src" / "app") is outer
    assert registry.find_for_path(workspace_root) is outer
    assert registry.find_for_path(nested_root / "src" / "app" / "a.ts") is inner
    assert registry.find_for_path(workspace_root.parent) is None

    assert registry.remove(inner.name) is inner
    assert registry.find_for_path(nested_root / "src") is outer
    assert registry.remove(inner.name) is None
