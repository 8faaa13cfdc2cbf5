"""Tests for the click command line."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner
from loguru import logger

from ngschematics.cli import main


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """``main`` reconfigures loguru with the runner's stderr, which is closed afterwards."""
    yield
    logger.remove()
    logger.add(sys.stderr)


def _invoke(workspace_root: Path, *args: str, input: str | None = None):
    runner = CliRunner()
    return runner.invoke(main, ["--workspace", str(workspace_root), "--log-level", "CRITICAL", *args], input=input)


@pytest.mark.parametrize(
    ("args", "expected"),
    [
        (["-s", "component", "-n", "hello"], "ng g component hello"),
        (["-s", "component", "-n", "hello", "-p", "my-lib"], "ng g component hello --project my-lib"),
        (["-c", "@angular/material", "-s", "table", "-n", "hello"], "ng g @angular/material:table hello"),
        (
            ["-s", "guard", "-n", "hello", "-o", "implements=CanActivate", "-o", "implements=CanDeactivate"],
            "ng g guard hello --implements CanActivate --implements CanDeactivate",
        ),
        (
            ["-s", "module", "-n", "hello/world", "-o", "module=app", "-o", "route=world"],
            "ng g module hello/world --module app --route world",
        ),
        (["-s", "service", "-n", "hello", "--dry-run"], "ng g service hello --dry-run"),
    ],
)
def test_command(workspace_root: Path, args: list[str], expected: str) -> None:
    result = _invoke(workspace_root, "command", *args)

    assert result.exit_code == 0, result.output
    assert result.output.strip() == expected


def test_command_project_from_context(workspace_root: Path) -> None:
    context = workspace_root / "projects" / "my-lib" / "src" / "lib"

    result = _invoke(workspace_root, "command", "-s", "component", "-n", "hello", "--context", str(context))

    assert result.exit_code == 0, result.output
    assert result.output.strip() == "ng g component hello --project my-lib"


def test_command_unknown_schematic(workspace_root: Path) -> None:
    result = _invoke(workspace_root, "command", "-s", "pipe", "-n", "hello")

    assert result.exit_code == 1
    assert 'Cannot load "@schematics/angular:pipe" schematic.' in result.output


def test_command_invalid_option(workspace_root: Path) -> None:
    result = _invoke(workspace_root, "command", "-s", "component", "-n", "hello", "-o", "flat")

    assert result.exit_code == 2
    assert '"flat" is not a name=value option.' in result.output


def test_command_outside_angular_workspace(tmp_path: Path) -> None:
    result = _invoke(tmp_path, "command", "-s", "component", "-n", "hello")

    assert result.exit_code == 1
    assert "No valid Angular config file found" in result.output


def test_collections(workspace_root: Path) -> None:
    result = _invoke(workspace_root, "collections")

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0] == "@schematics/angular"
    assert "@angular/material" in lines
    assert "./schematics/collection.json" in lines
    assert any(line.startswith("  table") for line in lines)
    assert any(line.startswith("  component (inherited)") for line in lines)


def test_schematic(workspace_root: Path) -> None:
    result = _invoke(workspace_root, "schematic", "./schematics/collection.json", "feature")

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0] == "./schematics/collection.json:feature"
    assert "Name as first argument: yes" in lines
    assert "Required options: title" in lines
    assert " * --title  (required) Title of the feature." in lines
    assert "   --force  Force overwriting of existing files." in lines


def test_schematic_unknown(workspace_root: Path) -> None:
    result = _invoke(workspace_root, "schematic", "@angular/cdk", "drag-drop")

    assert result.exit_code == 1
    assert 'Cannot load "@angular/cdk:drag-drop" schematic.' in result.output


def test_generate_launches_local_cli(workspace_root: Path) -> None:
    binary = workspace_root / "node_modules" / ".bin" / "ng"
    binary.parent.mkdir(parents=True, exist_ok=True)
    binary.write_text('#!/bin/sh\necho "CREATE $*"\n')
    binary.chmod(0o755)

    result = _invoke(
        workspace_root,
        "generate",
        str(workspace_root / "src" / "app"),
        "-c",
        "@schematics/angular",
        "-s",
        "service",
        input="data\n1\n",
    )

    assert result.exit_code == 0, result.output
    assert "CREATE g service data" in result.output


def test_generate_cancelled(workspace_root: Path) -> None:
    result = _invoke(
        workspace_root,
        "generate",
        str(workspace_root / "src" / "app"),
        "-c",
        "@schematics/angular",
        "-s",
        "service",
        input="data\nq\n",
    )

    assert result.exit_code == 1
    assert "CREATE" not in result.output
