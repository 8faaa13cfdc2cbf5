from __future__ import annotations

import asyncio
from pathlib import Path

import click

from ngschematics.engine.log import setup_logging
from ngschematics.engine.settings import get_settings


@click.group()
@click.option(
    "--workspace",
    "-w",
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Angular workspace folder (default: current directory).",
)
@click.option("--log-level", default=None, help="Log level (default: from NGSCHEMATICS_LOG_LEVEL or WARNING).")
@click.option(
    "--log-file",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write a debug log to this file (default: from NGSCHEMATICS_LOG_FILE).",
)
@click.pass_context
def main(ctx: click.Context, workspace: Path, log_level: str | None, log_file: Path | None) -> None:
    """ngschematics - Angular CLI generation made interactive."""
    settings = get_settings()
    setup_logging(log_level or settings.log_level, log_file=log_file or settings.log_file)
    ctx.obj = workspace


@main.command()
@click.argument("context_path", required=False, type=click.Path(path_type=Path))
@click.option("--collection", "-c", default=None, help="Collection to use (asked otherwise).")
@click.option("--schematic", "-s", default=None, help="Schematic to generate (asked otherwise).")
@click.pass_obj
def generate(workspace: Path, context_path: Path | None, collection: str | None, schematic: str | None) -> None:
    """Interactively build and launch a generation command.

    CONTEXT_PATH is the file or directory to generate in, it is used to
    detect the Angular project and to prefill the name.
    """
    from ngschematics.engine.generation.journey import UserJourney
    from ngschematics.engine.generation.runner import ShellCommandRunner
    from ngschematics.terminal import ClickPrompter

    settings = get_settings()

    async def _run() -> str | None:
        registry = await _load_registry(workspace)
        journey = UserJourney(registry, ClickPrompter(), ShellCommandRunner(), stable_timeout=settings.stable_timeout)
        return await journey.start(
            context_path.resolve() if context_path else None,
            collection_name=collection,
            schematic_name=schematic,
        )

    if asyncio.run(_run()) is None:
        raise SystemExit(1)


@main.command()
@click.pass_obj
def collections(workspace: Path) -> None:
    """List installed collections and their schematics."""
    folder = asyncio.run(_load_folder(workspace))

    for name in folder.collections.get_collections_names():
        collection = folder.collections.require_collection(name)
        click.secho(name, bold=True)
        for choice in collection.choices:
            inherited = " (inherited)" if choice.tag else ""
            click.echo(f"  {choice.label}{inherited}  {choice.description}".rstrip())


@main.command()
@click.argument("collection_name")
@click.argument("schematic_name")
@click.pass_obj
def schematic(workspace: Path, collection_name: str, schematic_name: str) -> None:
    """Show the options of a schematic, in prompt order."""
    folder = asyncio.run(_load_folder(workspace))

    found = folder.collections.get_schematic(collection_name, schematic_name)
    if found is None:
        raise click.ClickException(f'Cannot load "{collection_name}:{schematic_name}" schematic.')

    click.secho(found.full_name, bold=True)
    if found.description:
        click.echo(found.description)
    click.echo(f"Name as first argument: {'yes' if found.has_name_as_first_arg() else 'no'}")
    if found.required_options:
        click.echo(f"Required options: {', '.join(found.required_options)}")
    for choice in found.choices:
        marker = "*" if choice.picked else " "
        click.echo(f" {marker} --{choice.label}  {choice.description}".rstrip())


@main.command()
@click.option("--collection", "-c", default=None, help="Collection (default: the workspace default collection).")
@click.option("--schematic", "-s", "schematic_name", required=True, help="Schematic name.")
@click.option("--name", "-n", "first_arg", default="", help="Name or path/to/name, first argument of the command.")
@click.option("--project", "-p", default=None, help="Angular project (inferred from --context otherwise).")
@click.option("--context", "context_path", default=None, type=click.Path(path_type=Path), help="Context path.")
@click.option("--option", "-o", "raw_options", multiple=True, help="Option as name=value, repeat for arrays.")
@click.option("--dry-run", is_flag=True, default=False, help="Append --dry-run to the command.")
@click.pass_obj
def command(
    workspace: Path,
    collection: str | None,
    schematic_name: str,
    first_arg: str,
    project: str | None,
    context_path: Path | None,
    raw_options: tuple[str, ...],
    dry_run: bool,
) -> None:
    """Print a generation command without prompting."""
    from ngschematics.engine.generation.command import CliCommand

    folder = asyncio.run(_load_folder(workspace))

    collection_name = collection or folder.get_default_user_collection()
    found = folder.collections.get_schematic(collection_name, schematic_name)
    if found is None:
        raise click.ClickException(f'Cannot load "{collection_name}:{schematic_name}" schematic.')

    cli_command = CliCommand(folder, context_path.resolve() if context_path else None)
    if project is not None:
        cli_command.set_project(project)
    cli_command.set_collection_name(collection_name)
    cli_command.set_schematic(found)
    cli_command.set_name_as_first_arg(first_arg)
    cli_command.add_options(_parse_options(raw_options))

    click.echo(cli_command.get_launch_command(dry_run=dry_run))


def _parse_options(raw_options: tuple[str, ...]) -> list[tuple[str, str | list[str]]]:
    """``name=value`` pairs, a repeated name becomes an array option."""
    options: dict[str, str | list[str]] = {}
    for raw in raw_options:
        name, sep, value = raw.partition("=")
        if not sep or not name:
            raise click.BadParameter(f'"{raw}" is not a name=value option.', param_hint="--option")
        name = name.removeprefix("--")
        if name in options:
            previous = options[name]
            options[name] = [*previous, value] if isinstance(previous, list) else [previous, value]
        else:
            options[name] = value
    return list(options.items())


async def _load_registry(workspace: Path):
    from ngschematics.engine.registry import WorkspaceRegistry

    settings = get_settings()
    registry = WorkspaceRegistry(preferences=settings.preferences(), reload_debounce=settings.reload_debounce)
    await registry.add(workspace)
    await registry.load_all()
    return registry


async def _load_folder(workspace: Path):
    from ngschematics.engine.registry import NoAngularWorkspaceError

    registry = await _load_registry(workspace)
    folder = registry.find_for_path(workspace)
    if folder is None:
        raise click.ClickException(str(NoAngularWorkspaceError(workspace)))
    return folder
