"""Interactive generation flow.

Asks, in order: workspace folder, project, collection, schematic, source
path (only when unknown), first argument, shortcut type (component,
service and module of the official collection), options and final
confirmation, then hands the command to a ``CommandRunner``.

Every prompt may be cancelled (the ``Prompter`` returns ``None``): the
flow then stops silently, nothing is launched.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from loguru import logger

from ngschematics.engine.defaults import ANGULAR_COLLECTION_NAME
from ngschematics.engine.generation.command import CliCommand
from ngschematics.engine.generation.options import CliCommandOptions, OptionValue, dasherize
from ngschematics.engine.generation.runner import CommandFailedError
from ngschematics.engine.models.choice import Choice
from ngschematics.engine.registry import NoAngularWorkspaceError, WorkspaceNotStableError
from ngschematics.engine.schematics.collection import CollectionNotFoundError
from ngschematics.engine.shortcuts.module import with_lazy_route

if TYPE_CHECKING:
    from ngschematics.engine.generation.runner import CommandRunner
    from ngschematics.engine.models.collection import Collection
    from ngschematics.engine.models.schematic import Schematic, SchematicOption
    from ngschematics.engine.models.shortcut import ShortcutType
    from ngschematics.engine.registry import WorkspaceRegistry
    from ngschematics.engine.workspace import WorkspaceFolder

SHORTCUT_SCHEMATICS = frozenset({"component", "service", "module"})

CONFIRM_LABEL = "Confirm"
MORE_OPTIONS_LABEL = "Add more options"
TEST_LABEL = "Test"
CANCEL_LABEL = "Cancel"
NOWHERE_LABEL = "Nowhere"
CONFIRM_DESCRIPTION = "Pro-tip: take a minute to check the command above is really what you want"

SHORTCUT_CONFIRMATION_CHOICES: tuple[Choice, ...] = (
    Choice(label=CONFIRM_LABEL, description=CONFIRM_DESCRIPTION),
    Choice(
        label=MORE_OPTIONS_LABEL,
        description='Pro-tip: you can set default values to "schematics" options in angular.json',
    ),
    Choice(label=CANCEL_LABEL),
)

CONFIRMATION_CHOICES: tuple[Choice, ...] = (
    Choice(label=CONFIRM_LABEL, description=CONFIRM_DESCRIPTION),
    Choice(label=TEST_LABEL, description="Simulate the command with --dry-run"),
    Choice(label=CANCEL_LABEL),
)


class Prompter(Protocol):
    """User interface collaborator.  ``None`` means the user cancelled."""

    async def ask_choice(self, items: list[Choice], placeholder: str) -> Choice | None: ...

    async def ask_multi_choice(self, items: list[Choice], placeholder: str) -> list[Choice] | None: ...

    async def ask_text(self, prompt: str, prefill: str = "") -> str | None: ...

    def notify_error(self, message: str) -> None: ...

    def notify_info(self, message: str) -> None: ...


class JourneyCancelledError(Exception):
    """The user cancelled a prompt."""

    def __init__(self, step: str) -> None:
        super().__init__(f"You have canceled the {step}.")
        self.step = step


class UserJourney:
    def __init__(
        self,
        registry: WorkspaceRegistry,
        prompter: Prompter,
        runner: CommandRunner,
        *,
        stable_timeout: float | None = 10.0,
    ) -> None:
        self.registry = registry
        self.prompter = prompter
        self.runner = runner
        self.stable_timeout = stable_timeout

    async def start(
        self,
        context_path: str | Path | None = None,
        collection_name: str | None = None,
        schematic_name: str | None = None,
    ) -> str | None:
        """Run the whole flow.  Returns the launched command, or ``None`` if nothing was launched."""
        try:
            await self.registry.wait_until_stable(self.stable_timeout)
        except WorkspaceNotStableError as e:
            self.prompter.notify_error(f"{e}. Check the logs for errors.")
            return None

        try:
            return await self._generate(context_path, collection_name, schematic_name)
        except JourneyCancelledError as e:
            logger.info(str(e))
            return None
        except (NoAngularWorkspaceError, CollectionNotFoundError) as e:
            logger.error(str(e))
            self.prompter.notify_error(str(e))
            return None

    async def _generate(
        self,
        context_path: str | Path | None,
        collection_name: str | None,
        schematic_name: str | None,
    ) -> str | None:
        folder = _required(await self._ask_folder(context_path), "workspace folder choice")
        logger.info('Workspace folder selected: "{}"', folder.name)

        command = CliCommand(folder, context_path)

        if not command.project and folder.get_angular_projects():
            command.set_project(_required(await self._ask_project_name(folder), "Angular project choice"))
        if command.project:
            logger.info('Angular project used: "{}"', command.project)

        if not collection_name:
            collection_name = _required(await self._ask_collection_name(folder), "collection choice")
        collection = folder.collections.require_collection(collection_name)
        command.set_collection_name(collection_name)
        logger.info('Collection used: "{}"', collection_name)

        if not schematic_name:
            schematic_name = _required(await self._ask_schematic_name(collection), "schematic choice")
        schematic = collection.get_schematic(schematic_name)
        if schematic is None:
            message = f'Cannot load "{collection_name}:{schematic_name}" schematic. See logs for errors.'
            self.prompter.notify_error(message)
            return None
        command.set_schematic(schematic)
        logger.info('Schematic used: "{}"', schematic.full_name)

        # Project can only be validated once the schematic is known
        if not command.validate_project():
            source_path = _required(await self._ask_source_path(), "source path choice")
            command.add_options([("path", source_path)])

        if schematic.has_name_as_first_arg():
            first_arg = await self._ask_name_as_first_arg(command, schematic)
            command.set_name_as_first_arg(_required(first_arg, "name input"))

        confirmed = False
        if collection_name == ANGULAR_COLLECTION_NAME and schematic_name in SHORTCUT_SCHEMATICS:
            await self._apply_shortcut(folder, command, schematic_name)
            confirmed = _required(await self._ask_shortcut_confirmation(command), "generation")

        if not confirmed:
            command.add_options(await self._ask_options(schematic))
            if not await self._ask_confirmation(folder, command):
                raise JourneyCancelledError("generation")

        return await self._launch(folder, command)

    # -- Launch ----------------------------------------------------------------

    async def _launch(self, folder: WorkspaceFolder, command: CliCommand, *, dry_run: bool = False) -> str | None:
        launch_command = command.get_launch_command(dry_run=dry_run)
        try:
            output = await self.runner.run(launch_command, folder.root)
        except CommandFailedError as e:
            self.prompter.notify_error("\n".join(part for part in (str(e), e.stdout, e.stderr) if part))
            return None

        self.prompter.notify_info(output or f"Command launched: {launch_command}")

        if not dry_run:
            generated = command.guess_generated_file_path()
            if generated is not None and generated.exists():
                logger.info("Command has succeeded, generated file: {}", generated)
                self.prompter.notify_info(f"Generated: {generated}")
        return launch_command

    # -- Prompts ---------------------------------------------------------------

    async def _ask_folder(self, context_path: str | Path | None) -> WorkspaceFolder | None:
        if context_path:
            folder = self.registry.find_for_path(context_path)
            if folder is None:
                raise NoAngularWorkspaceError(context_path)
            return folder

        folders = self.registry.all_folders()
        if not folders:
            raise NoAngularWorkspaceError
        if len(folders) == 1:
            return folders[0]

        choice = await self.prompter.ask_choice(
            [Choice(label=folder.name, description=str(folder.root)) for folder in folders],
            "Which workspace folder do you want to generate in?",
        )
        return self.registry.get(choice.label) if choice else None

    async def _ask_project_name(self, folder: WorkspaceFolder) -> str | None:
        projects = folder.get_angular_projects()
        if len(projects) == 1:
            return next(iter(projects))

        choices: list[Choice] = []
        for name, project in projects.items():
            root = "root " if folder.is_root_project(name) else ""
            description = f"{root}{project.type} in {project.app_or_lib_path}"
            choices.append(Choice(label=name, description=description[:1].upper() + description[1:]))

        choice = await self.prompter.ask_choice(choices, "In which of your Angular projects do you want to generate?")
        return choice.label if choice else None

    async def _ask_collection_name(self, folder: WorkspaceFolder) -> str | None:
        names = folder.collections.get_collections_names()
        if not names:
            raise CollectionNotFoundError(ANGULAR_COLLECTION_NAME)
        if len(names) == 1:
            logger.info('Only collection detected: "{}". Default to it.', names[0])
            return names[0]

        choice = await self.prompter.ask_choice(
            [Choice(label=name) for name in names], "What schematics collection do you want to use?"
        )
        return choice.label if choice else None

    async def _ask_schematic_name(self, collection: Collection) -> str | None:
        choice = await self.prompter.ask_choice(list(collection.choices), "What schematics do you want to generate?")
        return choice.label if choice else None

    async def _ask_source_path(self) -> str | None:
        return await self.prompter.ask_text(
            'What is the source path? (the project can be detected with a correct "angular.json")', "src/app"
        )

    async def _ask_name_as_first_arg(self, command: CliCommand, schematic: Schematic) -> str | None:
        context = command.get_context_for_name_as_first_arg()
        logger.debug('Context path detected for default argument: "{}"', context)

        prompt = f"Choose the name{' or path/to/name' if schematic.has_option('path') else ''}."
        value = await self.prompter.ask_text(prompt, context)
        if not value:
            return None

        # The CLI already adds the ``.component`` like suffix
        return value.removesuffix(f".{schematic.name}") or None

    async def _apply_shortcut(self, folder: WorkspaceFolder, command: CliCommand, schematic_name: str) -> None:
        if schematic_name == "component":
            types = folder.get_component_types(command.project)
            shortcut = await self._ask_shortcut_type(types, "What type of component do you want?")
            command.add_options(_required(shortcut, "component type choice").options)

        elif schematic_name == "module":
            types = with_lazy_route(folder.get_module_types(), command.get_route_from_first_arg())
            shortcut = _required(
                await self._ask_shortcut_type(types, "What type of module do you want?"), "module type choice"
            )
            command.add_options(shortcut.options)

            # A module should be imported somewhere
            if "module" not in shortcut.options:
                where = await self._ask_where_to_import_module(folder, command)
                if where:
                    command.add_options([("module", where)])

    async def _ask_shortcut_type(self, types: dict[str, ShortcutType], placeholder: str) -> ShortcutType | None:
        choice = await self.prompter.ask_choice([shortcut.choice for shortcut in types.values()], placeholder)
        return types.get(choice.label) if choice else None

    async def _ask_where_to_import_module(self, folder: WorkspaceFolder, command: CliCommand) -> str | None:
        modules = await folder.find_module_files(command.get_project_source_path())
        if not modules:
            return None

        choices = [Choice(label=NOWHERE_LABEL), *(Choice(label=module) for module in modules)]
        choice = await self.prompter.ask_choice(choices, "Where do you want to import the module?")
        choice = _required(choice, "module import choice")
        return choice.label if choice.label != NOWHERE_LABEL else None

    async def _ask_shortcut_confirmation(self, command: CliCommand) -> bool | None:
        """``True`` to launch, ``False`` to add more options, ``None`` to cancel."""
        choice = await self.prompter.ask_choice(list(SHORTCUT_CONFIRMATION_CHOICES), command.get_command())
        if choice is None or choice.label == CANCEL_LABEL:
            return None
        return choice.label == CONFIRM_LABEL

    async def _ask_options(self, schematic: Schematic) -> CliCommandOptions:
        if schematic.choices:
            selected = await self.prompter.ask_multi_choice(
                list(schematic.choices), "Do you need some options? (if not, just press Enter to skip this step)"
            )
            names = [choice.label for choice in _required(selected, "options choice")]
        else:
            names = []

        # Required options are always asked, otherwise the schematic would fail
        options = {**schematic.get_required_options(), **schematic.get_some_options(names)}

        filled: CliCommandOptions = {}
        for name, option in options.items():
            value = _required(await self._ask_option_value(option), f'"--{dasherize(name)}" value input')
            if value:
                filled[name] = value
        return filled

    async def _ask_option_value(self, option: SchematicOption) -> OptionValue | None:
        label = f"--{dasherize(option.name)}: {option.prompt_message}"

        if option.enum is not None:
            return await self._ask_single(option.enum, label)

        if option.is_boolean:
            # Default value first
            values = ["false", "true"] if option.default is False else ["true", "false"]
            return await self._ask_single(values, label)

        if option.is_array and option.items_enum:
            selected = await self.prompter.ask_multi_choice([Choice(label=item) for item in option.items_enum], label)
            return [choice.label for choice in selected] if selected is not None else None

        return await self.prompter.ask_text(label)

    async def _ask_single(self, values: list[str], placeholder: str) -> str | None:
        choice = await self.prompter.ask_choice([Choice(label=value) for value in values], placeholder)
        return choice.label if choice else None

    async def _ask_confirmation(self, folder: WorkspaceFolder, command: CliCommand) -> bool:
        """Final confirmation.  "Test" runs a dry run, then asks again."""
        while True:
            choice = await self.prompter.ask_choice(list(CONFIRMATION_CHOICES), command.get_command())
            if choice is None or choice.label != TEST_LABEL:
                return choice is not None and choice.label == CONFIRM_LABEL
            await self._launch(folder, command, dry_run=True)


def _required[T](value: T | None, step: str) -> T:
    """Unwrap a prompt answer, or stop the journey if the user cancelled."""
    if value is None:
        raise JourneyCancelledError(step)
    return value
