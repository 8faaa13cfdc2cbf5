"""Schematic resolver -- normalise a ``schema.json`` into a ``Schematic``.

Every value read from the schema goes through the JSON validator, so a
malformed third-party schema degrades to missing fields instead of
raising.  Only an unreadable or non-object schema is an error.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from loguru import logger

from ngschematics.engine import files
from ngschematics.engine import json_validator as jv
from ngschematics.engine.models.choice import Choice
from ngschematics.engine.models.enums import ChoiceTag, OptionType
from ngschematics.engine.models.schematic import ComputedDefault, PromptHint, Schematic, SchematicOption

FORCE_OPTION = SchematicOption(
    name="force",
    type=OptionType.BOOLEAN,
    description="Force overwriting of existing files.",
    default=False,
)
"""Global option of ``ng generate``, missing from schematics' own schemas."""

EXCLUDED_CHOICES = frozenset({"project"})
"""Options never offered in the interactive list (the project is handled separately)."""


class SchematicLoadError(RuntimeError):
    """A schematic cannot be loaded (schema missing or unparseable)."""

    def __init__(self, full_name: str, reason: str = "schema can not be loaded") -> None:
        super().__init__(f'"{full_name}" schematic loading failed: {reason}.')
        self.full_name = full_name


async def load_schematic(
    *,
    name: str,
    collection_name: str,
    schema_path: Path,
    description: str = "",
) -> Schematic:
    """Load a schematic from its ``schema.json``.  Raises ``SchematicLoadError``."""
    full_name = f"{collection_name}:{name}"
    raw = await files.parse_json_file(schema_path)
    if jv.as_object(raw) is None:
        raise SchematicLoadError(full_name)

    schematic = build_schematic(name=name, collection_name=collection_name, raw=raw, description=description)
    schematic.path = schema_path
    return schematic


def build_schematic(*, name: str, collection_name: str, raw: Any, description: str = "") -> Schematic:
    properties = jv.as_object(jv.get_path(raw, "properties")) or {}

    options: dict[str, SchematicOption] = {}
    for option_name, option_raw in properties.items():
        if jv.as_object(option_raw) is None:
            logger.warning('"{}" option of "{}:{}" is not an object, ignored.', option_name, collection_name, name)
            continue
        options[option_name] = parse_option(option_name, option_raw)
    options.setdefault(FORCE_OPTION.name, FORCE_OPTION.model_copy())

    logger.debug('{} option(s) detected for "{}" schematic: {}', len(options), name, ", ".join(options))

    required_options = _required_options(name, options, jv.as_string_list(jv.get_path(raw, "required")) or [])

    return Schematic(
        name=name,
        collection_name=collection_name,
        description=description or jv.as_string(jv.get_path(raw, "description")) or "",
        options=options,
        required_options=required_options,
        choices=build_option_choices(options, required_options),
    )


def parse_option(name: str, raw: Any) -> SchematicOption:
    """Normalise one entry of a schema's ``properties``."""
    prompt = _parse_prompt(raw.get("x-prompt"))

    items_enum = jv.as_scalar_strings(jv.get_path(raw, "items", "enum"))
    # Angular < 8.3: choices of a multiselect are only declared in the prompt
    if items_enum is None and prompt is not None and prompt.multiselect and prompt.items:
        items_enum = prompt.items

    return SchematicOption(
        name=name,
        type=jv.as_string(raw.get("type")),
        description=jv.as_string(raw.get("description")),
        enum=jv.as_scalar_strings(raw.get("enum")),
        items_enum=items_enum,
        default=raw.get("default"),
        computed_default=_parse_computed_default(raw.get("$default")),
        visible=jv.as_bool(raw.get("visible")) is not False,
        deprecated="x-deprecated" in raw,
        prompt=prompt,
    )


def build_option_choices(options: dict[str, SchematicOption], required_options: list[str]) -> list[Choice]:
    """Sort offered options: required, then suggested (with a prompt), then the others.

    Invisible, deprecated and positional options are not offered, neither is
    ``project``.  Options the CLI computes itself (``$default``) are never
    pre-selected.
    """
    groups: dict[ChoiceTag | None, list[Choice]] = {ChoiceTag.REQUIRED: [], ChoiceTag.SUGGESTED: [], None: []}

    for name, option in options.items():
        if not option.visible or option.deprecated or option.is_first_argument or name in EXCLUDED_CHOICES:
            continue

        tag: ChoiceTag | None = None
        if option.computed_default is None:
            if name in required_options:
                tag = ChoiceTag.REQUIRED
            elif option.prompt is not None:
                tag = ChoiceTag.SUGGESTED

        prefix = f"({tag}) " if tag else ""
        groups[tag].append(
            Choice(label=name, description=f"{prefix}{option.description or ''}", picked=tag is not None, tag=tag)
        )

    return [choice for group in groups.values() for choice in sorted(group, key=_choice_sort_key)]


def _choice_sort_key(choice: Choice) -> tuple[str, str]:
    return choice.label.lower(), choice.label


def _required_options(schematic_name: str, options: dict[str, SchematicOption], declared: list[str]) -> list[str]:
    """Declared ``required`` minus the options the CLI fills itself (``$default``)."""
    required: list[str] = []
    for name in dict.fromkeys(declared):
        option = options.get(name)
        if option is None:
            logger.warning('"{}" is required by "{}" schematic, but is not one of its options.', name, schematic_name)
            continue
        if option.computed_default is None:
            required.append(name)
    return required


def _parse_computed_default(raw: object) -> ComputedDefault | None:
    source = jv.as_string(jv.get_path(raw, "$source"))
    if source is None:
        return None
    index = jv.as_number(jv.get_path(raw, "index"))
    # A fractional index points at no argument
    return ComputedDefault(source=source, index=index if isinstance(index, int) else None)


def _parse_prompt(raw: object) -> PromptHint | None:
    """``x-prompt`` is either a message or ``{message, multiselect, items}``."""
    message = jv.as_string(raw)
    if message is not None:
        return PromptHint(message=message)

    prompt = jv.as_object(raw)
    if prompt is None:
        return None

    items: list[str] = []
    for item in jv.as_list(prompt.get("items")) or []:
        # Items are either values or ``{"value": ..., "label": ...}``
        value = jv.get_path(item, "value") if jv.as_object(item) is not None else item
        value = jv.as_scalar_strings([value])
        if value:
            items.extend(value)

    return PromptHint(
        message=jv.as_string(prompt.get("message")),
        multiselect=jv.as_bool(prompt.get("multiselect")) or False,
        items=items or None,
    )
