"""Component types: one-click presets for ``@schematics/angular:component``."""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum
from typing import TYPE_CHECKING

from loguru import logger
from pydantic import ValidationError

from ngschematics.engine.defaults import DEFAULT_COMPONENT_TYPES
from ngschematics.engine.models.shortcut import ComponentType, ShortcutType

if TYPE_CHECKING:
    from ngschematics.engine.context import WorkspaceContext


class ComponentTypeLabel(StrEnum):
    DEFAULT = "Default component"
    PAGE = "Page"
    PURE = "Pure component"
    EXPORTED = "Exported component"


BASE_COMPONENT_TYPES: tuple[ShortcutType, ...] = (
    ShortcutType(
        label=ComponentTypeLabel.DEFAULT,
        detail="Component with no special behavior",
    ),
    ShortcutType(
        label=ComponentTypeLabel.PAGE,
        detail="Component associated to a route",
        options={"type": "page", "skipSelector": "true"},
    ),
    ShortcutType(
        label=ComponentTypeLabel.PURE,
        detail="UI / presentation component, used only in its own feature module",
        options={"changeDetection": "OnPush"},
    ),
    ShortcutType(
        label=ComponentTypeLabel.EXPORTED,
        detail="UI / presentation component, declared in a shared UI module and used in multiple feature modules",
        options={"export": "true", "changeDetection": "OnPush"},
    ),
)


async def build_component_types(context: WorkspaceContext) -> dict[str, ShortcutType]:
    """Base types, then default custom types whose package is installed, then user types."""
    types = {shortcut.label: shortcut.model_copy(deep=True) for shortcut in BASE_COMPONENT_TYPES}
    for custom in await get_custom_component_types(context):
        types[custom.label] = custom.to_shortcut()
    return types


async def get_custom_component_types(context: WorkspaceContext) -> list[ComponentType]:
    custom_types: dict[str, ComponentType] = {}

    for default_type in DEFAULT_COMPONENT_TYPES:
        if default_type.package is None or await context.has_package(default_type.package):
            custom_types[default_type.label] = default_type

    user_types = context.preferences.component_types
    if user_types:
        logger.info("{} custom component type(s) detected in the preferences.", len(user_types))

    for raw in user_types:
        try:
            user_type = ComponentType.model_validate(raw)
        except ValidationError as e:
            logger.warning("Invalid custom component type in preferences, ignored: {}", e.errors()[0]["msg"])
            continue
        if user_type.label in custom_types:
            logger.warning('"{}" component type already exists, replaced.', user_type.label)
        custom_types[user_type.label] = user_type

    return list(custom_types.values())


def filter_component_types(
    types: dict[str, ShortcutType],
    *,
    has_type_option: bool,
    has_component_suffix: Callable[[str], bool],
) -> dict[str, ShortcutType]:
    """Drop the ``type`` option where it would break the generation.

    ``--type`` exists since Angular 9, and the suffix must be authorised by
    the lint config.  Returns copies, the cached types are left untouched.
    """
    filtered: dict[str, ShortcutType] = {}
    for label, shortcut in types.items():
        component_type = shortcut.options.get("type")
        if isinstance(component_type, str) and (not has_type_option or not has_component_suffix(component_type)):
            options = {name: value for name, value in shortcut.options.items() if name != "type"}
            shortcut = shortcut.model_copy(update={"options": options})
        filtered[label] = shortcut
    return filtered
