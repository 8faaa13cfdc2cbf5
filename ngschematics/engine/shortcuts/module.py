"""Module types: one-click presets for ``@schematics/angular:module``."""

from __future__ import annotations

from enum import StrEnum

from ngschematics.engine.models.shortcut import ShortcutType


class ModuleTypeLabel(StrEnum):
    DEFAULT = "Module of components"
    LAZY = "Lazy-loaded module of pages"
    ROUTING = "Classic module of pages"


def build_module_types(*, has_lazy_type: bool) -> dict[str, ShortcutType]:
    """``has_lazy_type``: the module schematic has a ``route`` option (Angular >= 8.1)."""
    types = [ShortcutType(label=ModuleTypeLabel.DEFAULT, detail="Module of UI / presentation components")]
    if has_lazy_type:
        # ``route`` is added once the first argument is known
        types.append(
            ShortcutType(
                label=ModuleTypeLabel.LAZY,
                detail="Module with routing, lazy-loaded",
                options={"module": "app"},
            )
        )
    types.append(
        ShortcutType(
            label=ModuleTypeLabel.ROUTING,
            detail="Module with routing, immediately loaded",
            options={"module": "app", "routing": "true"},
        )
    )
    return {shortcut.label: shortcut for shortcut in types}


def with_lazy_route(types: dict[str, ShortcutType], route: str) -> dict[str, ShortcutType]:
    """Copy of ``types`` where the lazy-loaded type also sets ``--route``."""
    result = dict(types)
    lazy = types.get(ModuleTypeLabel.LAZY)
    if lazy is not None and route:
        result[ModuleTypeLabel.LAZY] = lazy.model_copy(update={"options": {**lazy.options, "route": route}})
    return result
