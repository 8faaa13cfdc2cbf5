"""Option formatting shared by the command builder and the shortcut tables."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

OptionValue = str | list[str]
CliCommandOptions = dict[str, OptionValue]
OptionsInput = Mapping[str, OptionValue] | Iterable[tuple[str, OptionValue]]

_CAMEL_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")


def dasherize(value: str) -> str:
    """``changeDetection`` -> ``change-detection``."""
    return _CAMEL_BOUNDARY.sub(r"\1-\2", value).lower()


def format_cli_command_option(name: str, value: OptionValue) -> str:
    """Format one option in the shortest form the CLI accepts.

    - ``"true"``  -> ``--name`` (bare flag)
    - array      -> ``--name a --name b`` (one repeated flag per item)
    - otherwise  -> ``--name value``
    """
    if isinstance(value, list):
        return " ".join(f"--{name} {item}" for item in value)
    if value == "true":
        return f"--{name}"
    return f"--{name} {value}"


def format_cli_command_options_list(options: OptionsInput) -> list[str]:
    """One formatted token group per option, in insertion order (empty groups dropped)."""
    pairs = options.items() if isinstance(options, Mapping) else options
    tokens = (format_cli_command_option(name, value) for name, value in pairs)
    return [token for token in tokens if token]


def format_cli_command_options(options: OptionsInput) -> str:
    return " ".join(format_cli_command_options_list(options))
