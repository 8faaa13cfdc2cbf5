"""Terminal implementation of the ``Prompter`` collaborator, built on click.

Choices are printed as a numbered list.  ``q`` (or Ctrl-C / Ctrl-D)
cancels the current prompt, which stops the generation flow.
"""

from __future__ import annotations

from functools import partial

import click
from anyio import to_thread

from ngschematics.engine.models.choice import Choice

CANCEL_INPUT = "q"


class ClickPrompter:
    async def ask_choice(self, items: list[Choice], placeholder: str) -> Choice | None:
        if not items:
            return None
        _echo_choices(items)
        answer = await _prompt(f"{placeholder} [1-{len(items)}, {CANCEL_INPUT} to cancel]", default="1")
        if answer is None:
            return None
        indexes = _parse_indexes(answer, len(items))
        if not indexes or len(indexes) != 1:
            click.secho(f"Invalid choice: {answer}", fg="red", err=True)
            return None
        return items[indexes[0]]

    async def ask_multi_choice(self, items: list[Choice], placeholder: str) -> list[Choice] | None:
        if not items:
            return []
        _echo_choices(items, multi=True)
        default = " ".join(str(index) for index, item in enumerate(items, start=1) if item.picked) or "-"
        answer = await _prompt(
            f"{placeholder} [numbers separated by spaces, - for none, {CANCEL_INPUT} to cancel]", default=default
        )
        if answer is None:
            return None
        if answer.strip() == "-":
            return []
        indexes = _parse_indexes(answer, len(items))
        if indexes is None:
            click.secho(f"Invalid choice: {answer}", fg="red", err=True)
            return None
        return [items[index] for index in indexes]

    async def ask_text(self, prompt: str, prefill: str = "") -> str | None:
        return await _prompt(prompt, default=prefill, cancel_input=None)

    def notify_error(self, message: str) -> None:
        click.secho(message, fg="red", err=True)

    def notify_info(self, message: str) -> None:
        click.echo(message)


async def _prompt(text: str, *, default: str, cancel_input: str | None = CANCEL_INPUT) -> str | None:
    try:
        answer = await to_thread.run_sync(partial(click.prompt, text, default=default, show_default=bool(default)))
    except click.Abort:
        click.echo()
        return None
    if cancel_input is not None and answer.strip().lower() == cancel_input:
        return None
    return answer


def _echo_choices(items: list[Choice], *, multi: bool = False) -> None:
    for index, item in enumerate(items, start=1):
        marker = "[x] " if multi and item.picked else "[ ] " if multi else ""
        line = f"{index:>3}. {marker}{click.style(item.label, bold=True)}"
        if item.description:
            line = f"{line}  {item.description}"
        click.echo(line)
        if item.detail:
            click.echo(f"       {click.style(item.detail, dim=True)}")


def _parse_indexes(answer: str, size: int) -> list[int] | None:
    """``"1 3"`` or ``"1,3"`` -> ``[0, 2]``, ``None`` if any part is invalid."""
    indexes: list[int] = []
    for part in answer.replace(",", " ").split():
        if not part.isdigit() or not 1 <= int(part) <= size:
            return None
        indexes.append(int(part) - 1)
    return list(dict.fromkeys(indexes))
