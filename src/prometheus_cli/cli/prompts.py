"""Interactive prompts for the CLI layer (questionary).

``questionary``'s ``ask()`` returns ``None`` when the user presses
Ctrl+C or Esc; every helper here turns that into ``KeyboardInterrupt``
so the error boundary reports "Aborted by user." consistently.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from prometheus_cli.exceptions import EnvironmentError


def _import_questionary() -> Any:
    """Import questionary lazily for interactive prompts."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


def _answered(answer: Any) -> Any:
    if answer is None:
        raise KeyboardInterrupt
    return answer


def ask_text(
    message: str,
    *,
    default: str = "",
    validate: Callable[[str], bool | str] | None = None,
) -> str:
    questionary = _import_questionary()
    kwargs: dict[str, Any] = {"default": default}
    if validate is not None:
        kwargs["validate"] = validate
    return str(_answered(questionary.text(message, **kwargs).ask())).strip()


def ask_select(message: str, choices: Sequence[tuple[str, str]]) -> str:
    """Ask for one of *choices*, given as ``(title, value)`` pairs."""
    questionary = _import_questionary()
    options = [questionary.Choice(title=title, value=value) for title, value in choices]
    return str(
        _answered(
            questionary.select(message, choices=options, use_arrow_keys=True).ask(),
        ),
    )


def confirm(message: str, *, default: bool = False) -> bool:
    questionary = _import_questionary()
    return bool(_answered(questionary.confirm(message, default=default).ask()))
