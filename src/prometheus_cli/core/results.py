"""Unwrapping of Candid result and option values.

Canisters report failures as result unions (``{"ok": v}`` / ``{"err": e}``
or the ICRC spelling ``{"Ok": v}`` / ``{"Err": e}`` / ``{"Error": e}``)
rather than by trapping.  These helpers turn the error side into a
:class:`~prometheus_cli.exceptions.RemoteCallError`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from prometheus_cli.exceptions import RemoteCallError

_OK_KEYS: tuple[str, ...] = ("ok", "Ok")
_ERR_KEYS: tuple[str, ...] = ("err", "Err", "Error")


def is_ok(result: Any) -> bool:
    return isinstance(result, Mapping) and any(key in result for key in _OK_KEYS)


def error_payload(result: Any) -> Any:
    """Return the error side of *result*, or ``None`` when it succeeded."""
    if isinstance(result, Mapping):
        for key in _ERR_KEYS:
            if key in result:
                return result[key]
    return None


def describe_error(error: Any) -> str:
    """Render an error payload (text or variant) as one line of text."""
    if isinstance(error, Mapping) and len(error) == 1:
        (tag, detail), = error.items()
        if detail is None:
            return tag
        return f"{tag}: {describe_error(detail)}"
    if isinstance(error, (bytes, bytearray)):
        return bytes(error).hex()
    return str(error)


def unwrap(result: Any, *, action: str) -> Any:
    """Return the success payload of *result*.

    Raises
    ------
    RemoteCallError
        If *result* carries an error, or is not a result union at all.
    """
    if isinstance(result, Mapping):
        for key in _OK_KEYS:
            if key in result:
                return result[key]
        for key in _ERR_KEYS:
            if key in result:
                raise RemoteCallError(f"{action}: {describe_error(result[key])}")
    raise RemoteCallError(f"{action}: unexpected response {result!r}")


def unwrap_option(value: Any) -> Any:
    """Convert a Candid ``opt`` (``[]`` or ``[v]``) to ``None`` or ``v``."""
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def option(value: Any) -> list[Any]:
    """Wrap a Python value as a Candid ``opt``."""
    return [] if value is None else [value]
