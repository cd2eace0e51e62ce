"""ICRC-16 generic value encoding.

On-chain metadata (submission details, attestations, ballots, bounty
parameters) is carried as ICRC-16 values: single-key variant dicts such
as ``{"Text": "hello"}`` or ``{"Map": [("key", {...}), ...]}``.  This
module converts between those variants and ordinary Python values.

Serialisation rules
-------------------
=================  ===================
Python             ICRC-16
=================  ===================
``bool``           ``Bool``
``int`` >= 0       ``Nat``
``int`` < 0        ``Int``
``float``          ``Text`` (decimal form)
``PrincipalText``  ``Principal``
``str``            ``Text``
``bytes``          ``Blob``
``list``/``tuple`` ``Array``
``dict``           ``Map`` (``None`` values skipped)
anything else      ``Text ""``
=================  ===================
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from prometheus_cli.core.models import PrincipalText

logger = logging.getLogger(__name__)

Icrc16Value = dict[str, Any]
Icrc16Map = list[tuple[str, Icrc16Value]]


# ---------------------------------------------------------------------------
# Python → ICRC-16
# ---------------------------------------------------------------------------

def serialize_value(value: Any) -> Icrc16Value:
    """Convert one Python value to its ICRC-16 variant."""
    # bool before int: bool is an int subclass.
    if isinstance(value, bool):
        return {"Bool": value}
    if isinstance(value, int):
        return {"Nat": value} if value >= 0 else {"Int": value}
    if isinstance(value, float):
        return {"Text": format(Decimal(repr(value)), "f")}
    if isinstance(value, PrincipalText):
        return {"Principal": str(value)}
    if isinstance(value, str):
        return {"Text": value}
    if isinstance(value, (bytes, bytearray)):
        return {"Blob": bytes(value)}
    if isinstance(value, (list, tuple)):
        return {"Array": [serialize_value(item) for item in value]}
    if isinstance(value, Mapping):
        return {"Map": serialize_map(value)}
    logger.debug("Unsupported ICRC-16 value of type %s; encoding as empty text", type(value).__name__)
    return {"Text": ""}


def serialize_map(data: Mapping[str, Any]) -> Icrc16Map:
    """Convert a mapping to an ICRC-16 map, skipping ``None`` values."""
    return [
        (str(key), serialize_value(value))
        for key, value in data.items()
        if value is not None
    ]


# ---------------------------------------------------------------------------
# ICRC-16 → Python
# ---------------------------------------------------------------------------

def deserialize_value(value: Icrc16Value) -> Any:
    """Convert one ICRC-16 variant back into a Python value.

    Unknown variants decode to ``None``.
    """
    if not isinstance(value, Mapping) or len(value) != 1:
        logger.warning("Malformed ICRC-16 value: %r", value)
        return None

    (tag, inner), = value.items()
    if tag in ("Text", "Bool"):
        return inner
    if tag in ("Nat", "Int"):
        return int(inner)
    if tag == "Blob":
        return bytes(inner)
    if tag == "Principal":
        return PrincipalText(inner)
    if tag == "Map":
        return deserialize_map(inner)
    if tag == "Array":
        return [deserialize_value(item) for item in inner]

    logger.warning("Unsupported ICRC-16 variant %r; decoded as None", tag)
    return None


def deserialize_map(entries: Any) -> dict[str, Any]:
    """Convert an ICRC-16 map (sequence of key/value pairs) to a dict."""
    return {str(key): deserialize_value(item) for key, item in entries}


def lookup_text(entries: Any, key: str) -> str | None:
    """Return the ``Text`` payload stored under *key* in an ICRC-16 map."""
    for entry_key, item in entries:
        if entry_key == key and isinstance(item, Mapping) and "Text" in item:
            return item["Text"]
    return None
