"""
Associative converter.
Collects every ``<PREFIX>_<key>`` variable of the snapshot into a dict.
"""

import logging
from typing import Any, Mapping

from envi.errors import ConfigError, MappingEntryError
from envi.outcome import ABSENT
from envi.shapes import MappingShape
from envi.values import convert_text

logger = logging.getLogger(__name__)

KEY_SEPARATOR = "_"


def effective_prefix(prefix: str | None) -> str:
    """``PEERS`` -> ``PEERS_``; an undeclared prefix matches every variable."""
    if not prefix:
        return ""
    return prefix + KEY_SEPARATOR


def convert_mapping(snapshot: Mapping[str, str], prefix: str | None, shape: MappingShape) -> Any:
    """
    Build a dict from the variables starting with ``prefix_``.

    The remainder of each matching name is converted to the key type and the
    variable's value to the value type. Entries where either side is absent
    (e.g. ``PORTS_=80`` for an int key) are skipped. Returns ABSENT when no
    entry was collected.
    """
    start = effective_prefix(prefix)
    if not start:
        logger.debug("map field without Env prefix matches all %d variables", len(snapshot))

    out: dict[Any, Any] = {}
    for env_key, text in snapshot.items():
        if not env_key.startswith(start):
            continue
        suffix = env_key[len(start):]

        try:
            key = convert_text(suffix, shape.key)
        except ConfigError as e:
            raise MappingEntryError(env_key, "key", suffix, shape.key.name, e) from e
        if key is ABSENT:
            continue

        try:
            value = convert_text(text, shape.value)
        except ConfigError as e:
            raise MappingEntryError(env_key, "value", text, shape.value.name, e) from e
        if value is ABSENT:
            continue

        out[key] = value

    logger.debug("map prefix %r collected %d entries", start, len(out))
    if not out:
        return ABSENT
    return out
