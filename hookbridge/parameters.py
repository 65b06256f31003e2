"""Conversion between an operation's configuration fields and a plain parameter map.

Operations expose their configuration explicitly: dataclass operations through
their fields (a field declared with ``metadata={"hook": False}`` stays hidden
from hooks), any other object through a ``__hook_fields__`` tuple naming the
attributes hooks may see. Nothing else on the object is reachable from a hook.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Dict, Mapping, Tuple

from hookbridge.log_manager import log

HOOK_FIELDS_ATTR = "__hook_fields__"


def field_names(operation: object) -> Tuple[str, ...]:
    """Return the names of the configuration fields ``operation`` exposes to hooks."""

    if dataclasses.is_dataclass(operation) and not isinstance(operation, type):
        return tuple(
            f.name for f in dataclasses.fields(operation) if f.metadata.get("hook", True)
        )

    declared = getattr(operation, HOOK_FIELDS_ATTR, None)
    if declared is None:
        log.debug("%s exposes no configuration fields", type(operation).__name__)
        return ()
    if isinstance(declared, str):
        return (declared,)
    return tuple(declared)


def extract(operation: object) -> Dict[str, Any]:
    """
    Return every configuration field of ``operation`` as a name -> value map.

    Failures while reading fields stop the enumeration and the fields collected
    so far are returned.
    """
    params: Dict[str, Any] = {}
    try:
        for name in field_names(operation):
            params[name] = getattr(operation, name)
    except (AttributeError, TypeError, ValueError) as exc:
        log.debug("Stopped reading fields of %s: %s", type(operation).__name__, exc)
    return params


def apply(params: Mapping[str, Any], operation: object) -> None:
    """
    Write back every entry of ``params`` that names a configuration field of ``operation``.

    Values are assigned verbatim. Keys with no matching field are ignored. A failure
    part way through leaves the fields assigned so far in place.
    """
    try:
        for name in field_names(operation):
            if name in params:
                setattr(operation, name, params[name])
    except (AttributeError, TypeError, ValueError, KeyError) as exc:
        # frozen dataclasses and read-only properties land here
        log.debug("Stopped updating fields of %s: %s", type(operation).__name__, exc)
