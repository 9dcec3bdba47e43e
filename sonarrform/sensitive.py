# encoding: utf-8
"""
Sensitive-value preservation.

The server hands secrets back blank, masked or fingerprinted. Around every
decode the engine snapshots the plaintext it already knows (from the plan on
create/update, from prior state on read) and writes it back over whatever the
server returned. Names are slot paths; nested slots use dots, as in
``authentication.password``.
"""

from typing import Any, Dict, Iterable, Optional


def _resolve(item, path):
    *parents, leaf = path.split(".")
    for parent in parents:
        if item is None:
            return None, leaf
        item = getattr(item, parent, None)
    return item, leaf


def get_value(item, path) -> Optional[Any]:
    owner, leaf = _resolve(item, path)
    if owner is None:
        return None
    return getattr(owner, leaf, None)


def snapshot(item, sensitive: Iterable[str]) -> Dict[str, Any]:
    """Register of the known plaintext values of ``item``'s sensitive slots."""
    register = {}
    if item is None:
        return register

    for path in sensitive:
        value = get_value(item, path)
        if value is not None:
            register[path] = value

    return register


def restore(item, register: Dict[str, Any], sensitive: Iterable[str]):
    """
    Overwrite every sensitive slot of ``item`` with the register value.

    Slots missing from the register are cleared, so the state never keeps the
    server's redacted form. A nested slot whose parent object is absent on
    ``item`` is left alone.
    """
    for path in sensitive:
        owner, leaf = _resolve(item, path)
        if owner is None:
            continue

        value = register.get(path)
        setattr(owner, leaf, value)
        if value is None:
            # Unknown, not an explicit null the next write should send
            owner.model_fields_set.discard(leaf)

    return item


def secrets(register: Dict[str, Any]):
    return [str(value) for value in register.values() if value not in (None, "")]
