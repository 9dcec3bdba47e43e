# encoding: utf-8
"""
Codec between the server's dynamic ``fields`` list and typed item slots.

Each family owns one ``FieldRegistry`` classifying every field name its
implementations use into one of six kinds. Decoding coerces a wire value into
the slot strictly by that kind; encoding walks the registry in declaration
order and emits one ``{"name", "value"}`` entry per set slot.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional

from sonarrform import logger
from sonarrform.diagnostics import FieldKindError
from sonarrform.utils import snake_case


class FieldKind(str, Enum):
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    INT_LIST = "int-sequence"
    STRING_LIST = "string-sequence"

    @property
    def element(self):
        if self is FieldKind.INT_LIST:
            return FieldKind.INT
        if self is FieldKind.STRING_LIST:
            return FieldKind.STRING
        return None


# Wire names whose slot cannot be derived by snake-casing the name
SLOT_OVERRIDES = {
    "tags": "field_tags",
    "seedCriteria.seedTime": "seed_time",
    "seedCriteria.seedRatio": "seed_ratio",
    "seedCriteria.seasonPackSeedTime": "season_pack_seed_time",
}


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: FieldKind
    slot: str


def _json_type(value):
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return type(value).__name__


def coerce(name, kind, value):
    """Coerce a decoded JSON value into the Python type of ``kind``."""
    if kind is FieldKind.STRING:
        if isinstance(value, str):
            return value
    elif kind is FieldKind.BOOL:
        if isinstance(value, bool):
            return value
    elif kind is FieldKind.INT:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
    elif kind is FieldKind.FLOAT:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    elif kind.element is not None:
        if isinstance(value, list):
            return [coerce(name, kind.element, item) for item in value]

    raise FieldKindError(name, kind.value, _json_type(value))


class FieldRegistry:
    """Static name → (kind, slot) table for one family."""

    def __init__(
        self,
        strings: Iterable[str] = (),
        ints: Iterable[str] = (),
        floats: Iterable[str] = (),
        bools: Iterable[str] = (),
        int_lists: Iterable[str] = (),
        string_lists: Iterable[str] = (),
        aliases: Optional[Dict[str, str]] = None,
        slots: Optional[Dict[str, str]] = None,
    ):
        overrides = {**SLOT_OVERRIDES, **(slots or {})}
        self._specs: Dict[str, FieldSpec] = {}
        for kind, names in (
            (FieldKind.STRING, strings),
            (FieldKind.INT, ints),
            (FieldKind.FLOAT, floats),
            (FieldKind.BOOL, bools),
            (FieldKind.INT_LIST, int_lists),
            (FieldKind.STRING_LIST, string_lists),
        ):
            for name in names:
                if name in self._specs:
                    raise ValueError(f"field {name} registered twice")
                self._specs[name] = FieldSpec(name, kind, overrides.get(name, snake_case(name)))

        # Alternate wire spellings decoded into the slot of a canonical name
        self._aliases = dict(aliases or {})
        for alias, canonical in self._aliases.items():
            if canonical not in self._specs:
                raise ValueError(f"alias {alias} points at unknown field {canonical}")

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self._specs.values())

    def __contains__(self, name):
        return name in self._specs or name in self._aliases

    def __len__(self):
        return len(self._specs)

    def lookup(self, name) -> Optional[FieldSpec]:
        return self._specs.get(self._aliases.get(name, name))

    @property
    def names(self):
        return list(self._specs)

    @property
    def slots(self):
        return [spec.slot for spec in self._specs.values()]

    def refine(self, **kinds: FieldKind) -> "FieldRegistry":
        """
        Copy of this registry with some fields reclassified, keyed by wire name.

        Used where one implementation sends a different JSON type for a field
        the family declares once, e.g. a numeric ``value`` on a resolution
        condition.
        """
        refined = FieldRegistry.__new__(FieldRegistry)
        refined._specs = dict(self._specs)
        refined._aliases = dict(self._aliases)
        for name, kind in kinds.items():
            if name not in refined._specs:
                raise ValueError(f"cannot refine unknown field {name}")
            refined._specs[name] = replace(refined._specs[name], kind=FieldKind(kind))
        return refined

    def decode(self, fields: Optional[List[dict]], item):
        """Assign every known, non-null wire field onto ``item``."""
        for wire_field in fields or []:
            name = wire_field.get("name")
            value = wire_field.get("value")
            spec = self.lookup(name)

            if spec is None:
                logger.debug("Skipping unknown field %s", name)
                continue

            if value is None:
                continue

            setattr(item, spec.slot, coerce(name, spec.kind, value))

        return item

    def encode(self, item) -> List[dict]:
        """
        Build the wire ``fields`` list from ``item``.

        A slot holding ``None`` is skipped unless it was explicitly set, in
        which case an explicit null is sent so the server clears it.
        """
        explicitly_set = getattr(item, "model_fields_set", set())
        output = []

        for spec in self._specs.values():
            value = getattr(item, spec.slot, None)

            if value is None:
                if spec.slot in explicitly_set:
                    output.append({"name": spec.name, "value": None})
                continue

            if isinstance(value, (set, frozenset, tuple)):
                value = sorted(value)
            elif isinstance(value, list):
                value = list(value)

            output.append({"name": spec.name, "value": value})

        return output
