# encoding: utf-8
"""
Generic items and per-implementation desired-state records.

A family (download clients, indexers, ...) is one wire shape: a fixed header
plus a ``fields`` bag. ``GenericItem`` holds the union of everything a family
can carry and knows how to decode and encode the wire form. ``ProviderItem``
is the base of the typed records users write; each concrete subclass only
declares its constants and the subset of slots it exposes, and is projected
through the family's generic item in both directions.
"""

from typing import Any, ClassVar, Dict, FrozenSet, List, Optional, Set, Tuple, Type

from pydantic import BaseModel, ConfigDict, create_model

from sonarrform.gpi.fields import FieldKind, FieldRegistry

KIND_TYPES = {
    FieldKind.STRING: Optional[str],
    FieldKind.INT: Optional[int],
    FieldKind.FLOAT: Optional[float],
    FieldKind.BOOL: Optional[bool],
    FieldKind.INT_LIST: Optional[List[int]],
    FieldKind.STRING_LIST: Optional[List[str]],
}

# Wire header attributes shared by every family
COMMON_HEADER = {
    "id": ("id", Optional[int]),
    "name": ("name", Optional[str]),
    "implementation": ("implementation", Optional[str]),
    "configContract": ("config_contract", Optional[str]),
    "tags": ("tags", Optional[Set[int]]),
}


def _wire_value(value):
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    return value


class GenericItem(BaseModel):
    """Union of a family's header attributes and dynamic fields."""

    model_config = ConfigDict(extra="ignore")

    registry: ClassVar[FieldRegistry]
    header: ClassVar[Dict[str, str]]

    @classmethod
    def decode(cls, wire: dict) -> "GenericItem":
        item = cls.model_construct()

        for key, slot in cls.header.items():
            value = wire.get(key)
            if value is None:
                continue
            if slot == "tags":
                value = set(value)
            setattr(item, slot, value)

        return cls.registry.decode(wire.get("fields"), item)

    def encode(self) -> dict:
        wire = {}

        for key, slot in self.header.items():
            value = getattr(self, slot)
            if value is None and slot not in self.model_fields_set:
                continue
            wire[key] = _wire_value(value)

        wire["fields"] = self.registry.encode(self)
        return wire


def build_generic(name: str, registry: FieldRegistry, header: Dict[str, Tuple[str, Any]]) -> Type[GenericItem]:
    """
    Create the generic item class of a family.

    ``header`` maps each wire header key to ``(slot, annotation)``; the
    family's field slots are typed from their registry kind.
    """
    header = {**COMMON_HEADER, **header}
    definitions = {slot: (annotation, None) for slot, annotation in header.values()}

    for spec in registry:
        if spec.slot in definitions:
            raise ValueError(f"{name}: field slot {spec.slot} clashes with a header slot")
        definitions[spec.slot] = (KIND_TYPES[spec.kind], None)

    model = create_model(name, __base__=GenericItem, **definitions)
    model.registry = registry
    model.header = {key: slot for key, (slot, _) in header.items()}
    return model


class ProviderItem(BaseModel):
    """
    Base of every desired-state record backed by a generic item.

    Subclasses set the class-level metadata below; ``None`` on a slot means
    the user did not configure it and it is not sent to the server.
    """

    model_config = ConfigDict(extra="ignore")

    generic: ClassVar[Type[GenericItem]]
    type_suffix: ClassVar[str]
    implementation_name: ClassVar[Optional[str]] = None
    config_contract_name: ClassVar[Optional[str]] = None
    discriminator: ClassVar[Dict[str, str]] = {}
    sensitive: ClassVar[FrozenSet[str]] = frozenset()
    normalised: ClassVar[FrozenSet[str]] = frozenset()
    requires_replace: ClassVar[FrozenSet[str]] = frozenset()
    deprecated_aliases: ClassVar[Dict[str, str]] = {}

    def to_generic(self) -> GenericItem:
        cls = type(self)
        values = {slot: getattr(self, slot) for slot in cls.model_fields}
        fields_set = set(self.model_fields_set)

        constants = {
            "implementation": cls.implementation_name,
            "config_contract": cls.config_contract_name,
            **cls.discriminator,
        }
        for slot, value in constants.items():
            if value is not None:
                values[slot] = value
                fields_set.add(slot)

        return cls.generic.model_construct(_fields_set=fields_set, **values)

    @classmethod
    def from_generic(cls, item: GenericItem) -> "ProviderItem":
        values = {slot: getattr(item, slot, None) for slot in cls.model_fields}
        return cls.model_construct(
            _fields_set={slot for slot, value in values.items() if value is not None},
            **values,
        )

    @classmethod
    def slot_names(cls) -> Set[str]:
        return set(cls.model_fields)


def build_record(name: str, base: Type[ProviderItem], registry: FieldRegistry, type_suffix: str,
                 sensitive=frozenset(), **definitions) -> Type[ProviderItem]:
    """
    Record exposing every slot of a family, for the family-level resource.

    ``definitions`` adds header slots the base does not declare, in
    ``create_model`` form, e.g. ``protocol=(Optional[str], None)``.
    """
    fields = {spec.slot: (KIND_TYPES[spec.kind], None) for spec in registry}
    fields.update(definitions)

    model = create_model(name, __base__=base, **fields)
    model.type_suffix = type_suffix
    model.sensitive = frozenset(sensitive)
    return model
