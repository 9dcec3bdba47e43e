# encoding: utf-8
"""
Auto tagging rules (``/autotagging``) and their conditions.

A rule applies its tags to every series matching its specifications. The
specifications share the custom format condition shape, with one ``value``
field whose wire type depends on the implementation: a genre list, a series
type number or a root folder path. Users always write it as text.
"""

from typing import Dict, List, Optional, Set, Type

from pydantic import BaseModel, Field, field_validator

from sonarrform.engine import ListDataSource, LookupDataSource, ModelResource, WireModel
from sonarrform.gpi.fields import FieldKind, FieldRegistry
from sonarrform.gpi.item import build_generic
from sonarrform.modules.custom_formats import (
    CONDITION_HEADER,
    ConditionBase,
    ConditionDataSource,
    ConditionError,
    GenericConditionDataSource,
)

ENDPOINT = "autotagging"

REGISTRY = FieldRegistry(strings=["value"])

AutoTagConditionItem = build_generic("AutoTagConditionItem", REGISTRY, header=CONDITION_HEADER)
GenreConditionItem = build_generic(
    "GenreConditionItem", REGISTRY.refine(value=FieldKind.STRING_LIST), header=CONDITION_HEADER
)
SeriesTypeConditionItem = build_generic(
    "SeriesTypeConditionItem", REGISTRY.refine(value=FieldKind.INT), header=CONDITION_HEADER
)


class AutoTagConditionGenres(ConditionBase):
    generic = GenreConditionItem
    type_suffix = "auto_tag_condition_genres"
    implementation_name = "GenreSpecification"

    value: Optional[str] = Field(default=None, description="Genres. Space separated list of genres.")


class AutoTagConditionRootFolder(ConditionBase):
    generic = AutoTagConditionItem
    type_suffix = "auto_tag_condition_root_folder"
    implementation_name = "RootFolderSpecification"

    value: Optional[str] = Field(default=None, description="Root folder path.")


class AutoTagConditionSeriesType(ConditionBase):
    generic = SeriesTypeConditionItem
    type_suffix = "auto_tag_condition_series_type"
    implementation_name = "SeriesTypeSpecification"

    value: Optional[int] = Field(default=None, description="Series type. `0` Standard, `1` Daily, `2` Anime.")


CONDITIONS: Dict[str, Type[ConditionBase]] = {
    model.implementation_name: model
    for model in [AutoTagConditionGenres, AutoTagConditionRootFolder, AutoTagConditionSeriesType]
}


class AutoTagSpecification(BaseModel):
    name: str
    implementation: str
    negate: Optional[bool] = None
    required: Optional[bool] = None
    value: Optional[str] = None

    @field_validator("value", mode="before")
    @classmethod
    def stringify_value(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class AutoTagCondition(AutoTagSpecification):
    """State of an auto tag condition data source."""

    id: int


def _generic(implementation):
    condition = CONDITIONS.get(implementation)
    return condition.generic if condition is not None else AutoTagConditionItem


def specification_to_wire(spec: AutoTagSpecification) -> dict:
    generic = _generic(spec.implementation)
    kind = generic.registry.lookup("value").kind

    value = spec.value
    if value is not None and kind is FieldKind.STRING_LIST:
        value = value.split()
    elif value is not None and kind is FieldKind.INT:
        try:
            value = int(value)
        except ValueError:
            raise ConditionError(
                f"condition '{spec.name}' ({spec.implementation}) needs a numeric value"
            ) from None

    values = {
        "name": spec.name,
        "implementation": spec.implementation,
        "negate": spec.negate,
        "required": spec.required,
        "value": value,
    }
    item = generic.model_construct(
        _fields_set={key for key, v in values.items() if v is not None}, **values
    )
    wire = item.encode()
    wire.pop("id", None)
    return wire


def specification_from_wire(wire: dict) -> AutoTagSpecification:
    item = _generic(wire.get("implementation")).decode(wire)

    value = item.value
    if isinstance(value, list):
        value = " ".join(value)
    elif value is not None:
        value = str(value)

    return AutoTagSpecification.model_construct(
        name=item.name,
        implementation=item.implementation,
        negate=item.negate,
        required=item.required,
        value=value,
    )


class AutoTag(WireModel):
    id: Optional[int] = Field(default=None, description="Auto tag ID.")
    name: str = Field(..., description="Auto tag name.")
    remove_tags_automatically: Optional[bool] = Field(default=None, description="Remove tags automatically flag.")
    tags: Optional[Set[int]] = Field(default=None, description="List of associated tags.")
    specifications: List[AutoTagSpecification] = Field(default_factory=list, description="Specifications.")


class AutoTags(BaseModel):
    auto_tags: List[AutoTag] = []


class AutoTagResource(ModelResource):
    model = AutoTag
    type_suffix = "auto_tag"
    path = ENDPOINT
    import_by = "name"

    def build_wire(self, item: AutoTag) -> dict:
        wire = {"name": item.name, "specifications": [specification_to_wire(s) for s in item.specifications]}
        if item.remove_tags_automatically is not None:
            wire["removeTagsAutomatically"] = item.remove_tags_automatically
        if item.tags is not None:
            wire["tags"] = sorted(item.tags)
        return wire

    def apply_wire(self, wire: dict) -> AutoTag:
        tags = wire.get("tags")
        return AutoTag.model_construct(
            id=wire.get("id"),
            name=wire.get("name"),
            remove_tags_automatically=wire.get("removeTagsAutomatically"),
            tags=None if tags is None else set(tags),
            specifications=[specification_from_wire(s) for s in wire.get("specifications") or []],
        )


class GenericAutoTagConditionDataSource(GenericConditionDataSource):
    model = AutoTagCondition
    specification = AutoTagSpecification
    type_suffix = "auto_tag_condition"


def register():
    lookup = AutoTagResource()

    data_sources = [
        LookupDataSource(lookup, keys=("name",)),
        ListDataSource(lookup, "auto_tags", AutoTags),
        GenericAutoTagConditionDataSource(),
    ]
    data_sources.extend(ConditionDataSource(condition, AutoTagCondition) for condition in CONDITIONS.values())

    return [AutoTagResource()], data_sources
