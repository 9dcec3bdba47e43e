# encoding: utf-8
"""
Custom formats (``/customformat``) and their conditions.

Conditions are a generic-item family of their own: each specification on a
custom format is a wire resource with a ``fields`` bag, selected by its
``implementation``. Some implementations carry a numeric ``value`` where
others carry text, so those get a refined registry. The condition data sources
never talk to the server; they only shape a condition the way
``sonarr_custom_format`` expects it.
"""

from typing import Dict, List, Optional, Type

from pydantic import BaseModel, Field, field_validator

from sonarrform.diagnostics import SonarrformError
from sonarrform.engine import DataSource, ListDataSource, LookupDataSource, ModelResource, WireModel
from sonarrform.gpi.fields import FieldKind, FieldRegistry
from sonarrform.gpi.item import ProviderItem, build_generic
from sonarrform.utils import stable_hash

ENDPOINT = "customformat"

REGISTRY = FieldRegistry(strings=["value"], floats=["min", "max"])

CONDITION_HEADER = {
    "negate": ("negate", Optional[bool]),
    "required": ("required", Optional[bool]),
}

ConditionItem = build_generic("ConditionItem", REGISTRY, header=CONDITION_HEADER)
NumericConditionItem = build_generic(
    "NumericConditionItem", REGISTRY.refine(value=FieldKind.INT), header=CONDITION_HEADER
)


class ConditionError(SonarrformError):
    pass


class ConditionBase(ProviderItem):
    generic = ConditionItem

    id: Optional[int] = Field(default=None, description="Content hash of the condition.")
    name: str = Field(..., description="Specification name.")
    negate: Optional[bool] = Field(default=None, description="Negate flag.")
    required: Optional[bool] = Field(default=None, description="Computed flag.")


class ConditionReleaseTitle(ConditionBase):
    type_suffix = "custom_format_condition_release_title"
    implementation_name = "ReleaseTitleSpecification"

    value: Optional[str] = Field(default=None, description="Regular expression matched against the release title.")


class ConditionReleaseGroup(ConditionBase):
    type_suffix = "custom_format_condition_release_group"
    implementation_name = "ReleaseGroupSpecification"

    value: Optional[str] = Field(default=None, description="Regular expression matched against the release group.")


class ConditionLanguage(ConditionBase):
    generic = NumericConditionItem
    type_suffix = "custom_format_condition_language"
    implementation_name = "LanguageSpecification"

    value: Optional[int] = Field(default=None, description="Language ID.")


class ConditionIndexerFlag(ConditionBase):
    generic = NumericConditionItem
    type_suffix = "custom_format_condition_indexer_flag"
    implementation_name = "IndexerFlagSpecification"

    value: Optional[int] = Field(default=None, description="Indexer flag. `1` Freeleech, `2` Halfleech, `4` DoubleUpload, `8` Internal, `16` Scene, `32` Freeleech75, `64` Freeleech25.")


class ConditionSource(ConditionBase):
    generic = NumericConditionItem
    type_suffix = "custom_format_condition_source"
    implementation_name = "SourceSpecification"

    value: Optional[int] = Field(default=None, description="Source. `1` Television, `2` TelevisionRaw, `3` Web, `4` WebRip, `5` DVD, `6` Bluray, `7` BlurayRaw.")


class ConditionResolution(ConditionBase):
    generic = NumericConditionItem
    type_suffix = "custom_format_condition_resolution"
    implementation_name = "ResolutionSpecification"

    value: Optional[int] = Field(default=None, description="Resolution. `360`, `480`, `540`, `576`, `720`, `1080`, `2160`.")


class ConditionSize(ConditionBase):
    type_suffix = "custom_format_condition_size"
    implementation_name = "SizeSpecification"

    min: Optional[float] = Field(default=None, description="Minimum size in GB.")
    max: Optional[float] = Field(default=None, description="Maximum size in GB.")


CONDITIONS: Dict[str, Type[ConditionBase]] = {
    model.implementation_name: model
    for model in [
        ConditionReleaseTitle,
        ConditionReleaseGroup,
        ConditionLanguage,
        ConditionIndexerFlag,
        ConditionSource,
        ConditionResolution,
        ConditionSize,
    ]
}


class CustomFormatSpecification(BaseModel):
    """One condition of a custom format, whatever its implementation."""

    name: str
    implementation: str
    negate: Optional[bool] = None
    required: Optional[bool] = None
    value: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None

    @field_validator("value", mode="before")
    @classmethod
    def stringify_value(cls, value):
        # Numeric conditions are written as numbers in manifests
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class CustomFormatCondition(CustomFormatSpecification):
    """State of a condition data source."""

    id: int


def specification_to_wire(spec: CustomFormatSpecification) -> dict:
    condition = CONDITIONS.get(spec.implementation)
    generic = condition.generic if condition is not None else ConditionItem

    value = spec.value
    if value is not None and generic.registry.lookup("value").kind is FieldKind.INT:
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
        "min": spec.min,
        "max": spec.max,
    }
    item = generic.model_construct(
        _fields_set={key for key, v in values.items() if v is not None}, **values
    )
    wire = item.encode()
    wire.pop("id", None)
    return wire


def specification_from_wire(wire: dict) -> CustomFormatSpecification:
    condition = CONDITIONS.get(wire.get("implementation"))
    generic = condition.generic if condition is not None else ConditionItem
    item = generic.decode(wire)

    return CustomFormatSpecification.model_construct(
        name=item.name,
        implementation=item.implementation,
        negate=item.negate,
        required=item.required,
        value=None if item.value is None else str(item.value),
        min=item.min,
        max=item.max,
    )


class CustomFormat(WireModel):
    id: Optional[int] = Field(default=None, description="Custom format ID.")
    name: str = Field(..., description="Custom format name.")
    include_custom_format_when_renaming: Optional[bool] = Field(default=None, description="Include custom format when renaming flag.")
    specifications: List[CustomFormatSpecification] = Field(default_factory=list, description="Specifications.")


class CustomFormats(BaseModel):
    custom_formats: List[CustomFormat] = []


class CustomFormatResource(ModelResource):
    model = CustomFormat
    type_suffix = "custom_format"
    path = ENDPOINT
    import_by = "name"

    def build_wire(self, item: CustomFormat) -> dict:
        wire = {"name": item.name, "specifications": [specification_to_wire(s) for s in item.specifications]}
        if item.include_custom_format_when_renaming is not None:
            wire["includeCustomFormatWhenRenaming"] = item.include_custom_format_when_renaming
        return wire

    def apply_wire(self, wire: dict) -> CustomFormat:
        return CustomFormat.model_construct(
            id=wire.get("id"),
            name=wire.get("name"),
            include_custom_format_when_renaming=wire.get("includeCustomFormatWhenRenaming"),
            specifications=[specification_from_wire(s) for s in wire.get("specifications") or []],
        )


class ConditionDataSource(DataSource):
    """Shapes one condition locally and identifies it by a content hash."""

    def __init__(self, condition: Type[ConditionBase], model: Type[BaseModel] = CustomFormatCondition):
        super().__init__()
        self.condition = condition
        self.type_suffix = condition.type_suffix
        self.model = model

    def schema(self):
        return self.condition.model_json_schema()

    def lookup(self, query: dict, cancel=None) -> BaseModel:
        item = self.condition.model_validate(query)
        values = item.model_dump(exclude={"id"}, exclude_none=True)
        values["implementation"] = self.condition.implementation_name
        if "value" in values:
            values["value"] = str(values["value"])

        return self.model(id=stable_hash(values), **values)


class GenericConditionDataSource(DataSource):
    """Any condition, implementation given by the user."""

    model = CustomFormatCondition
    specification = CustomFormatSpecification
    type_suffix = "custom_format_condition"

    def lookup(self, query: dict, cancel=None) -> BaseModel:
        spec = self.specification.model_validate(query)
        values = spec.model_dump(exclude_none=True)
        return self.model(id=stable_hash(values), **values)


def register():
    resource = CustomFormatResource()
    lookup = CustomFormatResource()

    data_sources = [
        LookupDataSource(lookup, keys=("name",)),
        ListDataSource(lookup, "custom_formats", CustomFormats),
        GenericConditionDataSource(),
    ]
    data_sources.extend(ConditionDataSource(condition) for condition in CONDITIONS.values())

    return [resource], data_sources
