# encoding: utf-8
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from sonarrform.engine import ListDataSource, LookupDataSource, ModelResource, WireModel


class Tag(WireModel):
    id: Optional[int] = Field(default=None, description="Tag ID.")
    label: str = Field(..., description="Tag label. Sonarr stores it lowercase.")

    @field_validator("label")
    @classmethod
    def lowercase_label(cls, value):
        return value.lower()


class Tags(BaseModel):
    tags: List[Tag] = []


class TagResource(ModelResource):
    model = Tag
    type_suffix = "tag"
    path = "tag"
    import_by = "label"
    normalised = frozenset({"label"})

    def normalise(self, slot, value):
        return value.strip().lower() if isinstance(value, str) else value


def register():
    lookup = TagResource()
    return [TagResource()], [
        LookupDataSource(lookup, keys=("label",)),
        ListDataSource(lookup, "tags", Tags),
    ]
