# encoding: utf-8
from typing import List, Optional

from pydantic import BaseModel, Field

from sonarrform.engine import ListDataSource, LookupDataSource, ModelResource, WireModel


class ImportListExclusion(WireModel):
    id: Optional[int] = Field(default=None, description="Import list exclusion ID.")
    tvdb_id: int = Field(..., description="Series TVDB ID.")
    title: str = Field(..., description="Series to be excluded.")


class ImportListExclusions(BaseModel):
    import_list_exclusions: List[ImportListExclusion] = []


class ImportListExclusionResource(ModelResource):
    model = ImportListExclusion
    type_suffix = "import_list_exclusion"
    path = "importlistexclusion"


def register():
    lookup = ImportListExclusionResource()
    return [ImportListExclusionResource()], [
        LookupDataSource(lookup, keys=("tvdb_id",)),
        ListDataSource(lookup, "import_list_exclusions", ImportListExclusions),
    ]
