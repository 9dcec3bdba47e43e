# encoding: utf-8
from typing import List, Optional

from pydantic import BaseModel, Field

from sonarrform.engine import ListDataSource, ModelResource, WireModel


class RemotePathMapping(WireModel):
    id: Optional[int] = Field(default=None, description="Remote path mapping ID.")
    host: str = Field(..., description="Download client host.")
    remote_path: str = Field(..., description="Path as the download client reports it.")
    local_path: str = Field(..., description="Same path as Sonarr sees it.")


class RemotePathMappings(BaseModel):
    remote_path_mappings: List[RemotePathMapping] = []


class RemotePathMappingResource(ModelResource):
    model = RemotePathMapping
    type_suffix = "remote_path_mapping"
    path = "remotepathmapping"
    # The server appends a trailing separator to both paths
    normalised = frozenset({"remote_path", "local_path"})


def register():
    return [RemotePathMappingResource()], [
        ListDataSource(RemotePathMappingResource(), "remote_path_mappings", RemotePathMappings),
    ]
