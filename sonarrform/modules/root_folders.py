# encoding: utf-8
from typing import List, Optional

from pydantic import BaseModel, Field

from sonarrform.engine import ListDataSource, LookupDataSource, ModelResource, WireModel


class UnmappedFolder(WireModel):
    name: Optional[str] = None
    path: Optional[str] = None


class RootFolder(WireModel):
    id: Optional[int] = Field(default=None, description="Root folder ID.")
    path: str = Field(..., description="Root folder absolute path.")
    accessible: Optional[bool] = Field(default=None, description="Access flag, set by the server.")
    free_space: Optional[int] = Field(default=None, description="Free space in bytes, set by the server.")
    unmapped_folders: Optional[List[UnmappedFolder]] = Field(default=None, description="Folders not yet mapped to a series, set by the server.")


class RootFolders(BaseModel):
    root_folders: List[RootFolder] = []


class RootFolderResource(ModelResource):
    """Root folders cannot be edited; a new path replaces the folder."""

    model = RootFolder
    type_suffix = "root_folder"
    path = "rootfolder"
    import_by = "path"
    normalised = frozenset({"path"})
    requires_replace = frozenset({"path"})

    def build_wire(self, item: RootFolder) -> dict:
        return {"path": item.path}


def register():
    lookup = RootFolderResource()
    return [RootFolderResource()], [
        LookupDataSource(lookup, keys=("path",)),
        ListDataSource(lookup, "root_folders", RootFolders),
    ]
