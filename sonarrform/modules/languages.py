# encoding: utf-8
"""Languages known to the server, for custom format and profile ids."""

from typing import List, Optional

from pydantic import BaseModel, Field

from sonarrform.engine import ListDataSource, LookupDataSource, ModelResource, WireModel


class Language(WireModel):
    id: Optional[int] = Field(default=None, description="Language ID.")
    name: str = Field(..., description="Language.")
    name_lower: Optional[str] = Field(default=None, description="Language in lowercase.")


class Languages(BaseModel):
    languages: List[Language] = []


class LanguageResource(ModelResource):
    model = Language
    type_suffix = "language"
    path = "language"


def register():
    lookup = LanguageResource()
    return [], [
        LookupDataSource(lookup, keys=("name",)),
        ListDataSource(lookup, "languages", Languages),
    ]
