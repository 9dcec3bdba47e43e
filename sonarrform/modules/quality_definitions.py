# encoding: utf-8
"""
Quality size limits.

The server holds one definition per quality and updates them in bulk, so the
whole collection is managed as a single resource. Only the definitions named
in the configuration are compared and changed.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from sonarrform.diagnostics import DataNotFoundError
from sonarrform.engine import DataSource, SingletonDataSource, SingletonResource, WireModel, differs
from sonarrform.modules.profiles import Quality


class QualityDefinition(WireModel):
    id: int = Field(..., description="Quality definition ID.")
    title: Optional[str] = Field(default=None, description="Display title.")
    quality: Optional[Quality] = Field(default=None, description="Quality, set by the server.")
    min_size: Optional[float] = Field(default=None, description="Minimum size in MB per minute.")
    max_size: Optional[float] = Field(default=None, description="Maximum size in MB per minute.")
    preferred_size: Optional[float] = Field(default=None, description="Preferred size in MB per minute.")


class QualityDefinitions(BaseModel):
    id: Optional[int] = Field(default=None, description="Always 1.")
    definitions: List[QualityDefinition] = Field(default_factory=list, description="Quality definitions.")


class QualityDefinitionsResource(SingletonResource):
    model = QualityDefinitions
    type_suffix = "quality_definitions"
    path = "qualitydefinition"

    def fetch(self, cancel=None) -> dict:
        return {"definitions": self.client.list(self.path, cancel=cancel)}

    def push(self, wire: dict, cancel=None) -> dict:
        result = self.client.update(f"{self.path}/update", None, wire["definitions"], cancel)
        if isinstance(result, list) and result:
            return {"definitions": result}
        return {"definitions": wire["definitions"]}

    def merge(self, current: dict, wire: dict) -> dict:
        by_id = {definition["id"]: definition for definition in current["definitions"]}
        for definition in wire["definitions"]:
            by_id[definition["id"]] = {**by_id.get(definition["id"], {}), **definition}
        return {"definitions": list(by_id.values())}

    def build_wire(self, item: QualityDefinitions) -> dict:
        return {
            "definitions": [
                definition.model_dump(mode="json", by_alias=True, exclude_unset=True)
                for definition in item.definitions
            ]
        }

    def changes(self, prior, desired) -> List[str]:
        current = {definition.id: definition for definition in prior.definitions}
        for definition in desired.definitions:
            if differs(current.get(definition.id), definition):
                return ["definitions"]
        return []


class QualityDataSource(DataSource):
    """A single quality, found by name among the definitions."""

    model = Quality
    type_suffix = "quality"

    def lookup(self, query: dict, cancel=None) -> Quality:
        name = query.get("name")
        for definition in self.client.list(QualityDefinitionsResource.path, cancel=cancel):
            quality = definition.get("quality") or {}
            if quality.get("name") == name:
                return Quality.model_validate(quality)

        raise DataNotFoundError(self.type_suffix, "name", name)


def register():
    return [QualityDefinitionsResource()], [
        SingletonDataSource(QualityDefinitionsResource()),
        QualityDataSource(),
    ]
