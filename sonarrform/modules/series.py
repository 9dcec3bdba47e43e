# encoding: utf-8
"""Read-only access to series; series are added through Sonarr itself."""

from typing import List, Optional, Set

from pydantic import BaseModel, Field, TypeAdapter

from sonarrform.diagnostics import DataNotFoundError
from sonarrform.engine import DataSource, ListDataSource, LookupDataSource, ModelResource, WireModel


class Series(WireModel):
    id: Optional[int] = Field(default=None, description="Series ID.")
    title: str = Field(..., description="Series title.")
    title_slug: Optional[str] = Field(default=None, description="Series title in kebab format.")
    tvdb_id: Optional[int] = Field(default=None, description="TVDB ID.")
    year: Optional[int] = Field(default=None, description="First air year.")
    status: Optional[str] = Field(default=None, description="Series status.")
    path: Optional[str] = Field(default=None, description="Series folder.")
    root_folder_path: Optional[str] = Field(default=None, description="Root folder of the series folder.")
    monitored: Optional[bool] = Field(default=None, description="Monitored flag.")
    season_folder: Optional[bool] = Field(default=None, description="Season folder flag.")
    use_scene_numbering: Optional[bool] = Field(default=None, description="Scene numbering flag.")
    series_type: Optional[str] = Field(default=None, description="Series type. Valid values are 'standard', 'daily', 'anime'.")
    quality_profile_id: Optional[int] = Field(default=None, description="Quality profile ID.")
    tags: Optional[Set[int]] = Field(default=None, description="List of associated tags.")


class AllSeries(BaseModel):
    series: List[Series] = []


class SeriesResource(ModelResource):
    model = Series
    type_suffix = "series"
    path = "series"
    import_by = "title"


class SearchSeriesDataSource(DataSource):
    """
    A series from the metadata search, whether or not it is in the library.

    Only an exact TVDB match counts; the search ranks fuzzy results first.
    """

    model = Series
    type_suffix = "search_series"

    def lookup(self, query: dict, cancel=None) -> Series:
        tvdb_id = TypeAdapter(int).validate_python(query.get("tvdb_id"))
        results = self.client.list("series/lookup", params={"term": f"tvdb:{tvdb_id}"}, cancel=cancel)

        for result in results:
            if result.get("tvdbId") == tvdb_id:
                return Series.model_validate(result)

        raise DataNotFoundError(self.type_suffix, "tvdb_id", tvdb_id)


def register():
    lookup = SeriesResource()
    return [], [
        LookupDataSource(lookup, keys=("tvdb_id", "title")),
        ListDataSource(lookup, "all_series", AllSeries),
        SearchSeriesDataSource(),
    ]
