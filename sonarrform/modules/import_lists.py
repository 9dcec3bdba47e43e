# encoding: utf-8
"""Import lists (``/importlist``)."""

from typing import List, Optional, Set

from pydantic import Field

from sonarrform.gpi.fields import FieldRegistry
from sonarrform.gpi.item import ProviderItem, build_generic, build_record
from sonarrform.gpi.resource import family_types

ENDPOINT = "importlist"

REGISTRY = FieldRegistry(
    strings=[
        "baseUrl",
        "apiKey",
        "accessToken",
        "refreshToken",
        "expires",
        "authUser",
        "username",
        "rating",
        "listname",
        "genres",
        "years",
        "traktAdditionalParameters",
    ],
    ints=["limit", "traktListType"],
    int_lists=["profileIds", "tagIds"],
)

SENSITIVE = frozenset({"api_key", "access_token", "refresh_token"})

ImportListItem = build_generic(
    "ImportListItem",
    REGISTRY,
    header={
        "enableAutomaticAdd": ("enable_automatic_add", Optional[bool]),
        "searchForMissingEpisodes": ("search_for_missing_episodes", Optional[bool]),
        "shouldMonitor": ("should_monitor", Optional[str]),
        "monitorNewItems": ("monitor_new_items", Optional[str]),
        "rootFolderPath": ("root_folder_path", Optional[str]),
        "qualityProfileId": ("quality_profile_id", Optional[int]),
        "seriesType": ("series_type", Optional[str]),
        "seasonFolder": ("season_folder", Optional[bool]),
        "listType": ("list_type", Optional[str]),
        "listOrder": ("list_order", Optional[int]),
        "minRefreshInterval": ("min_refresh_interval", Optional[str]),
    },
)


class ImportListBase(ProviderItem):
    generic = ImportListItem
    normalised = frozenset({"root_folder_path"})

    id: Optional[int] = Field(default=None, description="Import list ID.")
    name: str = Field(..., description="Import list name.")
    enable_automatic_add: Optional[bool] = Field(default=None, description="Add series automatically.")
    search_for_missing_episodes: Optional[bool] = Field(default=None, description="Search for missing episodes when a series is added.")
    should_monitor: Optional[str] = Field(
        default=None,
        description="Monitor mode. Valid values are 'unknown', 'all', 'future', 'missing', 'existing', 'firstSeason', 'lastSeason', 'pilot', 'none'.",
    )
    root_folder_path: Optional[str] = Field(default=None, description="Root folder new series are added to.")
    quality_profile_id: Optional[int] = Field(default=None, description="Quality profile ID.")
    series_type: Optional[str] = Field(default=None, description="Series type. Valid values are 'standard', 'daily', 'anime'.")
    season_folder: Optional[bool] = Field(default=None, description="Use season folders.")
    tags: Optional[Set[int]] = Field(default=None, description="List of associated tags.")


ImportList = build_record(
    "ImportList",
    ImportListBase,
    REGISTRY,
    "import_list",
    sensitive=SENSITIVE,
    implementation=(str, Field(..., description="Import list implementation name.")),
    config_contract=(str, Field(..., description="Import list configuration template.")),
    list_type=(Optional[str], None),
    list_order=(Optional[int], None),
    monitor_new_items=(Optional[str], None),
)


class ImportListSonarr(ImportListBase):
    """Another Sonarr instance."""

    type_suffix = "import_list_sonarr"
    implementation_name = "SonarrImport"
    config_contract_name = "SonarrSettings"
    discriminator = {"list_type": "program"}
    sensitive = frozenset({"api_key"})

    base_url: Optional[str] = None
    api_key: Optional[str] = None
    profile_ids: Optional[List[int]] = None
    tag_ids: Optional[List[int]] = None


class ImportListPlex(ImportListBase):
    """Plex watchlist."""

    type_suffix = "import_list_plex"
    implementation_name = "PlexImport"
    config_contract_name = "PlexListSettings"
    discriminator = {"list_type": "plex"}
    sensitive = frozenset({"access_token"})

    access_token: Optional[str] = None


class ImportListTraktList(ImportListBase):
    """Trakt user list."""

    type_suffix = "import_list_trakt_list"
    implementation_name = "TraktListImport"
    config_contract_name = "TraktListSettings"
    discriminator = {"list_type": "trakt"}
    sensitive = frozenset({"access_token", "refresh_token"})

    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires: Optional[str] = None
    auth_user: Optional[str] = None
    username: Optional[str] = None
    listname: Optional[str] = None
    rating: Optional[str] = None
    genres: Optional[str] = None
    years: Optional[str] = None
    limit: Optional[int] = None
    trakt_additional_parameters: Optional[str] = None


class ImportListCustom(ImportListBase):
    """Custom JSON list."""

    type_suffix = "import_list_custom"
    implementation_name = "CustomImport"
    config_contract_name = "CustomSettings"
    discriminator = {"list_type": "advanced"}

    base_url: Optional[str] = None


IMPLEMENTATIONS = [ImportListSonarr, ImportListPlex, ImportListTraktList, ImportListCustom]


def register():
    return family_types(ImportList, IMPLEMENTATIONS, ENDPOINT, "import_lists")
