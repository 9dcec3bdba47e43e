# encoding: utf-8
"""Flat server settings, each stored once under ``/config``."""

from typing import Optional

from pydantic import Field

from sonarrform.engine import SingletonDataSource, SingletonResource, WireModel


class Naming(WireModel):
    id: Optional[int] = Field(default=None, description="Naming config ID, always 1.")
    rename_episodes: Optional[bool] = Field(default=None, description="Rename episodes flag.")
    replace_illegal_characters: Optional[bool] = Field(default=None, description="Replace illegal characters flag.")
    colon_replacement_format: Optional[int] = Field(default=None, description="Colon replacement. 0 delete, 1 dash, 2 space dash, 3 space dash space, 4 smart, 5 custom.")
    custom_colon_replacement_format: Optional[str] = Field(default=None, description="Custom colon replacement.")
    multi_episode_style: Optional[int] = Field(default=None, description="Multi episode style. 0 extend, 1 duplicate, 2 repeat, 3 scene, 4 range, 5 prefixed range.")
    standard_episode_format: Optional[str] = Field(default=None, description="Standard episode format.")
    daily_episode_format: Optional[str] = Field(default=None, description="Daily episode format.")
    anime_episode_format: Optional[str] = Field(default=None, description="Anime episode format.")
    series_folder_format: Optional[str] = Field(default=None, description="Series folder format.")
    season_folder_format: Optional[str] = Field(default=None, description="Season folder format.")
    specials_folder_format: Optional[str] = Field(default=None, description="Specials folder format.")


class NamingResource(SingletonResource):
    model = Naming
    type_suffix = "naming"
    path = "config/naming"


class MediaManagement(WireModel):
    id: Optional[int] = Field(default=None, description="Media management config ID, always 1.")
    auto_unmonitor_previously_downloaded_episodes: Optional[bool] = None
    recycle_bin: Optional[str] = Field(default=None, description="Recycle bin path.")
    recycle_bin_cleanup_days: Optional[int] = None
    download_propers_and_repacks: Optional[str] = Field(default=None, description="Valid values are 'preferAndUpgrade', 'doNotUpgrade', 'doNotPrefer'.")
    create_empty_series_folders: Optional[bool] = None
    delete_empty_folders: Optional[bool] = None
    file_date: Optional[str] = Field(default=None, description="Valid values are 'none', 'localAirDate', 'utcAirDate'.")
    rescan_after_refresh: Optional[str] = Field(default=None, description="Valid values are 'always', 'afterManual', 'never'.")
    set_permissions_linux: Optional[bool] = None
    chmod_folder: Optional[str] = None
    chown_group: Optional[str] = None
    episode_title_required: Optional[str] = Field(default=None, description="Valid values are 'always', 'bulkSeasonReleases', 'never'.")
    skip_free_space_check_when_importing: Optional[bool] = None
    minimum_free_space_when_importing: Optional[int] = Field(default=None, description="Minimum free space in MB.")
    copy_using_hardlinks: Optional[bool] = None
    use_script_import: Optional[bool] = None
    script_import_path: Optional[str] = None
    import_extra_files: Optional[bool] = None
    extra_file_extensions: Optional[str] = None
    enable_media_info: Optional[bool] = None


class MediaManagementResource(SingletonResource):
    model = MediaManagement
    type_suffix = "media_management"
    path = "config/mediamanagement"


class IndexerConfig(WireModel):
    id: Optional[int] = Field(default=None, description="Indexer config ID, always 1.")
    minimum_age: Optional[int] = Field(default=None, description="Usenet minimum age in minutes.")
    maximum_size: Optional[int] = Field(default=None, description="Maximum release size in MB, 0 for unlimited.")
    retention: Optional[int] = Field(default=None, description="Usenet retention in days.")
    rss_sync_interval: Optional[int] = Field(default=None, description="RSS sync interval in minutes.")


class IndexerConfigResource(SingletonResource):
    model = IndexerConfig
    type_suffix = "indexer_config"
    path = "config/indexer"


class DownloadClientConfig(WireModel):
    id: Optional[int] = Field(default=None, description="Download client config ID, always 1.")
    download_client_working_folders: Optional[str] = Field(default=None, description="Working folder extensions.")
    enable_completed_download_handling: Optional[bool] = None
    auto_redownload_failed: Optional[bool] = None
    auto_redownload_failed_from_interactive_search: Optional[bool] = None


class DownloadClientConfigResource(SingletonResource):
    model = DownloadClientConfig
    type_suffix = "download_client_config"
    path = "config/downloadclient"


SETTINGS = [NamingResource, MediaManagementResource, IndexerConfigResource, DownloadClientConfigResource]


def register():
    resources = [resource() for resource in SETTINGS]
    data_sources = [SingletonDataSource(resource()) for resource in SETTINGS]
    return resources, data_sources
