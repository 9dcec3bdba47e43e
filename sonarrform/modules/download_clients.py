# encoding: utf-8
"""Download clients (``/downloadclient``)."""

from typing import Optional, Set

from pydantic import Field

from sonarrform.gpi.fields import FieldRegistry
from sonarrform.gpi.item import ProviderItem, build_generic, build_record
from sonarrform.gpi.resource import family_types

ENDPOINT = "downloadclient"

REGISTRY = FieldRegistry(
    strings=[
        "host",
        "apiKey",
        "urlBase",
        "rpcPath",
        "secretToken",
        "password",
        "username",
        "tvCategory",
        "tvImportedCategory",
        "tvDirectory",
        "destination",
        "category",
        "nzbFolder",
        "strmFolder",
        "torrentFolder",
        "magnetFileExtension",
        "watchFolder",
    ],
    ints=["port", "recentTvPriority", "olderTvPriority", "initialState"],
    bools=[
        "useSsl",
        "addPaused",
        "addStopped",
        "startOnAdd",
        "sequentialOrder",
        "firstAndLast",
        "saveMagnetFiles",
        "readOnly",
    ],
    int_lists=["additionalTags"],
    string_lists=["tags", "postImportTags"],
    # Older servers misspell the qBittorrent and Deluge initial state
    aliases={"intialState": "initialState"},
)

SENSITIVE = frozenset({"api_key", "password", "secret_token"})

DownloadClientItem = build_generic(
    "DownloadClientItem",
    REGISTRY,
    header={
        "enable": ("enable", Optional[bool]),
        "priority": ("priority", Optional[int]),
        "protocol": ("protocol", Optional[str]),
        "removeCompletedDownloads": ("remove_completed_downloads", Optional[bool]),
        "removeFailedDownloads": ("remove_failed_downloads", Optional[bool]),
    },
)


class DownloadClientBase(ProviderItem):
    generic = DownloadClientItem

    id: Optional[int] = Field(default=None, description="Download client ID.")
    name: str = Field(..., description="Download client name.")
    enable: Optional[bool] = Field(default=None, description="Enable flag.")
    priority: Optional[int] = Field(default=None, description="Priority.")
    remove_completed_downloads: Optional[bool] = Field(default=None, description="Remove completed downloads flag.")
    remove_failed_downloads: Optional[bool] = Field(default=None, description="Remove failed downloads flag.")
    tags: Optional[Set[int]] = Field(default=None, description="List of associated tags.")


DownloadClient = build_record(
    "DownloadClient",
    DownloadClientBase,
    REGISTRY,
    "download_client",
    sensitive=SENSITIVE,
    implementation=(str, Field(..., description="Download client implementation name.")),
    config_contract=(str, Field(..., description="Download client configuration template.")),
    protocol=(str, Field(..., description="Protocol. Valid values are 'usenet' and 'torrent'.")),
)
DownloadClient.deprecated_aliases = {"intial_state": "initial_state"}


class DownloadClientQbittorrent(DownloadClientBase):
    """qBittorrent."""

    type_suffix = "download_client_qbittorrent"
    implementation_name = "QBittorrent"
    config_contract_name = "QBittorrentSettings"
    discriminator = {"protocol": "torrent"}
    sensitive = frozenset({"password"})
    deprecated_aliases = {"intial_state": "initial_state"}

    host: Optional[str] = None
    port: Optional[int] = None
    use_ssl: Optional[bool] = None
    url_base: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    tv_category: Optional[str] = None
    tv_imported_category: Optional[str] = None
    recent_tv_priority: Optional[int] = Field(default=None, description="Recent TV priority. `0` Last, `1` First.")
    older_tv_priority: Optional[int] = Field(default=None, description="Older TV priority. `0` Last, `1` First.")
    initial_state: Optional[int] = Field(default=None, description="Initial state. `0` Start, `1` ForceStart, `2` Pause.")
    sequential_order: Optional[bool] = None
    first_and_last: Optional[bool] = None


class DownloadClientSabnzbd(DownloadClientBase):
    """SABnzbd."""

    type_suffix = "download_client_sabnzbd"
    implementation_name = "Sabnzbd"
    config_contract_name = "SabnzbdSettings"
    discriminator = {"protocol": "usenet"}
    sensitive = frozenset({"api_key", "password"})

    host: Optional[str] = None
    port: Optional[int] = None
    use_ssl: Optional[bool] = None
    url_base: Optional[str] = None
    api_key: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    tv_category: Optional[str] = None
    recent_tv_priority: Optional[int] = Field(default=None, description="Recent TV priority. `-100` Default, `-2` Paused, `-1` Low, `0` Normal, `1` High, `2` Force.")
    older_tv_priority: Optional[int] = None


class DownloadClientTransmission(DownloadClientBase):
    """Transmission."""

    type_suffix = "download_client_transmission"
    implementation_name = "Transmission"
    config_contract_name = "TransmissionSettings"
    discriminator = {"protocol": "torrent"}
    sensitive = frozenset({"password"})

    host: Optional[str] = None
    port: Optional[int] = None
    use_ssl: Optional[bool] = None
    url_base: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    tv_category: Optional[str] = None
    tv_directory: Optional[str] = None
    recent_tv_priority: Optional[int] = None
    older_tv_priority: Optional[int] = None
    add_paused: Optional[bool] = None


class DownloadClientDeluge(DownloadClientBase):
    """Deluge."""

    type_suffix = "download_client_deluge"
    implementation_name = "Deluge"
    config_contract_name = "DelugeSettings"
    discriminator = {"protocol": "torrent"}
    sensitive = frozenset({"password"})

    host: Optional[str] = None
    port: Optional[int] = None
    use_ssl: Optional[bool] = None
    url_base: Optional[str] = None
    password: Optional[str] = None
    tv_category: Optional[str] = None
    tv_imported_category: Optional[str] = None
    recent_tv_priority: Optional[int] = None
    older_tv_priority: Optional[int] = None
    add_paused: Optional[bool] = None


class DownloadClientNzbget(DownloadClientBase):
    """NZBGet."""

    type_suffix = "download_client_nzbget"
    implementation_name = "Nzbget"
    config_contract_name = "NzbgetSettings"
    discriminator = {"protocol": "usenet"}
    sensitive = frozenset({"password"})

    host: Optional[str] = None
    port: Optional[int] = None
    use_ssl: Optional[bool] = None
    url_base: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    tv_category: Optional[str] = None
    recent_tv_priority: Optional[int] = None
    older_tv_priority: Optional[int] = None
    add_paused: Optional[bool] = None


class DownloadClientTorrentBlackhole(DownloadClientBase):
    """Torrent blackhole folder."""

    type_suffix = "download_client_torrent_blackhole"
    implementation_name = "TorrentBlackhole"
    config_contract_name = "TorrentBlackholeSettings"
    discriminator = {"protocol": "torrent"}
    normalised = frozenset({"torrent_folder", "watch_folder"})

    torrent_folder: Optional[str] = None
    watch_folder: Optional[str] = None
    magnet_file_extension: Optional[str] = None
    save_magnet_files: Optional[bool] = None
    read_only: Optional[bool] = None


class DownloadClientUsenetBlackhole(DownloadClientBase):
    """Usenet blackhole folder."""

    type_suffix = "download_client_usenet_blackhole"
    implementation_name = "UsenetBlackhole"
    config_contract_name = "UsenetBlackholeSettings"
    discriminator = {"protocol": "usenet"}
    normalised = frozenset({"nzb_folder", "watch_folder"})

    nzb_folder: Optional[str] = None
    watch_folder: Optional[str] = None


IMPLEMENTATIONS = [
    DownloadClientQbittorrent,
    DownloadClientSabnzbd,
    DownloadClientTransmission,
    DownloadClientDeluge,
    DownloadClientNzbget,
    DownloadClientTorrentBlackhole,
    DownloadClientUsenetBlackhole,
]


def register():
    return family_types(DownloadClient, IMPLEMENTATIONS, ENDPOINT, "download_clients")
