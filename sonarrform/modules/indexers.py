# encoding: utf-8
"""Indexers (``/indexer``)."""

from typing import List, Optional, Set

from pydantic import Field

from sonarrform.gpi.fields import FieldRegistry
from sonarrform.gpi.item import ProviderItem, build_generic, build_record
from sonarrform.gpi.resource import family_types

ENDPOINT = "indexer"

REGISTRY = FieldRegistry(
    strings=[
        "baseUrl",
        "apiPath",
        "apiKey",
        "additionalParameters",
        "captchaToken",
        "cookie",
        "passkey",
        "username",
    ],
    ints=[
        "delay",
        "minimumSeeders",
        "seedCriteria.seedTime",
        "seedCriteria.seasonPackSeedTime",
    ],
    floats=["seedCriteria.seedRatio"],
    bools=["allowZeroSize", "animeStandardFormatSearch", "rankedOnly"],
    int_lists=["categories", "animeCategories"],
)

SENSITIVE = frozenset({"api_key", "captcha_token", "cookie", "passkey"})

IndexerItem = build_generic(
    "IndexerItem",
    REGISTRY,
    header={
        "enableAutomaticSearch": ("enable_automatic_search", Optional[bool]),
        "enableInteractiveSearch": ("enable_interactive_search", Optional[bool]),
        "enableRss": ("enable_rss", Optional[bool]),
        "priority": ("priority", Optional[int]),
        "downloadClientId": ("download_client_id", Optional[int]),
        "protocol": ("protocol", Optional[str]),
    },
)


class IndexerBase(ProviderItem):
    generic = IndexerItem

    id: Optional[int] = Field(default=None, description="Indexer ID.")
    name: str = Field(..., description="Indexer name.")
    enable_automatic_search: Optional[bool] = Field(default=None, description="Enable automatic search flag.")
    enable_interactive_search: Optional[bool] = Field(default=None, description="Enable interactive search flag.")
    enable_rss: Optional[bool] = Field(default=None, description="Enable RSS flag.")
    priority: Optional[int] = Field(default=None, description="Priority.")
    download_client_id: Optional[int] = Field(default=None, description="Download client to send releases to, `0` for any.")
    tags: Optional[Set[int]] = Field(default=None, description="List of associated tags.")


Indexer = build_record(
    "Indexer",
    IndexerBase,
    REGISTRY,
    "indexer",
    sensitive=SENSITIVE,
    implementation=(str, Field(..., description="Indexer implementation name.")),
    config_contract=(str, Field(..., description="Indexer configuration template.")),
    protocol=(str, Field(..., description="Protocol. Valid values are 'usenet' and 'torrent'.")),
)


class _Seeding(IndexerBase):
    minimum_seeders: Optional[int] = None
    seed_time: Optional[int] = None
    season_pack_seed_time: Optional[int] = None
    seed_ratio: Optional[float] = None


class IndexerNewznab(IndexerBase):
    """Newznab compatible usenet indexer."""

    type_suffix = "indexer_newznab"
    implementation_name = "Newznab"
    config_contract_name = "NewznabSettings"
    discriminator = {"protocol": "usenet"}
    sensitive = frozenset({"api_key"})

    base_url: Optional[str] = None
    api_path: Optional[str] = None
    api_key: Optional[str] = None
    additional_parameters: Optional[str] = None
    anime_standard_format_search: Optional[bool] = None
    categories: Optional[List[int]] = None
    anime_categories: Optional[List[int]] = None


class IndexerTorznab(_Seeding):
    """Torznab compatible torrent indexer."""

    type_suffix = "indexer_torznab"
    implementation_name = "Torznab"
    config_contract_name = "TorznabSettings"
    discriminator = {"protocol": "torrent"}
    sensitive = frozenset({"api_key"})

    base_url: Optional[str] = None
    api_path: Optional[str] = None
    api_key: Optional[str] = None
    additional_parameters: Optional[str] = None
    anime_standard_format_search: Optional[bool] = None
    categories: Optional[List[int]] = None
    anime_categories: Optional[List[int]] = None


class IndexerIptorrents(_Seeding):
    """IPTorrents RSS feed."""

    type_suffix = "indexer_iptorrents"
    implementation_name = "IPTorrents"
    config_contract_name = "IPTorrentsSettings"
    discriminator = {"protocol": "torrent"}

    base_url: Optional[str] = None


class IndexerNyaa(_Seeding):
    """Nyaa anime tracker."""

    type_suffix = "indexer_nyaa"
    implementation_name = "Nyaa"
    config_contract_name = "NyaaSettings"
    discriminator = {"protocol": "torrent"}

    base_url: Optional[str] = None
    additional_parameters: Optional[str] = None
    anime_standard_format_search: Optional[bool] = None


class IndexerTorrentRss(_Seeding):
    """Generic torrent RSS feed."""

    type_suffix = "indexer_torrent_rss"
    implementation_name = "TorrentRssIndexer"
    config_contract_name = "TorrentRssIndexerSettings"
    discriminator = {"protocol": "torrent"}
    sensitive = frozenset({"cookie"})

    base_url: Optional[str] = None
    cookie: Optional[str] = None
    allow_zero_size: Optional[bool] = None


class IndexerBroadcasthenet(_Seeding):
    """BroadcasTheNet."""

    type_suffix = "indexer_broadcasthenet"
    implementation_name = "BroadcastheNet"
    config_contract_name = "BroadcastheNetSettings"
    discriminator = {"protocol": "torrent"}
    sensitive = frozenset({"api_key"})

    base_url: Optional[str] = None
    api_key: Optional[str] = None


IMPLEMENTATIONS = [
    IndexerNewznab,
    IndexerTorznab,
    IndexerIptorrents,
    IndexerNyaa,
    IndexerTorrentRss,
    IndexerBroadcasthenet,
]


def register():
    return family_types(Indexer, IMPLEMENTATIONS, ENDPOINT, "indexers")
