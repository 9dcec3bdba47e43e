# encoding: utf-8
"""Metadata consumers (``/metadata``)."""

from typing import Optional, Set

from pydantic import Field

from sonarrform.gpi.fields import FieldRegistry
from sonarrform.gpi.item import ProviderItem, build_generic, build_record
from sonarrform.gpi.resource import family_types

ENDPOINT = "metadata"

REGISTRY = FieldRegistry(
    bools=[
        "seriesMetadata",
        "seriesMetadataEpisodeGuide",
        "seriesMetadataUrl",
        "episodeMetadata",
        "seriesImages",
        "seasonImages",
        "episodeImages",
    ],
)

MetadataItem = build_generic(
    "MetadataItem",
    REGISTRY,
    header={"enable": ("enable", Optional[bool])},
)


class MetadataBase(ProviderItem):
    generic = MetadataItem

    id: Optional[int] = Field(default=None, description="Metadata ID.")
    name: str = Field(..., description="Metadata name.")
    enable: Optional[bool] = Field(default=None, description="Enable flag.")
    tags: Optional[Set[int]] = Field(default=None, description="List of associated tags.")

    series_metadata: Optional[bool] = None
    episode_metadata: Optional[bool] = None
    series_images: Optional[bool] = None
    season_images: Optional[bool] = None
    episode_images: Optional[bool] = None


Metadata = build_record(
    "Metadata",
    MetadataBase,
    REGISTRY,
    "metadata",
    implementation=(str, Field(..., description="Metadata implementation name.")),
    config_contract=(str, Field(..., description="Metadata configuration template.")),
)


class MetadataKodi(MetadataBase):
    """Kodi (XBMC) / Emby NFO files."""

    type_suffix = "metadata_kodi"
    implementation_name = "XbmcMetadata"
    config_contract_name = "XbmcMetadataSettings"

    series_metadata_url: Optional[bool] = None
    series_metadata_episode_guide: Optional[bool] = None


class MetadataRoksbox(MetadataBase):
    type_suffix = "metadata_roksbox"
    implementation_name = "RoksboxMetadata"
    config_contract_name = "RoksboxMetadataSettings"


class MetadataWdtv(MetadataBase):
    type_suffix = "metadata_wdtv"
    implementation_name = "WdtvMetadata"
    config_contract_name = "WdtvMetadataSettings"


IMPLEMENTATIONS = [MetadataKodi, MetadataRoksbox, MetadataWdtv]


def register():
    return family_types(Metadata, IMPLEMENTATIONS, ENDPOINT, "metadata_consumers")
