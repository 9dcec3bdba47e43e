# encoding: utf-8
"""Quality, release and delay profiles."""

from typing import List, Optional, Set

from pydantic import BaseModel, Field, field_validator

from sonarrform.constants import VALID_PROTOCOLS
from sonarrform.engine import ListDataSource, LookupDataSource, ModelResource, WireModel


class Quality(WireModel):
    id: int = Field(..., description="Quality ID.")
    name: Optional[str] = Field(default=None, description="Quality name.")
    source: Optional[str] = Field(default=None, description="Quality source.")
    resolution: Optional[int] = Field(default=None, description="Quality resolution.")


class QualityGroup(WireModel):
    """An allowed quality, or a named group of qualities ranked as one."""

    id: int = Field(..., description="Quality ID, or group ID for groups.")
    name: Optional[str] = Field(default=None, description="Quality or group name.")
    qualities: List[Quality] = Field(default_factory=list, description="Grouped qualities, empty for a single quality.")


class FormatItem(WireModel):
    format: int = Field(..., description="Custom format ID.")
    name: Optional[str] = Field(default=None, description="Custom format name.")
    score: int = Field(default=0, description="Score.")


class QualityProfile(WireModel):
    id: Optional[int] = Field(default=None, description="Quality profile ID.")
    name: str = Field(..., description="Quality profile name.")
    upgrade_allowed: Optional[bool] = Field(default=None, description="Upgrade allowed flag.")
    cutoff: Optional[int] = Field(default=None, description="Quality or group ID to stop upgrading at.")
    min_format_score: Optional[int] = Field(default=None, description="Minimum custom format score.")
    cutoff_format_score: Optional[int] = Field(default=None, description="Custom format score to stop upgrading at.")
    min_upgrade_format_score: Optional[int] = Field(default=None, description="Minimum custom format score increase for an upgrade.")
    quality_groups: Optional[List[QualityGroup]] = Field(default=None, description="Allowed qualities, in the server's ranking order (lowest first).")
    format_items: Optional[List[FormatItem]] = Field(default=None, description="Custom format scores.")


class QualityProfiles(BaseModel):
    quality_profiles: List[QualityProfile] = []


def _quality_wire(quality: Quality):
    return quality.model_dump(mode="json", by_alias=True, exclude_none=True)


class QualityProfileResource(ModelResource):
    """
    The server ranks qualities as a tree of items; users write a flat list of
    groups, where a group without qualities stands for the single quality of
    the same id.
    """

    model = QualityProfile
    type_suffix = "quality_profile"
    path = "qualityprofile"
    import_by = "name"

    def build_wire(self, item: QualityProfile) -> dict:
        wire = item.model_dump(
            mode="json",
            by_alias=True,
            exclude_unset=True,
            exclude={"quality_groups"},
        )

        if item.quality_groups is not None:
            items = []
            for group in item.quality_groups:
                if not group.qualities:
                    quality = {"id": group.id}
                    if group.name is not None:
                        quality["name"] = group.name
                    items.append({"quality": quality, "items": [], "allowed": True})
                    continue

                items.append(
                    {
                        "id": group.id,
                        "name": group.name,
                        "allowed": True,
                        "items": [
                            {"quality": _quality_wire(q), "items": [], "allowed": True}
                            for q in group.qualities
                        ],
                    }
                )
            wire["items"] = items

        return wire

    def apply_wire(self, wire: dict) -> QualityProfile:
        groups = []
        for entry in wire.get("items") or []:
            if not entry.get("allowed"):
                continue

            if entry.get("quality"):
                quality = entry["quality"]
                groups.append(QualityGroup(id=quality["id"], name=quality.get("name")))
                continue

            groups.append(
                QualityGroup(
                    id=entry["id"],
                    name=entry.get("name"),
                    qualities=[Quality.model_validate(q["quality"]) for q in entry.get("items") or []],
                )
            )

        profile = QualityProfile.model_validate({k: v for k, v in wire.items() if k != "items"})
        profile.quality_groups = groups
        return profile


class ReleaseProfile(WireModel):
    id: Optional[int] = Field(default=None, description="Release profile ID.")
    name: Optional[str] = Field(default=None, description="Release profile name.")
    enabled: Optional[bool] = Field(default=None, description="Enabled flag.")
    required: Optional[List[str]] = Field(default=None, description="Terms a release must contain.")
    ignored: Optional[List[str]] = Field(default=None, description="Terms a release must not contain.")
    indexer_id: Optional[int] = Field(default=None, description="Only apply to this indexer, `0` for all.")
    tags: Optional[Set[int]] = Field(default=None, description="List of associated tags.")


class ReleaseProfiles(BaseModel):
    release_profiles: List[ReleaseProfile] = []


class ReleaseProfileResource(ModelResource):
    model = ReleaseProfile
    type_suffix = "release_profile"
    path = "releaseprofile"


class DelayProfile(WireModel):
    id: Optional[int] = Field(default=None, description="Delay profile ID.")
    enable_usenet: Optional[bool] = Field(default=None, description="Usenet allowed flag.")
    enable_torrent: Optional[bool] = Field(default=None, description="Torrent allowed flag.")
    preferred_protocol: Optional[str] = Field(default=None, description="Preferred protocol. Valid values are 'usenet' and 'torrent'.")
    usenet_delay: Optional[int] = Field(default=None, description="Usenet delay in minutes.")
    torrent_delay: Optional[int] = Field(default=None, description="Torrent delay in minutes.")
    bypass_if_highest_quality: Optional[bool] = Field(default=None, description="Bypass for highest quality flag.")
    bypass_if_above_custom_format_score: Optional[bool] = Field(default=None, description="Bypass when above the custom format score flag.")
    minimum_custom_format_score: Optional[int] = Field(default=None, description="Custom format score needed to bypass the delay.")
    order: Optional[int] = Field(default=None, description="Order, set by the server.")
    tags: Optional[Set[int]] = Field(default=None, description="List of associated tags.")

    @field_validator("preferred_protocol")
    @classmethod
    def check_protocol(cls, value):
        if value is not None and value not in VALID_PROTOCOLS:
            raise ValueError(f"must be one of {', '.join(VALID_PROTOCOLS)}")
        return value


class DelayProfiles(BaseModel):
    delay_profiles: List[DelayProfile] = []


class DelayProfileResource(ModelResource):
    model = DelayProfile
    type_suffix = "delay_profile"
    path = "delayprofile"


def register():
    quality_lookup = QualityProfileResource()
    resources = [QualityProfileResource(), ReleaseProfileResource(), DelayProfileResource()]
    data_sources = [
        LookupDataSource(quality_lookup, keys=("name",)),
        ListDataSource(quality_lookup, "quality_profiles", QualityProfiles),
        ListDataSource(ReleaseProfileResource(), "release_profiles", ReleaseProfiles),
        ListDataSource(DelayProfileResource(), "delay_profiles", DelayProfiles),
    ]
    return resources, data_sources

