# encoding: utf-8
"""
Pydantic schema for the provider configuration and the local manifest.

The provider block is what any host runtime hands to ``configure``; the
manifest wraps it with the resources the local runner should reconcile.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator


class ProviderConfig(BaseModel):
    """Sonarr connection settings."""

    url: Optional[str] = Field(
        default=None,
        description="Full Sonarr URL with protocol and port. Falls back to the SONARR_URL environment variable",
        json_schema_extra={"example": "http://localhost:8989"},
    )
    api_key: Optional[str] = Field(
        default=None,
        description="API key for Sonarr authentication. Falls back to the SONARR_API_KEY environment variable",
        json_schema_extra={"example": "YOUR_SONARR_API_KEY", "writeOnly": True},
    )
    extra_headers: Dict[str, str] = Field(
        default_factory=dict,
        description="Additional headers sent on every request, for servers behind another authentication gate",
        json_schema_extra={"example": {"Authorization": "Basic dXNlcjpwYXNz"}},
    )


class ResourceBlock(BaseModel):
    """One declared resource in a manifest."""

    type: str = Field(
        ...,
        description="Resource type, with or without the provider prefix",
        json_schema_extra={"example": "sonarr_download_client_qbittorrent"},
    )
    config: Dict[str, Any] = Field(
        default_factory=dict,
        description="Desired state of the resource",
    )

    @field_validator("type")
    @classmethod
    def strip_type(cls, value):
        return value.strip()


class Manifest(BaseModel):
    """Desired state read by the local runner."""

    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    resources: Dict[str, ResourceBlock] = Field(
        default_factory=dict,
        description="Resources keyed by address; the address is how state entries are matched",
    )
