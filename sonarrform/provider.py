# encoding: utf-8
"""
The provider: configuration of the shared client plus the catalogue of
resource and data source types.
"""

from typing import Dict, Optional

from pydantic import ValidationError

from sonarrform import logger
from sonarrform.config import build_client
from sonarrform.constants import PROVIDER_NAME
from sonarrform.diagnostics import Diagnostics, Kind, SonarrformError
from sonarrform.engine import DataSource, Resource
from sonarrform.modules import (
    auto_tags,
    custom_formats,
    download_clients,
    host,
    import_list_exclusions,
    import_lists,
    indexers,
    languages,
    metadata,
    notifications,
    profiles,
    quality_definitions,
    remote_path_mappings,
    root_folders,
    series,
    settings,
    system_status,
    tags,
)
from sonarrform.schema import ProviderConfig

MODULES = [
    tags,
    auto_tags,
    root_folders,
    remote_path_mappings,
    profiles,
    quality_definitions,
    languages,
    custom_formats,
    download_clients,
    indexers,
    import_lists,
    import_list_exclusions,
    notifications,
    metadata,
    host,
    settings,
    series,
    system_status,
]


class SonarrProvider:
    def __init__(self, version="dev"):
        self.version = version
        self.client = None
        self.resources: Dict[str, Resource] = {}
        self.data_sources: Dict[str, DataSource] = {}

        for module in MODULES:
            resources, data_sources = module.register()
            for resource in resources:
                self._add(self.resources, resource)
            for data_source in data_sources:
                self._add(self.data_sources, data_source)

    @staticmethod
    def _add(catalogue, item):
        if item.type_name in catalogue:
            raise ValueError(f"Duplicate type name {item.type_name}")
        catalogue[item.type_name] = item

    def metadata(self):
        return {"type_name": PROVIDER_NAME, "version": self.version}

    def schema(self):
        return ProviderConfig.model_json_schema()

    def configure(self, config: Optional[dict] = None) -> Diagnostics:
        """
        Build the shared client and hand it to every resource and data source.

        Configuration problems come back as diagnostics; nothing is configured
        when there is at least one.
        """
        diagnostics = Diagnostics()
        secret = (config or {}).get("api_key")

        try:
            provider_config = ProviderConfig.model_validate(config or {})
            client = build_client(provider_config)
        except ValidationError as err:
            diagnostics.add_error(Kind.CONFIGURATION, f"Invalid provider configuration: {err}", secrets=[secret] if secret else None)
            return diagnostics
        except SonarrformError as err:
            diagnostics.add_error(err.kind, str(err))
            return diagnostics

        self.client = client
        for item in list(self.resources.values()) + list(self.data_sources.values()):
            item.configure(client, diagnostics)

        logger.info("Configured %s provider for %s", PROVIDER_NAME, client.url)
        return diagnostics

    def resource(self, type_name: str) -> Resource:
        return self.resources[self._qualify(type_name)]

    def data_source(self, type_name: str) -> DataSource:
        return self.data_sources[self._qualify(type_name)]

    @staticmethod
    def _qualify(type_name):
        prefix = f"{PROVIDER_NAME}_"
        return type_name if type_name.startswith(prefix) else prefix + type_name
