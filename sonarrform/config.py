# encoding: utf-8

import os
import sys
from urllib.parse import urlparse

import yaml
from pydantic import ValidationError

from sonarrform import logger
from sonarrform.client import SonarrClient
from sonarrform.constants import ENV_API_KEY, ENV_URL
from sonarrform.diagnostics import ConfigurationError
from sonarrform.schema import Manifest, ProviderConfig


def load_config(config_file):
    try:
        full_path = os.path.abspath(config_file)
        with open(full_path, "r", encoding="utf8") as stream:
            logger.debug("Loading manifest from %s", full_path)
            return Manifest.model_validate(yaml.safe_load(stream) or {})
    except FileNotFoundError:
        logger.error(f"Manifest {config_file} not found.")
    except yaml.YAMLError as exc:
        logger.error(exc)
    except ValidationError as exc:
        logger.error(f"Invalid manifest {config_file}: {exc}")

    sys.exit(1)


def resolve_api_key(config: ProviderConfig):
    api_key = config.api_key
    if api_key is None:
        api_key = os.getenv(ENV_API_KEY)

    if api_key is None:
        raise ConfigurationError(
            "Unable to find API key. Set api_key in the provider block "
            f"or the {ENV_API_KEY} environment variable"
        )
    if not api_key.strip():
        raise ConfigurationError("API key cannot be an empty string")

    return api_key


def resolve_url(config: ProviderConfig):
    url = config.url or os.getenv(ENV_URL)

    parsed = urlparse(url or "")
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError(
            "Unable to find valid URL. Set url in the provider block "
            f"or the {ENV_URL} environment variable"
        )

    return url.rstrip("/")


def build_client(config: ProviderConfig) -> SonarrClient:
    """Resolve URL and API key from config and environment and build the shared client."""
    url = resolve_url(config)
    api_key = resolve_api_key(config)

    logger.debug("Configuring client for %s", url)
    return SonarrClient(url, api_key, extra_headers=config.extra_headers)
