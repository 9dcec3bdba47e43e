import pytest

from sonarrform.config import build_client, load_config, resolve_api_key, resolve_url
from sonarrform.diagnostics import ConfigurationError
from sonarrform.schema import Manifest, ProviderConfig

MANIFEST = """
provider:
  url: http://localhost:8989/
  api_key: API_KEY
resources:
  tag.media:
    type: sonarr_tag
    config:
      label: media
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("SONARR_URL", raising=False)
    monkeypatch.delenv("SONARR_API_KEY", raising=False)


def test_load_config(tmp_path):
    path = tmp_path / "sonarr.yaml"
    path.write_text(MANIFEST)

    manifest = load_config(str(path))

    assert isinstance(manifest, Manifest)
    assert manifest.provider.api_key == "API_KEY"
    assert manifest.resources["tag.media"].type == "sonarr_tag"
    assert manifest.resources["tag.media"].config == {"label": "media"}


def test_load_config_missing_file(tmp_path):
    with pytest.raises(SystemExit):
        load_config(str(tmp_path / "missing.yaml"))


def test_load_config_invalid_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("provider: [unclosed")

    with pytest.raises(SystemExit):
        load_config(str(path))


def test_load_config_invalid_manifest(tmp_path):
    path = tmp_path / "invalid.yaml"
    path.write_text("resources:\n  tag.media:\n    config: {}\n")

    with pytest.raises(SystemExit):
        load_config(str(path))


def test_empty_manifest(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")

    assert load_config(str(path)).resources == {}


@pytest.mark.parametrize(
    "config, env, expected",
    [
        (ProviderConfig(api_key="KEY"), None, "KEY"),
        (ProviderConfig(), "ENVKEY", "ENVKEY"),
        (ProviderConfig(api_key="KEY"), "ENVKEY", "KEY"),
    ],
)
def test_resolve_api_key(monkeypatch, config, env, expected):
    if env is not None:
        monkeypatch.setenv("SONARR_API_KEY", env)

    assert resolve_api_key(config) == expected


def test_missing_api_key():
    with pytest.raises(ConfigurationError, match="Unable to find API key"):
        resolve_api_key(ProviderConfig())


def test_blank_api_key():
    with pytest.raises(ConfigurationError, match="API key cannot be an empty string"):
        resolve_api_key(ProviderConfig(api_key="  "))


@pytest.mark.parametrize("url", [None, "localhost:8989", "ftp://sonarr", "http://"])
def test_invalid_url(url):
    with pytest.raises(ConfigurationError, match="Unable to find valid URL"):
        resolve_url(ProviderConfig(url=url))


def test_url_from_environment(monkeypatch):
    monkeypatch.setenv("SONARR_URL", "https://sonarr.example.com/")

    assert resolve_url(ProviderConfig()) == "https://sonarr.example.com"


def test_build_client():
    client = build_client(ProviderConfig(url="http://localhost:8989", api_key="KEY", extra_headers={"X-Gate": "1"}))

    assert client.url == "http://localhost:8989"
    assert client.instance.session.headers["X-Gate"] == "1"
