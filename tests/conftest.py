"""
Root conftest.py for shared pytest configuration and fixtures.

This module provides:
- Marker registration
- FakeSonarrAPI, an in-memory Sonarr behind a fake pyarr session
- client and provider fixtures wired to the fake
"""

import copy
import json as jsonlib
from collections import defaultdict
from unittest.mock import patch

import pytest
import requests

from sonarrform.client import SonarrClient
from sonarrform.provider import SonarrProvider

# Fields the fake server never echoes in plaintext
SECRET_FIELDS = {"password", "apiKey", "secretToken", "passkey", "cookie", "token"}
MASK = "********"

SINGLETON_PATHS = {
    "config/host",
    "config/naming",
    "config/mediamanagement",
    "config/indexer",
    "config/downloadclient",
    "system/status",
}


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "unit: marks tests as unit tests (no external services)"
    )
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (require a running Sonarr)"
    )


def pytest_collection_modifyitems(config, items):
    """Integration tests are only run when explicitly requested with -m integration."""
    markexpr = config.getoption("-m", default="")

    if "integration" not in markexpr:
        skip_integration = pytest.mark.skip(
            reason="Integration tests require -m integration flag"
        )
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def _masked(item):
    item = copy.deepcopy(item)
    for key in SECRET_FIELDS & set(item):
        if item[key]:
            item[key] = MASK
    for wire_field in item.get("fields", []):
        if wire_field.get("name") in SECRET_FIELDS and wire_field.get("value"):
            wire_field["value"] = MASK
    return item


def _response(status, body=b"", content_type="application/json", reason=""):
    response = requests.Response()
    response.status_code = status
    response.reason = reason
    response._content = body
    if body:
        response.headers["Content-Type"] = content_type
        response.encoding = requests.utils.get_encoding_from_headers(response.headers) or "utf-8"
    return response


class NotFound(Exception):
    pass


class FakeSonarrAPI:
    """
    Stands in for a pyarr ``SonarrAPI`` and its session.

    Stores posted items per path and serves them back the way Sonarr does:
    ids assigned on create, secrets masked, 404 for unknown ids. Requests come
    in through ``session.request`` and are routed to ``_get``/``_post``/
    ``_put``/``_delete`` by path, so tests can patch a single verb.
    """

    ver_uri = "/v3"
    api_key = "API_KEY"
    host_url = "http://localhost:8989"

    def __init__(self):
        self.session = self
        self.headers = {}
        self.collections = defaultdict(dict)
        self.singletons = {path: {"id": 1} for path in SINGLETON_PATHS}
        self.calls = []
        self.failures = {}
        self.next_id = 1

    def _request_url(self, path, ver_uri):
        return f"{self.host_url}/api{ver_uri}/{path}"

    def fail(self, method, status, body=b"", content_type="application/json", reason=""):
        """Answer the next ``method`` request with the given status and raw body."""
        self.failures[method] = _response(status, body, content_type, reason)

    def request(self, method, url, params=None, json=None, headers=None, timeout=None):
        path = url.split(f"/api{self.ver_uri}/", 1)[1]
        self.calls.append((method, path))

        if method in self.failures:
            return self.failures.pop(method)

        try:
            result = getattr(self, f"_{method.lower()}")(path, json)
        except NotFound:
            return _response(404, b'{"message": "NotFound"}', reason="Not Found")

        if result is None:
            return _response(200)
        return _response(200, jsonlib.dumps(result).encode("utf-8"))

    def seed(self, path, item):
        item = dict(item)
        if not item.get("id"):
            item["id"] = self.next_id
        self.next_id = max(self.next_id, item["id"]) + 1
        self.collections[path][item["id"]] = item
        return item

    @staticmethod
    def _split(path):
        base, _, tail = path.rpartition("/")
        if tail.isdigit():
            return base, int(tail)
        return path, None

    def _item(self, base, item_id):
        if item_id not in self.collections[base]:
            raise NotFound(f"{base}/{item_id}")
        return self.collections[base][item_id]

    def _get(self, path, data=None):
        if path in self.singletons:
            return _masked(self.singletons[path])

        base, item_id = self._split(path)
        if item_id is None:
            return [_masked(item) for item in self.collections[base].values()]
        return _masked(self._item(base, item_id))

    def _post(self, path, data=None):
        item = copy.deepcopy(data)
        item["id"] = 0
        return _masked(self.seed(path, item))

    def _put(self, path, data=None):
        base, item_id = self._split(path)

        if base in self.singletons:
            self.singletons[base] = copy.deepcopy(data)
            return _masked(data)

        if path == "qualitydefinition/update":
            for definition in data:
                self.collections["qualitydefinition"][definition["id"]] = copy.deepcopy(definition)
            return copy.deepcopy(data)

        self._item(base, item_id)
        self.collections[base][item_id] = copy.deepcopy(data)
        return _masked(data)

    def _delete(self, path, data=None):
        base, item_id = self._split(path)
        self._item(base, item_id)
        del self.collections[base][item_id]
        return None


@pytest.fixture
def fake_api():
    return FakeSonarrAPI()


@pytest.fixture
def client(fake_api):
    client = SonarrClient("http://localhost:8989", "API_KEY")
    client.instance = fake_api
    return client


@pytest.fixture
def provider(client):
    provider = SonarrProvider()
    with patch("sonarrform.provider.build_client", return_value=client):
        diagnostics = provider.configure({"url": "http://localhost:8989", "api_key": "API_KEY"})
    assert not diagnostics.has_error()
    return provider
