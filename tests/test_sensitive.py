import pytest

from sonarrform.modules.download_clients import DownloadClientSabnzbd
from sonarrform.modules.host import Host, HostAuthentication
from sonarrform.sensitive import get_value, restore, secrets, snapshot

HOST_SENSITIVE = {"authentication.password", "proxy.password"}


@pytest.mark.unit
class TestSensitive:
    def test_snapshot_takes_known_values_only(self):
        item = DownloadClientSabnzbd(name="sab", api_key="KEY")

        assert snapshot(item, {"api_key", "password"}) == {"api_key": "KEY"}

    def test_snapshot_of_nothing(self):
        assert snapshot(None, {"api_key"}) == {}

    def test_restore_overwrites_server_form(self):
        item = DownloadClientSabnzbd.model_construct(
            _fields_set={"name", "api_key", "password"}, name="sab", api_key="********", password="********"
        )

        restore(item, {"api_key": "KEY"}, {"api_key", "password"})

        assert item.api_key == "KEY"
        assert item.password is None
        assert "password" not in item.model_fields_set

    def test_nested_paths(self):
        host = Host(authentication=HostAuthentication(username="admin", password="server-hash"))

        assert get_value(host, "authentication.password") == "server-hash"
        assert get_value(host, "proxy.password") is None

        restore(host, {"authentication.password": "p@ss"}, HOST_SENSITIVE)

        assert host.authentication.password == "p@ss"
        assert host.proxy is None

    def test_secrets_skip_empty(self):
        assert secrets({"a": "x", "b": "", "c": None, "d": 12}) == ["x", "12"]
