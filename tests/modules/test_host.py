import pytest

from sonarrform.diagnostics import Diagnostics, Kind

SERVER_HOST = {
    "id": 1,
    "instanceName": "Sonarr",
    "bindAddress": "*",
    "port": 8989,
    "sslPort": 9898,
    "enableSsl": False,
    "authenticationMethod": "forms",
    "authenticationRequired": "enabled",
    "username": "admin",
    "password": "stored-hash",
    "logLevel": "info",
    "consoleLogLevel": "",
    "branch": "main",
    "proxyEnabled": False,
    "proxyPassword": "",
    "backupFolder": "Backups",
    "backupInterval": 7,
    "backupRetention": 28,
}


@pytest.fixture
def host(provider, fake_api):
    fake_api.singletons["config/host"] = dict(SERVER_HOST)
    return provider.resource("host")


def parse(resource, config, diagnostics=None):
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()
    return resource.parse(config, diagnostics)


@pytest.mark.unit
class TestHost:
    def test_update_merges_into_current_config(self, host, fake_api):
        plan = parse(host, {"port": 8990, "authentication": {"method": "basic", "username": "root", "password": "s3cret"}})

        response = host.create(plan)

        assert response.ok
        stored = fake_api.singletons["config/host"]
        assert stored["id"] == 1
        assert stored["port"] == 8990
        assert stored["authenticationMethod"] == "basic"
        assert stored["password"] == "s3cret"
        assert stored["passwordConfirmation"] == "s3cret"
        assert stored["backupRetention"] == 28
        assert ("PUT", "config/host/1") in fake_api.calls

    def test_password_is_never_read_back(self, host):
        plan = parse(host, {"authentication": {"method": "forms", "username": "admin", "password": "s3cret"}})

        created = host.create(plan)
        read = host.read(created.state)

        assert created.state.authentication.password == "s3cret"
        assert read.state.authentication.password == "s3cret"
        assert read.state.authentication.encrypted_password == "********"

    def test_console_log_level_sent_from_its_own_slot(self, host, fake_api):
        plan = parse(host, {"logging": {"log_level": "debug", "console_log_level": "info"}})

        response = host.create(plan)

        assert response.ok
        assert fake_api.singletons["config/host"]["logLevel"] == "debug"
        assert fake_api.singletons["config/host"]["consoleLogLevel"] == "info"
        assert response.diagnostics.warnings == []

    def test_log_level_alone_warns_once_on_create(self, host, fake_api):
        plan = parse(host, {"logging": {"log_level": "trace"}})

        created = host.create(plan)
        updated = host.update(plan, created.state)

        assert fake_api.singletons["config/host"]["consoleLogLevel"] == ""
        assert [d.summary for d in created.diagnostics.warnings] == [Kind.DEPRECATED.value]
        assert "console_log_level" in created.diagnostics.warnings[0].detail
        assert updated.diagnostics.warnings == []

    def test_import_without_password(self, host):
        response = host.import_state("")

        assert response.ok
        assert response.state.id == 1
        assert response.state.authentication.password is None

    def test_import_keeps_password_whitespace(self, host):
        response = host.import_state(" pass phrase ")

        assert response.ok
        assert response.state.authentication.password == " pass phrase "

    def test_nested_plan_render_masks_password(self, host):
        prior = parse(host, {"authentication": {"method": "forms", "password": "old-pass"}})
        desired = parse(host, {"authentication": {"method": "forms", "password": "new-pass"}})

        plan = host.plan(prior, desired)
        rendered = plan.render(host.sensitive)

        assert plan.changes == ["authentication"]
        assert "old-pass" not in rendered
        assert "new-pass" not in rendered
        assert "forms" in rendered

    def test_data_source_has_no_password(self, provider, host):
        response = provider.data_source("host").read()

        assert response.ok
        assert response.state.id == 1
        assert response.state.authentication.password is None
        assert response.state.backup.retention == 28
