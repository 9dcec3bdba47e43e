import pytest

from sonarrform.constants import PLAN_NOOP, PLAN_UPDATE
from sonarrform.diagnostics import Diagnostics

SERVER_PROFILE = {
    "id": 4,
    "name": "HD",
    "upgradeAllowed": True,
    "cutoff": 1001,
    "items": [
        {"quality": {"id": 1, "name": "SDTV", "source": "television", "resolution": 480}, "items": [], "allowed": False},
        {
            "id": 1001,
            "name": "WEB 720p",
            "allowed": True,
            "items": [
                {"quality": {"id": 14, "name": "WEBRip-720p", "source": "webRip", "resolution": 720}, "items": [], "allowed": True},
                {"quality": {"id": 5, "name": "WEBDL-720p", "source": "web", "resolution": 720}, "items": [], "allowed": True},
            ],
        },
        {"quality": {"id": 3, "name": "WEBDL-1080p", "source": "web", "resolution": 1080}, "items": [], "allowed": True},
    ],
    "formatItems": [{"format": 2, "name": "HDR", "score": 100}],
    "minFormatScore": 0,
}


def parse(resource, config):
    diagnostics = Diagnostics()
    plan = resource.parse(config, diagnostics)
    assert not diagnostics.has_error(), list(diagnostics)
    return plan


@pytest.mark.unit
class TestQualityProfile:
    def test_server_items_become_groups_in_server_order(self, provider, fake_api):
        fake_api.seed("qualityprofile", SERVER_PROFILE)
        resource = provider.resource("quality_profile")

        response = resource.import_state("HD")

        assert response.ok
        groups = response.state.quality_groups
        assert [group.id for group in groups] == [1001, 3]
        assert [quality.id for quality in groups[0].qualities] == [14, 5]
        assert groups[1].qualities == []
        assert response.state.format_items[0].score == 100

    def test_groups_are_sent_as_written(self, provider, fake_api):
        resource = provider.resource("quality_profile")
        plan = parse(
            resource,
            {
                "name": "UHD",
                "cutoff": 19,
                "quality_groups": [
                    {"id": 19, "name": "Bluray-2160p"},
                    {"id": 1002, "name": "WEB 2160p", "qualities": [{"id": 18, "name": "WEBDL-2160p"}, {"id": 17, "name": "WEBRip-2160p"}]},
                ],
            },
        )

        created = resource.create(plan)

        items = fake_api.collections["qualityprofile"][created.state.id]["items"]
        assert items[0] == {"quality": {"id": 19, "name": "Bluray-2160p"}, "items": [], "allowed": True}
        assert items[1]["id"] == 1002
        assert [entry["quality"]["id"] for entry in items[1]["items"]] == [18, 17]
        assert resource.plan(created.state, plan).action == PLAN_NOOP

    def test_reordering_groups_is_a_change(self, provider):
        resource = provider.resource("quality_profile")
        first = parse(resource, {"name": "P", "quality_groups": [{"id": 1}, {"id": 2}]})
        second = parse(resource, {"name": "P", "quality_groups": [{"id": 2}, {"id": 1}]})

        assert resource.plan(first, second).action == PLAN_UPDATE


@pytest.mark.unit
class TestQualityDefinitions:
    @pytest.fixture
    def definitions(self, provider, fake_api):
        for definition_id, title in [(1, "SDTV"), (4, "HDTV-720p")]:
            fake_api.seed(
                "qualitydefinition",
                {"id": definition_id, "title": title, "minSize": 0.0, "maxSize": 100.0, "preferredSize": 95.0},
            )
        return provider.resource("quality_definitions")

    def test_only_configured_definitions_change(self, definitions, fake_api):
        plan = parse(definitions, {"definitions": [{"id": 4, "max_size": 400.0}]})

        response = definitions.create(plan)

        assert response.ok
        assert response.state.id == 1
        stored = fake_api.collections["qualitydefinition"]
        assert stored[4]["maxSize"] == 400.0
        assert stored[4]["title"] == "HDTV-720p"
        assert stored[1]["maxSize"] == 100.0
        assert ("PUT", "qualitydefinition/update") in fake_api.calls

    def test_plan_compares_configured_definitions_only(self, definitions):
        state = definitions.read(definitions.model.model_construct(id=1)).state

        unchanged = parse(definitions, {"definitions": [{"id": 1, "max_size": 100.0}]})
        changed = parse(definitions, {"definitions": [{"id": 1, "max_size": 50.0}]})

        assert definitions.plan(state, unchanged).action == PLAN_NOOP
        assert definitions.plan(state, changed).changes == ["definitions"]


@pytest.mark.unit
class TestReleaseAndDelayProfiles:
    def test_delay_profile_round_trip(self, provider):
        resource = provider.resource("delay_profile")
        plan = parse(resource, {"enable_usenet": True, "enable_torrent": False, "preferred_protocol": "usenet", "usenet_delay": 60, "tags": [1]})

        created = resource.create(plan)
        read = resource.read(created.state)

        assert read.ok
        assert read.state.tags == {1}
        assert resource.plan(read.state, plan).action == PLAN_NOOP

    def test_list_data_sources(self, provider, fake_api):
        fake_api.seed("releaseprofile", {"id": 2, "name": "No x265", "ignored": ["x265"], "enabled": True})

        response = provider.data_source("release_profiles").read()

        assert response.ok
        assert [profile.ignored for profile in response.state.release_profiles] == [["x265"]]

    def test_unknown_protocol_is_rejected(self, provider):
        diagnostics = Diagnostics()

        plan = provider.resource("delay_profile").parse({"preferred_protocol": "ftp"}, diagnostics)

        assert plan is None
        assert "must be one of torrent, usenet" in diagnostics.errors[0].detail
