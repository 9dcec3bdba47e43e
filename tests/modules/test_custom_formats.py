import pytest

from sonarrform.diagnostics import Diagnostics, Kind
from sonarrform.modules.custom_formats import (
    ConditionError,
    CustomFormatSpecification,
    specification_from_wire,
    specification_to_wire,
)

CONFIG = {
    "name": "HDR",
    "include_custom_format_when_renaming": False,
    "specifications": [
        {"name": "HDR title", "implementation": "ReleaseTitleSpecification", "value": r"\bHDR\b", "required": True},
        {"name": "2160p", "implementation": "ResolutionSpecification", "value": 2160, "negate": False},
        {"name": "Not huge", "implementation": "SizeSpecification", "min": 1, "max": 50.5},
    ],
}


@pytest.mark.unit
class TestSpecifications:
    def test_numeric_value_is_sent_as_number(self):
        spec = CustomFormatSpecification(name="2160p", implementation="ResolutionSpecification", value="2160")

        wire = specification_to_wire(spec)

        assert wire["implementation"] == "ResolutionSpecification"
        assert wire["fields"] == [{"name": "value", "value": 2160}]

    def test_text_value_is_sent_as_text(self):
        spec = CustomFormatSpecification(name="x265", implementation="ReleaseTitleSpecification", value="x265")

        assert specification_to_wire(spec)["fields"] == [{"name": "value", "value": "x265"}]

    def test_non_numeric_value_for_numeric_condition(self):
        spec = CustomFormatSpecification(name="bad", implementation="LanguageSpecification", value="english")

        with pytest.raises(ConditionError):
            specification_to_wire(spec)

    def test_from_wire_stringifies_value(self):
        spec = specification_from_wire(
            {
                "name": "French",
                "implementation": "LanguageSpecification",
                "negate": True,
                "required": False,
                "fields": [{"name": "value", "value": 2}],
            }
        )

        assert spec.value == "2"
        assert spec.negate is True

    def test_unknown_implementation_uses_text_value(self):
        spec = specification_from_wire(
            {"name": "future", "implementation": "FutureSpecification", "fields": [{"name": "value", "value": "abc"}]}
        )

        assert spec.value == "abc"


@pytest.mark.unit
class TestCustomFormatResource:
    def test_create_and_read(self, provider, fake_api):
        resource = provider.resource("custom_format")
        diagnostics = Diagnostics()
        plan = resource.parse(CONFIG, diagnostics)

        created = resource.create(plan)
        read = resource.read(created.state)

        assert created.ok
        stored = fake_api.collections["customformat"][created.state.id]
        assert stored["includeCustomFormatWhenRenaming"] is False
        assert [s["fields"] for s in stored["specifications"]] == [
            [{"name": "value", "value": r"\bHDR\b"}],
            [{"name": "value", "value": 2160}],
            [{"name": "min", "value": 1.0}, {"name": "max", "value": 50.5}],
        ]
        assert read.state.specifications[1].value == "2160"
        assert resource.plan(read.state, plan).changes == []

    def test_bad_condition_fails_create(self, provider, fake_api):
        resource = provider.resource("custom_format")
        plan = resource.parse(
            {"name": "Lang", "specifications": [{"name": "x", "implementation": "LanguageSpecification", "value": "x"}]},
            Diagnostics(),
        )

        response = resource.create(plan)

        assert not response.ok
        assert "numeric value" in response.diagnostics.errors[0].detail
        assert fake_api.calls == []


@pytest.mark.unit
class TestConditionDataSources:
    def test_condition_is_shaped_locally(self, provider, fake_api):
        data_source = provider.data_source("custom_format_condition_resolution")

        first = data_source.read({"name": "2160p", "value": 2160})
        second = data_source.read({"name": "2160p", "value": "2160"})

        assert first.ok
        assert first.state.implementation == "ResolutionSpecification"
        assert first.state.value == "2160"
        assert first.state.id == second.state.id
        assert fake_api.calls == []

    def test_different_conditions_have_different_ids(self, provider):
        data_source = provider.data_source("custom_format_condition_release_title")

        first = data_source.read({"name": "a", "value": "x264"})
        second = data_source.read({"name": "a", "value": "x265"})

        assert first.state.id != second.state.id

    def test_generic_condition(self, provider):
        response = provider.data_source("custom_format_condition").read(
            {"name": "group", "implementation": "ReleaseGroupSpecification", "value": "NTb"}
        )

        assert response.ok
        assert response.state.implementation == "ReleaseGroupSpecification"

    def test_generic_condition_requires_implementation(self, provider):
        response = provider.data_source("custom_format_condition").read({"name": "group"})

        assert not response.ok
        assert response.diagnostics.errors[0].summary == Kind.DATA_SOURCE.value
