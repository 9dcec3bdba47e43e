import pytest
from pydantic import BaseModel

from sonarrform.diagnostics import FieldKindError
from sonarrform.gpi.fields import FieldKind, FieldRegistry, coerce
from sonarrform.modules.download_clients import DownloadClientItem, REGISTRY


@pytest.fixture
def registry():
    return FieldRegistry(
        strings=["host", "apiKey"],
        ints=["port"],
        floats=["seedCriteria.seedRatio"],
        bools=["useSsl"],
        int_lists=["categories"],
        string_lists=["tags"],
        aliases={"intialState": "port"},
    )


@pytest.mark.unit
class TestFieldRegistry:
    def test_slots_follow_declaration_order(self, registry):
        assert registry.names == ["host", "apiKey", "port", "seedCriteria.seedRatio", "useSsl", "categories", "tags"]
        assert registry.slots == ["host", "api_key", "port", "seed_ratio", "use_ssl", "categories", "field_tags"]

    def test_duplicate_name_rejected(self):
        with pytest.raises(ValueError):
            FieldRegistry(strings=["host"], ints=["host"])

    def test_alias_must_point_at_known_field(self):
        with pytest.raises(ValueError):
            FieldRegistry(strings=["host"], aliases={"hots": "hostname"})

    def test_lookup_resolves_alias(self, registry):
        assert registry.lookup("intialState").slot == "port"
        assert "intialState" in registry
        assert registry.lookup("unknown") is None

    def test_refine_reclassifies_without_touching_original(self, registry):
        refined = registry.refine(host=FieldKind.INT)

        assert refined.lookup("host").kind is FieldKind.INT
        assert registry.lookup("host").kind is FieldKind.STRING

    def test_refine_unknown_field(self, registry):
        with pytest.raises(ValueError):
            registry.refine(nope=FieldKind.INT)


@pytest.mark.unit
class TestCoerce:
    @pytest.mark.parametrize(
        "kind, value, expected",
        [
            (FieldKind.STRING, "abc", "abc"),
            (FieldKind.INT, 8080, 8080),
            (FieldKind.INT, 8080.0, 8080),
            (FieldKind.FLOAT, 1, 1.0),
            (FieldKind.FLOAT, 1.5, 1.5),
            (FieldKind.BOOL, False, False),
            (FieldKind.INT_LIST, [1, 2.0], [1, 2]),
            (FieldKind.STRING_LIST, ["a"], ["a"]),
            (FieldKind.INT_LIST, [], []),
        ],
    )
    def test_accepted(self, kind, value, expected):
        assert coerce("field", kind, value) == expected

    @pytest.mark.parametrize(
        "kind, value",
        [
            (FieldKind.INT, "8080"),
            (FieldKind.INT, True),
            (FieldKind.INT, 1.5),
            (FieldKind.STRING, 1),
            (FieldKind.BOOL, 0),
            (FieldKind.FLOAT, False),
            (FieldKind.INT_LIST, 1),
            (FieldKind.INT_LIST, ["a"]),
        ],
    )
    def test_rejected(self, kind, value):
        with pytest.raises(FieldKindError):
            coerce("field", kind, value)

    def test_error_names_field_and_kinds(self):
        with pytest.raises(FieldKindError) as err:
            coerce("port", FieldKind.INT, "8080")

        assert err.value.field_name == "port"
        assert "expected int" in str(err.value)
        assert "sent string" in str(err.value)
        assert "upgrade the provider" in str(err.value)


@pytest.mark.unit
class TestDecodeEncode:
    def test_decode_skips_unknown_and_null(self):
        item = DownloadClientItem.model_construct()
        REGISTRY.decode(
            [
                {"name": "host", "value": "qbit"},
                {"name": "port", "value": 8080},
                {"name": "brandNewField", "value": "x"},
                {"name": "username", "value": None},
            ],
            item,
        )

        assert item.host == "qbit"
        assert item.port == 8080
        assert item.username is None
        assert "username" not in item.model_fields_set

    def test_decode_alias_lands_in_canonical_slot(self):
        item = DownloadClientItem.model_construct()
        REGISTRY.decode([{"name": "intialState", "value": 2}], item)

        assert item.initial_state == 2

    def test_decode_wrong_kind_fails(self):
        item = DownloadClientItem.model_construct()
        with pytest.raises(FieldKindError):
            REGISTRY.decode([{"name": "port", "value": "8080"}], item)

    def test_encode_skips_absent_and_keeps_explicit_null(self):
        item = DownloadClientItem.model_construct(_fields_set={"host", "username"}, host="qbit", username=None)

        assert REGISTRY.encode(item) == [
            {"name": "host", "value": "qbit"},
            {"name": "username", "value": None},
        ]

    def test_encode_uses_canonical_name_for_alias(self):
        item = DownloadClientItem.model_construct(_fields_set={"initial_state"}, initial_state=1)

        assert REGISTRY.encode(item) == [{"name": "initialState", "value": 1}]

    def test_encode_sorts_sets(self):
        class Holder(BaseModel):
            categories: set = set()

        registry = FieldRegistry(int_lists=["categories"])
        assert registry.encode(Holder(categories={5030, 5000})) == [{"name": "categories", "value": [5000, 5030]}]
