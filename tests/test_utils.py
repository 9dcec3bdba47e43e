import pytest

from sonarrform.utils import camel_case, normalise_path, redact, snake_case, stable_hash


@pytest.mark.unit
@pytest.mark.parametrize(
    "name, expected",
    [
        ("useSsl", "use_ssl"),
        ("tvCategory", "tv_category"),
        ("seedCriteria.seedTime", "seed_time"),
        ("host", "host"),
        ("apiKey", "api_key"),
    ],
)
def test_snake_case(name, expected):
    assert snake_case(name) == expected


@pytest.mark.unit
def test_camel_case():
    assert camel_case("remove_completed_downloads") == "removeCompletedDownloads"
    assert camel_case("host") == "host"


@pytest.mark.unit
class TestRedact:
    def test_replaces_every_occurrence(self):
        assert redact("key abc and abc", ["abc"]) == "key ******** and ********"

    def test_longest_secret_first(self):
        assert redact("token abcdef", ["abc", "abcdef"]) == "token ********"

    def test_ignores_empty_secrets(self):
        assert redact("nothing here", ["", None]) == "nothing here"

    def test_empty_text(self):
        assert redact("", ["abc"]) == ""

    def test_json_escaped_secret(self):
        assert redact('{"value": "p\\u00e4ss\\"word"}', ["päss\"word"]) == '{"value": "********"}'

    def test_bytes_repr_of_secret(self):
        text = str(b"got: " + "päss".encode("utf-8"))

        assert redact(text, ["päss"]) == "b'got: ********'"


@pytest.mark.unit
class TestStableHash:
    def test_key_order_does_not_matter(self):
        assert stable_hash({"a": 1, "b": "x"}) == stable_hash({"b": "x", "a": 1})

    def test_different_content(self):
        assert stable_hash({"value": "x264"}) != stable_hash({"value": "x265"})

    def test_fits_positive_int64(self):
        assert 0 <= stable_hash({"name": "2160p"}) < 2**63


@pytest.mark.unit
@pytest.mark.parametrize(
    "value, expected",
    [
        ("/data/tv/", "/data/tv"),
        ("  /data/tv ", "/data/tv"),
        ("/", "/"),
        (None, None),
        (3, 3),
    ],
)
def test_normalise_path(value, expected):
    assert normalise_path(value) == expected
