import io
import json

import pytest

from duffle.repo.index import (
    BundleVersion,
    Index,
    NoBundleName,
    NoBundleVersion,
    load_index,
    load_index_buffer,
    load_index_reader,
)
from duffle.repo.versions import VersionError, parse_version

INDEX_JSON = """{
	"hub.cnlabs.io/helloworld": {
		"1.0.0": "abcdefghijklmnop",
		"2.0.0": "abcdefghijklmnop"
	},
	"hub.cnlabs.io/goodbyeworld": {
		"1.0.0": "abcdefghijklmnop",
		"2.0.0": "abcdefghijklmnop"
	}
}"""


def test_load_index_reader():
    index = load_index_reader(io.StringIO(INDEX_JSON))
    assert index == {
        "hub.cnlabs.io/helloworld": {
            "1.0.0": "abcdefghijklmnop",
            "2.0.0": "abcdefghijklmnop",
        },
        "hub.cnlabs.io/goodbyeworld": {
            "1.0.0": "abcdefghijklmnop",
            "2.0.0": "abcdefghijklmnop",
        },
    }

    revs = index.get_versions("hub.cnlabs.io/goodbyeworld")
    assert len(revs) == 2
    assert revs[0].digest == "abcdefghijklmnop"

    assert index.delete("hub.cnlabs.io/goodbyeworld") is True
    assert index.has("hub.cnlabs.io/goodbyeworld", "1.0.0") is False

    assert index.delete_version("nosuchname", "0.1.2") is False
    assert index.delete_version("hub.cnlabs.io/helloworld", "2.0.0") is True
    assert index.has("hub.cnlabs.io/helloworld", "1.0.0") is True
    assert index.has("hub.cnlabs.io/helloworld", "2.0.0") is False


def test_bundle_version_sort_by_version():
    versions = [
        BundleVersion(version=parse_version("0.1.0")),
        BundleVersion(version=parse_version("0.2.0")),
    ]
    assert str(sorted(versions)[0].version) == "0.1.0"
    assert str(sorted(versions, reverse=True)[0].version) == "0.2.0"


def test_load_index_buffer_bytes():
    index = load_index_buffer(INDEX_JSON.encode())
    assert index.lookup("hub.cnlabs.io/helloworld", "1.0.0") == "abcdefghijklmnop"


def test_load_empty_buffer_gives_empty_index():
    assert load_index_buffer(b"") == {}
    assert load_index_buffer("   \n") == {}


def test_load_rejects_bad_json():
    with pytest.raises(ValueError):
        load_index_buffer("{not json")


def test_load_rejects_wrong_shape():
    with pytest.raises(ValueError):
        load_index_buffer('{"name": ["1.0.0"]}')


def test_load_index_creates_missing_file(tmp_path):
    path = tmp_path / "index.json"
    assert load_index(path) == {}
    assert path.exists()


def test_lookup_returns_highest_matching_version():
    index = Index()
    index.add("app", "1.0.0", "d1")
    index.add("app", "1.5.0", "d15")
    index.add("app", "2.0.0", "d2")
    assert index.lookup("app") == "d2"
    assert index.lookup("app", "^1.0") == "d15"
    assert index.lookup("app", "1.0.0") == "d1"


def test_lookup_errors():
    index = Index()
    index.add("app", "1.0.0", "d1")
    with pytest.raises(NoBundleName):
        index.lookup("missing")
    with pytest.raises(NoBundleVersion):
        index.lookup("app", ">=2.0")
    with pytest.raises(VersionError):
        index.lookup("app", "not a constraint")


def test_lookup_with_no_versions():
    index = Index()
    index.add("app", "1.0.0", "d1")
    index.delete_version("app", "1.0.0")
    with pytest.raises(NoBundleVersion):
        index.lookup("app")


def test_get_versions_missing_name():
    with pytest.raises(NoBundleName):
        Index().get_versions("missing")


def test_get_versions_rejects_non_semver():
    index = Index()
    index.add("app", "latest", "d")
    with pytest.raises(ValueError, match="not semver compatible: latest"):
        index.get_versions("app")


def test_add_replaces_digest():
    index = Index()
    index.add("app", "1.0.0", "old")
    index.add("app", "1.0.0", "new")
    assert index == {"app": {"1.0.0": "new"}}


def test_write_file_round_trip(tmp_path):
    index = Index()
    index.add("app", "1.0.0", "d<1>&")
    index.add("other", "2.0.0", "d2")
    dest = tmp_path / "out.json"
    index.write_file(dest, 0o644)
    text = dest.read_text()
    assert "\\u003c" in text and "<" not in text
    assert json.loads(text) == index
    assert load_index(dest) == index


def test_write_file_format(tmp_path):
    index = Index()
    index.add("a", "1.0.0", "d")
    dest = tmp_path / "out.json"
    index.write_file(dest)
    assert dest.read_text() == '{\n    "a": {\n        "1.0.0": "d"\n    }\n}'


def test_merge_keeps_existing_records():
    dest = Index()
    dest.add("app", "1.0.0", "kept")
    src = Index()
    src.add("app", "1.0.0", "ignored")
    src.add("app", "2.0.0", "added")
    src.add("new", "0.1.0", "fresh")
    dest.merge(src)
    assert dest == {
        "app": {"1.0.0": "kept", "2.0.0": "added"},
        "new": {"0.1.0": "fresh"},
    }