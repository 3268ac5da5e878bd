import json

import pytest

from persistent_cookiejar.services import CookiePersistenceError, FileCookiePersistor, MemoryCookiePersistor

from tests.utils import make_cookie


@pytest.fixture(params=["memory", "file"])
def any_persistor(request, tmp_path):
    if request.param == "memory":
        return MemoryCookiePersistor()
    return FileCookiePersistor(tmp_path / "cookies.json")


def test_save_upserts_by_identity(any_persistor):
    any_persistor.save_all([make_cookie("a", "1"), make_cookie("b", "1")])
    any_persistor.save_all([make_cookie("a", "2")])

    stored = {c.name: c.value for c in any_persistor.load_all()}
    assert stored == {"a": "2", "b": "1"}


def test_remove_by_identity(any_persistor):
    any_persistor.save_all([make_cookie("a", "1"), make_cookie("b", "1")])

    any_persistor.remove_all([make_cookie("a", "other-value")])

    assert [c.name for c in any_persistor.load_all()] == ["b"]


def test_clear(any_persistor):
    any_persistor.save_all([make_cookie()])

    any_persistor.clear()

    assert any_persistor.load_all() == []


def test_file_persistor_survives_new_instance(tmp_path):
    path = tmp_path / "nested" / "cookies.json"
    cookie = make_cookie(http_only=True, host_only=True)
    FileCookiePersistor(path).save_all([cookie])

    assert FileCookiePersistor(path).load_all() == [cookie]
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert list(payload) == ['["example.com", "/", "sid"]']
    assert payload['["example.com", "/", "sid"]']["httpOnly"] is True


def test_file_persistor_missing_or_blank_file(tmp_path):
    path = tmp_path / "cookies.json"
    assert FileCookiePersistor(path).load_all() == []

    path.write_text("   \n", encoding="utf-8")
    assert FileCookiePersistor(path).load_all() == []


def test_file_persistor_empty_save_does_not_write(tmp_path):
    path = tmp_path / "cookies.json"

    FileCookiePersistor(path).save_all([])
    FileCookiePersistor(path).remove_all([make_cookie()])

    assert not path.exists()


@pytest.mark.parametrize("content", ["{broken", "[1, 2]"])
def test_file_persistor_rejects_corrupt_file(tmp_path, content):
    path = tmp_path / "cookies.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(CookiePersistenceError):
        FileCookiePersistor(path).load_all()


def test_file_persistor_skips_malformed_entries(tmp_path):
    path = tmp_path / "cookies.json"
    good = make_cookie()
    path.write_text(
        json.dumps({"bad": {"value": "x"}, "worse": 3, "example.com/|sid": good.to_dict()}),
        encoding="utf-8",
    )

    assert FileCookiePersistor(path).load_all() == [good]


def test_file_persistor_write_failure(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(CookiePersistenceError):
        FileCookiePersistor(blocker / "cookies.json").save_all([make_cookie()])


def test_file_persistor_keeps_identities_with_separators_apart(tmp_path):
    path = tmp_path / "cookies.json"
    first = make_cookie("c", "1", path="/a|b")
    second = make_cookie("b|c", "2", path="/a")

    FileCookiePersistor(path).save_all([first, second])

    stored = FileCookiePersistor(path).load_all()
    assert sorted(stored, key=lambda c: c.name) == [second, first]
