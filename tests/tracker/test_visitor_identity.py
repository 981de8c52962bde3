import json

from tracker import VisitorIdentity


def test_identifier_is_created_once(tmp_path):
    storage = tmp_path / "visitor.json"

    first = VisitorIdentity(storage).get_visitor_id()
    second = VisitorIdentity(storage).get_visitor_id()

    assert first == second
    assert len(first) == 32
    assert json.loads(storage.read_text()) == {"visitorId": first}


def test_identifier_is_cached(tmp_path):
    storage = tmp_path / "visitor.json"
    identity = VisitorIdentity(storage)
    visitor_id = identity.get_visitor_id()

    storage.unlink()

    assert identity.get_visitor_id() == visitor_id


def test_distinct_storages_get_distinct_identifiers(tmp_path):
    first = VisitorIdentity(tmp_path / "a.json").get_visitor_id()
    second = VisitorIdentity(tmp_path / "b.json").get_visitor_id()

    assert first != second


def test_corrupt_storage_is_replaced(tmp_path, caplog):
    storage = tmp_path / "visitor.json"
    storage.write_text("{not json")

    visitor_id = VisitorIdentity(storage).get_visitor_id()

    assert visitor_id
    assert json.loads(storage.read_text()) == {"visitorId": visitor_id}
    assert "Ignoring unreadable visitor storage" in caplog.text


def test_storage_directory_is_created(tmp_path):
    storage = tmp_path / "nested" / "dir" / "visitor.json"

    VisitorIdentity(storage).get_visitor_id()

    assert storage.exists()


def test_unwritable_storage_keeps_id_in_memory(tmp_path, caplog):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    identity = VisitorIdentity(blocker / "sub" / "visitor.json")

    visitor_id = identity.get_visitor_id()

    assert visitor_id
    assert identity.get_visitor_id() == visitor_id
    assert "Could not persist visitor id" in caplog.text
