"""Tests for the export importer command."""

import json

from campavail.database import create_engine_from_url, make_session_factory
from campavail.importer import main
from campavail.store import SQLRecordStore


def test_main_imports_into_database(tmp_path, capsys):
    export = tmp_path / "export.json"
    export.write_text(json.dumps({
        "camps": [{"id": "c1", "hostId": "h1", "title": "Camp"}],
        "bookings": [{"id": "b1", "campId": "c1", "checkIn": "2026-06-01 08:00", "status": "pending"}],
    }))
    db_url = f"sqlite:///{tmp_path / 'import.db'}"

    assert main([str(export), "--database-url", db_url]) == 0
    assert "Imported 2 records" in capsys.readouterr().out

    engine = create_engine_from_url(db_url)
    store = SQLRecordStore(make_session_factory(engine))
    assert [b.id for b in store.list_bookings("c1")] == ["b1"]
    engine.dispose()
