"""Tests for the record snapshot used by the views."""

from sqlalchemy.exc import OperationalError

from sparkreceipt.domain.workspace import Workspace


def test_refresh_loads_everything(temp_db, sample_invoice, sample_categories):
    workspace = Workspace(temp_db)
    assert workspace.snapshot.loaded is False

    assert workspace.refresh() is True
    snapshot = workspace.snapshot
    assert snapshot.loaded is True
    assert [c.name for c in snapshot.clients] == ["Jane Doe"]
    assert [i.id for i in snapshot.invoices] == [sample_invoice.id]
    assert len(snapshot.categories) == len(sample_categories)
    assert snapshot.profile is None


def test_refresh_failure_keeps_previous_snapshot(temp_db, sample_client, monkeypatch, caplog):
    workspace = Workspace(temp_db)
    workspace.refresh()

    def broken():
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(temp_db, "list_expenses", broken)
    assert workspace.refresh() is False
    assert [c.name for c in workspace.snapshot.clients] == ["Jane Doe"]
    assert "keeping previous data" in caplog.text


def test_client_name(temp_db, sample_client):
    workspace = Workspace(temp_db)
    workspace.refresh()
    assert workspace.client_name(sample_client.id) == "Jane Doe"
    assert workspace.client_name(None) == ""
    assert workspace.client_name(999) == ""
