"""Tests for the backend adapters."""

import pytest
import requests

from sparkreceipt.backend.factories import create_backend_functions, create_blob_storage
from sparkreceipt.backend.functions import HTTPBackendFunctions
from sparkreceipt.backend.storage import HTTPBlobStorage, LocalBlobStorage
from sparkreceipt.domain.errors import BackendError


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200, payload=None, text="", content_type="application/json"):
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self.headers = {"Content-Type": content_type}

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


@pytest.fixture
def posted(monkeypatch):
    """Capture requests.post calls and answer with a queued response."""
    calls = []
    state = {"response": FakeResponse(payload={"success": True, "data": {}})}

    def fake_post(url, **kwargs):
        calls.append((url, kwargs))
        response = state["response"]
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(requests, "post", fake_post)
    return calls, state


def test_invoke_posts_json(posted):
    calls, state = posted
    state["response"] = FakeResponse(payload={"ok": True})
    functions = HTTPBackendFunctions("https://api.example.co/", api_key="secret")

    assert functions.invoke("generate-report", {"format": "csv"}) == {"ok": True}
    url, kwargs = calls[0]
    assert url == "https://api.example.co/functions/v1/generate-report"
    assert kwargs["json"] == {"format": "csv"}
    assert kwargs["headers"]["Authorization"] == "Bearer secret"
    assert kwargs["headers"]["apikey"] == "secret"


def test_invoke_returns_text(posted):
    _, state = posted
    state["response"] = FakeResponse(text="a,b\n", content_type="text/csv")
    assert HTTPBackendFunctions("https://api.example.co").invoke("generate-report", {}) == "a,b\n"


def test_invoke_without_key_sends_no_auth(posted):
    calls, _ = posted
    HTTPBackendFunctions("https://api.example.co").invoke("extract-receipt", {})
    assert "Authorization" not in calls[0][1]["headers"]


def test_invoke_http_error(posted):
    _, state = posted
    state["response"] = FakeResponse(status_code=500, text="internal")
    with pytest.raises(BackendError, match="HTTP 500"):
        HTTPBackendFunctions("https://api.example.co").invoke("extract-receipt", {})


def test_invoke_connection_error(posted):
    _, state = posted
    state["response"] = requests.ConnectionError("refused")
    with pytest.raises(BackendError, match="could not be reached"):
        HTTPBackendFunctions("https://api.example.co").invoke("extract-receipt", {})


def test_extract_receipt(posted):
    calls, state = posted
    state["response"] = FakeResponse(payload={"success": True, "data": {"merchant_name": "Cafe"}})
    data = HTTPBackendFunctions("https://api.example.co").extract_receipt("aGk=")
    assert data == {"merchant_name": "Cafe"}
    assert calls[0][1]["json"] == {"imageBase64": "aGk="}


@pytest.mark.parametrize(
    "payload,message",
    [
        ({"success": False, "error": "Unreadable"}, "Unreadable"),
        ({"success": False}, "Failed to extract"),
        ({"success": True}, "returned no data"),
    ],
)
def test_extract_receipt_failures(posted, payload, message):
    _, state = posted
    state["response"] = FakeResponse(payload=payload)
    with pytest.raises(BackendError, match=message):
        HTTPBackendFunctions("https://api.example.co").extract_receipt("aGk=")


def test_http_storage_upload(posted):
    calls, state = posted
    state["response"] = FakeResponse(payload={"Key": "receipts/1-r.jpg"})
    storage = HTTPBlobStorage("https://api.example.co", api_key="secret")

    url = storage.upload("receipts", "1-r.jpg", b"img", "image/jpeg")
    assert url == "https://api.example.co/storage/v1/object/public/receipts/1-r.jpg"
    posted_url, kwargs = calls[0]
    assert posted_url == "https://api.example.co/storage/v1/object/receipts/1-r.jpg"
    assert kwargs["data"] == b"img"
    assert kwargs["headers"]["Content-Type"] == "image/jpeg"


def test_http_storage_failure(posted):
    _, state = posted
    state["response"] = FakeResponse(status_code=403)
    with pytest.raises(BackendError, match="Upload of receipts/x.jpg failed"):
        HTTPBlobStorage("https://api.example.co").upload("receipts", "x.jpg", b"img")


def test_local_storage(tmp_path):
    storage = LocalBlobStorage(tmp_path)
    url = storage.upload("receipts", "1-r.jpg", b"img")
    assert url == (tmp_path / "receipts" / "1-r.jpg").resolve().as_uri()
    assert (tmp_path / "receipts" / "1-r.jpg").read_bytes() == b"img"


class TestFactories:
    """Tests for backend factory functions."""

    def test_no_backend_configured(self, monkeypatch, tmp_path):
        monkeypatch.delenv("SPARKRECEIPT_BACKEND_URL", raising=False)
        monkeypatch.setenv("SPARKRECEIPT_STORAGE_DIR", str(tmp_path))
        assert create_backend_functions() is None
        storage = create_blob_storage()
        assert isinstance(storage, LocalBlobStorage)
        assert storage.root == tmp_path

    def test_backend_from_environment(self, monkeypatch):
        monkeypatch.setenv("SPARKRECEIPT_BACKEND_URL", "https://api.example.co")
        monkeypatch.setenv("SPARKRECEIPT_API_KEY", "secret")
        functions = create_backend_functions()
        assert isinstance(functions, HTTPBackendFunctions)
        assert functions.api_key == "secret"
        assert isinstance(create_blob_storage(), HTTPBlobStorage)

    def test_explicit_arguments_win(self, monkeypatch):
        monkeypatch.setenv("SPARKRECEIPT_BACKEND_URL", "https://env.example.co")
        functions = create_backend_functions("https://arg.example.co", "k")
        assert functions.base_url == "https://arg.example.co"
