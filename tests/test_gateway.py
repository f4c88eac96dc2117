import base64
import json

import pytest
from fastapi.testclient import TestClient

from apps.gateway.main import app, build_controller

PIC_B64 = base64.b64encode(b"\x89PNG\r\n\x1a\nfake").decode("ascii")


@pytest.fixture
def storage_file(tmp_path):
    return tmp_path / "storage.json"


@pytest.fixture
def client(storage_file):
    app.state.controller = build_controller(str(storage_file), "entries")
    with TestClient(app) as c:
        yield c
    app.state.controller = None


def _fill(client):
    for name, value in (("fullName", "Jane Doe"), ("email", "jane@x.com"), ("phone", "1234567890")):
        r = client.post("/form/fields", json={"name": name, "value": value, "kind": "text"})
        assert r.status_code == 200
    client.post("/form/fields", json={"name": "gender", "value": "Female", "kind": "radio"})
    client.post("/form/fields", json={"name": "skills", "value": "HTML", "kind": "checkbox"})
    r = client.post("/form/fields", json={"name": "skills", "value": "CSS", "kind": "checkbox"})
    return r.json()


def test_health_and_index(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["ok"] is True
    assert r.json()["entries"] == 0
    assert "submit" in client.get("/").json()["endpoints"]


def test_form_view_shape(client):
    view = client.get("/form").json()
    assert view["draft"]["fullName"] == ""
    assert view["draft"]["skills"] == []
    assert view["skillOptions"] == ["HTML", "CSS", "JavaScript", "React"]
    assert view["genderOptions"] == ["Male", "Female"]
    assert view["entries"] == []


def test_field_changes_update_draft(client):
    view = _fill(client)
    assert view["draft"]["fullName"] == "Jane Doe"
    assert view["draft"]["gender"] == "Female"
    assert view["draft"]["skills"] == ["HTML", "CSS"]


def test_malformed_field_change_is_400(client):
    r = client.post("/form/fields", json={"name": "skills", "value": "Cobol", "kind": "checkbox"})
    assert r.status_code == 400
    r = client.post("/form/fields", json={"name": "age", "value": "3", "kind": "text"})
    assert r.status_code == 400


def test_profile_pic_preview_and_clear(client):
    r = client.post("/form/profile-pic?wait=true",
                    json={"filename": "me.png", "content_type": "image/png", "content_base64": PIC_B64})
    assert r.status_code == 200
    view = r.json()
    assert view["draft"]["profilePic"]["filename"] == "me.png"
    assert "content" not in view["draft"]["profilePic"]
    assert view["preview"] == f"data:image/png;base64,{PIC_B64}"

    view = client.post("/form/profile-pic", json={}).json()
    assert view["draft"]["profilePic"] is None
    assert view["preview"] is None


def test_bad_base64_is_400(client):
    r = client.post("/form/profile-pic", json={"filename": "x.png", "content_base64": "***"})
    assert r.status_code == 400


def test_submit_invalid_returns_errors(client):
    r = client.post("/form:submit")
    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is False
    assert body["errors"]["fullName"] == "Full Name is required"
    assert client.get("/form").json()["errors"] == body["errors"]


def test_submit_persist_and_delete(client, storage_file):
    _fill(client)
    client.post("/form/profile-pic?wait=true",
                json={"filename": "me.png", "content_type": "image/png", "content_base64": PIC_B64})

    body = client.post("/form:submit").json()
    assert body["ok"] is True
    entry = body["entry"]
    assert entry["fullName"] == "Jane Doe"
    assert entry["preview"].startswith("data:image/png;base64,")

    view = client.get("/form").json()
    assert view["draft"]["fullName"] == ""
    assert view["preview"] is None and view["errors"] == {}

    stored = json.loads(json.loads(storage_file.read_text(encoding="utf-8"))["entries"])
    assert [e["id"] for e in stored] == [entry["id"]]

    r = client.delete(f"/entries/{entry['id']}")
    assert r.json() == {"ok": True, "removed": True, "count": 0}
    assert client.get("/entries").json() == []
    assert client.delete(f"/entries/{entry['id']}").json()["removed"] is False


def test_entries_survive_restart(client, storage_file):
    _fill(client)
    client.post("/form/profile-pic?wait=true", json={"filename": "me.png", "content_base64": PIC_B64})
    entry = client.post("/form:submit").json()["entry"]

    restarted = build_controller(str(storage_file), "entries")
    assert [e.id for e in restarted.store.entries] == [entry["id"]]
    assert restarted.store.entries[0].preview == entry["preview"]


def test_reset_clears_form(client):
    _fill(client)
    view = client.post("/form:reset").json()
    assert view["draft"]["fullName"] == ""
    assert view["draft"]["skills"] == []
