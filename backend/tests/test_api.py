from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def client():
    from launcher.api.app import app
    from launcher.control.controller import get_controller

    get_controller(force_reload=True)
    return TestClient(app)


@pytest.fixture
def site(tmp_path):
    d = tmp_path / "site"
    d.mkdir()
    (d / "Index.html").write_text("<p>hi</p>", encoding="utf-8")
    return d


def test_health(client: TestClient):
    r = client.get("/health")
    assert r.status_code == 200
    data = r.json()
    assert data.get("status") == "ok"
    assert data.get("service") == "localhost-launcher"


def test_root(client: TestClient):
    r = client.get("/")
    assert r.status_code == 200
    assert "POST /start" in r.json()["endpoints"]


def test_initial_state(client: TestClient):
    data = client.get("/state").json()
    assert data["lifecycle"] == "stopped"
    assert data["port"] == "8080"
    assert data["status_message"] == "Server is stopped."
    assert data["directory"] is None


def test_start_without_directory(client: TestClient):
    r = client.post("/start")
    assert r.status_code == 409
    body = r.json()
    assert body["success"] is False
    assert body["error"]["code"] == "NO_DIRECTORY_SELECTED"
    assert client.get("/state").json()["lifecycle"] == "stopped"


def test_select_cancelled(client: TestClient):
    r = client.post("/directory", json={"path": ""})
    assert r.status_code == 200
    body = r.json()
    assert body["cancelled"] is True
    assert body["state"]["directory"] is None
    assert client.get("/notifications").json()["notifications"] == []


def test_select_missing_directory(client: TestClient, tmp_path):
    r = client.post("/directory", json={"path": str(tmp_path / "nope")})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "SELECTION_FAILED"


@patch("launcher.api.routes._get_picker", return_value=None)
def test_select_capability_unavailable(mock_get_picker, client: TestClient):
    r = client.post("/directory", json={"path": "/tmp"})
    assert r.status_code == 501
    assert r.json()["error"]["code"] == "CAPABILITY_UNAVAILABLE"


def test_port_input(client: TestClient):
    r = client.put("/port", json={"value": "70000"})
    assert r.json()["accepted"] is True
    assert r.json()["state"]["port"] == "65535"
    r = client.put("/port", json={"value": "80x"})
    assert r.json()["accepted"] is False
    assert r.json()["state"]["port"] == "65535"


def test_full_lifecycle_with_preview(client: TestClient, site):
    r = client.post("/directory", json={"path": str(site)})
    assert r.status_code == 200
    assert r.json()["state"]["status_message"] == "Directory selected. Server is stopped."

    client.put("/port", json={"value": "3000"})
    r = client.post("/start")
    assert r.status_code == 200
    data = r.json()
    assert data["preview"] == "found"
    assert data["state"]["server_url"] == "http://localhost:3000"
    assert data["state"]["status_message"] == "Server running at http://localhost:3000 (Previewing index.html)"
    assert data["state"]["cli_command"] == 'npx http-server "site" -p 3000'

    page = client.get("/preview")
    assert page.status_code == 200
    assert 'sandbox="allow-scripts"' in page.text
    assert "allow-same-origin" not in page.text
    assert "&lt;p&gt;hi&lt;/p&gt;" in page.text

    r = client.post("/stop")
    assert r.json()["lifecycle"] == "stopped"
    assert r.json()["server_url"] == ""
    assert client.get("/preview").status_code == 404


def test_very_long_port_input(client: TestClient):
    r = client.put("/port", json={"value": "9" * 5000})
    assert r.status_code == 200
    assert r.json()["accepted"] is True
    assert r.json()["state"]["port"] == "65535"


def test_start_with_empty_port_defaults(client: TestClient, site):
    client.post("/directory", json={"path": str(site)})
    client.put("/port", json={"value": ""})
    data = client.post("/start").json()
    assert data["port"] == 8080
    assert data["port_defaulted"] is True
    assert data["state"]["port"] == "8080"
    titles = [n["title"] for n in client.get("/notifications").json()["notifications"]]
    assert "Port Defaulted" in titles


def test_start_without_index(client: TestClient, tmp_path):
    client.post("/directory", json={"path": str(tmp_path)})
    data = client.post("/start").json()
    assert data["preview"] == "not_found"
    assert data["state"]["has_preview"] is False
    assert data["state"]["status_message"].endswith(
        ". No index.html found in the root of the selected directory to preview."
    )
    r = client.get("/preview")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "NO_PREVIEW"


def test_preview_height(client: TestClient, site):
    from launcher.control.controller import get_controller

    client.post("/directory", json={"path": str(site)})
    client.post("/start")
    revision = get_controller().presenter.surface.revision

    r = client.post("/preview/height", json={"revision": revision, "height": 850})
    assert r.json() == {"accepted": True, "height": 850}
    r = client.post("/preview/height", json={"revision": revision - 1, "height": 2000})
    assert r.json() == {"accepted": False, "height": 850}


def test_notifications_after(client: TestClient, site):
    client.post("/directory", json={"path": str(site)})
    first = client.get("/notifications").json()
    assert [n["title"] for n in first["notifications"]] == ["Directory Selected"]
    client.post("/stop")
    later = client.get(f"/notifications?after={first['last_sequence']}").json()
    assert [n["title"] for n in later["notifications"]] == ["Server Stopped (Simulated)"]
