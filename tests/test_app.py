from fastapi.testclient import TestClient

from storefront.main import create_app

from conftest import KEY_ID


def test_health_reports_store(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["checks"]["store"] == "healthy"


def test_live(client):
    assert client.get("/live").json() == {"status": "alive"}


def test_root_without_frontend_returns_service_info(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "running"
    assert "x-process-time" in response.headers


def test_frontend_served_from_static_dir(tmp_path, settings, store, gateway):
    static = tmp_path / "static"
    static.mkdir()
    (static / "index.html").write_text("<h1>Future World</h1>", encoding="utf-8")
    (static / "app.js").write_text("console.log('ok');", encoding="utf-8")

    app = create_app(
        settings=settings.model_copy(update={"STATIC_DIR": str(static)}),
        store=store,
        gateway=gateway,
    )

    with TestClient(app) as client:
        assert client.get("/").text == "<h1>Future World</h1>"
        assert client.get("/app.js").text == "console.log('ok');"
        assert client.get("/api/get-key").json() == {"key": KEY_ID}
