"""
HTTP API unit tests

Run: pytest tests/unit/test_api.py -v
"""

import pytest
from fastapi.testclient import TestClient

from ui_mapper.api import create_app


@pytest.fixture
def client(session):
    return TestClient(create_app(session))


@pytest.fixture
def uploaded(client, png_bytes):
    """Upload one screenshot into the default project; returns its id."""
    response = client.post(
        "/api/v1/projects/default/screenshots",
        files=[("files", ("login.png", png_bytes, "image/png"))],
    )
    assert response.status_code == 200
    return response.json()["imported"][0]["id"]


class TestMeta:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root(self, client):
        assert client.get("/").json()["docs"] == "/docs"


class TestProjectsApi:
    def test_list_projects(self, client):
        data = client.get("/api/v1/projects").json()
        assert data[0]["id"] == "default"
        assert data[0]["active"] is True

    def test_create_and_select(self, client):
        created = client.post("/api/v1/projects", json={"name": "Admin"}).json()
        assert created["active"] is True
        response = client.post("/api/v1/projects/default/select")
        assert response.status_code == 200
        assert response.json()["active"] is True

    def test_select_unknown(self, client):
        assert client.post("/api/v1/projects/missing/select").status_code == 404

    def test_upload_skips_bad_files(self, client, png_bytes):
        response = client.post(
            "/api/v1/projects/default/screenshots",
            files=[
                ("files", ("ok.png", png_bytes, "image/png")),
                ("files", ("bad.png", b"nope", "image/png")),
            ],
        )
        body = response.json()
        assert len(body["imported"]) == 1
        assert body["skipped"] == ["bad.png"]

    def test_save(self, client):
        assert client.post("/api/v1/projects/save").status_code == 200


class TestScreenshotsApi:
    def test_get_screenshot(self, client, uploaded):
        body = client.get(f"/api/v1/screenshots/{uploaded}").json()
        assert body["width"] == 800
        assert body["analyzed"] is False

    def test_unknown_screenshot(self, client):
        assert client.get("/api/v1/screenshots/sc-missing").status_code == 404

    def test_analyze_and_rename(self, client, uploaded):
        body = client.post(f"/api/v1/screenshots/{uploaded}/analyze").json()
        assert body["analyzed"] is True
        component_id = body["components"][1]["id"]

        response = client.patch(
            f"/api/v1/screenshots/{uploaded}/components/{component_id}",
            json={"label": "Log In"},
        )
        assert response.status_code == 200
        assert response.json()["label"] == "Log In"

    def test_rename_blank(self, client, uploaded):
        body = client.post(f"/api/v1/screenshots/{uploaded}/analyze").json()
        component_id = body["components"][0]["id"]
        response = client.patch(
            f"/api/v1/screenshots/{uploaded}/components/{component_id}",
            json={"label": "  "},
        )
        assert response.status_code == 400

    def test_clear_components(self, client, uploaded):
        client.post(f"/api/v1/screenshots/{uploaded}/analyze")
        body = client.delete(f"/api/v1/screenshots/{uploaded}/components").json()
        assert body["components"] == []
        assert body["analyzed"] is False

    def test_delete_screenshot(self, client, uploaded):
        assert client.delete(f"/api/v1/screenshots/{uploaded}").status_code == 200
        assert client.get(f"/api/v1/screenshots/{uploaded}").status_code == 404

    def test_select_fits_viewport(self, client, uploaded):
        response = client.post(
            f"/api/v1/screenshots/{uploaded}/select",
            json={"width": 1680, "height": 1280},
        )
        assert response.json()["zoom"] == pytest.approx(1.0)


class TestExportApi:
    def test_png_before_analysis_conflicts(self, client, uploaded):
        client.put("/api/v1/session/map-mode", json={"enabled": True})
        response = client.get(f"/api/v1/screenshots/{uploaded}/export/png")
        assert response.status_code == 409

    def test_map_mode_off_conflicts(self, client, uploaded):
        client.post(f"/api/v1/screenshots/{uploaded}/analyze")
        client.put("/api/v1/session/map-mode", json={"enabled": False})
        response = client.get(f"/api/v1/screenshots/{uploaded}/export/png", params={"schematic": True})
        assert response.status_code == 409

    def test_png_after_analysis(self, client, uploaded):
        client.post(f"/api/v1/screenshots/{uploaded}/analyze")
        client.put("/api/v1/session/map-mode", json={"enabled": True})
        response = client.get(f"/api/v1/screenshots/{uploaded}/export/png")
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert 'filename="login_map.png"' in response.headers["content-disposition"]
        assert response.content.startswith(b"\x89PNG")

    def test_csv_with_custom_name(self, client, uploaded):
        response = client.get(f"/api/v1/screenshots/{uploaded}/export/csv", params={"filename": "regions"})
        assert response.status_code == 200
        assert 'filename="regions.csv"' in response.headers["content-disposition"]
        assert response.text == "Label,Type,X,Y,Width,Height\n"

    def test_unknown_format(self, client, uploaded):
        assert client.get(f"/api/v1/screenshots/{uploaded}/export/gif").status_code == 400


class TestViewportApi:
    def test_zoom_pan_reset(self, client, uploaded):
        zoomed = client.post("/api/v1/session/viewport/zoom", json={"factor": 100}).json()
        assert zoomed["zoom"] == pytest.approx(5.0)
        panned = client.post("/api/v1/session/viewport/pan", json={"dx": 12, "dy": -3}).json()
        assert panned["transform"] == "translate(12px, -3px) scale(5)"
        reset = client.post("/api/v1/session/viewport/reset").json()
        assert reset["zoom"] == 1.0
        assert reset["offset_x"] == 0.0

    def test_invalid_zoom_factor(self, client):
        assert client.post("/api/v1/session/viewport/zoom", json={"factor": 0}).status_code == 400


class TestExportHeaders:
    """Download names outside ASCII"""

    def test_accented_upload_name(self, client, png_bytes):
        response = client.post(
            "/api/v1/projects/default/screenshots",
            files=[("files", ("pantalla_inicio_ñ.png", png_bytes, "image/png"))],
        )
        raster_id = response.json()["imported"][0]["id"]
        response = client.get(f"/api/v1/screenshots/{raster_id}/export/csv")
        assert response.status_code == 200
        disposition = response.headers["content-disposition"]
        assert "filename*=UTF-8''pantalla_inicio_%C3%B1_ui_map.csv" in disposition
        assert 'filename="pantalla_inicio__ui_map.csv"' in disposition

    @pytest.mark.parametrize(
        "filename, encoded",
        [
            ("スクリーン", "%E3%82%B9%E3%82%AF%E3%83%AA%E3%83%BC%E3%83%B3.json"),
            ('say "hi"', "say%20%22hi%22.json"),
        ],
    )
    def test_requested_name_encoded(self, client, uploaded, filename, encoded):
        response = client.get(f"/api/v1/screenshots/{uploaded}/export/json", params={"filename": filename})
        assert response.status_code == 200
        assert f"filename*=UTF-8''{encoded}" in response.headers["content-disposition"]

    def test_multiline_label_still_exports(self, client, uploaded):
        body = client.post(f"/api/v1/screenshots/{uploaded}/analyze").json()
        component_id = body["components"][1]["id"]
        client.patch(
            f"/api/v1/screenshots/{uploaded}/components/{component_id}",
            json={"label": "Sign\nIn"},
        )
        client.put("/api/v1/session/map-mode", json={"enabled": True})
        response = client.get(f"/api/v1/screenshots/{uploaded}/export/png")
        assert response.status_code == 200
        assert response.content.startswith(b"\x89PNG")
