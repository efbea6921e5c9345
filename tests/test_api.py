"""Tests for Flask API endpoints."""
from __future__ import annotations

import io
import json
import logging

import pytest

from snalab.api.server import SafeJSONEncoder, create_app


pytestmark = pytest.mark.integration


@pytest.fixture
def app(tmp_path, fast_settings):
    app = create_app({
        "TESTING": True,
        "DB_PATH": str(tmp_path / "snalab.db"),
        "LOG_DIR": str(tmp_path / "logs"),
        "ANALYSIS_SETTINGS": fast_settings,
    })
    yield app
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if getattr(handler, "baseFilename", "").startswith(str(tmp_path.resolve())):
            root.removeHandler(handler)
            handler.close()


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def session_id(client):
    response = client.post("/api/sessions")
    assert response.status_code == 201
    return response.get_json()["session_id"]


@pytest.fixture
def drawn_session(client, session_id, two_cliques_rows):
    response = client.post(f"/api/sessions/{session_id}/draw", json={"rows": two_cliques_rows})
    assert response.status_code == 200
    return session_id


def test_health_endpoint(client):
    for path in ("/health", "/api/health"):
        response = client.get(path)
        assert response.status_code == 200
        assert json.loads(response.data)["status"] == "ok"

    sessions = client.get("/api/health").get_json()["sessions"]
    assert sessions["size"] == 0
    assert sessions["evictions"] == 0


# ==============================================================================
# Sessions / graph
# ==============================================================================

def test_draw_triangle(client, session_id, triangle_rows):
    response = client.post(f"/api/sessions/{session_id}/draw", json={"rows": triangle_rows})
    data = response.get_json()

    assert data["node_count"] == 3
    assert data["edge_count"] == 3
    assert {node["size"] for node in data["nodes"]} == {9}
    assert all("x" in node and "y" in node for node in data["nodes"])


def test_draw_without_rows(client, session_id):
    response = client.post(f"/api/sessions/{session_id}/draw", json={})
    assert response.status_code == 400
    assert response.get_json()["type"] == "InputDataError"


def test_draw_without_usable_rows(client, session_id):
    response = client.post(f"/api/sessions/{session_id}/draw", json={"rows": [["", "", ""]]})
    assert response.status_code == 400
    assert response.get_json()["type"] == "EmptyGraphError"


def test_draw_rejects_non_list(client, session_id):
    response = client.post(f"/api/sessions/{session_id}/draw", json={"rows": "A,B,1"})
    assert response.status_code == 400


def test_analytics_before_draw(client, session_id):
    response = client.post(f"/api/sessions/{session_id}/communities")
    assert response.status_code == 400
    assert response.get_json()["type"] == "NoGraphError"


def test_unknown_session(client):
    response = client.post("/api/sessions/missing/draw", json={"rows": [["A", "B", 1]]})
    assert response.status_code == 404


def test_dispose_session(client, session_id):
    assert client.delete(f"/api/sessions/{session_id}").status_code == 200
    assert client.get(f"/api/sessions/{session_id}/graph").status_code == 404


def test_highlight(client, drawn_session):
    response = client.post(f"/api/sessions/{drawn_session}/highlight", json={"node": "a2"})
    assert response.get_json()["highlighted"] == ["a1", "a2", "a3", "a4"]

    graph = client.get(f"/api/sessions/{drawn_session}/graph").get_json()
    dimmed = [n for n in graph["nodes"] if not n["highlighted"]]
    assert dimmed and all(n["label"] is None for n in dimmed)

    client.delete(f"/api/sessions/{drawn_session}/highlight")
    graph = client.get(f"/api/sessions/{drawn_session}/graph").get_json()
    assert not any(n["highlighted"] for n in graph["nodes"])


# ==============================================================================
# Communities
# ==============================================================================

def test_detect_and_clear_communities(client, drawn_session):
    response = client.post(f"/api/sessions/{drawn_session}/communities")
    data = response.get_json()
    assert data["detected"]
    assert data["community_count"] == 2
    assert sum(c["size"] for c in data["communities"]) == 8

    labels = client.get(f"/api/sessions/{drawn_session}/communities/labels").get_json()["labels"]
    assert [label["community"] for label in labels] == [0, 1]

    cleared = client.delete(f"/api/sessions/{drawn_session}/communities").get_json()
    assert not cleared["detected"]
    assert {n["color"] for n in cleared["graph"]["nodes"]} == {"#666"}


def test_resolution_steps(client, drawn_session):
    data = client.post(f"/api/sessions/{drawn_session}/resolution/increase").get_json()
    assert data["resolution"] == 1.2
    assert data["repartitioned"]
    assert data["notice"] is None

    for _ in range(7):
        data = client.post(f"/api/sessions/{drawn_session}/resolution/decrease").get_json()
    assert data["resolution"] == 0.0
    assert data["notice"] is not None
    assert not data["repartitioned"]


def test_resolution_unknown_direction(client, drawn_session):
    assert client.post(f"/api/sessions/{drawn_session}/resolution/sideways").status_code == 404


# ==============================================================================
# Centrality / snapshot
# ==============================================================================

def test_centrality_ranking(client, drawn_session):
    data = client.post(f"/api/sessions/{drawn_session}/centrality").get_json()
    assert data["sort"] == "degree"
    assert {e["node"] for e in data["entries"][:2]} == {"a1", "b1"}
    assert data["entries"][0]["rank"] == 1
    assert all(e["top"] for e in data["entries"])

    data = client.get(f"/api/sessions/{drawn_session}/centrality?sort=eigenvector").get_json()
    assert data["sort"] == "eigenvector"


def test_centrality_bad_sort(client, drawn_session):
    response = client.get(f"/api/sessions/{drawn_session}/centrality?sort=pagerank")
    assert response.status_code == 400


def test_snapshot_is_store_shaped(client, drawn_session, two_cliques_rows):
    client.post(f"/api/sessions/{drawn_session}/communities")
    client.post(f"/api/sessions/{drawn_session}/centrality")
    data = client.get(f"/api/sessions/{drawn_session}/snapshot").get_json()

    assert json.loads(data["data"]) == two_cliques_rows
    assert data["communityDetected"]
    assert all(isinstance(v, str) for v in data["communityNodes"].values())
    assert len(json.loads(data["centralityNodes"])) == 8


# ==============================================================================
# Inputs
# ==============================================================================

def test_samples(client):
    samples = client.get("/api/samples").get_json()["samples"]
    assert any(s["id"] == "sample-1" for s in samples)

    sample = client.get("/api/samples/sample-4").get_json()
    assert sample["rows"][0] == ["Source1", "Source2", "Weight"]

    assert client.get("/api/samples/unknown").status_code == 404


def test_csv_upload(client):
    data = {"file": (io.BytesIO(b"Source1,Source2,Weight\nA,B,2\nB,C,\n"), "edges.csv")}
    response = client.post("/api/uploads/csv", data=data, content_type="multipart/form-data")
    body = response.get_json()
    assert response.status_code == 200
    assert body["row_count"] == 2
    assert body["rows"] == [["A", "B", "2"], ["B", "C", ""]]


def test_csv_upload_requires_file(client):
    assert client.post("/api/uploads/csv").status_code == 400


# ==============================================================================
# Datasets / reports
# ==============================================================================

def test_dataset_crud(client, triangle_rows):
    response = client.post("/api/datasets", json={"user_id": "u1", "data": triangle_rows, "title": "Triangle"})
    assert response.status_code == 201
    dataset_id = response.get_json()["id"]

    listed = client.get("/api/datasets?user_id=u1").get_json()["datasets"]
    assert [d["id"] for d in listed] == [dataset_id]
    assert client.get("/api/datasets?all=true").get_json()["datasets"][0]["title"] == "Triangle"

    loaded = client.get(f"/api/datasets/{dataset_id}").get_json()
    assert loaded["data"] == triangle_rows

    assert client.delete(f"/api/datasets/{dataset_id}").status_code == 200
    assert client.get(f"/api/datasets/{dataset_id}").status_code == 404


def test_dataset_validation(client):
    assert client.post("/api/datasets", json={"user_id": "u1", "data": []}).status_code == 400
    assert client.post("/api/datasets", json={"data": [["A", "B", 1]]}).status_code == 400
    assert client.get("/api/datasets").status_code == 400


def test_report_lifecycle(client, drawn_session):
    client.post(f"/api/sessions/{drawn_session}/communities")
    client.post(f"/api/sessions/{drawn_session}/centrality")

    body = {
        "user_id": "u1",
        "session_id": drawn_session,
        "reportTitle": "Two groups",
        "author": "Kim",
        "content": "Two tight cliques.",
        "dataTitle": "Cliques",
    }
    response = client.post("/api/reports", json=body)
    assert response.status_code == 201
    report_id = response.get_json()["id"]

    loaded = client.get(f"/api/reports/{report_id}").get_json()
    assert loaded["reportTitle"] == "Two groups"
    assert isinstance(loaded["data"], list)
    assert all(isinstance(v, list) for v in loaded["communityNodes"].values())

    body["conclusion"] = "a1 and b1 bridge the groups."
    assert client.put(f"/api/reports/{report_id}", json=body).status_code == 200

    summary = client.get(f"/api/reports/{report_id}/summary").get_json()
    assert summary["conclusion"] == "a1 and b1 bridge the groups."
    assert {row["node"] for row in summary["centrality"][:2]} == {"a1", "b1"}

    reports = client.get("/api/reports?user_id=u1").get_json()["reports"]
    assert [r["id"] for r in reports] == [report_id]

    assert client.delete(f"/api/reports/{report_id}").status_code == 200
    assert client.get(f"/api/reports/{report_id}").status_code == 404


def test_report_requires_title(client, drawn_session):
    response = client.post("/api/reports", json={"user_id": "u1", "session_id": drawn_session})
    assert response.status_code == 400


def test_report_from_embedded_snapshot(client):
    body = {
        "user_id": "u1",
        "reportTitle": "Legacy",
        "data": [["A", "B", 1]],
        "communityNodes": {"0": ["A", "B"]},
    }
    report_id = client.post("/api/reports", json=body).get_json()["id"]
    loaded = client.get(f"/api/reports/{report_id}").get_json()
    assert loaded["communityNodes"] == {"0": ["A", "B"]}


def test_safe_json_encoder_nulls_nan():
    assert SafeJSONEncoder().encode({"x": float("nan")}) == '{"x": null}'


def test_api_log_handler_attached_once(app, tmp_path, fast_settings):
    create_app({"LOG_DIR": str(tmp_path / "logs"), "ANALYSIS_SETTINGS": fast_settings})
    api_logs = [
        h for h in logging.getLogger().handlers
        if getattr(h, "baseFilename", "").endswith("api.log")
        and h.baseFilename.startswith(str(tmp_path.resolve()))
    ]
    assert len(api_logs) == 1


def test_report_with_malformed_rows_is_rejected(client):
    body = {"user_id": "u1", "reportTitle": "Broken", "data": '{"not": "rows"}'}
    response = client.post("/api/reports", json=body)
    assert response.status_code == 400
    assert response.get_json()["type"] == "MalformedDocumentError"


def test_draw_rejects_non_object_body(client, session_id):
    response = client.post(f"/api/sessions/{session_id}/draw", json=[["A", "B", 1]])
    assert response.status_code == 400
    assert "error" in response.get_json()


def test_graph_in_three_dimensions(client, drawn_session):
    flat = client.get(f"/api/sessions/{drawn_session}/graph").get_json()
    deep = client.get(f"/api/sessions/{drawn_session}/graph?dim=3").get_json()
    assert all("z" in node for node in deep["nodes"])
    assert not any("z" in node for node in flat["nodes"])

    again = client.get(f"/api/sessions/{drawn_session}/graph").get_json()
    assert [(n["x"], n["y"]) for n in again["nodes"]] == [(n["x"], n["y"]) for n in flat["nodes"]]

    assert client.get(f"/api/sessions/{drawn_session}/graph?dim=4").status_code == 400
