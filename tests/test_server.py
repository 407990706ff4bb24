from fastapi.testclient import TestClient
from pipecanvas.server import app

client = TestClient(app)


def test_parse_editor_snapshot():
    body = {
        "nodes": [
            {"id": "1", "type": "customInput", "position": {"x": 100, "y": 100}, "data": {"inputName": "userInput"}},
            {"id": "2", "type": "llm", "data": {}},
            {"id": "3", "type": "customOutput", "data": {"outputName": "finalResult"}},
            {"id": "4", "type": "text", "data": {"text": "Translate this: {{ input }}"}},
        ],
        "edges": [{"id": "e1-2", "source": "1", "target": "2", "sourceHandle": "value", "targetHandle": "system"}],
    }
    response = client.post("/pipelines/parse", json=body)
    assert response.status_code == 200
    assert response.json() == {"num_nodes": 4, "num_edges": 1, "is_dag": True}


def test_parse_cycle():
    body = {
        "nodes": [{"id": "a", "kind": "transform"}],
        "edges": [{"source": "a", "source_port": "output", "target": "a", "target_port": "input"}],
    }
    assert client.post("/pipelines/parse", json=body).json()["is_dag"] is False


def test_parse_rejects_duplicate_node_ids():
    body = {"nodes": [{"id": "a", "kind": "note"}, {"id": "a", "kind": "note"}], "edges": []}
    assert client.post("/pipelines/parse", json=body).status_code == 422


def test_resolve_node():
    response = client.post("/nodes/resolve", json={"id": "t", "kind": "template-text",
                                                   "content": {"text": "{{a}} {{b}} {{c}}"}})
    assert response.status_code == 200
    data = response.json()
    assert [p["id"] for p in data["ports"]] == ["t-a", "t-b", "t-c", "output"]
    assert [data["layout"][k]["offset_percent"] for k in ("t-a", "t-b", "t-c")] == [25.0, 50.0, 75.0]
    assert data["layout"]["output"] == {"side": "right", "offset_percent": None}


def test_health():
    assert client.get("/health").json() == {"status": "ok"}
