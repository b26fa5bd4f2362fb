from urllib.parse import unquote
import json

from fastapi.testclient import TestClient

from pcforge.main import app


client = TestClient(app)


def test_categories_endpoint():
    resp = client.get("/api/categories")
    assert resp.status_code == 200
    body = resp.json()
    assert [c["id"] for c in body][:3] == ["cpu", "motherboard", "ram"]
    assert body[0]["label"] == "Processor"


def test_parts_endpoint_filters_and_paginates():
    resp = client.get("/api/parts/cpu", params={"q": "ryzen", "sort": "price-desc", "perPage": 2})
    assert resp.status_code == 200
    body = resp.json()
    assert [p["id"] for p in body["items"]] == ["cpu-7950x", "cpu-7800x3d"]
    assert body["totalItems"] == 4
    assert body["totalPages"] == 2
    assert body["brands"] == ["AMD", "Intel"]


def test_unknown_category_and_part_return_404():
    assert client.get("/api/parts/monitor").status_code == 404
    resp = client.get("/api/parts/cpu/cpu-nope")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "UNKNOWN_PART"


def test_stateless_check():
    resp = client.post(
        "/api/check",
        json={"parts": {"cpu": "cpu-13600k", "motherboard": "mb-b650-atx"}},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["issues"][0]["severity"] == "error"
    assert body["power"]["total"] == 200
    assert body["slotStates"]["cpu"] == "error"


def test_build_lifecycle():
    sid = "api-lifecycle"
    resp = client.put(f"/api/builds/{sid}/motherboard", json={"partId": "mb-b650-atx"})
    assert resp.status_code == 200

    blocked = client.put(f"/api/builds/{sid}/cpu", json={"partId": "cpu-13600k"})
    assert blocked.status_code == 409
    assert blocked.json()["error"]["code"] == "INCOMPATIBLE_PART"

    client.put(f"/api/builds/{sid}/cpu", json={"partId": "cpu-7600"})
    client.put(f"/api/builds/{sid}/psu", json={"partId": "psu-650"})
    summary = client.get(f"/api/builds/{sid}").json()
    assert [i["severity"] for i in summary["issues"]] == ["ok"]
    assert summary["psuLoadPercent"] == 22
    assert summary["build"]["psu"]["wattage"] == 650

    summary = client.delete(f"/api/builds/{sid}/psu").json()
    assert summary["build"]["psu"] is None

    summary = client.delete(f"/api/builds/{sid}").json()
    assert summary["issues"] == []


def test_free_mode_and_candidates():
    sid = "api-free"
    client.put(f"/api/builds/{sid}/motherboard", json={"partId": "mb-b650-atx"})

    strict = client.get(f"/api/builds/{sid}/candidates/cpu", params={"q": "intel"}).json()
    assert {c["compat"] for c in strict["items"]} == {"incompat"}

    client.put(f"/api/builds/{sid}/free-mode", json={"enabled": True})
    free = client.get(f"/api/builds/{sid}/candidates/cpu", params={"q": "intel"}).json()
    assert free["freeMode"] is True
    assert {c["compat"] for c in free["items"]} == {"free"}


def test_share_load_and_export():
    src, dst = "api-share-src", "api-share-dst"
    client.put(f"/api/builds/{src}/gpu", json={"partId": "gpu-4060"})
    client.post(f"/api/builds/{src}/add", params={"add": "storage:ssd-990pro-1tb"})

    link = client.get(f"/api/builds/{src}/share").json()["build"]
    assert json.loads(unquote(link)) == {"gpu": "gpu-4060", "storage": "ssd-990pro-1tb"}

    summary = client.post(f"/api/builds/{dst}/load", json={"build": link}).json()
    assert summary["build"]["gpu"]["id"] == "gpu-4060"

    bad = client.post(f"/api/builds/{dst}/load", json={"build": "{oops"})
    assert bad.status_code == 400

    text = client.get(f"/api/builds/{dst}/export")
    assert text.headers["content-type"].startswith("text/plain")
    assert "Total: $408" in text.text


def test_compare_endpoint():
    resp = client.get(
        "/api/compare/gpu",
        params=[("ids", "gpu-4060"), ("ids", "gpu-4090"), ("sessionId", "api-compare")],
    )
    assert resp.status_code == 200
    body = resp.json()
    vram = next(row for row in body["rows"] if row["key"] == "vram")
    assert vram["values"] == [8, 24]
    assert vram["best"] == 1
    assert body["compat"] == ["ok", "ok"]
