from fastapi.testclient import TestClient
from jsonsemantic.main import app

client = TestClient(app)

def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}

def test_policy():
    r = client.get("/policy")
    assert r.status_code == 200

    data = r.json()
    assert "executeOnce" in data["optional_fields"]
    assert data["optional_fields"] == sorted(data["optional_fields"])
    assert data["key_field"] == "key"
    assert data["max_depth"] > 0

def test_compare_suppresses_noop_update():
    state = '{"id":"n1","name":"A"}'
    config = '{ "name": "A", "id": "n1", "executeOnce": false, "notes": null }'

    r = client.post("/compare", json={"state": state, "config": config})
    assert r.status_code == 200
    assert r.json() == {"equal": True, "planned_value": state}

def test_compare_reports_real_change():
    state = '{"position":[100,200]}'
    config = '{"position":[200,100]}'

    r = client.post("/compare", json={"state": state, "config": config})
    assert r.status_code == 200
    assert r.json() == {"equal": False, "planned_value": config}

def test_compare_invalid_json_is_a_change():
    r = client.post("/compare", json={"state": "{bad}", "config": '{"k":1}'})
    assert r.status_code == 200
    assert r.json() == {"equal": False, "planned_value": '{"k":1}'}

def test_compare_optional_fields_override():
    body = {"state": '{"a":1,"x":2}', "config": '{"a":1}'}
    assert client.post("/compare", json=body).json()["equal"] is False

    body["optional_fields"] = ["x"]
    assert client.post("/compare", json=body).json()["equal"] is True

def test_canonicalize():
    r = client.post("/canonicalize", json={"text": '{ "b": 1, "a": [2, 1.0] }'})
    assert r.status_code == 200

    data = r.json()
    assert data["canonical"] == '{"a":[2,1],"b":1}'
    assert len(data["sha256"]) == 64

def test_canonicalize_rejects_malformed_input():
    r = client.post("/canonicalize", json={"text": '{"a": }'})
    assert r.status_code == 422

    detail = r.json()["detail"]
    assert detail["error"] == "parse_error"
    assert detail["position"] == 6
    assert detail["line"] == 1

def test_canonicalize_rejects_deep_nesting():
    r = client.post("/canonicalize", json={"text": "[" * 5000 + "]" * 5000})
    assert r.status_code == 422
    assert r.json()["detail"]["error"] == "too_deeply_nested"

def test_canonicalize_file_latin1():
    # Include Latin-1 characters to force non-UTF-8 handling
    raw = '{"city": "Montréal", "note": "café crème brûlée à la carte, très élégant"}'.encode("latin-1")

    files = {"file": ("state.json", raw, "application/json")}
    r = client.post("/canonicalize/file", files=files)
    assert r.status_code == 200

    data = r.json()
    assert data["filename"] == "state.json"
    assert data["decoding"]["decode_used"] != "utf-8-sig"
    assert "Montréal" in data["canonical"]
    assert data["canonical"].startswith('{"city":')

def test_canonicalize_file_utf8_bom():
    raw = b'\xef\xbb\xbf{"b": 1, "a": 2}'

    files = {"file": ("state.json", raw, "application/json")}
    r = client.post("/canonicalize/file", files=files)
    assert r.status_code == 200
    assert r.json()["canonical"] == '{"a":2,"b":1}'
    assert r.json()["decoding"] == {"detected": None, "decode_used": "utf-8-sig", "decode_fallback": False}

def test_canonicalize_file_requires_json_extension():
    files = {"file": ("state.csv", b"{}", "text/csv")}
    r = client.post("/canonicalize/file", files=files)
    assert r.status_code == 422

def test_compare_identical_invalid_json_is_a_change():
    r = client.post("/compare", json={"state": "{bad", "config": "{bad"})
    assert r.status_code == 200
    assert r.json() == {"equal": False, "planned_value": "{bad"}

def test_canonicalize_rejects_number_out_of_range():
    r = client.post("/canonicalize", json={"text": '{"n": 1e999999999999999999999}'})
    assert r.status_code == 422
    assert r.json()["detail"]["error"] == "parse_error"

def test_canonicalize_lone_surrogate():
    r = client.post("/canonicalize", json={"text": '"\\ud800"'})
    assert r.status_code == 200

    canonical = r.json()["canonical"]
    assert canonical == '"\\ud800"'
    canonical.encode("utf-8")
