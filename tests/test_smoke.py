from fastapi.testclient import TestClient
from aton_notation.main import app

client = TestClient(app)

def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True, "vocabulary_version": "2023.1"}

def test_decode_light():
    r = client.post("/decode/light", json={"value": "Mo(U)15s"})
    assert r.status_code == 200

    data = r.json()
    assert data["record"]["phase"] == "Mo"
    assert data["record"]["group"] == "U"
    assert data["record"]["period"] == 15
    assert data["record"]["valid"] is True
    assert data["tags"] == [
        {"k": "seamark:light:character", "v": "Mo"},
        {"k": "seamark:light:group", "v": "U"},
        {"k": "seamark:light:period", "v": "15"},
    ]

def test_decode_invalid_light_is_not_an_error():
    r = client.post("/decode/light", json={"value": None})
    assert r.status_code == 200
    assert r.json()["record"]["valid"] is False
    assert r.json()["tags"] == []

def test_decode_fog_signal():
    r = client.post("/decode/fog", json={"value": "HORN(3)30s   (2+2+2+2+2+20)"})
    assert r.status_code == 200

    record = r.json()["record"]
    assert record["category"] == "horn"
    assert record["group"] == 3
    assert record["sequence"] == "2+2+2+2+2+20"

def test_decode_design_code():
    r = client.post("/decode/design", json={"value": "1S9SC-AIS/R/MH"})
    assert r.status_code == 200

    data = r.json()
    assert data["record"]["structure_type"] == "SC"
    assert sorted(data["record"]["aids"]) == ["AIS", "MH", "R"]
    assert {"k": "seamark:design_code:aids", "v": "AIS;MH;R"} in data["tags"]

def test_import_csv():
    raw = (
        "Name,Type,Character,TH Design Code\n"
        "Needles,Lighthouse,Oc(2)WRG.20s,\n"
        "Lost Buoy,Buoy,,\n"
    ).encode("latin-1")

    files = {"file": ("atons.csv", raw, "text/csv")}
    r = client.post("/import", files=files)
    assert r.status_code == 200

    data = r.json()
    assert [a["uid"] for a in data["atons"]] == ["needles"]
    assert data["atons"][0]["children"][0]["tags"]["seamark:light:character"] == "Oc"
    assert data["report"]["summary"]["rows"] == 2
    assert data["report"]["summary"]["atons"] == 1
    assert data["report"]["warnings"][0]["issue"] == "invalid_design_code"

def test_import_latin1_semicolon_export():
    # Latin-1 export, as written by older spreadsheet tools
    raw = (
        "Name;Type;Character;Comment\n"
        "Montréal;Lighthouse;Fl.W.5s;Feu côté nord\n"
        "Gull Stream;Lighthouse;Q.G;Près de la jetée\n"
    ).encode("latin-1")

    files = {"file": ("atons.csv", raw, "text/csv")}
    r = client.post("/import", files=files)
    assert r.status_code == 200

    data = r.json()
    assert data["report"]["normalizations"]["delimiter"]["detected"] == ";"
    assert data["report"]["summary"]["atons"] == 2
    assert data["atons"][0]["tags"]["seamark:name"] == "Montréal"
    assert data["atons"][0]["tags"]["seamark:information"] == "Feu côté nord"
    assert data["atons"][1]["tags"]["seamark:information"] == "Près de la jetée"

def test_import_rejects_other_files():
    files = {"file": ("atons.xls", b"\xd0\xcf\x11\xe0", "application/vnd.ms-excel")}
    r = client.post("/import", files=files)
    assert r.status_code == 422
