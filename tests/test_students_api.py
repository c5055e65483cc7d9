import pytest
from fastapi.testclient import TestClient

from main import app
from routers.students import get_roster


@pytest.fixture
def client(roster):
    app.dependency_overrides[get_roster] = lambda: roster
    yield TestClient(app)
    app.dependency_overrides.clear()


def _post(client, sno, name, korean, english, math, science):
    return client.post("/v1/students/", json={
        "sno": sno, "name": name,
        "korean": korean, "english": english, "math": math, "science": science,
    })


def test_create_student_returns_derived_fields(client):
    resp = _post(client, "S1", "Kim", 105, -5, 70, 80)

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["korean"] == 100
    assert body["data"]["english"] == 0
    assert body["data"]["total"] == 250
    assert body["data"]["average"] == 62.5
    assert body["data"]["grade"] == "D"
    assert "X-Latency-Ms" in resp.headers


def test_duplicate_student_maps_to_conflict(client):
    _post(client, "S1", "Kim", 50, 50, 50, 50)

    resp = _post(client, "S1", "Kim", 50, 50, 50, 50)

    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "DUPLICATE_STUDENT"


def test_list_students_sorted_by_score(client):
    _post(client, "S1", "Kim", 60, 60, 60, 60)
    _post(client, "S2", "Lee", 95, 95, 95, 95)
    _post(client, "S3", "Park", 80, 80, 80, 80)

    resp = client.get("/v1/students/", params={"sort": 3})

    assert resp.status_code == 200
    assert [s["sno"] for s in resp.json()["data"]] == ["S2", "S3", "S1"]


def test_list_students_with_invalid_sort(client):
    resp = client.get("/v1/students/", params={"sort": 9})

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_SORT_CRITERION"


def test_read_update_delete_student(client):
    _post(client, "S1", "Kim", 50, 50, 50, 50)

    resp = client.put("/v1/students/S1", json={"name": "Kim", "korean": 90, "english": 90, "math": 90, "science": 90})
    assert resp.json()["data"]["grade"] == "A"

    resp = client.get("/v1/students/S1")
    assert resp.json()["data"]["total"] == 360

    resp = client.delete("/v1/students/S1")
    assert resp.json()["success"] is True

    resp = client.get("/v1/students/S1")
    assert resp.json() == {
        "success": False,
        "error": {"code": 404, "message": "학생 정보를 찾을 수 없습니다"},
    }


def test_update_and_delete_unknown_student(client):
    resp = client.put("/v1/students/NOPE", json={"name": "Nobody"})
    assert resp.json()["success"] is False
    assert resp.json()["error"]["code"] == 404

    resp = client.delete("/v1/students/NOPE")
    assert resp.json()["success"] is False


def test_reload_reads_rows_added_outside_roster(client, seed):
    from conftest import student_row

    _post(client, "S1", "Kim", 50, 50, 50, 50)
    seed(student_row("S2", "Lee", 70, 70, 70, 70))

    resp = client.post("/v1/students/reload")

    assert resp.json()["data"] == {"loaded": 2, "state": "loaded"}
    assert client.get("/v1/students/S2").json()["data"]["grade"] == "C"


def test_health(client):
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert body["env"] in ("dev", "stage", "prod")


def test_overlong_sno_in_path_is_rejected(client):
    long_sno = "X" * 21

    assert client.put(f"/v1/students/{long_sno}", json={"name": "n"}).status_code == 422
    assert client.get(f"/v1/students/{long_sno}").status_code == 422
    assert client.delete(f"/v1/students/{long_sno}").status_code == 422


def test_insert_not_applied_uses_not_found_envelope():
    from conftest import FakeProvider, FakeResult
    from services.roster import RosterManager

    roster = RosterManager(FakeProvider(FakeResult(rowcount=0)))
    app.dependency_overrides[get_roster] = lambda: roster
    try:
        resp = _post(TestClient(app), "S1", "Kim", 50, 50, 50, 50)
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == 200
    assert resp.json()["success"] is False
    assert resp.json()["error"]["code"] == 404
