from io import BytesIO

from fastapi.testclient import TestClient
from openpyxl import load_workbook


def _auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _ids(client: TestClient, token: str, term_code: str, program_code: str) -> tuple:
    headers = _auth_headers(token)
    term = client.get(f"/api/terms/{term_code}", headers=headers)
    assert term.status_code == 200, term.text
    programs = client.get("/api/programs", headers=headers)
    assert programs.status_code == 200, programs.text
    program_id = next(item["id"] for item in programs.json() if item["code"] == program_code)
    return term.json()["id"], program_id


def _payload(term_id: int, program_id: int, **overrides) -> dict:
    data = {
        "termID": term_id,
        "programID": program_id,
        "academicCareer": "Undergraduate",
        "admitType": "New Student",
        "totalApplied": 40,
        "totalAdmitted": 20,
        "totalDenied": 10,
        "totalGrossDeposited": 8,
        "totalNetDeposited": 6,
    }
    data.update(overrides)
    return data


def test_reads_require_authentication(client: TestClient):
    for path in (
        "/api/admissionsdata",
        "/api/admissionsdata/term/Fall24",
        "/api/admissionsdata/summary/Fall24",
        "/api/departments",
        "/api/programs",
        "/api/terms",
    ):
        res = client.get(path)
        assert res.status_code == 401, path


def test_invalid_bearer_token_is_unauthorized(client: TestClient):
    res = client.get("/api/admissionsdata", headers=_auth_headers("not-a-jwt"))
    assert res.status_code == 401
    assert res.json()["detail"] == "Invalid token"


def test_viewer_can_list_admission_data(client: TestClient, viewer_token: str):
    res = client.get("/api/admissionsdata", headers=_auth_headers(viewer_token))
    assert res.status_code == 200, res.text
    rows = res.json()
    assert len(rows) == 4
    first = rows[0]
    assert set(first) == {
        "id",
        "academicCareerDescription",
        "academicPlanCode",
        "academicPlanDescription",
        "admitTypeDescription",
        "department",
        "program",
        "totalApplied",
        "totalAdmitted",
        "totalDenied",
        "totalGrossDeposited",
        "totalNetDeposited",
        "term",
        "academicYear",
    }
    assert first["term"] == "Fall24"
    assert first["academicYear"] == "2023-24"


def test_list_by_term_and_academic_year(client: TestClient, viewer_token: str):
    headers = _auth_headers(viewer_token)
    res = client.get("/api/admissionsdata/term/Fall23", headers=headers)
    assert res.status_code == 200
    assert [row["academicPlanCode"] for row in res.json()] == ["CAPS_BSED"]

    res = client.get("/api/admissionsdata/term/Winter99", headers=headers)
    assert res.status_code == 200
    assert res.json() == []

    res = client.get("/api/admissionsdata/academic-year/2023-24", headers=headers)
    assert res.status_code == 200
    assert sorted(row["term"] for row in res.json()) == ["Fall24", "Fall24", "Spring24"]


def test_malformed_academic_year_is_bad_request(client: TestClient, viewer_token: str):
    res = client.get("/api/admissionsdata/academic-year/2024", headers=_auth_headers(viewer_token))
    assert res.status_code == 400
    assert "YYYY-YY" in res.json()["detail"]

    for raw in ("2023-\u00b2", "2023-2024", "abcd-24"):
        res = client.get(f"/api/admissionsdata/academic-year/{raw}", headers=_auth_headers(viewer_token))
        assert res.status_code == 400, raw


def test_filter_endpoint_uses_camel_case_query(client: TestClient, viewer_token: str):
    headers = _auth_headers(viewer_token)
    res = client.get(
        "/api/admissionsdata/filter",
        params={"term": "Fall24", "department": "KIN", "admitType": "Transfer Student"},
        headers=headers,
    )
    assert res.status_code == 200, res.text
    rows = res.json()
    assert len(rows) == 1
    assert rows[0]["totalApplied"] == 38

    res = client.get(
        "/api/admissionsdata/filter",
        params={"term": "All", "program": "All", "academicCareer": "Undergraduate"},
        headers=headers,
    )
    assert res.status_code == 200
    assert len(res.json()) == 4


def test_summary_endpoint(client: TestClient, viewer_token: str):
    res = client.get("/api/admissionsdata/summary/Fall24", headers=_auth_headers(viewer_token))
    assert res.status_code == 200, res.text
    data = res.json()
    assert data["totalApplied"] == 633
    assert data["totalAdmitted"] == 143
    assert data["totalDenied"] == 204
    assert data["totalGrossDeposited"] == 53
    assert data["totalNetDeposited"] == 47
    assert round(data["admissionRate"], 2) == 22.59
    assert round(data["denialRate"], 2) == 32.23
    assert round(data["depositRate"], 2) == 32.87
    assert data["department"] is None


def test_summary_with_filters_and_missing_term(client: TestClient, viewer_token: str):
    headers = _auth_headers(viewer_token)
    res = client.get("/api/admissionsdata/summary/Fall23", params={"department": "EPS"}, headers=headers)
    assert res.status_code == 200
    assert res.json()["department"] == "EPS"
    assert res.json()["totalApplied"] == 212

    res = client.get("/api/admissionsdata/summary/Winter99", headers=headers)
    assert res.status_code == 404
    assert res.json()["detail"] == "No data found for term: Winter99"


def test_export_returns_workbook(client: TestClient, viewer_token: str):
    res = client.get("/api/admissionsdata/export", params={"term": "Fall24"}, headers=_auth_headers(viewer_token))
    assert res.status_code == 200, res.text
    assert res.headers["content-type"].startswith("application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")
    assert "admissions.xlsx" in res.headers["content-disposition"]

    sheet = load_workbook(BytesIO(res.content)).active
    rows = list(sheet.iter_rows(values_only=True))
    assert rows[0][0] == "Term"
    assert len(rows) == 3
    assert {row[0] for row in rows[1:]} == {"Fall24"}


def test_viewer_cannot_write(client: TestClient, viewer_token: str):
    headers = _auth_headers(viewer_token)
    term_id, program_id = _ids(client, viewer_token, "Summer22", "ELEDS_BSED")
    res = client.post("/api/admissionsdata", json=_payload(term_id, program_id), headers=headers)
    assert res.status_code == 403
    counters = {
        "totalApplied": 1,
        "totalAdmitted": 0,
        "totalDenied": 0,
        "totalGrossDeposited": 0,
        "totalNetDeposited": 0,
    }
    res = client.put("/api/admissionsdata/1", json=counters, headers=headers)
    assert res.status_code == 403
    res = client.delete("/api/admissionsdata/1", headers=headers)
    assert res.status_code == 403
    assert client.get("/api/admissionsdata/term/Summer22", headers=headers).json() == []


def test_staff_create_update_and_admin_delete(client: TestClient, staff_token: str, admin_token: str):
    staff = _auth_headers(staff_token)
    admin = _auth_headers(admin_token)
    term_id, program_id = _ids(client, staff_token, "Summer22", "ELEDS_BSED")

    created = client.post("/api/admissionsdata", json=_payload(term_id, program_id), headers=staff)
    assert created.status_code == 200, created.text
    record = created.json()
    record_id = record["id"]
    try:
        assert record["termID"] == term_id
        assert record["programID"] == program_id
        assert record["admitType"] == "New Student"
        assert record["totalApplied"] == 40

        duplicate = client.post("/api/admissionsdata", json=_payload(term_id, program_id), headers=staff)
        assert duplicate.status_code == 409

        counters = {
            "totalApplied": 50,
            "totalAdmitted": 25,
            "totalDenied": 12,
            "totalGrossDeposited": 9,
            "totalNetDeposited": 7,
        }
        updated = client.put(f"/api/admissionsdata/{record_id}", json=counters, headers=staff)
        assert updated.status_code == 200, updated.text
        assert updated.json()["totalApplied"] == 50
        assert updated.json()["termID"] == term_id

        forbidden = client.delete(f"/api/admissionsdata/{record_id}", headers=staff)
        assert forbidden.status_code == 403
    finally:
        deleted = client.delete(f"/api/admissionsdata/{record_id}", headers=admin)
    assert deleted.status_code == 204

    missing = client.delete(f"/api/admissionsdata/{record_id}", headers=admin)
    assert missing.status_code == 404
    assert client.get("/api/admissionsdata/term/Summer22", headers=staff).json() == []


def test_create_validation_and_missing_references(client: TestClient, staff_token: str):
    headers = _auth_headers(staff_token)
    term_id, program_id = _ids(client, staff_token, "Summer22", "ELEDS_BSED")

    negative = client.post("/api/admissionsdata", json=_payload(term_id, program_id, totalApplied=-1), headers=headers)
    assert negative.status_code == 400

    bad_enum = client.post("/api/admissionsdata", json=_payload(term_id, program_id, admitType="Visiting"), headers=headers)
    assert bad_enum.status_code == 400

    unknown_term = client.post("/api/admissionsdata", json=_payload(999999, program_id), headers=headers)
    assert unknown_term.status_code == 404

    unknown_program = client.post("/api/admissionsdata", json=_payload(term_id, 999999), headers=headers)
    assert unknown_program.status_code == 404


def test_update_unknown_record_is_not_found(client: TestClient, admin_token: str):
    counters = {
        "totalApplied": 1,
        "totalAdmitted": 0,
        "totalDenied": 0,
        "totalGrossDeposited": 0,
        "totalNetDeposited": 0,
    }
    res = client.put("/api/admissionsdata/999999", json=counters, headers=_auth_headers(admin_token))
    assert res.status_code == 404


def test_responses_carry_request_id(client: TestClient, viewer_token: str):
    res = client.get(
        "/api/admissionsdata/term/Fall24",
        headers={**_auth_headers(viewer_token), "X-Request-ID": "trace-123"},
    )
    assert res.headers["X-Request-ID"] == "trace-123"
