from fastapi.testclient import TestClient
from sqlmodel import Session

from sehd_api.services.catalog import CatalogService


def _auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def test_departments_sorted_by_name(client: TestClient, viewer_token: str):
    res = client.get("/api/departments", headers=_auth_headers(viewer_token))
    assert res.status_code == 200, res.text
    names = [item["name"] for item in res.json()]
    assert names == sorted(names)
    assert {item["code"] for item in res.json()} == {"KIN", "EPS", "TAL", "Undeclared"}
    assert {"id", "code", "name", "isActive", "createdAt", "modifiedAt"} <= set(res.json()[0])


def test_department_detail_lists_programs(client: TestClient, viewer_token: str):
    headers = _auth_headers(viewer_token)
    kin = next(item for item in client.get("/api/departments", headers=headers).json() if item["code"] == "KIN")
    res = client.get(f"/api/departments/{kin['id']}", headers=headers)
    assert res.status_code == 200
    data = res.json()
    assert data["code"] == "KIN"
    assert [program["code"] for program in data["programs"]] == ["EXPS_BSEXP", "SADM_BSED"]
    assert all(program["departmentID"] == kin["id"] for program in data["programs"])


def test_unknown_department_is_not_found(client: TestClient, viewer_token: str):
    res = client.get("/api/departments/999999", headers=_auth_headers(viewer_token))
    assert res.status_code == 404


def test_programs_include_department(client: TestClient, viewer_token: str):
    res = client.get("/api/programs", headers=_auth_headers(viewer_token))
    assert res.status_code == 200
    programs = res.json()
    assert len(programs) == 6
    exps = next(item for item in programs if item["code"] == "EXPS_BSEXP")
    assert exps["programType"] == "Bachelor's"
    assert exps["department"]["code"] == "KIN"


def test_programs_by_department_and_type(client: TestClient, viewer_token: str):
    headers = _auth_headers(viewer_token)
    res = client.get("/api/programs/department/EPS", headers=headers)
    assert res.status_code == 200
    assert {item["code"] for item in res.json()} == {"CAPS_BSED", "DASI_BS"}

    res = client.get("/api/programs/department/NOPE", headers=headers)
    assert res.status_code == 200
    assert res.json() == []

    res = client.get("/api/programs/type/Bachelor's", headers=headers)
    assert res.status_code == 200
    assert len(res.json()) == 6

    res = client.get("/api/programs/type/Doctoral", headers=headers)
    assert res.json() == []


def test_terms_listing_and_lookup(client: TestClient, viewer_token: str):
    headers = _auth_headers(viewer_token)
    res = client.get("/api/terms", headers=headers)
    assert res.status_code == 200
    terms = res.json()
    assert len(terms) == 9
    years = [item["year"] for item in terms]
    assert years == sorted(years, reverse=True)

    res = client.get("/api/terms/year/2023", headers=headers)
    assert [item["code"] for item in res.json()] == ["Fall23", "Spring23", "Summer23"]

    res = client.get("/api/terms/Fall24", headers=headers)
    assert res.status_code == 200
    assert res.json()["name"] == "Fall 2024"
    assert res.json()["season"] == "Fall"

    res = client.get("/api/terms/Winter99", headers=headers)
    assert res.status_code == 404


def test_catalog_service_skips_inactive_programs(session: Session):
    service = CatalogService(session)
    program = next(item for item in service.list_programs_by_department("TAL"))
    program.is_active = False
    session.add(program)
    session.commit()

    assert service.list_programs_by_department("TAL") == []
    assert "ELEDS_BSED" not in {item.code for item in service.list_programs()}
