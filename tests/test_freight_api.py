"""
End-to-end tests for the freight job endpoints.
"""

import pytest

from app.models.user import UserRole

JOB = {
    "origin_city": "Campinas",
    "origin_state": "SP",
    "destination_city": "Curitiba",
    "destination_state": "PR",
    "vehicle_type": "TRUCK",
    "price": 500.0,
    "contact_name": "Marcos",
    "contact_phone": "+5519999990000",
}


@pytest.fixture
def create_job(client, admin, auth_headers):
    def _create(**overrides):
        resp = client.post("/freight-jobs", json={**JOB, **overrides}, headers=auth_headers(admin))
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _create


def test_scenario(client, admin, driver, make_vehicle, create_job, auth_headers):
    make_vehicle(driver, "TRUCK")
    job = create_job()
    assert job["status"] == "DISPONIVEL"

    resp = client.post(f"/freight-jobs/{job['id']}/claim", headers=auth_headers(driver))
    assert resp.status_code == 200
    assert resp.json()["status"] == "RESERVADO"
    assert resp.json()["driver_id"] == driver.id

    resp = client.post(f"/freight-jobs/{job['id']}/finalize", headers=auth_headers(admin))
    assert resp.status_code == 200
    assert resp.json()["status"] == "FINALIZADO"
    assert resp.json()["delivered_at"] is not None

    resp = client.post(f"/freight-jobs/{job['id']}/finalize", headers=auth_headers(admin))
    assert resp.status_code == 409
    assert resp.json()["code"] == "NOT_RESERVED"


def test_non_numeric_price(client, admin, auth_headers):
    resp = client.post("/freight-jobs", json={**JOB, "price": "quinhentos"}, headers=auth_headers(admin))
    assert resp.status_code == 422
    assert resp.json()["code"] == "VALIDATION_ERROR"


def test_driver_cannot_create(client, driver, auth_headers):
    resp = client.post("/freight-jobs", json=JOB, headers=auth_headers(driver))
    assert resp.status_code == 403


def test_claim_without_vehicle(client, driver, create_job, auth_headers):
    job = create_job()
    resp = client.post(f"/freight-jobs/{job['id']}/claim", headers=auth_headers(driver))
    assert resp.status_code == 409
    assert resp.json()["code"] == "NO_COMPATIBLE_VEHICLE"


def test_second_claim_not_available(client, driver, make_user, make_vehicle, create_job, auth_headers):
    other = make_user(role=UserRole.DRIVER)
    make_vehicle(driver, "TRUCK")
    make_vehicle(other, "TRUCK")
    job = create_job()

    assert client.post(f"/freight-jobs/{job['id']}/claim", headers=auth_headers(driver)).status_code == 200
    resp = client.post(f"/freight-jobs/{job['id']}/claim", headers=auth_headers(other))
    assert resp.status_code == 409
    assert resp.json()["code"] == "NOT_AVAILABLE"


def test_claim_unknown_job(client, driver, make_vehicle, auth_headers):
    make_vehicle(driver, "TRUCK")
    resp = client.post("/freight-jobs/missing/claim", headers=auth_headers(driver))
    assert resp.status_code == 404


def test_available_listing(client, driver, create_job, auth_headers):
    create_job()
    create_job(vehicle_type="VAN", origin_city="Recife", origin_state="PE")
    headers = auth_headers(driver)

    first = client.get("/freight-jobs/available", headers=headers).json()
    second = client.get("/freight-jobs/available", headers=headers).json()
    assert first == second
    assert len(first) == 2

    vans = client.get("/freight-jobs/available", params={"vehicle_type": "VAN"}, headers=headers).json()
    assert [j["origin_city"] for j in vans] == ["Recife"]


def test_admin_paginated_listing(client, admin, create_job, auth_headers):
    for _ in range(3):
        create_job()
    resp = client.get("/freight-jobs", params={"page": 1, "page_size": 2}, headers=auth_headers(admin))
    assert resp.status_code == 200
    body = resp.json()
    assert len(body["data"]) == 2
    assert body["pagination"] == {"total": 3, "page": 1, "totalPages": 2}


def test_admin_listing_status_filter(client, admin, create_job, auth_headers):
    create_job()
    resp = client.get("/freight-jobs", params={"status": "RESERVADO"}, headers=auth_headers(admin))
    assert resp.json()["pagination"]["total"] == 0


def test_paginated_listing_admin_only(client, driver, auth_headers):
    assert client.get("/freight-jobs", headers=auth_headers(driver)).status_code == 403


def test_delete_reserved_refused(client, admin, driver, make_vehicle, create_job, auth_headers):
    make_vehicle(driver, "TRUCK")
    job = create_job()
    client.post(f"/freight-jobs/{job['id']}/claim", headers=auth_headers(driver))

    resp = client.delete(f"/freight-jobs/{job['id']}", headers=auth_headers(admin))
    assert resp.status_code == 409
    assert resp.json()["code"] == "JOB_IN_USE"


def test_delete_available(client, admin, create_job, auth_headers):
    job = create_job()
    assert client.delete(f"/freight-jobs/{job['id']}", headers=auth_headers(admin)).status_code == 200
    assert client.get(f"/freight-jobs/{job['id']}", headers=auth_headers(admin)).status_code == 404


def test_my_jobs_and_events(client, admin, driver, make_vehicle, create_job, auth_headers):
    make_vehicle(driver, "TRUCK")
    job = create_job()
    create_job()
    client.post(f"/freight-jobs/{job['id']}/claim", headers=auth_headers(driver))

    mine = client.get("/freight-jobs/mine", headers=auth_headers(driver)).json()
    assert [j["id"] for j in mine] == [job["id"]]

    events = client.get(f"/freight-jobs/{job['id']}/events", headers=auth_headers(admin)).json()
    assert [e["event_type"] for e in events] == ["CREATED", "CLAIMED"]
