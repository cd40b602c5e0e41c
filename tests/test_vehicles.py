"""
Tests for the vehicle registry.
"""

import pytest

from app.core.errors import DuplicatePlate, NotOwner, VehicleInUse
from app.models.user import UserRole
from app.models.vehicle import Vehicle
from app.schemas.freight_job import FreightJobCreate
from app.services.freight_jobs import FreightJobService
from app.services.vehicles import VehicleService, normalize_plate


def _job(admin, service, vehicle_type="TRUCK"):
    return service.create(
        admin,
        FreightJobCreate(
            origin_city="Campinas",
            origin_state="SP",
            destination_city="Curitiba",
            destination_state="PR",
            vehicle_type=vehicle_type,
            price=800,
        ),
    )


@pytest.fixture
def vehicles(db):
    return VehicleService(db)


class TestRegister:
    def test_plate_normalized(self, vehicles, driver):
        v = vehicles.register(driver, "truck", "abc-1d23")
        assert v.plate == "ABC1D23"
        assert v.vehicle_type == "TRUCK"

    def test_normalize_plate(self):
        assert normalize_plate(" abc 1234 ") == "ABC1234"

    def test_duplicate_plate(self, vehicles, driver, make_user):
        vehicles.register(driver, "TRUCK", "ABC1234")
        other = make_user(role=UserRole.DRIVER)
        with pytest.raises(DuplicatePlate):
            vehicles.register(other, "VAN", "abc-1234")

    def test_list_for_owner(self, vehicles, driver, make_user):
        vehicles.register(driver, "TRUCK", "AAA0001")
        vehicles.register(make_user(), "TRUCK", "AAA0002")
        assert [v.plate for v in vehicles.list_for_owner(driver)] == ["AAA0001"]


class TestDelete:
    def test_delete_unused(self, vehicles, driver, db):
        v = vehicles.register(driver, "TRUCK", "AAA0001")
        assert vehicles.delete(driver, v.id) == (True, False)
        assert db.get(Vehicle, v.id) is None

    def test_delete_not_owner(self, vehicles, driver, make_user):
        v = vehicles.register(driver, "TRUCK", "AAA0001")
        with pytest.raises(NotOwner):
            vehicles.delete(make_user(), v.id)

    def test_delete_in_use(self, vehicles, driver, admin, db):
        v = vehicles.register(driver, "TRUCK", "AAA0001")
        jobs = FreightJobService(db)
        job = _job(admin, jobs)
        jobs.claim(driver, job.id)

        with pytest.raises(VehicleInUse):
            vehicles.delete(driver, v.id)

    def test_delete_with_history_retires(self, vehicles, driver, admin, db):
        v = vehicles.register(driver, "TRUCK", "AAA0001")
        jobs = FreightJobService(db)
        job = _job(admin, jobs)
        jobs.claim(driver, job.id)
        jobs.finalize(admin, job.id)

        assert vehicles.delete(driver, v.id) == (False, True)
        db.refresh(v)
        assert v.is_active is False
        # history intact
        assert jobs.get(job.id).vehicle_id == v.id
        # plate is free again
        again = vehicles.register(driver, "TRUCK", "AAA0001")
        assert again.id != v.id


class TestVehicleApi:
    def test_register_and_list(self, client, driver, auth_headers):
        headers = auth_headers(driver)
        resp = client.post(
            "/vehicles",
            json={"vehicle_type": "truck", "plate": "xyz9a87", "make": "Volvo", "model": "FH", "year": 2020},
            headers=headers,
        )
        assert resp.status_code == 201
        assert resp.json()["plate"] == "XYZ9A87"

        resp = client.get("/vehicles", headers=headers)
        assert [v["plate"] for v in resp.json()] == ["XYZ9A87"]

    def test_duplicate_plate_conflict(self, client, driver, make_user, auth_headers):
        body = {"vehicle_type": "TRUCK", "plate": "XYZ9A87"}
        assert client.post("/vehicles", json=body, headers=auth_headers(driver)).status_code == 201
        resp = client.post("/vehicles", json=body, headers=auth_headers(make_user()))
        assert resp.status_code == 409
        assert resp.json()["code"] == "DUPLICATE_PLATE"

    def test_delete_other_owner(self, client, driver, make_user, make_vehicle, auth_headers):
        v = make_vehicle(driver)
        resp = client.delete(f"/vehicles/{v.id}", headers=auth_headers(make_user()))
        assert resp.status_code == 403
        assert resp.json()["code"] == "NOT_OWNER"

    def test_requires_auth(self, client):
        assert client.get("/vehicles").status_code == 401
