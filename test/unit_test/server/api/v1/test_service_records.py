import uuid

import pytest
import pytest_asyncio
from httpx import AsyncClient

from fleet_tracker.core.database.entities import Vehicle

pytestmark = pytest.mark.asyncio

BASE = "/api/v1/service-records"


@pytest_asyncio.fixture
async def vehicle(repos):
    return await repos.vehicles.create(Vehicle(registration="AB12 CDE", make="Ford", model="Transit"))


@pytest_asyncio.fixture
async def foreign_vehicle(other_repos):
    return await other_repos.vehicles.create(Vehicle(registration="XY99 ZZZ", make="Vauxhall", model="Vivaro"))


def _payload(vehicle_id, **overrides):
    payload = {
        "vehicle_id": str(vehicle_id),
        "service_date": "2026-09-01",
        "service_type": "MOT",
        "cost": 54.85,
        "mileage": 45210,
        "provider": "Kwik Fit",
    }
    payload.update(overrides)
    return payload


async def test_create_and_list(client: AsyncClient, auth_headers, vehicle):
    response = await client.post(BASE, json=_payload(vehicle.id), headers=auth_headers)
    assert response.status_code == 201
    assert response.json()["cost"] == 54.85

    await client.post(BASE, json=_payload(vehicle.id, service_date="2026-10-01", service_type="Tyres"), headers=auth_headers)

    response = await client.get(BASE, params={"vehicle_id": str(vehicle.id)}, headers=auth_headers)
    assert response.status_code == 200
    assert [r["service_type"] for r in response.json()] == ["Tyres", "MOT"]


async def test_create_for_foreign_vehicle_is_forbidden(client: AsyncClient, auth_headers, foreign_vehicle):
    response = await client.post(BASE, json=_payload(foreign_vehicle.id), headers=auth_headers)
    assert response.status_code == 403
    assert response.json() == {"detail": "Vehicle does not belong to this user"}


async def test_create_for_unknown_vehicle(client: AsyncClient, auth_headers):
    vehicle_id = uuid.uuid4()
    response = await client.post(BASE, json=_payload(vehicle_id), headers=auth_headers)
    assert response.status_code == 404
    assert response.json() == {"detail": f"Vehicle {vehicle_id} not found"}


async def test_move_to_foreign_vehicle_is_forbidden(client: AsyncClient, auth_headers, vehicle, foreign_vehicle):
    created = (await client.post(BASE, json=_payload(vehicle.id), headers=auth_headers)).json()

    response = await client.patch(
        f"{BASE}/{created['id']}", json={"vehicle_id": str(foreign_vehicle.id)}, headers=auth_headers
    )
    assert response.status_code == 403


async def test_update_and_delete(client: AsyncClient, auth_headers, vehicle):
    created = (await client.post(BASE, json=_payload(vehicle.id), headers=auth_headers)).json()

    response = await client.patch(f"{BASE}/{created['id']}", json={"cost": 60}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["cost"] == 60
    assert response.json()["provider"] == "Kwik Fit"

    assert (await client.delete(f"{BASE}/{created['id']}", headers=auth_headers)).status_code == 204
    assert (await client.get(f"{BASE}/{created['id']}", headers=auth_headers)).status_code == 404


async def test_other_user_cannot_read(client: AsyncClient, auth_headers, other_auth_headers, vehicle):
    created = (await client.post(BASE, json=_payload(vehicle.id), headers=auth_headers)).json()

    assert (await client.get(f"{BASE}/{created['id']}", headers=other_auth_headers)).status_code == 404
    assert (await client.get(BASE, headers=other_auth_headers)).json() == []


async def test_negative_cost_rejected(client: AsyncClient, auth_headers, vehicle):
    response = await client.post(BASE, json=_payload(vehicle.id, cost=-1), headers=auth_headers)
    assert response.status_code == 422
