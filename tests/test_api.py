"""End-to-end tests through the HTTP layer."""
from datetime import date

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from conftest import FakeAttendance, morning_flow_request
from studio_planner.api.routes.dependencies import get_attendance_provider, get_slot_registry, get_studio_ops
from studio_planner.db.database import get_db
from studio_planner.integrations.studio_ops import StudioOpsClient
from studio_planner.main import create_app

DAY = "2026-03-02"


@pytest.fixture
def attendance() -> FakeAttendance:
    return FakeAttendance({("slot-morning", date(2026, 3, 2)): ["m-1", "m-2", "m-2", "m-3"]})


@pytest_asyncio.fixture
async def client(async_db_session, catalog, attendance, slot_registry):
    app = create_app()

    async def override_get_db():
        yield async_db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_attendance_provider] = lambda: attendance
    app.dependency_overrides[get_slot_registry] = lambda: slot_registry

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def template_id(client) -> str:
    response = await client.post("/templates", json=morning_flow_request().model_dump(mode="json"))
    assert response.status_code == 201
    return response.json()["id"]


@pytest.mark.asyncio
async def test_create_and_fetch_template(client, template_id):
    response = await client.get(f"/templates/{template_id}")

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Morning Flow"
    assert body["version"] == 1
    assert [s["section_type"] for s in body["sections"]] == [
        "warm_up",
        "main_sequence",
        "breathing",
        "relaxation",
    ]


@pytest.mark.asyncio
async def test_unknown_template_is_404(client):
    response = await client.get("/templates/missing")

    assert response.status_code == 404
    assert response.json()["errors"][0]["code"] == "NF_PLANTEMPLATE_001"


@pytest.mark.asyncio
async def test_stale_template_edit_is_409(client, template_id):
    first = await client.patch(f"/templates/{template_id}", json={"name": "One", "expected_version": 1})
    second = await client.patch(f"/templates/{template_id}", json={"name": "Two", "expected_version": 1})

    assert first.status_code == 200
    assert first.json()["version"] == 2
    assert second.status_code == 409
    assert second.json()["errors"][0]["code"] == "CF_TEMPLATE_STALE"


@pytest.mark.asyncio
async def test_clearing_required_template_field_is_400(client, template_id):
    response = await client.patch(f"/templates/{template_id}", json={"name": None})

    assert response.status_code == 400
    assert response.json()["errors"][0]["code"] == "VAL_NAME_001"
    unchanged = (await client.get(f"/templates/{template_id}")).json()
    assert unchanged["name"] == "Morning Flow"
    assert unchanged["version"] == 1


@pytest.mark.asyncio
async def test_double_allocation_is_409(client, template_id):
    payload = {"template_id": template_id, "slot_id": "slot-morning", "date": DAY}

    first = await client.post("/allocations", json=payload)
    second = await client.post("/allocations", json=payload)

    assert first.status_code == 201
    assert first.json()["status"] == "scheduled"
    assert second.status_code == 409
    assert second.json()["errors"][0]["code"] == "CF_ALLOCATION_EXISTS"


@pytest.mark.asyncio
async def test_allocate_to_all_slots(client, template_id):
    await client.post("/allocations", json={"template_id": template_id, "slot_id": "slot-noon", "date": DAY})

    response = await client.post("/allocations/all-slots", json={"template_id": template_id, "date": DAY})

    assert response.status_code == 200
    body = response.json()
    assert [a["slot_id"] for a in body["created"]] == ["slot-morning", "slot-evening"]
    assert body["skipped"] == ["slot-noon"]
    assert body["is_complete"] is False


@pytest.mark.asyncio
async def test_record_execution_closes_allocation(client, template_id):
    allocation = (
        await client.post("/allocations", json={"template_id": template_id, "slot_id": "slot-morning", "date": DAY})
    ).json()

    response = await client.post(
        "/executions",
        json={"template_id": template_id, "slot_id": "slot-morning", "date": DAY, "instructor": "Asha"},
    )

    assert response.status_code == 201
    execution = response.json()
    assert execution["member_ids"] == ["m-1", "m-2", "m-3"]
    assert execution["attendee_count"] == 3
    assert execution["snapshot"][0]["section_type"] == "warm_up"

    refreshed = (await client.get(f"/allocations/{allocation['id']}")).json()
    assert refreshed["status"] == "executed"
    assert refreshed["execution_id"] == execution["id"]

    duplicate = await client.post(
        "/executions",
        json={"template_id": template_id, "slot_id": "slot-morning", "date": DAY},
    )
    assert duplicate.status_code == 409


@pytest.mark.asyncio
async def test_executions_cannot_be_changed(client, template_id):
    execution = (
        await client.post("/executions", json={"template_id": template_id, "slot_id": "slot-morning", "date": DAY})
    ).json()

    patched = await client.patch(f"/executions/{execution['id']}", json={"notes": "edited"})
    deleted = await client.delete(f"/executions/{execution['id']}")

    assert patched.status_code == 405
    assert deleted.status_code == 405
    assert (await client.get(f"/executions/{execution['id']}")).status_code == 200


@pytest.mark.asyncio
async def test_overuse_and_reports_after_execution(client, template_id):
    await client.post("/executions", json={"template_id": template_id, "slot_id": "slot-morning", "date": DAY})

    overuse = (await client.get(f"/templates/{template_id}/overuse")).json()
    focus = (await client.get("/analytics/body-region-focus")).json()
    effectiveness = (await client.get("/analytics/plan-effectiveness")).json()

    assert overuse["is_overused"] is True
    assert focus[0]["region"] == "spine"
    assert focus[0]["percentage"] == 25
    assert effectiveness[0]["template_id"] == template_id
    assert effectiveness[0]["total_attendees"] == 3


@pytest.mark.asyncio
async def test_member_history(client, template_id):
    await client.post("/executions", json={"template_id": template_id, "slot_id": "slot-morning", "date": DAY})

    attended = (await client.get("/executions/members/m-2")).json()
    absent = (await client.get("/executions/members/m-9")).json()

    assert len(attended) == 1
    assert absent == []


@pytest.mark.asyncio
async def test_reconcile_endpoint(client, template_id):
    response = await client.post("/admin/reconcile")

    assert response.status_code == 200
    assert response.json() == {
        "executions_checked": 0,
        "allocations_marked_executed": 0,
        "templates_usage_corrected": 0,
    }


@pytest.mark.asyncio
async def test_health_and_metrics(client):
    health = await client.get("/health")
    metrics = await client.get("/metrics")

    assert health.json() == {"status": "healthy"}
    assert "X-Request-ID" in health.headers
    assert metrics.status_code == 200
    assert "planner_allocations_total" in metrics.text


@pytest.mark.asyncio
async def test_exercise_catalog_routes(client):
    flow = {
        "id": "sun_salutation",
        "name": "Sun Salutation",
        "category": "compound_flow",
        "child_sequence": ["tadasana", "bhujangasana"],
    }

    created = await client.post("/exercises", json=flow)
    sequence = await client.get("/exercises/sun_salutation/sequence")
    by_region = await client.get("/exercises", params={"region": "nervous_system"})
    bad_flow = await client.post("/exercises", json={**flow, "id": "half_flow", "child_sequence": ["tadasana"]})

    assert created.status_code == 201
    assert [e["id"] for e in sequence.json()] == ["tadasana", "bhujangasana"]
    assert {e["id"] for e in by_region.json()} == {"anulom_vilom", "shavasana"}
    assert bad_flow.status_code == 400

    assert (await client.delete("/exercises/tadasana")).status_code == 204
    assert (await client.get("/exercises/tadasana")).status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "upstream_status,expected",
    [
        (200, {"status": "healthy", "studio_ops": "reachable"}),
        (503, {"status": "unhealthy", "studio_ops": "unreachable", "base_url": "http://studio-ops.test/api"}),
    ],
)
async def test_studio_ops_health(upstream_status, expected):
    studio_ops = StudioOpsClient(
        base_url="http://studio-ops.test/api",
        api_token="secret",
        transport=httpx.MockTransport(lambda request: httpx.Response(upstream_status, json={"slot_ids": []})),
    )
    app = create_app()
    app.dependency_overrides[get_studio_ops] = lambda: studio_ops

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.get("/health/studio-ops")
    await studio_ops.close()

    assert response.status_code == 200
    assert response.json() == expected
