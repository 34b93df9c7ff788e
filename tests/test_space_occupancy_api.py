import uuid
from decimal import Decimal

from shared.utils.app_status_code import AppStatusCode


def _move_in(client, space_id):
    return client.post("/api/spaces/move-in-request", json={
        "space_id": str(space_id),
        "occupant_type": "tenant",
        "occupant_name": "Asha Menon",
        "move_in_date": "2024-01-01",
    })


def test_get_occupancy_of_vacant_space(client, create_space):
    space = create_space()

    response = client.get(f"/api/spaces/{space.id}/occupancy")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "Success"
    assert body["data"]["current"]["status"] == "vacant"
    assert body["data"]["workflow"]["permitted_actions"] == ["move_in"]


def test_full_move_out_over_http(client, create_space):
    space = create_space()
    assert _move_in(client, space.id).status_code == 200

    response = client.post("/api/spaces/move-out-request", json={
        "space_id": str(space.id), "move_out_date": "2024-06-30"})
    assert response.status_code == 200
    occupancy_id = response.json()["data"]["current"]["id"]

    response = client.put(f"/api/spaces/handover/{occupancy_id}/complete", json={
        "handover_date": "2024-06-30T10:00:00",
        "handover_to_person": "Facility Desk",
    })
    assert response.status_code == 200
    inspection_id = response.json()["data"]["current"]["inspection"]["id"]

    response = client.post(f"/api/spaces/inspection/{inspection_id}/complete",
                           json={"damage_found": False})
    assert response.status_code == 200
    settlement_id = response.json()["data"]["current"]["settlement"]["id"]

    response = client.post(f"/api/spaces/settlement/{settlement_id}/complete",
                           json={"damage_charges": "10", "pending_dues": "5.5"})
    assert response.status_code == 200
    assert response.json()["data"]["current"]["status"] == "vacant"

    history = client.get(f"/api/spaces/{space.id}/occupancy/history").json()["data"]
    assert len(history) == 1
    assert Decimal(history[0]["final_amount"]) == Decimal("15.50")

    timeline = client.post(f"/api/spaces/{space.id}/occupancy/timeline").json()["data"]
    assert timeline[-1]["event"] == "moved_out"

    cycles = client.get(f"/api/spaces/{space.id}/occupancy/cycles").json()["data"]
    assert cycles[0]["closed"] is True


def test_second_move_in_is_a_conflict(client, create_space):
    space = create_space()
    _move_in(client, space.id)

    response = _move_in(client, space.id)

    assert response.status_code == 409
    assert response.json()["status"] == "Failure"
    assert response.json()["status_code"] == AppStatusCode.OPERATION_ERROR


def test_missing_handover_fields_are_invalid_input(client, create_space):
    space = create_space()
    _move_in(client, space.id)
    response = client.post("/api/spaces/move-out-request", json={"space_id": str(space.id)})
    occupancy_id = response.json()["data"]["current"]["id"]

    response = client.put(f"/api/spaces/handover/{occupancy_id}/complete")

    assert response.status_code == 422
    assert response.json()["status_code"] == AppStatusCode.INVALID_INPUT
    assert "handover_to_person" in response.json()["message"]


def test_unknown_inspection_is_not_found(client):
    response = client.get(f"/api/spaces/inspection/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json()["status_code"] == AppStatusCode.DATA_NOT_FOUND


def test_negative_amount_is_rejected(client, create_space):
    space = create_space()
    _move_in(client, space.id)
    response = client.post("/api/spaces/move-out-request", json={"space_id": str(space.id)})
    occupancy_id = response.json()["data"]["current"]["id"]
    response = client.put(f"/api/spaces/handover/{occupancy_id}/complete", json={
        "handover_date": "2024-06-30T10:00:00", "handover_to_person": "Desk"})
    inspection_id = response.json()["data"]["current"]["inspection"]["id"]
    response = client.post(f"/api/spaces/inspection/{inspection_id}/complete", json={})
    settlement_id = response.json()["data"]["current"]["settlement"]["id"]

    response = client.post(f"/api/spaces/settlement/{settlement_id}/complete",
                           json={"pending_dues": "-20"})

    assert response.status_code == 422
    current = client.get(f"/api/spaces/{space.id}/occupancy").json()["data"]["current"]
    assert current["status"] == "recently_vacated"
    assert current["settlement"]["settled"] is False


def test_inspection_items_response_names_inspector(client, create_space, create_user):
    space = create_space()
    inspector = create_user()
    _move_in(client, space.id)
    response = client.post("/api/spaces/move-out-request", json={"space_id": str(space.id)})
    occupancy_id = response.json()["data"]["current"]["id"]
    response = client.put(f"/api/spaces/handover/{occupancy_id}/complete", json={
        "handover_date": "2024-06-30T10:00:00", "handover_to_person": "Desk"})
    current = response.json()["data"]["current"]
    response = client.post("/api/spaces/inspection/request", json={
        "handover_id": current["handover"]["id"],
        "inspected_by_user_id": str(inspector.id),
        "scheduled_date": "2999-01-01T09:00:00",
    })
    assert response.status_code == 200

    response = client.post(f"/api/spaces/inspection/{current['inspection']['id']}/items",
                           json=[{"item_name": "Main door", "condition": "good"}])

    assert response.status_code == 200
    assert response.json()["data"]["inspector_name"] == "Ravi Kumar"
