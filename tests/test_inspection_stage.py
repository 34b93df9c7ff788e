from datetime import datetime, timedelta, timezone
import uuid

import pytest

from occupancy_service.app.core.exceptions import StateError, ValidationError
from occupancy_service.app.crud.space_sites import inspection_stage
from occupancy_service.app.models.space_sites.space_inspections import InspectionStatus, SpaceInspection
from occupancy_service.app.schemas.space_sites.space_occupancy_schemas import (
    InspectionComplete, InspectionItemCreate, InspectionRequest
)

NOW = datetime(2024, 7, 1, 12, 0, tzinfo=timezone.utc)


def _inspection():
    return SpaceInspection(status=InspectionStatus.requested)


def _request(scheduled_date):
    return InspectionRequest(
        handover_id=uuid.uuid4(),
        inspected_by_user_id=uuid.uuid4(),
        scheduled_date=scheduled_date,
    )


def test_request_requires_scheduled_date():
    with pytest.raises(ValidationError):
        inspection_stage.request(_inspection(), _request(None), now=NOW)


def test_request_rejects_past_date():
    with pytest.raises(ValidationError):
        inspection_stage.request(
            _inspection(), _request(NOW - timedelta(days=1)), now=NOW)


def test_request_allows_earlier_time_on_the_same_day():
    inspection = _inspection()

    inspection_stage.request(
        inspection, _request(NOW.replace(hour=8)), now=NOW)

    assert inspection.scheduled_date == datetime(2024, 7, 1, 8, 0)
    assert inspection.status == InspectionStatus.requested


def test_complete_without_damage_skips_maintenance():
    inspection = _inspection()

    required = inspection_stage.complete(
        inspection, InspectionComplete(walls_condition="good"), now=NOW)

    assert required is False
    assert inspection.maintenance_required is False
    assert inspection.status == InspectionStatus.completed
    assert inspection.walls_condition == "good"
    assert inspection.inspection_date == datetime(2024, 7, 1, 12, 0)


def test_complete_with_damage_requires_maintenance():
    inspection = _inspection()

    required = inspection_stage.complete(
        inspection, InspectionComplete(damage_found=True, damage_notes="Cracked tiles"), now=NOW)

    assert required is True
    assert inspection.maintenance_required is True
    assert inspection.damage_notes == "Cracked tiles"


def test_forced_maintenance_without_damage():
    inspection = _inspection()

    assert inspection_stage.complete(
        inspection, InspectionComplete(force_maintenance=True), now=NOW) is True
    assert inspection.damage_found is False


def test_completed_inspection_is_immutable():
    inspection = _inspection()
    inspection_stage.complete(inspection, InspectionComplete(), now=NOW)

    with pytest.raises(StateError):
        inspection_stage.complete(inspection, InspectionComplete(damage_found=True), now=NOW)
    with pytest.raises(StateError):
        inspection_stage.request(inspection, _request(NOW), now=NOW)
    with pytest.raises(StateError):
        inspection_stage.check_items(inspection, [InspectionItemCreate(item_name="Door")])

    assert inspection.maintenance_required is False


def test_items_need_a_name():
    with pytest.raises(ValidationError):
        inspection_stage.check_items(_inspection(), [InspectionItemCreate(item_name=" ")])
    with pytest.raises(ValidationError):
        inspection_stage.check_items(_inspection(), [])
