from datetime import datetime
import uuid

import pytest

from occupancy_service.app.core.exceptions import StateError
from occupancy_service.app.crud.space_sites import maintenance_stage
from occupancy_service.app.models.space_sites.space_inspections import InspectionStatus, SpaceInspection
from occupancy_service.app.models.space_sites.space_maintenances import MaintenanceStatus, SpaceMaintenance
from occupancy_service.app.models.space_sites.space_settlements import SpaceSettlement
from occupancy_service.app.schemas.space_sites.space_occupancy_schemas import (
    MaintenanceComplete, MaintenanceRequest
)


def _inspection(status=InspectionStatus.completed, maintenance_required=True):
    return SpaceInspection(status=status, maintenance_required=maintenance_required)


def _request(**kwargs):
    return MaintenanceRequest(inspection_id=uuid.uuid4(), **kwargs)


def test_create_opens_required_maintenance():
    maintenance = SpaceMaintenance()

    maintenance_stage.create(maintenance, _inspection(), _request(notes="Retile bathroom"))

    assert maintenance.status == MaintenanceStatus.required_open
    assert maintenance.completed is False
    assert maintenance.notes == "Retile bathroom"


def test_create_needs_completed_inspection():
    with pytest.raises(StateError):
        maintenance_stage.create(
            SpaceMaintenance(), _inspection(status=InspectionStatus.requested), _request())


def test_create_rejects_second_maintenance():
    inspection = _inspection()
    inspection.maintenance = SpaceMaintenance()

    with pytest.raises(StateError):
        maintenance_stage.create(SpaceMaintenance(), inspection, _request())


def test_override_is_rejected_once_settled():
    with pytest.raises(StateError):
        maintenance_stage.create(
            SpaceMaintenance(),
            _inspection(maintenance_required=False),
            _request(),
            settlement=SpaceSettlement(settled=True),
        )


def test_waiver_closes_immediately():
    maintenance = SpaceMaintenance()

    maintenance_stage.create(
        maintenance, _inspection(), _request(maintenance_required=False),
        now=datetime(2024, 7, 2, 9, 0))

    assert maintenance.completed is True
    assert maintenance.status == MaintenanceStatus.completed
    assert maintenance.completed_at == datetime(2024, 7, 2, 9, 0)


def test_complete_before_create_is_a_state_error():
    with pytest.raises(StateError):
        maintenance_stage.complete(None, MaintenanceComplete())


def test_complete_records_when_and_who():
    maintenance = SpaceMaintenance()
    maintenance_stage.create(maintenance, _inspection(), _request())
    worker = uuid.uuid4()

    maintenance_stage.complete(maintenance, MaintenanceComplete(
        completed_at=datetime(2024, 7, 5, 17, 30), completed_by=worker))

    assert maintenance.completed is True
    assert maintenance.completed_by == worker
    assert maintenance.completed_at == datetime(2024, 7, 5, 17, 30)

    with pytest.raises(StateError):
        maintenance_stage.complete(maintenance, MaintenanceComplete())
