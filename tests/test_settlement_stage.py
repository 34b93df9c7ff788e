from decimal import Decimal

import pytest

from occupancy_service.app.core.exceptions import StateError, ValidationError
from occupancy_service.app.crud.space_sites import settlement_stage
from occupancy_service.app.models.space_sites.space_inspections import InspectionStatus, SpaceInspection
from occupancy_service.app.models.space_sites.space_maintenances import MaintenanceStatus, SpaceMaintenance
from occupancy_service.app.models.space_sites.space_settlements import SpaceSettlement
from occupancy_service.app.schemas.space_sites.space_occupancy_schemas import SettlementComplete


def _clean_inspection():
    return SpaceInspection(status=InspectionStatus.completed, maintenance_required=False)


@pytest.mark.parametrize("value, expected", [
    (None, Decimal("0.00")),
    ("", None),
    ("250", Decimal("250.00")),
    (" 99.99 ", Decimal("99.99")),
    ("99999999.99", Decimal("99999999.99")),
    (12.5, Decimal("12.50")),
    (Decimal("0"), Decimal("0.00")),
])
def test_coerce_amount(value, expected):
    if expected is None:
        with pytest.raises(ValidationError):
            settlement_stage.coerce_amount(value, "pending_dues")
    else:
        assert settlement_stage.coerce_amount(value, "pending_dues") == expected


@pytest.mark.parametrize("value", [
    "-1", "abc", "NaN", "Infinity", True, -0.01,
    " 99.999 ", "0.005", 10.125, "100000000", "1E+8",
])
def test_coerce_amount_rejects_bad_values(value):
    with pytest.raises(ValidationError):
        settlement_stage.coerce_amount(value, "damage_charges")


def test_complete_computes_final_amount():
    settlement = SpaceSettlement(settled=False)

    settlement_stage.complete(
        settlement,
        SettlementComplete(damage_charges="150.50", pending_dues="49.5"),
        _clean_inspection(),
        None,
    )

    assert settlement.settled is True
    assert settlement.final_amount == Decimal("200.00")
    assert settlement.settled_at is not None


def test_complete_with_no_amounts_is_zero():
    settlement = SpaceSettlement(settled=False)

    settlement_stage.complete(
        settlement, SettlementComplete(damage_charges=None, pending_dues=None),
        _clean_inspection(), None)

    assert settlement.final_amount == Decimal("0.00")


def test_complete_rejected_while_maintenance_open():
    inspection = SpaceInspection(status=InspectionStatus.completed, maintenance_required=True)
    maintenance = SpaceMaintenance(status=MaintenanceStatus.required_open, completed=False)

    with pytest.raises(StateError):
        settlement_stage.complete(
            SpaceSettlement(settled=False), SettlementComplete(), inspection, maintenance)


def test_override_maintenance_gates_a_clean_inspection():
    maintenance = SpaceMaintenance(status=MaintenanceStatus.required_open, completed=False)

    assert settlement_stage.maintenance_cleared(_clean_inspection(), maintenance) is False
    assert settlement_stage.maintenance_cleared(_clean_inspection(), None) is True


def test_invalid_amount_leaves_settlement_open():
    settlement = SpaceSettlement(settled=False)

    with pytest.raises(ValidationError):
        settlement_stage.complete(
            settlement, SettlementComplete(pending_dues="-5"), _clean_inspection(), None)

    assert settlement.settled is False
    assert settlement.final_amount is None


def test_settled_settlement_cannot_be_completed_again():
    settlement = SpaceSettlement(settled=False)
    settlement_stage.complete(settlement, SettlementComplete(), _clean_inspection(), None)

    with pytest.raises(StateError):
        settlement_stage.complete(settlement, SettlementComplete(), _clean_inspection(), None)


def test_complete_without_settlement_is_a_state_error():
    with pytest.raises(StateError):
        settlement_stage.complete(None, SettlementComplete(), _clean_inspection(), None)


def test_complete_keeps_exact_cents():
    settlement = SpaceSettlement(settled=False)

    settlement_stage.complete(
        settlement,
        SettlementComplete(damage_charges="0.10", pending_dues="0.20"),
        _clean_inspection(),
        None,
    )

    assert settlement.final_amount == Decimal("0.30")


def test_final_amount_over_column_range_is_rejected():
    settlement = SpaceSettlement(settled=False)

    with pytest.raises(ValidationError):
        settlement_stage.complete(
            settlement,
            SettlementComplete(damage_charges="60000000", pending_dues="40000000"),
            _clean_inspection(),
            None,
        )

    assert settlement.settled is False
    assert settlement.final_amount is None
