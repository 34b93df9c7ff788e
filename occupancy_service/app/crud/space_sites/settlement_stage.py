# crud/space_sites/settlement_stage.py
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from shared.helpers.date_helper import as_naive_utc, utc_now

from ...core.exceptions import StateError, ValidationError
from ...models.space_sites.space_inspections import InspectionStatus, SpaceInspection
from ...models.space_sites.space_maintenances import SpaceMaintenance
from ...models.space_sites.space_settlements import SpaceSettlement
from ...schemas.space_sites.space_occupancy_schemas import SettlementComplete

CENTS = Decimal("0.01")
# Numeric(10, 2) columns hold at most 99999999.99
MAX_AMOUNT = Decimal("100000000")


def coerce_amount(value: Any, field: str) -> Decimal:
    if value is None:
        return Decimal("0.00")
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")

    try:
        if isinstance(value, str):
            amount = Decimal(value.strip())
        elif isinstance(value, float):
            amount = Decimal(str(value))
        else:
            amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field} must be a number")

    if not amount.is_finite():
        raise ValidationError(f"{field} must be a finite number")
    if amount < 0:
        raise ValidationError(f"{field} cannot be negative")
    if amount != amount.quantize(CENTS):
        raise ValidationError(f"{field} cannot have more than 2 decimal places")
    if amount >= MAX_AMOUNT:
        raise ValidationError(f"{field} must be less than {MAX_AMOUNT}")
    return amount.quantize(CENTS)


def maintenance_cleared(
    inspection: Optional[SpaceInspection],
    maintenance: Optional[SpaceMaintenance]
) -> bool:
    """True when maintenance was skipped or is done."""
    if inspection is None or inspection.status != InspectionStatus.completed:
        return False
    if maintenance is not None:
        return bool(maintenance.completed)
    return not inspection.maintenance_required


def check_can_open(
    inspection: Optional[SpaceInspection],
    maintenance: Optional[SpaceMaintenance]
):
    if inspection is None or inspection.status != InspectionStatus.completed:
        raise StateError("Inspection must be completed before settlement")
    if not maintenance_cleared(inspection, maintenance):
        raise StateError("Maintenance must be completed before settlement")


def complete(
    settlement: Optional[SpaceSettlement],
    params: SettlementComplete,
    inspection: Optional[SpaceInspection],
    maintenance: Optional[SpaceMaintenance],
    now: Optional[datetime] = None
) -> SpaceSettlement:
    if settlement is None:
        raise StateError("Settlement is not open for this occupancy")
    if settlement.settled:
        raise StateError("Settlement has already been completed")
    check_can_open(inspection, maintenance)

    damage_charges = coerce_amount(params.damage_charges, "damage_charges")
    pending_dues = coerce_amount(params.pending_dues, "pending_dues")
    final_amount = damage_charges + pending_dues
    if final_amount >= MAX_AMOUNT:
        raise ValidationError(f"final_amount must be less than {MAX_AMOUNT}")

    settlement.damage_charges = damage_charges
    settlement.pending_dues = pending_dues
    settlement.final_amount = final_amount
    settlement.settled = True
    settlement.settled_by = params.settled_by
    settlement.settled_at = as_naive_utc(now or utc_now())
    return settlement
