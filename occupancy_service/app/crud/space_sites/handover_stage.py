# crud/space_sites/handover_stage.py
from datetime import datetime
from typing import Optional

from shared.helpers.date_helper import as_naive_utc, utc_now

from ...core.exceptions import StateError, ValidationError
from ...models.space_sites.space_handover import HandoverStatus, SpaceHandover
from ...schemas.space_sites.space_occupancy_schemas import HandoverUpdateSchema


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _changes(params: HandoverUpdateSchema) -> dict:
    changes = params.model_dump(exclude_unset=True, exclude_none=True)
    if "handover_date" in changes:
        changes["handover_date"] = as_naive_utc(changes["handover_date"])
    for field in ("handover_to_person", "handover_to_contact", "remarks"):
        if isinstance(changes.get(field), str):
            changes[field] = changes[field].strip()
    return changes


def _ensure_open(handover: SpaceHandover):
    if handover.status == HandoverStatus.completed:
        raise StateError("Handover has already been completed")


def update(handover: SpaceHandover, params: HandoverUpdateSchema) -> SpaceHandover:
    """Save a partial handover without completing it."""
    _ensure_open(handover)

    for field, value in _changes(params).items():
        setattr(handover, field, value)

    handover.status = HandoverStatus.in_progress
    return handover


def complete(
    handover: SpaceHandover,
    params: HandoverUpdateSchema,
    now: Optional[datetime] = None
) -> SpaceHandover:
    _ensure_open(handover)

    changes = _changes(params)
    handover_date = changes.get("handover_date", handover.handover_date)
    handover_to_person = changes.get(
        "handover_to_person", handover.handover_to_person)

    missing = []
    if _is_blank(handover_date):
        missing.append("handover_date")
    if _is_blank(handover_to_person):
        missing.append("handover_to_person")
    if missing:
        raise ValidationError(
            f"Required handover fields missing: {', '.join(missing)}")

    for field, value in changes.items():
        setattr(handover, field, value)

    handover.status = HandoverStatus.completed
    handover.completed_at = now or utc_now()
    return handover
