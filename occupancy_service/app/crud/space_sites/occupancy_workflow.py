"""Move-out workflow evaluation.

``evaluate`` is a pure function of an occupancy snapshot. It never touches
the database, so the router, the orchestrator and tests all see the same
steps for the same record.
"""
from typing import List

from ...models.space_sites.space_handover import HandoverStatus
from ...models.space_sites.space_inspections import InspectionStatus
from ...models.space_sites.space_occupancies import EXIT_STATUSES, OccupancyStatus
from ...schemas.space_sites.space_occupancy_schemas import (
    OccupancyRecordOut, WorkflowOut, WorkflowStepOut
)

WORKFLOW_STEPS = [
    ("move_out", "Move Out"),
    ("handover", "Handover"),
    ("inspection", "Inspection"),
    ("maintenance", "Maintenance"),
    ("settlement", "Settlement"),
]


def maintenance_skipped(record: OccupancyRecordOut) -> bool:
    inspection = record.inspection
    return (
        inspection is not None
        and inspection.status == InspectionStatus.completed
        and inspection.maintenance_required is False
        and record.maintenance is None
    )


def _completed_flags(record: OccupancyRecordOut) -> List[bool]:
    handover = record.handover
    inspection = record.inspection
    maintenance = record.maintenance
    settlement = record.settlement

    move_out_done = record.status in EXIT_STATUSES
    handover_done = handover is not None and handover.status == HandoverStatus.completed
    inspection_done = inspection is not None and inspection.status == InspectionStatus.completed
    maintenance_done = maintenance_skipped(record) or (
        maintenance is not None and maintenance.completed)
    settlement_done = settlement is not None and settlement.settled

    return [move_out_done, handover_done, inspection_done, maintenance_done, settlement_done]


def permitted_actions(record: OccupancyRecordOut) -> List[str]:
    status = record.status
    if status == OccupancyStatus.vacant:
        return ["move_in"]
    if status == OccupancyStatus.occupied:
        return ["request_move_out"]

    handover = record.handover
    inspection = record.inspection
    maintenance = record.maintenance
    settlement = record.settlement

    if handover is None:
        return []
    if handover.status != HandoverStatus.completed:
        return ["update_handover", "complete_handover"]
    if inspection is None:
        return []
    if inspection.status != InspectionStatus.completed:
        return ["request_inspection", "complete_inspection"]
    if inspection.maintenance_required and maintenance is None:
        return ["create_maintenance"]
    if maintenance is not None and not maintenance.completed:
        return ["complete_maintenance"]
    if settlement is not None and settlement.settled:
        return []

    # maintenance can still be raised by override until the settlement closes
    actions = ["create_maintenance"] if maintenance is None else []
    if settlement is None:
        if status == OccupancyStatus.recently_vacated:
            actions.append("create_settlement")
    else:
        actions.append("complete_settlement")
    return actions


def evaluate(record: OccupancyRecordOut) -> WorkflowOut:
    in_cycle = record.status != OccupancyStatus.vacant
    completed = _completed_flags(record) if in_cycle else [False] * len(WORKFLOW_STEPS)
    skipped = in_cycle and maintenance_skipped(record)

    steps = []
    for index, (step_id, title) in enumerate(WORKFLOW_STEPS):
        steps.append(WorkflowStepOut(
            id=step_id,
            title=title,
            completed=completed[index],
            enabled=in_cycle and all(completed[:index]),
            visible=not (step_id == "maintenance" and skipped),
        ))

    current_step_index = next(
        (i for i, step in enumerate(steps) if not step.completed), len(steps) - 1)

    visible_steps = [s for s in steps if s.visible]
    progress = round(
        100 * sum(1 for s in visible_steps if s.completed) / len(visible_steps))

    active_stage = None
    if in_cycle and not steps[current_step_index].completed:
        active_stage = steps[current_step_index].id

    return WorkflowOut(
        steps=steps,
        current_step_index=current_step_index,
        active_stage=active_stage,
        permitted_actions=permitted_actions(record),
        progress=progress,
    )
