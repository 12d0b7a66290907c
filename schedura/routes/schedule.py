"""
Schedule API endpoints for frontend
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, status

from ..config import Settings, get_settings
from ..schemas import (
    AvailabilityRequest, AvailabilityResponse, FreeWindowOut,
    ProposedSlotOut, ScheduleRequest, ScheduleResponse, UnplacedTaskOut,
)
from ..scheduling import ConfigurationError, TaskScheduler

router = APIRouter()
logger = logging.getLogger(__name__)


def _build_scheduler(constraints, horizon_days, settings: Settings) -> TaskScheduler:
    """Create a scheduler from request values, falling back to the configured defaults."""
    try:
        return TaskScheduler(
            constraints.to_constraint(settings.default_timezone),
            horizon_days=settings.horizon_days if horizon_days is None else horizon_days,
            tie_break=settings.tie_break,
            rounding_minutes=settings.rounding_minutes,
        )
    except ConfigurationError as e:
        logger.warning(f"Rejected scheduling configuration: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/", response_model=ScheduleResponse)
def create_schedule(request: ScheduleRequest, settings: Settings = Depends(get_settings)):
    """
    Propose slots for the submitted tasks around the submitted busy blocks.
    Nothing is stored: the caller decides what to do with the proposal.
    """
    scheduler = _build_scheduler(request.constraints, request.horizon_days, settings)
    result = scheduler.schedule(
        [task.to_task() for task in request.tasks],
        [block.to_busy_block() for block in request.busy_blocks],
        now=request.now,
    )
    return ScheduleResponse(
        placed=[ProposedSlotOut.model_validate(slot) for slot in result.placed],
        unplaced=[UnplacedTaskOut.model_validate(entry) for entry in result.unplaced],
    )


@router.post("/availability", response_model=AvailabilityResponse)
def get_availability(request: AvailabilityRequest, settings: Settings = Depends(get_settings)):
    """List free windows long enough for a ``duration``-minute task."""
    scheduler = _build_scheduler(request.constraints, request.horizon_days, settings)
    try:
        windows = scheduler.find_availability(
            [block.to_busy_block() for block in request.busy_blocks],
            request.duration,
            now=request.now,
        )
    except ConfigurationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return AvailabilityResponse(
        windows=[
            FreeWindowOut(
                start=window.start,
                end=window.end,
                duration_minutes=int(window.duration().total_seconds() // 60),
            )
            for window in windows
        ]
    )
