from fastapi import APIRouter, Depends

from minitokyo.api.v1.schemas.health import Health
from minitokyo.core.deps import get_clock
from minitokyo.loaders.calendar import Clock

router = APIRouter(tags=["health"])


@router.get("/health", response_model=Health)
def health(clock: Clock = Depends(get_clock)):
    return Health(calendar=clock.get_calendar(), service_date=clock.service_date().isoformat())
