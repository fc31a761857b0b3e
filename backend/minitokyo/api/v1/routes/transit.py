from typing import Optional

import httpx
from fastapi import APIRouter, Depends, Query

from minitokyo.core.config import LoaderConfig
from minitokyo.core.deps import get_client, get_clock, get_config, get_secrets
from minitokyo.loaders.calendar import Clock
from minitokyo.loaders.dynamic import load_dynamic_flight_data, load_dynamic_train_data
from minitokyo.loaders.static import load_static_data, load_timetable_data

# UpstreamFetchError raised by any loader is turned into a 502 by the app (see main.py)
router = APIRouter(prefix="/v1", tags=["transit"])


@router.get("/static")
async def get_static(
    lang: Optional[str] = Query(None, min_length=2, max_length=10, description="IETF language tag, e.g. en or ja"),
    cfg: LoaderConfig = Depends(get_config),
    clock: Clock = Depends(get_clock),
    client: httpx.AsyncClient = Depends(get_client),
):
    bundle = await load_static_data(cfg, lang or cfg.lang, clock, client=client)
    return bundle.to_dict()


@router.get("/timetable")
async def get_timetable(
    cfg: LoaderConfig = Depends(get_config),
    clock: Clock = Depends(get_clock),
    client: httpx.AsyncClient = Depends(get_client),
):
    return await load_timetable_data(cfg, clock, client=client)


@router.get("/trains")
async def get_trains(
    cfg: LoaderConfig = Depends(get_config),
    secrets: dict[str, str] = Depends(get_secrets),
    client: httpx.AsyncClient = Depends(get_client),
):
    data = await load_dynamic_train_data(cfg, secrets, client=client)
    return data.to_dict()


@router.get("/flights")
async def get_flights(
    cfg: LoaderConfig = Depends(get_config),
    client: httpx.AsyncClient = Depends(get_client),
):
    data = await load_dynamic_flight_data(cfg, client=client)
    return data.to_dict()
