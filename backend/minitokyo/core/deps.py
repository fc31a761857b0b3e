from typing import AsyncIterator

import httpx
from fastapi import Depends, HTTPException

from minitokyo.core.config import LoaderConfig, load_config, load_secrets
from minitokyo.loaders.calendar import Clock
from minitokyo.loaders.http import make_client


def get_config() -> LoaderConfig:
    return load_config()


def get_clock(cfg: LoaderConfig = Depends(get_config)) -> Clock:
    return Clock(cfg.holidays)


def get_secrets() -> dict[str, str]:
    try:
        return load_secrets()
    except RuntimeError as e:
        raise HTTPException(status_code=503, detail=str(e))


async def get_client(cfg: LoaderConfig = Depends(get_config)) -> AsyncIterator[httpx.AsyncClient]:
    async with make_client(cfg) as client:
        yield client
