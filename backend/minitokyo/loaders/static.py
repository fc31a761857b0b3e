import logging
from typing import Optional

import httpx

from minitokyo.core.config import LoaderConfig
from minitokyo.loaders.calendar import CalendarSource, resolve_timetable_files
from minitokyo.loaders.http import client_scope, fetch_all
from minitokyo.loaders.types import StaticBundle, TimetableSelector

logger = logging.getLogger(__name__)

# dataset -> file under data_url; the dictionary and timetables are added per call
STATIC_FILES = {
    "railways": "railways.json.gz",
    "stations": "stations.json.gz",
    "features": "features.json.gz",
    "rail_directions": "rail-directions.json.gz",
    "train_types": "train-types.json.gz",
    "train_vehicles": "train-vehicles.json.gz",
    "operators": "operators.json.gz",
    "airports": "airports.json.gz",
    "flight_statuses": "flight-statuses.json.gz",
    "poi": "poi.json.gz",
}


def timetable_locators(data_url: str, selector: TimetableSelector) -> dict[tuple[str, int], str]:
    files = (selector.base, *selector.overlays)
    return {("timetable", i): f"{data_url}/{name}" for i, name in enumerate(files)}


def merge_timetables(payloads: dict, count: int) -> list:
    """Base timetable entries followed by each overlay's entries, in locator order."""
    merged: list = []
    for i in range(count):
        merged.extend(payloads[("timetable", i)])
    return merged


async def load_static_data(
    cfg: LoaderConfig,
    lang: str,
    clock: CalendarSource,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> StaticBundle:
    """
    Load every static dataset plus the timetable(s) for the current service day.
    Fails as a whole if any single file cannot be loaded.
    """
    selector = resolve_timetable_files(clock)
    timetables = timetable_locators(cfg.data_url, selector)

    locators: dict = {"dictionary": f"{cfg.data_url}/dictionary-{lang}.json"}
    locators.update({name: f"{cfg.data_url}/{file}" for name, file in STATIC_FILES.items()})
    locators.update(timetables)

    logger.info(
        "Loading static data data_url=%s lang=%s timetable=%s overlays=%s files=%d",
        cfg.data_url,
        lang,
        selector.base,
        list(selector.overlays),
        len(locators),
    )

    async with client_scope(cfg, client) as c:
        data = await fetch_all(c, locators)

    bundle = StaticBundle(
        dictionary=data["dictionary"],
        timetables=merge_timetables(data, len(timetables)),
        **{name: data[name] for name in STATIC_FILES},
    )
    logger.info(
        "Static data loaded railways=%d stations=%d timetables=%d",
        len(bundle.railways),
        len(bundle.stations),
        len(bundle.timetables),
    )
    return bundle


async def load_timetable_data(
    cfg: LoaderConfig,
    clock: CalendarSource,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> list:
    """Reload only the timetables, for periodic re-sync without the rest of the bundle."""
    selector = resolve_timetable_files(clock)
    locators = timetable_locators(cfg.data_url, selector)

    async with client_scope(cfg, client) as c:
        data = await fetch_all(c, locators)

    timetables = merge_timetables(data, len(locators))
    logger.info(
        "Timetable data loaded timetable=%s overlays=%s entries=%d",
        selector.base,
        list(selector.overlays),
        len(timetables),
    )
    return timetables
