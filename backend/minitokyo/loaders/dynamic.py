import logging
from dataclasses import dataclass
from typing import Mapping, Optional

import httpx

from minitokyo.core.config import LoaderConfig
from minitokyo.loaders.http import client_scope, fetch_all
from minitokyo.loaders.sources.odpt import OdptTrainFeed, OdptTrainInformationFeed, odpt_url
from minitokyo.loaders.sources.tid import TrainIdFeed
from minitokyo.loaders.types import CanonicalTrain, DynamicFlightData, DynamicTrainData, TrainInfoRecord

logger = logging.getLogger(__name__)

OPERATORS_FOR_TRAINS = {
    "odpt": ["Toei"],
}

OPERATORS_FOR_TRAININFORMATION = {
    "odpt": [
        "TWR",
        "TokyoMetro",
        "Toei",
        "YokohamaMunicipal",
        "MIR",
        "TamaMonorail",
    ],
}


@dataclass(frozen=True)
class DynamicTrainFeeds:
    """Every locator behind one dynamic train load, bound by role rather than position."""

    trains: tuple[OdptTrainFeed, ...]
    train_ids: TrainIdFeed
    train_information: tuple[OdptTrainInformationFeed, ...]

    def locators(self) -> dict:
        # construction order: live trains, identity feed, train information
        out: dict = {}
        for feed in self.trains:
            out[("trains", feed.source)] = feed.url
        out[("train_ids", self.train_ids.source)] = self.train_ids.url
        for feed in self.train_information:
            out[("train_information", feed.source)] = feed.url
        return out


def build_train_feeds(cfg: LoaderConfig, secrets: Mapping[str, str]) -> DynamicTrainFeeds:
    trains = []
    for source, operators in OPERATORS_FOR_TRAINS.items():
        if source == "odpt":
            url = odpt_url(cfg.api_urls[source], "odpt:Train", operators, secrets[source])
            trains.append(OdptTrainFeed(source=source, url=url))

    information = []
    for source, operators in OPERATORS_FOR_TRAININFORMATION.items():
        if source == "odpt":
            url = odpt_url(cfg.api_urls[source], "odpt:TrainInformation", operators, secrets[source])
            information.append(OdptTrainInformationFeed(source=source, url=url))

    return DynamicTrainFeeds(
        trains=tuple(trains),
        train_ids=TrainIdFeed(source="tid", url=cfg.tid_url),
        train_information=tuple(information),
    )


async def load_dynamic_train_data(
    cfg: LoaderConfig,
    secrets: Mapping[str, str],
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> DynamicTrainData:
    """
    Load live trains from ODPT and the train identification feed, plus the
    operation status of every configured railway.
    """
    feeds = build_train_feeds(cfg, secrets)
    locators = feeds.locators()
    logger.info("Loading dynamic train data feeds=%d", len(locators))

    async with client_scope(cfg, client) as c:
        data = await fetch_all(c, locators)

    train_data: list[CanonicalTrain] = []
    for feed in feeds.trains:
        train_data.extend(feed.normalize(data[("trains", feed.source)]))
    train_data.extend(feeds.train_ids.normalize(data[("train_ids", feeds.train_ids.source)]))

    train_info_data: list[TrainInfoRecord] = []
    for feed in feeds.train_information:
        train_info_data.extend(feed.normalize(data[("train_information", feed.source)]))

    logger.info("Dynamic train data loaded trains=%d train_information=%d", len(train_data), len(train_info_data))
    return DynamicTrainData(train_data=train_data, train_info_data=train_info_data)


async def load_dynamic_flight_data(
    cfg: LoaderConfig,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> DynamicFlightData:
    async with client_scope(cfg, client) as c:
        data = await fetch_all(c, {"atis": cfg.atis_url, "flights": cfg.flight_url})

    return DynamicFlightData(atis_data=data["atis"], flight_data=data["flights"])
