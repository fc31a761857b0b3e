import logging
from dataclasses import dataclass
from typing import Any, Sequence

from minitokyo.loaders.sources.base import BaseFeed
from minitokyo.loaders.types import TrainInfoRecord, TrainRecord
from minitokyo.loaders.utils.prefix import remove_prefix
from minitokyo.loaders.utils.time import normalize_date, seconds_to_ms
from minitokyo.loaders.utils.train_id import normalize_train_id

logger = logging.getLogger(__name__)


def operator_query(operators: Sequence[str]) -> str:
    return ",".join(f"odpt.Operator:{operator}" for operator in operators)


def odpt_url(api_url: str, resource: str, operators: Sequence[str], key: str) -> str:
    return f"{api_url}{resource}?odpt:operator={operator_query(operators)}&acl:consumerKey={key}"


def odpt_train_to_record(train: dict) -> TrainRecord:
    train_type = remove_prefix(train.get("odpt:trainType"))
    destination_station = remove_prefix(train.get("odpt:destinationStation"))

    return TrainRecord(
        id=normalize_train_id(remove_prefix(train["owl:sameAs"]), train_type, destination_station),
        operator=remove_prefix(train.get("odpt:operator")),
        railway=remove_prefix(train.get("odpt:railway")),
        train_type=train_type,
        train_number=train.get("odpt:trainNumber"),
        origin_station=remove_prefix(train.get("odpt:originStation")),
        direction=remove_prefix(train.get("odpt:railDirection")),
        destination_station=destination_station,
        to_station=remove_prefix(train.get("odpt:toStation")),
        from_station=remove_prefix(train.get("odpt:fromStation")),
        delay=seconds_to_ms(train.get("odpt:delay")),
        car_composition=train.get("odpt:carComposition"),
        date=normalize_date(train.get("dc:date")),
    )


def odpt_train_information_to_record(info: dict) -> TrainInfoRecord:
    return TrainInfoRecord(
        operator=remove_prefix(info.get("odpt:operator")),
        railway=remove_prefix(info.get("odpt:railway")),
        status=info.get("odpt:trainInformationStatus"),
        text=info.get("odpt:trainInformationText"),
    )


@dataclass(frozen=True)
class OdptTrainFeed(BaseFeed[TrainRecord]):
    """odpt:Train - live positions in the ODPT vocabulary."""

    def normalize(self, payload: Any) -> list[TrainRecord]:
        records = [odpt_train_to_record(t) for t in payload or []]
        logger.debug("odpt:Train source=%s trains=%d", self.source, len(records))
        return records


@dataclass(frozen=True)
class OdptTrainInformationFeed(BaseFeed[TrainInfoRecord]):
    """odpt:TrainInformation - operation status per railway."""

    def normalize(self, payload: Any) -> list[TrainInfoRecord]:
        return [odpt_train_information_to_record(i) for i in payload or []]
