from dataclasses import dataclass, field
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

StationRef = Union[str, list[str], None]


class TrainRecord(BaseModel):
    """
    Live train in the layout the visualization client reads.
    Serialized with the short keys (``o``, ``r``, ``y``...); see ``to_dict``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    id: str
    operator: Optional[str] = Field(None, alias="o")
    railway: Optional[str] = Field(None, alias="r")
    train_type: Optional[str] = Field(None, alias="y")
    train_number: Optional[str] = Field(None, alias="n")
    origin_station: StationRef = Field(None, alias="os")
    direction: Optional[str] = Field(None, alias="d")
    destination_station: StationRef = Field(None, alias="ds")
    to_station: Optional[str] = Field(None, alias="ts")
    from_station: Optional[str] = Field(None, alias="fs")
    delay: int = 0                                   # milliseconds
    car_composition: Optional[int] = Field(None, alias="carComposition")
    date: Optional[str] = None                       # "YYYY-MM-DD HH:MM:SS"

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class TrainInfoRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    operator: Optional[str] = None
    railway: Optional[str] = None
    status: Optional[Any] = None    # localized text map, e.g. {"ja": ..., "en": ...}
    text: Optional[Any] = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


@dataclass(frozen=True)
class TimetableSelector:
    base: str
    overlays: tuple[str, ...] = ()


@dataclass(frozen=True)
class StaticBundle:
    dictionary: dict
    railways: list
    stations: list
    features: dict
    timetables: list                 # base timetable followed by overlays
    rail_directions: list
    train_types: list
    train_vehicles: list
    operators: list
    airports: list
    flight_statuses: list
    poi: list

    def to_dict(self) -> dict[str, Any]:
        return {
            "dict": self.dictionary,
            "railwayData": self.railways,
            "stationData": self.stations,
            "featureCollection": self.features,
            "timetableData": self.timetables,
            "railDirectionData": self.rail_directions,
            "trainTypeData": self.train_types,
            "trainVehicleData": self.train_vehicles,
            "operatorData": self.operators,
            "airportData": self.airports,
            "flightStatusData": self.flight_statuses,
            "poiData": self.poi,
        }


# identity-feed trains stay plain dicts
CanonicalTrain = Union[TrainRecord, dict]


@dataclass(frozen=True)
class DynamicTrainData:
    train_data: list[CanonicalTrain] = field(default_factory=list)
    train_info_data: list[TrainInfoRecord] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "trainData": [t.to_dict() if isinstance(t, TrainRecord) else t for t in self.train_data],
            "trainInfoData": [t.to_dict() for t in self.train_info_data],
        }


@dataclass(frozen=True)
class DynamicFlightData:
    atis_data: Any
    flight_data: Any

    def to_dict(self) -> dict[str, Any]:
        return {"atisData": self.atis_data, "flightData": self.flight_data}
