from __future__ import annotations

from urllib.parse import unquote

import pytest

from minitokyo.loaders.dynamic import (
    OPERATORS_FOR_TRAININFORMATION,
    build_train_feeds,
    load_dynamic_flight_data,
    load_dynamic_train_data,
)
from minitokyo.loaders.http import UpstreamFetchError

SECRETS = {"odpt": "k3y"}

TOEI_TRAIN = {
    "owl:sameAs": "odpt.Train:Toei.Shinjuku.1001T",
    "odpt:operator": "odpt.Operator:Toei",
    "odpt:railway": "odpt.Railway:Toei.Shinjuku",
    "odpt:trainType": "odpt.TrainType:Toei.Local",
    "odpt:trainNumber": "1001T",
    "odpt:railDirection": "odpt.RailDirection:Eastbound",
    "odpt:destinationStation": ["odpt.Station:Toei.Shinjuku.Motoyawata"],
    "odpt:fromStation": "odpt.Station:Toei.Shinjuku.Shinjuku",
    "dc:date": "2024-03-01T08:15:00+09:00",
}

LIMITED_EXPRESS = {
    "owl:sameAs": "odpt.Train:JR-East.NaritaAirportBranch.2001M",
    "odpt:operator": "odpt.Operator:JR-East",
    "odpt:railway": "odpt.Railway:JR-East.NaritaAirportBranch",
    "odpt:trainType": "odpt.TrainType:JR-East.LimitedExpress",
    "odpt:trainNumber": "2001M",
    "odpt:destinationStation": ["odpt.Station:JR-East.Yamanote.Shinjuku"],
    "odpt:delay": 120,
    "dc:date": "2024-03-01T08:16:30.5+09:00",
}

TID_TRAIN = {
    "id": "JR-East.Narita.2001M",
    "r": "JR-East.Narita",
    "y": "JR-East.LimitedExpress",
    "n": "2001M",
    "ds": ["JR-East.Yamanote.Shinjuku"],
    "delay": 0,
}

INFO = [
    {
        "odpt:operator": "odpt.Operator:TokyoMetro",
        "odpt:railway": "odpt.Railway:TokyoMetro.Ginza",
        "odpt:trainInformationStatus": {"en": "Delay"},
        "odpt:trainInformationText": {"en": "Trains are delayed."},
    },
    {
        "odpt:operator": "odpt.Operator:Toei",
        "odpt:trainInformationText": {"en": "Normal operation."},
    },
]


def serve_dynamic(upstream):
    upstream.routes["api.test/api/v4/odpt:Train"] = [TOEI_TRAIN, LIMITED_EXPRESS]
    upstream.routes["tid.test/trainid"] = [TID_TRAIN]
    upstream.routes["api.test/api/v4/odpt:TrainInformation"] = INFO


def test_feeds_are_built_in_construction_order(cfg):
    feeds = build_train_feeds(cfg, SECRETS)
    urls = list(feeds.locators().values())

    assert len(urls) == 3
    assert unquote(urls[0]) == (
        "https://api.test/api/v4/odpt:Train?odpt:operator=odpt.Operator:Toei&acl:consumerKey=k3y"
    )
    assert urls[1] == "https://tid.test/trainid"
    operators = ",".join(f"odpt.Operator:{o}" for o in OPERATORS_FOR_TRAININFORMATION["odpt"])
    assert urls[2] == (
        f"https://api.test/api/v4/odpt:TrainInformation?odpt:operator={operators}&acl:consumerKey=k3y"
    )


def test_missing_secret_is_an_error(cfg):
    with pytest.raises(KeyError):
        build_train_feeds(cfg, {})


def test_dynamic_train_data(cfg, upstream):
    serve_dynamic(upstream)
    data = upstream.run(lambda c: load_dynamic_train_data(cfg, SECRETS, client=c))

    trains = data.to_dict()["trainData"]
    assert [t["id"] for t in trains] == [
        "Toei.Shinjuku.1001T",
        "JR-East.SobuRapid.2001M",
        "JR-East.Narita.2001M",
    ]
    assert trains[0]["delay"] == 0
    assert trains[0]["date"] == "2024-03-01 08:15:00"
    assert trains[0]["ds"] == ["Toei.Shinjuku.Motoyawata"]
    assert trains[1]["delay"] == 120000
    assert trains[1]["r"] == "JR-East.NaritaAirportBranch"
    assert trains[1]["date"] == "2024-03-01 08:16:30"
    # the identity feed is already canonical and is not rewritten
    assert trains[2] == TID_TRAIN

    info = [i.to_dict() for i in data.train_info_data]
    assert info == [
        {
            "operator": "TokyoMetro",
            "railway": "TokyoMetro.Ginza",
            "status": {"en": "Delay"},
            "text": {"en": "Trains are delayed."},
        },
        {"operator": "Toei", "text": {"en": "Normal operation."}},
    ]


def test_dynamic_train_data_to_dict(cfg, upstream):
    serve_dynamic(upstream)
    data = upstream.run(lambda c: load_dynamic_train_data(cfg, SECRETS, client=c))
    out = data.to_dict()
    assert set(out) == {"trainData", "trainInfoData"}
    assert len(out["trainData"]) == 3
    assert len(out["trainInfoData"]) == 2


def test_identity_feed_is_never_run_through_odpt_mapping(cfg, upstream):
    # ODPT-shaped records served on the identity feed must not be renamed,
    # and canonical records on the ODPT feed are not passed through
    upstream.routes["api.test/api/v4/odpt:Train"] = []
    upstream.routes["tid.test/trainid"] = [{**TID_TRAIN, "odpt:delay": 5}]
    upstream.routes["api.test/api/v4/odpt:TrainInformation"] = []

    data = upstream.run(lambda c: load_dynamic_train_data(cfg, SECRETS, client=c))
    assert len(data.train_data) == 1
    rec = data.train_data[0]
    assert rec["delay"] == 0
    assert rec["odpt:delay"] == 5
    assert data.train_info_data == []


@pytest.mark.parametrize(
    "failing",
    ["api.test/api/v4/odpt:Train", "tid.test/trainid", "api.test/api/v4/odpt:TrainInformation"],
)
def test_dynamic_train_data_fails_as_a_whole(cfg, upstream, failing):
    serve_dynamic(upstream)
    upstream.routes[failing] = 500
    with pytest.raises(UpstreamFetchError) as exc:
        upstream.run(lambda c: load_dynamic_train_data(cfg, SECRETS, client=c))
    assert "k3y" not in str(exc.value)


def test_dynamic_flight_data(cfg, upstream):
    atis = {"landing": ["34L", "34R"], "departure": ["05", "34R"]}
    flights = [{"id": "NH.NH123.HND.20240301", "s": "Landed"}]
    upstream.routes["tid.test/atisinfo"] = atis
    upstream.routes["tid.test/flight"] = flights

    data = upstream.run(lambda c: load_dynamic_flight_data(cfg, client=c))
    assert data.atis_data == atis
    assert data.flight_data == flights
    assert data.to_dict() == {"atisData": atis, "flightData": flights}


def test_dynamic_flight_data_fails_as_a_whole(cfg, upstream):
    upstream.routes["tid.test/atisinfo"] = {"landing": []}
    upstream.routes["tid.test/flight"] = 502
    with pytest.raises(UpstreamFetchError):
        upstream.run(lambda c: load_dynamic_flight_data(cfg, client=c))


def test_identity_feed_records_are_appended_unchanged(cfg, upstream):
    raw = {"id": "JR-East.Chuo.1", "n": 1234, "ts": None}
    upstream.routes["api.test/api/v4/odpt:Train"] = []
    upstream.routes["tid.test/trainid"] = [raw]
    upstream.routes["api.test/api/v4/odpt:TrainInformation"] = []

    data = upstream.run(lambda c: load_dynamic_train_data(cfg, SECRETS, client=c))
    assert data.to_dict()["trainData"] == [raw]
