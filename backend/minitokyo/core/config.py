import os
from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class LoaderConfig:
    data_url: str
    api_urls: dict[str, str]
    tid_url: str
    atis_url: str
    flight_url: str

    lang: str

    connect_timeout: float
    read_timeout: float
    write_timeout: float
    pool_timeout: float

    holidays: frozenset[date] = field(default_factory=frozenset)


def _parse_holidays(raw: str) -> frozenset[date]:
    return frozenset(date.fromisoformat(s.strip()) for s in raw.split(",") if s.strip())


def load_config() -> LoaderConfig:
    return LoaderConfig(
        data_url=os.getenv("MT3D_DATA_URL", "https://minitokyo3d.com/data").rstrip("/"),
        api_urls={
            "odpt": os.getenv("MT3D_ODPT_API_URL", "https://api.odpt.org/api/v4/"),
        },
        tid_url=os.getenv("MT3D_TID_URL", "https://mini-tokyo.appspot.com/trainid"),
        atis_url=os.getenv("MT3D_ATIS_URL", "https://mini-tokyo.appspot.com/atisinfo"),
        flight_url=os.getenv("MT3D_FLIGHT_URL", "https://mini-tokyo.appspot.com/flight"),
        lang=os.getenv("MT3D_LANG", "en"),
        connect_timeout=float(os.getenv("MT3D_CONNECT_TIMEOUT_SECONDS", "10")),
        read_timeout=float(os.getenv("MT3D_READ_TIMEOUT_SECONDS", "60")),
        write_timeout=float(os.getenv("MT3D_WRITE_TIMEOUT_SECONDS", "30")),
        pool_timeout=float(os.getenv("MT3D_POOL_TIMEOUT_SECONDS", "30")),
        holidays=_parse_holidays(os.getenv("MT3D_HOLIDAYS", "")),
    )


def load_secrets() -> dict[str, str]:
    key = os.getenv("ODPT_CONSUMER_KEY")
    if not key:
        raise RuntimeError("ODPT_CONSUMER_KEY not set in environment")
    return {"odpt": key}
