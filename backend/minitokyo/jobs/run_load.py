import argparse
import asyncio
import json
import logging
import time
from datetime import datetime

from minitokyo.core.config import LoaderConfig, load_config, load_secrets
from minitokyo.loaders.calendar import Clock
from minitokyo.loaders.dynamic import load_dynamic_flight_data, load_dynamic_train_data
from minitokyo.loaders.http import configure_logging_if_needed
from minitokyo.loaders.static import load_static_data, load_timetable_data

logger = logging.getLogger(__name__)

TARGETS = ("static", "timetable", "trains", "flights")


def _size(value) -> int:
    return len(value) if hasattr(value, "__len__") else 1


async def run(cfg: LoaderConfig, what: str, lang: str, clock: Clock) -> dict:
    if what == "static":
        bundle = await load_static_data(cfg, lang, clock)
        return {name: _size(value) for name, value in bundle.to_dict().items()}

    if what == "timetable":
        timetables = await load_timetable_data(cfg, clock)
        return {"timetableData": len(timetables)}

    if what == "trains":
        data = await load_dynamic_train_data(cfg, load_secrets())
        return {"trainData": len(data.train_data), "trainInfoData": len(data.train_info_data)}

    data = await load_dynamic_flight_data(cfg)
    return {"atisData": _size(data.atis_data), "flightData": _size(data.flight_data)}


def main():
    p = argparse.ArgumentParser(description="Load Mini Tokyo static or live data once and print a summary")
    p.add_argument("--what", required=True, choices=TARGETS)
    p.add_argument("--lang", help="Dictionary language for --what static (default: MT3D_LANG or en)")
    p.add_argument("--date", help="Pretend the Tokyo local time is YYYY-MM-DDTHH:MM (for calendar checks)")

    args = p.parse_args()

    configure_logging_if_needed()
    cfg = load_config()
    now = datetime.fromisoformat(args.date) if args.date else None
    clock = Clock(cfg.holidays, now=now)

    t0 = time.perf_counter()
    result = asyncio.run(run(cfg, args.what, args.lang or cfg.lang, clock))

    summary = {
        "what": args.what,
        "calendar": clock.get_calendar(),
        "elapsed_s": round(time.perf_counter() - t0, 2),
        **result,
    }
    logger.info("Load done result=%s", summary)
    print(json.dumps(summary))


if __name__ == "__main__":
    main()
