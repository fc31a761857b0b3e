import re
from typing import Optional

ISO_DATETIME_RE = re.compile(r"([\d\-])T([\d:]+).*")


def normalize_date(value: Optional[str]) -> Optional[str]:
    """
    "2024-03-01T08:15:00+09:00" -> "2024-03-01 08:15:00".
    Fractional seconds and the zone suffix are dropped. None passes through.
    """
    if value is None:
        return None
    return ISO_DATETIME_RE.sub(r"\1 \2", value, count=1)


def seconds_to_ms(value) -> int:
    # upstream sends null or omits the field when the train is on time
    return int((value or 0) * 1000)
