import re
from typing import Any

PREFIX_RE = re.compile(r"^odpt\.[A-Za-z]+:")


def remove_prefix(value: Any) -> Any:
    """
    Strip the ODPT namespace ("odpt.Station:", "odpt.Operator:", ...) from an identifier.
    Lists are mapped element-wise; anything else is returned as-is.
    """
    if isinstance(value, str):
        return PREFIX_RE.sub("", value)
    if isinstance(value, list):
        return [remove_prefix(v) for v in value]
    return value
