import re
from typing import Optional, Sequence

RAILWAY_SOBURAPID = "JR-East.SobuRapid"

TRAINTYPE_JREAST_LIMITEDEXPRESS = "JR-East.LimitedExpress"

# Limited expresses bound for these terminals run through on the Sobu Rapid line
SOBURAPID_TERMINALS_RE = re.compile(r"NaritaAirportTerminal1|Takao|Ofuna|Omiya|Ikebukuro|Shinjuku")

LEGACY_RAILWAY_RE = re.compile(r"JR-East\.(NaritaAirportBranch|Narita|Sobu)")


def normalize_train_id(raw_id: str, train_type: Optional[str], destinations: Optional[Sequence[str]]) -> str:
    """
    Unify the id of a JR-East limited express that continues onto the Sobu Rapid line,
    so that every segment of the same physical train is keyed the same way.
    """
    if isinstance(destinations, str):
        destinations = [destinations]
    if train_type != TRAINTYPE_JREAST_LIMITEDEXPRESS or not destinations:
        return raw_id
    if not destinations[0] or not SOBURAPID_TERMINALS_RE.search(destinations[0]):
        return raw_id
    return LEGACY_RAILWAY_RE.sub(RAILWAY_SOBURAPID, raw_id, count=1)
