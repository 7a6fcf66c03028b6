from __future__ import annotations

import logging
import math
import re
from typing import Any, Callable, Dict, List, Optional

log = logging.getLogger(__name__)

PARTY_LIMIT = 100

LIST_FIELDS = (
    "details",
    "state",
    "largeImageKey",
    "smallImageKey",
    "largeImageText",
    "smallImageText",
)

TIMESTAMP_VALUES = (True, False, "now")

# marker returned by a rule when the key must go
DROP = object()


# Same string forms a JS Number() accepts, minus Infinity
_DECIMAL = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_PREFIXED = re.compile(r"0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+")


def as_number(value: Any) -> Optional[float]:
    """Loose "is this a number" test.

    Numbers and numeric strings ("5", " 2.5 ", "1e2", "0x10") count; bools
    count as 0/1. Underscore separators, empty strings, NaN and infinities
    do not.
    """
    if isinstance(value, str):
        s = value.strip()
        if _PREFIXED.fullmatch(s):
            return float(int(s, 0))
        if not _DECIMAL.fullmatch(s):
            return None
        n = float(s)
    elif isinstance(value, (int, float)):
        n = float(value)
    else:
        return None
    if not math.isfinite(n):
        return None
    return n


def _party_count(value: Any) -> Optional[int]:
    # fractions are truncated; a party needs at least one slot
    n = as_number(value)
    if n is None or int(n) < 1:
        return None
    return int(n)


def _list_rule(value: Any, conf: Dict[str, Any]) -> Any:
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)) and value and all(isinstance(v, str) for v in value):
        return list(value)
    return DROP


def _timestamp_rule(value: Any, conf: Dict[str, Any]) -> Any:
    # 1 == True in python, so compare identity for the booleans
    if value is True or value is False or value == "now":
        return value
    return DROP


def _party_size_rule(value: Any, conf: Dict[str, Any]) -> Any:
    size = _party_count(value)
    top = _party_count(conf.get("partyMax"))
    if size is None or top is None:
        return DROP
    return min(size, PARTY_LIMIT, top)


def _party_max_rule(value: Any, conf: Dict[str, Any]) -> Any:
    top = _party_count(value)
    if top is None or _party_count(conf.get("partySize")) is None:
        return DROP
    return min(top, PARTY_LIMIT)


Rule = Callable[[Any, Dict[str, Any]], Any]

FIELD_SPECS: Dict[str, Rule] = {
    **{name: _list_rule for name in LIST_FIELDS},
    "timestamp": _timestamp_rule,
    "partySize": _party_size_rule,
    "partyMax": _party_max_rule,
}

# each party key is dropped together with its partner
_PARTNERS = {"partySize": "partyMax", "partyMax": "partySize"}


def validate_config(config: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Return a sanitized copy of ``config``.

    Unknown keys are dropped, list-valued fields are normalized to lists of
    strings, ``timestamp`` is restricted to True/False/"now" and the party
    pair is clamped to 100 and to each other. Nothing is ever raised for bad
    data; a field that cannot be salvaged is simply left out.
    """
    src = dict(config or {})
    out: Dict[str, Any] = {}
    dropped: List[str] = []
    for key, value in src.items():
        rule = FIELD_SPECS.get(key)
        if rule is None:
            dropped.append(key)
            continue
        res = rule(value, src)
        if res is DROP:
            dropped.append(key)
            continue
        out[key] = res
    for key, partner in _PARTNERS.items():
        if key in out and partner not in out:
            del out[key]
            dropped.append(key)
    if dropped:
        log.debug("[presence] dropped invalid fields: %s", ", ".join(sorted(set(dropped))))
    return out
