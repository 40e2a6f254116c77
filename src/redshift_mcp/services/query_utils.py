"""Query utilities: identifier quoting, redaction and JSON shaping."""

import json
import math
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Dict, Iterable, List

REDACTED = "REDACTED"
REDACTED_FIELDS = frozenset({'email', 'phone'})


def quote_identifier(identifier: str) -> str:
    """Quote a SQL identifier for embedding in query text.

    This is the only place identifiers are written into SQL instead of
    being bound as parameters; the engine's placeholders cannot stand in
    for identifiers. Embedded double quotes are doubled.

    Args:
        identifier: Schema or table name

    Returns:
        Quoted identifier
    """
    return '"' + identifier.replace('"', '""') + '"'


LIKE_ESCAPE = '!'


def escape_like_pattern(pattern: str) -> str:
    """Escape LIKE wildcards so the pattern matches as a plain substring.

    Pairs with ``ESCAPE '!'`` in the query text.
    """
    return (
        pattern.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace('%', LIKE_ESCAPE + '%')
        .replace('_', LIKE_ESCAPE + '_')
    )


def redact_rows(rows: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Replace every field named ``email`` or ``phone`` with ``REDACTED``.

    Matching is on the exact field name; values (including NULL) are
    ignored. Fields absent from a row are not added.
    """
    redacted = []
    for row in rows:
        new_row = dict(row)
        for field in REDACTED_FIELDS.intersection(new_row):
            new_row[field] = REDACTED
        redacted.append(new_row)
    return redacted


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        if not value.is_finite():
            return str(value)
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    return str(value)


def _finite_floats(payload: Any) -> Any:
    # json.dumps never hands floats to the default hook
    if isinstance(payload, float) and not math.isfinite(payload):
        return str(payload)
    if isinstance(payload, dict):
        return {key: _finite_floats(value) for key, value in payload.items()}
    if isinstance(payload, (list, tuple)):
        return [_finite_floats(item) for item in payload]
    return payload


def to_json(payload: Any) -> str:
    """Serialize a payload deterministically for a text content block.

    Dict key order is kept as produced; the engine's field names are never
    renamed. NaN and infinities are written as strings, so the output is
    always strict JSON.
    """
    return json.dumps(_finite_floats(payload), indent=2, default=_json_default, allow_nan=False)
