"""
ULID generation and timestamp utilities (stdlib-only).

Manifesto:
    Every run needs a correlation id and every tracking record a UTC
    timestamp. Drivers hand timestamps back as naive datetimes (PostgreSQL
    ``TIMESTAMP``) or text (SQLite); this module normalises both.

    - **generate_ulid():** Time-sortable run ids (26-char, base32)
    - **utc_now():** Timezone-aware UTC datetime
    - **coerce_utc():** Driver value -> aware UTC datetime

Tags:
    timestamps, ulid, utc, datetime, schemaspine, stdlib-only

Doc-Types:
    - API Reference
"""

import random
import time
from datetime import UTC, datetime


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def generate_ulid() -> str:
    """
    Generate a ULID-like identifier.

    Format: 26 characters, base32 encoded, time-sortable.
    """
    # Time component: milliseconds since epoch (48 bits -> 10 chars)
    timestamp_ms = int(time.time() * 1000)
    timestamp_chars = _encode_base32(timestamp_ms, 10)

    # Random component (80 bits -> 16 chars)
    random_part = "".join(random.choices(_ENCODING, k=16))

    return timestamp_chars + random_part


def to_iso8601(dt: datetime | None) -> str | None:
    """Convert datetime to ISO 8601 string."""
    if dt is None:
        return None
    return dt.isoformat()


def coerce_utc(value: datetime | str | None) -> datetime | None:
    """Normalise a driver timestamp to an aware UTC datetime.

    Naive values are taken to be UTC, which is how the tracking table
    stores them.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


# ULID base32 alphabet (Crockford's)
_ENCODING = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
_ENCODING_LEN = len(_ENCODING)


def _encode_base32(value: int, length: int) -> str:
    """Encode integer to base32 string of fixed length."""
    result = []
    for _ in range(length):
        result.append(_ENCODING[value % _ENCODING_LEN])
        value //= _ENCODING_LEN
    return "".join(reversed(result))
