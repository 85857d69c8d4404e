"""ULID primary keys for scheduling records."""

from typing import Optional

from ulid import ULID


def generate_ulid() -> str:
    """26-character, time-ordered id for a new session or template row."""
    return str(ULID())


def parse_ulid(value: str) -> Optional[ULID]:
    """Decode a stored id; None when it is not a well-formed ULID."""
    try:
        return ULID.from_str(value)
    except (ValueError, TypeError):
        return None


def is_valid_ulid(value: str) -> bool:
    return parse_ulid(value) is not None
