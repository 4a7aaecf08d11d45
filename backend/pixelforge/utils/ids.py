# backend/pixelforge/utils/ids.py
import re
import time
from uuid import uuid4

from ..exceptions import InvalidIdentifierError

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


def new_object_id() -> str:
    """24 hex chars: 4 byte big-endian seconds followed by 8 random bytes"""
    return f"{int(time.time()):08x}{uuid4().hex[:16]}"


def is_object_id(value) -> bool:
    return isinstance(value, str) and bool(OBJECT_ID_PATTERN.match(value))


def ensure_object_id(value, label: str) -> str:
    """Return the normalised id or raise a 400 before any store access"""
    if not is_object_id(value):
        raise InvalidIdentifierError(label)
    return value.lower()
