"""
Session identifier generation.

A session id is an opaque token used to deduplicate submissions. The default
scheme is a base-36 random fragment followed by a base-36 millisecond
timestamp: collisions are very unlikely but it is not a security token. Use
the uuid4 scheme where stronger uniqueness matters.
"""

import random
import time
import uuid

from prediction_timeline.config import SESSION_ID_SCHEME


BASE36_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"

# 53 random bits, the precision of a double
RANDOM_BITS = 53

_random = random.SystemRandom()


def to_base36(n: int) -> str:
    """Render a non-negative integer in base 36 (lowercase)."""
    if n < 0:
        raise ValueError(f"Negative value: {n}")
    if n == 0:
        return "0"

    digits = []
    while n:
        n, rem = divmod(n, 36)
        digits.append(BASE36_ALPHABET[rem])
    return "".join(reversed(digits))


def generate_session_id() -> str:
    """Random base-36 fragment + base-36 millisecond timestamp."""
    random_part = to_base36(_random.getrandbits(RANDOM_BITS))
    time_part = to_base36(int(time.time() * 1000))
    return random_part + time_part


def generate_session_uuid() -> str:
    """UUID4 session id."""
    return str(uuid.uuid4())


def new_session_id(scheme: str = None) -> str:
    """
    Generate a session id using the configured scheme.

    Args:
        scheme: "base36" or "uuid4" (defaults to SESSION_ID_SCHEME)

    Raises:
        ValueError: If the scheme is unknown
    """
    scheme = scheme or SESSION_ID_SCHEME
    if scheme == "base36":
        return generate_session_id()
    if scheme == "uuid4":
        return generate_session_uuid()
    raise ValueError(f"Unknown session id scheme: {scheme}")
