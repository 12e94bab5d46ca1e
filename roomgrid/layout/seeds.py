"""RNG seed helpers shared by the API, the websocket channel and the CLI."""
from __future__ import annotations

import hashlib
import random

MAX_SEED = 2**63 - 1


def draw_seed() -> int:
    """Draw a fresh RNG seed from system entropy."""
    return random.SystemRandom().randint(1, 2**31 - 1)


def coerce_seed(raw) -> int:
    """Convert a provided seed (int or str) into a bounded non-negative int.

    None or blank strings draw a fresh seed. Digit strings are taken literally;
    any other string is hashed so the same text always yields the same seed.
    """
    if raw is None:
        return draw_seed()
    if isinstance(raw, bool):
        raise TypeError("seed must be an int or a string")
    if isinstance(raw, int):
        return raw % MAX_SEED
    if isinstance(raw, str):
        s = raw.strip()
        if not s:
            return draw_seed()
        if s.isdigit():
            return int(s) % MAX_SEED
        h = hashlib.sha256(s.encode("utf-8")).digest()
        return int.from_bytes(h[:8], "big") % MAX_SEED
    raise TypeError("seed must be an int or a string")


__all__ = ["coerce_seed", "draw_seed", "MAX_SEED"]
