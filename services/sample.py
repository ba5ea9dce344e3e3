# services/sample.py
from __future__ import annotations
import logging
from typing import Callable, Iterable, Protocol, Tuple
from errors import RangeExhausted
from rng.mix import hash_chain
from services.collect import u64_le, i64_le

log = logging.getLogger(__name__)

TWO64 = 1 << 64
RANGE_MAX = 100_000
DEFAULT_MAX_REJECTIONS = 32

class TimeSource(Protocol):
    def current_slot(self) -> int: ...
    def current_timestamp(self) -> int: ...

def max_safe(n: int) -> int:
    """Порог для честного модульного маппинга: всё, что >= порога, отбрасываем."""
    return (TWO64 // n) * n

def low_u64(digest: bytes) -> int:
    return int.from_bytes(digest[:8], "little")

def reduce_to_range(
    digest: bytes,
    clock: TimeSource,
    n: int = RANGE_MAX,
    mix: Callable[[Iterable[bytes]], bytes] = hash_chain,
    max_rejections: int = DEFAULT_MAX_REJECTIONS,
) -> Tuple[int, dict]:
    """
    Честная выборка в [1, n] с rejection sampling.
    При отказе подмешиваем свежие slot/timestamp и счётчик попыток,
    поэтому digest меняется даже при "замёрзших" часах.
    """
    if n <= 0 or n > TWO64:
        raise ValueError("range size must be in 1..2^64")

    t = max_safe(n)
    attempts = 0
    rejected = 0
    while True:
        attempts += 1
        x = low_u64(digest)
        if x < t:
            value = x % n + 1
            meta = {
                "rangeSize": n,
                "attempts": attempts, "rejected": rejected,
                "threshold": str(t), "xUsed": str(x),
                "digestHex": digest.hex(),
            }
            return value, meta

        rejected += 1
        log.warning("rejected biased sample (attempt %d, x=%d >= %d)", attempts, x, t)
        if rejected > max_rejections:
            raise RangeExhausted(f"no acceptable sample after {rejected} rejections")

        slot = clock.current_slot()
        ts = clock.current_timestamp()
        digest = mix((digest, u64_le(slot), i64_le(ts), rejected.to_bytes(4, "little")))
