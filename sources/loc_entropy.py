import os, time, threading
from blake3 import blake3

def cpu_jitter_bytes(samples: int = 20000) -> bytes:
    """
    Измеряем наносекундные дельты tight-loop; берём младший байт каждой дельты.
    """
    last = time.perf_counter_ns()
    out = bytearray()
    for _ in range(samples):
        now = time.perf_counter_ns()
        dt = now - last
        out.append(dt & 0xFF)  # LSB
        last = now
    return bytes(out)

class LocalClock:
    """Локальные часы без RPC: слот = счётчик чтений, время = wall clock."""

    def __init__(self, start_slot: int = 0):
        self._slot = start_slot
        self._lock = threading.Lock()

    def current_slot(self) -> int:
        with self._lock:
            self._slot += 1
            return self._slot

    def current_timestamp(self) -> int:
        return int(time.time())

class LocalOracle:
    def __init__(self, jitter_samples: int = 4096, urandom_bytes: int = 32):
        self.jitter_samples = jitter_samples
        self.urandom_bytes = urandom_bytes

    def recent_digest(self) -> bytes:
        h = blake3(cpu_jitter_bytes(self.jitter_samples))
        h.update(os.urandom(self.urandom_bytes))
        return h.digest()
