# services/collect.py
from typing import NamedTuple
from errors import UidTooLong

UID_MAX_BYTES = 12

class DrawRequest:
    def __init__(self, namespace: bytes, caller: bytes, uid: str, participant: bytes):
        self.namespace = bytes(namespace)
        self.caller = bytes(caller)
        self.uid = uid or ""
        # доп. участник добавляет непредсказуемость для вызывающего, но не доверенный источник
        self.participant = bytes(participant)

class EntropyBundle(NamedTuple):
    """Сегменты в фиксированном порядке; порядок влияет на итоговый digest."""
    namespace: bytes
    caller: bytes
    slot: bytes
    timestamp: bytes
    uid: bytes
    result_key: bytes
    participant: bytes
    oracle: bytes

def uid_bytes(uid: str) -> bytes:
    data = (uid or "").encode("utf-8")
    if len(data) > UID_MAX_BYTES:
        raise UidTooLong(f"uid is {len(data)} bytes, max {UID_MAX_BYTES}")
    return data

def u64_le(n: int) -> bytes:
    return int(n).to_bytes(8, "little", signed=False)

def i64_le(n: int) -> bytes:
    return int(n).to_bytes(8, "little", signed=True)

def collect(req: DrawRequest, slot: int, timestamp: int, oracle_digest: bytes,
            result_key: bytes) -> EntropyBundle:
    uid = uid_bytes(req.uid)
    # число привязано к записи, в которую будет сохранено
    return EntropyBundle(
        namespace=req.namespace,
        caller=req.caller,
        slot=u64_le(slot),
        timestamp=i64_le(timestamp),
        uid=uid,
        result_key=bytes(result_key),
        participant=req.participant,
        oracle=bytes(oracle_digest),
    )
