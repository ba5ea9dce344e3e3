from typing import Iterable
from blake3 import blake3
from cryptography.hazmat.primitives import hashes

def domain_hash(tag: bytes, data: bytes) -> bytes:
    return blake3(tag + data).digest()

def sha256(data: bytes) -> bytes:
    h = hashes.Hash(hashes.SHA256())
    h.update(data)
    return h.finalize()

def hash_chain(segments: Iterable[bytes]) -> bytes:
    """
    Двухраундовое смешивание:
      r1 = SHA256(seg_0 || seg_1 || ... || seg_n)
      r2 = SHA256(r1)
    Второй раунд видит только 32 байта r1, а не отдельные сегменты.
    """
    h = hashes.Hash(hashes.SHA256())
    for seg in segments:
        h.update(seg)
    return sha256(h.finalize())

def derive_key(namespace: bytes, caller: bytes, seed: bytes = b"lottery_result") -> bytes:
    """Адрес записи результата: стабилен для пары (namespace, caller)."""
    return domain_hash(seed, caller + namespace)
