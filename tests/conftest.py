from typing import Iterable, List

import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from models import AccessPolicy
from services.draw import DrawService
from services.guard import draw_message
from services.store import MemoryLedger, ResultStore


NAMESPACE = bytes(range(100, 132))
PARTICIPANT = bytes([0x50]) * 32
ORACLE_DIGEST = bytes.fromhex("d1" * 32)


def make_key(seed: int) -> Ed25519PrivateKey:
    return Ed25519PrivateKey.from_private_bytes(bytes([seed]) * 32)


def public_bytes(key: Ed25519PrivateKey) -> bytes:
    return key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)


class FixedClock:
    """TimeSource, который не сдвигается, пока тест его не поменяет."""

    def __init__(self, slot: int = 10, ts: int = 1000):
        self.slot = slot
        self.ts = ts
        self.reads = 0

    def current_slot(self) -> int:
        self.reads += 1
        return self.slot

    def current_timestamp(self) -> int:
        return self.ts


class FixedOracle:
    def __init__(self, digest: bytes = ORACLE_DIGEST):
        self.digest = digest
        self.reads = 0

    def recent_digest(self) -> bytes:
        self.reads += 1
        return self.digest


class ScriptedMix:
    """Замена hash chain: отдаёт заранее заданную последовательность digest."""

    def __init__(self, digests: List[bytes]):
        self.digests = list(digests)
        self.calls: List[tuple] = []

    def __call__(self, segments: Iterable[bytes]) -> bytes:
        self.calls.append(tuple(segments))
        return self.digests[len(self.calls) - 1]


def digest_with_low(raw: int) -> bytes:
    return raw.to_bytes(8, "little") + b"\x00" * 24


@pytest.fixture
def owner_key():
    return make_key(1)


@pytest.fixture
def owner(owner_key):
    return public_bytes(owner_key)


@pytest.fixture
def stranger_key():
    return make_key(2)


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def oracle():
    return FixedOracle()


@pytest.fixture
def ledger():
    return MemoryLedger()


@pytest.fixture
def service(owner, clock, oracle, ledger):
    return DrawService(
        policy=AccessPolicy(owner=owner),
        namespace=NAMESPACE,
        clock=clock,
        oracle=oracle,
        store=ResultStore(ledger),
    )


@pytest.fixture
def sign():
    def _sign(key: Ed25519PrivateKey, uid: str, participant: bytes = PARTICIPANT,
              nonce: int = 0) -> bytes:
        return key.sign(draw_message(NAMESPACE, public_bytes(key), uid, participant, nonce))
    return _sign
