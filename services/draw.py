# services/draw.py
"""
Розыгрыш целиком: Authorize -> Collect -> Mix -> Reduce -> Store.

Шаги выполняются под одним замком сервиса; любая ошибка прерывает розыгрыш
до записи, поэтому частичного состояния не бывает.
"""
import logging, threading
from typing import Callable, Iterable, Optional, Protocol
from errors import StorageError
from models import AccessPolicy, LotteryResult, encode_identity
from rng.mix import derive_key, hash_chain
from services.collect import DrawRequest, collect, uid_bytes
from services.guard import AccessGuard, draw_message, verify_signature
from services.sample import DEFAULT_MAX_REJECTIONS, RANGE_MAX, TimeSource, reduce_to_range
from services.store import ResultStore

log = logging.getLogger(__name__)

class EntropyOracle(Protocol):
    def recent_digest(self) -> bytes: ...

Verifier = Callable[[bytes, Optional[bytes], bytes], bool]

def checked_read(read):
    """Чтение внешнего источника; любой сбой становится StorageError."""
    try:
        return read()
    except StorageError:
        raise
    except Exception as e:
        log.error("entropy source read failed: %s", e)
        raise StorageError(f"entropy source read failed: {e}") from e

class CheckedClock:
    """TimeSource для цикла отказов: те же гарантии, что и при первом чтении."""

    def __init__(self, clock: TimeSource):
        self.clock = clock

    def current_slot(self) -> int:
        return checked_read(self.clock.current_slot)

    def current_timestamp(self) -> int:
        return checked_read(self.clock.current_timestamp)

class DrawService:
    def __init__(self, policy: AccessPolicy, namespace: bytes, clock: TimeSource,
                 oracle: EntropyOracle, store: ResultStore, *,
                 result_seed: bytes = b"lottery_result",
                 verifier: Verifier = verify_signature,
                 mix: Callable[[Iterable[bytes]], bytes] = hash_chain,
                 max_rejections: int = DEFAULT_MAX_REJECTIONS):
        self.guard = AccessGuard(policy)
        self.namespace = bytes(namespace)
        self.clock = clock
        self.oracle = oracle
        self.store = store
        self.result_seed = result_seed
        self.verifier = verifier
        self.mix = mix
        self.max_rejections = max_rejections
        self._lock = threading.Lock()

    def key_for(self, caller: bytes) -> bytes:
        return derive_key(self.namespace, caller, self.result_seed)

    def current_result(self, caller: bytes) -> Optional[LotteryResult]:
        return self.store.load(self.key_for(caller))

    def current_nonce(self, caller: bytes) -> int:
        rec = self.current_result(caller)
        return rec.nonce if rec is not None else 0

    def generate_random(self, caller: bytes, proof: Optional[bytes], uid: str,
                        participant: bytes) -> LotteryResult:
        caller = bytes(caller)
        self.guard.check_owner(caller)
        key = self.key_for(caller)

        with self._lock:
            # nonce читается и увеличивается под тем же замком, что и запись
            prev = self.store.load(key)
            nonce = prev.nonce if prev is not None else 0
            message = draw_message(self.namespace, caller, uid, participant, nonce)
            self.guard.authorize(caller, self.verifier(caller, proof, message))
            uid_bytes(uid)

            req = DrawRequest(self.namespace, caller, uid, participant)
            slot, ts, oracle_digest = self._read_sources()
            bundle = collect(req, slot, ts, oracle_digest, key)
            digest = self.mix(bundle)
            value, meta = reduce_to_range(digest, CheckedClock(self.clock), RANGE_MAX,
                                          mix=self.mix, max_rejections=self.max_rejections)

            result = LotteryResult(uid=req.uid, value=value, timestamp=ts, nonce=nonce + 1)
            self.store.upsert(key, result)

        log.info("draw %s -> %d (key=%s slot=%d attempts=%d nonce=%d)",
                 encode_identity(caller), value, key.hex(), slot, meta["attempts"], nonce)
        return result

    def _read_sources(self):
        slot = checked_read(self.clock.current_slot)
        ts = checked_read(self.clock.current_timestamp)
        oracle_digest = checked_read(self.oracle.recent_digest)
        return slot, ts, oracle_digest

def build_service(cfg) -> DrawService:
    """Собирает сервис из настроек: политика доступа фиксируется здесь один раз."""
    from models import parse_identity
    from services.store import make_ledger

    if cfg.ENTROPY_SOURCE == "local":
        from sources.loc_entropy import LocalClock, LocalOracle
        clock, oracle = LocalClock(), LocalOracle()
    else:
        from sources.solana import SolanaClock, SolanaOracle, SolanaRPC
        rpc = SolanaRPC(cfg.SOLANA_RPC_URL, cfg.RPC_TIMEOUT)
        clock, oracle = SolanaClock(rpc), SolanaOracle(rpc)

    log.info("draw service: owner=%s source=%s store=%s",
             cfg.OWNER, cfg.ENTROPY_SOURCE, cfg.STORE_DIR or "<memory>")
    return DrawService(
        policy=AccessPolicy(owner=cfg.OWNER),
        namespace=parse_identity(cfg.PROGRAM_ID),
        clock=clock,
        oracle=oracle,
        store=ResultStore(make_ledger(cfg.STORE_DIR)),
        result_seed=cfg.RESULT_SEED.encode(),
        max_rejections=cfg.MAX_REJECTIONS,
    )

_service: Optional[DrawService] = None

def get_service() -> DrawService:
    global _service
    if _service is None:
        from settings import settings
        _service = build_service(settings)
    return _service
