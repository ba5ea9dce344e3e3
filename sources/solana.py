# sources/solana.py
import base58, httpx, logging
from typing import Any, Optional
from errors import StorageError
from settings import settings

log = logging.getLogger(__name__)

class SolanaRPC:
    """Синхронный JSON-RPC клиент: розыгрыш не уступает управление другим розыгрышам."""

    def __init__(self, url: Optional[str] = None, timeout: Optional[float] = None,
                 client: Optional[httpx.Client] = None):
        self.url = url or settings.SOLANA_RPC_URL
        self.client = client or httpx.Client(timeout=timeout or settings.RPC_TIMEOUT)

    def call(self, method: str, params: list[Any]):
        try:
            r = self.client.post(self.url, json={
                "jsonrpc": "2.0", "id": 1, "method": method, "params": params
            })
            r.raise_for_status()
            j = r.json()
        except (httpx.HTTPError, ValueError) as e:
            log.error("Solana RPC %s failed: %s", method, e)
            raise StorageError(f"Solana RPC {method} failed: {e}") from e
        if "error" in j:
            log.error("Solana RPC %s returned error: %s", method, j["error"])
            raise StorageError(f"Solana RPC {method} error: {j['error']}")
        return j["result"]

    def close(self):
        self.client.close()

def _as_int(value, what: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise StorageError(f"bad {what} in RPC response: {value!r}") from e

class SolanaClock:
    """TimeSource: финализированный слот и его время (unix, сек.)."""

    def __init__(self, rpc: SolanaRPC):
        self.rpc = rpc
        self._slot: Optional[int] = None

    def current_slot(self) -> int:
        self._slot = _as_int(self.rpc.call("getSlot", [{"commitment": "finalized"}]), "slot")
        return self._slot

    def current_timestamp(self) -> int:
        slot = self._slot if self._slot is not None else self.current_slot()
        ts = self.rpc.call("getBlockTime", [slot])
        if ts is None:
            raise StorageError(f"no block time for slot {slot}")
        return _as_int(ts, "block time")

class SolanaOracle:
    """EntropyOracle: последний финализированный blockhash (32 байта)."""

    def __init__(self, rpc: SolanaRPC):
        self.rpc = rpc

    def recent_digest(self) -> bytes:
        res = self.rpc.call("getLatestBlockhash", [{"commitment": "finalized"}])
        bh = ((res or {}).get("value") or {}).get("blockhash")
        if not bh:
            raise StorageError("getLatestBlockhash returned no blockhash")
        try:
            return base58.b58decode(bh)
        except ValueError as e:
            raise StorageError(f"bad blockhash {bh!r}") from e
