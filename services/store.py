# services/store.py
import os, tempfile, threading, logging
from typing import Dict, Optional, Protocol
from pydantic import ValidationError as ModelError
from errors import StorageError
from models import LotteryResult

log = logging.getLogger(__name__)

class Ledger(Protocol):
    def get(self, key: bytes) -> Optional[bytes]: ...
    def put(self, key: bytes, data: bytes) -> None: ...

class MemoryLedger:
    def __init__(self):
        self._items: Dict[bytes, bytes] = {}

    def get(self, key: bytes) -> Optional[bytes]:
        return self._items.get(key)

    def put(self, key: bytes, data: bytes) -> None:
        self._items[key] = bytes(data)

    def __len__(self):
        return len(self._items)

class FileLedger:
    """Один JSON-файл на ключ; запись атомарная (tmp + fsync + replace)."""

    def __init__(self, root: str):
        self.root = root

    def _path(self, key: bytes) -> str:
        return os.path.join(self.root, f"{key.hex()}.json")

    def get(self, key: bytes) -> Optional[bytes]:
        p = self._path(key)
        if not os.path.exists(p):
            return None
        with open(p, "rb") as f:
            return f.read()

    def put(self, key: bytes, data: bytes) -> None:
        os.makedirs(self.root, exist_ok=True)
        tmp_fd, tmp_path = tempfile.mkstemp(dir=self.root, prefix=f".{key.hex()}.", suffix=".tmp")
        try:
            with os.fdopen(tmp_fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self._path(key))
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

class ResultStore:
    def __init__(self, ledger: Ledger):
        self.ledger = ledger
        self._lock = threading.Lock()

    def load(self, key: bytes) -> Optional[LotteryResult]:
        try:
            raw = self.ledger.get(key)
        except OSError as e:
            raise StorageError(f"ledger read failed: {e}") from e
        if raw is None:
            return None
        try:
            return LotteryResult.model_validate_json(raw)
        except ModelError as e:
            raise StorageError(f"corrupt result record {key.hex()}") from e

    def upsert(self, key: bytes, result: LotteryResult) -> None:
        """Создаёт запись или целиком перезаписывает прежнюю."""
        data = result.model_dump_json().encode("utf-8")
        with self._lock:
            try:
                self.ledger.put(key, data)
            except OSError as e:
                log.error("ledger write failed for %s: %s", key.hex(), e)
                raise StorageError(f"ledger write failed: {e}") from e

def make_ledger(store_dir: str) -> Ledger:
    return FileLedger(store_dir) if store_dir else MemoryLedger()
