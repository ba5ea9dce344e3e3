import base58
from pydantic import BaseModel, ConfigDict, Field, field_validator

IDENTITY_LEN = 32
SIGNATURE_LEN = 64

def parse_identity(value: str | bytes) -> bytes:
    """base58-строка (или сырые 32 байта) -> 32 байта идентичности."""
    if isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    else:
        try:
            raw = base58.b58decode(value.strip())
        except ValueError as e:
            raise ValueError(f"identity must be base58: {e}") from e
    if len(raw) != IDENTITY_LEN:
        raise ValueError(f"identity must be {IDENTITY_LEN} bytes, got {len(raw)}")
    return raw

def encode_identity(raw: bytes) -> str:
    return base58.b58encode(raw).decode()


class AccessPolicy(BaseModel):
    """Единственный владелец; создаётся один раз при старте и не меняется."""
    model_config = ConfigDict(frozen=True)

    owner: bytes

    @field_validator("owner", mode="before")
    @classmethod
    def _owner(cls, v):
        return parse_identity(v)


class LotteryResult(BaseModel):
    uid: str | None = None
    value: int = Field(..., ge=1, le=100_000)
    timestamp: int | None = None
    # номер следующей подписи владельца; растёт с каждой записью
    nonce: int = Field(0, ge=0)

    @field_validator("uid")
    @classmethod
    def _uid_len(cls, v):
        # длина в байтах UTF-8, а не в символах
        if v is not None and len(v.encode("utf-8")) > 12:
            raise ValueError("uid longer than 12 bytes")
        return v


class DrawIn(BaseModel):
    caller: str = Field(..., description="base58 идентичность вызывающего")
    signature: str | None = Field(None, description="base58 Ed25519 подпись draw-сообщения")
    uid: str = ""
    participant: str = Field(..., description="base58 идентичность доп. участника")

    @field_validator("caller", "participant")
    @classmethod
    def _identity(cls, v):
        parse_identity(v)
        return v


class DrawOut(BaseModel):
    caller: str
    key_hex: str
    value: int
    uid: str | None = None
    timestamp: int | None = None
    nonce: int = 0
