# services/guard.py
import logging
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey
from errors import InvalidOwner, InvalidSigner
from models import AccessPolicy, SIGNATURE_LEN, encode_identity

log = logging.getLogger(__name__)

def draw_message(namespace: bytes, caller: bytes, uid: str, participant: bytes,
                 nonce: int = 0) -> bytes:
    """
    Каноническое сообщение, которое владелец подписывает для розыгрыша.
    nonce берётся из сохранённой записи: подпись годится ровно на один розыгрыш.
    """
    uid_b = (uid or "").encode("utf-8")
    return (b"generate_random" + namespace + caller + int(nonce).to_bytes(8, "little")
            + len(uid_b).to_bytes(4, "little") + uid_b + participant)

def verify_signature(caller: bytes, proof: bytes | None, message: bytes) -> bool:
    if not proof or len(proof) != SIGNATURE_LEN:
        return False
    try:
        Ed25519PublicKey.from_public_bytes(caller).verify(proof, message)
    except (InvalidSignature, ValueError):
        return False
    return True

class AccessGuard:
    def __init__(self, policy: AccessPolicy):
        self.policy = policy

    def check_owner(self, caller: bytes) -> None:
        if caller != self.policy.owner:
            log.warning("draw refused: %s is not the owner", encode_identity(caller))
            raise InvalidOwner("caller is not the configured owner")

    def authorize(self, caller: bytes, signature_ok: bool) -> None:
        # проверка владельца раньше подписи
        self.check_owner(caller)
        if not signature_ok:
            log.warning("draw refused: missing or invalid signature from owner")
            raise InvalidSigner("request is not signed by the caller")
