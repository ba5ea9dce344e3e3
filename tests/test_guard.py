import pytest
from pydantic import ValidationError

from errors import InvalidOwner, InvalidSigner
from models import AccessPolicy, encode_identity
from services.guard import AccessGuard, draw_message, verify_signature

from conftest import NAMESPACE, PARTICIPANT, public_bytes


def test_owner_with_valid_signature_passes(owner):
    AccessGuard(AccessPolicy(owner=owner)).authorize(owner, True)


def test_policy_accepts_base58_owner(owner):
    assert AccessPolicy(owner=encode_identity(owner)).owner == owner


def test_policy_is_immutable(owner):
    policy = AccessPolicy(owner=owner)
    with pytest.raises(ValidationError):
        policy.owner = b"\x00" * 32


def test_foreign_caller_is_invalid_owner(owner, stranger_key):
    guard = AccessGuard(AccessPolicy(owner=owner))
    with pytest.raises(InvalidOwner):
        guard.authorize(public_bytes(stranger_key), True)


def test_owner_check_runs_before_signature_check(owner, stranger_key):
    guard = AccessGuard(AccessPolicy(owner=owner))
    with pytest.raises(InvalidOwner):
        guard.authorize(public_bytes(stranger_key), False)


def test_unsigned_owner_is_invalid_signer(owner):
    with pytest.raises(InvalidSigner):
        AccessGuard(AccessPolicy(owner=owner)).authorize(owner, False)


def test_verify_signature(owner_key, owner, stranger_key):
    msg = draw_message(NAMESPACE, owner, "ABC", PARTICIPANT)
    assert verify_signature(owner, owner_key.sign(msg), msg)
    assert not verify_signature(owner, stranger_key.sign(msg), msg)
    assert not verify_signature(owner, owner_key.sign(msg + b"x"), msg)
    assert not verify_signature(owner, None, msg)
    assert not verify_signature(owner, b"\x00" * 10, msg)


def test_draw_message_binds_uid_and_participant(owner):
    base = draw_message(NAMESPACE, owner, "ABC", PARTICIPANT)
    assert base != draw_message(NAMESPACE, owner, "ABD", PARTICIPANT)
    assert base != draw_message(NAMESPACE, owner, "ABC", b"\x51" * 32)
    assert draw_message(NAMESPACE, owner, "", PARTICIPANT) == (
        b"generate_random" + NAMESPACE + owner + b"\x00" * 8 + b"\x00\x00\x00\x00" + PARTICIPANT
    )


def test_draw_message_binds_nonce(owner):
    assert draw_message(NAMESPACE, owner, "ABC", PARTICIPANT, 0) != draw_message(NAMESPACE, owner, "ABC", PARTICIPANT, 1)
    assert (7).to_bytes(8, "little") in draw_message(NAMESPACE, owner, "", PARTICIPANT, 7)


def test_check_owner_alone(owner, stranger_key):
    guard = AccessGuard(AccessPolicy(owner=owner))
    guard.check_owner(owner)
    with pytest.raises(InvalidOwner):
        guard.check_owner(public_bytes(stranger_key))
