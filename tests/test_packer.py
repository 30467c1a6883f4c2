"""Tests for the slatepack encryption transform."""

import json

import pytest
from slatepack.keys import KeyPair, placeholder_keypair, public_key_to_bytes
from slatepack.packer import Slatepacker
from slatepack.slate import Slate
from slatepack.types import (
    DecryptionError,
    EncryptionError,
    SlateExpiredError,
    SlatePurpose,
    SlateVersion,
)
from .test_vectors import ALICE_SEED_HEX, BOB_SEED_HEX, SLATE_V3, SLATE_V3_JSON


@pytest.fixture
def alice() -> KeyPair:
    return KeyPair(bytes.fromhex(ALICE_SEED_HEX))


@pytest.fixture
def bob() -> KeyPair:
    return KeyPair(bytes.fromhex(BOB_SEED_HEX))


@pytest.fixture
def slate() -> Slate:
    return Slate.deserialize_upgrade_plain(SLATE_V3_JSON)


def _encrypt(slate, sender, recipient, **kwargs) -> str:
    return Slatepacker.encrypt_to_send(
        slate,
        SlateVersion.SP,
        SlatePurpose.SEND_INITIAL,
        sender.public_key,
        recipient.public_key if recipient is not None else None,
        sender,
        **kwargs,
    )


class TestEncryptToSend:
    """Packing slates."""

    def test_encrypted_hides_slate(self, slate, alice, bob) -> None:
        armored = _encrypt(slate, alice, bob)
        assert armored.startswith("BEGINSLATEPACK.")
        assert SLATE_V3["id"] not in armored

    def test_test_rng_is_deterministic(self, slate, alice, bob) -> None:
        assert _encrypt(slate, alice, bob, use_test_rng=True) == _encrypt(
            slate, alice, bob, use_test_rng=True
        )

    def test_production_rng_varies(self, slate, alice, bob) -> None:
        assert _encrypt(slate, alice, bob) != _encrypt(slate, alice, bob)

    def test_only_sp_version(self, slate, alice, bob) -> None:
        with pytest.raises(EncryptionError, match="version"):
            Slatepacker.encrypt_to_send(
                slate, SlateVersion.V3, SlatePurpose.FULL_SLATE, alice.public_key, None, alice
            )

    def test_wiped_sender(self, slate, alice, bob) -> None:
        alice.wipe()
        with pytest.raises(EncryptionError, match="wiped"):
            _encrypt(slate, alice, bob)


class TestDecryptSlatepack:
    """Opening slatepacks."""

    def test_recipient_opens(self, slate, alice, bob) -> None:
        packer = Slatepacker.decrypt_slatepack(_encrypt(slate, alice, bob).encode(), bob)

        assert json.loads(packer.to_result_slate().to_json()) == SLATE_V3
        assert packer.purpose == SlatePurpose.SEND_INITIAL
        assert public_key_to_bytes(packer.get_sender()) == alice.public_key_bytes
        assert public_key_to_bytes(packer.get_recipient()) == bob.public_key_bytes

    def test_wrong_key_fails(self, slate, alice, bob) -> None:
        armored = _encrypt(slate, alice, bob).encode()
        with pytest.raises(DecryptionError):
            Slatepacker.decrypt_slatepack(armored, placeholder_keypair())

    def test_plain_opens_with_any_key(self, slate, alice) -> None:
        armored = _encrypt(slate, alice, None).encode()
        packer = Slatepacker.decrypt_slatepack(armored, placeholder_keypair())

        assert packer.get_recipient() is None
        assert json.loads(packer.to_result_slate().to_json()) == SLATE_V3

    def test_expiry(self, slate, alice, bob) -> None:
        armored = _encrypt(slate, alice, bob, expiry_height=100).encode()

        Slatepacker.decrypt_slatepack(armored, bob, height=0)
        Slatepacker.decrypt_slatepack(armored, bob, height=100)
        with pytest.raises(SlateExpiredError) as exc_info:
            Slatepacker.decrypt_slatepack(armored, bob, height=101)
        assert exc_info.value.expiry_height == 100
