"""Slatepack encryption transform: slate + keys <-> armored text."""

import hashlib
import logging
import os
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from cryptography.hazmat.primitives.hashes import SHA256
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305
from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey, X25519PublicKey

from .armor import armor, unarmor
from .envelope import SlatepackEnvelope, encode_envelope, decode_envelope
from .keys import (
    KeyPair,
    generate_ephemeral_keypair,
    x25519_ecdh,
    public_key_to_bytes,
    public_key_from_bytes,
)
from .slate import Slate
from .types import (
    ENCRYPTION_INFO_PREFIX,
    NONCE_SIZE,
    PUBLIC_KEY_SIZE,
    EncryptionError,
    DecryptionError,
    InvalidEnvelopeError,
    SlateExpiredError,
    SlatePurpose,
    SlateVersion,
)

logger = logging.getLogger(__name__)

_TEST_RNG_LABEL = b"Slatepack-test-rng"


def _derive_symmetric_key(
    shared_secret: bytes,
    ephemeral_pub_bytes: bytes,
    sender_pub_bytes: bytes,
    recipient_pub_bytes: bytes,
) -> bytes:
    info = ENCRYPTION_INFO_PREFIX + sender_pub_bytes + recipient_pub_bytes
    hkdf = HKDF(algorithm=SHA256(), length=32, salt=ephemeral_pub_bytes, info=info)
    return hkdf.derive(shared_secret)


def _test_rng(plaintext: bytes):
    """Deterministic ephemeral key and nonce, for reproducible test output."""
    digest = hashlib.sha256(_TEST_RNG_LABEL + plaintext).digest()
    private_key = X25519PrivateKey.from_private_bytes(digest)
    nonce = hashlib.sha256(_TEST_RNG_LABEL + digest).digest()[:NONCE_SIZE]
    return private_key, private_key.public_key(), nonce


class Slatepacker:
    """
    An opened slatepack.

    Instances are produced by ``decrypt_slatepack``; ``encrypt_to_send``
    goes the other way and returns armored text.
    """

    def __init__(self, envelope: SlatepackEnvelope, slate: Slate) -> None:
        self.envelope = envelope
        self._slate = slate

    @property
    def purpose(self) -> SlatePurpose:
        return self.envelope.purpose

    def get_sender(self) -> Optional[X25519PublicKey]:
        """The sender public key recorded in the envelope, if any."""
        if not any(self.envelope.sender_public_key):
            return None
        return public_key_from_bytes(self.envelope.sender_public_key)

    def get_recipient(self) -> Optional[X25519PublicKey]:
        """The recipient public key recorded in the envelope, if encrypted."""
        if self.envelope.recipient_public_key is None:
            return None
        return public_key_from_bytes(self.envelope.recipient_public_key)

    def to_result_slate(self) -> Slate:
        return self._slate

    @staticmethod
    def encrypt_to_send(
        slate: Slate,
        version: SlateVersion,
        purpose: SlatePurpose,
        sender_public_key: X25519PublicKey,
        recipient_public_key: Optional[X25519PublicKey],
        sender_secret: KeyPair,
        use_test_rng: bool = False,
        expiry_height: Optional[int] = None,
    ) -> str:
        """
        Pack a slate into an armored slatepack.

        With a recipient the slate is encrypted for that recipient; without
        one it is carried in the clear under the sender identity.

        Args:
            slate: The slate to pack
            version: Target slate version (only SlateVersion.SP)
            purpose: Protocol stage to record in the envelope
            sender_public_key: Sender's X25519 public key
            recipient_public_key: Recipient's X25519 public key, or None
            sender_secret: Sender's key pair
            use_test_rng: Deterministic ephemeral key and nonce (tests only)
            expiry_height: Optional chain height after which the slatepack expires

        Returns:
            The armored slatepack string

        Raises:
            EncryptionError: If the slate cannot be packed
        """
        if version is not SlateVersion.SP:
            raise EncryptionError(f"Unsupported slatepack version: {version}")
        if sender_secret.is_wiped:
            raise EncryptionError("Sender secret key has been wiped")

        try:
            plaintext = slate.to_json().encode("utf-8")
        except (TypeError, ValueError) as e:
            raise EncryptionError(f"Failed to serialize slate: {e}") from e

        sender_pub_bytes = public_key_to_bytes(sender_public_key)

        if recipient_public_key is None:
            envelope = SlatepackEnvelope(
                purpose=purpose,
                sender_public_key=sender_pub_bytes,
                recipient_public_key=None,
                ephemeral_public_key=bytes(PUBLIC_KEY_SIZE),
                nonce=bytes(NONCE_SIZE),
                payload=plaintext,
                expiry_height=expiry_height,
            )
            return armor(encode_envelope(envelope))

        if use_test_rng:
            ephemeral_private, ephemeral_public, nonce = _test_rng(plaintext)
        else:
            ephemeral_private, ephemeral_public = generate_ephemeral_keypair()
            nonce = os.urandom(NONCE_SIZE)

        recipient_pub_bytes = public_key_to_bytes(recipient_public_key)
        ephemeral_pub_bytes = public_key_to_bytes(ephemeral_public)

        try:
            shared_secret = x25519_ecdh(ephemeral_private, recipient_public_key)
        except ValueError as e:
            raise EncryptionError(f"Key exchange with recipient failed: {e}") from e

        symmetric_key = _derive_symmetric_key(
            shared_secret, ephemeral_pub_bytes, sender_pub_bytes, recipient_pub_bytes
        )

        envelope = SlatepackEnvelope(
            purpose=purpose,
            sender_public_key=sender_pub_bytes,
            recipient_public_key=recipient_pub_bytes,
            ephemeral_public_key=ephemeral_pub_bytes,
            nonce=nonce,
            payload=b"",
            expiry_height=expiry_height,
        )
        # The header is authenticated so sender, recipient and purpose cannot be swapped
        envelope.payload = ChaCha20Poly1305(symmetric_key).encrypt(nonce, plaintext, envelope.header())

        logger.debug("Packed encrypted slatepack (purpose=%s)", purpose.name)
        return armor(encode_envelope(envelope))

    @classmethod
    def decrypt_slatepack(
        cls,
        data: bytes,
        secret: KeyPair,
        height: int = 0,
    ) -> "Slatepacker":
        """
        Open an armored slatepack.

        Args:
            data: Armored slatepack bytes
            secret: Our key pair; must be the recipient's for encrypted slatepacks
            height: Current chain height for expiry checks (0 skips the check)

        Returns:
            The opened Slatepacker

        Raises:
            InvalidEnvelopeError: If the armor or envelope is malformed
            DecryptionError: If the payload cannot be decrypted with this key
            SlateExpiredError: If the slatepack is past its expiry height
            InvalidSlateError: If the payload is not a valid slate
        """
        envelope = decode_envelope(unarmor(data))

        if height > 0 and envelope.expiry_height is not None and height > envelope.expiry_height:
            raise SlateExpiredError(envelope.expiry_height, height)

        if envelope.is_encrypted:
            plaintext = cls._decrypt_payload(envelope, secret)
        else:
            plaintext = envelope.payload

        try:
            slate_json = plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidEnvelopeError("Slatepack payload is not UTF-8") from e

        return cls(envelope, Slate.deserialize_upgrade_plain(slate_json))

    @staticmethod
    def _decrypt_payload(envelope: SlatepackEnvelope, secret: KeyPair) -> bytes:
        if secret.is_wiped:
            raise DecryptionError("Secret key has been wiped")
        if secret.public_key_bytes != envelope.recipient_public_key:
            raise DecryptionError("Slatepack is not encrypted for this key")

        try:
            ephemeral_public = public_key_from_bytes(envelope.ephemeral_public_key)
            shared_secret = x25519_ecdh(secret.private_key, ephemeral_public)
        except ValueError as e:
            raise DecryptionError(f"Key exchange failed: {e}") from e

        symmetric_key = _derive_symmetric_key(
            shared_secret,
            envelope.ephemeral_public_key,
            envelope.sender_public_key,
            envelope.recipient_public_key,
        )
        try:
            return ChaCha20Poly1305(symmetric_key).decrypt(
                envelope.nonce, envelope.payload, envelope.header()
            )
        except InvalidTag as e:
            raise DecryptionError("Slatepack payload authentication failed") from e
