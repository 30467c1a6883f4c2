"""Key pairs and key helpers for slatepack."""

from typing import Tuple

from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from cryptography.hazmat.primitives.hashes import SHA256
from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey, X25519PublicKey
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    PublicFormat,
    PrivateFormat,
    NoEncryption,
)

from .types import SECRET_KEY_SIZE, PLACEHOLDER_SECRET


class KeyPair:
    """
    An X25519 secret/public key pair with a single owner.

    The secret is kept in a mutable buffer so the owner can zeroize it with
    ``wipe()`` (or by using the pair as a context manager) as soon as the
    operation that needed it returns. ``copy()`` hands out an independent
    instance; two owners never share one buffer.
    """

    __slots__ = ("_secret", "_public_key", "_wiped")

    def __init__(self, secret: bytes) -> None:
        if len(secret) != SECRET_KEY_SIZE:
            raise ValueError(f"Secret key must be {SECRET_KEY_SIZE} bytes, got {len(secret)}")
        self._secret = bytearray(secret)
        self._wiped = False
        self._public_key = self.private_key.public_key()

    @classmethod
    def from_private_key(cls, private_key: X25519PrivateKey) -> "KeyPair":
        """Take ownership of the raw bytes of a ``cryptography`` private key."""
        return cls(private_key.private_bytes(Encoding.Raw, PrivateFormat.Raw, NoEncryption()))

    @property
    def private_key(self) -> X25519PrivateKey:
        if self.is_wiped:
            raise ValueError("Secret key has been wiped")
        return X25519PrivateKey.from_private_bytes(bytes(self._secret))

    @property
    def public_key(self) -> X25519PublicKey:
        return self._public_key

    @property
    def public_key_bytes(self) -> bytes:
        """The public key as raw bytes (32 bytes)."""
        return public_key_to_bytes(self._public_key)

    @property
    def is_wiped(self) -> bool:
        return self._wiped

    def copy(self) -> "KeyPair":
        if self.is_wiped:
            raise ValueError("Secret key has been wiped")
        return KeyPair(bytes(self._secret))

    def wipe(self) -> None:
        """Overwrite the secret with zeros."""
        for i in range(len(self._secret)):
            self._secret[i] = 0
        self._wiped = True

    def __enter__(self) -> "KeyPair":
        return self

    def __exit__(self, *exc_info) -> None:
        self.wipe()

    def __repr__(self) -> str:
        return f"KeyPair(public={self.public_key_bytes.hex()})"


def placeholder_keypair() -> KeyPair:
    """
    The fixed, non-secret identity used for slatepacks without encryption.

    Never use it to satisfy an encryption request: anyone can rebuild it.
    """
    return KeyPair(PLACEHOLDER_SECRET)


def derive_keys_from_seed(seed: bytes, salt: bytes, info: bytes) -> KeyPair:
    """
    Derive an X25519 key pair from a seed using HKDF-SHA256.

    Args:
        seed: Input key material (at least 32 bytes)
        salt: HKDF salt
        info: HKDF context info

    Returns:
        The derived KeyPair
    """
    if len(seed) < 32:
        raise ValueError(f"Seed must be at least 32 bytes, got {len(seed)}")

    hkdf = HKDF(
        algorithm=SHA256(),
        length=SECRET_KEY_SIZE,
        salt=salt,
        info=info,
    )
    return KeyPair(hkdf.derive(seed))


def generate_ephemeral_keypair() -> Tuple[X25519PrivateKey, X25519PublicKey]:
    """
    Generate a random ephemeral X25519 key pair for slatepack encryption.

    Returns:
        Tuple of (private_key, public_key)
    """
    private_key = X25519PrivateKey.generate()
    public_key = private_key.public_key()
    return private_key, public_key


def x25519_ecdh(private_key: X25519PrivateKey, public_key: X25519PublicKey) -> bytes:
    """
    Perform X25519 ECDH key exchange.

    Args:
        private_key: Our private key
        public_key: Their public key

    Returns:
        32-byte shared secret
    """
    return private_key.exchange(public_key)


def public_key_to_bytes(public_key: X25519PublicKey) -> bytes:
    """Convert X25519 public key to raw bytes."""
    return public_key.public_bytes(Encoding.Raw, PublicFormat.Raw)


def public_key_from_bytes(data: bytes) -> X25519PublicKey:
    """Create X25519 public key from raw bytes."""
    return X25519PublicKey.from_public_bytes(data)
