"""Recipient address parsing."""

import binascii

from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PublicKey

from .keys import placeholder_keypair, public_key_from_bytes, x25519_ecdh
from .types import (
    PUBLIC_KEY_SIZE,
    InvalidEncodingError,
    InvalidKeyLengthError,
    InvalidKeyError,
)


def parse_recipient_key(address: str) -> X25519PublicKey:
    """
    Extract the recipient public key from an address.

    Accepts either a bare hex public key (64 hex chars), or a composite
    ``<hex-public-key>@<host>:<port>`` address where only the part before the
    first ``@`` matters here.

    Args:
        address: The recipient address

    Returns:
        The recipient's X25519 public key

    Raises:
        InvalidEncodingError: If the key material is not valid hex
        InvalidKeyLengthError: If the key is not 32 bytes
        InvalidKeyError: If the bytes are not a valid public key
    """
    if "@" in address:
        key_hex = address.split("@", 1)[0]
        if not key_hex:
            raise InvalidEncodingError("Invalid recipient address (missing public key)")
    else:
        key_hex = address

    return _public_key_from_hex(key_hex)


def _public_key_from_hex(key_hex: str) -> X25519PublicKey:
    try:
        key_bytes = binascii.unhexlify(key_hex)
    except ValueError as e:
        raise InvalidEncodingError(f"Failed to decode recipient public key hex: {e}") from e

    if len(key_bytes) != PUBLIC_KEY_SIZE:
        raise InvalidKeyLengthError(PUBLIC_KEY_SIZE, len(key_bytes))

    try:
        public_key = public_key_from_bytes(key_bytes)
        # Low-order points yield an all-zero shared secret and are rejected here
        x25519_ecdh(placeholder_keypair().private_key, public_key)
    except ValueError as e:
        raise InvalidKeyError(f"Invalid recipient public key: {e}") from e

    return public_key
