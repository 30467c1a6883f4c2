"""Envelope encoding and decoding for slatepacks."""

from dataclasses import dataclass
from typing import Optional

from .types import (
    ENVELOPE_VERSION,
    HEADER_SIZE,
    PUBLIC_KEY_SIZE,
    NONCE_SIZE,
    HEIGHT_SIZE,
    FLAG_ENCRYPTED,
    FLAG_HAS_EXPIRY,
    InvalidEnvelopeError,
    SlatePurpose,
)

_NO_RECIPIENT = bytes(PUBLIC_KEY_SIZE)


@dataclass
class SlatepackEnvelope:
    """Binary slatepack envelope."""
    purpose: SlatePurpose
    sender_public_key: bytes  # 32 bytes
    recipient_public_key: Optional[bytes]  # 32 bytes, None when not encrypted
    ephemeral_public_key: bytes  # 32 bytes, zeros when not encrypted
    nonce: bytes  # 12 bytes, zeros when not encrypted
    payload: bytes  # ciphertext + 16-byte tag, or plain slate JSON
    expiry_height: Optional[int] = None
    version: int = ENVELOPE_VERSION

    @property
    def is_encrypted(self) -> bool:
        return self.recipient_public_key is not None

    @property
    def flags(self) -> int:
        flags = 0
        if self.is_encrypted:
            flags |= FLAG_ENCRYPTED
        if self.expiry_height is not None:
            flags |= FLAG_HAS_EXPIRY
        return flags

    def header(self) -> bytes:
        """The envelope header, also used as associated data when encrypting."""
        return (
            bytes([self.version, int(self.purpose), self.flags])
            + self.sender_public_key
            + (self.recipient_public_key or _NO_RECIPIENT)
            + self.ephemeral_public_key
            + self.nonce
            + (self.expiry_height or 0).to_bytes(HEIGHT_SIZE, byteorder="big")
        )


def encode_envelope(envelope: SlatepackEnvelope) -> bytes:
    """
    Encode an envelope to bytes.

    Format (119-byte header + payload):
        [0]        version (0x01)
        [1]        purpose
        [2]        flags (bit 0 encrypted, bit 1 has expiry height)
        [3-34]     senderPublicKey (32 bytes)
        [35-66]    recipientPublicKey (32 bytes, zeros if not encrypted)
        [67-98]    ephemeralPublicKey (32 bytes)
        [99-110]   nonce (12 bytes)
        [111-118]  expiryHeight (8 bytes, big-endian)
        [119+]     payload (variable)

    Args:
        envelope: SlatepackEnvelope to encode

    Returns:
        Encoded bytes
    """
    return envelope.header() + envelope.payload


def decode_envelope(data: bytes) -> SlatepackEnvelope:
    """
    Decode bytes into an envelope.

    Args:
        data: Encoded envelope bytes

    Returns:
        Decoded SlatepackEnvelope

    Raises:
        InvalidEnvelopeError: If data is invalid
    """
    if len(data) < HEADER_SIZE:
        raise InvalidEnvelopeError(f"Data too short: {len(data)} bytes (minimum {HEADER_SIZE})")

    version = data[0]
    if version != ENVELOPE_VERSION:
        raise InvalidEnvelopeError(f"Unknown version: {version}")

    try:
        purpose = SlatePurpose(data[1])
    except ValueError as e:
        raise InvalidEnvelopeError(f"Unknown purpose: {data[1]}") from e

    flags = data[2]
    if flags & ~(FLAG_ENCRYPTED | FLAG_HAS_EXPIRY):
        raise InvalidEnvelopeError(f"Unknown flags: {flags:#04x}")

    offset = 3
    sender_public_key = data[offset : offset + PUBLIC_KEY_SIZE]
    offset += PUBLIC_KEY_SIZE

    recipient_public_key = data[offset : offset + PUBLIC_KEY_SIZE]
    offset += PUBLIC_KEY_SIZE

    ephemeral_public_key = data[offset : offset + PUBLIC_KEY_SIZE]
    offset += PUBLIC_KEY_SIZE

    nonce = data[offset : offset + NONCE_SIZE]
    offset += NONCE_SIZE

    expiry_height = int.from_bytes(data[offset : offset + HEIGHT_SIZE], byteorder="big")
    offset += HEIGHT_SIZE

    return SlatepackEnvelope(
        version=version,
        purpose=purpose,
        sender_public_key=sender_public_key,
        recipient_public_key=recipient_public_key if flags & FLAG_ENCRYPTED else None,
        ephemeral_public_key=ephemeral_public_key,
        nonce=nonce,
        payload=data[offset:],
        expiry_height=expiry_height if flags & FLAG_HAS_EXPIRY else None,
    )
