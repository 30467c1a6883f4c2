"""Text armoring of encoded slatepack envelopes."""

import base64
import hashlib

from .types import (
    ARMOR_HEADER,
    ARMOR_FOOTER,
    ARMOR_WORD_SIZE,
    CHECKSUM_SIZE,
    InvalidEnvelopeError,
)


def _checksum(data: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()[:CHECKSUM_SIZE]


def armor(data: bytes) -> str:
    """
    Wrap envelope bytes into transport-safe text.

    Format: ``BEGINSLATEPACK. <words> . ENDSLATEPACK.`` where the words are the
    unpadded base64url encoding of ``checksum + data`` split every 15 chars.

    Args:
        data: Encoded envelope bytes

    Returns:
        Armored slatepack string
    """
    body = base64.urlsafe_b64encode(_checksum(data) + data).rstrip(b"=").decode("ascii")
    words = [body[i : i + ARMOR_WORD_SIZE] for i in range(0, len(body), ARMOR_WORD_SIZE)]
    return f"{ARMOR_HEADER} {' '.join(words)}. {ARMOR_FOOTER}"


def unarmor(text: bytes) -> bytes:
    """
    Recover envelope bytes from armored text.

    Whitespace (including line breaks added by a transport) is ignored.

    Raises:
        InvalidEnvelopeError: If the framing or checksum is wrong
    """
    try:
        text = text.decode("ascii")
    except UnicodeDecodeError as e:
        raise InvalidEnvelopeError("Slatepack armor must be ASCII") from e

    text = "".join(text.split())
    header = ARMOR_HEADER.replace(" ", "")
    footer = ARMOR_FOOTER.replace(" ", "")

    start = text.find(header)
    end = text.find(footer, start + len(header)) if start >= 0 else -1
    if start < 0 or end < 0:
        raise InvalidEnvelopeError("Missing slatepack armor header or footer")

    body = text[start + len(header) : end]
    if not body.endswith("."):
        raise InvalidEnvelopeError("Missing slatepack armor body terminator")
    body = body[:-1]

    padding = 4 - len(body) % 4
    if padding != 4:
        body += "=" * padding
    try:
        raw = base64.urlsafe_b64decode(body.encode("ascii"))
    except ValueError as e:
        raise InvalidEnvelopeError(f"Invalid slatepack armor encoding: {e}") from e

    if len(raw) < CHECKSUM_SIZE:
        raise InvalidEnvelopeError("Slatepack armor body too short")

    checksum, data = raw[:CHECKSUM_SIZE], raw[CHECKSUM_SIZE:]
    if checksum != _checksum(data):
        raise InvalidEnvelopeError("Slatepack armor checksum mismatch")

    return data
