"""Tests for envelope encoding and armoring."""

import pytest
from slatepack.armor import armor, unarmor
from slatepack.envelope import SlatepackEnvelope, encode_envelope, decode_envelope
from slatepack.types import HEADER_SIZE, InvalidEnvelopeError, SlatePurpose


def _envelope(**overrides) -> SlatepackEnvelope:
    fields = dict(
        purpose=SlatePurpose.SEND_INITIAL,
        sender_public_key=bytes([0x11] * 32),
        recipient_public_key=bytes([0x22] * 32),
        ephemeral_public_key=bytes([0x33] * 32),
        nonce=bytes([0x44] * 12),
        payload=b"ciphertext-and-tag",
    )
    fields.update(overrides)
    return SlatepackEnvelope(**fields)


class TestEnvelope:
    """Binary envelope layout."""

    def test_layout(self) -> None:
        encoded = encode_envelope(_envelope(expiry_height=500))

        assert len(encoded) == HEADER_SIZE + len(b"ciphertext-and-tag")
        assert encoded[0] == 0x01  # version
        assert encoded[1] == SlatePurpose.SEND_INITIAL
        assert encoded[2] == 0x03  # encrypted + expiry
        assert encoded[3:35] == bytes([0x11] * 32)
        assert encoded[35:67] == bytes([0x22] * 32)
        assert encoded[111:119] == (500).to_bytes(8, "big")

    def test_decode(self) -> None:
        original = _envelope(expiry_height=500)
        assert decode_envelope(encode_envelope(original)) == original

    def test_plain_envelope_has_no_recipient(self) -> None:
        plain = _envelope(recipient_public_key=None, purpose=SlatePurpose.FULL_SLATE)
        encoded = encode_envelope(plain)
        decoded = decode_envelope(encoded)

        assert encoded[2] == 0x00
        assert encoded[35:67] == bytes(32)
        assert decoded.recipient_public_key is None
        assert not decoded.is_encrypted
        assert decoded.expiry_height is None

    def test_too_short(self) -> None:
        with pytest.raises(InvalidEnvelopeError, match="too short"):
            decode_envelope(bytes(HEADER_SIZE - 1))

    def test_unknown_version(self) -> None:
        encoded = bytearray(encode_envelope(_envelope()))
        encoded[0] = 0x02
        with pytest.raises(InvalidEnvelopeError, match="version"):
            decode_envelope(bytes(encoded))

    def test_unknown_purpose(self) -> None:
        encoded = bytearray(encode_envelope(_envelope()))
        encoded[1] = 0x7F
        with pytest.raises(InvalidEnvelopeError, match="purpose"):
            decode_envelope(bytes(encoded))

    def test_unknown_flags(self) -> None:
        encoded = bytearray(encode_envelope(_envelope()))
        encoded[2] = 0x80
        with pytest.raises(InvalidEnvelopeError, match="flags"):
            decode_envelope(bytes(encoded))


class TestArmor:
    """Text framing of envelope bytes."""

    def test_framing(self) -> None:
        text = armor(b"hello slatepack")

        assert text.startswith("BEGINSLATEPACK. ")
        assert text.endswith(". ENDSLATEPACK.")
        body = text[len("BEGINSLATEPACK. ") : -len(". ENDSLATEPACK.")]
        assert all(len(word) <= 15 for word in body.split(" "))

    def test_unarmor(self) -> None:
        data = encode_envelope(_envelope())
        assert unarmor(armor(data).encode("ascii")) == data

    def test_whitespace_is_ignored(self) -> None:
        data = b"wrapped by a mail client"
        text = armor(data).replace(" ", "\n  ")
        assert unarmor(text.encode("ascii")) == data

    def test_surrounding_text_is_ignored(self) -> None:
        data = b"payload"
        text = f"Please sign this:\n{armor(data)}\nThanks"
        assert unarmor(text.encode("ascii")) == data

    def test_checksum_mismatch(self) -> None:
        text = armor(b"some envelope data")
        body_start = len("BEGINSLATEPACK. ")
        flipped = "B" if text[body_start + 8] != "B" else "C"
        tampered = text[: body_start + 8] + flipped + text[body_start + 9 :]

        with pytest.raises(InvalidEnvelopeError):
            unarmor(tampered.encode("ascii"))

    @pytest.mark.parametrize(
        "text",
        [
            b"",
            b"not a slatepack",
            b"BEGINSLATEPACK. abc",
            b"BEGINSLATEPACK. abc ENDSLATEPACK.",
            b"BEGINSLATEPACK. . ENDSLATEPACK.",
            "BEGINSLATEPACK. é . ENDSLATEPACK.".encode("utf-8"),
        ],
    )
    def test_malformed(self, text: bytes) -> None:
        with pytest.raises(InvalidEnvelopeError):
            unarmor(text)
