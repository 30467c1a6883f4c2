"""
Encode and decode entry points for slatepacks.

``encode_slatepack`` turns slate JSON into an armored slatepack, encrypting
it when a recipient address is given. ``decode_slatepack`` goes the other
way. When no wallet is offered, decoding tries the placeholder key used for
unencrypted slatepacks; a failure then means the slatepack most likely needs
a real key, reported as ``RequiresWalletContextError``. A corrupted
unencrypted slatepack fails the same way: the envelope does not say whether
it was encrypted.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Union

from .address import parse_recipient_key
from .config import SlatepackConfig, DEFAULT_CONFIG
from .keys import KeyPair, public_key_to_bytes
from .packer import Slatepacker
from .purpose import infer_slate_purpose
from .resolver import KeySource, resolve_sender_key
from .slate import Slate
from .types import (
    SlatepackError,
    DecryptionFailedError,
    RequiresWalletContextError,
    SlateSerializationError,
)
from .wallet import WalletHandle

logger = logging.getLogger(__name__)

SenderKey = Union[KeyPair, WalletHandle, KeySource, None]


@dataclass(frozen=True)
class DecodedSlatepack:
    """Result of decoding a slatepack; unpacks as (slate_json, sender, recipient)."""
    slate_json: str
    sender: Optional[str] = None
    recipient: Optional[str] = None

    def __iter__(self) -> Iterator[Optional[str]]:
        return iter((self.slate_json, self.sender, self.recipient))


def _as_key_source(sender: SenderKey) -> KeySource:
    if isinstance(sender, KeySource):
        return sender
    if isinstance(sender, KeyPair):
        return KeySource.explicit(sender)
    if isinstance(sender, WalletHandle):
        return KeySource.from_wallet(sender)
    if sender is None:
        return KeySource.placeholder()
    raise TypeError(f"Unsupported sender key type: {type(sender).__name__}")


def encode_slatepack(
    slate_json: str,
    recipient_address: Optional[str] = None,
    sender: SenderKey = None,
    *,
    config: Optional[SlatepackConfig] = None,
) -> str:
    """
    Encode slate JSON into an armored slatepack.

    Args:
        slate_json: JSON representation of the slate
        recipient_address: Recipient address for encryption (None for unencrypted)
        sender: Sender key pair, wallet handle or KeySource (required when encrypting)
        config: Optional settings (defaults to DEFAULT_CONFIG)

    Returns:
        The armored slatepack string

    Raises:
        InvalidSlateError: If the slate JSON is invalid
        MissingSenderKeyError: If a recipient is given without a sender key
        InvalidEncodingError, InvalidKeyLengthError, InvalidKeyError: Bad recipient address
    """
    config = config or DEFAULT_CONFIG
    slate = Slate.deserialize_upgrade_plain(slate_json)

    if recipient_address is None:
        sender_key = resolve_sender_key(KeySource.placeholder())
        recipient_key = None
    else:
        sender_key = resolve_sender_key(
            _as_key_source(sender), config.derivation_index, for_encryption=True
        )
        try:
            recipient_key = parse_recipient_key(recipient_address)
        except SlatepackError:
            sender_key.wipe()
            raise

    purpose = infer_slate_purpose(slate)
    logger.debug(
        "Encoding slatepack (purpose=%s, encrypted=%s)", purpose.name, recipient_key is not None
    )

    with sender_key:
        return Slatepacker.encrypt_to_send(
            slate,
            config.version,
            purpose,
            sender_key.public_key,
            recipient_key,
            sender_key,
            use_test_rng=config.use_test_rng,
        )


def encode_slatepack_with_keys(
    slate_json: str,
    recipient_address: Optional[str] = None,
    sender_secret: Optional[KeyPair] = None,
    *,
    config: Optional[SlatepackConfig] = None,
) -> str:
    """Encode with an explicit sender key pair (the caller keeps ownership of it)."""
    return encode_slatepack(
        slate_json, recipient_address, KeySource.from_optional(secret=sender_secret), config=config
    )


def encode_slatepack_with_wallet(
    slate_json: str,
    recipient_address: Optional[str] = None,
    wallet: Optional[WalletHandle] = None,
    *,
    config: Optional[SlatepackConfig] = None,
) -> str:
    """Encode with the sender key derived from a wallet."""
    return encode_slatepack(
        slate_json, recipient_address, KeySource.from_optional(wallet=wallet), config=config
    )


def decode_slatepack(
    armored: Union[str, bytes],
    wallet: Optional[WalletHandle] = None,
    *,
    config: Optional[SlatepackConfig] = None,
) -> DecodedSlatepack:
    """
    Decode an armored slatepack into slate JSON.

    Args:
        armored: The armored slatepack
        wallet: Wallet whose key opens encrypted slatepacks
        config: Optional settings (defaults to DEFAULT_CONFIG)

    Returns:
        DecodedSlatepack with the slate JSON and hex sender/recipient keys

    Raises:
        DecryptionFailedError: If the wallet key cannot open the slatepack
        RequiresWalletContextError: If no wallet was given and the placeholder key fails
        SlateSerializationError: If the decoded slate cannot be serialized
    """
    config = config or DEFAULT_CONFIG
    data = armored.encode("ascii", errors="replace") if isinstance(armored, str) else bytes(armored)

    if wallet is not None:
        secret = resolve_sender_key(KeySource.from_wallet(wallet), config.derivation_index)
        with secret:
            try:
                packer = Slatepacker.decrypt_slatepack(data, secret, config.reference_height)
            except SlatepackError as e:
                raise DecryptionFailedError(f"Failed to decrypt slatepack: {e}") from e
    else:
        with resolve_sender_key(KeySource.placeholder()) as secret:
            try:
                packer = Slatepacker.decrypt_slatepack(data, secret, config.reference_height)
            except SlatepackError as e:
                logger.debug("Placeholder key could not open slatepack: %s", e)
                raise RequiresWalletContextError(
                    "Failed to decode slatepack. It may be encrypted and require wallet access."
                ) from e

    sender = packer.get_sender()
    recipient = packer.get_recipient()

    try:
        slate_json = packer.to_result_slate().to_json()
    except (TypeError, ValueError) as e:
        raise SlateSerializationError(f"Failed to serialize slate to JSON: {e}") from e

    return DecodedSlatepack(
        slate_json=slate_json,
        sender=public_key_to_bytes(sender).hex() if sender is not None else None,
        recipient=public_key_to_bytes(recipient).hex() if recipient is not None else None,
    )


def decode_slatepack_with_wallet(
    armored: Union[str, bytes],
    wallet: Optional[WalletHandle],
    *,
    config: Optional[SlatepackConfig] = None,
) -> DecodedSlatepack:
    """Decode using a wallet key; same as ``decode_slatepack(armored, wallet)``."""
    return decode_slatepack(armored, wallet, config=config)
