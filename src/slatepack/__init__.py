"""
Slatepack - armored, optionally encrypted slate transport

Python implementation of slatepack encode/decode using X25519 + ChaCha20-Poly1305.
"""

from .address import parse_recipient_key
from .armor import armor, unarmor
from .config import SlatepackConfig, DEFAULT_CONFIG
from .dispatch import (
    DecodedSlatepack,
    encode_slatepack,
    encode_slatepack_with_keys,
    encode_slatepack_with_wallet,
    decode_slatepack,
    decode_slatepack_with_wallet,
)
from .envelope import SlatepackEnvelope, encode_envelope, decode_envelope
from .keys import KeyPair, placeholder_keypair, public_key_to_bytes, public_key_from_bytes
from .packer import Slatepacker
from .purpose import infer_slate_purpose
from .resolver import KeySource, KeySourceKind, resolve_sender_key
from .slate import Slate, ParticipantData
from .types import (
    SlateVersion,
    SlatePurpose,
    SlatepackError,
    InvalidSlateError,
    InvalidEncodingError,
    InvalidKeyLengthError,
    InvalidKeyError,
    MissingSenderKeyError,
    DecryptionFailedError,
    RequiresWalletContextError,
    SlateSerializationError,
    InvalidEnvelopeError,
    EncryptionError,
    DecryptionError,
    SlateExpiredError,
    KeyDerivationError,
)
from .wallet import WalletHandle, SeedWallet

__version__ = "0.1.0"

__all__ = [
    # Dispatch
    "DecodedSlatepack",
    "encode_slatepack",
    "encode_slatepack_with_keys",
    "encode_slatepack_with_wallet",
    "decode_slatepack",
    "decode_slatepack_with_wallet",
    # Address
    "parse_recipient_key",
    # Purpose
    "infer_slate_purpose",
    # Keys
    "KeyPair",
    "placeholder_keypair",
    "public_key_to_bytes",
    "public_key_from_bytes",
    "KeySource",
    "KeySourceKind",
    "resolve_sender_key",
    # Wallet
    "WalletHandle",
    "SeedWallet",
    # Slate
    "Slate",
    "ParticipantData",
    # Envelope
    "SlatepackEnvelope",
    "encode_envelope",
    "decode_envelope",
    "armor",
    "unarmor",
    "Slatepacker",
    # Config
    "SlatepackConfig",
    "DEFAULT_CONFIG",
    # Types
    "SlateVersion",
    "SlatePurpose",
    # Errors
    "SlatepackError",
    "InvalidSlateError",
    "InvalidEncodingError",
    "InvalidKeyLengthError",
    "InvalidKeyError",
    "MissingSenderKeyError",
    "DecryptionFailedError",
    "RequiresWalletContextError",
    "SlateSerializationError",
    "InvalidEnvelopeError",
    "EncryptionError",
    "DecryptionError",
    "SlateExpiredError",
    "KeyDerivationError",
]
