"""Type definitions for slatepack."""

from enum import Enum, IntEnum


class SlateVersion(Enum):
    """Slate serialization versions understood by this library."""
    V2 = 2
    V3 = 3
    SP = "SP"


class SlatePurpose(IntEnum):
    """Protocol stage embedded in a slatepack."""
    FULL_SLATE = 0
    SEND_INITIAL = 1
    SEND_RESPONSE = 2
    INVOICE_INITIAL = 3
    INVOICE_RESPONSE = 4


# Envelope constants
ENVELOPE_VERSION = 0x01
PUBLIC_KEY_SIZE = 32
SECRET_KEY_SIZE = 32
NONCE_SIZE = 12
TAG_SIZE = 16
HEIGHT_SIZE = 8
HEADER_SIZE = 119

FLAG_ENCRYPTED = 0x01
FLAG_HAS_EXPIRY = 0x02

# Armor constants
ARMOR_HEADER = "BEGINSLATEPACK."
ARMOR_FOOTER = "ENDSLATEPACK."
ARMOR_WORD_SIZE = 15
CHECKSUM_SIZE = 4

# Encryption info prefix
ENCRYPTION_INFO_PREFIX = b"Slatepack-v1"

# Wallet derivation constants
WALLET_DERIVATION_SALT = b"Slatepack-v1-wallet"
WALLET_DEFAULT_PATH = "m/0/1"

# Secret of the fixed placeholder identity used for unencrypted slatepacks
PLACEHOLDER_SECRET = bytes([1] * SECRET_KEY_SIZE)


# Exception types
class SlatepackError(Exception):
    """Base exception for slatepack errors."""
    code = 1


class InvalidSlateError(SlatepackError):
    """Input JSON does not deserialize to a valid slate."""
    code = 10


class InvalidEncodingError(SlatepackError):
    """Address or key material is not valid hexadecimal."""
    code = 11


class InvalidKeyLengthError(SlatepackError):
    """Decoded key material has the wrong length."""
    code = 12

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Invalid recipient public key length: expected {expected} bytes, got {actual}"
        )


class InvalidKeyError(SlatepackError):
    """Decoded bytes do not form a valid key."""
    code = 13


class MissingSenderKeyError(SlatepackError):
    """Encryption requested without a usable sender secret."""
    code = 14


class DecryptionFailedError(SlatepackError):
    """Opening a slatepack with the wallet key failed."""
    code = 15


class RequiresWalletContextError(SlatepackError):
    """Slatepack could not be opened without a wallet; retry with one."""
    code = 16


class SlateSerializationError(SlatepackError):
    """Decoded slate could not be serialized to JSON."""
    code = 17


class InvalidEnvelopeError(SlatepackError):
    """Invalid envelope or armor format."""
    code = 20


class EncryptionError(SlatepackError):
    """Encryption failed."""
    code = 21


class DecryptionError(SlatepackError):
    """Decryption failed."""
    code = 22


class SlateExpiredError(SlatepackError):
    """Slatepack is past its expiry height."""
    code = 23

    def __init__(self, expiry_height: int, height: int) -> None:
        self.expiry_height = expiry_height
        self.height = height
        super().__init__(
            f"Slatepack expired at height {expiry_height} (current height {height})"
        )


class KeyDerivationError(SlatepackError):
    """Wallet key derivation failed."""
    code = 30
