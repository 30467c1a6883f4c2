"""Resolution of the sender key pair for a slatepack operation."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .keys import KeyPair, placeholder_keypair
from .types import MissingSenderKeyError
from .wallet import WalletHandle


class KeySourceKind(Enum):
    """Where the sender key pair comes from."""
    EXPLICIT = "explicit"
    WALLET = "wallet"
    PLACEHOLDER = "placeholder"


@dataclass(frozen=True)
class KeySource:
    """Tagged key source: an explicit secret, a wallet, or the placeholder."""
    kind: KeySourceKind
    secret: Optional[KeyPair] = None
    wallet: Optional[WalletHandle] = None

    @classmethod
    def explicit(cls, secret: KeyPair) -> "KeySource":
        return cls(KeySourceKind.EXPLICIT, secret=secret)

    @classmethod
    def from_wallet(cls, wallet: WalletHandle) -> "KeySource":
        return cls(KeySourceKind.WALLET, wallet=wallet)

    @classmethod
    def placeholder(cls) -> "KeySource":
        return cls(KeySourceKind.PLACEHOLDER)

    @classmethod
    def from_optional(
        cls,
        secret: Optional[KeyPair] = None,
        wallet: Optional[WalletHandle] = None,
    ) -> "KeySource":
        """An explicit secret wins over a wallet; with neither, the placeholder."""
        if secret is not None:
            return cls.explicit(secret)
        if wallet is not None:
            return cls.from_wallet(wallet)
        return cls.placeholder()

    @property
    def is_placeholder(self) -> bool:
        return self.kind is KeySourceKind.PLACEHOLDER


def resolve_sender_key(
    source: KeySource,
    derivation_index: int = 0,
    for_encryption: bool = False,
) -> KeyPair:
    """
    Produce a freshly owned sender key pair from a key source.

    Args:
        source: Where to take the key from
        derivation_index: Wallet derivation index (wallet sources only)
        for_encryption: Refuse the placeholder when True

    Returns:
        A KeyPair owned by the caller, who should wipe it after use

    Raises:
        MissingSenderKeyError: If encryption is requested with no real key
    """
    if source.kind is KeySourceKind.EXPLICIT:
        return source.secret.copy()

    if source.kind is KeySourceKind.WALLET:
        # Derivation errors belong to the wallet and propagate unchanged.
        # The wallet may keep its pair, so the caller gets its own copy to wipe.
        return source.wallet.derive_keypair(None, derivation_index).copy()

    if for_encryption:
        raise MissingSenderKeyError(
            "Sender secret key is required for encrypted slatepacks. Please provide wallet context."
        )
    return placeholder_keypair()
