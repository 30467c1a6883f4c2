"""Wallet key derivation interface and a seed-based implementation."""

import threading
from abc import ABC, abstractmethod
from typing import Optional

from .keys import KeyPair, derive_keys_from_seed
from .types import KeyDerivationError, WALLET_DERIVATION_SALT, WALLET_DEFAULT_PATH


class WalletHandle(ABC):
    """Interface for a wallet that can hand out slatepack key pairs."""

    @abstractmethod
    def derive_keypair(self, path: Optional[str], index: int) -> KeyPair:
        """
        Derive the slatepack key pair at a derivation index.

        The caller owns the returned pair and is expected to wipe it.
        """
        ...


class SeedWallet(WalletHandle):
    """
    Wallet handle deriving key pairs from a master seed with HKDF-SHA256.

    Derivation is serialized by an internal lock held only for the duration
    of a single derivation, so one handle may be shared between threads.
    """

    def __init__(self, seed: bytes, default_path: str = WALLET_DEFAULT_PATH) -> None:
        if len(seed) < 32:
            raise ValueError(f"Seed must be at least 32 bytes, got {len(seed)}")
        self._seed = bytes(seed)
        self._default_path = default_path
        self._lock = threading.Lock()

    def derive_keypair(self, path: Optional[str], index: int) -> KeyPair:
        if index < 0 or index >= 2**32:
            raise KeyDerivationError(f"Derivation index out of range: {index}")

        info = (path or self._default_path).encode("utf-8") + index.to_bytes(4, byteorder="big")
        with self._lock:
            return derive_keys_from_seed(self._seed, WALLET_DERIVATION_SALT, info)

    def __repr__(self) -> str:
        return f"SeedWallet(path={self._default_path})"
