"""Configuration for slatepack encode/decode operations."""

from dataclasses import dataclass

from .types import SlateVersion


@dataclass(frozen=True)
class SlatepackConfig:
    """
    Settings shared by the encode and decode dispatchers.

    Attributes:
        version: Target slatepack version for encoding.
        derivation_index: Wallet derivation index of the slatepack key.
        reference_height: Chain height used for expiry checks (0 disables them).
        use_test_rng: Deterministic encryption randomness. Never enable in production.
    """

    version: SlateVersion = SlateVersion.SP
    derivation_index: int = 0
    reference_height: int = 0
    use_test_rng: bool = False


DEFAULT_CONFIG = SlatepackConfig()
