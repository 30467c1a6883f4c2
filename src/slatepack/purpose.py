"""Protocol stage inference for outgoing slates."""

from .slate import Slate
from .types import SlatePurpose


def infer_slate_purpose(slate: Slate) -> SlatePurpose:
    """
    Infer the protocol stage of a slate from its partial signatures.

    Two-party flow:
        0 partial signatures  -> SEND_INITIAL
        1 partial signature   -> SEND_RESPONSE
        2+ partial signatures -> FULL_SLATE

    Invoice, multi-party and any other flow falls back to FULL_SLATE.
    """
    if slate.num_participants == 2 and slate.participant_data:
        sig_count = sum(1 for p in slate.participant_data if p.is_signed)
        if sig_count == 0:
            return SlatePurpose.SEND_INITIAL
        if sig_count == 1:
            return SlatePurpose.SEND_RESPONSE

    return SlatePurpose.FULL_SLATE
