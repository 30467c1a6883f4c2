"""Tests for slate deserialization and serialization."""

import json

import pytest
from slatepack.slate import Slate
from slatepack.types import InvalidSlateError
from .test_vectors import SLATE_V3, SLATE_V3_JSON, SLATE_V2, SLATE_V2_JSON, make_slate_json


class TestDeserialize:
    """Upgrade-aware parsing."""

    def test_v3(self) -> None:
        slate = Slate.deserialize_upgrade_plain(SLATE_V3_JSON)

        assert slate.num_participants == 2
        assert len(slate.participant_data) == 1
        assert slate.participant_data[0].part_sig is None
        assert slate.id == SLATE_V3["id"]
        assert slate.version == 3

    def test_v2_is_upgraded(self) -> None:
        slate = Slate.deserialize_upgrade_plain(SLATE_V2_JSON)
        data = slate.to_dict()

        assert slate.version == 3
        assert data["version_info"]["orig_version"] == 2
        assert data["ttl_cutoff_height"] is None
        assert data["payment_proof"] is None
        assert data["amount"] == SLATE_V2["amount"]

    def test_signature_is_read(self) -> None:
        slate = Slate.deserialize_upgrade_plain(make_slate_json(2, 1, records=2))
        assert [p.is_signed for p in slate.participant_data] == [True, False]

    @pytest.mark.parametrize(
        "slate_json",
        [
            "",
            "not json",
            "[]",
            "42",
            json.dumps({"num_participants": 2}),
            json.dumps(dict(SLATE_V3, version_info={"version": 1})),
            json.dumps(dict(SLATE_V3, version_info={"version": 4})),
            json.dumps(dict(SLATE_V3, num_participants="2")),
            json.dumps(dict(SLATE_V3, participant_data={})),
            json.dumps(dict(SLATE_V3, participant_data=["x"])),
        ],
    )
    def test_invalid(self, slate_json: str) -> None:
        with pytest.raises(InvalidSlateError):
            Slate.deserialize_upgrade_plain(slate_json)


class TestSerialize:
    """JSON output keeps every field."""

    def test_round_trip_keeps_fields(self) -> None:
        slate = Slate.deserialize_upgrade_plain(SLATE_V3_JSON)
        assert json.loads(slate.to_json()) == SLATE_V3

    def test_compact(self) -> None:
        slate = Slate.deserialize_upgrade_plain(SLATE_V3_JSON)
        assert ": " not in slate.to_json()
