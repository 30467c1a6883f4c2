"""
Slate model for slatepack.

Only the fields needed to shepherd a slate through the envelope are typed
(participant count and participant signatures). Every other field is kept
as-is so that a slate survives a JSON round trip unchanged.
"""

import json
from dataclasses import dataclass, field
from typing import Any, List, Optional

from .types import InvalidSlateError, SlateVersion

CURRENT_SLATE_VERSION = SlateVersion.V3.value
SUPPORTED_SLATE_VERSIONS = (SlateVersion.V2.value, SlateVersion.V3.value)


@dataclass
class ParticipantData:
    """Per-participant entry of a slate."""
    fields: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "ParticipantData":
        if not isinstance(data, dict):
            raise InvalidSlateError(f"Participant data must be an object, got {type(data).__name__}")
        return cls(fields=dict(data))

    def to_dict(self) -> dict:
        return dict(self.fields)

    @property
    def id(self) -> Any:
        return self.fields.get("id")

    @property
    def part_sig(self) -> Optional[str]:
        return self.fields.get("part_sig")

    @property
    def is_signed(self) -> bool:
        return self.part_sig is not None


@dataclass
class Slate:
    """A transaction negotiation record exchanged between wallet parties."""
    num_participants: int
    participant_data: List[ParticipantData] = field(default_factory=list)
    fields: dict = field(default_factory=dict)

    @property
    def version(self) -> int:
        return self.fields.get("version_info", {}).get("version", CURRENT_SLATE_VERSION)

    @property
    def id(self) -> Optional[str]:
        return self.fields.get("id")

    @classmethod
    def deserialize_upgrade_plain(cls, slate_json: str) -> "Slate":
        """
        Parse slate JSON, upgrading older versions to the current one.

        Args:
            slate_json: JSON representation of the slate

        Returns:
            The parsed Slate

        Raises:
            InvalidSlateError: If the JSON is malformed or not a supported slate
        """
        try:
            data = json.loads(slate_json)
        except (TypeError, ValueError) as e:
            raise InvalidSlateError(f"Failed to parse slate JSON: {e}") from e

        if not isinstance(data, dict):
            raise InvalidSlateError("Slate JSON must be an object")

        return cls.from_dict(_upgrade(data))

    @classmethod
    def from_dict(cls, data: dict) -> "Slate":
        num_participants = data.get("num_participants")
        if not isinstance(num_participants, int) or isinstance(num_participants, bool):
            raise InvalidSlateError("Slate is missing an integer num_participants")

        participants = data.get("participant_data", [])
        if not isinstance(participants, list):
            raise InvalidSlateError("Slate participant_data must be a list")

        fields = {k: v for k, v in data.items() if k not in ("num_participants", "participant_data")}
        return cls(
            num_participants=num_participants,
            participant_data=[ParticipantData.from_dict(p) for p in participants],
            fields=fields,
        )

    def to_dict(self) -> dict:
        result = dict(self.fields)
        result["num_participants"] = self.num_participants
        result["participant_data"] = [p.to_dict() for p in self.participant_data]
        return result

    def to_json(self) -> str:
        """Serialize the slate to compact JSON."""
        return json.dumps(self.to_dict(), separators=(",", ":"))


def _upgrade(data: dict) -> dict:
    """Bring a slate dict up to the current version."""
    version_info = data.get("version_info")
    if not isinstance(version_info, dict):
        raise InvalidSlateError("Slate is missing version_info")

    version = version_info.get("version")
    if version not in SUPPORTED_SLATE_VERSIONS:
        raise InvalidSlateError(f"Unsupported slate version: {version}")

    if version == SlateVersion.V2.value:
        data = dict(data)
        data["version_info"] = dict(version_info, version=CURRENT_SLATE_VERSION)
        data.setdefault("ttl_cutoff_height", None)
        data.setdefault("payment_proof", None)

    return data
