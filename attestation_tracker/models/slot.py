from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SlotLookupKind(Enum):
    """Outcome of probing a slot on the explorer."""
    FOUND = "found"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class SlotLookup:
    """
    Result of a /api/v1/slot/{slot} call.

    NOT_FOUND means the explorer reported no block for the slot. UNAVAILABLE
    means the lookup itself failed and the answer is unknown.
    """
    slot: int
    kind: SlotLookupKind
    status: Optional[str] = None

    @classmethod
    def found(cls, slot: int, status: str) -> "SlotLookup":
        return cls(slot, SlotLookupKind.FOUND, status)

    @classmethod
    def not_found(cls, slot: int, status: Optional[str] = None) -> "SlotLookup":
        return cls(slot, SlotLookupKind.NOT_FOUND, status)

    @classmethod
    def unavailable(cls, slot: int) -> "SlotLookup":
        return cls(slot, SlotLookupKind.UNAVAILABLE)

    def __repr__(self):
        return f"SlotLookup({self.slot} {self.kind.value} {self.status})"
