from enum import IntEnum
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any

class AttestationStatus(IntEnum):
    """Attestation status codes used by beaconcha.in."""
    MISSED = 0
    INCLUDED = 1

class AttestationRecord(BaseModel):
    """One validator duty as returned by /api/v1/validator/{index}/attestations."""
    
    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)
    
    validator_index: int = Field(alias="validatorindex")
    epoch: int
    attester_slot: int = Field(alias="attesterslot")
    inclusion_slot: int = Field(0, alias="inclusionslot")  # 0 = not included
    status: int
    block_missed: Optional[bool] = Field(None, alias="blockMissed")

    @classmethod
    def from_api_response(cls, attestation_data: Dict[str, Any]) -> "AttestationRecord":
        """Create a record from one element of the API `data` array."""
        return cls.model_validate(attestation_data)

    @property
    def included(self) -> bool:
        return self.status == AttestationStatus.INCLUDED and self.inclusion_slot > 0

    @property
    def missed(self) -> bool:
        """Status 0, or reported included without an inclusion slot. Other statuses are neither."""
        if self.status == AttestationStatus.MISSED:
            return True
        return self.status == AttestationStatus.INCLUDED and self.inclusion_slot == 0

    @property
    def inclusion_delay(self) -> Optional[int]:
        """Slots between the earliest possible inclusion and the actual one."""
        if not self.included:
            return None
        return self.inclusion_slot - self.attester_slot - 1

    def with_block_missed(self, block_missed: bool) -> "AttestationRecord":
        return self.model_copy(update={"block_missed": block_missed})

    def to_json_dict(self) -> Dict[str, Any]:
        """Serialize with the upstream field names, keeping unknown upstream fields."""
        exclude = {"block_missed"} if self.block_missed is None else None
        return self.model_dump(by_alias=True, exclude=exclude)
