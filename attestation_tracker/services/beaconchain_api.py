from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from attestation_tracker.config import config
from attestation_tracker.exceptions import FetchError
from attestation_tracker.models.attestation import AttestationRecord
from attestation_tracker.models.slot import SlotLookup
from attestation_tracker.services.fetcher import RateLimitedFetcher
from attestation_tracker.utils.logger import logger

# beaconcha.in answers "ERROR: could not retrieve db results" for slots without a block
ERROR_STATUS_PREFIX = "ERROR"

def _error_status(body: Any) -> Optional[str]:
    if isinstance(body, dict):
        status = body.get("status")
        if isinstance(status, str) and status.startswith(ERROR_STATUS_PREFIX):
            return status
    return None

class BeaconchainAPI:
    """Client for the beaconcha.in v1 REST API."""
    
    def __init__(self, fetcher: RateLimitedFetcher, base_url: str = None, api_key: str = None):
        self.fetcher = fetcher
        self.base_url = (base_url or config.BEACONCHAIN_API_URL).rstrip('/')
        self.api_key = config.BEACONCHAIN_API_KEY if api_key is None else api_key
    
    def _params(self) -> Optional[Dict[str, str]]:
        return {"apikey": self.api_key} if self.api_key else None
    
    async def get_validator_attestations(self, validator_index: Union[int, str]) -> List[AttestationRecord]:
        """
        Get the attestation history (roughly the last 100 epochs) of a validator.

        An explorer error body, a missing `data` list or a record that cannot be
        parsed raises FetchError so the caller skips the validator.
        """
        url = f"{self.base_url}/api/v1/validator/{validator_index}/attestations"
        response = await self.fetcher.fetch(url, params=self._params())
        
        status = _error_status(response)
        if status is not None:
            raise FetchError(url, body=response, message=f"Explorer returned {status} for {url}")
        
        data = response.get("data") if isinstance(response, dict) else None
        if not isinstance(data, list):
            raise FetchError(url, body=response, message=f"No attestation list in response from {url}")
        
        try:
            return [AttestationRecord.from_api_response(a) for a in data]
        except ValidationError as e:
            raise FetchError(url, body=response,
                             message=f"Invalid attestation record from {url}: {e.error_count()} error(s)") from e
    
    async def get_slot(self, slot: int) -> SlotLookup:
        """
        Probe a slot.

        Never raises: an error body from the explorer means the slot has no
        block, any other failure leaves the answer unknown.
        """
        url = f"{self.base_url}/api/v1/slot/{slot}"
        try:
            response = await self.fetcher.fetch(url, params=self._params())
        except FetchError as e:
            status = _error_status(e.body)
            if status is not None:
                logger.debug("Slot has no block", slot=slot, status=status)
                return SlotLookup.not_found(slot, status)
            logger.error("Failed to fetch slot details", slot=slot, error=str(e), body=e.body)
            return SlotLookup.unavailable(slot)
        
        status = _error_status(response)
        if status is not None:
            return SlotLookup.not_found(slot, status)
        return SlotLookup.found(slot, response.get("status", "") if isinstance(response, dict) else "")
