from typing import Dict, List

from attestation_tracker.config import config
from attestation_tracker.exceptions import FetchError
from attestation_tracker.services.fetcher import RateLimitedFetcher

class BeaconNodeAPI:
    """Minimal client for the standard beacon node REST API."""
    
    def __init__(self, fetcher: RateLimitedFetcher, base_url: str = None):
        self.fetcher = fetcher
        self.base_url = (base_url or config.BEACON_NODE_URL).rstrip('/')
    
    async def post_state_validators(self, state_id: str, validator_ids: List[str]) -> List[Dict]:
        """Look up many validators of a state in a single request."""
        url = f"{self.base_url}/eth/v1/beacon/states/{state_id}/validators"
        response = await self.fetcher.fetch(url, method="POST", payload={"ids": validator_ids})
        
        if not isinstance(response, dict) or response.get("data") is None:
            raise FetchError(url, body=response, message="Invalid API response")
        return response["data"]
