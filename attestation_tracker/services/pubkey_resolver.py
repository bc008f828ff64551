import os
from typing import List

from attestation_tracker.config import config
from attestation_tracker.services.batch_runner import read_identifiers
from attestation_tracker.services.beacon_node_api import BeaconNodeAPI
from attestation_tracker.services.report_writer import ReportWriter
from attestation_tracker.utils.logger import logger


def normalize_pubkey(pubkey: str) -> str:
    """Return the key with exactly one 0x prefix."""
    key = pubkey.strip()
    if key[:2].lower() == "0x":
        key = key[2:]
    return f"0x{key}"


def default_output_file() -> str:
    return os.path.join(config.OUTPUT_DIR, "validator_indexes.txt")


class PubkeyResolver:
    """Resolves validator public keys to validator indexes with one bulk request."""

    def __init__(self, beacon_node_api: BeaconNodeAPI, state_id: str = "head"):
        self.beacon_node_api = beacon_node_api
        self.state_id = state_id

    async def resolve(self, pubkeys: List[str]) -> List[str]:
        ids = [normalize_pubkey(p) for p in pubkeys]
        validators = await self.beacon_node_api.post_state_validators(self.state_id, ids)
        if len(validators) != len(ids):
            logger.warning("Not every public key resolved to a validator",
                           requested=len(ids), resolved=len(validators))
        return [str(v["index"]) for v in validators]

    async def resolve_file(self, pubkey_file: str, output_file: str = None) -> str:
        pubkeys = read_identifiers(pubkey_file)
        indexes = await self.resolve(pubkeys)
        return ReportWriter.write_index_list(indexes, output_file or default_output_file())
