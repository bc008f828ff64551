from typing import List, Optional, Union

from attestation_tracker.config import config
from attestation_tracker.exceptions import FetchError
from attestation_tracker.models.attestation import AttestationRecord, AttestationStatus
from attestation_tracker.models.report import ClassificationResult
from attestation_tracker.models.slot import SlotLookup, SlotLookupKind
from attestation_tracker.services.beaconchain_api import BeaconchainAPI
from attestation_tracker.utils.logger import logger


class AttestationClassifier:
    """
    Sorts a validator's attestations into missed, late and on-time.

    Missed and late attestations are annotated with `block_missed`, i.e. whether
    the block at attester_slot + 1 was itself missed. On-time attestations are
    only counted.
    """

    def __init__(self, beaconchain_api: BeaconchainAPI,
                 late_threshold: int = config.LATE_ATTESTATION_INCLUSION_DELAY,
                 slot_error_as_missed: bool = config.SLOT_ERROR_AS_MISSED):
        self.beaconchain_api = beaconchain_api
        self.late_threshold = late_threshold
        self.slot_error_as_missed = slot_error_as_missed

    async def classify(self, validator_index: Union[int, str], epoch: Optional[int] = None):
        """
        Classify one validator.

        With `epoch`, returns the attestations of that epoch that were included.
        Without it, returns a ClassificationResult over the whole history.
        Returns None if the attestation list could not be fetched.
        """
        logger.info("Processing validator index", validator_index=validator_index)
        try:
            attestations = await self.beaconchain_api.get_validator_attestations(validator_index)
        except FetchError as e:
            logger.error("Failed to fetch validator attestations",
                         validator_index=validator_index, error=str(e), body=e.body)
            return None

        if epoch is not None:
            return self.filter_epoch(attestations, epoch)
        return await self.survey(validator_index, attestations)

    @staticmethod
    def filter_epoch(attestations: List[AttestationRecord], epoch: int) -> List[AttestationRecord]:
        return [a for a in attestations if a.epoch == epoch and a.status == AttestationStatus.INCLUDED]

    async def survey(self, validator_index: Union[int, str],
                     attestations: List[AttestationRecord]) -> ClassificationResult:
        result = ClassificationResult(validator_index=str(validator_index),
                                      attestation_count=len(attestations))
        if not attestations:
            return result

        # The latest epoch may not be finalized yet
        pending_epoch = max(a.epoch for a in attestations)

        for attestation in attestations:
            if attestation.missed:
                if attestation.epoch == pending_epoch:
                    continue
                block_missed = await self.is_block_missed(attestation.attester_slot + 1)
                result.missed_attestations.append(attestation.with_block_missed(block_missed))

            elif attestation.included and attestation.inclusion_delay >= self.late_threshold:
                block_missed = await self.is_block_missed(attestation.attester_slot + 1)
                if block_missed:
                    # the attestation could not be included in a block that does not exist
                    optimal_delay = attestation.inclusion_slot - attestation.attester_slot - 2
                    if optimal_delay < self.late_threshold:
                        continue
                result.late_attestations.append(attestation.with_block_missed(block_missed))

        logger.debug("Classified validator attestations",
                     validator_index=validator_index,
                     total=result.attestation_count,
                     missed=len(result.missed_attestations),
                     late=len(result.late_attestations))
        return result

    async def is_block_missed(self, slot: int) -> bool:
        lookup = await self.beaconchain_api.get_slot(slot)
        return self.block_missed_from_lookup(lookup)

    def block_missed_from_lookup(self, lookup: SlotLookup) -> bool:
        if lookup.kind == SlotLookupKind.NOT_FOUND:
            return True
        if lookup.kind == SlotLookupKind.UNAVAILABLE:
            logger.warning("Slot lookup failed, block missed is unknown",
                           slot=lookup.slot, assumed_missed=self.slot_error_as_missed)
            return self.slot_error_as_missed
        return False
