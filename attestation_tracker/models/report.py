from dataclasses import dataclass, field
from typing import List

from attestation_tracker.models.attestation import AttestationRecord


@dataclass
class ClassificationResult:
    """Missed and late attestations of a single validator."""
    validator_index: str
    attestation_count: int = 0
    missed_attestations: List[AttestationRecord] = field(default_factory=list)
    late_attestations: List[AttestationRecord] = field(default_factory=list)


@dataclass
class AggregateReport:
    """Totals across every validator of a survey run."""
    total_attestations: int = 0
    missed_attestations: List[AttestationRecord] = field(default_factory=list)
    late_attestations: List[AttestationRecord] = field(default_factory=list)
    processed_validators: int = 0
    skipped_validators: int = 0

    def add(self, result: ClassificationResult) -> None:
        self.total_attestations += result.attestation_count
        self.missed_attestations.extend(result.missed_attestations)
        self.late_attestations.extend(result.late_attestations)
        self.processed_validators += 1

    @property
    def missed_with_missed_block(self) -> int:
        return sum(1 for a in self.missed_attestations if a.block_missed)

    @property
    def late_with_missed_block(self) -> int:
        return sum(1 for a in self.late_attestations if a.block_missed)
