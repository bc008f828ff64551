from attestation_tracker.models.attestation import AttestationRecord, AttestationStatus
from attestation_tracker.models.slot import SlotLookup, SlotLookupKind
from attestation_tracker.models.report import ClassificationResult, AggregateReport
