import json
from typing import Any, Dict, List, Optional, Tuple

import pytest

from attestation_tracker.exceptions import FetchError
from attestation_tracker.models.attestation import AttestationRecord
from attestation_tracker.models.slot import SlotLookup


class FakeResponse:
    """Just enough of aiohttp.ClientResponse for the fetcher."""

    def __init__(self, status: int, body: Any):
        self.status = status
        self._body = body

    async def json(self, content_type=None):
        if isinstance(self._body, str):
            return json.loads(self._body)
        return self._body

    async def text(self):
        return self._body if isinstance(self._body, str) else json.dumps(self._body)


class _RequestContext:
    def __init__(self, response: FakeResponse):
        self.response = response

    async def __aenter__(self):
        return self.response

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False


class FakeSession:
    """Replays queued responses and records every request."""

    def __init__(self, responses: List[Any]):
        self.responses = list(responses)
        self.calls: List[Tuple[str, str, Optional[Dict], Any]] = []

    def request(self, method, url, params=None, json=None):
        self.calls.append((method, url, params, json))
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        status, body = item
        return _RequestContext(FakeResponse(status, body))

    async def close(self):
        pass


class FakeBeaconchainAPI:
    """In-memory stand-in for BeaconchainAPI."""

    def __init__(self, attestations: Dict[str, List[AttestationRecord]] = None,
                 missed_slots=(), unavailable_slots=(), failing=()):
        self.attestations = attestations or {}
        self.missed_slots = set(missed_slots)
        self.unavailable_slots = set(unavailable_slots)
        self.failing = set(failing)
        self.slot_calls: List[int] = []
        self.validator_calls: List[str] = []

    async def get_validator_attestations(self, validator_index):
        self.validator_calls.append(str(validator_index))
        if str(validator_index) in self.failing:
            raise FetchError(f"/api/v1/validator/{validator_index}/attestations", 500, {"status": "ERROR"})
        return self.attestations.get(str(validator_index), [])

    async def get_slot(self, slot):
        self.slot_calls.append(slot)
        if slot in self.unavailable_slots:
            return SlotLookup.unavailable(slot)
        if slot in self.missed_slots:
            return SlotLookup.not_found(slot, "ERROR: could not retrieve db results")
        return SlotLookup.found(slot, "OK")


def make_record(validator_index=1, epoch=10, attester_slot=None, inclusion_slot=None, status=1, **extra):
    if attester_slot is None:
        attester_slot = epoch * 32
    if inclusion_slot is None:
        inclusion_slot = attester_slot + 1 if status == 1 else 0
    return AttestationRecord.from_api_response({
        "validatorindex": validator_index,
        "epoch": epoch,
        "attesterslot": attester_slot,
        "inclusionslot": inclusion_slot,
        "status": status,
        **extra,
    })


@pytest.fixture
def record():
    return make_record


@pytest.fixture
def recorded_sleep():
    delays = []

    async def _sleep(delay):
        delays.append(delay)

    _sleep.delays = delays
    return _sleep
