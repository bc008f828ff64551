import asyncio

import pytest

from attestation_tracker.services.batch_runner import BatchRunner, map_bounded, read_identifiers
from attestation_tracker.services.beaconchain_api import BeaconchainAPI
from attestation_tracker.services.classifier import AttestationClassifier
from attestation_tracker.services.fetcher import RateLimitedFetcher
from conftest import FakeBeaconchainAPI, FakeSession, make_record


def test_read_identifiers_skips_blank_lines(tmp_path):
    path = tmp_path / "indexes.txt"
    path.write_text("1\n\n  2  \n\t\n3\r\n")

    assert read_identifiers(str(path)) == ["1", "2", "3"]


@pytest.mark.asyncio
async def test_map_bounded_keeps_order_and_limit():
    running = 0
    peak = 0

    async def work(item):
        nonlocal running, peak
        running += 1
        peak = max(peak, running)
        await asyncio.sleep(0)
        running -= 1
        return item * 2

    assert await map_bounded([3, 1, 2], work, workers=1) == [6, 2, 4]
    assert peak == 1

    peak = 0
    assert await map_bounded(list(range(10)), work, workers=3) == [i * 2 for i in range(10)]
    assert peak <= 3


@pytest.mark.asyncio
async def test_map_bounded_empty():
    async def work(item):
        return item

    assert await map_bounded([], work, workers=4) == []


def _api():
    return FakeBeaconchainAPI({
        "1": [
            make_record(validator_index=1, epoch=10, attester_slot=320, status=0),
            make_record(validator_index=1, epoch=11, attester_slot=352, inclusion_slot=355),
            make_record(validator_index=1, epoch=12, attester_slot=384),
        ],
        "2": [
            make_record(validator_index=2, epoch=10, attester_slot=321, status=0),
            make_record(validator_index=2, epoch=11, attester_slot=353),
        ],
    }, missed_slots=[321], failing=["3"])


@pytest.mark.asyncio
async def test_survey_aggregates_and_skips_failures():
    api = _api()
    runner = BatchRunner(AttestationClassifier(api, late_threshold=1))

    report = await runner.run_survey(["1", "3", "2"])

    assert api.validator_calls == ["1", "3", "2"]
    assert report.total_attestations == 5
    assert report.processed_validators == 2
    assert report.skipped_validators == 1
    assert [(a.validator_index, a.epoch) for a in report.missed_attestations] == [(1, 10), (2, 10)]
    assert [(a.validator_index, a.epoch) for a in report.late_attestations] == [(1, 11)]
    assert report.missed_with_missed_block == 1
    assert report.late_with_missed_block == 0


@pytest.mark.asyncio
async def test_epoch_run_concatenates_included_attestations():
    runner = BatchRunner(AttestationClassifier(_api()))

    attestations = await runner.run_epoch(["1", "2", "3"], 11)

    assert [(a.validator_index, a.epoch) for a in attestations] == [(1, 11), (2, 11)]


def _explorer_runner(responses):
    session = FakeSession(responses)
    api = BeaconchainAPI(RateLimitedFetcher(session=session), base_url="https://explorer.test", api_key="")
    return BatchRunner(AttestationClassifier(api, late_threshold=1)), session


@pytest.mark.asyncio
async def test_survey_skips_validator_answered_with_error_body():
    runner, _ = _explorer_runner([(200, {"status": "ERROR: invalid validator index", "data": None})])

    report = await runner.run_survey(["999999999"])

    assert (report.processed_validators, report.skipped_validators) == (0, 1)
    assert report.total_attestations == 0


@pytest.mark.asyncio
async def test_survey_continues_after_malformed_record():
    on_time = {"validatorindex": 2, "epoch": 10, "attesterslot": 320, "inclusionslot": 321, "status": 1}
    runner, session = _explorer_runner([
        (200, {"status": "OK", "data": [dict(on_time, validatorindex=1, inclusionslot=None)]}),
        (200, {"status": "OK", "data": [on_time]}),
    ])

    report = await runner.run_survey(["1", "2"])

    assert len(session.calls) == 2
    assert (report.processed_validators, report.skipped_validators) == (1, 1)
    assert report.total_attestations == 1
