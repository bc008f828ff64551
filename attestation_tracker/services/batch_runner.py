import asyncio
from typing import Any, Awaitable, Callable, List, Sequence

from attestation_tracker.config import config
from attestation_tracker.models.attestation import AttestationRecord
from attestation_tracker.models.report import AggregateReport
from attestation_tracker.services.classifier import AttestationClassifier
from attestation_tracker.utils.logger import logger


def read_identifiers(path: str) -> List[str]:
    """Read one validator identifier per line, skipping blank lines."""
    with open(path, "r", encoding="utf-8") as handle:
        return [line.strip() for line in handle if line.strip()]


async def map_bounded(items: Sequence[Any], fn: Callable[[Any], Awaitable[Any]], workers: int = 1) -> List[Any]:
    """
    Apply `fn` to every item with at most `workers` calls running at once.

    Results are returned in input order. With a single worker the next item is
    not started before the previous one has finished.
    """
    results: List[Any] = [None] * len(items)
    queue: asyncio.Queue = asyncio.Queue()
    for position, item in enumerate(items):
        queue.put_nowait((position, item))

    async def worker():
        while True:
            try:
                position, item = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            results[position] = await fn(item)

    worker_count = max(1, min(workers, len(items)))
    await asyncio.gather(*(worker() for _ in range(worker_count)))
    return results


class BatchRunner:
    """Runs the classifier over a list of validators and folds the results."""

    def __init__(self, classifier: AttestationClassifier, workers: int = config.WORKERS):
        self.classifier = classifier
        self.workers = workers

    async def run_epoch(self, identifiers: Sequence[str], epoch: int) -> List[AttestationRecord]:
        """Collect the included attestations of `epoch` for every validator."""
        results = await map_bounded(identifiers, lambda i: self.classifier.classify(i, epoch), self.workers)

        attestations = []
        for identifier, records in zip(identifiers, results):
            if records is None:
                logger.warning("Skipping validator", validator_index=identifier)
                continue
            attestations.extend(records)
        return attestations

    async def run_survey(self, identifiers: Sequence[str]) -> AggregateReport:
        """Collect missed and late attestations for every validator."""
        results = await map_bounded(identifiers, self.classifier.classify, self.workers)

        report = AggregateReport()
        for identifier, result in zip(identifiers, results):
            if result is None:
                logger.warning("Skipping validator", validator_index=identifier)
                report.skipped_validators += 1
                continue
            report.add(result)

        logger.info("Survey finished",
                    validators=report.processed_validators,
                    skipped=report.skipped_validators,
                    total=report.total_attestations,
                    missed=len(report.missed_attestations),
                    late=len(report.late_attestations))
        return report
