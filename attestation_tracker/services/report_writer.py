import json
import os
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Union

from attestation_tracker.config import config
from attestation_tracker.models.attestation import AttestationRecord
from attestation_tracker.models.report import AggregateReport
from attestation_tracker.utils.logger import logger


def calculate_percentage(numerator: int, denominator: int) -> str:
    """Percentage with two decimals; "0.00" when there is nothing to divide by."""
    if denominator == 0:
        return "0.00"
    return f"{numerator / denominator * 100:.2f}"


def dump_attestations(attestations: Iterable[AttestationRecord], path: str) -> None:
    with open(path, "w", encoding="utf-8") as handle:
        json.dump([a.to_json_dict() for a in attestations], handle, indent=2)


def read_attestations(path: str) -> List[AttestationRecord]:
    """Load a JSON array written by `dump_attestations`."""
    with open(path, "r", encoding="utf-8") as handle:
        return [AttestationRecord.from_api_response(a) for a in json.load(handle)]


def create_markdown_table(attestations: List[AttestationRecord]) -> str:
    md = "| Validator Index | Attester Slot | Inclusion Slot | Block Missed (N + 1) |\n"
    md += "| --------------- | ------------- | -------------- | --------------------- |\n"

    for a in attestations:
        if a.inclusion_slot != 0:
            inclusion = f"{a.inclusion_slot} ({a.inclusion_slot - a.attester_slot - 1})"
        else:
            inclusion = "null"
        block_missed = "true" if a.block_missed else "false"
        md += f"| {a.validator_index} | {a.attester_slot} | {inclusion} | {block_missed} |\n"

    if not attestations:
        md += "| - | - | - | - |\n"

    return md


def render_summary_markdown(report: AggregateReport,
                            late_threshold: int = config.LATE_ATTESTATION_INCLUSION_DELAY) -> str:
    total = report.total_attestations
    missed = len(report.missed_attestations)
    late = len(report.late_attestations)
    missed_block = report.missed_with_missed_block
    late_block = report.late_with_missed_block

    md = "# Summary\n\n"
    md += "Missed and late attestations during last 100 epochs\n\n"
    md += "| Metric                                        | Count | Percentage |\n"
    md += "| --------------------------------------------- | ----- | ---------- |\n"
    md += f"| Total Attestations                            | {total} | 100% |\n"
    md += f"| Missed Attestations Total                     | {missed} | {calculate_percentage(missed, total)}% |\n"
    md += f"| Missed Attestations with Missed Block (N + 1) | {missed_block} | {calculate_percentage(missed_block, total)}% |\n"
    md += f"| Late Attestations Total (incl. delay >= {late_threshold})    | {late} | {calculate_percentage(late, total)}% |\n"
    md += f"| Late Attestations with Missed Block (N + 1)   | {late_block} | {calculate_percentage(late_block, total)}% |\n"

    md += "\n## Missed Attestations\n\n"
    md += create_markdown_table(report.missed_attestations)

    md += "\n## Late Attestations\n\n"
    md += create_markdown_table(report.late_attestations)

    return md


class ReportWriter:
    """Writes run artifacts below the output directory."""

    def __init__(self, output_dir: str = None):
        self.output_dir = output_dir or config.OUTPUT_DIR

    def write_epoch_report(self, attestations: List[AttestationRecord], epoch: int) -> str:
        directory = os.path.join(self.output_dir, f"attestations-epoch-{epoch}")
        os.makedirs(directory, exist_ok=True)

        dump_attestations(attestations, os.path.join(directory, "attestations.json"))
        logger.info("Process finished. Check the output directory for results", directory=directory)
        return directory

    def write_survey_report(self, report: AggregateReport, run_time: Optional[datetime] = None) -> str:
        run_time = run_time or datetime.now(timezone.utc)
        directory = os.path.join(self.output_dir, run_time.strftime("%Y-%m-%dT%H-%M-%S"))
        os.makedirs(directory, exist_ok=True)

        dump_attestations(report.late_attestations, os.path.join(directory, "late_attestations.json"))
        dump_attestations(report.missed_attestations, os.path.join(directory, "missed_attestations.json"))
        with open(os.path.join(directory, "summary.md"), "w", encoding="utf-8") as handle:
            handle.write(render_summary_markdown(report))

        logger.info("Process finished. Check the output directory for results", directory=directory)
        return directory

    @staticmethod
    def write_index_list(indexes: Iterable[Union[int, str]], path: str) -> str:
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, "w", encoding="utf-8") as handle:
            for index in indexes:
                handle.write(f"{index}\n")
        logger.info("Validator indexes saved", path=path)
        return path
