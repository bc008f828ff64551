import asyncio
import argparse
import sys
from typing import List, Optional

from attestation_tracker.services.batch_runner import BatchRunner, read_identifiers
from attestation_tracker.services.beacon_node_api import BeaconNodeAPI
from attestation_tracker.services.beaconchain_api import BeaconchainAPI
from attestation_tracker.services.classifier import AttestationClassifier
from attestation_tracker.services.fetcher import RateLimitedFetcher
from attestation_tracker.services.pubkey_resolver import PubkeyResolver
from attestation_tracker.services.report_writer import ReportWriter
from attestation_tracker.utils.logger import setup_logger, logger

def create_parser():
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(description="Validator attestation tracker")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    
    # Included attestations of one epoch
    epoch_parser = subparsers.add_parser("epoch", help="Collect included attestations of an epoch")
    epoch_parser.add_argument("validator_index_file", help="File with one validator index per line")
    epoch_parser.add_argument("epoch", type=int, help="Epoch to collect")
    
    # Missed and late survey
    survey_parser = subparsers.add_parser("survey", help="Report missed and late attestations")
    survey_parser.add_argument("validator_index_file", help="File with one validator index per line")
    
    # Pubkeys -> indexes
    resolve_parser = subparsers.add_parser("resolve", help="Resolve public keys to validator indexes")
    resolve_parser.add_argument("pubkey_file", help="File with one public key per line")
    resolve_parser.add_argument("output_file", nargs="?", default=None,
                                help="Output file (default: <OUTPUT_DIR>/validator_indexes.txt)")
    
    return parser

async def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    setup_logger()
    parser = create_parser()
    args = parser.parse_args(argv)
    
    if not args.command:
        parser.print_help()
        return
    
    try:
        if args.command == "epoch":
            await handle_epoch_command(args)
        elif args.command == "survey":
            await handle_survey_command(args)
        elif args.command == "resolve":
            await handle_resolve_command(args)
        else:
            parser.print_help()
    
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    except Exception as e:
        logger.error("Application error", error=str(e))
        raise

async def handle_epoch_command(args):
    """Handle epoch command."""
    identifiers = read_identifiers(args.validator_index_file)
    
    async with RateLimitedFetcher() as fetcher:
        runner = BatchRunner(AttestationClassifier(BeaconchainAPI(fetcher)))
        attestations = await runner.run_epoch(identifiers, args.epoch)
    
    ReportWriter().write_epoch_report(attestations, args.epoch)

async def handle_survey_command(args):
    """Handle survey command."""
    identifiers = read_identifiers(args.validator_index_file)
    
    async with RateLimitedFetcher() as fetcher:
        runner = BatchRunner(AttestationClassifier(BeaconchainAPI(fetcher)))
        report = await runner.run_survey(identifiers)
    
    ReportWriter().write_survey_report(report)

async def handle_resolve_command(args):
    """Handle resolve command."""
    async with RateLimitedFetcher() as fetcher:
        resolver = PubkeyResolver(BeaconNodeAPI(fetcher))
        await resolver.resolve_file(args.pubkey_file, args.output_file)

def _run(command: str):
    asyncio.run(main([command, *sys.argv[1:]]))

def epoch_entry():
    """attestations-of-epoch <validatorIndexFile> <epoch>"""
    _run("epoch")

def survey_entry():
    """missed-late-attestations <validatorIndexFile>"""
    _run("survey")

def resolve_entry():
    """pubkeys-to-indexes <pubkeyFile> [outputFile]"""
    _run("resolve")
