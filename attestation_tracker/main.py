#!/usr/bin/env python3
"""
Attestation Tracker
Missed, late and per-epoch attestation reports for a list of validators.
"""
import asyncio
from attestation_tracker.cli import main

def run():
    asyncio.run(main())

if __name__ == "__main__":
    run()
