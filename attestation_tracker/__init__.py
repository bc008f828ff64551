"""Attestation tracker - missed and late attestation reports from beaconcha.in."""

__version__ = "0.1.0"
