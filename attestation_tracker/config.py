import os
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

class Config:
    # beaconcha.in explorer
    BEACONCHAIN_API_URL = os.getenv("BEACONCHAIN_API_URL", "https://beaconcha.in")
    BEACONCHAIN_API_KEY = os.getenv("BEACONCHAIN_API_KEY", "")
    
    # Beacon node (pubkey -> index resolution)
    BEACON_NODE_URL = os.getenv("BEACON_NODE_URL", "https://lodestar-mainnet.chainsafe.io")
    
    # Fetcher
    MAX_CONCURRENT_REQUESTS = int(os.getenv("MAX_CONCURRENT_REQUESTS", "1"))
    RETRY_DELAY = float(os.getenv("RETRY_DELAY", "30"))
    # Retries after HTTP 429; 0 means retry throttled requests forever
    MAX_RETRY_ATTEMPTS: Optional[int] = int(os.getenv("MAX_RETRY_ATTEMPTS", "0")) or None
    REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", "600"))
    
    # Classification
    LATE_ATTESTATION_INCLUSION_DELAY = int(os.getenv("LATE_ATTESTATION_INCLUSION_DELAY", "1"))
    SLOT_ERROR_AS_MISSED = os.getenv("SLOT_ERROR_AS_MISSED", "true").lower() == "true"
    
    # Batch
    WORKERS = int(os.getenv("WORKERS", "1"))
    OUTPUT_DIR = os.getenv("OUTPUT_DIR", "./data")
    
    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

config = Config()
