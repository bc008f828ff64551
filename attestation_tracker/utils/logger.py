import structlog
import logging
import os
from attestation_tracker.config import config

def setup_logger():
    """Configure structlog on top of stdlib logging; JSON lines when FORCE_JSON_LOGS=true."""
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format="%(message)s"
    )
    
    if os.getenv("FORCE_JSON_LOGS", "false").lower() == "true":
        renderer = structlog.processors.JSONRenderer()
        timestamper = structlog.processors.TimeStamper(fmt="iso")
    else:
        renderer = console_renderer
        timestamper = structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S")
    
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            timestamper,
            renderer
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

def console_renderer(logger, method_name, event_dict):
    """Render as `timestamp [LEVEL] event | validator_index=... key=value`."""
    timestamp = event_dict.pop("timestamp", "")
    level = event_dict.pop("level", "info").upper()
    event = event_dict.pop("event", "")
    
    msg = f"{timestamp} [{level:<5}] {event}"
    
    # the validator being processed leads, everything else in call order
    context = []
    if "validator_index" in event_dict:
        context.append(f"validator_index={event_dict.pop('validator_index')}")
    context.extend(f"{k}={v}" for k, v in event_dict.items())
    
    if context:
        msg += f" | {' '.join(context)}"
    return msg

logger = structlog.get_logger()
