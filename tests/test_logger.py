from attestation_tracker.utils.logger import console_renderer


def test_console_renderer_leads_with_validator_index():
    line = console_renderer(None, "info", {
        "timestamp": "2024-01-01 00:00:00", "level": "warning", "event": "Skipping validator",
        "status": 500, "validator_index": "42",
    })

    assert line == "2024-01-01 00:00:00 [WARNING] Skipping validator | validator_index=42 status=500"


def test_console_renderer_without_context():
    assert console_renderer(None, "info", {"timestamp": "t", "level": "info", "event": "done"}) == "t [INFO ] done"
