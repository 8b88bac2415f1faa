"""
Tests for the structured logger.
"""
import json

import pytest

from moodtune.utils.logging import get_logger, redact_secrets


def lines(capsys):
    return [json.loads(line) for line in capsys.readouterr().out.splitlines() if line]


def test_json_entries_carry_extra_fields(capsys):
    logger = get_logger("moodtune.test.fields")
    logger.info("Mood stored", mood_id="m1")

    entry = lines(capsys)[-1]
    assert entry["message"] == "Mood stored"
    assert entry["level"] == "INFO"
    assert entry["mood_id"] == "m1"


def test_operation_context_logs_start_and_completion(capsys):
    logger = get_logger("moodtune.test.ops")
    with logger.operation_context("PlaylistGenerator", "generate", mood_id="m1") as log:
        log.metric("playlist_tracks", 5)

    entries = lines(capsys)
    assert [e.get("operation_status") for e in entries] == ["started", None, "completed"]
    assert entries[0]["context"]["metadata"] == {"mood_id": "m1"}
    assert entries[1]["metric_value"] == 5
    assert entries[2]["duration_seconds"] >= 0


def test_operation_context_logs_failure_and_reraises(capsys):
    logger = get_logger("moodtune.test.fail")
    with pytest.raises(RuntimeError):
        with logger.operation_context("ClassificationAdapter", "analyze"):
            raise RuntimeError("classifier down")

    failed = lines(capsys)[-1]
    assert failed["operation_status"] == "failed"
    assert failed["error_type"] == "RuntimeError"
    assert failed["exception"]["message"] == "classifier down"


def test_redact_secrets_is_recursive():
    config = {
        'classifier': {'api_url': 'https://hf', 'api_key': 'hf_secret'},
        'track_search': {'client_id': 'cid', 'client_secret': 'shh'},
        'storage': {'path': 'x.json'}
    }
    redacted = redact_secrets(config)
    assert redacted['classifier'] == {'api_url': 'https://hf', 'api_key': '***REDACTED***'}
    assert redacted['track_search']['client_secret'] == '***REDACTED***'
    assert redacted['track_search']['client_id'] == 'cid'
    assert redacted['storage'] == {'path': 'x.json'}
    assert config['classifier']['api_key'] == 'hf_secret'
