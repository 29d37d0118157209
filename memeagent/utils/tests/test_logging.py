import json
import sys

from loguru import logger

from memeagent.utils.logging import setup_logging
from memeagent.utils.uuid import generate_uuid


def test_setup_logging_writes_json_files(tmp_path):
    log_dir = tmp_path / "logs"
    setup_logging("INFO", log_dir)
    try:
        logger.info("cycle started")
        logger.error("venue failed for {}", "FOO")
        logger.complete()
    finally:
        logger.remove()
        logger.add(sys.stderr)

    combined = (log_dir / "combined.log").read_text().splitlines()
    errors = (log_dir / "error.log").read_text().splitlines()

    assert [json.loads(line)["record"]["message"] for line in combined] == [
        "cycle started",
        "venue failed for FOO",
    ]
    assert [json.loads(line)["record"]["level"]["name"] for line in errors] == ["ERROR"]


def test_generate_uuid():
    assert generate_uuid("cycle").startswith("cycle-")
    assert generate_uuid() != generate_uuid()
