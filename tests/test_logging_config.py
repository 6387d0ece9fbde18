"""
Test logging setup.
"""

import logging
import os

from logging_config import setup_logging


def test_setup_logging_creates_log_file(tmp_path):
    log_dir = tmp_path / "logs"
    root = logging.getLogger()
    previous_handlers = root.handlers[:]
    previous_level = root.level
    for handler in previous_handlers:
        root.removeHandler(handler)
    try:
        logger = setup_logging(str(log_dir), "DEBUG")
        logger.info("hello")

        files = os.listdir(log_dir)
        assert len(files) == 1
        assert files[0].startswith("table_grapher_")
        assert root.level == logging.DEBUG
    finally:
        for handler in root.handlers[:]:
            handler.close()
            root.removeHandler(handler)
        root.setLevel(previous_level)
        for handler in previous_handlers:
            root.addHandler(handler)
