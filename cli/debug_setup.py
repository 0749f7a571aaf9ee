"""Logging setup for CLI"""

import logging
import os

from settings import LOG_LEVEL

DEBUG_LOG_FILE = "x_sheet_poster_debug.log"


def setup_logging(debug: bool = False) -> None:
    """
    Configure root logging for a CLI run

    Args:
        debug: Log at DEBUG to the console and append to the debug log file
    """
    if not debug:
        logging.basicConfig(
            level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        )
        return

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Clear existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    log_file = os.path.abspath(DEBUG_LOG_FILE)
    file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG)

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    # httpx logs every request at INFO; keep it unless debugging the wire
    logging.getLogger("httpcore").setLevel(logging.INFO)

    logging.getLogger(__name__).info(f"Debug logging enabled - appending to {log_file}")
