"""
Configuration loader.
Reads settings from a .env file (if any) and the environment.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

PROJECT_ROOT = Path(__file__).resolve().parents[1]

LOG_LEVEL = os.getenv("BOOKSTORE_LOG_LEVEL", "INFO")

# How many published events the bus remembers
EVENT_HISTORY_LIMIT = int(os.getenv("BOOKSTORE_EVENT_HISTORY_LIMIT", "1000"))

SEED_FILE = Path(os.getenv("BOOKSTORE_SEED_FILE", str(PROJECT_ROOT / "data" / "seed.json")))

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Set up root logging for scripts; library modules only create loggers."""
    logging.basicConfig(level=(level or LOG_LEVEL).upper(), format=LOG_FORMAT)
