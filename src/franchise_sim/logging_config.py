from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

LOG_LEVEL_ENV = "FRANCHISE_SIM_LOG_LEVEL"
LOG_DIR_ENV = "FRANCHISE_SIM_LOG_DIR"
LOG_FILENAME = "franchise_sim.log"


def setup_logging(log_level: str | None = None, log_dir: str | Path | None = None) -> None:
    """Configure root logging for the simulation core.

    Falls back to FRANCHISE_SIM_LOG_LEVEL / FRANCHISE_SIM_LOG_DIR when arguments
    are omitted. A rotating file handler is only attached when a log directory is known.
    """
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return  # Already configured

    level_name = (log_level or os.environ.get(LOG_LEVEL_ENV) or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    root_logger.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    directory = log_dir or os.environ.get(LOG_DIR_ENV)
    if directory:
        path = Path(directory)
        path.mkdir(parents=True, exist_ok=True)
        # 5MB max, keep 3 backups
        file_handler = logging.handlers.RotatingFileHandler(
            path / LOG_FILENAME, maxBytes=5 * 1024 * 1024, backupCount=3
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logging.getLogger(__name__).info("Logging initialized (level=%s)", level_name)
