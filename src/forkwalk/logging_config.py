# Licensed under the Apache License, Version 2.0
import logging
import os

LOG_LEVEL_ENV = "FORKWALK_LOG_LEVEL"

def setup_logging(verbose: bool = False) -> None:
    level_name = "DEBUG" if verbose else os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    # threadName tells which pool worker ran a task
    fmt = "%(asctime)s %(levelname)s %(threadName)s %(name)s: %(message)s"
    logging.basicConfig(level=level, format=fmt)
    logging.getLogger().setLevel(level)
