import logging
import os
import sys

# Constants
LOG_DIR = "logs"
LOG_FILE_NAME = "app.log"
LOG_FORMAT = "[%(asctime)s] | %(levelname)-8s | %(name)-15s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(name: str = "wellness_engine", log_dir: str = LOG_DIR,
                 level: int = logging.INFO) -> logging.Logger:
    """
    Configures and returns the engine logger.

    Features:
    - Console Output (StreamHandler)
    - File Output, overwritten on each new run
    - Standardized Formatting

    Args:
        name: Logger name. Child loggers (``wellness_engine.core...``)
            propagate into it.
        log_dir: Directory for the log file.
        level: Minimum level for both handlers.

    Returns:
        Configured Logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid duplicate handlers if setup is called multiple times
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    # 1. Console Handler
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    # 2. File Handler, mode 'w' keeps only the current execution
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(
            os.path.join(log_dir, LOG_FILE_NAME), mode='w', encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    return setup_logger(name)
