"""
Logger setup for the pose_factors package.
"""
import logging
from pathlib import Path
from typing import Optional, Union

_ROOT_LOGGER_NAME = "pose_factors"
_CONSOLE_FORMAT = "%(levelname)s: %(message)s"
_FILE_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger with the given name.

    Loggers inside the package share the ``pose_factors`` parent, which gets a
    single console handler (WARNING and up) the first time a logger is asked for.
    """
    root = logging.getLogger(_ROOT_LOGGER_NAME)
    if not root.handlers:  # avoid duplicate handlers on reload
        root.setLevel(logging.DEBUG)
        ch = logging.StreamHandler()
        ch.setLevel(logging.WARNING)
        ch.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
        root.addHandler(ch)

    return logging.getLogger(name)


def configure_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Set the console level and optionally add a DEBUG file handler.

    Args:
        level: console log level (name or number)
        log_file: path of a log file; parent directories are created

    Returns:
        the package root logger
    """
    root = get_logger(_ROOT_LOGGER_NAME)
    if isinstance(level, str):
        level_value = logging.getLevelName(level.upper())
        if not isinstance(level_value, int):
            raise ValueError(f"Unknown log level: {level}")
        level = level_value

    for handler in root.handlers:
        if not isinstance(handler, logging.FileHandler):
            handler.setLevel(level)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        already_attached = any(
            isinstance(h, logging.FileHandler)
            and Path(h.baseFilename) == log_path.resolve()
            for h in root.handlers
        )
        if not already_attached:
            fh = logging.FileHandler(log_path)
            fh.setLevel(logging.DEBUG)
            fh.setFormatter(logging.Formatter(_FILE_FORMAT))
            root.addHandler(fh)

    return root
