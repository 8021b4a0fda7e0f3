import logging
import os
import sys
from datetime import datetime

from .diff_display import describe_patch, format_colored_diff


def setup_logger(log_dir: str = ".draftpatch/logs") -> logging.Logger:
    """Creates a file logger. All verbose output goes here."""
    os.makedirs(log_dir, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = os.path.join(log_dir, f"draftpatch_{timestamp}.log")

    logger = logging.getLogger("draftpatch")
    logger.setLevel(logging.DEBUG)

    # File handler — captures everything
    fh = logging.FileHandler(log_file, encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(message)s", datefmt="%H:%M:%S"
    ))
    logger.addHandler(fh)

    return logger


def close_file_handlers(logger: logging.Logger) -> None:
    """Detach and close the file handlers added by setup_logger."""
    for handler in list(logger.handlers):
        if isinstance(handler, logging.FileHandler):
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(logging.NOTSET)


def show_patch(patch_text: str, color: bool = True) -> None:
    """Print the hunk label followed by the (optionally colored) patch."""
    print(describe_patch(patch_text))
    print("─" * 60)
    print(format_colored_diff(patch_text) if color else patch_text)


def show_error(message: str) -> None:
    print(f"error: {message}", file=sys.stderr)
