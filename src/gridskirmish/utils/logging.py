import logging
import os
import sys


def configure_logging(level: int = logging.INFO) -> None:
    """Configure the root logger with a single stdout handler.

    Respects GS_LOG_LEVEL env var if present.
    """
    level_name = os.getenv("GS_LOG_LEVEL")
    if level_name:
        level = getattr(logging, level_name.upper(), level)

    handler = logging.StreamHandler(stream=sys.stdout)
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    # Replace handlers installed by an earlier call
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
