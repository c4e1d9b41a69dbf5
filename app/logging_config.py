"""Process-wide logging setup."""

import logging


def setup_logging(level_name: str = "INFO") -> None:
    """Configure the root logger with a single console handler.

    Safe to call more than once: existing root handlers are replaced.
    """
    level = getattr(logging, level_name.upper(), logging.INFO)
    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    root = logging.getLogger()
    root.setLevel(level)
    for h in root.handlers[:]:
        root.removeHandler(h)
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(formatter)
    root.addHandler(handler)
    # httpx logs every request at INFO, including token endpoints
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
