"""Logging setup shared by the menu-bar app and the entry script."""

import logging
import sys
from pathlib import Path

from . import APP_NAME

LOG_DIR = Path.home() / "Library" / "Logs" / APP_NAME
LOG_FILE = LOG_DIR / "app.log"


def setup_logging(filename=LOG_FILE, name="App", level=logging.INFO):
    """Log to `filename` and to stdout, replacing any handlers already set."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    filename = Path(filename)
    try:
        filename.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        pass

    fmt = f"%(asctime)s [{name}] %(message)s"
    try:
        logging.basicConfig(
            filename=str(filename),
            level=level,
            format=fmt,
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    except OSError:
        # Unwritable log dir, keep the console handler only
        root.setLevel(level)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(fmt))
    root.addHandler(console)


def parse_level(value) -> int:
    """Map a config value like "debug" or 10 to a logging level."""
    if isinstance(value, int):
        return value
    level = logging.getLevelName(str(value).upper())
    return level if isinstance(level, int) else logging.INFO
