"""
Configuration loading.

Settings live in a small JSON file. Every key is optional; a missing file
means the defaults below are used.
"""

import json
import logging
import sys
from pathlib import Path

from . import APP_NAME

logger = logging.getLogger(__name__)

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / APP_NAME

# macOS default Tailscale path (standalone / App Store app bundle)
MACOS_TAILSCALE = "/Applications/Tailscale.app/Contents/MacOS/Tailscale"

DEFAULT_REFRESH_INTERVAL = 30


def default_tailscale_exe() -> str:
    if Path(MACOS_TAILSCALE).exists():
        return MACOS_TAILSCALE
    # CLI version from PATH
    return "tailscale"


def default_config_paths() -> list:
    """Candidate config files, highest priority first."""
    paths = [Path.home() / ".config" / APP_NAME.lower() / "config.json"]

    if getattr(sys, "frozen", False):
        # Running as bundled app
        resources = Path(sys.executable).parent.parent / "Resources"
        paths.append(resources / "config.json")
        paths.append(Path(sys.executable).parent / "config.json")
    else:
        paths.append(Path(__file__).parent.parent / "config.json")

    return paths


class Config:
    """Load and manage configuration."""

    def __init__(self, config_paths=None):
        if config_paths is None:
            config_paths = default_config_paths()

        self.config_path: Path | None = None
        self.valid = True

        data = {}
        for p in config_paths:
            p = Path(p)
            if p.exists():
                self.config_path = p
                break

        if self.config_path is None:
            logger.info("No config file found, using defaults. Searched: %s",
                        ", ".join(str(p) for p in config_paths))
        else:
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    raise ValueError("top level must be an object")
                logger.info("Loaded config from %s", self.config_path)
            except (OSError, ValueError) as e:
                logger.error("Failed to parse config %s: %s", self.config_path, e)
                data = {}
                self.valid = False

        self.tailscale_exe: str = data.get("tailscale_exe") or default_tailscale_exe()
        self.favorites_file = Path(
            data.get("favorites_file") or APP_SUPPORT_DIR / "favorites.json"
        ).expanduser()
        self.icon_dir = APP_SUPPORT_DIR
        self.log_level = data.get("log_level", "INFO")
        self.notifications: bool = bool(data.get("notifications", True))

        try:
            self.refresh_interval = int(data.get("refresh_interval", DEFAULT_REFRESH_INTERVAL))
        except (TypeError, ValueError):
            logger.warning("Invalid refresh_interval %r, using %d",
                           data.get("refresh_interval"), DEFAULT_REFRESH_INTERVAL)
            self.refresh_interval = DEFAULT_REFRESH_INTERVAL
        if self.refresh_interval <= 0:
            self.refresh_interval = DEFAULT_REFRESH_INTERVAL
