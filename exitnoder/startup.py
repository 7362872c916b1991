"""Start at login through a per-user Launch Agent."""

import logging
import os
import subprocess
import sys
from pathlib import Path

from . import BUNDLE_ID

logger = logging.getLogger(__name__)

LAUNCHAGENT_PLIST = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" "http://www.apple.com/DTDs/PropertyList-1.0.dtd">
<plist version="1.0">
<dict>
    <key>Label</key>
    <string>{label}</string>
    <key>ProgramArguments</key>
    <array>
{arguments}
    </array>
    <key>RunAtLoad</key>
    <true/>
    <key>KeepAlive</key>
    <false/>
</dict>
</plist>
"""


class StartupManager:
    """Manage macOS startup via Launch Agents."""

    LAUNCHAGENTS_DIR = Path.home() / "Library" / "LaunchAgents"

    @classmethod
    def get_launchagent_path(cls) -> Path:
        return cls.LAUNCHAGENTS_DIR / f"{BUNDLE_ID}.plist"

    @staticmethod
    def get_program_arguments() -> list:
        """Command launchd should run at login."""
        if getattr(sys, "frozen", False):
            # Bundled app: .../ExitNoder.app/Contents/MacOS/ExitNoder
            app_path = Path(sys.executable).parent.parent.parent
            return ["/usr/bin/open", "-a", str(app_path)]
        main_script = Path(__file__).resolve().parent.parent / "main_macos.py"
        return [sys.executable, os.path.abspath(main_script)]

    @classmethod
    def render_plist(cls) -> str:
        arguments = "\n".join(
            f"        <string>{arg}</string>" for arg in cls.get_program_arguments()
        )
        return LAUNCHAGENT_PLIST.format(label=BUNDLE_ID, arguments=arguments)

    @classmethod
    def is_enabled(cls) -> bool:
        return cls.get_launchagent_path().exists()

    @classmethod
    def enable(cls) -> bool:
        """Enable startup with macOS login."""
        try:
            plist_path = cls.get_launchagent_path()
            plist_path.parent.mkdir(parents=True, exist_ok=True)
            with open(plist_path, "w") as f:
                f.write(cls.render_plist())

            subprocess.run(["launchctl", "load", str(plist_path)], check=False)
            logger.info("Start at login enabled (%s)", plist_path)
            return True
        except OSError as e:
            logger.error("Failed to enable startup: %s", e)
            return False

    @classmethod
    def disable(cls) -> bool:
        """Disable startup with macOS login."""
        try:
            plist_path = cls.get_launchagent_path()
            if plist_path.exists():
                subprocess.run(["launchctl", "unload", str(plist_path)], check=False)
                plist_path.unlink()
            logger.info("Start at login disabled")
            return True
        except OSError as e:
            logger.error("Failed to disable startup: %s", e)
            return False
